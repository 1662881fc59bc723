"""Password hashing using Argon2.

Hash parameters are passed in explicitly through ``PasswordHashConfig``;
the encoded hash embeds them, so verification is self-describing.
"""

import secrets
from dataclasses import dataclass

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from authcore.core.config import Settings

_ARGON2_TYPES = {
    "argon2id": Type.ID,
    "argon2i": Type.I,
    "argon2d": Type.D,
}


@dataclass(frozen=True)
class PasswordHashConfig:
    """Argon2 parameters used for new hashes.

    Attributes:
        type: Argon2 variant name (argon2id, argon2i or argon2d).
        hash_len: Length of the raw hash in bytes.
        time_cost: Number of iterations.
        memory_cost: Memory usage in KiB.
        parallelism: Number of parallel threads.
        salt_len: Length of the random salt in bytes.
    """

    type: str = "argon2id"
    hash_len: int = 64
    time_cost: int = 5
    memory_cost: int = 65536
    parallelism: int = 4
    salt_len: int = 16

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHashConfig":
        return cls(
            type=settings.password_hash_type,
            hash_len=settings.password_hash_length,
            time_cost=settings.password_time_cost,
            memory_cost=settings.password_memory_cost,
            parallelism=settings.password_parallelism,
            salt_len=settings.password_salt_length,
        )


class CredentialVerifier:
    """Hashes and verifies passwords with a fixed set of Argon2 parameters."""

    def __init__(self, config: PasswordHashConfig | None = None) -> None:
        self.config = config or PasswordHashConfig()
        self._hasher = PasswordHasher(
            time_cost=self.config.time_cost,
            memory_cost=self.config.memory_cost,
            parallelism=self.config.parallelism,
            hash_len=self.config.hash_len,
            salt_len=self.config.salt_len,
            type=_ARGON2_TYPES[self.config.type],
        )
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password.

        Args:
            password: The plaintext password to hash.

        Returns:
            The encoded hash, e.g. ``$argon2id$v=19$m=65536,t=5,p=4$...``.
        """
        return self._hasher.hash(password)

    def verify(self, hashed: str, password: str) -> bool:
        """Verify a password against a stored hash.

        Uses the parameters embedded in ``hashed``, not the configured ones.

        Args:
            hashed: The stored encoded hash.
            password: The plaintext password to verify.

        Returns:
            True if the password matches, False on mismatch or an unparsable hash.
        """
        try:
            return self._hasher.verify(hashed, password)
        except (VerificationError, InvalidHashError):
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend the cost of a verification when there is no stored hash.

        Called when the identifier is unknown so that the response time
        does not reveal whether the account exists.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(32))
        self.verify(self._dummy_hash, password)

    def needs_rehash(self, hashed: str) -> bool:
        """Check whether a stored hash was made with different parameters."""
        return self._hasher.check_needs_rehash(hashed)
