"""Value objects exchanged by the authentication operations."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ClientMeta:
    """Metadata describing the client a session was opened from.

    Attributes:
        ip_address: Client IP address.
        user_agent: Client user agent string.
        location: Free-form client location.
    """

    ip_address: str = "0.0.0.0"
    user_agent: str = ""
    location: str = ""


@dataclass(frozen=True)
class LoginResult:
    """Tokens handed to the caller after a successful login."""

    user_id: str
    access_token: str
    refresh_token: str
    session_token: str


@dataclass(frozen=True)
class Acknowledgement:
    """Generic success response for signup, logout and forgot-password."""

    message: str
    success: bool = True
    error: bool = False


@dataclass(frozen=True)
class CachedSession:
    """Projection of a live session as mirrored in the cache."""

    id: str
    user_id: str
    ip_address: str
    user_agent: str
    location: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
