"""External service collaborators."""

from authcore.infrastructure.services.password_reset_sender import PasswordResetSender

__all__ = ["PasswordResetSender"]
