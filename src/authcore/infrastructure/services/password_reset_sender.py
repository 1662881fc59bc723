"""Password reset delivery.

Delivery of reset links is owned by a separate mail service. This sender
only records the request.
"""

from authcore.core.logging import get_logger

logger = get_logger(__name__)


class PasswordResetSender:
    """Hands password reset requests to the delivery channel."""

    async def send_reset(self, user_id: str, email: str) -> None:
        """Request a password reset message for a user.

        Args:
            user_id: ID of the user requesting the reset.
            email: Address the reset link is sent to.
        """
        # TODO: generate a reset token and hand it to the mail service once
        # the reset-confirmation operation exists.
        logger.info("Password reset requested", user_id=user_id)
