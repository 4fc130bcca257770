"""
Console email sender adapter - Implements NotificationSender protocol.

This module provides a console-based implementation of the domain's
notification port, logging activation and reset tokens for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements NotificationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints tokens to stdout.
    """

    def send_activation(self, email: str, login: str, token: str) -> None:
        """
        Log activation token to console (simulates email delivery).

        In production, this would be replaced with an SMTP adapter.
        Logged at INFO level to be visible in docker-compose logs.

        Args:
            email: Recipient email address (normalized by domain layer)
            login: Account login
            token: Activation token
        """
        logger.info("[ACTIVATION] Email: %s Login: %s Token: %s", email, login, token)

    def send_password_reset(self, email: str, reset_token: str) -> None:
        """
        Log password-reset token to console (simulates email delivery).

        Args:
            email: Recipient email address
            reset_token: Signed reset token
        """
        logger.info("[PASSWORD RESET] Email: %s Token: %s", email, reset_token)
