"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the account lifecycle
service requires from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol
from uuid import UUID

from .models import Account, ActivationRecord, Principal, TokenPurpose


class AccountRepository(Protocol):
    """Port interface for account and activation persistence."""

    def create(self, account: Account, activation: ActivationRecord) -> None:
        """
        Persist an account together with its activation record.

        Both rows are written in a single transaction: either both exist
        afterwards or neither does.

        Args:
            account: Account with hashed password and normalized email
            activation: Fresh activation record (activated=False)

        Raises:
            DuplicateAccount: If login or email (case-insensitive) is taken
        """
        ...

    def find_by_login(self, login: str) -> Account | None:
        """Return the account with this exact login, or None."""
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Return the account with this email (case-insensitive), or None."""
        ...

    def find_activation_by_token(self, token: str) -> ActivationRecord | None:
        """Return the activation record holding this token, or None."""
        ...

    def find_activation_by_account_id(self, account_id: UUID) -> ActivationRecord | None:
        """Return the activation record owned by this account, or None."""
        ...

    def activate_by_token(self, token: str) -> int:
        """
        Conditionally flip activated false -> true.

        The update is keyed on the current state, so concurrent callers
        see exactly one affected row between them.

        Returns:
            Number of records updated (1 on success, 0 otherwise)
        """
        ...

    def deactivate_by_token(self, token: str) -> int:
        """
        Conditionally flip activated true -> false.

        Returns:
            Number of records updated (1 on success, 0 otherwise)
        """
        ...

    def update_password_hash(self, login: str, password_hash: str) -> int:
        """
        Replace the stored password hash of the account with this login.

        Returns:
            Number of records updated
        """
        ...


class NotificationSender(Protocol):
    """Port interface for activation and password-reset delivery."""

    def send_activation(self, email: str, login: str, token: str) -> None:
        """
        Send the activation token to the account's email address.

        Args:
            email: Recipient email address
            login: Account login, for the greeting
            token: Activation token
        """
        ...

    def send_password_reset(self, email: str, reset_token: str) -> None:
        """
        Send a signed password-reset token to the account's email address.

        Args:
            email: Recipient email address
            reset_token: Signed, time-bounded reset token
        """
        ...


class CredentialHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, plaintext: str) -> str:
        """Return an opaque hash of the plaintext secret."""
        ...

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        """
        Check a plaintext secret against a stored hash.

        Passing None (unknown account) must still cost the same as a real
        comparison and always returns False.
        """
        ...


class SessionTokenIssuer(Protocol):
    """Port interface for signed, time-bounded tokens."""

    def issue_session(self, account: Account) -> str:
        """Mint a session token for an activated account."""
        ...

    def issue_reset_token(self, account: Account) -> str:
        """Mint a password-reset token for an account."""
        ...

    def verify(self, token: str, purpose: TokenPurpose = TokenPurpose.SESSION) -> Principal | None:
        """
        Verify signature, expiry and purpose of a token.

        Returns:
            The embedded principal, or None if the token is invalid for
            any reason
        """
        ...
