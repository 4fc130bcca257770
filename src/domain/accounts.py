"""
Account lifecycle domain service - Activation state machine and session issuance.

This module contains the core business logic for account management:
registration, activation/deactivation, login/logout, password change and
the two email-driven recovery flows (resend activation, password reset).

Activation State Machine
========================

States (ActivationRecord.activated):
- False: Initial state after registration (login rejected as Forbidden)
- True:  Account activated (login issues a session)

Valid Transitions:
    False -> True   (activate with the account's token)
    True  -> False  (deactivate with the account's token)

Rejected Transitions (reported as CONFLICT, never repeated silently):
    True  -> True   (activate an activated account)
    False -> False  (deactivate a deactivated account)

Note: The service reads the record to produce precise messages, but the
transition itself is a conditional update in the repository keyed on the
current state. The affected-row count is the source of truth: anything
other than 1 is a CONFLICT.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from .exceptions import DuplicateAccount
from .models import (
    Account,
    AccountCandidate,
    AccountResult,
    ActivationRecord,
    Outcome,
    Principal,
)
from .ports import AccountRepository, CredentialHasher, NotificationSender, SessionTokenIssuer
from .validation import validate_credentials, validate_password

logger = logging.getLogger(__name__)

RESEND_ACTIVATION_MESSAGE = "If the account exists, an activation email has been sent"
PASSWORD_RESET_MESSAGE = "If an account with this email exists, a password reset email has been sent"


@dataclass
class AccountLifecycleService:
    """
    Domain service for the account lifecycle.

    Stateless between calls; all durable state lives behind the
    repository port.
    """

    repository: AccountRepository
    notification_sender: NotificationSender
    hasher: CredentialHasher
    token_issuer: SessionTokenIssuer

    def register(self, candidate: AccountCandidate) -> AccountResult:
        """
        Register a new account and send its activation token.

        Uniqueness is checked up front for precise messages; a concurrent
        registration that slips past the checks is caught by the
        repository's unique constraints and reported the same way.

        Args:
            candidate: Login, password and email to register

        Returns:
            SUCCESS, or INVALID_INPUT / CONFLICT
        """
        validation = validate_credentials(candidate, require_email=True)
        if not validation.ok:
            return AccountResult.invalid_input(validation.message)

        if self.repository.find_by_login(candidate.login) is not None:
            return AccountResult.conflict("An account with this login already exists")

        email = self._normalize_email(candidate.email or "")
        if self.repository.find_by_email(email) is not None:
            return AccountResult.conflict("An account with this email already exists")

        account = Account(
            id=uuid4(),
            login=candidate.login,
            email=email,
            password_hash=self.hasher.hash(candidate.password),
            created_at=datetime.now(timezone.utc),
        )
        activation = ActivationRecord(
            account_id=account.id,
            token=self._generate_activation_token(),
            activated=False,
        )

        try:
            self.repository.create(account, activation)
        except DuplicateAccount:
            return AccountResult.conflict("An account with this login or email already exists")

        stored = self.repository.find_activation_by_account_id(account.id)
        if stored is None:
            logger.error("Activation record missing after registration: account_id=%s", account.id)
            return AccountResult.conflict(f"Activation record not found for account {account.id}")

        self.notification_sender.send_activation(account.email, account.login, stored.token)
        logger.info("Account registered: login=%s", account.login)
        return AccountResult.success("Account registered successfully")

    def activate(self, token: str) -> AccountResult:
        """Transition an account's activation record from False to True."""
        return self._transition(token, activate=True)

    def deactivate(self, token: str) -> AccountResult:
        """Transition an account's activation record from True to False."""
        return self._transition(token, activate=False)

    def change_password(self, principal: Principal, new_password: str) -> AccountResult:
        """
        Replace the password of the account identified by the principal.

        Args:
            principal: Verified caller identity (session or reset token)
            new_password: New plaintext password

        Returns:
            SUCCESS, or INVALID_INPUT / CONFLICT
        """
        if not new_password:
            return AccountResult.invalid_input("Password must not be empty")

        violations = validate_password(new_password)
        if violations:
            return AccountResult.invalid_input("; ".join(violations))

        updated = self.repository.update_password_hash(principal.login, self.hasher.hash(new_password))
        if updated != 1:
            logger.warning(
                "Password update affected %d records: login=%s", updated, principal.login
            )
            return AccountResult.conflict("Password was not changed")

        logger.info("Password changed: login=%s", principal.login)
        return AccountResult.success("Password changed successfully")

    def login(self, candidate: AccountCandidate) -> AccountResult:
        """
        Verify credentials and issue a session for an activated account.

        The activation check runs only after the credentials are verified,
        so unauthenticated callers never learn an account's activation state.
        The hasher runs even for unknown logins to keep timing uniform.

        Args:
            candidate: Login and password (email ignored)

        Returns:
            SUCCESS carrying session_token, or INVALID_INPUT /
            UNAUTHORIZED / FORBIDDEN
        """
        validation = validate_credentials(candidate, require_email=False)
        if not validation.ok:
            return AccountResult.invalid_input(validation.message)

        account = self.repository.find_by_login(candidate.login)
        stored_hash = account.password_hash if account is not None else None
        if not self.hasher.verify(candidate.password, stored_hash) or account is None:
            logger.warning("Failed login attempt: login=%s", candidate.login)
            return AccountResult.unauthorized()

        activation = self.repository.find_activation_by_account_id(account.id)
        if activation is None or not activation.activated:
            return AccountResult.forbidden("Account is not activated")

        session_token = self.token_issuer.issue_session(account)
        logger.info("Login succeeded: login=%s", account.login)
        return AccountResult(
            outcome=Outcome.SUCCESS,
            message="Logged in successfully",
            session_token=session_token,
        )

    def logout(self) -> AccountResult:
        """Instruct the caller to discard its session; sessions are stateless."""
        return AccountResult(
            outcome=Outcome.SUCCESS,
            message="Logged out successfully",
            clear_session=True,
        )

    def resend_activation(self, login_or_email: str) -> AccountResult:
        """
        Re-send the existing activation token of a not-yet-activated account.

        Unknown logins/emails get the same SUCCESS as a real resend so the
        endpoint cannot be used to enumerate accounts.

        Args:
            login_or_email: Account login, or its email address

        Returns:
            SUCCESS, or INVALID_INPUT / CONFLICT
        """
        value = (login_or_email or "").strip()
        if not value:
            return AccountResult.invalid_input("Login or email must not be empty")

        account = self.repository.find_by_login(value)
        if account is None:
            account = self.repository.find_by_email(self._normalize_email(value))
        if account is None:
            return AccountResult.success(RESEND_ACTIVATION_MESSAGE)

        activation = self.repository.find_activation_by_account_id(account.id)
        if activation is None:
            logger.error("Activation record missing: account_id=%s", account.id)
            return AccountResult.conflict(f"Activation record not found for account {account.id}")
        if activation.activated:
            return AccountResult.conflict("Account is already activated")

        self.notification_sender.send_activation(account.email, account.login, activation.token)
        return AccountResult.success(RESEND_ACTIVATION_MESSAGE)

    def request_password_reset(self, email: str) -> AccountResult:
        """
        Email a signed reset token if an account has this address.

        The caller receives the same SUCCESS whether or not the email is
        registered; the sender is only contacted when it is.
        """
        value = (email or "").strip()
        if not value:
            return AccountResult.invalid_input("Email must not be empty")

        account = self.repository.find_by_email(self._normalize_email(value))
        if account is not None:
            reset_token = self.token_issuer.issue_reset_token(account)
            self.notification_sender.send_password_reset(account.email, reset_token)

        return AccountResult.success(PASSWORD_RESET_MESSAGE)

    def _transition(self, token: str, activate: bool) -> AccountResult:
        """
        Shared guard sequence for activate/deactivate.

        Args:
            token: Activation token from the email link
            activate: True for False -> True, False for True -> False
        """
        if not token:
            return AccountResult.invalid_input("Activation token must not be empty")

        record = self.repository.find_activation_by_token(token)
        if record is None:
            return AccountResult.not_found("No account found for this activation token")

        state = "activated" if activate else "deactivated"
        if record.activated == activate:
            return AccountResult.conflict(f"Account is already {state}")

        if activate:
            updated = self.repository.activate_by_token(token)
        else:
            updated = self.repository.deactivate_by_token(token)

        verb = "activation" if activate else "deactivation"
        if updated != 1:
            logger.warning(
                "Account %s affected %d records: account_id=%s", verb, updated, record.account_id
            )
            return AccountResult.conflict(f"Account {verb} failed")

        logger.info("Account %s succeeded: account_id=%s", verb, record.account_id)
        return AccountResult.success(f"Account {state} successfully")

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _generate_activation_token(self) -> str:
        """
        Generate an unguessable, URL-safe activation token.

        Uses secrets module for cryptographic randomness.
        """
        return secrets.token_urlsafe(32)
