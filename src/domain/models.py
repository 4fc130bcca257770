"""
Domain models - Records, principals and operation results.

This module defines the value types shared by the lifecycle service,
its ports and the adapters. They carry no behaviour beyond construction.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class AccountCandidate:
    """Credentials submitted by a caller for registration or login."""

    login: str
    password: str
    email: str | None = None


@dataclass(frozen=True)
class Account:
    """A registered account as persisted by the account store."""

    id: UUID
    login: str
    email: str
    password_hash: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ActivationRecord:
    """
    Activation state of exactly one account.

    The token is assigned once at registration and reused for every
    resend. Only activate/deactivate calls flip the activated flag.
    """

    account_id: UUID
    token: str
    activated: bool = False


@dataclass(frozen=True)
class Principal:
    """Verified identity extracted from a signed token."""

    login: str
    account_id: UUID


class TokenPurpose(str, Enum):
    """Audience of a signed token. Session tokens never reset passwords and vice versa."""

    SESSION = "session"
    PASSWORD_RESET = "password_reset"


class Outcome(Enum):
    """
    Discriminator for AccountResult.

    Every lifecycle operation reports exactly one of these.
    """

    SUCCESS = "success"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AccountResult:
    """
    Uniform result of a lifecycle operation.

    Attributes:
        outcome: Which branch the operation took
        message: Human-readable description for the caller
        session_token: Signed session artifact (successful login only)
        clear_session: Caller must discard any held session artifact (logout)
    """

    outcome: Outcome
    message: str
    session_token: str | None = None
    clear_session: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def success(cls, message: str) -> "AccountResult":
        return cls(Outcome.SUCCESS, message)

    @classmethod
    def invalid_input(cls, message: str) -> "AccountResult":
        return cls(Outcome.INVALID_INPUT, message)

    @classmethod
    def conflict(cls, message: str) -> "AccountResult":
        return cls(Outcome.CONFLICT, message)

    @classmethod
    def not_found(cls, message: str) -> "AccountResult":
        return cls(Outcome.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str = "Invalid login or password") -> "AccountResult":
        return cls(Outcome.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str) -> "AccountResult":
        return cls(Outcome.FORBIDDEN, message)
