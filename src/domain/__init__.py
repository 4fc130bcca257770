"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle state machine, credential
validation and the port interfaces it needs from infrastructure, keeping
the core decoupled from HTTP, SQL, email and cryptography libraries.
"""

from .accounts import AccountLifecycleService
from .exceptions import AccountError, DuplicateAccount
from .models import (
    Account,
    AccountCandidate,
    AccountResult,
    ActivationRecord,
    Outcome,
    Principal,
    TokenPurpose,
)
from .ports import AccountRepository, CredentialHasher, NotificationSender, SessionTokenIssuer
from .validation import ValidationResult, validate_credentials, validate_password

__all__ = [
    "Account",
    "AccountCandidate",
    "AccountError",
    "AccountLifecycleService",
    "AccountRepository",
    "AccountResult",
    "ActivationRecord",
    "CredentialHasher",
    "DuplicateAccount",
    "NotificationSender",
    "Outcome",
    "Principal",
    "SessionTokenIssuer",
    "TokenPurpose",
    "ValidationResult",
    "validate_credentials",
    "validate_password",
]
