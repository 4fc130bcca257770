"""
Credential validation - Structural checks on submitted credentials.

Pure functions with no I/O. Each check appends a human-readable
violation; callers decide whether to surface all of them or just ok/not ok.
"""

import re
from dataclasses import dataclass

from .models import AccountCandidate

LOGIN_PATTERN = re.compile(r"[A-Za-z0-9_.-]{3,32}")
EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt ignores input past 72 bytes
EMAIL_MAX_LENGTH = 254


@dataclass(frozen=True)
class ValidationResult:
    """Aggregated credential violations. Empty means valid."""

    violations: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def message(self) -> str:
        return "; ".join(self.violations)


def validate_password(password: str | None) -> list[str]:
    """Return the password policy violations for a candidate password."""
    if not password:
        return ["Password must not be empty"]

    violations = []
    if len(password) < PASSWORD_MIN_LENGTH:
        violations.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode()) > PASSWORD_MAX_BYTES:
        violations.append(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not any(ch.isalpha() for ch in password):
        violations.append("Password must contain a letter")
    if not any(ch.isdigit() for ch in password):
        violations.append("Password must contain a digit")
    return violations


def validate_credentials(candidate: AccountCandidate, require_email: bool) -> ValidationResult:
    """
    Check login, password and (optionally) email of a candidate account.

    Args:
        candidate: Submitted credentials
        require_email: Registration requires an email, login does not

    Returns:
        ValidationResult listing every violation found
    """
    violations: list[str] = []

    if not candidate.login:
        violations.append("Login must not be empty")
    elif not LOGIN_PATTERN.fullmatch(candidate.login):
        violations.append("Login must be 3-32 characters of letters, digits, '.', '_' or '-'")

    violations.extend(validate_password(candidate.password))

    if require_email:
        email = (candidate.email or "").strip()
        if not email:
            violations.append("Email must not be empty")
        elif len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.fullmatch(email):
            violations.append("Email address is not valid")

    return ValidationResult(tuple(violations))
