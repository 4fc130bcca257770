"""
Domain exceptions - Semantic error types for the account lifecycle.

Business rule violations are reported as AccountResult outcomes, not raised.
These exceptions cover the cases where an adapter has to tell the domain
about a constraint it enforced on its own.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class DuplicateAccount(AccountError):
    """Login or email was claimed by a concurrent registration."""

    pass
