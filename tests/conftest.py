"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory AccountRepository honouring the port's contract
- Fast bcrypt hasher and JWT issuer instances
- Database connection pool (skips when PostgreSQL is unreachable)
"""

from collections.abc import Generator
from unittest.mock import Mock
from uuid import UUID

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.adapters.security.bcrypt_hasher import BcryptCredentialHasher
from src.adapters.security.jwt_tokens import JwtSessionTokenIssuer
from src.config.settings import get_settings
from src.domain.accounts import AccountLifecycleService
from src.domain.exceptions import DuplicateAccount
from src.domain.models import Account, ActivationRecord

TEST_JWT_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


class InMemoryAccountRepository:
    """
    AccountRepository fake backed by dicts.

    Enforces the same uniqueness and conditional-update semantics as the
    PostgreSQL adapter so domain tests exercise real state transitions.
    """

    def __init__(self) -> None:
        self.accounts: dict[UUID, Account] = {}
        self.activations: dict[UUID, ActivationRecord] = {}

    def create(self, account: Account, activation: ActivationRecord) -> None:
        for existing in self.accounts.values():
            if existing.login == account.login or existing.email.lower() == account.email.lower():
                raise DuplicateAccount(account.login)
        self.accounts[account.id] = account
        self.activations[account.id] = activation

    def find_by_login(self, login: str) -> Account | None:
        return next((a for a in self.accounts.values() if a.login == login), None)

    def find_by_email(self, email: str) -> Account | None:
        return next((a for a in self.accounts.values() if a.email.lower() == email.lower()), None)

    def find_activation_by_token(self, token: str) -> ActivationRecord | None:
        return next((r for r in self.activations.values() if r.token == token), None)

    def find_activation_by_account_id(self, account_id: UUID) -> ActivationRecord | None:
        return self.activations.get(account_id)

    def activate_by_token(self, token: str) -> int:
        return self._set_activated(token, expected=False, new=True)

    def deactivate_by_token(self, token: str) -> int:
        return self._set_activated(token, expected=True, new=False)

    def update_password_hash(self, login: str, password_hash: str) -> int:
        account = self.find_by_login(login)
        if account is None:
            return 0
        self.accounts[account.id] = Account(
            id=account.id,
            login=account.login,
            email=account.email,
            password_hash=password_hash,
            created_at=account.created_at,
        )
        return 1

    def _set_activated(self, token: str, expected: bool, new: bool) -> int:
        record = self.find_activation_by_token(token)
        if record is None or record.activated != expected:
            return 0
        self.activations[record.account_id] = ActivationRecord(record.account_id, record.token, new)
        return 1


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    """Fresh in-memory repository per test."""
    return InMemoryAccountRepository()


@pytest.fixture
def sender() -> Mock:
    """Recording notification sender."""
    return Mock()


@pytest.fixture(scope="session")
def hasher() -> BcryptCredentialHasher:
    """bcrypt hasher at minimum cost to keep the suite fast."""
    return BcryptCredentialHasher(cost=4)


@pytest.fixture(scope="session")
def token_issuer() -> JwtSessionTokenIssuer:
    """JWT issuer with a fixed test secret."""
    return JwtSessionTokenIssuer(
        secret=TEST_JWT_SECRET,
        issuer="test-issuer",
        session_ttl_seconds=3600,
        reset_ttl_seconds=900,
    )


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    sender: Mock,
    hasher: BcryptCredentialHasher,
    token_issuer: JwtSessionTokenIssuer,
) -> AccountLifecycleService:
    """Lifecycle service wired to the in-memory repository."""
    return AccountLifecycleService(
        repository=repository,
        notification_sender=sender,
        hasher=hasher,
        token_issuer=token_issuer,
    )


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool for integration and adversarial tests.

    Migrations are applied once. Tests depending on this fixture are
    skipped when the configured database cannot be reached.
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    try:
        pool.wait(timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty account tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM activations")
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield
