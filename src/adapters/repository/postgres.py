"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design:
------------------
The lifecycle service performs check-then-act sequences; this adapter is
what makes them safe under concurrent requests:

1. **Unique constraints**: accounts.login and LOWER(accounts.email) are
   unique. A registration that loses a race fails with UniqueViolation,
   which is translated into the domain's DuplicateAccount.

2. **Scoped transactions**: create() writes the account and its activation
   record inside one conn.transaction() block; any error rolls both back.

3. **Conditional updates**: activate/deactivate update WHERE the record is
   still in the expected state, so the rowcount is 1 for exactly one of
   any number of concurrent callers and 0 for the rest.
"""

import logging
from pathlib import Path
from uuid import UUID

from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateAccount
from src.domain.models import Account, ActivationRecord

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = "id, login, email, password_hash, created_at"
_ACTIVATION_COLUMNS = "account_id, token, activated"


def _to_account(row: tuple) -> Account:
    return Account(id=row[0], login=row[1], email=row[2], password_hash=row[3], created_at=row[4])


def _to_activation(row: tuple) -> ActivationRecord:
    return ActivationRecord(account_id=row[0], token=row[1], activated=row[2])


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create(self, account: Account, activation: ActivationRecord) -> None:
        """
        Insert an account and its activation record atomically.

        Args:
            account: Account to insert (email already normalized)
            activation: Its activation record

        Raises:
            DuplicateAccount: If login or email violates a unique constraint
        """
        account_sql = """
            INSERT INTO accounts (id, login, email, password_hash, created_at)
            VALUES (%s, %s, %s, %s, COALESCE(%s, NOW()))
        """
        activation_sql = """
            INSERT INTO activations (account_id, token, activated)
            VALUES (%s, %s, %s)
        """

        try:
            with self._pool.connection() as conn, conn.transaction(), conn.cursor() as cursor:
                cursor.execute(
                    account_sql,
                    (account.id, account.login, account.email, account.password_hash, account.created_at),
                )
                cursor.execute(
                    activation_sql,
                    (activation.account_id, activation.token, activation.activated),
                )
        except errors.UniqueViolation as e:
            logger.info("Registration rejected by unique constraint: login=%s", account.login)
            raise DuplicateAccount(account.login) from e

    def find_by_login(self, login: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE login = %s"
        return self._fetch_one(sql, (login,), _to_account)

    def find_by_email(self, email: str) -> Account | None:
        """Case-insensitive lookup, served by the LOWER(email) unique index."""
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE LOWER(email) = LOWER(%s)"
        return self._fetch_one(sql, (email,), _to_account)

    def find_activation_by_token(self, token: str) -> ActivationRecord | None:
        sql = f"SELECT {_ACTIVATION_COLUMNS} FROM activations WHERE token = %s"
        return self._fetch_one(sql, (token,), _to_activation)

    def find_activation_by_account_id(self, account_id: UUID) -> ActivationRecord | None:
        sql = f"SELECT {_ACTIVATION_COLUMNS} FROM activations WHERE account_id = %s"
        return self._fetch_one(sql, (account_id,), _to_activation)

    def activate_by_token(self, token: str) -> int:
        sql = """
            UPDATE activations
            SET activated = TRUE
            WHERE token = %s AND activated = FALSE
        """
        return self._execute_update(sql, (token,))

    def deactivate_by_token(self, token: str) -> int:
        sql = """
            UPDATE activations
            SET activated = FALSE
            WHERE token = %s AND activated = TRUE
        """
        return self._execute_update(sql, (token,))

    def update_password_hash(self, login: str, password_hash: str) -> int:
        sql = "UPDATE accounts SET password_hash = %s WHERE login = %s"
        return self._execute_update(sql, (password_hash, login))

    def _fetch_one(self, sql: str, params: tuple, mapper):
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return mapper(row) if row is not None else None

    def _execute_update(self, sql: str, params: tuple) -> int:
        with self._pool.connection() as conn, conn.transaction(), conn.cursor() as cursor:
            cursor.execute(sql, params)
            return cursor.rowcount


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
