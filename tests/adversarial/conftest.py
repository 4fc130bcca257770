"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository


@pytest.fixture
def repository(pool: ConnectionPool, clean_database: None) -> PostgresAccountRepository:
    """Create repository instance on an empty database for each test."""
    return PostgresAccountRepository(pool)
