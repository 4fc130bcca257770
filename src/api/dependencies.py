"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.security.bcrypt_hasher import BcryptCredentialHasher
from src.adapters.security.jwt_tokens import JwtSessionTokenIssuer
from src.adapters.smtp.console import ConsoleEmailSender
from src.config.settings import get_settings
from src.domain.accounts import AccountLifecycleService
from src.domain.models import Principal, TokenPurpose

# Module-level singleton - ConsoleEmailSender is stateless
_email_sender = ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_email_sender() -> ConsoleEmailSender:
    """Get console email sender (singleton)."""
    return _email_sender


@lru_cache
def get_hasher() -> BcryptCredentialHasher:
    """Get bcrypt hasher (singleton; computes its timing dummy hash once)."""
    return BcryptCredentialHasher(cost=get_settings().bcrypt_cost)


@lru_cache
def get_token_issuer() -> JwtSessionTokenIssuer:
    """Get JWT token issuer configured from settings (singleton)."""
    settings = get_settings()
    return JwtSessionTokenIssuer(
        secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        session_ttl_seconds=settings.session_ttl_seconds,
        reset_ttl_seconds=settings.reset_token_ttl_seconds,
    )


def get_account_service(request: Request) -> AccountLifecycleService:
    """
    Create account lifecycle service with injected dependencies.

    Wires together the repository, email sender, hasher and token issuer.
    """
    return AccountLifecycleService(
        repository=get_repository(request),
        notification_sender=get_email_sender(),
        hasher=get_hasher(),
        token_issuer=get_token_issuer(),
    )


# Security schemes for OpenAPI documentation; errors are raised below.
session_cookie = APIKeyCookie(name=get_settings().session_cookie_name, auto_error=False)
reset_bearer = HTTPBearer(auto_error=False)


def get_current_principal(
    session_token: str | None = Depends(session_cookie),
    reset_credentials: HTTPAuthorizationCredentials | None = Depends(reset_bearer),
    token_issuer: JwtSessionTokenIssuer = Depends(get_token_issuer),
) -> Principal:
    """
    Resolve the caller's identity from the session cookie or a reset token.

    A session cookie is tried first. A password-reset token is accepted as
    an Authorization Bearer header so the emailed token can complete a reset.

    Raises:
        HTTPException: 401 if neither yields a valid principal
    """
    if session_token:
        principal = token_issuer.verify(session_token, TokenPurpose.SESSION)
        if principal is not None:
            return principal

    if reset_credentials is not None:
        principal = token_issuer.verify(reset_credentials.credentials, TokenPurpose.PASSWORD_RESET)
        if principal is not None:
            return principal

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
