"""
JWT token adapter - Implements SessionTokenIssuer protocol.

Tokens are HS256-signed with PyJWT and carry the account login (sub),
account id, purpose, issuer and expiry. Session and password-reset
tokens share the signing key but are told apart by the purpose claim,
and verify() rejects a token presented for the wrong purpose.
"""

import logging
import time
from typing import Any
from uuid import UUID

import jwt

from src.domain.models import Account, Principal, TokenPurpose

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


class JwtSessionTokenIssuer:
    """
    Implements SessionTokenIssuer protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        secret: str,
        issuer: str,
        session_ttl_seconds: int,
        reset_ttl_seconds: int,
    ) -> None:
        """
        Initialize issuer with signing key and token lifetimes.

        Args:
            secret: HMAC signing key
            issuer: Value of the iss claim, checked on verify
            session_ttl_seconds: Lifetime of session tokens
            reset_ttl_seconds: Lifetime of password-reset tokens
        """
        self._secret = secret
        self._issuer = issuer
        self._ttl = {
            TokenPurpose.SESSION: session_ttl_seconds,
            TokenPurpose.PASSWORD_RESET: reset_ttl_seconds,
        }

    def issue_session(self, account: Account) -> str:
        return self._encode(account, TokenPurpose.SESSION)

    def issue_reset_token(self, account: Account) -> str:
        return self._encode(account, TokenPurpose.PASSWORD_RESET)

    def verify(self, token: str, purpose: TokenPurpose = TokenPurpose.SESSION) -> Principal | None:
        """
        Decode and verify a token. Returns None on any failure.

        Checks signature, expiry, issuer and purpose. Returning None rather
        than raising keeps callers simple: any invalid token is anonymous.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", e)
            return None

        if payload.get("purpose") != purpose.value:
            return None

        try:
            account_id = UUID(payload["account_id"])
        except (KeyError, TypeError, ValueError):
            return None

        return Principal(login=payload["sub"], account_id=account_id)

    def _encode(self, account: Account, purpose: TokenPurpose) -> str:
        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": account.login,
            "account_id": str(account.id),
            "purpose": purpose.value,
            "iat": now,
            "exp": now + self._ttl[purpose],
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
