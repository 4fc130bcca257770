"""Security adapters - Password hashing and token signing implementations."""

from .bcrypt_hasher import BcryptCredentialHasher
from .jwt_tokens import JwtSessionTokenIssuer

__all__ = ["BcryptCredentialHasher", "JwtSessionTokenIssuer"]
