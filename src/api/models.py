"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Only shape and size are enforced here; credential policy (login pattern,
password strength, email format) is the domain validator's job so that its
messages reach the caller as 400 responses.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    login: str = Field(..., max_length=64, description="Account login (3-32 of A-Z a-z 0-9 . _ -)")
    email: str = Field(..., max_length=254, description="Email address for activation")
    password: str = Field(
        ...,
        max_length=255,
        description="Password (min 8 characters, at least one letter and one digit)",
    )


class LoginRequest(BaseModel):
    """Request model for login."""

    login: str = Field(..., max_length=64)
    password: str = Field(..., max_length=255)


class TokenRequest(BaseModel):
    """Request model for activation and deactivation."""

    token: str = Field(..., max_length=128, description="Activation token from the email")


class ChangePasswordRequest(BaseModel):
    """Request model for password change."""

    password: str = Field(..., max_length=255, description="New password")


class ResendActivationRequest(BaseModel):
    """Request model for resending the activation email."""

    login_or_email: str = Field(..., max_length=254)


class PasswordResetRequest(BaseModel):
    """Request model for requesting a password-reset email."""

    email: str = Field(..., max_length=254)


class MessageResponse(BaseModel):
    """Response model for successful operations."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
