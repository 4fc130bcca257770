"""
API v1 routes.

Defines REST endpoints for the account lifecycle API. Each route delegates
to AccountLifecycleService and maps the result outcome to an HTTP status.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import get_account_service, get_current_principal
from src.api.models import (
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    ResendActivationRequest,
    TokenRequest,
)
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountLifecycleService
from src.domain.models import AccountCandidate, AccountResult, Outcome, Principal

router = APIRouter(tags=["v1"])

_STATUS_BY_OUTCOME = {
    Outcome.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    Outcome.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    Outcome.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.CONFLICT: status.HTTP_409_CONFLICT,
}

_NO_STORE = {"Cache-Control": "no-store"}


def _raise_for_failure(result: AccountResult, headers: dict[str, str] | None = None) -> None:
    """Convert a non-success result into an HTTPException carrying its message."""
    if result.ok:
        return
    raise HTTPException(
        status_code=_STATUS_BY_OUTCOME[result.outcome],
        detail=result.message,
        headers=headers,
    )


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid credentials"},
        409: {"model": ErrorResponse, "description": "Login or email already registered"},
    },
    summary="Register a new account",
    description="Submit login, email and password. An activation token is sent to the email.",
)
def register(
    request_data: RegisterRequest,
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.register(
        AccountCandidate(
            login=request_data.login,
            password=request_data.password,
            email=request_data.email,
        )
    )
    _raise_for_failure(result)
    return MessageResponse(message=result.message)


@router.post(
    "/activate",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty token"},
        404: {"model": ErrorResponse, "description": "Unknown token"},
        409: {"model": ErrorResponse, "description": "Already activated"},
    },
    summary="Activate an account",
)
def activate(
    request_data: TokenRequest,
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.activate(request_data.token)
    _raise_for_failure(result)
    return MessageResponse(message=result.message)


@router.post(
    "/deactivate",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty token"},
        404: {"model": ErrorResponse, "description": "Unknown token"},
        409: {"model": ErrorResponse, "description": "Already deactivated"},
    },
    summary="Deactivate an account",
)
def deactivate(
    request_data: TokenRequest,
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.deactivate(request_data.token)
    _raise_for_failure(result)
    return MessageResponse(message=result.message)


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid credentials format"},
        401: {"model": ErrorResponse, "description": "Wrong login or password"},
        403: {"model": ErrorResponse, "description": "Account not activated"},
    },
    summary="Log in",
    description="Verify login and password; on success the session token is set "
    "as an httpOnly cookie.",
)
def login(
    request_data: LoginRequest,
    response: Response,
    service: AccountLifecycleService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """
    Log in and set the session cookie.

    httponly keeps the token out of reach of scripts; samesite=lax blocks it
    on cross-site POSTs; max_age matches the token expiry.
    """
    result = service.login(AccountCandidate(login=request_data.login, password=request_data.password))
    _raise_for_failure(result, headers=_NO_STORE)

    response.set_cookie(
        settings.session_cookie_name,
        value=result.session_token,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.session_ttl_seconds,
    )
    response.headers.update(_NO_STORE)
    return MessageResponse(message=result.message)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(
    response: Response,
    service: AccountLifecycleService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """Clear the session cookie. Sessions are stateless, so nothing else changes."""
    result = service.logout()
    if result.clear_session:
        response.delete_cookie(
            settings.session_cookie_name,
            httponly=True,
            samesite="lax",
            secure=settings.secure_cookies,
        )
    response.headers.update(_NO_STORE)
    return MessageResponse(message=result.message)


@router.post(
    "/password",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Password rejected by policy"},
        401: {"model": ErrorResponse, "description": "No valid session or reset token"},
        409: {"model": ErrorResponse, "description": "Password not changed"},
    },
    summary="Change password",
    description="Authenticated by the session cookie, or by a password-reset token "
    "sent as Authorization: Bearer.",
)
def change_password(
    request_data: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.change_password(principal, request_data.password)
    _raise_for_failure(result)
    return MessageResponse(message=result.message)


@router.post(
    "/resend-activation",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty login or email"},
        409: {"model": ErrorResponse, "description": "Already activated"},
    },
    summary="Resend the activation email",
)
def resend_activation(
    request_data: ResendActivationRequest,
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.resend_activation(request_data.login_or_email)
    _raise_for_failure(result)
    return MessageResponse(message=result.message)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Empty email"}},
    summary="Request a password-reset email",
    description="Always answers with the same message whether or not the email is registered.",
)
def request_password_reset(
    request_data: PasswordResetRequest,
    service: AccountLifecycleService = Depends(get_account_service),
) -> MessageResponse:
    result = service.request_password_reset(request_data.email)
    _raise_for_failure(result)
    return MessageResponse(message=result.message)
