"""Authentication router: registration, verification, login and sessions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Response, status

from nexus.presentation.api.dependencies import (
    AuthService,
    CurrentUser,
    DBSession,
    SettingsDep,
)
from nexus.presentation.api.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    EmailChangeRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
    VerifyEmailRequest,
)
from nexus_config.settings import Settings
from nexus_identity.domain.user import User
from nexus_identity.exceptions import InvalidTokenError
from nexus_identity.schemas import TokenPair

logger = logging.getLogger(__name__)

router = APIRouter()

# Cookie name for refresh token
REFRESH_TOKEN_COOKIE = "nexus_refresh_token"  # NOQA: S105
REFRESH_TOKEN_COOKIE_PATH = "/api/v1/auth"

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a reset code has been sent."


def _set_refresh_token_cookie(
    response: Response,
    token: str,
    settings: Settings,
) -> None:
    """Set the refresh token as an HttpOnly cookie.

    This cookie is:
    - HttpOnly: Not accessible to JavaScript
    - Secure: Only sent over HTTPS (when cookie_secure=True)
    - Path restricted: Only sent to /api/v1/auth endpoints
    """
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.api_cookie_secure,
        samesite=settings.api_cookie_samesite,
        max_age=settings.refresh_token_ttl_seconds,
        path=REFRESH_TOKEN_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )


def _clear_refresh_token_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=REFRESH_TOKEN_COOKIE,
        path=REFRESH_TOKEN_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )


def _token_response(tokens: TokenPair, settings: Settings) -> TokenResponse:
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


def _auth_response(user: User, tokens: TokenPair, settings: Settings) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


# -----------------------------------------------------------------------------
# Registration & Verification
# -----------------------------------------------------------------------------


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "Registration staged, verification code sent"},
        400: {"description": "Invalid input"},
        409: {"description": "Email already registered or pending verification"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService,
) -> MessageResponse:
    """
    Stage a registration and email a verification code.

    No account exists and no tokens are issued until the code is
    confirmed at `/verify-email`.
    """
    message = await auth_service.register(
        email=request.email,
        password=request.password,
        name=request.name,
    )
    return MessageResponse(message=message)


@router.post(
    "/verify-email",
    summary="Confirm a verification code",
    responses={
        200: {"description": "Email verified, session started"},
        401: {"description": "Invalid or expired code"},
        404: {"description": "Nothing awaiting verification for this email"},
        409: {"description": "Email already taken"},
    },
)
async def verify_email(
    request: VerifyEmailRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Confirm a code sent to an email address.

    Completes either a pending registration or an email change,
    whichever the address belongs to.
    """
    result = await auth_service.verify_email(email=request.email, otp=request.otp)
    await session.commit()

    _set_refresh_token_cookie(response, result.tokens.refresh_token, settings)
    return _auth_response(result.user, result.tokens, settings)


@router.post(
    "/resend-verification",
    summary="Resend verification code",
    responses={
        200: {"description": "New code sent"},
        404: {"description": "Nothing awaiting verification for this email"},
        409: {"description": "Email already verified"},
    },
)
async def resend_verification(
    request: ResendVerificationRequest,
    auth_service: AuthService,
) -> MessageResponse:
    """Send a fresh code; the previous one stops working."""
    message = await auth_service.resend_otp(request.email)
    return MessageResponse(message=message)


# -----------------------------------------------------------------------------
# Login & Sessions
# -----------------------------------------------------------------------------


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password.

    Starts a new session; any refresh token issued earlier stops working.
    """
    result = await auth_service.login(email=request.email, password=request.password)

    _set_refresh_token_cookie(response, result.tokens.refresh_token, settings)
    return _auth_response(result.user, result.tokens, settings)


@router.post(
    "/refresh",
    summary="Refresh tokens",
    responses={
        200: {"description": "Tokens refreshed successfully"},
        401: {"description": "Invalid, expired or superseded refresh token"},
    },
)
async def refresh_token(
    response: Response,
    auth_service: AuthService,
    settings: SettingsDep,
    request: RefreshRequest | None = None,
    refresh_token_cookie: Annotated[
        str | None,
        Cookie(alias=REFRESH_TOKEN_COOKIE),
    ] = None,
) -> TokenResponse:
    """
    Exchange the current refresh token for a new pair.

    The refresh token can be provided either in the request body or via
    the HttpOnly cookie. The presented token is invalidated.
    """
    token = None
    if request and request.refresh_token:
        token = request.refresh_token
    elif refresh_token_cookie:
        token = refresh_token_cookie

    if not token:
        msg = "No refresh token provided"
        raise InvalidTokenError(msg)

    tokens = await auth_service.refresh(token)

    _set_refresh_token_cookie(response, tokens.refresh_token, settings)
    return _token_response(tokens, settings)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout user",
    responses={
        204: {"description": "Logged out successfully"},
        401: {"description": "Not authenticated"},
    },
)
async def logout(
    response: Response,
    user: CurrentUser,
    auth_service: AuthService,
    settings: SettingsDep,
) -> None:
    """Revoke the session and clear the refresh token cookie."""
    await auth_service.logout(user.user_id)
    _clear_refresh_token_cookie(response, settings)


# -----------------------------------------------------------------------------
# Passwords
# -----------------------------------------------------------------------------


@router.post(
    "/forgot-password",
    summary="Request password reset",
    responses={
        200: {"description": "If the email exists, a reset code has been sent"},
    },
)
async def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: AuthService,
) -> MessageResponse:
    """Request a password reset code. The response never reveals whether
    the email is registered."""
    await auth_service.request_password_reset(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    summary="Reset password with a code",
    responses={
        200: {"description": "Password reset, all sessions ended"},
        400: {"description": "Password does not meet requirements"},
        401: {"description": "Invalid or expired code"},
        404: {"description": "User not found"},
    },
)
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    await auth_service.reset_password(
        email=request.email,
        otp=request.otp,
        new_password=request.new_password,
    )
    await session.commit()
    return MessageResponse(message="Password has been reset. Please log in again.")


@router.post(
    "/change-password",
    summary="Change password",
    responses={
        200: {"description": "Password changed, new tokens issued"},
        400: {"description": "New password too weak"},
        401: {"description": "Current password incorrect or not authenticated"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    response: Response,
    user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> TokenResponse:
    """
    Change the current user's password.

    Every existing session is ended; the response carries a fresh token
    pair for the caller.
    """
    tokens = await auth_service.change_password(
        user_id=user.user_id,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    await session.commit()

    _set_refresh_token_cookie(response, tokens.refresh_token, settings)
    return _token_response(tokens, settings)


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------


@router.post(
    "/request-email-change",
    summary="Request an email change",
    responses={
        200: {"description": "Verification code sent to the new address"},
        401: {"description": "Not authenticated"},
        409: {"description": "Email already in use"},
    },
)
async def request_email_change(
    request: EmailChangeRequest,
    user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    """Send a code to the new address; confirm it at `/verify-email`."""
    message = await auth_service.request_email_change(user.user_id, request.new_email)
    await session.commit()
    return MessageResponse(message=message)


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
async def get_me(user: CurrentUser, auth_service: AuthService) -> UserResponse:
    current = await auth_service.get_current_user(user.user_id)
    return UserResponse.model_validate(current)


@router.put(
    "/profile",
    summary="Update profile",
    responses={
        200: {"description": "Profile updated"},
        401: {"description": "Not authenticated"},
    },
)
async def update_profile(
    request: UpdateProfileRequest,
    user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> UserResponse:
    updated = await auth_service.update_profile(user.user_id, request.name)
    await session.commit()
    return UserResponse.model_validate(updated)


@router.delete(
    "/profile",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete account",
    responses={
        204: {"description": "Account deleted"},
        401: {"description": "Not authenticated"},
    },
)
async def delete_profile(
    response: Response,
    user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> None:
    await auth_service.delete_account(user.user_id)
    await session.commit()
    _clear_refresh_token_cookie(response, settings)
