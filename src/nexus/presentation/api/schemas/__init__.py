"""Pydantic schemas for API request/response models."""

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

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "EmailChangeRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "MessageResponse",
    "RefreshRequest",
    "RegisterRequest",
    "ResendVerificationRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    "UpdateProfileRequest",
    "UserResponse",
    "VerifyEmailRequest",
]
