"""Authentication schemas for request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (6-128 characters)",
    )
    name: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
                "name": "Jane Doe",
            },
        },
    )


class VerifyEmailRequest(BaseModel):
    """Request schema for confirming a verification code."""

    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=12, description="One-time code")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "user@example.com", "otp": "042917"},
        },
    )


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
            },
        },
    )


class RefreshRequest(BaseModel):
    """Request schema for token refresh.

    The refresh_token field is optional - if not provided in the request body,
    the server will read it from the HttpOnly cookie instead.
    """

    refresh_token: str | None = Field(
        default=None,
        description="Refresh token (optional - can also be sent via HttpOnly cookie)",
    )


class ForgotPasswordRequest(BaseModel):
    """Request schema for requesting a password reset code."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request schema for resetting a password with a one-time code."""

    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=12)
    new_password: str = Field(..., min_length=6, max_length=128)


class ChangePasswordRequest(BaseModel):
    """Request schema for changing a user's password."""

    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class EmailChangeRequest(BaseModel):
    new_email: EmailStr


class UpdateProfileRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    """Response schema for user data."""

    id: UUID
    email: str
    name: str
    is_email_verified: bool
    email_verified_at: datetime | None = None
    pending_email: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Response schema for token data.

    The refresh token is returned in the body and also set as an
    HttpOnly cookie restricted to the auth endpoints.
    """

    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer")
    expires_in: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 600,
            },
        },
    )


class AuthResponse(TokenResponse):
    """Response schema for verification and login: the user plus tokens."""

    user: UserResponse

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user": {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "email": "user@example.com",
                    "name": "Jane Doe",
                    "is_email_verified": True,
                    "email_verified_at": "2024-12-05T10:30:00Z",
                    "pending_email": None,
                    "created_at": "2024-12-05T10:30:00Z",
                    "updated_at": "2024-12-05T10:30:00Z",
                },
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 600,
            },
        },
    )
