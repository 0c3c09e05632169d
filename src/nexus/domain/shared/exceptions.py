"""Shared domain exceptions and error codes.

This module defines the base exception hierarchy for the whole service.
Every domain exception carries an ``ErrorKind`` (the category callers branch
on) and an ``ErrorCode`` (the stable, machine-readable reason). The
presentation layer maps kinds to HTTP status codes in one place.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Error categories. Each kind maps to exactly one HTTP status."""

    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    INTERNAL = "internal"


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Conflict Errors (409)
    EMAIL_EXISTS = "EMAIL_EXISTS"
    ALREADY_PENDING = "ALREADY_PENDING"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    EMAIL_IN_USE = "EMAIL_IN_USE"

    # Authentication Errors (401)
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_OTP = "INVALID_OTP"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CURRENT_PASSWORD = "INVALID_CURRENT_PASSWORD"

    # Not Found Errors (404)
    PENDING_REGISTRATION_NOT_FOUND = "PENDING_REGISTRATION_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_EMAIL = "INVALID_EMAIL"

    # Infrastructure Errors (500)
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    EMAIL_DELIVERY_FAILED = "EMAIL_DELIVERY_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    This exception provides structured error information that can be
    used by the presentation layer to generate consistent API responses.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    kind
        Error category; determines the HTTP status
    details
        Optional additional context (logged but not exposed to users)
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"kind={self.kind.value!r}, "
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ConflictError(DomainException):
    """Raised when an operation conflicts with existing state."""

    kind = ErrorKind.CONFLICT


class UnauthorizedError(DomainException):
    """Raised when credentials, codes or tokens are not accepted."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(DomainException):
    """Raised when input validation fails."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class InternalError(DomainException):
    """Raised when a backing service (store, mail provider) fails."""

    kind = ErrorKind.INTERNAL
