"""Identity and authentication exceptions.

These exceptions are raised by the nexus_identity package. Each one carries
an ``ErrorKind`` from the shared kernel, so callers and the HTTP layer
branch on ``exc.kind`` instead of on the concrete class.
"""

from nexus.domain.shared.exceptions import (
    ConflictError,
    ErrorCode,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


class InvalidCredentialsError(UnauthorizedError):
    """Raised when email or password is incorrect during login.

    Unknown email and wrong password deliberately share this error so the
    response never reveals whether an account exists.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class InvalidOTPError(UnauthorizedError):
    """Raised when a one-time code is missing, wrong, expired or already used."""

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message, ErrorCode.INVALID_OTP)


class InvalidTokenError(UnauthorizedError):
    """Raised when a JWT token is invalid, expired, superseded or malformed."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, ErrorCode.INVALID_TOKEN)


class InvalidCurrentPasswordError(UnauthorizedError):
    """Raised when the current password does not match on a password change."""

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message, ErrorCode.INVALID_CURRENT_PASSWORD)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, ErrorCode.WEAK_PASSWORD)


class RegistrationPendingError(ConflictError):
    """Raised when a registration for the email is already awaiting verification."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "A registration for this email is already pending verification",
            ErrorCode.ALREADY_PENDING,
            {"email": email},
        )


class EmailAlreadyVerifiedError(ConflictError):
    """Raised when a code is requested for an already verified email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email is already verified",
            ErrorCode.ALREADY_VERIFIED,
            {"email": email},
        )


class EmailInUseError(ConflictError):
    """Raised when an email change targets an address that is taken or reserved."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already in use", ErrorCode.EMAIL_IN_USE, {"email": email})


class PendingRegistrationNotFoundError(NotFoundError):
    """Raised when there is nothing awaiting verification for an email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "No pending verification found for this email",
            ErrorCode.PENDING_REGISTRATION_NOT_FOUND,
            {"email": email},
        )


class EphemeralStoreError(InternalError):
    """Raised when the ephemeral key-value store cannot be reached."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(
            message,
            ErrorCode.STORE_UNAVAILABLE,
            {"operation": operation} if operation else None,
        )


class EmailDeliveryError(InternalError):
    """Raised when an email could not be handed to the mail provider."""

    def __init__(self, to_email: str) -> None:
        self.to_email = to_email
        super().__init__(
            "Failed to send email",
            ErrorCode.EMAIL_DELIVERY_FAILED,
            {"to_email": to_email},
        )
