"""Nexus Identity - accounts, verification and sessions.

This package handles all identity-related concerns:
- Staged registration and email verification with one-time codes
- Login with password and rotating refresh-token sessions
- Password reset and password change
- Email change through the same verification flow
- Email notifications carrying one-time codes
"""

from nexus_identity.application.context import UserContext
from nexus_identity.application.services import (
    AuthenticationService,
    AuthResult,
    PendingRegistration,
    RegistrationService,
    VerificationResult,
    VerificationTarget,
)
from nexus_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    User,
    UserNotFoundError,
    UserRepository,
)
from nexus_identity.exceptions import (
    EmailAlreadyVerifiedError,
    EmailDeliveryError,
    EmailInUseError,
    EphemeralStoreError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidOTPError,
    InvalidTokenError,
    PendingRegistrationNotFoundError,
    RegistrationPendingError,
    WeakPasswordError,
)
from nexus_identity.repositories import (
    EphemeralSessionStore,
    EphemeralStore,
    SessionStore,
)
from nexus_identity.schemas import TokenPair, TokenPayload, TokenPurpose
from nexus_identity.services import (
    JWTService,
    OTPPurpose,
    OTPService,
    PasswordHashingService,
)

__all__ = [
    # Domain - User
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    # Exceptions
    "EmailAlreadyVerifiedError",
    "EmailDeliveryError",
    "EmailInUseError",
    "EphemeralStoreError",
    "InvalidCredentialsError",
    "InvalidCurrentPasswordError",
    "InvalidOTPError",
    "InvalidTokenError",
    "PendingRegistrationNotFoundError",
    "RegistrationPendingError",
    "WeakPasswordError",
    # Repositories
    "EphemeralSessionStore",
    "EphemeralStore",
    "SessionStore",
    # Schemas
    "TokenPair",
    "TokenPayload",
    "TokenPurpose",
    # Services
    "JWTService",
    "OTPPurpose",
    "OTPService",
    "PasswordHashingService",
    # Application Context
    "UserContext",
    # Application Services
    "AuthResult",
    "AuthenticationService",
    "PendingRegistration",
    "RegistrationService",
    "VerificationResult",
    "VerificationTarget",
]
