"""Application services for identity management."""

from nexus_identity.application.services.authentication_service import (
    AuthenticationService,
    AuthResult,
    VerificationResult,
    VerificationTarget,
)
from nexus_identity.application.services.registration_service import (
    PendingRegistration,
    RegistrationService,
)

__all__ = [
    "AuthResult",
    "AuthenticationService",
    "PendingRegistration",
    "RegistrationService",
    "VerificationResult",
    "VerificationTarget",
]
