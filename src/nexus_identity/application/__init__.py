"""Identity application layer: use-case orchestration and request context."""

from nexus_identity.application.context import UserContext
from nexus_identity.application.services import (
    AuthenticationService,
    AuthResult,
    PendingRegistration,
    RegistrationService,
    VerificationResult,
    VerificationTarget,
)

__all__ = [
    "AuthResult",
    "AuthenticationService",
    "PendingRegistration",
    "RegistrationService",
    "UserContext",
    "VerificationResult",
    "VerificationTarget",
]
