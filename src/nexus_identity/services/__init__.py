"""Identity services - password hashing, JWT and one-time codes."""

from nexus_identity.services.jwt_service import JWTService
from nexus_identity.services.otp_service import OTPPurpose, OTPService
from nexus_identity.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "OTPPurpose",
    "OTPService",
    "PasswordHashingService",
]
