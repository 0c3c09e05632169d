from nexus_identity.infrastructure.email.email_service import EmailPurpose, EmailService

__all__ = ["EmailPurpose", "EmailService"]
