"""Authentication service: the identity and session state machine.

Per email address the logical state is one of: nothing, a registration
pending verification, or a verified user. Every flow that moves between
those states (or issues a session) goes through ``AuthenticationService``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from nexus_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    User,
    UserNotFoundError,
)
from nexus_identity.exceptions import (
    EmailAlreadyVerifiedError,
    EmailInUseError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidOTPError,
    InvalidTokenError,
    PendingRegistrationNotFoundError,
)
from nexus_identity.infrastructure.email import EmailPurpose
from nexus_identity.schemas import TokenPair, TokenPayload, TokenPurpose
from nexus_identity.services.otp_service import OTPPurpose

if TYPE_CHECKING:
    from nexus_identity.application.services.registration_service import (
        RegistrationService,
    )
    from nexus_identity.domain.user import UserRepository
    from nexus_identity.infrastructure.email import EmailService
    from nexus_identity.repositories import SessionStore
    from nexus_identity.services import (
        JWTService,
        OTPService,
        PasswordHashingService,
    )

logger = logging.getLogger(__name__)


class VerificationTarget(str, Enum):
    """What a code sent to ``email-verify:<email>`` is confirming."""

    NEW_ACCOUNT = "new_account"
    EMAIL_CHANGE = "email_change"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AuthResult:
    user: User
    tokens: TokenPair


@dataclass(frozen=True)
class VerificationResult:
    user: User
    tokens: TokenPair
    target: VerificationTarget


class AuthenticationService:
    """
    Application service for registration, login and session lifecycle.

    Composes the registration staging area, one-time codes, password
    hashing, JWT issuing and the session store with the User aggregate:
    - Staged registration and email verification
    - Login and refresh-token rotation
    - Password reset and password change
    - Email change through the shared verification code namespace
    - Profile read, rename and deletion
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        registration_service: RegistrationService,
        otp_service: OTPService,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        session_store: SessionStore,
        email_service: EmailService,
    ):
        self._user_repo = user_repository
        self._registrations = registration_service
        self._otp_service = otp_service
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._session_store = session_store
        self._email_service = email_service

    @property
    def _refresh_ttl_seconds(self) -> int:
        return int(self._jwt_service.refresh_token_ttl.total_seconds())

    async def _start_session(self, user: User) -> TokenPair:
        tokens = self._jwt_service.create_token_pair(user.id, user.email)
        await self._session_store.put(
            user.id,
            tokens.refresh_token,
            self._refresh_ttl_seconds,
        )
        return tokens

    async def _get_user(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def _send_code(self, email: str, purpose: EmailPurpose) -> None:
        otp_purpose = (
            OTPPurpose.PASSWORD_RESET
            if purpose is EmailPurpose.PASSWORD_RESET
            else OTPPurpose.EMAIL_VERIFY
        )
        code = await self._otp_service.issue(otp_purpose, email)
        await self._email_service.send_otp_email(
            to_email=email,
            code=code,
            purpose=purpose,
            expiry_minutes=self._otp_service.expiry_minutes,
        )

    # -- Registration and verification ------------------------------------

    async def register(self, email: str, password: str, name: str) -> str:
        return await self._registrations.stage(email, password, name)

    async def resolve_verification_target(
        self,
        email: str,
    ) -> tuple[VerificationTarget, User | None]:
        """Decide which flow a code for ``email`` belongs to.

        A pending registration takes precedence over an email change to the
        same address. ``request_email_change`` refuses addresses that are
        already staged, so both can only coexist when the registration was
        staged second, and its code is then the newest one sent.
        """
        if await self._registrations.exists(email):
            return VerificationTarget.NEW_ACCOUNT, None

        user = await self._user_repo.find_by_pending_email(email)
        if user is not None:
            return VerificationTarget.EMAIL_CHANGE, user

        return VerificationTarget.NOT_FOUND, None

    async def verify_email(self, email: str, otp: str) -> VerificationResult:
        """Confirm a code sent to ``email`` and start a session.

        Raises
        ------
        PendingRegistrationNotFoundError
            If nothing is awaiting verification for the address
        InvalidOTPError
            If the code is wrong, expired or already used
        EmailAlreadyExistsError
            If an email change targets an address taken in the meantime
        """
        email = Email.normalize(email)
        target, user = await self.resolve_verification_target(email)
        if target is VerificationTarget.NOT_FOUND:
            raise PendingRegistrationNotFoundError(email)

        otp_key = self._otp_service.key_for(OTPPurpose.EMAIL_VERIFY, email)
        if not await self._otp_service.verify(otp_key, otp):
            raise InvalidOTPError

        if target is VerificationTarget.NEW_ACCOUNT:
            user = await self._complete_registration(email)
        else:
            user = await self._complete_email_change(user, email)

        tokens = await self._start_session(user)
        return VerificationResult(user=user, tokens=tokens, target=target)

    async def _complete_registration(self, email: str) -> User:
        pending = await self._registrations.consume(email)
        if pending is None:
            raise PendingRegistrationNotFoundError(email)

        user = User.create_verified(
            email=pending.email,
            password_hash=pending.password_hash,
            name=pending.name,
        )
        await self._user_repo.create(user)

        competing = await self._user_repo.find_by_pending_email(email)
        if competing is not None:
            competing.cancel_email_change()
            await self._user_repo.save(competing)
            logger.info(
                "Cancelled email change of user %s: address was registered",
                competing.id,
            )

        logger.info("Account verified: %s", user.email)
        return user

    async def _complete_email_change(self, user: User, email: str) -> User:
        owner = await self._user_repo.find_by_email(email)
        if owner is not None and owner.id != user.id:
            raise EmailAlreadyExistsError(email)

        old_email = user.email
        user.confirm_email_change()
        await self._user_repo.save(user)

        logger.info("Email changed for user %s: %s -> %s", user.id, old_email, email)
        return user

    async def resend_otp(self, email: str) -> str:
        email = Email.normalize(email)

        if await self._user_repo.exists_by_email(email):
            raise EmailAlreadyVerifiedError(email)

        if await self._registrations.exists(email):
            purpose = EmailPurpose.VERIFICATION
        elif await self._user_repo.find_by_pending_email(email) is not None:
            purpose = EmailPurpose.EMAIL_CHANGE
        else:
            raise PendingRegistrationNotFoundError(email)

        await self._send_code(email, purpose)

        logger.info("Verification code resent (%s) to %s", purpose.value, email)
        return "A new verification code has been sent."

    # -- Login and sessions -----------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            user = await self._user_repo.find_by_email(email)
        except InvalidEmailError:
            user = None

        if user is None or not user.is_email_verified:
            await self._password_service.verify_dummy_async(password)
            raise InvalidCredentialsError

        if not await self._password_service.verify_async(password, user.password_hash):
            raise InvalidCredentialsError

        tokens = await self._start_session(user)

        logger.info("User logged in: %s", user.email)
        return AuthResult(user=user, tokens=tokens)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new pair.

        The presented token must be the user's current session. It is
        swapped for the new one in a single atomic step, so the same token
        never refreshes twice.
        """
        payload = self._jwt_service.verify_token(refresh_token, TokenPurpose.REFRESH)

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            msg = "User not found"
            raise InvalidTokenError(msg)

        tokens = self._jwt_service.create_token_pair(user.id, user.email)
        rotated = await self._session_store.rotate(
            user.id,
            refresh_token,
            tokens.refresh_token,
            self._refresh_ttl_seconds,
        )
        if not rotated:
            logger.warning("Rejected superseded refresh token for user %s", user.id)
            msg = "Refresh token has been revoked"
            raise InvalidTokenError(msg)

        logger.debug("Tokens refreshed for user: %s", user.id)
        return tokens

    async def logout(self, user_id: UUID) -> None:
        await self._session_store.revoke(user_id)
        logger.info("User logged out: %s", user_id)

    def authenticate_access_token(self, token: str) -> TokenPayload:
        """Verify an access token without touching any store."""
        return self._jwt_service.verify_token(token, TokenPurpose.ACCESS)

    # -- Passwords --------------------------------------------------------

    async def request_password_reset(self, email: str) -> None:
        """Send a reset code if an account exists.

        Unknown addresses succeed silently and no email is sent, so the
        caller cannot tell whether the account exists.
        """
        try:
            user = await self._user_repo.find_by_email(email)
        except InvalidEmailError:
            logger.warning("Password reset requested for malformed email")
            return

        if user is None:
            logger.warning("Password reset requested for unknown email")
            return

        await self._send_code(user.email, EmailPurpose.PASSWORD_RESET)
        logger.info("Password reset code sent to %s", user.email)

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        email = Email.normalize(email)
        self._password_service.validate_strength(new_password)

        otp_key = self._otp_service.key_for(OTPPurpose.PASSWORD_RESET, email)
        if not await self._otp_service.verify(otp_key, otp):
            raise InvalidOTPError

        user = await self._user_repo.find_by_email(email)
        if user is None:
            raise UserNotFoundError(email)

        user.change_password_hash(await self._password_service.hash_async(new_password))
        await self._user_repo.save(user)
        await self._session_store.revoke(user.id)

        logger.info("Password reset for user: %s", user.id)

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> TokenPair:
        """Set a new password and hand the caller a fresh session.

        Every existing session is revoked first, then a new pair is issued
        so the acting client stays signed in.
        """
        user = await self._get_user(user_id)

        if not await self._password_service.verify_async(
            current_password,
            user.password_hash,
        ):
            raise InvalidCurrentPasswordError

        user.change_password_hash(await self._password_service.hash_async(new_password))
        await self._user_repo.save(user)
        await self._session_store.revoke(user.id)
        tokens = await self._start_session(user)

        logger.info("Password changed for user: %s", user.id)
        return tokens

    # -- Profile ----------------------------------------------------------

    async def request_email_change(self, user_id: UUID, new_email: str) -> str:
        new_email = Email.normalize(new_email)
        user = await self._get_user(user_id)

        if new_email == user.email or await self._email_in_use(new_email, user):
            raise EmailInUseError(new_email)

        user.request_email_change(new_email)
        await self._user_repo.save(user)
        await self._send_code(new_email, EmailPurpose.EMAIL_CHANGE)

        logger.info("Email change requested for user %s", user.id)
        return f"Verification code sent to {new_email}."

    async def _email_in_use(self, email: str, requester: User) -> bool:
        if await self._user_repo.exists_by_email(email):
            return True
        if await self._registrations.exists(email):
            return True
        other = await self._user_repo.find_by_pending_email(email)
        return other is not None and other.id != requester.id

    async def get_current_user(self, user_id: UUID) -> User:
        return await self._get_user(user_id)

    async def update_profile(self, user_id: UUID, name: str) -> User:
        user = await self._get_user(user_id)
        user.rename(name)
        await self._user_repo.save(user)

        logger.debug("Profile updated for user: %s", user.id)
        return user

    async def delete_account(self, user_id: UUID) -> None:
        user = await self._get_user(user_id)
        await self._user_repo.delete(user.id)
        await self._session_store.revoke(user.id)

        logger.info("Account deleted: %s", user.id)
