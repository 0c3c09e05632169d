"""JWT token service.

Provides JWT token creation and verification for authentication.
Access and refresh tokens are signed with different secrets and carry an
explicit ``purpose`` claim, so neither can stand in for the other.
"""

import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from nexus_identity.exceptions import InvalidTokenError
from nexus_identity.schemas import TokenPair, TokenPayload, TokenPurpose


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived)
    for user authentication. Verification is stateless: whether a refresh
    token is still the current session is decided by the session store.

    Examples
    --------
    >>> service = JWTService(access_secret_key="a", refresh_secret_key="r")
    >>> token = service.create_access_token(user_id, "user@example.com")
    >>> payload = service.verify_token(token, TokenPurpose.ACCESS)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 10
    DEFAULT_REFRESH_EXPIRE_DAYS = 30
    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret_key: str,
        refresh_secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret_key
            Secret key for signing access tokens. Must be kept secure.
        refresh_secret_key
            Secret key for signing refresh tokens. Must differ from the
            access secret.
        access_token_expire_minutes
            Minutes until access token expires (default 10)
        refresh_token_expire_days
            Days until refresh token expires (default 30)
        """
        if not access_secret_key or not refresh_secret_key:
            msg = "JWT secret keys cannot be empty"
            raise ValueError(msg)
        if access_secret_key == refresh_secret_key:
            msg = "JWT access and refresh secret keys must differ"
            raise ValueError(msg)

        self._secrets = {
            TokenPurpose.ACCESS: access_secret_key,
            TokenPurpose.REFRESH: refresh_secret_key,
        }
        self._expiry = {
            TokenPurpose.ACCESS: timedelta(minutes=access_token_expire_minutes),
            TokenPurpose.REFRESH: timedelta(days=refresh_token_expire_days),
        }

    @property
    def access_token_ttl(self) -> timedelta:
        return self._expiry[TokenPurpose.ACCESS]

    @property
    def refresh_token_ttl(self) -> timedelta:
        return self._expiry[TokenPurpose.REFRESH]

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        email
            The user's email address
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(user_id, email, TokenPurpose.ACCESS, expires_delta)

    def create_refresh_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens are used to obtain new token pairs without
        requiring the user to log in again.
        """
        return self._create_token(user_id, email, TokenPurpose.REFRESH, expires_delta)

    def create_token_pair(self, user_id: UUID, email: str) -> TokenPair:
        return TokenPair(
            access_token=self.create_access_token(user_id, email),
            refresh_token=self.create_refresh_token(user_id, email),
        )

    def verify_token(self, token: str, purpose: TokenPurpose) -> TokenPayload:
        """Verify and decode a JWT token of the expected purpose.

        Parameters
        ----------
        token
            The JWT token string to verify
        purpose
            The purpose the caller expects; selects the verification secret

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or of the wrong purpose
        """
        try:
            payload = jwt.decode(
                token,
                self._secrets[purpose],
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "purpose"]},
            )

            if payload["purpose"] != purpose.value:
                msg = "Invalid token type"
                raise InvalidTokenError(msg)

            return TokenPayload(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                purpose=purpose,
                token_id=payload.get("jti", ""),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

    def _create_token(
        self,
        user_id: UUID,
        email: str,
        purpose: TokenPurpose,
        expires_delta: timedelta | None,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        expire = now + (expires_delta or self._expiry[purpose])

        payload = {
            "sub": str(user_id),
            "email": email,
            "purpose": purpose.value,
            "jti": secrets.token_hex(16),
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secrets[purpose], algorithm=self.ALGORITHM)
