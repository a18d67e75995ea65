"""JWT token service.

Provides access token creation and verification. Tokens are signed with
HMAC-SHA-512 and carry a fixed issuer/audience pair plus a ``type`` claim.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from smarttask_identity.exceptions import InvalidTokenError
from smarttask_identity.schemas import TokenPayload

ACCESS_TOKEN_TYPE = "access"
MIN_SECRET_KEY_BYTES = 32


class JWTService:
    """Service for JWT token creation and verification.

    Only short-lived access tokens are minted here; refresh tokens are
    opaque random values bound to a persisted session.

    Examples
    --------
    >>> service = JWTService(secret_key="x" * 64)
    >>> token = service.create_access_token(user_id, "user@example.com")
    >>> payload = service.verify_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 10
    DEFAULT_ISSUER = "smart-task-ai2"
    DEFAULT_AUDIENCE = "smart-task-ai2-users"
    ALGORITHM = "HS512"
    REQUIRED_CLAIMS = ("sub", "email", "type", "iat", "exp", "iss", "aud")

    def __init__(
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        issuer: str = DEFAULT_ISSUER,
        audience: str = DEFAULT_AUDIENCE,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens, at least 32 bytes.
        access_token_expire_minutes
            Minutes until an access token expires (default 10)
        issuer
            Value of the ``iss`` claim, checked on verification
        audience
            Value of the ``aud`` claim, checked on verification
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)
        if len(secret_key.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            msg = f"JWT secret key must be at least {MIN_SECRET_KEY_BYTES} bytes"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._issuer = issuer
        self._audience = audience

    @property
    def access_token_expire(self) -> timedelta:
        return self._access_expire

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
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + (expires_delta or self._access_expire),
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        Signature, algorithm, issuer, audience and expiry are all checked.
        A token signed with any algorithm other than HS512 (including
        ``none``) is rejected.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": list(self.REQUIRED_CLAIMS)},
            )

            return TokenPayload(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                token_type=payload["type"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

    def decode_access_token(self, token: str) -> TokenPayload | None:
        """Decode an access token, returning None on any failure.

        Tokens whose ``type`` claim is not "access" are treated as invalid.
        """
        try:
            payload = self.verify_token(token)
        except InvalidTokenError:
            return None
        if not payload.is_access_token():
            return None
        return payload
