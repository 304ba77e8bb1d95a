"""JWT authentication provider implementation.

Tokens are signed with a shared secret (HS256 by default) and verified
offline: no store or network lookup is involved.

JWT payload structure:
    {
        "sub": "account-uuid",
        "email": "user@example.com",
        "user_metadata": { "display_name": "John", "avatar_url": "..." },
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from uuid import UUID

import structlog
from jose import ExpiredSignatureError, JWTError, jwt

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def validate_token(self, token: str) -> TokenUser:
        """
        Verify a JWT's signature and expiry and extract the caller identity.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser built from the token claims

        Raises:
            AuthenticationError: TOKEN_EXPIRED for an expired token,
                INVALID_TOKEN for anything else that fails verification
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError:
            raise AuthenticationError(
                message="Token has expired",
                error_code=ErrorCode.TOKEN_EXPIRED,
            ) from None
        except JWTError as exc:
            logger.info("token_rejected", reason=str(exc))
            raise AuthenticationError(
                message="Invalid or expired token",
                error_code=ErrorCode.INVALID_TOKEN,
            ) from None

        subject = payload.get("sub")
        try:
            account_id = UUID(subject) if subject else None
        except (TypeError, ValueError):
            account_id = None
        if account_id is None:
            raise AuthenticationError(
                message="Token has no valid subject",
                error_code=ErrorCode.INVALID_TOKEN,
            )

        user_metadata = payload.get("user_metadata") or {}
        display_name = (
            user_metadata.get("display_name")
            or user_metadata.get("name")
            or payload.get("name")
        )

        return TokenUser(
            id=account_id,
            email=payload.get("email"),
            display_name=display_name,
            avatar_url=user_metadata.get("avatar_url"),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a signed JWT for a user (tests and local tooling).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "exp": expire,
            "user_metadata": {
                "display_name": user.display_name,
                "avatar_url": user.avatar_url,
            },
        }
        if user.email:
            payload["email"] = user.email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
