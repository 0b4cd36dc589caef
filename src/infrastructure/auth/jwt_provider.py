"""JWT authentication provider implementation.

Token payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "name": "Jane",
        "iat": 1234567800,
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger(__name__)


class JWTAuthProvider:
    """HS256 JWT authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except JWTError as e:
            logger.debug("token_rejected", reason=str(e))
            return None

        user_id = payload.get("sub")
        email = payload.get("email")

        if not user_id or not email:
            return None

        try:
            parsed_id = UUID(user_id)
        except (TypeError, ValueError):
            return None

        return TokenUser(
            id=parsed_id,
            email=email,
            name=payload.get("name"),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a signed JWT for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        now = datetime.utcnow()
        expire = now + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.name,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
