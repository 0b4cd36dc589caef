"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Represents the identity claims carried by an auth token."""

    id: UUID
    email: str
    name: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...


class IPasswordHasher(Protocol):
    """Protocol for one-way password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted digest of ``password``."""
        ...

    def verify(self, password: str, digest: str) -> bool:
        """Check ``password`` against a stored digest."""
        ...
