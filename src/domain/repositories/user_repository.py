"""User repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.user import User


class IUserRepository(Protocol):
    """Repository interface for User entities (the credential store)."""

    async def get(self, id: UUID) -> User | None:
        """Get a user by ID."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        ...

    async def create(self, user: User) -> User:
        """Create a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is already stored.
        """
        ...

    async def update(self, user: User) -> User:
        """Update an existing user."""
        ...
