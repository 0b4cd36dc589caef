"""User service: registration, login and password changes."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    ErrorCode,
    UserNotFoundError,
    ValidationError,
)
from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import IAuthProvider, IPasswordHasher, TokenUser


class UserService:
    """Service layer for the credential store."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        password_hasher: IPasswordHasher,
        auth_provider: IAuthProvider,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = password_hasher
        self._auth = auth_provider
        self._log = logger or structlog.get_logger(__name__)

    async def register(self, name: str, email: str, password: str) -> User:
        """Create a user with a hashed password. Emails are stored lowercased."""
        email = email.strip().lower()

        async with self._uow_factory() as uow:
            if await uow.users.get_by_email(email):
                raise EmailAlreadyRegisteredError(email)

            user = User(
                name=name,
                email=email,
                password_hash=self._hasher.hash(password),
            )
            created = await uow.users.create(user)
            await uow.commit()

        self._log.info("user_registered", user_id=str(created.id))
        return created

    async def authenticate(self, email: str, password: str) -> str:
        """Verify credentials and issue a bearer token.

        Unknown email and wrong password fail identically.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email.strip().lower())

        if not user or not self._hasher.verify(password, user.password_hash):
            self._log.info("authentication_failed")
            raise AuthenticationError(
                message="Invalid email or password",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )

        self._log.info("user_authenticated", user_id=str(user.id))
        return self._auth.create_token(TokenUser(id=user.id, email=user.email, name=user.name))

    async def get_by_id(self, user_id: UUID) -> User:
        """Get a user, raising if absent."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def get_by_email(self, email: str) -> User | None:
        """Look up a user by email."""
        async with self._uow_factory() as uow:
            return await uow.users.get_by_email(email.strip().lower())

    async def change_password(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> User:
        """Re-hash and store a new password after checking the current one."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(str(user_id))

            if not self._hasher.verify(current_password, user.password_hash):
                raise ValidationError(
                    "Current password is incorrect", field="current_password"
                )

            user.password_hash = self._hasher.hash(new_password)
            user.updated_at = datetime.utcnow()
            updated = await uow.users.update(user)
            await uow.commit()

        self._log.info("user_password_changed", user_id=str(user_id))
        return updated
