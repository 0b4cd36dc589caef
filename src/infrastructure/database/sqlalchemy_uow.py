"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import PersistenceError
from infrastructure.database.repositories.sqlalchemy_task_repo import SQLAlchemyTaskRepository
from infrastructure.database.repositories.sqlalchemy_user_repo import SQLAlchemyUserRepository

logger = structlog.get_logger(__name__)


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Any ``SQLAlchemyError`` that escapes the ``async with`` block is rolled
    back and re-raised as ``PersistenceError`` so driver details never reach
    API responses.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    @property
    def tasks(self) -> SQLAlchemyTaskRepository:
        """Get task repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyTaskRepository(self._session)

    @property
    def users(self) -> SQLAlchemyUserRepository:
        """Get user repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyUserRepository(self._session)

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            try:
                if exc_type:
                    await self.rollback()
            finally:
                await self._session.close()
                self._session = None

        if isinstance(exc_val, SQLAlchemyError):
            logger.error(
                "persistence_error",
                error=str(exc_val),
                error_type=type(exc_val).__name__,
            )
            raise PersistenceError() from exc_val
