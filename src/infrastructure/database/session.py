"""Async engine and session factory for the users/tasks database.

Services open sessions through ``SQLAlchemyUnitOfWork``; ``get_async_session``
is only used by the readiness probe.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings

# Plain postgresql:// URLs are rewritten to the asyncpg driver by Settings
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Entities are converted before commit returns, so nothing is reloaded after it
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a standalone session for ``/health/detailed``."""
    async with async_session_factory() as session:
        yield session
