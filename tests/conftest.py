"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any, Callable

# Test settings must be in place before core.config is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.user import User
from domain.services.task_service import TaskService
from domain.services.user_service import UserService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password import PasslibPasswordHasher
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    yield engine
    await engine.dispose()


@pytest.fixture
async def setup_database(engine: AsyncEngine) -> AsyncGenerator[None, None]:
    """Create all tables for the test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def session_factory(
    engine: AsyncEngine, setup_database: None
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create session factory."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def password_hasher() -> PasslibPasswordHasher:
    """bcrypt hasher at the minimum cost factor."""
    return PasslibPasswordHasher(rounds=4)


@pytest.fixture
def task_service(uow_factory: Callable[[], SQLAlchemyUnitOfWork]) -> TaskService:
    """Task service backed by the test database."""
    return TaskService(uow_factory)


@pytest.fixture
def user_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    password_hasher: PasslibPasswordHasher,
    auth_provider: JWTAuthProvider,
) -> UserService:
    """User service backed by the test database."""
    return UserService(
        uow_factory,
        password_hasher=password_hasher,
        auth_provider=auth_provider,
    )


@pytest.fixture
async def test_user(user_service: UserService) -> User:
    """Register the default test user."""
    return await user_service.register(
        name="Test User",
        email="test@example.com",
        password=TEST_PASSWORD,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: User) -> str:
    """Create auth token for test user."""
    return auth_provider.create_token(
        TokenUser(id=test_user.id, email=test_user.email, name=test_user.name)
    )


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def app(
    task_service: TaskService,
    user_service: UserService,
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Create the application wired to the in-memory test database.

    Auth is not bypassed: requests still need a valid token for a user that
    exists in the test database.
    """
    from api.dependencies.services import (
        get_auth_provider,
        get_task_service,
        get_user_service,
    )
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_task_service] = lambda: task_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI,
    auth_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client sending the test user's bearer token."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c

    app.dependency_overrides.clear()
