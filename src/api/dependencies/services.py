"""Dependency injection factories for services."""

from functools import lru_cache
from typing import Callable

from domain.services.task_service import TaskService
from domain.services.user_service import UserService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password import PasslibPasswordHasher
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Get the JWT auth provider singleton."""
    return JWTAuthProvider()


@lru_cache
def get_password_hasher() -> PasslibPasswordHasher:
    """Get the password hasher singleton."""
    return PasslibPasswordHasher()


@lru_cache
def get_task_service() -> TaskService:
    """Get Task service instance."""
    return TaskService(get_uow_factory())


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(
        get_uow_factory(),
        password_hasher=get_password_hasher(),
        auth_provider=get_auth_provider(),
    )
