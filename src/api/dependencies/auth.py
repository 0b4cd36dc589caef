"""Authentication dependencies for FastAPI."""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_auth_provider, get_user_service
from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.user import User
from domain.services.user_service import UserService
from infrastructure.auth.jwt_provider import JWTAuthProvider

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


def extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Find the bearer credential on a request.

    Checked in order: the auth cookie, ``Authorization: Bearer``, then the
    custom ``bearer`` header.
    """
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.headers.get(settings.auth_header_name) or None


async def get_current_user(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Dependency to get the current authenticated user.

    The token is resolved to a stored user by its email claim, so tokens of
    users that no longer exist are rejected.

    Raises:
        AuthenticationError: If no token provided, token is invalid, or the
            user cannot be found
    """
    token = extract_token(request, credentials)
    if not token:
        raise AuthenticationError(
            message="Authentication required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    claims = await auth_provider.validate_token(token)
    if not claims:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    user = await user_service.get_by_email(claims.email)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


# Type alias for convenience in route handlers
CurrentUser = Annotated[User, Depends(get_current_user)]
