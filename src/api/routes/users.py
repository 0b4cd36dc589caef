"""User registration and authentication routes."""

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_user_service
from api.schemas.common import ErrorResponse
from api.schemas.user import (
    AuthenticateRequest,
    PasswordChange,
    TokenResponse,
    UserCreate,
    UserResponse,
)
from core.config import settings
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, limiter
from domain.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def create_user(
    request: Request,
    body: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a user account. The password is stored as a bcrypt digest."""
    user = await service.register(name=body.name, email=body.email, password=body.password)
    return UserResponse.model_validate(user)


@router.post(
    "/authenticate",
    response_model=TokenResponse,
    summary="Exchange credentials for a token",
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def authenticate(
    request: Request,
    response: Response,
    body: AuthenticateRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """
    Authenticate with email and password.

    The token is returned in the body and also set as an HTTP-only cookie.
    """
    token = await service.authenticate(email=body.email, password=body.password)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expire_minutes * 60,
    )
    return TokenResponse(token=token)


@router.get(
    "/users/me",
    response_model=UserResponse,
    summary="Get the current user",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(request: Request, user: CurrentUser) -> UserResponse:
    """Return the authenticated user's profile."""
    return UserResponse.model_validate(user)


@router.put(
    "/users/me/password",
    response_model=UserResponse,
    summary="Change the current user's password",
    responses={400: {"model": ErrorResponse, "description": "Current password is incorrect"}},
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def change_password(
    request: Request,
    body: PasswordChange,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Replace the password after verifying the current one."""
    updated = await service.change_password(
        user.id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return UserResponse.model_validate(updated)
