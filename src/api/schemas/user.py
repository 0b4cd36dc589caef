"""Pydantic schemas for User and authentication API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """Schema for registering a User."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    """Public view of a User; the password digest is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class AuthenticateRequest(BaseModel):
    """Schema for exchanging credentials for a token."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Bearer token issued on successful authentication."""

    token: str


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, max_length=72)
