"""Pydantic models for account and authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from asoniped_backend.api.models.common import (
    PASSWORD_PATTERN,
    PHONE_PATTERN,
    USERNAME_PATTERN,
    require_two_words,
)
from asoniped_backend.shared import RoleName, UserStatus


class UserResponse(BaseModel):
    """Public representation of a registered user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str
    phone: str | None = None
    status: UserStatus
    roles: list[str] = Field(validation_alias="role_names")
    created_at: datetime
    updated_at: datetime


class AuthTokenResponse(BaseModel):
    """Bearer token payload returned by the API."""

    access_token: str
    token_type: str = "bearer"


class UserRegisterRequest(BaseModel):
    """Payload for creating a new account."""

    username: str = Field(pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(pattern=PASSWORD_PATTERN)
    full_name: str = Field(min_length=3, max_length=255)
    phone: str = Field(pattern=PHONE_PATTERN)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return require_two_words(value)


class UserRegisterResponse(BaseModel):
    """Response returned after a successful registration."""

    user: UserResponse
    token: AuthTokenResponse


class UserLoginRequest(BaseModel):
    """Payload for authenticating with a username or e-mail."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=64)


class UserLoginResponse(BaseModel):
    """Response returned after a successful authentication."""

    user: UserResponse
    token: AuthTokenResponse


class ProfileUpdateRequest(BaseModel):
    """Fields a user may change on their own account."""

    full_name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str | None) -> str | None:
        return None if value is None else require_two_words(value)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(pattern=PASSWORD_PATTERN)


class AdminUserCreateRequest(UserRegisterRequest):
    """Account created by an administrator."""

    status: UserStatus = UserStatus.ACTIVE
    roles: list[RoleName] | None = None


class AdminUserUpdateRequest(ProfileUpdateRequest):
    """Account fields an administrator may change."""

    status: UserStatus | None = None
    roles: list[RoleName] | None = None


class RoleAssignmentRequest(BaseModel):
    user_id: int
    role: str = Field(min_length=1, max_length=32)


class UserListResponse(BaseModel):
    """One page of accounts."""

    users: list[UserResponse]
    total: int
    page: int
    limit: int
    total_pages: int
