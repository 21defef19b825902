"""Pydantic schemas for user and authentication API endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from renaspress.schemas.common import Pagination

Role = Literal["admin", "author", "editor", "subscriber"]


class _NormalizedIdentity(BaseModel):
    """Trims names and case-folds emails."""

    @field_validator("name", check_fields=False)
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email", check_fields=False)
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else v


class UserRegister(_NormalizedIdentity):
    """Self-service registration. Any role in the request body is ignored."""

    name: str = Field(max_length=50, description="Display name")
    email: EmailStr = Field(description="Valid email address")
    password: str = Field(min_length=8, description="Password (at least 8 characters)")
    confirm_password: str = Field(description="Must match password")

    @model_validator(mode="after")
    def passwords_match(self) -> "UserRegister":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserCreate(_NormalizedIdentity):
    """Admin account creation with a selectable role."""

    name: str = Field(max_length=50, description="Display name")
    email: EmailStr = Field(description="Valid email address")
    password: str = Field(min_length=8, description="Password (at least 8 characters)")
    role: Role = Field(default="author", description="Account role")


class UserUpdate(_NormalizedIdentity):
    """Partial profile update. Role and active flag are admin-only."""

    name: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    role: Role | None = None
    is_active: bool | None = None


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: str = Field(description="Email address")
    password: str = Field(description="Password")


class UserResponse(BaseModel):
    """Response schema for user data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    role: str = Field(description="Account role")
    avatar: str | None = Field(default=None, description="Avatar URL")
    is_active: bool = Field(description="Whether the user account is active")
    provider: str = Field(description="Login provider")
    created_at: datetime = Field(description="When the user was created")


class AuthorSummary(BaseModel):
    """Minimal user info embedded in posts, topics and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str | None = None


class AuthResponse(BaseModel):
    """Registration/login response with a bearer token."""

    success: bool = True
    user: UserResponse
    token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    message: str | None = None


class UserDetailResponse(BaseModel):
    success: bool = True
    user: UserResponse
    message: str | None = None


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserResponse]
    pagination: Pagination

