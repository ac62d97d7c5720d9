# storefront/schemas/user.py
import uuid
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from storefront.schemas.common import CamelModel


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return v
    return _strip_required(v)


class RegisterRequest(CamelModel):
    """
    Payload for POST /auth/register.

    isAdmin is accepted as-is, matching the existing storefront clients.
    """

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    is_admin: bool = False

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _strip_required(v)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(CamelModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    name: str
    email: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime


class UserBrief(CamelModel):
    """Owner summary embedded in order views."""

    id: uuid.UUID
    name: str
    email: str


class AuthResponse(CamelModel):
    message: str
    user: UserRead
    token: str


class UserResponse(CamelModel):
    message: str
    user: UserRead


class ProfileUpdate(CamelModel):
    """
    Partial profile update for the authenticated user.
    Omitted fields keep their current value.
    """

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class PasswordChange(CamelModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class AdminUserUpdate(CamelModel):
    """
    Admin-only user update schema.
    """

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    is_admin: bool | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return _strip_optional(v)
