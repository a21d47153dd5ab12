from datetime import datetime

from pydantic import EmailStr, Field

from unimus.models.enums import UserRole

from .base import BaseSchema, PatchSchema


class UserBase(BaseSchema):
    email: EmailStr
    role: UserRole
    name: str | None = None
    orcid: str | None = None


class UserCreateRequest(UserBase):
    password: str = Field(min_length=6)


class UserPatchRequest(PatchSchema):
    email: EmailStr = None
    password: str = Field(default=None, min_length=6)
    role: UserRole = None
    name: str | None = None
    orcid: str | None = None


class UserMetadataResponse(UserBase):
    """A user as returned by the API; the password hash is never included."""

    id: int
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(min_length=1)
