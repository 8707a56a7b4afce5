"""Pydantic schemas for user directory endpoints."""

from typing import Literal

from pydantic import EmailStr, Field

from stratify.models.base import CamelModel
from stratify.models.enums import UserRole
from stratify.models.principal import UserProfile


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    organization: str
    org_code: str
    org_id: int | None = Field(default=None, alias="org_id")
    created_at: str | None = None
    updated_at: str | None = None
    status: Literal["active", "inactive"] = "active"

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        return cls(**profile.model_dump())


class UserCreateRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole
    org_id: int | None = Field(default=None, alias="org_id")


class UserUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: UserRole | None = None
    org_id: int | None = Field(default=None, alias="org_id")
