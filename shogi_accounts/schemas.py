"""Request and response bodies for the accounts API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import Role, User


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    pseudo: str
    email: Optional[str]
    country: Optional[str]
    biography: Optional[str]
    avatar: Optional[str]
    ratio: float
    role: Role
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        pseudo=user.pseudo,
        email=user.email,
        country=user.country,
        biography=user.biography,
        avatar=user.avatar,
        ratio=user.ratio,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _strip_required(value: str, field: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field} must not be empty")
    return stripped


class SignupRequest(BaseModel):
    pseudo: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=256)
    email: Optional[str] = Field(default=None, max_length=255)
    country: Optional[str] = Field(default=None, max_length=100)
    biography: Optional[str] = Field(default=None, max_length=4000)
    avatar: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("pseudo")
    @classmethod
    def _normalize_pseudo(cls, value: str) -> str:
        return _strip_required(value, "pseudo")


class ProfileUpdateRequest(BaseModel):
    pseudo: Optional[str] = Field(default=None, min_length=1, max_length=64)
    password: Optional[str] = Field(default=None, min_length=1, max_length=256)
    email: Optional[str] = Field(default=None, max_length=255)
    country: Optional[str] = Field(default=None, max_length=100)
    biography: Optional[str] = Field(default=None, max_length=4000)
    avatar: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("pseudo")
    @classmethod
    def _normalize_pseudo(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _strip_required(value, "pseudo")


class AdminUserUpdateRequest(ProfileUpdateRequest):
    ratio: Optional[float] = Field(default=None, allow_inf_nan=False)
    role: Optional[Role] = None

    @field_validator("role")
    @classmethod
    def _reject_superadmin(cls, value: Optional[Role]) -> Optional[Role]:
        if value is Role.SUPERADMIN:
            raise ValueError("superadmin can only be granted from the command line")
        return value


class LoginRequest(BaseModel):
    pseudo: Optional[str] = Field(default=None, max_length=64)
    email: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _require_identifier(self):  # type: ignore[override]
        if not (self.pseudo and self.pseudo.strip()) and not (self.email and self.email.strip()):
            raise ValueError("Either pseudo or email must be provided")
        return self

    def login_pseudo(self) -> Optional[str]:
        if self.pseudo and self.pseudo.strip():
            return self.pseudo.strip()
        return None

    def login_email(self) -> Optional[str]:
        # A pseudo, when present, decides which account is meant.
        if self.login_pseudo() is not None:
            return None
        if self.email and self.email.strip():
            return self.email.strip()
        return None


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "AdminUserUpdateRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ProfileUpdateRequest",
    "SignupRequest",
    "UserResponse",
    "user_to_response",
]
