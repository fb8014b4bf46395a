"""
User Schemas
Pydantic models for user-related data.
"""

import re
import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.user import UserRole
from app.utils.password_policy import validate_password

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email")
    return value


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: str = Field(..., max_length=255)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., max_length=72)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        # Length limits apply to the trimmed name
        return v.strip() if isinstance(v, str) else v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username may only contain letters, numbers and underscores")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        errors = validate_password(v)
        if errors:
            raise ValueError("; ".join(errors))
        return v


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    role: UserRole
    created_at: datetime


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str


class UserStats(BaseModel):
    total_recipes: int
    category_count: int
    avg_cooking_time: float


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class RefreshRequest(BaseModel):
    token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
