"""User-related Pydantic schemas."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cad_api.models.user import UserRank
from cad_api.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Schema for registering a new user."""
    username: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v or any(c.isspace() for c in v):
            raise ValueError("Username may not contain whitespace")
        return v


class UserLogin(CamelModel):
    """Schema for user login."""
    username: str
    password: str


class UserResponse(CamelModel):
    """Schema for user response - excludes sensitive data."""
    id: UUID
    username: str
    rank: UserRank
    permissions: List[str] = []
    is_leo: bool
    is_dispatch: bool
    is_ems_fd: bool
    is_supervisor: bool
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None


class Token(CamelModel):
    """Schema for JWT access tokens."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenData(BaseModel):
    """Schema for decoded token data."""
    user_id: Optional[UUID] = None
    username: Optional[str] = None
    token_version: int = 0
