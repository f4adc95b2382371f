"""Request/response schemas for user, auth and admin endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from tourney.models import SocialProvider

# ---------------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Create an account. Role must be one of the self-signup roles."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: str
    display_name: str = Field(..., min_length=1, max_length=64)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Full profile, returned to its owner and to admins."""

    id: str
    role: str
    display_name: str
    email: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    interested_games: list[str] = []
    contact_info: dict[str, Any] = {}
    level: int
    current_xp: int
    total_xp: int
    profile_completion_percentage: int
    is_banned: bool
    created_at: datetime
    updated_at: datetime


class PublicUserResponse(BaseModel):
    """Public profile — no email, contact info or XP detail."""

    id: str
    display_name: str
    avatar_url: str | None = None
    level: int
    role: str
    bio: str | None = None
    interested_games: list[str] = []
    created_at: datetime


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=64)
    bio: str | None = Field(None, max_length=1000)
    interested_games: list[str] | None = None
    contact_info: dict[str, Any] | None = None
    avatar_url: str | None = Field(None, max_length=2048)


# ---------------------------------------------------------------------------
# Social connections
# ---------------------------------------------------------------------------


class SocialConnectionRequest(BaseModel):
    provider: SocialProvider
    provider_id: str = Field(..., min_length=1, max_length=128)
    provider_username: str = Field(..., min_length=1, max_length=128)


class SocialConnectionResponse(BaseModel):
    id: str
    provider: str
    provider_id: str
    provider_username: str
    connected_at: datetime


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class BanRequest(BaseModel):
    banned: bool


class UserListResponse(BaseModel):
    users: list[UserResponse]
    count: int
