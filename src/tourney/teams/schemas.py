"""Request/response schemas for team endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateTeamRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=64)
    tag: str | None = Field(None, max_length=8)
    logo_url: str | None = None
    bio: str | None = Field(None, max_length=1000)


class MemberUserSummary(BaseModel):
    id: str
    display_name: str | None = None
    avatar_url: str | None = None
    level: int


class TeamMemberResponse(BaseModel):
    id: str
    team_id: str
    user_id: str
    role: str
    joined_at: datetime
    user: MemberUserSummary | None = None


class TeamResponse(BaseModel):
    id: str
    name: str
    tag: str
    owner_id: str
    logo_url: str
    bio: str
    level: int
    total_xp: int
    created_at: datetime
    updated_at: datetime


class TeamDetailResponse(TeamResponse):
    members: list[TeamMemberResponse] = []
