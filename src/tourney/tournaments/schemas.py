"""Request/response schemas for tournament endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tourney.models import TournamentFormat


class CreateTournamentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = Field(None, max_length=5000)
    game: str = Field(..., min_length=1, max_length=64)
    format: TournamentFormat | None = None
    max_participants: int | None = Field(None, ge=2, le=1024)
    registration_start: datetime | None = None
    registration_end: datetime | None = None
    tournament_start: datetime | None = None
    tournament_end: datetime | None = None
    rules: str | None = None
    discord_link: str | None = None
    prize_pool: float | None = Field(None, ge=0)
    banner_url: str | None = None
    team_size: int | None = Field(None, ge=1, le=16)
    check_in_required: bool | None = None


class UpdateTournamentRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = Field(None, max_length=5000)
    rules: str | None = None
    discord_link: str | None = None
    prize_pool: float | None = Field(None, ge=0)
    banner_url: str | None = None
    registration_end: datetime | None = None
    tournament_start: datetime | None = None
    tournament_end: datetime | None = None


class CompleteTournamentRequest(BaseModel):
    placements: dict[str, int] = {}


class OrganizerSummary(BaseModel):
    id: str
    display_name: str | None = None
    avatar_url: str | None = None


class ParticipantResponse(BaseModel):
    id: str
    tournament_id: str
    user_id: str | None = None
    team_id: str | None = None
    status: str
    placement: int | None = None
    completion_awarded: bool = False
    joined_at: datetime


class TournamentResponse(BaseModel):
    id: str
    organizer_id: str
    name: str
    description: str
    game: str
    format: str
    max_participants: int
    registration_start: datetime
    registration_end: datetime | None = None
    tournament_start: datetime | None = None
    tournament_end: datetime | None = None
    status: str
    rules: str
    discord_link: str
    prize_pool: float
    banner_url: str
    team_size: int
    check_in_required: bool
    created_at: datetime
    updated_at: datetime


class TournamentDetailResponse(TournamentResponse):
    organizer: OrganizerSummary | None = None
    participants: list[ParticipantResponse] = []
    current_participants: int = 0


class TournamentListResponse(BaseModel):
    tournaments: list[TournamentResponse]
    count: int
