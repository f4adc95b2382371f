"""Stored document models.

Each model maps to one key family in the key-value store (see tourney.kv.keys).
Documents written by older versions may lack fields; defaults fill them in and
unknown fields are preserved.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

UserRole = Literal["gamer", "organizer", "admin"]
NotificationType = Literal[
    "tournament_start",
    "registration_closing",
    "match_start",
    "xp_earned",
    "level_up",
    "team_invite",
]
TournamentStatus = Literal["draft", "published", "registration_closed", "live", "completed", "cancelled"]
TournamentFormat = Literal["single_elimination", "double_elimination", "round_robin"]
ParticipantStatus = Literal["registered", "checked_in", "disqualified", "withdrawn"]
TeamRole = Literal["owner", "captain", "member"]
SocialProvider = Literal["discord", "twitch", "steam"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class StoredDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserProfile(StoredDocument):
    """Maps to user_profile:{id}."""

    id: str
    role: UserRole
    display_name: str
    email: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    interested_games: list[str] = Field(default_factory=list)
    contact_info: dict[str, Any] = Field(default_factory=dict)
    level: int = 1
    current_xp: int = 0
    total_xp: int = 0
    profile_completion_percentage: int = 0
    is_banned: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @field_validator("level", mode="before")
    @classmethod
    def _default_level(cls, v: Any) -> Any:
        return 1 if v is None else v

    @field_validator("current_xp", "total_xp", "profile_completion_percentage", "version", mode="before")
    @classmethod
    def _default_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("interested_games", mode="before")
    @classmethod
    def _default_games(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("contact_info", mode="before")
    @classmethod
    def _default_contact(cls, v: Any) -> Any:
        return {} if v is None else v


class SocialConnection(StoredDocument):
    """Maps to social_connection:{user_id}:{id}."""

    id: str = Field(default_factory=new_id)
    user_id: str
    provider: SocialProvider
    provider_id: str
    provider_username: str
    connected_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------


class XPTransaction(StoredDocument):
    """Immutable XP ledger entry. Maps to xp_transaction:{user_id}:{id}."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(default_factory=new_id)
    user_id: str
    action_type: str
    xp_amount: int
    description: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)


class Notification(StoredDocument):
    """Maps to notification:{user_id}:{id}."""

    id: str = Field(default_factory=new_id)
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Tournaments
# ---------------------------------------------------------------------------


class Tournament(StoredDocument):
    """Maps to tournament:{id}."""

    id: str = Field(default_factory=new_id)
    organizer_id: str
    name: str
    description: str = ""
    game: str
    format: TournamentFormat = "single_elimination"
    max_participants: int = 16
    registration_start: datetime = Field(default_factory=utcnow)
    registration_end: datetime | None = None
    tournament_start: datetime | None = None
    tournament_end: datetime | None = None
    status: TournamentStatus = "draft"
    rules: str = ""
    discord_link: str = ""
    prize_pool: float = 0
    banner_url: str = ""
    team_size: int = 1
    check_in_required: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TournamentParticipant(StoredDocument):
    """Maps to tournament_participant:{tournament_id}:{user_id}."""

    id: str = Field(default_factory=new_id)
    tournament_id: str
    user_id: str | None = None
    team_id: str | None = None
    status: ParticipantStatus = "registered"
    placement: int | None = None
    completion_awarded: bool = False
    joined_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


class Team(StoredDocument):
    """Maps to team:{id}."""

    id: str = Field(default_factory=new_id)
    name: str
    tag: str = ""
    owner_id: str
    logo_url: str = ""
    bio: str = ""
    level: int = 1
    total_xp: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TeamMember(StoredDocument):
    """Maps to team_member:{team_id}:{user_id}."""

    id: str = Field(default_factory=new_id)
    team_id: str
    user_id: str
    role: TeamRole = "member"
    joined_at: datetime = Field(default_factory=utcnow)
