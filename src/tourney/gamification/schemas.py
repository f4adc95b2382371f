"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


# --- XP ---


class XPHistoryEntry(BaseModel):
    id: str
    action_type: str
    xp_amount: int
    description: str
    metadata: dict[str, Any] = {}
    created_at: datetime


class XPHistoryResponse(BaseModel):
    entries: list[XPHistoryEntry]
    total: int
    total_xp: int


# --- Leaderboard ---


class LeaderboardEntry(BaseModel):
    rank: int
    id: str
    display_name: str
    avatar_url: str | None = None
    level: int
    total_xp: int
    role: str


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]


# --- Levels ---


class LevelProgressResponse(BaseModel):
    current_level: int
    current_xp: int
    current_level_xp: int
    next_level_xp: int
    xp_to_next_level: int
    percentage: float


class LevelEntry(BaseModel):
    level: int
    xp: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]
    xp_rules: dict[str, int]
