"""Gamification API endpoints — 4 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tourney.auth.dependencies import get_current_user
from tourney.config import get_settings
from tourney.dependencies import get_rules
from tourney.gamification.leaderboard import build_leaderboard
from tourney.gamification.level_thresholds import compute_level_progress
from tourney.gamification.rules import GamificationRules
from tourney.gamification.schemas import (
    AllLevelsResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    LevelEntry,
    LevelProgressResponse,
    XPHistoryEntry,
    XPHistoryResponse,
)
from tourney.gamification.xp_service import get_xp_history
from tourney.kv import KVStore, get_store
from tourney.models import UserProfile

router = APIRouter(prefix="/api/v1/gamification", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(store: KVStore = Depends(get_store)):
    """Top players by total XP (banned users excluded)."""
    entries = await build_leaderboard(store, limit=get_settings().leaderboard_size)
    return LeaderboardResponse(entries=[LeaderboardEntry(**e) for e in entries])


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels(rules: GamificationRules = Depends(get_rules)):
    """Get all level thresholds and XP rule amounts."""
    return AllLevelsResponse(
        levels=[LevelEntry(level=t.level, xp=t.xp) for t in rules.level_thresholds],
        xp_rules=dict(rules.xp_rules),
    )


# ── Authenticated endpoints ──


@router.get("/xp", response_model=XPHistoryResponse)
async def get_my_xp_history(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """XP ledger for the current user, most recent first."""
    transactions = await get_xp_history(store, user.id)
    return XPHistoryResponse(
        entries=[XPHistoryEntry.model_validate(t.model_dump()) for t in transactions],
        total=len(transactions),
        total_xp=user.total_xp,
    )


@router.get("/level-progress", response_model=LevelProgressResponse)
async def get_level_progress(
    user: UserProfile = Depends(get_current_user),
    rules: GamificationRules = Depends(get_rules),
):
    """Progress from the current level towards the next."""
    return LevelProgressResponse(
        **compute_level_progress(user.total_xp, user.level, rules.level_thresholds)
    )
