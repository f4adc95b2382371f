"""Admin endpoints — user listing, bans and XP reconciliation."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from tourney.auth.dependencies import require_role
from tourney.dependencies import get_xp_service
from tourney.exceptions import NotFoundError
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store
from tourney.models import UserProfile
from tourney.users.schemas import BanRequest, UserListResponse, UserResponse
from tourney.users.service import list_users, set_banned

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])

require_admin = require_role("admin")


@router.get("/users", response_model=UserListResponse)
async def list_all_users(
    _admin: UserProfile = Depends(require_admin),
    store: KVStore = Depends(get_store),
):
    """All user profiles."""
    users = await list_users(store)
    return UserListResponse(
        users=[UserResponse.model_validate(u.model_dump()) for u in users],
        count=len(users),
    )


@router.patch("/users/{user_id}/ban", response_model=UserResponse)
async def ban_user(
    user_id: str,
    body: BanRequest,
    admin: UserProfile = Depends(require_admin),
    store: KVStore = Depends(get_store),
):
    """Ban or unban a user."""
    profile = await set_banned(store, user_id, body.banned)
    logger.info("admin_ban", admin_id=admin.id, user_id=user_id, banned=body.banned)
    return UserResponse.model_validate(profile.model_dump())


@router.post("/users/{user_id}/reconcile-xp", response_model=UserResponse)
async def reconcile_xp(
    user_id: str,
    _admin: UserProfile = Depends(require_admin),
    xp: XPService = Depends(get_xp_service),
):
    """Raise a user's XP total to match their ledger."""
    profile = await xp.reconcile_total_xp(user_id)
    if profile is None:
        raise NotFoundError("User not found")
    return UserResponse.model_validate(profile.model_dump())
