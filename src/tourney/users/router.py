"""User management router — all /api/v1/users/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from tourney.auth.dependencies import get_current_user
from tourney.dependencies import get_xp_service
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store
from tourney.models import UserProfile
from tourney.users.schemas import (
    ProfileUpdateRequest,
    PublicUserResponse,
    SocialConnectionRequest,
    SocialConnectionResponse,
    UserResponse,
)
from tourney.users.service import (
    add_social_connection,
    get_profile,
    list_social_connections,
    public_profile,
    refresh_profile_completion,
    update_profile,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def _user_response(user: UserProfile) -> UserResponse:
    """Build a UserResponse from a stored profile."""
    return UserResponse.model_validate(user.model_dump())


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
) -> UserResponse:
    """Get own full profile with a freshly computed completion percentage."""
    user = await refresh_profile_completion(store, user)
    return _user_response(user)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
) -> UserResponse:
    """Update profile (display_name, bio, interested_games, contact_info, avatar_url)."""
    user = await update_profile(store, xp, user, body.model_dump(exclude_unset=True))
    return _user_response(user)


# ---------------------------------------------------------------------------
# Social connections
# ---------------------------------------------------------------------------


@router.get("/me/social-connections", response_model=list[SocialConnectionResponse])
async def get_my_social_connections(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
) -> list[SocialConnectionResponse]:
    """List linked external accounts."""
    connections = await list_social_connections(store, user.id)
    return [SocialConnectionResponse.model_validate(c.model_dump()) for c in connections]


@router.post("/me/social-connections", response_model=SocialConnectionResponse, status_code=201)
async def connect_social_account(
    body: SocialConnectionRequest,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
) -> SocialConnectionResponse:
    """Link an external account (one per provider)."""
    connection = await add_social_connection(
        store, xp, user.id, body.provider, body.provider_id, body.provider_username,
    )
    return SocialConnectionResponse.model_validate(connection.model_dump())


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------


@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_public_user(
    user_id: str,
    store: KVStore = Depends(get_store),
) -> PublicUserResponse:
    """Public profile of any user."""
    profile = await get_profile(store, user_id)
    return PublicUserResponse(**public_profile(profile))
