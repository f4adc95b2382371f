"""Authentication router — /api/v1/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from tourney.auth.identity import IdentityProvider, get_identity_provider
from tourney.dependencies import get_xp_service
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store
from tourney.users.schemas import SignupRequest, UserResponse
from tourney.users.service import signup

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserResponse, status_code=201)
async def signup_endpoint(
    body: SignupRequest,
    store: KVStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity_provider),
    xp: XPService = Depends(get_xp_service),
) -> UserResponse:
    """Create an account with the identity provider and its gamer/organizer profile."""
    profile = await signup(
        store,
        identity,
        xp,
        email=body.email,
        password=body.password,
        role=body.role,
        display_name=body.display_name,
    )
    return UserResponse.model_validate(profile.model_dump())
