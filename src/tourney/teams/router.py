"""Team API endpoints — 3 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tourney.auth.dependencies import get_current_user
from tourney.dependencies import get_xp_service
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store
from tourney.models import UserProfile
from tourney.teams.schemas import CreateTeamRequest, TeamDetailResponse, TeamMemberResponse, TeamResponse
from tourney.teams.service import create_team, get_team_detail, join_team

router = APIRouter(prefix="/api/v1/teams", tags=["Teams"])


@router.post("", response_model=TeamResponse, status_code=201)
async def create(
    body: CreateTeamRequest,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
):
    """Create a team owned by the caller."""
    team = await create_team(store, xp, user, body.model_dump(exclude_none=True))
    return TeamResponse.model_validate(team.model_dump())


@router.get("/{team_id}", response_model=TeamDetailResponse)
async def get_one(team_id: str, store: KVStore = Depends(get_store)):
    """Team detail with members."""
    return TeamDetailResponse.model_validate(await get_team_detail(store, team_id))


@router.post("/{team_id}/join", response_model=TeamMemberResponse)
async def join(
    team_id: str,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
):
    """Join a team as a member."""
    member = await join_team(store, xp, user, team_id)
    return TeamMemberResponse.model_validate(member.model_dump())
