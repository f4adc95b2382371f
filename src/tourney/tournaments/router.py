"""Tournament API endpoints — 7 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from tourney.auth.dependencies import get_current_user, require_role
from tourney.dependencies import get_xp_service
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store
from tourney.models import Tournament, UserProfile
from tourney.tournaments.schemas import (
    CompleteTournamentRequest,
    CreateTournamentRequest,
    ParticipantResponse,
    TournamentDetailResponse,
    TournamentListResponse,
    TournamentResponse,
    UpdateTournamentRequest,
)
from tourney.tournaments.service import (
    complete_tournament,
    create_tournament,
    get_tournament_detail,
    join_tournament,
    list_tournaments,
    publish_tournament,
    update_tournament,
)

router = APIRouter(prefix="/api/v1/tournaments", tags=["Tournaments"])


def _response(tournament: Tournament) -> TournamentResponse:
    return TournamentResponse.model_validate(tournament.model_dump())


@router.get("", response_model=TournamentListResponse)
async def list_all(
    status: str | None = Query(None),
    game: str | None = Query(None),
    store: KVStore = Depends(get_store),
):
    """List tournaments, newest first."""
    tournaments = await list_tournaments(store, status=status, game=game)
    return TournamentListResponse(
        tournaments=[_response(t) for t in tournaments],
        count=len(tournaments),
    )


@router.post("", response_model=TournamentResponse, status_code=201)
async def create(
    body: CreateTournamentRequest,
    user: UserProfile = Depends(require_role("organizer")),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
):
    """Create a draft tournament (organizers only)."""
    tournament = await create_tournament(store, xp, user, body.model_dump(exclude_none=True))
    return _response(tournament)


@router.get("/{tournament_id}", response_model=TournamentDetailResponse)
async def get_one(tournament_id: str, store: KVStore = Depends(get_store)):
    """Tournament detail with organizer and participants."""
    return TournamentDetailResponse.model_validate(await get_tournament_detail(store, tournament_id))


@router.patch("/{tournament_id}", response_model=TournamentResponse)
async def update(
    tournament_id: str,
    body: UpdateTournamentRequest,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """Edit a tournament (organizer only)."""
    tournament = await update_tournament(store, user.id, tournament_id, body.model_dump(exclude_none=True))
    return _response(tournament)


@router.post("/{tournament_id}/publish", response_model=TournamentResponse)
async def publish(
    tournament_id: str,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """Open registration (organizer only)."""
    return _response(await publish_tournament(store, user.id, tournament_id))


@router.post("/{tournament_id}/join", response_model=ParticipantResponse)
async def join(
    tournament_id: str,
    user: UserProfile = Depends(require_role("gamer")),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
):
    """Register for a published tournament (gamers only)."""
    participant = await join_tournament(store, xp, user, tournament_id)
    return ParticipantResponse.model_validate(participant.model_dump())


@router.post("/{tournament_id}/complete", response_model=TournamentResponse)
async def complete(
    tournament_id: str,
    body: CompleteTournamentRequest | None = None,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
    xp: XPService = Depends(get_xp_service),
):
    """Mark a tournament completed and award participants (organizer only)."""
    placements = body.placements if body else None
    return _response(await complete_tournament(store, xp, user.id, tournament_id, placements))
