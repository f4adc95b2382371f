"""Tournament service — creation, publishing, registration and completion."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from tourney.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tourney.gamification.rules import ActionType
from tourney.kv import KVStore, keys
from tourney.models import Tournament, TournamentParticipant, UserProfile, utcnow
from tourney.notifications.service import create_notification

if TYPE_CHECKING:
    from tourney.gamification.xp_service import XPService

logger = structlog.get_logger()

TOURNAMENT_UPDATE_FIELDS = (
    "name",
    "description",
    "rules",
    "discord_link",
    "prize_pool",
    "banner_url",
    "registration_end",
    "tournament_start",
    "tournament_end",
)

# Statuses from which an organizer may mark a tournament completed
COMPLETABLE_STATUSES = frozenset({"published", "registration_closed", "live"})
ACTIVE_PARTICIPANT_STATUSES = frozenset({"registered", "checked_in"})


async def get_tournament(store: KVStore, tournament_id: str) -> Tournament:
    doc = await store.get(keys.tournament(tournament_id))
    if doc is None:
        raise NotFoundError("Tournament not found")
    return Tournament.model_validate(doc)


async def get_participants(store: KVStore, tournament_id: str) -> list[TournamentParticipant]:
    docs = await store.get_by_prefix(keys.tournament_participants(tournament_id))
    participants = [TournamentParticipant.model_validate(d) for d in docs]
    participants.sort(key=lambda p: p.joined_at)
    return participants


def _require_organizer(tournament: Tournament, user_id: str, action: str) -> None:
    if tournament.organizer_id != user_id:
        raise PermissionDeniedError(f"Only the organizer can {action} this tournament")


async def list_tournaments(
    store: KVStore,
    status: str | None = None,
    game: str | None = None,
) -> list[Tournament]:
    """All tournaments, newest first, optionally filtered by status and game substring."""
    docs = await store.get_by_prefix(keys.TOURNAMENT_PREFIX)
    tournaments = [Tournament.model_validate(d) for d in docs]
    if status:
        tournaments = [t for t in tournaments if t.status == status]
    if game:
        needle = game.lower()
        tournaments = [t for t in tournaments if needle in t.game.lower()]
    tournaments.sort(key=lambda t: t.created_at, reverse=True)
    return tournaments


async def create_tournament(
    store: KVStore,
    xp: XPService,
    organizer: UserProfile,
    data: dict[str, Any],
) -> Tournament:
    """Create a draft tournament and award tournament_create to the organizer."""
    tournament = Tournament.model_validate({**data, "organizer_id": organizer.id, "status": "draft"})
    await store.set(keys.tournament(tournament.id), tournament.to_document())
    logger.info("tournament_created", tournament_id=tournament.id, organizer_id=organizer.id)

    await xp.award_xp(
        organizer.id,
        ActionType.TOURNAMENT_CREATE,
        f"Created tournament: {tournament.name}",
        {"tournament_id": tournament.id},
    )
    return tournament


async def get_tournament_detail(store: KVStore, tournament_id: str) -> dict:
    """Tournament with organizer summary and participant list."""
    tournament = await get_tournament(store, tournament_id)

    organizer_doc = await store.get(keys.user_profile(tournament.organizer_id))
    organizer = None
    if organizer_doc is not None:
        organizer = {
            "id": organizer_doc["id"],
            "display_name": organizer_doc.get("display_name"),
            "avatar_url": organizer_doc.get("avatar_url"),
        }

    participants = await get_participants(store, tournament_id)
    return {
        **tournament.model_dump(),
        "organizer": organizer,
        "participants": [p.model_dump() for p in participants],
        "current_participants": len(participants),
    }


async def update_tournament(
    store: KVStore,
    user_id: str,
    tournament_id: str,
    updates: dict[str, Any],
) -> Tournament:
    """Apply organizer edits to the allowed fields."""
    tournament = await get_tournament(store, tournament_id)
    _require_organizer(tournament, user_id, "update")

    changes = {f: updates[f] for f in TOURNAMENT_UPDATE_FIELDS if f in updates}
    changes["updated_at"] = utcnow()
    tournament = Tournament.model_validate({**tournament.model_dump(), **changes})
    await store.set(keys.tournament(tournament_id), tournament.to_document())
    return tournament


async def publish_tournament(store: KVStore, user_id: str, tournament_id: str) -> Tournament:
    """Open registration."""
    tournament = await get_tournament(store, tournament_id)
    _require_organizer(tournament, user_id, "publish")

    tournament = tournament.model_copy(update={"status": "published", "updated_at": utcnow()})
    await store.set(keys.tournament(tournament_id), tournament.to_document())
    logger.info("tournament_published", tournament_id=tournament_id)
    return tournament


async def join_tournament(
    store: KVStore,
    xp: XPService,
    user: UserProfile,
    tournament_id: str,
) -> TournamentParticipant:
    """
    Register a gamer for a published tournament.

    Raises:
        NotFoundError: Unknown tournament.
        ValidationError: Registration closed, already registered, or full.
    """
    tournament = await get_tournament(store, tournament_id)
    if tournament.status != "published":
        raise ValidationError("Tournament registration is not open")

    participant_key = keys.tournament_participant(tournament_id, user.id)
    if await store.get(participant_key) is not None:
        raise ValidationError("Already registered for this tournament")

    participants = await get_participants(store, tournament_id)
    if len(participants) >= tournament.max_participants:
        raise ValidationError("Tournament is full")

    participant = TournamentParticipant(tournament_id=tournament_id, user_id=user.id)
    await store.set(participant_key, participant.to_document())
    logger.info("tournament_joined", tournament_id=tournament_id, user_id=user.id)

    await xp.award_xp(
        user.id,
        ActionType.TOURNAMENT_JOIN,
        f"Joined tournament: {tournament.name}",
        {"tournament_id": tournament_id},
    )
    await create_notification(
        store,
        user.id,
        "tournament_start",
        "Tournament Registration",
        f"You've successfully registered for {tournament.name}",
        {"tournament_id": tournament_id},
    )
    return participant


async def complete_tournament(
    store: KVStore,
    xp: XPService,
    user_id: str,
    tournament_id: str,
    placements: dict[str, int] | None = None,
) -> Tournament:
    """
    Award tournament_complete to every active participant, then close the tournament.

    placements maps participant user ids to their final placement. Each participant
    is flagged once awarded and the status is written last, so a run that fails
    part way can be repeated without awarding anyone twice.

    Raises:
        PermissionDeniedError: Caller is not the organizer.
        ValidationError: Tournament is not in a completable status.
    """
    tournament = await get_tournament(store, tournament_id)
    _require_organizer(tournament, user_id, "complete")
    if tournament.status not in COMPLETABLE_STATUSES:
        raise ValidationError(f"Tournament cannot be completed from status '{tournament.status}'")

    placements = placements or {}
    awarded = 0
    for participant in await get_participants(store, tournament_id):
        if participant.user_id is None or participant.status not in ACTIVE_PARTICIPANT_STATUSES:
            continue
        if participant.completion_awarded:
            continue
        placement = placements.get(participant.user_id, participant.placement)
        await xp.award_xp(
            participant.user_id,
            ActionType.TOURNAMENT_COMPLETE,
            f"Completed tournament: {tournament.name}",
            {"tournament_id": tournament_id, "placement": placement},
        )
        participant = participant.model_copy(update={"placement": placement, "completion_awarded": True})
        await store.set(
            keys.tournament_participant(tournament_id, participant.user_id),
            participant.to_document(),
        )
        awarded += 1

    now = utcnow()
    tournament = tournament.model_copy(update={
        "status": "completed",
        "tournament_end": tournament.tournament_end or now,
        "updated_at": now,
    })
    await store.set(keys.tournament(tournament_id), tournament.to_document())

    logger.info("tournament_completed", tournament_id=tournament_id, participants_awarded=awarded)
    return tournament
