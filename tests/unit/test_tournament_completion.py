"""Tournament completion: awards are applied before the status closes."""

from __future__ import annotations

import pytest

from tourney.exceptions import StoreError
from tourney.gamification.xp_service import XPService, get_xp_history
from tourney.kv import keys
from tourney.models import Tournament, TournamentParticipant
from tourney.tournaments.service import complete_tournament, get_participants, get_tournament


class FailOnceXPService(XPService):
    """XP service whose first award raises a store failure."""

    def __init__(self, store) -> None:
        super().__init__(store)
        self.calls = 0

    async def award_xp(self, *args, **kwargs):
        self.calls += 1
        if self.calls == 1:
            raise StoreError("Failed to write profile: connection reset")
        return await super().award_xp(*args, **kwargs)


@pytest.fixture
def published_tournament(store, make_profile):
    """Organizer, two registered gamers and a published tournament."""

    async def _make() -> tuple[Tournament, list[str]]:
        organizer = await make_profile(role="organizer")
        gamers = [await make_profile() for _ in range(2)]
        tournament = Tournament(organizer_id=organizer.id, name="Cup", game="Valorant", status="published")
        await store.set(keys.tournament(tournament.id), tournament.to_document())
        for gamer in gamers:
            participant = TournamentParticipant(tournament_id=tournament.id, user_id=gamer.id)
            await store.set(keys.tournament_participant(tournament.id, gamer.id), participant.to_document())
        return tournament, [g.id for g in gamers]

    return _make


class TestCompleteTournament:
    async def test_awards_every_participant(self, store, xp_service, published_tournament):
        tournament, gamer_ids = await published_tournament()

        result = await complete_tournament(
            store, xp_service, tournament.organizer_id, tournament.id, {gamer_ids[0]: 1},
        )

        assert result.status == "completed"
        for gamer_id in gamer_ids:
            assert [t.xp_amount for t in await get_xp_history(store, gamer_id)] == [500]
        participants = {p.user_id: p for p in await get_participants(store, tournament.id)}
        assert participants[gamer_ids[0]].placement == 1
        assert all(p.completion_awarded for p in participants.values())

    async def test_failed_award_leaves_tournament_open_for_retry(self, store, published_tournament):
        tournament, gamer_ids = await published_tournament()
        xp = FailOnceXPService(store)

        with pytest.raises(StoreError):
            await complete_tournament(store, xp, tournament.organizer_id, tournament.id)

        assert (await get_tournament(store, tournament.id)).status == "published"

        result = await complete_tournament(store, xp, tournament.organizer_id, tournament.id)

        assert result.status == "completed"
        for gamer_id in gamer_ids:
            assert len(await get_xp_history(store, gamer_id)) == 1

    async def test_retry_skips_participants_already_awarded(self, store, xp_service, published_tournament):
        tournament, gamer_ids = await published_tournament()
        key = keys.tournament_participant(tournament.id, gamer_ids[0])
        await store.set(key, {**await store.get(key), "completion_awarded": True})

        await complete_tournament(store, xp_service, tournament.organizer_id, tournament.id)

        assert await get_xp_history(store, gamer_ids[0]) == []
        assert len(await get_xp_history(store, gamer_ids[1])) == 1
