"""Unit tests for the XP leaderboard."""

from __future__ import annotations

import pytest

from tourney.gamification.leaderboard import build_leaderboard

pytestmark = pytest.mark.asyncio


class TestLeaderboardRanking:
    """Ranking over stored profiles."""

    async def test_highest_total_first(self, store, make_profile):
        await make_profile("u1", display_name="Low", total_xp=1000, level=5)
        await make_profile("u2", display_name="High", total_xp=5000, level=9)
        await make_profile("u3", display_name="Mid", total_xp=3000, level=7)

        entries = await build_leaderboard(store)

        assert [e["id"] for e in entries] == ["u2", "u3", "u1"]
        assert [e["rank"] for e in entries] == [1, 2, 3]
        assert entries[0]["display_name"] == "High"
        assert entries[0]["level"] == 9

    async def test_banned_users_excluded(self, store, make_profile):
        await make_profile("u1", total_xp=100)
        await make_profile("cheater", total_xp=99999, is_banned=True)

        entries = await build_leaderboard(store)

        assert [e["id"] for e in entries] == ["u1"]
        assert entries[0]["rank"] == 1

    async def test_limit(self, store, make_profile):
        for i in range(10):
            await make_profile(f"u{i}", total_xp=i * 100)

        entries = await build_leaderboard(store, limit=3)

        assert [e["id"] for e in entries] == ["u9", "u8", "u7"]

    async def test_empty_store(self, store):
        assert await build_leaderboard(store) == []

    async def test_other_documents_ignored(self, store, make_profile):
        await make_profile("u1", total_xp=10)
        await store.set("tournament:t1", {"id": "t1", "name": "Cup"})

        entries = await build_leaderboard(store)

        assert len(entries) == 1

    async def test_entry_has_no_private_fields(self, store, make_profile):
        await make_profile("u1", email="player@example.com", contact_info={"discord": "p#1"})

        entry = (await build_leaderboard(store))[0]

        assert "email" not in entry
        assert "contact_info" not in entry
