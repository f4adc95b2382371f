"""XP leaderboard built from a scan of all profiles."""

from __future__ import annotations

from tourney.kv import KVStore, keys
from tourney.models import UserProfile


async def build_leaderboard(store: KVStore, limit: int = 100) -> list[dict]:
    """Top non-banned profiles by total XP, ranked from 1."""
    docs = await store.get_by_prefix(keys.USER_PROFILE_PREFIX)
    profiles = [UserProfile.model_validate(d) for d in docs]
    ranked = sorted(
        (p for p in profiles if not p.is_banned),
        key=lambda p: p.total_xp,
        reverse=True,
    )[:limit]

    return [
        {
            "rank": i + 1,
            "id": p.id,
            "display_name": p.display_name,
            "avatar_url": p.avatar_url,
            "level": p.level,
            "total_xp": p.total_xp,
            "role": p.role,
        }
        for i, p in enumerate(ranked)
    ]
