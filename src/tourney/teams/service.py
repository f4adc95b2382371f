"""Team service — creation, membership and member enrichment."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from tourney.exceptions import NotFoundError, ValidationError
from tourney.gamification.rules import ActionType
from tourney.kv import KVStore, keys
from tourney.models import Team, TeamMember, UserProfile

if TYPE_CHECKING:
    from tourney.gamification.xp_service import XPService

logger = structlog.get_logger()


async def get_team(store: KVStore, team_id: str) -> Team:
    doc = await store.get(keys.team(team_id))
    if doc is None:
        raise NotFoundError("Team not found")
    return Team.model_validate(doc)


async def create_team(
    store: KVStore,
    xp: XPService,
    owner: UserProfile,
    data: dict[str, Any],
) -> Team:
    """Create a team, add the creator as owner, award team_create."""
    team = Team.model_validate({**data, "owner_id": owner.id})
    await store.set(keys.team(team.id), team.to_document())

    member = TeamMember(team_id=team.id, user_id=owner.id, role="owner")
    await store.set(keys.team_member(team.id, owner.id), member.to_document())
    logger.info("team_created", team_id=team.id, owner_id=owner.id)

    await xp.award_xp(
        owner.id,
        ActionType.TEAM_CREATE,
        f"Created team: {team.name}",
        {"team_id": team.id},
    )
    return team


async def join_team(
    store: KVStore,
    xp: XPService,
    user: UserProfile,
    team_id: str,
) -> TeamMember:
    """
    Add a user to a team as a member and award team_join.

    Raises:
        NotFoundError: Unknown team.
        ValidationError: Already a member.
    """
    team = await get_team(store, team_id)
    member_key = keys.team_member(team_id, user.id)
    if await store.get(member_key) is not None:
        raise ValidationError("Already a member of this team")

    member = TeamMember(team_id=team_id, user_id=user.id, role="member")
    await store.set(member_key, member.to_document())
    logger.info("team_joined", team_id=team_id, user_id=user.id)

    await xp.award_xp(
        user.id,
        ActionType.TEAM_JOIN,
        f"Joined team: {team.name}",
        {"team_id": team_id},
    )
    return member


async def get_team_detail(store: KVStore, team_id: str) -> dict:
    """Team with members, each enriched with a profile summary."""
    team = await get_team(store, team_id)

    docs = await store.get_by_prefix(keys.team_members(team_id))
    members = sorted((TeamMember.model_validate(d) for d in docs), key=lambda m: m.joined_at)

    enriched = []
    for member in members:
        profile = await store.get(keys.user_profile(member.user_id))
        enriched.append({
            **member.model_dump(),
            "user": {
                "id": profile["id"],
                "display_name": profile.get("display_name"),
                "avatar_url": profile.get("avatar_url"),
                "level": profile.get("level") or 1,
            } if profile else None,
        })

    return {**team.model_dump(), "members": enriched}
