"""Store key naming. These formats are shared with existing persisted data."""

from __future__ import annotations

USER_PROFILE_PREFIX = "user_profile:"
TOURNAMENT_PREFIX = "tournament:"


def user_profile(user_id: str) -> str:
    return f"user_profile:{user_id}"


def xp_transaction(user_id: str, transaction_id: str) -> str:
    return f"xp_transaction:{user_id}:{transaction_id}"


def xp_transactions(user_id: str) -> str:
    return f"xp_transaction:{user_id}:"


def notification(user_id: str, notification_id: str) -> str:
    return f"notification:{user_id}:{notification_id}"


def notifications(user_id: str) -> str:
    return f"notification:{user_id}:"


def social_connection(user_id: str, connection_id: str) -> str:
    return f"social_connection:{user_id}:{connection_id}"


def social_connections(user_id: str) -> str:
    return f"social_connection:{user_id}:"


def tournament(tournament_id: str) -> str:
    return f"tournament:{tournament_id}"


def tournament_participant(tournament_id: str, user_id: str) -> str:
    return f"tournament_participant:{tournament_id}:{user_id}"


def tournament_participants(tournament_id: str) -> str:
    return f"tournament_participant:{tournament_id}:"


def team(team_id: str) -> str:
    return f"team:{team_id}"


def team_member(team_id: str, user_id: str) -> str:
    return f"team_member:{team_id}:{user_id}"


def team_members(team_id: str) -> str:
    return f"team_member:{team_id}:"
