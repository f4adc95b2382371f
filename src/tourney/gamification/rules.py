"""XP rule table and level threshold table.

Both tables are immutable and handed to XPService at construction;
DEFAULT_RULES is what the application wires in.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class ActionType(StrEnum):
    """Every user action that can earn XP."""

    ACCOUNT_CREATED = "account_created"
    PROFILE_AVATAR = "profile_avatar"
    PROFILE_BIO = "profile_bio"
    PROFILE_GAMES = "profile_games"
    PROFILE_CONTACT = "profile_contact"
    SOCIAL_CONNECT = "social_connect"
    TOURNAMENT_CREATE = "tournament_create"
    TOURNAMENT_JOIN = "tournament_join"
    TOURNAMENT_COMPLETE = "tournament_complete"
    TEAM_CREATE = "team_create"
    TEAM_JOIN = "team_join"


@dataclass(frozen=True)
class LevelThreshold:
    level: int
    xp: int


@dataclass(frozen=True)
class GamificationRules:
    """XP amounts per action type and the cumulative XP needed for each level."""

    xp_rules: Mapping[str, int]
    level_thresholds: tuple[LevelThreshold, ...]
    max_level: int = field(init=False)

    def __post_init__(self) -> None:
        thresholds = tuple(self.level_thresholds)
        if not thresholds:
            msg = "Level threshold table must not be empty"
            raise ValueError(msg)
        if thresholds[0].level != 1 or thresholds[0].xp != 0:
            msg = "Level threshold table must start at level 1 with 0 XP"
            raise ValueError(msg)
        for prev, cur in zip(thresholds, thresholds[1:]):
            if cur.level <= prev.level or cur.xp <= prev.xp:
                msg = f"Level thresholds must be strictly increasing (level {prev.level} -> {cur.level})"
                raise ValueError(msg)
        for action, amount in self.xp_rules.items():
            if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
                msg = f"XP rule for {action!r} must be a non-negative integer, got {amount!r}"
                raise ValueError(msg)

        object.__setattr__(self, "xp_rules", MappingProxyType({str(k): v for k, v in self.xp_rules.items()}))
        object.__setattr__(self, "level_thresholds", thresholds)
        object.__setattr__(self, "max_level", thresholds[-1].level)

    def xp_for(self, action_type: str) -> int:
        """XP awarded for an action. Unknown actions award nothing."""
        return self.xp_rules.get(str(action_type), 0)


DEFAULT_XP_RULES: dict[str, int] = {
    ActionType.ACCOUNT_CREATED: 50,
    ActionType.PROFILE_AVATAR: 100,
    ActionType.PROFILE_BIO: 50,
    ActionType.PROFILE_GAMES: 50,
    ActionType.PROFILE_CONTACT: 75,
    ActionType.SOCIAL_CONNECT: 150,
    ActionType.TOURNAMENT_CREATE: 200,
    ActionType.TOURNAMENT_JOIN: 100,
    ActionType.TOURNAMENT_COMPLETE: 500,
    ActionType.TEAM_CREATE: 150,
    ActionType.TEAM_JOIN: 75,
}

DEFAULT_LEVEL_THRESHOLDS: tuple[LevelThreshold, ...] = (
    LevelThreshold(1, 0),
    LevelThreshold(2, 100),
    LevelThreshold(3, 250),
    LevelThreshold(4, 500),
    LevelThreshold(5, 1000),
    LevelThreshold(6, 1650),
    LevelThreshold(7, 2500),
    LevelThreshold(8, 3600),
    LevelThreshold(9, 5000),
    LevelThreshold(10, 6800),
)

DEFAULT_RULES = GamificationRules(
    xp_rules=DEFAULT_XP_RULES,
    level_thresholds=DEFAULT_LEVEL_THRESHOLDS,
)
