"""Level resolution and progress from cumulative XP."""

from __future__ import annotations

from collections.abc import Sequence

from tourney.gamification.rules import DEFAULT_LEVEL_THRESHOLDS, LevelThreshold


def resolve_level(
    total_xp: int,
    thresholds: Sequence[LevelThreshold] = DEFAULT_LEVEL_THRESHOLDS,
) -> int:
    """Highest level whose threshold is at or below total_xp.

    The last threshold is the ceiling: XP beyond it does not level further.
    """
    for threshold in reversed(thresholds):
        if total_xp >= threshold.xp:
            return threshold.level
    return 1


def compute_level_progress(
    total_xp: int,
    level: int,
    thresholds: Sequence[LevelThreshold] = DEFAULT_LEVEL_THRESHOLDS,
) -> dict:
    """Progress of a profile towards its next level.

    At the maximum level there is no next threshold, so progress reads 100%.
    """
    by_level = {t.level: t for t in thresholds}
    current = by_level.get(level)
    current_level_xp = current.xp if current else 0
    next_threshold = next((t for t in thresholds if t.level > level), None)

    if next_threshold is None:
        return {
            "current_level": level,
            "current_xp": total_xp,
            "current_level_xp": current_level_xp,
            "next_level_xp": total_xp,
            "xp_to_next_level": 0,
            "percentage": 100.0,
        }

    span = next_threshold.xp - current_level_xp
    percentage = (total_xp - current_level_xp) / span * 100 if span > 0 else 100.0
    return {
        "current_level": level,
        "current_xp": total_xp,
        "current_level_xp": current_level_xp,
        "next_level_xp": next_threshold.xp,
        "xp_to_next_level": max(next_threshold.xp - total_xp, 0),
        "percentage": round(min(max(percentage, 0.0), 100.0), 2),
    }
