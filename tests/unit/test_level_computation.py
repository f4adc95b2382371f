"""Level resolution and progress tests."""

import pytest

from tourney.gamification.level_thresholds import compute_level_progress, resolve_level
from tourney.gamification.rules import DEFAULT_LEVEL_THRESHOLDS, LevelThreshold


class TestResolveLevel:
    """Cumulative XP -> level."""

    def test_level_1_at_zero_xp(self):
        assert resolve_level(0) == 1

    def test_level_2_at_100_xp(self):
        assert resolve_level(100) == 2

    def test_level_boundary_99_xp(self):
        """99 XP is still level 1."""
        assert resolve_level(99) == 1

    def test_max_level_exceeded(self):
        """XP beyond max level stays at max level."""
        assert resolve_level(1_000_000) == 10

    @pytest.mark.parametrize(
        "xp,expected_level",
        [
            (0, 1),
            (100, 2),
            (250, 3),
            (500, 4),
            (1000, 5),
            (1650, 6),
            (2500, 7),
            (3600, 8),
            (5000, 9),
            (6800, 10),
        ],
    )
    def test_all_level_boundaries(self, xp, expected_level):
        assert resolve_level(xp) == expected_level

    @pytest.mark.parametrize(
        "xp,expected_level",
        [
            (99, 1),
            (249, 2),
            (499, 3),
            (999, 4),
            (1649, 5),
            (2499, 6),
            (3599, 7),
            (4999, 8),
            (6799, 9),
        ],
    )
    def test_all_level_just_below_boundaries(self, xp, expected_level):
        """XP just below each boundary stays at the previous level."""
        assert resolve_level(xp) == expected_level

    def test_monotonic_non_decreasing(self):
        levels = [resolve_level(xp) for xp in range(0, 8000, 7)]
        assert levels == sorted(levels)

    def test_custom_table(self):
        table = (LevelThreshold(1, 0), LevelThreshold(2, 10), LevelThreshold(3, 20))
        assert resolve_level(9, table) == 1
        assert resolve_level(15, table) == 2
        assert resolve_level(500, table) == 3

    def test_thresholds_are_sorted(self):
        for prev, cur in zip(DEFAULT_LEVEL_THRESHOLDS, DEFAULT_LEVEL_THRESHOLDS[1:]):
            assert prev.xp < cur.xp
            assert prev.level < cur.level


class TestLevelProgress:
    """Progress towards the next level."""

    def test_progress_mid_level(self):
        result = compute_level_progress(175, 2)  # 75 of 150 XP into level 2
        assert result == {
            "current_level": 2,
            "current_xp": 175,
            "current_level_xp": 100,
            "next_level_xp": 250,
            "xp_to_next_level": 75,
            "percentage": 50.0,
        }

    def test_progress_at_boundary(self):
        result = compute_level_progress(100, 2)
        assert result["percentage"] == 0.0
        assert result["xp_to_next_level"] == 150

    def test_progress_at_max_level(self):
        """At max level there is no next level."""
        result = compute_level_progress(9000, 10)
        assert result["next_level_xp"] == 9000
        assert result["xp_to_next_level"] == 0
        assert result["percentage"] == 100.0

    def test_return_shape(self):
        result = compute_level_progress(0, 1)
        assert set(result.keys()) == {
            "current_level",
            "current_xp",
            "current_level_xp",
            "next_level_xp",
            "xp_to_next_level",
            "percentage",
        }
