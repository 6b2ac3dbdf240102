"""Tests for GamificationManager - profile bookkeeping and events.

Uses a MagicMock coordinator so profile math is checked without storage.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

import pytest

from custom_components.plantcare import const
from custom_components.plantcare.data_builders import (
    build_default_achievements,
    build_profile,
)
from custom_components.plantcare.managers.gamification_manager import (
    GamificationManager,
)

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_coordinator() -> MagicMock:
    """Return a coordinator stand-in holding plain profile data."""
    coordinator = MagicMock()
    coordinator.config_entry.entry_id = "test_entry_id"
    coordinator.profile_data = dict(build_profile("Robin", now=T0))
    coordinator.achievements_data = {
        achievement_id: dict(achievement)
        for achievement_id, achievement in build_default_achievements().items()
    }
    coordinator.plants_data = {}
    return coordinator


@pytest.fixture
def manager(mock_coordinator: MagicMock) -> GamificationManager:
    """Return a GamificationManager with emit captured."""
    gamification = GamificationManager(MagicMock(), mock_coordinator)
    gamification.emit = MagicMock()
    return gamification


def emitted(manager: GamificationManager) -> list[tuple[str, dict[str, Any]]]:
    """Return (suffix, payload) for every emit call."""
    return [(call.args[0], call.kwargs) for call in manager.emit.call_args_list]


class TestApplyTaskCompletion:
    """XP, level, streak and counters."""

    def test_first_completion(self, manager: GamificationManager) -> None:
        """The first completion starts a one-day streak."""
        update = manager.apply_task_completion(25, T0)
        profile = manager.coordinator.profile_data

        assert update["old_xp"] == 0
        assert update["new_xp"] == 25
        assert profile[const.DATA_PROFILE_TOTAL_XP] == 25
        assert profile[const.DATA_PROFILE_STREAK_DAYS] == 1
        assert profile[const.DATA_PROFILE_CURRENT_STREAK] == 1
        assert profile[const.DATA_PROFILE_TASKS_COMPLETED] == 1
        assert profile[const.DATA_PROFILE_LAST_ACTIVE_DATE] == T0.isoformat()

    def test_level_up_emits(self, manager: GamificationManager) -> None:
        """Crossing a level boundary emits xp_changed then level_up."""
        manager.coordinator.profile_data[const.DATA_PROFILE_XP] = 80

        update = manager.apply_task_completion(25, T0)
        manager.emit_update(update)

        assert manager.coordinator.profile_data[const.DATA_PROFILE_LEVEL] == 2
        assert emitted(manager) == [
            (
                const.SIGNAL_SUFFIX_XP_CHANGED,
                {"old_xp": 80, "new_xp": 105, "delta": 25},
            ),
            (
                const.SIGNAL_SUFFIX_LEVEL_UP,
                {"old_level": 1, "new_level": 2, "level_name": "Sprout"},
            ),
        ]

    def test_seven_day_streak_unlocks_hydration_hero(
        self, manager: GamificationManager
    ) -> None:
        """Seven consecutive days unlock Hydration Hero exactly once."""
        unlocked: list[str] = []
        for day in range(8):
            update = manager.apply_task_completion(25, T0 + timedelta(days=day))
            unlocked.extend(update["unlocked_achievements"])

        assert unlocked.count(const.ACHIEVEMENT_HYDRATION_HERO) == 1
        hero = manager.coordinator.achievements_data[const.ACHIEVEMENT_HYDRATION_HERO]
        assert hero[const.DATA_ACHIEVEMENT_UNLOCKED_AT] == (T0 + timedelta(days=6)).isoformat()
        assert manager.coordinator.profile_data[const.DATA_PROFILE_LONGEST_STREAK] == 8


class TestPlantAdded:
    """Plant counter and plant-count achievements."""

    def test_count_uses_current_plants(self, manager: GamificationManager) -> None:
        """The unlock threshold reads the plants present after the add."""
        manager.coordinator.plants_data = {f"p{i}": {} for i in range(10)}

        unlocked = manager.apply_plant_added(T0)
        manager.emit_unlocked(unlocked)

        assert set(unlocked) == {
            const.ACHIEVEMENT_FIRST_BLOOM,
            const.ACHIEVEMENT_JUNGLE_KING,
        }
        assert manager.coordinator.profile_data[const.DATA_PROFILE_TOTAL_PLANTS_ADDED] == 1
        assert [suffix for suffix, _ in emitted(manager)] == [
            const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED
        ] * 2

    def test_plant_added_ignores_streak_criteria(
        self, manager: GamificationManager
    ) -> None:
        """Adding a plant never evaluates streak achievements."""
        manager.coordinator.profile_data[const.DATA_PROFILE_STREAK_DAYS] = 30
        assert manager.apply_plant_added(T0) == []


def test_unlocked_sorted_oldest_first(manager: GamificationManager) -> None:
    """get_unlocked_achievements orders by unlock time."""
    achievements = manager.coordinator.achievements_data
    achievements[const.ACHIEVEMENT_GREEN_THUMB][const.DATA_ACHIEVEMENT_UNLOCKED_AT] = (
        T0.isoformat()
    )
    achievements[const.ACHIEVEMENT_FIRST_BLOOM][const.DATA_ACHIEVEMENT_UNLOCKED_AT] = (
        (T0 - timedelta(days=3)).isoformat()
    )

    assert [
        a[const.DATA_ACHIEVEMENT_ID] for a in manager.get_unlocked_achievements()
    ] == [const.ACHIEVEMENT_FIRST_BLOOM, const.ACHIEVEMENT_GREEN_THUMB]
