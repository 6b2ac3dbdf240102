"""Unit tests for ScheduleEngine - due dates, streaks and suggestions.

Pure Python tests; timestamps are fixed so nothing depends on wall time.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from custom_components.plantcare import const
from custom_components.plantcare.engines.schedule_engine import ScheduleEngine
from custom_components.plantcare.utils.dt_utils import days_between

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def make_plant(**overrides: Any) -> dict[str, Any]:
    """Build a minimal stored plant."""
    plant: dict[str, Any] = {
        const.DATA_PLANT_ID: "plant-1",
        const.DATA_PLANT_NICKNAME: "Fernando",
        const.DATA_PLANT_WATERING_FREQUENCY: 7,
        const.DATA_PLANT_MISTING_FREQUENCY: 3,
        const.DATA_PLANT_FERTILIZING_FREQUENCY: 30,
        const.DATA_PLANT_ROTATING_FREQUENCY: 14,
        const.DATA_PLANT_HEALTH_SCORE: 80,
        const.DATA_PLANT_CARE_HISTORY: [],
    }
    plant.update(overrides)
    return plant


def make_task(due: datetime, *, completed: bool = False, **overrides: Any) -> dict[str, Any]:
    """Build a minimal stored care task."""
    task: dict[str, Any] = {
        const.DATA_TASK_ID: "task-1",
        const.DATA_TASK_PLANT_ID: "plant-1",
        const.DATA_TASK_TYPE: "water",
        const.DATA_TASK_DUE_DATE: due.isoformat(),
        const.DATA_TASK_COMPLETED: completed,
        const.DATA_TASK_COMPLETED_DATE: None,
    }
    task.update(overrides)
    return task


def water_log(when: datetime, note: str | None = None) -> dict[str, Any]:
    """Build a water care event."""
    return {
        const.DATA_CARE_EVENT_TYPE: "water",
        const.DATA_CARE_EVENT_DATE: when.isoformat(),
        const.DATA_CARE_EVENT_NOTE: note,
    }


class TestFrequencies:
    """Frequency lookup and next-due arithmetic."""

    def test_reads_plant_field(self) -> None:
        """Each action reads its own frequency field."""
        plant = make_plant()
        assert ScheduleEngine.get_frequency_days(plant, "water") == 7
        assert ScheduleEngine.get_frequency_days(plant, "mist") == 3
        assert ScheduleEngine.get_frequency_days(plant, "fertilize") == 30

    def test_missing_field_uses_default(self) -> None:
        """A plant without a rotate frequency falls back to 14 days."""
        plant = make_plant()
        del plant[const.DATA_PLANT_ROTATING_FREQUENCY]
        assert ScheduleEngine.get_frequency_days(plant, "rotate") == 14

    @pytest.mark.parametrize("bad", [0, -3, 2.5, True, "7"])
    def test_invalid_stored_frequency(self, bad: Any) -> None:
        """Zero, negative, fractional, boolean and string values are rejected."""
        with pytest.raises(ValueError):
            ScheduleEngine.get_frequency_days(
                make_plant(**{const.DATA_PLANT_WATERING_FREQUENCY: bad}), "water"
            )

    def test_next_due_restarts_from_completion(self) -> None:
        """Next due is the completion time plus the frequency."""
        completed_late = T0 + timedelta(days=9)
        assert ScheduleEngine.next_due_date(completed_late, 7) == T0 + timedelta(days=16)

    def test_next_due_rejects_non_positive(self) -> None:
        """A zero interval would loop forever and is rejected."""
        with pytest.raises(ValueError):
            ScheduleEngine.next_due_date(T0, 0)


class TestSnooze:
    """Snooze shifts from the later of due date and now."""

    def test_future_task(self) -> None:
        """A task not yet due moves by exactly ``days``."""
        due = T0 + timedelta(days=7)
        assert ScheduleEngine.snooze_due_date(due.isoformat(), 2, T0) == due + timedelta(days=2)

    def test_overdue_task_counts_from_now(self) -> None:
        """An overdue task lands ``days`` after now."""
        due = T0 - timedelta(days=3)
        assert ScheduleEngine.snooze_due_date(due, 2, T0) == T0 + timedelta(days=2)

    def test_rejects_non_positive(self) -> None:
        """Snoozing by zero days is an error."""
        with pytest.raises(ValueError):
            ScheduleEngine.snooze_due_date(T0, 0, T0)


class TestTaskPredicates:
    """Due, overdue and completed-on checks."""

    def test_due_today_is_not_overdue(self) -> None:
        """A task due earlier today is due, not overdue."""
        task = make_task(T0 - timedelta(hours=2))
        assert ScheduleEngine.is_due_on(task, T0.date())
        assert not ScheduleEngine.is_overdue(task, T0)

    def test_due_yesterday_is_overdue(self) -> None:
        """A task due on a previous day is overdue."""
        assert ScheduleEngine.is_overdue(make_task(T0 - timedelta(days=1)), T0)

    def test_completed_tasks_are_never_due(self) -> None:
        """Completed tasks drop out of due and overdue checks."""
        task = make_task(
            T0 - timedelta(days=1),
            completed=True,
            **{const.DATA_TASK_COMPLETED_DATE: T0.isoformat()},
        )
        assert not ScheduleEngine.is_overdue(task, T0)
        assert not ScheduleEngine.is_due_on(task, (T0 - timedelta(days=1)).date())
        assert ScheduleEngine.is_completed_on(task, T0.date())


class TestStreak:
    """Daily streak continuity by local calendar day."""

    def test_first_activity_starts_at_one(self) -> None:
        """No previous activity starts a one-day streak."""
        assert ScheduleEngine.calculate_streak(0, None, T0)["streak_days"] == 1

    def test_consecutive_then_gap(self) -> None:
        """Next day extends the streak; a gap of several days resets it."""
        day_one = ScheduleEngine.calculate_streak(5, T0.isoformat(), T0 + timedelta(days=1))
        assert day_one["streak_days"] == 6
        assert day_one["continued"] is True

        after_gap = ScheduleEngine.calculate_streak(
            6, (T0 + timedelta(days=1)).isoformat(), T0 + timedelta(days=5)
        )
        assert after_gap["streak_days"] == 1
        assert after_gap["reset"] is True

    def test_same_day_keeps_streak(self) -> None:
        """A second completion on the same day does not change the streak."""
        result = ScheduleEngine.calculate_streak(4, T0.isoformat(), T0 + timedelta(hours=3))
        assert result["streak_days"] == 4
        assert result["days_since_active"] == 0

    def test_same_day_with_zero_streak_becomes_one(self) -> None:
        """Activity today always means at least a one-day streak."""
        assert ScheduleEngine.calculate_streak(0, T0.isoformat(), T0)["streak_days"] == 1

    def test_short_gap_across_midnight_counts(self) -> None:
        """23:59 then 00:01 is consecutive even though only minutes passed."""
        late = datetime(2026, 3, 10, 23, 59, tzinfo=UTC)
        early = datetime(2026, 3, 11, 0, 1, tzinfo=UTC)
        assert ScheduleEngine.calculate_streak(2, late.isoformat(), early)["streak_days"] == 3

    def test_long_next_day_gap_still_continues(self) -> None:
        """36 hours spanning one midnight continues although days_between is 2."""
        morning = datetime(2026, 3, 9, 8, 0, tzinfo=UTC)
        next_evening = datetime(2026, 3, 10, 20, 0, tzinfo=UTC)

        assert days_between(morning, next_evening) == 2
        result = ScheduleEngine.calculate_streak(
            2, morning.isoformat(), next_evening
        )
        assert result["streak_days"] == 3
        assert result["days_since_active"] == 1


class TestSuggestions:
    """Watering schedule suggestions."""

    def test_winter_dormancy(self) -> None:
        """In January a 7-day schedule is nudged to 10 days."""
        january = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)
        suggestions = ScheduleEngine.suggest_schedule_adjustments(make_plant(), january)
        assert [s["id"] for s in suggestions] == [const.SUGGESTION_WINTER_DORMANCY]
        assert suggestions[0]["suggested"] == 10

    def test_thirsty_notes(self) -> None:
        """Two thirsty notes shorten watering by two days."""
        plant = make_plant(
            **{
                const.DATA_PLANT_CARE_HISTORY: [
                    water_log(T0 - timedelta(days=20), "Looked thirsty"),
                    water_log(T0 - timedelta(days=13), "very THIRSTY again"),
                ]
            }
        )
        suggestions = ScheduleEngine.suggest_schedule_adjustments(plant, T0)
        more_water = [s for s in suggestions if s["id"] == const.SUGGESTION_MORE_WATER]
        assert more_water, "thirsty notes should produce a suggestion"
        assert more_water[0]["suggested"] == 5

    def test_historical_tune(self) -> None:
        """Watering every ~4 days on a 7-day schedule suggests 4."""
        plant = make_plant(
            **{
                const.DATA_PLANT_CARE_HISTORY: [
                    water_log(T0 - timedelta(days=8)),
                    water_log(T0 - timedelta(days=4)),
                    water_log(T0),
                ]
            }
        )
        suggestions = ScheduleEngine.suggest_schedule_adjustments(plant, T0)
        assert [s["id"] for s in suggestions] == [const.SUGGESTION_HISTORICAL_TUNE]
        assert suggestions[0]["suggested"] == 4

    def test_perfect_balance(self) -> None:
        """A healthy plant with a long on-schedule history keeps its schedule."""
        history = [water_log(T0 - timedelta(days=7 * n)) for n in range(6, 0, -1)]
        plant = make_plant(
            **{
                const.DATA_PLANT_HEALTH_SCORE: 98,
                const.DATA_PLANT_CARE_HISTORY: history,
            }
        )
        suggestions = ScheduleEngine.suggest_schedule_adjustments(plant, T0)
        assert [s["id"] for s in suggestions] == [const.SUGGESTION_PERFECT_BALANCE]

    def test_no_history_no_suggestions(self) -> None:
        """A new plant outside winter gets nothing."""
        assert ScheduleEngine.suggest_schedule_adjustments(make_plant(), T0) == []
