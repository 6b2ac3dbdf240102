"""Schedule Engine - Pure logic for care task timing and streaks.

Answers every "when" question the integration asks:
- How often a plant needs a given care action (frequency table lookup)
- When the next occurrence is due after a completion or snooze
- Whether a task is due on a date, overdue, or completed on a date
- How a completion moves the daily care streak
- Which frequency changes the care history suggests

All methods are static. Timestamps are accepted as ISO strings or aware
datetimes and compared in UTC; "calendar day" questions use the local
timezone configured in dt_utils.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    as_local,
    calendar_days_between,
    dt_add_days,
    dt_to_utc,
)
from ..utils.math_utils import average_interval_days

if TYPE_CHECKING:
    from ..type_defs import ScheduleSuggestion, StreakUpdate


class ScheduleEngine:
    """Stateless calculator for due dates, streaks and schedule suggestions."""

    # =========================================================================
    # Frequencies and due dates
    # =========================================================================

    @staticmethod
    def get_frequency_days(plant: dict[str, Any], action: str) -> int:
        """Return the configured interval in days for ``action`` on ``plant``.

        Raises:
            ValueError: If the action is unknown or the stored frequency is not
                a positive integer.
        """
        spec = const.CARE_ACTIONS[const.CareAction(action)]
        frequency = plant.get(spec.frequency_field, spec.default_frequency_days)
        if isinstance(frequency, bool) or not isinstance(frequency, int):
            raise ValueError(f"Frequency for {action} must be an integer")
        if frequency <= 0:
            raise ValueError(f"Frequency for {action} must be positive")
        return frequency

    @staticmethod
    def next_due_date(base: str | datetime, frequency_days: int) -> datetime:
        """Return ``base`` advanced by ``frequency_days`` (UTC).

        The base is the completion (or creation) time, so a task completed
        late or early always restarts the interval from that moment.
        """
        if frequency_days <= 0:
            raise ValueError("frequency_days must be positive")
        result = dt_add_days(base, frequency_days)
        if result is None:
            raise ValueError(f"Cannot schedule from {base!r}")
        return result

    @staticmethod
    def snooze_due_date(
        current_due: str | datetime, days: int, now: datetime
    ) -> datetime:
        """Shift a due date forward by ``days``.

        Counting starts from the later of the current due date and ``now`` so
        snoozing an overdue task always lands in the future.
        """
        if days <= 0:
            raise ValueError("Snooze days must be positive")
        due = dt_to_utc(current_due)
        if due is None:
            raise ValueError(f"Cannot parse due date {current_due!r}")
        base = max(due, dt_to_utc(now) or due)
        result = dt_add_days(base, days)
        if result is None:
            raise ValueError(f"Cannot snooze from {current_due!r}")
        return result

    # =========================================================================
    # Task predicates
    # =========================================================================

    @staticmethod
    def _local_date(value: str | datetime | None) -> date | None:
        parsed = dt_to_utc(value)
        return as_local(parsed).date() if parsed else None

    @staticmethod
    def is_due_on(task: dict[str, Any], day: date) -> bool:
        """Return True when an incomplete task falls due on local date ``day``."""
        if task.get(const.DATA_TASK_COMPLETED):
            return False
        return ScheduleEngine._local_date(task.get(const.DATA_TASK_DUE_DATE)) == day

    @staticmethod
    def is_overdue(task: dict[str, Any], now: datetime) -> bool:
        """Return True when an incomplete task's due date is before today."""
        if task.get(const.DATA_TASK_COMPLETED):
            return False
        due_day = ScheduleEngine._local_date(task.get(const.DATA_TASK_DUE_DATE))
        return due_day is not None and due_day < as_local(now).date()

    @staticmethod
    def is_completed_on(task: dict[str, Any], day: date) -> bool:
        """Return True when a task was completed on local date ``day``."""
        if not task.get(const.DATA_TASK_COMPLETED):
            return False
        return (
            ScheduleEngine._local_date(task.get(const.DATA_TASK_COMPLETED_DATE)) == day
        )

    # =========================================================================
    # Streak
    # =========================================================================

    @staticmethod
    def calculate_streak(
        current_streak: int,
        last_active_iso: str | None,
        now: datetime,
    ) -> StreakUpdate:
        """Apply one completion at ``now`` to the daily care streak.

        Must be called BEFORE updating last_active_date, using the previous
        value. Continuity depends only on elapsed local calendar days:
        - same day (<= 0): streak unchanged (at least 1 once anything is done)
        - next day (== 1): streak + 1
        - gap (> 1): streak resets to 1

        This counts local calendar dates and deliberately differs from
        ``days_between``, which ceils elapsed time: 08:00 Monday then 20:00
        Tuesday continues the streak even though ``days_between`` gives 2.

        Returns:
            StreakUpdate with the new value and which branch applied.
        """
        if not last_active_iso or dt_to_utc(last_active_iso) is None:
            return {
                "streak_days": 1,
                "days_since_active": None,
                "continued": False,
                "reset": False,
            }

        days_since = calendar_days_between(last_active_iso, now)
        if days_since <= 0:
            new_streak = max(current_streak, 1)
        elif days_since == 1:
            new_streak = current_streak + 1
        else:
            new_streak = 1

        return {
            "streak_days": new_streak,
            "days_since_active": days_since,
            "continued": days_since == 1,
            "reset": days_since > 1,
        }

    # =========================================================================
    # Smart suggestions
    # =========================================================================

    @staticmethod
    def suggest_schedule_adjustments(
        plant: dict[str, Any], now: datetime
    ) -> list[ScheduleSuggestion]:
        """Recommend watering-frequency changes from season and care history.

        Rules, evaluated independently:
        1. Winter (Dec-Feb) with watering under 10 days → suggest 10.
        2. Two or more water logs mentioning "thirsty" → water 2 days sooner
           (never below 3).
        3. Average of the last three watering gaps differs by 2+ days from
           the schedule (and is at most 30) → sync to the average.
        4. Nothing else, health above 95 and a long history → keep as is.
        """
        suggestions: list[ScheduleSuggestion] = []
        field = const.DATA_PLANT_WATERING_FREQUENCY
        default_watering = const.CARE_ACTIONS[
            const.CareAction.WATER
        ].default_frequency_days
        watering = int(plant.get(field, default_watering))
        history: list[dict[str, Any]] = plant.get(const.DATA_PLANT_CARE_HISTORY) or []
        water_events = [
            event
            for event in history
            if event.get(const.DATA_CARE_EVENT_TYPE) == const.CareAction.WATER
        ]

        if (
            as_local(now).month in const.WINTER_MONTHS
            and watering < const.WINTER_MIN_WATERING_DAYS
        ):
            suggestions.append(
                {
                    "id": const.SUGGESTION_WINTER_DORMANCY,
                    "field": field,
                    "current": watering,
                    "suggested": const.WINTER_MIN_WATERING_DAYS,
                    "reason": "Plants grow slower in winter; water less often.",
                }
            )

        thirsty_count = sum(
            1
            for event in water_events
            if const.THIRSTY_NOTE_KEYWORD
            in (event.get(const.DATA_CARE_EVENT_NOTE) or "").lower()
        )
        if (
            thirsty_count >= const.THIRSTY_NOTE_MIN_COUNT
            and watering > const.THIRSTY_MIN_WATERING_DAYS
        ):
            suggestions.append(
                {
                    "id": const.SUGGESTION_MORE_WATER,
                    "field": field,
                    "current": watering,
                    "suggested": max(
                        const.THIRSTY_MIN_WATERING_DAYS,
                        watering - const.THIRSTY_FREQUENCY_STEP,
                    ),
                    "reason": f"{plant.get(const.DATA_PLANT_NICKNAME, 'This plant')} "
                    "seems thirsty often.",
                }
            )

        if len(water_events) >= const.HISTORY_INTERVAL_SAMPLE:
            recent = [
                parsed
                for event in water_events[-const.HISTORY_INTERVAL_SAMPLE :]
                if (parsed := dt_to_utc(event.get(const.DATA_CARE_EVENT_DATE)))
            ]
            average = average_interval_days(recent)
            if average is not None:
                rounded = round(average)
                if (
                    0 < rounded <= const.HISTORY_MAX_AVERAGE_DAYS
                    and abs(rounded - watering) >= const.HISTORY_MIN_DIFFERENCE_DAYS
                ):
                    suggestions.append(
                        {
                            "id": const.SUGGESTION_HISTORICAL_TUNE,
                            "field": field,
                            "current": watering,
                            "suggested": rounded,
                            "reason": f"Recent logs show watering every {rounded} days.",
                        }
                    )

        health = plant.get(const.DATA_PLANT_HEALTH_SCORE, const.HEALTH_VALUE_DEFAULT)
        if (
            not suggestions
            and health > const.PERFECT_BALANCE_MIN_HEALTH
            and len(history) > const.PERFECT_BALANCE_MIN_HISTORY
        ):
            suggestions.append(
                {
                    "id": const.SUGGESTION_PERFECT_BALANCE,
                    "field": field,
                    "current": watering,
                    "suggested": watering,
                    "reason": "The current schedule is working perfectly.",
                }
            )

        return suggestions
