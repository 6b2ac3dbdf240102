"""Health Engine - Pure logic for plant health and status derivation.

Two views of a plant's wellbeing are computed here:

- Display status (happy / thirsty / needs-light / needs-attention) from the
  health score, hydration and light gauges. Missing gauges count as 100.
- Coarse care status (thirsty, mist, fertilize, thriving, growing,
  struggling, dormant, dead) from overdue tasks, care recency and health.

The health score itself is a stored field; this engine only nudges it up on
care and derives hydration from time since the last watering.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import SECONDS_PER_DAY, dt_to_utc
from ..utils.math_utils import clamp_percent

if TYPE_CHECKING:
    from ..type_defs import PlantStatusInfo


class HealthEngine:
    """Stateless health calculations for a single plant."""

    @staticmethod
    def _gauge(plant: dict[str, Any], field: str) -> float:
        value = plant.get(field)
        if value is None:
            return const.HEALTH_VALUE_DEFAULT
        return value

    @staticmethod
    def get_plant_status(plant: dict[str, Any]) -> PlantStatusInfo:
        """Derive the display status; first matching rule wins.

        1. health_score >= 80 → happy
        2. hydration_level < 30 → thirsty
        3. light_exposure < 40 → needs-light
        4. otherwise → needs-attention

        Example:
            {"health_score": 85, "hydration_level": 10} → "happy"
        """
        health = HealthEngine._gauge(plant, const.DATA_PLANT_HEALTH_SCORE)
        hydration = HealthEngine._gauge(plant, const.DATA_PLANT_HYDRATION_LEVEL)
        light = HealthEngine._gauge(plant, const.DATA_PLANT_LIGHT_EXPOSURE)

        if health >= const.HEALTH_HAPPY_THRESHOLD:
            status = const.PLANT_STATUS_HAPPY
        elif hydration < const.HYDRATION_THIRSTY_THRESHOLD:
            status = const.PLANT_STATUS_THIRSTY
        elif light < const.LIGHT_LOW_THRESHOLD:
            status = const.PLANT_STATUS_NEEDS_LIGHT
        else:
            status = const.PLANT_STATUS_NEEDS_ATTENTION

        message, color = const.PLANT_STATUS_DISPLAY[status]
        return {"status": status, "message": message, "color": color}

    @staticmethod
    def apply_care_boost(health_score: int | None) -> int:
        """Return the health score after one completed care action."""
        current = (
            const.HEALTH_VALUE_DEFAULT if health_score is None else health_score
        )
        return clamp_percent(current + const.HEALTH_BOOST_PER_CARE)

    @staticmethod
    def calculate_hydration(plant: dict[str, Any], now: datetime) -> int:
        """Estimate hydration from days since last watered.

        Hydration falls linearly from 100 right after watering to 0 after
        HYDRATION_DEPLETION_INTERVALS watering intervals. Plants that were
        never watered count from the date they were added.
        """
        reference = dt_to_utc(
            plant.get(const.DATA_PLANT_LAST_WATERED)
            or plant.get(const.DATA_PLANT_DATE_ADDED)
        )
        frequency = plant.get(const.DATA_PLANT_WATERING_FREQUENCY)
        if reference is None or not isinstance(frequency, int) or frequency <= 0:
            return clamp_percent(
                HealthEngine._gauge(plant, const.DATA_PLANT_HYDRATION_LEVEL)
            )

        elapsed_days = max(
            0.0, (dt_to_utc(now) - reference).total_seconds() / SECONDS_PER_DAY
        )
        depletion_days = frequency * const.HYDRATION_DEPLETION_INTERVALS
        return clamp_percent(100 * (1 - elapsed_days / depletion_days))

    @staticmethod
    def last_cared(plant: dict[str, Any]) -> datetime | None:
        """Return the most recent last-performed timestamp across actions."""
        timestamps = [
            parsed
            for spec in const.CARE_ACTIONS.values()
            if (parsed := dt_to_utc(plant.get(spec.last_performed_field)))
        ]
        return max(timestamps) if timestamps else None

    @staticmethod
    def days_alive(plant: dict[str, Any], now: datetime) -> int:
        """Whole days from date_added to ``now`` (never negative)."""
        added = dt_to_utc(plant.get(const.DATA_PLANT_DATE_ADDED))
        if added is None:
            return 0
        elapsed = (dt_to_utc(now) - added).total_seconds()
        return max(0, int(elapsed // SECONDS_PER_DAY))

    @staticmethod
    def derive_care_status(
        plant: dict[str, Any],
        overdue_actions: set[str],
        now: datetime,
    ) -> str:
        """Derive the coarse care status tag.

        Priority: dead, overdue water/mist/fertilize, dormant (no care for
        DORMANT_AFTER_DAYS since the later of last care and date added),
        then thriving / growing / struggling by health score.
        """
        if plant.get(const.DATA_PLANT_ARCHIVED):
            return const.CARE_STATUS_DEAD

        for action, status in const.CARE_STATUS_BY_OVERDUE_ACTION:
            if action in overdue_actions:
                return status

        last_activity = HealthEngine.last_cared(plant) or dt_to_utc(
            plant.get(const.DATA_PLANT_DATE_ADDED)
        )
        if last_activity is not None:
            idle_seconds = (dt_to_utc(now) - last_activity).total_seconds()
            idle_days = idle_seconds / SECONDS_PER_DAY
            if idle_days >= const.DORMANT_AFTER_DAYS:
                return const.CARE_STATUS_DORMANT

        health = HealthEngine._gauge(plant, const.DATA_PLANT_HEALTH_SCORE)
        if health >= const.CARE_STATUS_THRIVING_THRESHOLD:
            return const.CARE_STATUS_THRIVING
        if health >= const.CARE_STATUS_GROWING_THRESHOLD:
            return const.CARE_STATUS_GROWING
        return const.CARE_STATUS_STRUGGLING
