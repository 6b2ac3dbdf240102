"""Unit tests for HealthEngine - display status, hydration and care status."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from custom_components.plantcare import const
from custom_components.plantcare.engines.health_engine import HealthEngine

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def make_plant(**overrides: Any) -> dict[str, Any]:
    """Build a minimal stored plant added 10 days before T0."""
    plant: dict[str, Any] = {
        const.DATA_PLANT_ID: "plant-1",
        const.DATA_PLANT_NICKNAME: "Fernando",
        const.DATA_PLANT_DATE_ADDED: (T0 - timedelta(days=10)).isoformat(),
        const.DATA_PLANT_WATERING_FREQUENCY: 7,
    }
    plant.update(overrides)
    return plant


class TestGetPlantStatus:
    """First matching rule wins."""

    def test_health_short_circuits_low_hydration(self) -> None:
        """Health 85 with hydration 10 is still happy."""
        result = HealthEngine.get_plant_status(
            {const.DATA_PLANT_HEALTH_SCORE: 85, const.DATA_PLANT_HYDRATION_LEVEL: 10}
        )
        assert result["status"] == const.PLANT_STATUS_HAPPY
        assert result["message"] == "I'm feeling great!"
        assert result["color"] == "#4CAF50"

    @pytest.mark.parametrize(
        ("gauges", "expected"),
        [
            ({"health_score": 80}, const.PLANT_STATUS_HAPPY),
            ({"health_score": 79, "hydration_level": 29}, const.PLANT_STATUS_THIRSTY),
            (
                {"health_score": 79, "hydration_level": 30, "light_exposure": 39},
                const.PLANT_STATUS_NEEDS_LIGHT,
            ),
            (
                {"health_score": 79, "hydration_level": 30, "light_exposure": 40},
                const.PLANT_STATUS_NEEDS_ATTENTION,
            ),
            ({}, const.PLANT_STATUS_HAPPY),
        ],
    )
    def test_thresholds(self, gauges: dict[str, int], expected: str) -> None:
        """Boundary values land on the documented side; missing gauges are 100."""
        assert HealthEngine.get_plant_status(gauges)["status"] == expected


class TestHydrationAndBoost:
    """Hydration decay and per-care health boost."""

    def test_care_boost_clamps(self) -> None:
        """The boost never exceeds 100."""
        assert HealthEngine.apply_care_boost(70) == 75
        assert HealthEngine.apply_care_boost(98) == 100
        assert HealthEngine.apply_care_boost(None) == 100

    def test_hydration_full_after_watering(self) -> None:
        """Right after watering hydration is 100."""
        plant = make_plant(**{const.DATA_PLANT_LAST_WATERED: T0.isoformat()})
        assert HealthEngine.calculate_hydration(plant, T0) == 100

    def test_hydration_halves_after_one_interval(self) -> None:
        """One full watering interval uses half of the reserve."""
        plant = make_plant(
            **{const.DATA_PLANT_LAST_WATERED: (T0 - timedelta(days=7)).isoformat()}
        )
        assert HealthEngine.calculate_hydration(plant, T0) == 50

    def test_never_watered_counts_from_date_added(self) -> None:
        """Without a watering the add date is the reference; never below zero."""
        plant = make_plant(
            **{const.DATA_PLANT_DATE_ADDED: (T0 - timedelta(days=30)).isoformat()}
        )
        assert HealthEngine.calculate_hydration(plant, T0) == 0

    def test_days_alive(self) -> None:
        """Whole days since the plant was added."""
        assert HealthEngine.days_alive(make_plant(), T0 + timedelta(hours=23)) == 10


class TestDeriveCareStatus:
    """Coarse status priority."""

    def test_overdue_water_beats_everything_but_dead(self) -> None:
        """Overdue water wins over overdue mist and good health."""
        plant = make_plant(**{const.DATA_PLANT_HEALTH_SCORE: 100})
        assert (
            HealthEngine.derive_care_status(plant, {"mist", "water"}, T0)
            == const.CARE_STATUS_THIRSTY
        )

    def test_archived_is_dead(self) -> None:
        """Archived plants are dead regardless of tasks."""
        plant = make_plant(**{const.DATA_PLANT_ARCHIVED: True})
        assert HealthEngine.derive_care_status(plant, {"water"}, T0) == const.CARE_STATUS_DEAD

    def test_dormant_after_long_idle(self) -> None:
        """No care for 60 days is dormant."""
        plant = make_plant(
            **{const.DATA_PLANT_DATE_ADDED: (T0 - timedelta(days=90)).isoformat()}
        )
        assert HealthEngine.derive_care_status(plant, set(), T0) == const.CARE_STATUS_DORMANT

    @pytest.mark.parametrize(
        ("health", "expected"),
        [
            (80, const.CARE_STATUS_THRIVING),
            (79, const.CARE_STATUS_GROWING),
            (50, const.CARE_STATUS_GROWING),
            (49, const.CARE_STATUS_STRUGGLING),
        ],
    )
    def test_health_bands(self, health: int, expected: str) -> None:
        """Without overdue tasks the health score picks the band."""
        plant = make_plant(**{const.DATA_PLANT_HEALTH_SCORE: health})
        assert HealthEngine.derive_care_status(plant, set(), T0) == expected

    def test_last_cared_is_latest_action(self) -> None:
        """last_cared picks the most recent of all last-performed fields."""
        plant = make_plant(
            **{
                const.DATA_PLANT_LAST_WATERED: (T0 - timedelta(days=3)).isoformat(),
                const.DATA_PLANT_LAST_MISTED: (T0 - timedelta(days=1)).isoformat(),
            }
        )
        assert HealthEngine.last_cared(plant) == T0 - timedelta(days=1)
