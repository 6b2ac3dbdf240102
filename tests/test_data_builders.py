"""Tests for data_builders - validation and entity construction."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from custom_components.plantcare import const
from custom_components.plantcare.data_builders import (
    EntityValidationError,
    InvalidFrequencyError,
    build_care_event,
    build_care_task,
    build_insight,
    build_plant,
    validate_frequency,
)

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


class TestValidateFrequency:
    """Frequencies are positive whole numbers of days."""

    @pytest.mark.parametrize("value", [0, -1, 1.5, True, None, "weekly"])
    def test_rejects(self, value: Any) -> None:
        """Zero, negatives, fractions, booleans and non-numbers are rejected."""
        with pytest.raises(InvalidFrequencyError) as err_info:
            validate_frequency(const.DATA_PLANT_WATERING_FREQUENCY, value)
        assert err_info.value.translation_key == const.TRANS_KEY_ERROR_INVALID_FREQUENCY
        assert err_info.value.placeholders["value"] == str(value)

    def test_accepts_whole_float(self) -> None:
        """Service calls coerce numbers to float; 7.0 is a valid 7."""
        assert validate_frequency(const.DATA_PLANT_WATERING_FREQUENCY, 7.0) == 7


class TestBuildPlant:
    """Create and update through one builder."""

    def test_create_applies_defaults(self) -> None:
        """Missing frequencies fall back to the per-action defaults."""
        plant = build_plant({const.DATA_PLANT_NICKNAME: "  Fernando "}, now=T0)

        assert plant[const.DATA_PLANT_NICKNAME] == "Fernando"
        assert plant[const.DATA_PLANT_DATE_ADDED] == T0.isoformat()
        assert plant[const.DATA_PLANT_WATERING_FREQUENCY] == 7
        assert plant[const.DATA_PLANT_MISTING_FREQUENCY] == 3
        assert plant[const.DATA_PLANT_FERTILIZING_FREQUENCY] == 30
        assert plant[const.DATA_PLANT_ROTATING_FREQUENCY] == 14
        assert plant[const.DATA_PLANT_HEALTH_SCORE] == 100
        assert plant[const.DATA_PLANT_CARE_HISTORY] == []
        assert plant[const.DATA_PLANT_LAST_WATERED] is None

    def test_create_uses_configured_defaults(self) -> None:
        """Entry-level default frequencies override the built-in table."""
        plant = build_plant(
            {const.DATA_PLANT_NICKNAME: "Spike"},
            default_frequencies={const.DATA_PLANT_WATERING_FREQUENCY: 14},
        )
        assert plant[const.DATA_PLANT_WATERING_FREQUENCY] == 14

    def test_blank_nickname(self) -> None:
        """A whitespace nickname is rejected."""
        with pytest.raises(EntityValidationError) as err_info:
            build_plant({const.DATA_PLANT_NICKNAME: "   "})
        assert err_info.value.field == const.DATA_PLANT_NICKNAME

    def test_zero_frequency_rejected(self) -> None:
        """A zero watering frequency is rejected before anything is built."""
        with pytest.raises(InvalidFrequencyError):
            build_plant(
                {
                    const.DATA_PLANT_NICKNAME: "Fernando",
                    const.DATA_PLANT_WATERING_FREQUENCY: 0,
                }
            )

    def test_gauge_out_of_range(self) -> None:
        """Gauges outside 0-100 are rejected."""
        with pytest.raises(EntityValidationError):
            build_plant(
                {const.DATA_PLANT_NICKNAME: "Fernando", const.DATA_PLANT_HEALTH_SCORE: 120}
            )

    def test_update_preserves_identity_and_history(self) -> None:
        """Updating one field keeps id, add date, history and last-performed."""
        original = build_plant({const.DATA_PLANT_NICKNAME: "Fernando"}, now=T0)
        original[const.DATA_PLANT_LAST_WATERED] = T0.isoformat()
        original[const.DATA_PLANT_CARE_HISTORY].append(build_care_event("water", T0))

        updated = build_plant(
            {const.DATA_PLANT_MISTING_FREQUENCY: 2}, existing=original
        )

        assert updated[const.DATA_PLANT_ID] == original[const.DATA_PLANT_ID]
        assert updated[const.DATA_PLANT_DATE_ADDED] == T0.isoformat()
        assert updated[const.DATA_PLANT_NICKNAME] == "Fernando"
        assert updated[const.DATA_PLANT_MISTING_FREQUENCY] == 2
        assert updated[const.DATA_PLANT_LAST_WATERED] == T0.isoformat()
        assert len(updated[const.DATA_PLANT_CARE_HISTORY]) == 1

    def test_update_without_nickname_keeps_existing(self) -> None:
        """An update that omits the nickname keeps the stored one."""
        original = build_plant({const.DATA_PLANT_NICKNAME: "Fernando"}, now=T0)

        updated = build_plant(
            {const.DATA_PLANT_LIGHT_EXPOSURE: 80}, existing=original, now=T0
        )

        assert updated[const.DATA_PLANT_NICKNAME] == "Fernando"
        assert updated[const.DATA_PLANT_LIGHT_EXPOSURE] == 80

    def test_update_rejects_blank_nickname(self) -> None:
        """An update may not blank out the nickname."""
        original = build_plant({const.DATA_PLANT_NICKNAME: "Fernando"}, now=T0)

        with pytest.raises(EntityValidationError) as err_info:
            build_plant({const.DATA_PLANT_NICKNAME: " "}, existing=original)
        assert err_info.value.field == const.DATA_PLANT_NICKNAME


class TestOtherBuilders:
    """Tasks, events and insights."""

    def test_care_task_is_pending(self) -> None:
        """New tasks start incomplete with no XP."""
        task = build_care_task("plant-1", "water", T0)
        assert task[const.DATA_TASK_COMPLETED] is False
        assert task[const.DATA_TASK_DUE_DATE] == T0.isoformat()
        assert task[const.DATA_TASK_XP_EARNED] is None

    def test_care_task_rejects_unknown_action(self) -> None:
        """Only the four care actions are valid."""
        with pytest.raises(ValueError):
            build_care_task("plant-1", "prune", T0)

    def test_care_event_blank_note_is_none(self) -> None:
        """Whitespace notes are stored as None."""
        assert build_care_event("mist", T0, "   ")[const.DATA_CARE_EVENT_NOTE] is None

    def test_insight_requires_known_type(self) -> None:
        """Unknown insight types are rejected."""
        with pytest.raises(EntityValidationError):
            build_insight("gossip", "Title", "Message")

    def test_insight_defaults(self) -> None:
        """Insights start undismissed with a creation stamp."""
        insight = build_insight(
            const.INSIGHT_TYPE_TIP, "Rotate weekly", "Even growth", created_at=T0
        )
        assert insight[const.DATA_INSIGHT_DISMISSED] is False
        assert insight[const.DATA_INSIGHT_CREATED_AT] == T0.isoformat()
