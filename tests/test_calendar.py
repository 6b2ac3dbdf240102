"""Tests for the read-only care calendar."""

# pylint: disable=protected-access  # Accessing _generate_events for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest
from homeassistant.exceptions import HomeAssistantError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.plantcare import const
from custom_components.plantcare.calendar import CareScheduleCalendar
from custom_components.plantcare.coordinator import PlantCareDataCoordinator

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
async def calendar(
    coordinator: PlantCareDataCoordinator, mock_config_entry: MockConfigEntry
) -> CareScheduleCalendar:
    """Return a calendar over one plant watered weekly and misted every 3 days."""
    await coordinator.plant_manager.async_add_plant(
        {
            const.DATA_PLANT_NICKNAME: "Fernando",
            const.DATA_PLANT_WATERING_FREQUENCY: 7,
            const.DATA_PLANT_MISTING_FREQUENCY: 3,
        },
        now=T0,
    )
    return CareScheduleCalendar(coordinator, mock_config_entry)


async def test_due_date_and_projected_repeats(calendar: CareScheduleCalendar) -> None:
    """The pending task appears on its due date, then every frequency days."""
    events = calendar._generate_events(date(2026, 3, 10), date(2026, 4, 1))

    water = [event for event in events if event.summary == "Water: Fernando"]
    assert [event.start for event in water] == [
        date(2026, 3, 17),
        date(2026, 3, 24),
        date(2026, 3, 31),
    ]
    assert water[0].end == date(2026, 3, 18)
    assert water[0].uid.endswith("_2026-03-17")
    assert water[0].description.startswith("Water Fernando (task ")
    assert water[1].description == "Projected water for Fernando"


async def test_window_is_half_open(calendar: CareScheduleCalendar) -> None:
    """Events on the end date are excluded, events on the start date included."""
    events = calendar._generate_events(date(2026, 3, 13), date(2026, 3, 17))

    assert [(event.start, event.summary) for event in events] == [
        (date(2026, 3, 13), "Mist: Fernando"),
        (date(2026, 3, 16), "Mist: Fernando"),
    ]


async def test_events_sorted_by_start(calendar: CareScheduleCalendar) -> None:
    """Events across plants and actions are ordered by date."""
    events = calendar._generate_events(date(2026, 3, 10), date(2026, 3, 25))
    starts = [event.start for event in events]

    assert starts == sorted(starts)


async def test_completed_task_moves_calendar(
    coordinator: PlantCareDataCoordinator, calendar: CareScheduleCalendar
) -> None:
    """Completing a task late shifts the repeats from the completion time."""
    plant_id = next(iter(coordinator.plants_data))
    water = coordinator.task_manager.get_pending_task(plant_id, "water")
    await coordinator.task_manager.async_complete_task(
        water[const.DATA_TASK_ID], now=T0 + timedelta(days=9)
    )

    events = calendar._generate_events(date(2026, 3, 10), date(2026, 4, 1))
    water_days = [e.start for e in events if e.summary == "Water: Fernando"]

    assert water_days == [date(2026, 3, 26)]


async def test_calendar_is_read_only(calendar: CareScheduleCalendar) -> None:
    """Creating or deleting events is rejected."""
    with pytest.raises(HomeAssistantError) as err_info:
        await calendar.async_create_event(summary="Water")
    assert err_info.value.translation_key == const.TRANS_KEY_ERROR_CALENDAR_READ_ONLY

    with pytest.raises(HomeAssistantError):
        await calendar.async_delete_event("task_2026-03-17")
