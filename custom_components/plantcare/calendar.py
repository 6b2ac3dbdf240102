"""Calendar platform for PlantCare integration.

Provides a read-only calendar view of care task due dates. Each pending task
appears on its due date, followed by its projected repeats at the plant's
current frequency.
"""

from __future__ import annotations

import datetime
from typing import Any

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import PlantCareConfigEntry, PlantCareDataCoordinator
from .engines.schedule_engine import ScheduleEngine
from .entity import PlantCareCoordinatorEntity
from .helpers.device_helpers import create_profile_device_info
from .utils.dt_utils import as_local, dt_now_utc, dt_to_utc

# Coordinator-based entities don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PlantCareConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the PlantCare calendar platform."""
    coordinator = entry.runtime_data
    if not coordinator:
        const.LOGGER.error("Coordinator not found for entry %s", entry.entry_id)
        return

    async_add_entities([CareScheduleCalendar(coordinator, entry)])


class CareScheduleCalendar(PlantCareCoordinatorEntity, CalendarEntity):
    """Calendar entity listing upcoming care for every plant."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_CALENDAR_NAME

    def __init__(
        self,
        coordinator: PlantCareDataCoordinator,
        config_entry: PlantCareConfigEntry,
        show_period_days: int = const.DEFAULT_CALENDAR_SHOW_PERIOD_DAYS,
    ) -> None:
        """Initialize the calendar entity.

        Args:
            coordinator: PlantCareDataCoordinator instance for data access.
            config_entry: ConfigEntry for this integration instance.
            show_period_days: How far ahead ``event`` looks for the next task.
        """
        super().__init__(coordinator)
        self._show_period = datetime.timedelta(days=show_period_days)
        self._attr_unique_id = f"{config_entry.entry_id}{const.CALENDAR_UID_SUFFIX}"
        self._attr_device_info = create_profile_device_info(config_entry)

    def _build_event(
        self,
        task: dict[str, Any],
        plant: dict[str, Any],
        day: datetime.date,
        projected: bool,
    ) -> CalendarEvent:
        action = task[const.DATA_TASK_TYPE]
        nickname = plant.get(const.DATA_PLANT_NICKNAME, task[const.DATA_TASK_PLANT_ID])
        description = (
            f"Projected {action} for {nickname}"
            if projected
            else f"{action.capitalize()} {nickname} (task {task[const.DATA_TASK_ID]})"
        )
        return CalendarEvent(
            summary=f"{action.capitalize()}: {nickname}",
            start=day,
            end=day + datetime.timedelta(days=1),
            description=description,
            uid=f"{task[const.DATA_TASK_ID]}_{day.isoformat()}",
        )

    def _generate_events(
        self, window_start: datetime.date, window_end: datetime.date
    ) -> list[CalendarEvent]:
        """Generate all-day events for dates in [window_start, window_end)."""
        events: list[CalendarEvent] = []
        plants = self.coordinator.plants_data

        for task in self.coordinator.task_manager.get_pending_tasks():
            plant = plants.get(task[const.DATA_TASK_PLANT_ID])
            due = dt_to_utc(task.get(const.DATA_TASK_DUE_DATE))
            if plant is None or due is None:
                continue
            try:
                frequency = ScheduleEngine.get_frequency_days(
                    plant, task[const.DATA_TASK_TYPE]
                )
            except ValueError:
                const.LOGGER.warning(
                    "Skipping calendar projection for task %s: invalid frequency",
                    task[const.DATA_TASK_ID],
                )
                frequency = None

            day = as_local(due).date()
            projected = False
            while day < window_end:
                if day >= window_start:
                    events.append(self._build_event(task, plant, day, projected))
                if frequency is None:
                    break
                day += datetime.timedelta(days=frequency)
                projected = True

        return sorted(events, key=lambda event: (event.start, event.summary))

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime.datetime,
        end_date: datetime.datetime,
    ) -> list[CalendarEvent]:
        """Return care events overlapping [start_date, end_date)."""
        return self._generate_events(
            as_local(start_date).date(),
            as_local(end_date).date() + datetime.timedelta(days=1),
        )

    async def async_create_event(self, **kwargs: Any) -> None:
        """Create a new event - not supported for read-only calendar."""
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CALENDAR_READ_ONLY,
        )

    async def async_delete_event(
        self,
        uid: str,
        recurrence_id: str | None = None,
        recurrence_range: str | None = None,
    ) -> None:
        """Delete an event - not supported for read-only calendar."""
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CALENDAR_READ_ONLY,
        )

    @property
    def event(self) -> CalendarEvent | None:
        """Return the next care event, today or later."""
        today = as_local(dt_now_utc()).date()
        overdue = self.coordinator.task_manager.get_overdue_tasks()
        if overdue:
            task = overdue[0]
            plant = self.coordinator.plants_data[task[const.DATA_TASK_PLANT_ID]]
            return self._build_event(task, plant, today, projected=False)
        events = self._generate_events(today, today + self._show_period)
        return events[0] if events else None
