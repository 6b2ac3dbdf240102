# File: sensor.py
"""Sensors for the PlantCare integration.

Sensors Defined in This File (4):

# Profile Sensors (3)
01. ProfileXpSensor
02. ProfileStreakSensor
03. PendingTasksSensor

# Plant-Specific Sensors (1)
04. PlantStatusSensor
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import PlantCareConfigEntry, PlantCareDataCoordinator
from .engines.health_engine import HealthEngine
from .entity import PlantCareCoordinatorEntity
from .helpers.device_helpers import create_plant_device_info, create_profile_device_info
from .helpers.entity_helpers import get_event_signal
from .utils.dt_utils import days_between, dt_now_utc, format_time_ago

# Coordinator-based entities don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PlantCareConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensors for PlantCare integration."""
    coordinator = entry.runtime_data

    entities: list[SensorEntity] = [
        ProfileXpSensor(coordinator, entry),
        ProfileStreakSensor(coordinator, entry),
        PendingTasksSensor(coordinator, entry),
    ]
    entities.extend(
        PlantStatusSensor(coordinator, entry, plant_id)
        for plant_id in coordinator.plants_data
    )
    async_add_entities(entities)

    @callback
    def _on_plant_added(payload: dict[str, Any]) -> None:
        """Add a status sensor for a newly created plant."""
        async_add_entities(
            [PlantStatusSensor(coordinator, entry, payload["plant_id"])]
        )

    entry.async_on_unload(
        async_dispatcher_connect(
            hass,
            get_event_signal(entry.entry_id, const.SIGNAL_SUFFIX_PLANT_ADDED),
            _on_plant_added,
        )
    )


def _task_summary(
    coordinator: PlantCareDataCoordinator, task: dict[str, Any]
) -> dict[str, Any]:
    """Compact task view for sensor attributes."""
    plant = coordinator.plants_data.get(task[const.DATA_TASK_PLANT_ID], {})
    return {
        const.DATA_TASK_ID: task[const.DATA_TASK_ID],
        const.DATA_TASK_PLANT_ID: task[const.DATA_TASK_PLANT_ID],
        const.DATA_PLANT_NICKNAME: plant.get(const.DATA_PLANT_NICKNAME),
        const.DATA_TASK_TYPE: task[const.DATA_TASK_TYPE],
        const.DATA_TASK_DUE_DATE: task[const.DATA_TASK_DUE_DATE],
        "due_in_days": days_between(dt_now_utc(), task[const.DATA_TASK_DUE_DATE]),
    }


# ------------------------------------------------------------------------------------------
class ProfileXpSensor(PlantCareCoordinatorEntity, SensorEntity):
    """Sensor for cumulative XP with level details in attributes."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_XP
    _attr_state_class = SensorStateClass.TOTAL_INCREASING
    _attr_icon = "mdi:star-circle"

    def __init__(
        self, coordinator: PlantCareDataCoordinator, entry: PlantCareConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_XP}"
        self._attr_device_info = create_profile_device_info(entry)

    @property
    def native_value(self) -> int:
        """Return cumulative XP."""
        return int(self.coordinator.profile_data.get(const.DATA_PROFILE_XP, 0))

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose level and counters."""
        profile = self.coordinator.profile_data
        gamification = self.coordinator.gamification_manager
        level_info = gamification.get_level_info()
        return {
            const.ATTR_LEVEL: level_info["level"],
            const.ATTR_LEVEL_NAME: level_info["level_name"],
            const.ATTR_LEVEL_PROGRESS: round(level_info["progress"], 2),
            const.ATTR_TOTAL_TASKS_COMPLETED: profile.get(
                const.DATA_PROFILE_TOTAL_TASKS_COMPLETED, 0
            ),
            const.ATTR_TOTAL_PLANTS_ADDED: profile.get(
                const.DATA_PROFILE_TOTAL_PLANTS_ADDED, 0
            ),
            const.ATTR_UNLOCKED_ACHIEVEMENTS: [
                achievement[const.DATA_ACHIEVEMENT_NAME]
                for achievement in gamification.get_unlocked_achievements()
            ],
        }


# ------------------------------------------------------------------------------------------
class ProfileStreakSensor(PlantCareCoordinatorEntity, SensorEntity):
    """Sensor for the daily care streak."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "days"
    _attr_icon = "mdi:fire"

    def __init__(
        self, coordinator: PlantCareDataCoordinator, entry: PlantCareConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_STREAK}"
        self._attr_device_info = create_profile_device_info(entry)

    @property
    def native_value(self) -> int:
        """Return current streak days."""
        return int(self.coordinator.profile_data.get(const.DATA_PROFILE_STREAK_DAYS, 0))

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose longest streak and last activity."""
        profile = self.coordinator.profile_data
        last_active = profile.get(const.DATA_PROFILE_LAST_ACTIVE_DATE)
        return {
            const.ATTR_LONGEST_STREAK: profile.get(const.DATA_PROFILE_LONGEST_STREAK, 0),
            const.ATTR_LAST_ACTIVE: format_time_ago(last_active) if last_active else None,
        }


# ------------------------------------------------------------------------------------------
class PendingTasksSensor(PlantCareCoordinatorEntity, SensorEntity):
    """Sensor counting pending care tasks, grouped in attributes."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_PENDING_TASKS
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:clipboard-list-outline"

    def __init__(
        self, coordinator: PlantCareDataCoordinator, entry: PlantCareConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_PENDING_TASKS}"
        self._attr_device_info = create_profile_device_info(entry)

    @property
    def native_value(self) -> int:
        """Return the number of pending tasks."""
        return len(self.coordinator.task_manager.get_pending_tasks())

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose overdue, today and upcoming task lists."""
        groups = self.coordinator.task_manager.group_pending_tasks()
        return {
            group: [_task_summary(self.coordinator, task) for task in tasks]
            for group, tasks in groups.items()
        }


# ------------------------------------------------------------------------------------------
class PlantStatusSensor(PlantCareCoordinatorEntity, SensorEntity):
    """Sensor for one plant's coarse care status.

    State is the stored status tag (thirsty, thriving, dormant, ...). The
    display status from the health gauges is exposed with its message and
    color in attributes.
    """

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_PLANT_STATUS
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = const.CARE_STATUS_OPTIONS
    _attr_icon = "mdi:flower"

    def __init__(
        self,
        coordinator: PlantCareDataCoordinator,
        entry: PlantCareConfigEntry,
        plant_id: str,
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: PlantCareDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            plant_id: Internal id of the plant.
        """
        super().__init__(coordinator)
        plant = coordinator.plants_data.get(plant_id, {})
        self._plant_id = plant_id
        self._attr_unique_id = (
            f"{entry.entry_id}_{plant_id}{const.SENSOR_UID_SUFFIX_PLANT_STATUS}"
        )
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_PLANT_NAME: plant.get(
                const.DATA_PLANT_NICKNAME, plant_id
            )
        }
        self._attr_device_info = create_plant_device_info(plant_id, plant, entry)

    @property
    def available(self) -> bool:
        """Unavailable once the plant is gone."""
        return super().available and self._plant_id in self.coordinator.plants_data

    @property
    def native_value(self) -> str | None:
        """Return the coarse care status."""
        plant = self.coordinator.plants_data.get(self._plant_id)
        if plant is None:
            return None
        return plant.get(const.DATA_PLANT_STATUS, const.CARE_STATUS_THRIVING)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose display status and health gauges."""
        plant = self.coordinator.plants_data.get(self._plant_id)
        if plant is None:
            return {}
        display = HealthEngine.get_plant_status(plant)
        last_cared = HealthEngine.last_cared(plant)
        return {
            const.ATTR_DISPLAY_STATUS: display["status"],
            const.ATTR_MESSAGE: display["message"],
            const.ATTR_COLOR: display["color"],
            const.ATTR_HEALTH_SCORE: plant.get(
                const.DATA_PLANT_HEALTH_SCORE, const.HEALTH_VALUE_DEFAULT
            ),
            const.ATTR_HYDRATION_LEVEL: plant.get(
                const.DATA_PLANT_HYDRATION_LEVEL, const.HEALTH_VALUE_DEFAULT
            ),
            const.ATTR_LAST_CARED: format_time_ago(last_cared) if last_cared else None,
        }
