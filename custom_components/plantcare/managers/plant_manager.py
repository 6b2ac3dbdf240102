"""Plant Manager - Plant lifecycle, care log and derived plant state.

Handles:
- Add / update / remove / mark-as-dead
- Manual care log entries
- Periodic hydration and status refresh
- Read-only views for schedule suggestions and the assistant context
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import device_registry as dr

from .. import const, data_builders as db
from ..engines.health_engine import HealthEngine
from ..engines.schedule_engine import ScheduleEngine
from ..helpers.entity_helpers import remove_entities_by_item_id
from ..utils.dt_utils import dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from ..type_defs import CareEventData, InsightData, PlantData, ScheduleSuggestion


class PlantManager(BaseManager):
    """Manager for plant CRUD and plant-level derived state."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; plants change only through this manager."""
        const.LOGGER.debug(
            "PlantManager: %d plants loaded", len(self.coordinator.plants_data)
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_plant(self, plant_id: str) -> PlantData:
        """Return a stored plant or raise.

        Raises:
            HomeAssistantError: If no plant has this id.
        """
        plant = self.coordinator.plants_data.get(plant_id)
        if plant is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "entity_type": const.ENTITY_TYPE_PLANT,
                    "name": plant_id,
                },
            )
        return plant

    def get_default_frequencies(self) -> dict[str, int]:
        """Return per-action default frequencies from the entry options."""
        options = self.coordinator.config_entry.options
        return {
            spec.frequency_field: int(
                options.get(spec.conf_default_frequency, spec.default_frequency_days)
            )
            for spec in const.CARE_ACTIONS.values()
        }

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def async_add_plant(
        self, user_input: dict[str, Any], now: datetime | None = None
    ) -> PlantData:
        """Create a plant, seed its water and mist tasks and count it.

        Raises:
            EntityValidationError: If the nickname is blank or a gauge is out
                of range (InvalidFrequencyError for bad frequencies).
            StoreUnavailableError: If the save fails; nothing is kept.
        """
        now = now or dt_now_utc()
        plant = db.build_plant(
            user_input, default_frequencies=self.get_default_frequencies(), now=now
        )
        plant_id = plant[const.DATA_PLANT_ID]

        async with self.coordinator.async_transaction():
            self.coordinator.plants_data[plant_id] = plant
            seeded = self.coordinator.task_manager.seed_plant_tasks(plant, now)
            unlocked = self.coordinator.gamification_manager.apply_plant_added(now)

        const.LOGGER.info(
            "Added plant '%s' (ID: %s)", plant[const.DATA_PLANT_NICKNAME], plant_id
        )
        self.emit(
            const.SIGNAL_SUFFIX_PLANT_ADDED,
            plant_id=plant_id,
            nickname=plant[const.DATA_PLANT_NICKNAME],
        )
        for task in seeded:
            self.emit(
                const.SIGNAL_SUFFIX_TASK_CREATED,
                task_id=task[const.DATA_TASK_ID],
                plant_id=plant_id,
                action=task[const.DATA_TASK_TYPE],
            )
        self.coordinator.gamification_manager.emit_unlocked(unlocked)
        return plant

    async def async_update_plant(
        self, plant_id: str, changes: dict[str, Any]
    ) -> PlantData:
        """Apply edits to a plant.

        Frequency changes take effect from the next completion; the pending
        task keeps its due date.

        Raises:
            HomeAssistantError: If the plant does not exist.
            EntityValidationError: If any changed field is invalid.
        """
        async with self.coordinator.async_transaction():
            updated = db.build_plant(changes, existing=self.get_plant(plant_id))
            self.coordinator.plants_data[plant_id] = updated

        const.LOGGER.debug(
            "Updated plant %s fields: %s", plant_id, sorted(changes.keys())
        )
        self.emit(const.SIGNAL_SUFFIX_PLANT_UPDATED, plant_id=plant_id)
        return updated

    def _remove_plant_data(self, plant_id: str) -> int:
        """Delete the plant and cascade its tasks (inside a transaction)."""
        del self.coordinator.plants_data[plant_id]
        return self.coordinator.task_manager.remove_tasks_for_plant(plant_id)

    def _remove_plant_registry_entries(self, plant_id: str) -> None:
        remove_entities_by_item_id(self.hass, self.entry_id, plant_id)

        device_registry = dr.async_get(self.hass)
        device = device_registry.async_get_device(
            identifiers={(const.DOMAIN, plant_id)}
        )
        if device:
            device_registry.async_remove_device(device.id)
            const.LOGGER.debug("Removed device from registry for plant ID: %s", plant_id)

    async def async_remove_plant(self, plant_id: str) -> None:
        """Delete a plant together with all of its tasks.

        Raises:
            HomeAssistantError: If the plant does not exist.
        """
        async with self.coordinator.async_transaction():
            nickname = self.get_plant(plant_id)[const.DATA_PLANT_NICKNAME]
            removed_tasks = self._remove_plant_data(plant_id)

        self._remove_plant_registry_entries(plant_id)
        const.LOGGER.info(
            "Removed plant '%s' (ID: %s) and %d tasks",
            nickname,
            plant_id,
            removed_tasks,
        )
        self.emit(
            const.SIGNAL_SUFFIX_PLANT_REMOVED, plant_id=plant_id, nickname=nickname
        )

    async def async_mark_plant_dead(
        self,
        plant_id: str,
        message: str | None = None,
        now: datetime | None = None,
    ) -> InsightData:
        """Record a memorial insight, then remove the plant.

        The memorial and the removal commit together.

        Raises:
            HomeAssistantError: If the plant does not exist.
        """
        now = now or dt_now_utc()
        async with self.coordinator.async_transaction():
            plant = self.get_plant(plant_id)
            nickname = plant[const.DATA_PLANT_NICKNAME]
            days_alive = HealthEngine.days_alive(plant, now)
            insight = self.coordinator.insight_manager.create_insight(
                const.INSIGHT_TYPE_MEMORIAL,
                const.MEMORIAL_TITLE_FMT.format(nickname=nickname),
                message
                or const.MEMORIAL_MESSAGE_FMT.format(nickname=nickname, days=days_alive),
                plant_id=plant_id,
                now=now,
            )
            self._remove_plant_data(plant_id)

        self._remove_plant_registry_entries(plant_id)
        const.LOGGER.info(
            "Plant '%s' (ID: %s) marked dead after %d days", nickname, plant_id, days_alive
        )
        self.emit(
            const.SIGNAL_SUFFIX_PLANT_DIED,
            plant_id=plant_id,
            nickname=nickname,
            days_alive=days_alive,
        )
        self.coordinator.insight_manager.emit_created(insight)
        self.emit(
            const.SIGNAL_SUFFIX_PLANT_REMOVED, plant_id=plant_id, nickname=nickname
        )
        return insight

    # =========================================================================
    # Care log
    # =========================================================================

    async def async_log_care_event(
        self,
        plant_id: str,
        action: str,
        note: str | None = None,
        now: datetime | None = None,
    ) -> CareEventData:
        """Append a manual entry to a plant's care history.

        Tasks, XP and streak are left alone.

        Raises:
            HomeAssistantError: If the plant does not exist.
        """
        now = now or dt_now_utc()
        event = db.build_care_event(action, now, note)

        async with self.coordinator.async_transaction():
            self.get_plant(plant_id).setdefault(
                const.DATA_PLANT_CARE_HISTORY, []
            ).append(event)

        self.emit(
            const.SIGNAL_SUFFIX_CARE_LOGGED,
            plant_id=plant_id,
            action=event[const.DATA_CARE_EVENT_TYPE],
        )
        return event

    # =========================================================================
    # Derived state
    # =========================================================================

    def refresh_plant_state(self, now: datetime) -> bool:
        """Recompute hydration and coarse status for every plant.

        Mutates plants in place; call inside a transaction when it returns
        True.

        Returns:
            True if any plant changed.
        """
        changed = False
        task_manager = self.coordinator.task_manager
        for plant_id, plant in self.coordinator.plants_data.items():
            hydration = HealthEngine.calculate_hydration(plant, now)
            status = HealthEngine.derive_care_status(
                plant, task_manager.get_overdue_actions(plant_id, now), now
            )
            if (
                plant.get(const.DATA_PLANT_HYDRATION_LEVEL) != hydration
                or plant.get(const.DATA_PLANT_STATUS) != status
            ):
                plant[const.DATA_PLANT_HYDRATION_LEVEL] = hydration
                plant[const.DATA_PLANT_STATUS] = status
                changed = True
        return changed

    def get_schedule_suggestions(
        self, plant_id: str, now: datetime | None = None
    ) -> list[ScheduleSuggestion]:
        """Return frequency suggestions for one plant.

        Raises:
            HomeAssistantError: If the plant does not exist.
        """
        return ScheduleEngine.suggest_schedule_adjustments(
            self.get_plant(plant_id), now or dt_now_utc()
        )

    def build_assistant_context(self) -> dict[str, Any]:
        """Summarize plants, pending work and streak for an external assistant."""
        profile = self.coordinator.profile_data
        return {
            "plants": [
                {
                    const.DATA_PLANT_NICKNAME: plant.get(const.DATA_PLANT_NICKNAME),
                    const.DATA_PLANT_SPECIES: plant.get(const.DATA_PLANT_SPECIES),
                    const.DATA_PLANT_HEALTH_SCORE: plant.get(
                        const.DATA_PLANT_HEALTH_SCORE, const.HEALTH_VALUE_DEFAULT
                    ),
                    const.DATA_PLANT_LOCATION: plant.get(const.DATA_PLANT_LOCATION),
                    const.DATA_PLANT_PERSONALITY: plant.get(
                        const.DATA_PLANT_PERSONALITY
                    ),
                }
                for plant in self.coordinator.plants_data.values()
            ],
            "pending_task_count": len(self.coordinator.task_manager.get_pending_tasks()),
            const.DATA_PROFILE_STREAK_DAYS: profile.get(
                const.DATA_PROFILE_STREAK_DAYS, 0
            ),
        }
