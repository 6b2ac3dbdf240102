# File: coordinator.py
"""Coordinator for the PlantCare integration.

Owns the in-memory plant care document and the managers that mutate it:
- TaskManager: care tasks, completion and snooze
- PlantManager: plant lifecycle, care log, derived plant state
- GamificationManager: XP, level, streak, achievements
- InsightManager: tips, milestones and memorials

All writes go through ``async_transaction()``, which saves on exit and
restores the previous document if the save fails. The periodic refresh
recomputes hydration and coarse plant status.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .managers import GamificationManager, InsightManager, PlantManager, TaskManager
from .storage_manager import PlantCareStorageManager
from .utils.dt_utils import dt_now_utc

type PlantCareConfigEntry = ConfigEntry[PlantCareDataCoordinator]


class PlantCareDataCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for PlantCare integration.

    Entities read through the ``*_data`` properties; managers mutate those
    sections only inside ``async_transaction()``.
    """

    config_entry: PlantCareConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: PlantCareConfigEntry,
        storage_manager: PlantCareStorageManager,
    ) -> None:
        """Initialize the PlantCareDataCoordinator."""
        update_interval_minutes = config_entry.options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )

        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=update_interval_minutes),
        )
        self.storage_manager = storage_manager
        self._data: dict[str, Any] = storage_manager.data
        self._transaction_lock = asyncio.Lock()

        self.task_manager = TaskManager(hass, self)
        self.plant_manager = PlantManager(hass, self)
        self.gamification_manager = GamificationManager(hass, self)
        self.insight_manager = InsightManager(hass, self)

    async def async_setup_managers(self) -> None:
        """Set up every manager once the document is loaded."""
        for manager in (
            self.task_manager,
            self.plant_manager,
            self.gamification_manager,
            self.insight_manager,
        ):
            await manager.async_setup()

    # -------------------------------------------------------------------------------------
    # Data sections
    # -------------------------------------------------------------------------------------

    @property
    def plants_data(self) -> dict[str, Any]:
        """Plants keyed by id."""
        return self._data.setdefault(const.DATA_PLANTS, {})

    @property
    def tasks_data(self) -> dict[str, Any]:
        """Care tasks keyed by id."""
        return self._data.setdefault(const.DATA_TASKS, {})

    @property
    def profile_data(self) -> dict[str, Any]:
        """The user profile."""
        return self._data.setdefault(const.DATA_PROFILE, {})

    @property
    def achievements_data(self) -> dict[str, Any]:
        """Achievements keyed by id."""
        return self._data.setdefault(const.DATA_ACHIEVEMENTS, {})

    @property
    def insights_data(self) -> dict[str, Any]:
        """Insights keyed by id."""
        return self._data.setdefault(const.DATA_INSIGHTS, {})

    # -------------------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------------------

    @asynccontextmanager
    async def async_transaction(self) -> AsyncIterator[None]:
        """Apply a group of mutations as one unit.

        On exit the document is saved; a body that changed nothing skips the
        save. If the body raises, or the save raises StoreUnavailableError,
        the pre-transaction document is restored in place, the pending-task
        index is rebuilt and the error propagates unchanged.

        Transactions are serialized; do not nest them. Look up the task and
        plant dicts inside the block: a rollback swaps every section for its
        snapshot copy, so references taken before the lock go stale.
        """
        async with self._transaction_lock:
            snapshot = self.storage_manager.snapshot()
            try:
                yield
                if self._data == snapshot:
                    return
                self.storage_manager.set_data(self._data)
                await self.storage_manager.async_save()
            except BaseException:
                if self._data != snapshot:
                    const.LOGGER.warning("Rolling back PlantCare transaction")
                self._replace_document(snapshot)
                raise
        self.async_update_listeners()

    def _replace_document(self, document: dict[str, Any]) -> list[str]:
        """Swap in a new document, keeping the top-level dict identity.

        Returns the duplicate pending task ids found while reindexing.
        """
        fresh = dict(document)
        self._data.clear()
        self._data.update(fresh)
        self.storage_manager.set_data(self._data)
        return self.task_manager.rebuild_index()

    async def async_reconcile(self) -> list[str]:
        """Re-read the stored document and repair the pending-task index.

        Used when the store changed outside this coordinator. Duplicate
        pending tasks for one (plant, action) are closed with no XP, keeping
        the earliest due.

        Returns:
            Ids of the duplicate tasks that were closed.
        """
        document = await self.storage_manager.async_load_document()
        async with self._transaction_lock:
            duplicates = self._replace_document(document)

        if duplicates:
            await self.task_manager.async_close_duplicates(duplicates)
        else:
            self.async_update_listeners()

        const.LOGGER.debug(
            "Reconciled PlantCare data; closed %d duplicate tasks", len(duplicates)
        )
        self.task_manager.emit(
            const.SIGNAL_SUFFIX_DATA_RECONCILED, closed_tasks=duplicates
        )
        return duplicates

    # -------------------------------------------------------------------------------------
    # Periodic refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: refresh hydration and plant status."""
        try:
            async with self._transaction_lock:
                if self.plant_manager.refresh_plant_state(dt_now_utc()):
                    self.storage_manager.set_data(self._data)
                    await self.storage_manager.async_save()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating PlantCare data: {err}") from err
        return self._data
