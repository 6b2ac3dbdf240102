# File: storage_manager.py
"""Handles persistent data storage for the PlantCare integration.

Uses Home Assistant's Storage helper to save and load the plant care
document (plants, care tasks, profile, achievements and insights) so the
state is preserved across restarts.
"""

from __future__ import annotations

import copy
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .data_builders import build_default_achievements, build_profile


class StoreUnavailableError(HomeAssistantError):
    """The backing store could not persist the document."""


class PlantCareStorageManager:
    """Manages loading, saving, and accessing data from Home Assistant's storage.

    Utilizes the entity id as the primary key for plants, tasks and insights.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store[dict[str, Any]] = Store(
            hass, const.STORAGE_VERSION, storage_key
        )
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.
        # True when async_initialize found no stored document.
        self.is_new_store = False

    def _get_default_structure(self) -> dict[str, Any]:
        """Get the default empty data structure."""
        return {
            const.DATA_SCHEMA_VERSION: const.SCHEMA_VERSION_CURRENT,
            const.DATA_PLANTS: {},
            const.DATA_TASKS: {},
            const.DATA_PROFILE: dict(build_profile()),
            const.DATA_ACHIEVEMENTS: {
                achievement_id: dict(achievement)
                for achievement_id, achievement in build_default_achievements().items()
            },
            const.DATA_INSIGHTS: {},
        }

    def _ensure_sections(self, data: dict[str, Any]) -> dict[str, Any]:
        """Fill in any section or achievement missing from a stored document."""
        default = self._get_default_structure()
        for key, value in default.items():
            data.setdefault(key, value)
        for achievement_id, achievement in default[const.DATA_ACHIEVEMENTS].items():
            data[const.DATA_ACHIEVEMENTS].setdefault(achievement_id, achievement)
        return data

    async def async_load_document(self) -> dict[str, Any]:
        """Read the stored document without replacing the in-memory cache."""
        existing_data = await self._store.async_load()
        if existing_data is None:
            return self._get_default_structure()
        return self._ensure_sections(existing_data)

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure.
        """
        const.LOGGER.debug("PlantCareStorageManager: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("No existing storage found. Initializing new data")
            self.is_new_store = True
            self._data = self._get_default_structure()
        else:
            self._data = self._ensure_sections(existing_data)
            self.is_new_store = False
            const.LOGGER.debug(
                "Loaded existing data from storage: %s",
                {
                    "plants": len(self._data[const.DATA_PLANTS]),
                    "tasks": len(self._data[const.DATA_TASKS]),
                    "insights": len(self._data[const.DATA_INSIGHTS]),
                },
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of the current document for rollback."""
        return copy.deepcopy(self._data)

    async def async_save(self) -> None:
        """Save the current data structure to storage.

        Raises:
            StoreUnavailableError: When the file system or serializer rejects
                the write. The caller owns rollback of in-memory state.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.exception(
                "Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
            raise StoreUnavailableError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_STORE_UNAVAILABLE,
                translation_placeholders={"error": str(err)},
            ) from err
        except (TypeError, ValueError) as err:
            const.LOGGER.exception(
                "Failed to save storage due to invalid data: %s", err
            )
            raise StoreUnavailableError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_STORE_UNAVAILABLE,
                translation_placeholders={"error": str(err)},
            ) from err
        const.LOGGER.debug("Data saved successfully to storage")

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = self._get_default_structure()
        await self._store.async_remove()
        const.LOGGER.info("Storage file removed: %s", self._storage_key)
