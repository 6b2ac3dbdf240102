# File: __init__.py
"""Initialization file for the PlantCare integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for data synchronization.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import PlantCareConfigEntry, PlantCareDataCoordinator
from .services import async_setup_services, async_unload_services
from .storage_manager import PlantCareStorageManager, StoreUnavailableError
from .utils.dt_utils import set_default_timezone


def _storage_key(entry: PlantCareConfigEntry) -> str:
    """Return the storage key for an entry (one document per profile)."""
    return f"{const.STORAGE_KEY}_{entry.entry_id}"


async def async_setup_entry(hass: HomeAssistant, entry: PlantCareConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for PlantCare entry: %s", entry.entry_id)

    # Must be set before any component that uses the datetime helpers
    time_zone = dt_util.get_time_zone(hass.config.time_zone)
    if time_zone is not None:
        set_default_timezone(time_zone)

    # Initialize the storage manager to handle persistent data.
    storage_manager = PlantCareStorageManager(hass, _storage_key(entry))
    await storage_manager.async_initialize()

    # Seed the profile from the config entry only when the store is brand new
    if storage_manager.is_new_store:
        profile = storage_manager.data[const.DATA_PROFILE]
        profile[const.DATA_PROFILE_USERNAME] = entry.data.get(
            const.CONF_USERNAME, profile.get(const.DATA_PROFILE_USERNAME)
        )
        profile[const.DATA_PROFILE_EXPERIENCE_LEVEL] = entry.data.get(
            const.CONF_EXPERIENCE_LEVEL,
            profile.get(const.DATA_PROFILE_EXPERIENCE_LEVEL),
        )

    # Create the data coordinator for managing updates and synchronization.
    coordinator = PlantCareDataCoordinator(hass, entry, storage_manager)
    try:
        await coordinator.async_setup_managers()
    except StoreUnavailableError as err:
        raise ConfigEntryNotReady(str(err)) from err

    try:
        # Perform the first refresh to load data.
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise

    entry.runtime_data = coordinator

    # Set up services required by the integration.
    async_setup_services(hass)

    # Forward the setup to supported platforms (sensors, calendar).
    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info("INFO: PlantCare setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: PlantCareConfigEntry) -> None:
    """Reload the entry after its options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: PlantCareConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading PlantCare entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(
        entry, const.PLATFORMS
    )

    if unload_ok:
        await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: PlantCareConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing PlantCare entry: %s", entry.entry_id)

    storage_manager = PlantCareStorageManager(hass, _storage_key(entry))
    await storage_manager.async_delete_storage()

    const.LOGGER.info("INFO: PlantCare entry data cleared: %s", entry.entry_id)
