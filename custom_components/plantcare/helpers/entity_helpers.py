# File: helpers/entity_helpers.py
"""Entity and lookup helper functions for PlantCare.

Functions that build dispatcher signal names, locate the loaded coordinator,
resolve plants by name, and prune entity registry entries for removed plants.

All functions here require a `hass` object or interact with HA registries.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers.entity_registry import (
    async_entries_for_config_entry,
    async_get as async_get_entity_registry,
)

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PlantCareDataCoordinator


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'plantcare_{entry_id}_{suffix}'

    Example:
        get_event_signal("abc123", "task_completed") → "plantcare_abc123_task_completed"
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Coordinator Access
# ==============================================================================


def get_first_plantcare_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first loaded PlantCare config entry."""
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state is ConfigEntryState.LOADED:
            return entry.entry_id
    return None


def get_plantcare_coordinator(hass: HomeAssistant) -> PlantCareDataCoordinator:
    """Return the coordinator of the first loaded entry.

    Raises:
        HomeAssistantError: If no PlantCare entry is loaded.
    """
    entry_id = get_first_plantcare_entry(hass)
    entry = hass.config_entries.async_get_entry(entry_id) if entry_id else None
    if entry is None:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NO_ENTRY,
        )
    return entry.runtime_data


# ==============================================================================
# Plant Lookups
# ==============================================================================


def get_plant_id_by_name(
    coordinator: PlantCareDataCoordinator, plant_name: str
) -> str | None:
    """Look up a plant id by nickname (case-insensitive)."""
    wanted = plant_name.strip().casefold()
    for plant_id, plant in coordinator.plants_data.items():
        if str(plant.get(const.DATA_PLANT_NICKNAME, "")).casefold() == wanted:
            return plant_id
    return None


def resolve_plant_id(
    coordinator: PlantCareDataCoordinator,
    plant_id: str | None = None,
    plant_name: str | None = None,
) -> str:
    """Resolve a plant from an explicit id or a nickname, or raise.

    Raises:
        ServiceValidationError: If neither identifies an existing plant.
    """
    if plant_id and plant_id in coordinator.plants_data:
        return plant_id
    if plant_name:
        found = get_plant_id_by_name(coordinator, plant_name)
        if found:
            return found
    raise ServiceValidationError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
        translation_placeholders={
            "entity_type": const.ENTITY_TYPE_PLANT,
            "name": str(plant_id or plant_name),
        },
    )


# ==============================================================================
# Entity Registry Cleanup
# ==============================================================================


def remove_entities_by_item_id(
    hass: HomeAssistant,
    entry_id: str,
    item_id: str,
) -> int:
    """Remove all entities whose unique_id references the given item_id.

    Called when a plant is removed. Uses delimiter matching so that one id
    never matches a longer id that happens to contain it.

    Returns:
        Count of removed entities.
    """
    perf_start = time.perf_counter()
    ent_reg = async_get_entity_registry(hass)
    prefix = f"{entry_id}_"
    removed_count = 0

    for entity_entry in async_entries_for_config_entry(ent_reg, entry_id):
        unique_id = str(entity_entry.unique_id)
        if not unique_id.startswith(prefix):
            continue
        if f"_{item_id}_" in unique_id or unique_id.endswith(f"_{item_id}"):
            ent_reg.async_remove(entity_entry.entity_id)
            removed_count += 1
            const.LOGGER.debug(
                "Removed entity %s (uid: %s) for deleted item %s",
                entity_entry.entity_id,
                unique_id,
                item_id,
            )

    if removed_count > 0:
        const.LOGGER.info(
            "Removed %d entities for deleted item in %.3fs",
            removed_count,
            time.perf_counter() - perf_start,
        )
    return removed_count
