# File: helpers/device_helpers.py
"""Device registry helper functions for PlantCare.

Functions that construct DeviceInfo objects for Home Assistant's device registry.
Each plant is a device; the gardener profile is one more.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_plant_device_info(
    plant_id: str,
    plant: dict[str, Any],
    config_entry: ConfigEntry,
) -> DeviceInfo:
    """Create device info for a plant.

    Args:
        plant_id: Internal ID (UUID) of the plant
        plant: Stored plant data (nickname and species are used)
        config_entry: Config entry for this integration instance
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, plant_id)},
        name=f"{plant.get(const.DATA_PLANT_NICKNAME, plant_id)} ({config_entry.title})",
        manufacturer=const.PLANTCARE_TITLE,
        model=plant.get(const.DATA_PLANT_SPECIES) or "Plant",
        entry_type=DeviceEntryType.SERVICE,
    )


def create_profile_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for the gardener profile (XP, streak, tasks)."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, f"{config_entry.entry_id}_profile")},
        name=f"Gardener ({config_entry.title})",
        manufacturer=const.PLANTCARE_TITLE,
        model="Gardener Profile",
        entry_type=DeviceEntryType.SERVICE,
    )
