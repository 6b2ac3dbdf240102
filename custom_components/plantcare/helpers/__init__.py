# File: helpers/__init__.py
"""Home Assistant-bound helper functions for PlantCare.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entity_helpers: Signal names, coordinator lookup, plant lookup, cleanup
    - device_helpers: DeviceInfo construction

Usage:
    from .helpers import entity_helpers
    from .helpers.device_helpers import create_plant_device_info
"""

from . import device_helpers, entity_helpers

__all__ = [
    "device_helpers",
    "entity_helpers",
]
