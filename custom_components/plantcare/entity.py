"""Base entity classes for PlantCare integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import PlantCareDataCoordinator


class PlantCareCoordinatorEntity(CoordinatorEntity[PlantCareDataCoordinator]):
    """Base entity class for PlantCare sensors with typed coordinator access."""

    @property
    def coordinator(self) -> PlantCareDataCoordinator:
        """Return typed coordinator.

        Reads the private _coordinator attribute set by CoordinatorEntity.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: PlantCareDataCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
