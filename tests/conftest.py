"""Shared fixtures for PlantCare tests."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.plantcare.const import (
    CONF_EXPERIENCE_LEVEL,
    CONF_UPDATE_INTERVAL,
    CONF_USERNAME,
    DATA_ACHIEVEMENTS,
    DATA_INSIGHTS,
    DATA_PLANTS,
    DATA_PROFILE,
    DATA_SCHEMA_VERSION,
    DATA_TASKS,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    EXPERIENCE_LEVEL_BEGINNER,
    SCHEMA_VERSION_CURRENT,
)
from custom_components.plantcare.coordinator import PlantCareDataCoordinator
from custom_components.plantcare.data_builders import (
    build_default_achievements,
    build_profile,
)
from custom_components.plantcare.storage_manager import PlantCareStorageManager
from custom_components.plantcare.utils.dt_utils import set_default_timezone

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# Fixed reference instant used across tests (a Tuesday in March, outside winter)
T0 = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Any:
    """Keep calendar-day math in UTC unless a test sets otherwise."""
    set_default_timezone(ZoneInfo("UTC"))
    yield
    set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Robin",
        data={
            CONF_USERNAME: "Robin",
            CONF_EXPERIENCE_LEVEL: EXPERIENCE_LEVEL_BEGINNER,
        },
        options={
            CONF_UPDATE_INTERVAL: DEFAULT_UPDATE_INTERVAL,
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return an empty stored document."""
    return {
        DATA_SCHEMA_VERSION: SCHEMA_VERSION_CURRENT,
        DATA_PLANTS: {},
        DATA_TASKS: {},
        DATA_PROFILE: dict(build_profile("Robin", now=T0)),
        DATA_ACHIEVEMENTS: {
            achievement_id: dict(achievement)
            for achievement_id, achievement in build_default_achievements().items()
        },
        DATA_INSIGHTS: {},
    }


@pytest.fixture
async def coordinator(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> PlantCareDataCoordinator:
    """Return a coordinator with managers set up over in-memory storage."""
    mock_config_entry.add_to_hass(hass)
    storage_manager = PlantCareStorageManager(hass, "plantcare_data_test")
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        await storage_manager.async_initialize()

    plantcare_coordinator = PlantCareDataCoordinator(
        hass, mock_config_entry, storage_manager
    )
    await plantcare_coordinator.async_setup_managers()
    return plantcare_coordinator


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the PlantCare integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry
