# File: services.py
"""Defines custom services for the PlantCare integration.

These services allow direct actions through scripts or automations.
Plants can be addressed by id or by nickname; tasks by id or by
plant + care action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const, data_builders as db
from .helpers.entity_helpers import get_plantcare_coordinator, resolve_plant_id

if TYPE_CHECKING:
    from .coordinator import PlantCareDataCoordinator

_ACTIONS = [str(action) for action in const.CareAction]

# --- Service Schemas ---
_PLANT_TARGET = {
    vol.Optional(const.FIELD_PLANT_ID): cv.string,
    vol.Optional(const.FIELD_PLANT_NAME): cv.string,
}

_PLANT_FIELDS = {
    vol.Optional(const.DATA_PLANT_SPECIES): cv.string,
    vol.Optional(const.DATA_PLANT_SCIENTIFIC_NAME): cv.string,
    vol.Optional(const.DATA_PLANT_LOCATION): cv.string,
    vol.Optional(const.DATA_PLANT_PERSONALITY): vol.In(const.PLANT_PERSONALITIES),
    vol.Optional(const.DATA_PLANT_PHOTO): cv.string,
    vol.Optional(const.DATA_PLANT_WATERING_FREQUENCY): vol.Coerce(float),
    vol.Optional(const.DATA_PLANT_MISTING_FREQUENCY): vol.Coerce(float),
    vol.Optional(const.DATA_PLANT_FERTILIZING_FREQUENCY): vol.Coerce(float),
    vol.Optional(const.DATA_PLANT_ROTATING_FREQUENCY): vol.Coerce(float),
}

ADD_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_PLANT_NICKNAME): cv.string,
        **_PLANT_FIELDS,
    }
)

UPDATE_PLANT_SCHEMA = vol.Schema(
    {
        **_PLANT_TARGET,
        vol.Optional(const.DATA_PLANT_NICKNAME): cv.string,
        **_PLANT_FIELDS,
        vol.Optional(const.DATA_PLANT_HEALTH_SCORE): vol.Coerce(int),
        vol.Optional(const.DATA_PLANT_HYDRATION_LEVEL): vol.Coerce(int),
        vol.Optional(const.DATA_PLANT_LIGHT_EXPOSURE): vol.Coerce(int),
        vol.Optional(const.DATA_PLANT_HUMIDITY_LEVEL): vol.Coerce(int),
    }
)

REMOVE_PLANT_SCHEMA = vol.Schema(_PLANT_TARGET)

MARK_PLANT_DEAD_SCHEMA = vol.Schema(
    {
        **_PLANT_TARGET,
        vol.Optional(const.FIELD_MESSAGE): cv.string,
    }
)

_TASK_TARGET = {
    vol.Optional(const.FIELD_TASK_ID): cv.string,
    **_PLANT_TARGET,
    vol.Optional(const.FIELD_ACTION): vol.In(_ACTIONS),
}

COMPLETE_TASK_SCHEMA = vol.Schema(_TASK_TARGET)

SNOOZE_TASK_SCHEMA = vol.Schema(
    {
        **_TASK_TARGET,
        vol.Required(const.FIELD_DAYS): vol.Coerce(float),
    }
)

LOG_CARE_EVENT_SCHEMA = vol.Schema(
    {
        **_PLANT_TARGET,
        vol.Required(const.FIELD_ACTION): vol.In(_ACTIONS),
        vol.Optional(const.FIELD_NOTE): cv.string,
    }
)

DISMISS_INSIGHT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_INSIGHT_ID): cv.string,
    }
)

UPDATE_PROFILE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.DATA_PROFILE_USERNAME): cv.string,
        vol.Optional(const.DATA_PROFILE_EXPERIENCE_LEVEL): vol.In(
            const.EXPERIENCE_LEVELS
        ),
    }
)

GET_SCHEDULE_SUGGESTIONS_SCHEMA = vol.Schema(_PLANT_TARGET)

RECONCILE_DATA_SCHEMA = vol.Schema({})


# --- Helpers ---


def _raise_validation_error(err: db.EntityValidationError) -> NoReturn:
    """Translate a builder validation error into a service error."""
    raise ServiceValidationError(
        translation_domain=const.DOMAIN,
        translation_key=err.translation_key,
        translation_placeholders=err.placeholders,
    ) from err


def _plant_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Strip service-only keys, leaving plant data fields."""
    return {
        key: value
        for key, value in data.items()
        if key not in (const.FIELD_PLANT_ID, const.FIELD_PLANT_NAME)
    }


def _resolve_plant(coordinator: PlantCareDataCoordinator, call: ServiceCall) -> str:
    return resolve_plant_id(
        coordinator,
        call.data.get(const.FIELD_PLANT_ID),
        call.data.get(const.FIELD_PLANT_NAME),
    )


def _resolve_task_id(coordinator: PlantCareDataCoordinator, call: ServiceCall) -> str:
    """Return the task id given directly or the pending task for plant + action."""
    task_id = call.data.get(const.FIELD_TASK_ID)
    if task_id:
        return task_id

    plant_id = _resolve_plant(coordinator, call)
    action = call.data.get(const.FIELD_ACTION)
    task = (
        coordinator.task_manager.get_pending_task(plant_id, action) if action else None
    )
    if task is None:
        raise ServiceValidationError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
            translation_placeholders={
                "entity_type": const.ENTITY_TYPE_TASK,
                "name": f"{plant_id}/{action}",
            },
        )
    return task[const.DATA_TASK_ID]


def _raise_failed_result(task_id: str, reason: str | None) -> NoReturn:
    if reason == const.RESULT_REASON_NOT_FOUND:
        raise ServiceValidationError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
            translation_placeholders={
                "entity_type": const.ENTITY_TYPE_TASK,
                "name": task_id,
            },
        )
    raise ServiceValidationError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_TASK_NOT_COMPLETED,
        translation_placeholders={"task_id": task_id, "reason": str(reason)},
    )


def async_setup_services(hass: HomeAssistant) -> None:
    """Register PlantCare services."""

    async def handle_add_plant(call: ServiceCall) -> ServiceResponse:
        """Handle adding a plant."""
        coordinator = get_plantcare_coordinator(hass)
        try:
            plant = await coordinator.plant_manager.async_add_plant(dict(call.data))
        except db.EntityValidationError as err:
            const.LOGGER.warning("WARNING: Add Plant: invalid %s", err.field)
            _raise_validation_error(err)
        return {const.FIELD_PLANT_ID: plant[const.DATA_PLANT_ID]}

    async def handle_update_plant(call: ServiceCall) -> None:
        """Handle editing a plant."""
        coordinator = get_plantcare_coordinator(hass)
        plant_id = _resolve_plant(coordinator, call)
        try:
            await coordinator.plant_manager.async_update_plant(
                plant_id, _plant_fields(dict(call.data))
            )
        except db.EntityValidationError as err:
            const.LOGGER.warning("WARNING: Update Plant: invalid %s", err.field)
            _raise_validation_error(err)

    async def handle_remove_plant(call: ServiceCall) -> None:
        """Handle removing a plant and its tasks."""
        coordinator = get_plantcare_coordinator(hass)
        await coordinator.plant_manager.async_remove_plant(
            _resolve_plant(coordinator, call)
        )

    async def handle_mark_plant_dead(call: ServiceCall) -> None:
        """Handle marking a plant as dead."""
        coordinator = get_plantcare_coordinator(hass)
        await coordinator.plant_manager.async_mark_plant_dead(
            _resolve_plant(coordinator, call),
            message=call.data.get(const.FIELD_MESSAGE),
        )

    async def handle_complete_task(call: ServiceCall) -> ServiceResponse:
        """Handle completing a care task."""
        coordinator = get_plantcare_coordinator(hass)
        task_id = _resolve_task_id(coordinator, call)
        try:
            result = await coordinator.task_manager.async_complete_task(task_id)
        except db.EntityValidationError as err:
            _raise_validation_error(err)
        if not result["success"]:
            _raise_failed_result(task_id, result.get("reason"))
        const.LOGGER.info(
            "INFO: Task '%s' completed, %s XP earned", task_id, result["xp_earned"]
        )
        return dict(result)

    async def handle_snooze_task(call: ServiceCall) -> None:
        """Handle snoozing a care task."""
        coordinator = get_plantcare_coordinator(hass)
        task_id = _resolve_task_id(coordinator, call)
        try:
            result = await coordinator.task_manager.async_snooze_task(
                task_id, call.data[const.FIELD_DAYS]
            )
        except db.EntityValidationError as err:
            const.LOGGER.warning("WARNING: Snooze Task: invalid days")
            _raise_validation_error(err)
        if not result["success"]:
            _raise_failed_result(task_id, result.get("reason"))

    async def handle_log_care_event(call: ServiceCall) -> None:
        """Handle logging a manual care event."""
        coordinator = get_plantcare_coordinator(hass)
        await coordinator.plant_manager.async_log_care_event(
            _resolve_plant(coordinator, call),
            call.data[const.FIELD_ACTION],
            call.data.get(const.FIELD_NOTE),
        )

    async def handle_dismiss_insight(call: ServiceCall) -> None:
        """Handle dismissing an insight."""
        coordinator = get_plantcare_coordinator(hass)
        await coordinator.insight_manager.async_dismiss_insight(
            call.data[const.FIELD_INSIGHT_ID]
        )

    async def handle_update_profile(call: ServiceCall) -> None:
        """Handle editing the profile."""
        coordinator = get_plantcare_coordinator(hass)
        await coordinator.gamification_manager.async_update_profile(
            username=call.data.get(const.DATA_PROFILE_USERNAME),
            experience_level=call.data.get(const.DATA_PROFILE_EXPERIENCE_LEVEL),
        )

    async def handle_get_schedule_suggestions(call: ServiceCall) -> ServiceResponse:
        """Return frequency suggestions for a plant."""
        coordinator = get_plantcare_coordinator(hass)
        plant_id = _resolve_plant(coordinator, call)
        suggestions = coordinator.plant_manager.get_schedule_suggestions(plant_id)
        return {
            const.FIELD_PLANT_ID: plant_id,
            "suggestions": [dict(suggestion) for suggestion in suggestions],
        }

    async def handle_reconcile_data(call: ServiceCall) -> ServiceResponse:
        """Re-read the stored document and close duplicate pending tasks."""
        coordinator = get_plantcare_coordinator(hass)
        closed = await coordinator.async_reconcile()
        return {const.FIELD_CLOSED_TASK_IDS: closed}

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_PLANT,
        handle_add_plant,
        schema=ADD_PLANT_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_PLANT,
        handle_update_plant,
        schema=UPDATE_PLANT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REMOVE_PLANT,
        handle_remove_plant,
        schema=REMOVE_PLANT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_MARK_PLANT_DEAD,
        handle_mark_plant_dead,
        schema=MARK_PLANT_DEAD_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_COMPLETE_TASK,
        handle_complete_task,
        schema=COMPLETE_TASK_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SNOOZE_TASK,
        handle_snooze_task,
        schema=SNOOZE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_CARE_EVENT,
        handle_log_care_event,
        schema=LOG_CARE_EVENT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DISMISS_INSIGHT,
        handle_dismiss_insight,
        schema=DISMISS_INSIGHT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_PROFILE,
        handle_update_profile,
        schema=UPDATE_PROFILE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_SCHEDULE_SUGGESTIONS,
        handle_get_schedule_suggestions,
        schema=GET_SCHEDULE_SUGGESTIONS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RECONCILE_DATA,
        handle_reconcile_data,
        schema=RECONCILE_DATA_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    const.LOGGER.info("INFO: PlantCare services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister PlantCare services when unloading the integration."""
    services = [
        const.SERVICE_ADD_PLANT,
        const.SERVICE_UPDATE_PLANT,
        const.SERVICE_REMOVE_PLANT,
        const.SERVICE_MARK_PLANT_DEAD,
        const.SERVICE_COMPLETE_TASK,
        const.SERVICE_SNOOZE_TASK,
        const.SERVICE_LOG_CARE_EVENT,
        const.SERVICE_DISMISS_INSIGHT,
        const.SERVICE_UPDATE_PROFILE,
        const.SERVICE_GET_SCHEDULE_SUGGESTIONS,
        const.SERVICE_RECONCILE_DATA,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: PlantCare services have been unregistered")
