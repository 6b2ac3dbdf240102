# File: config_flow.py
"""Config flow for the PlantCare integration.

One config entry represents one gardener profile. The user step collects the
profile name and experience level; the options flow tunes the refresh
interval and the default care frequencies applied to new plants.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import selector

from . import const

# pylint: disable=abstract-method


def _number_selector(minimum: int, maximum: int | None = None) -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            mode=selector.NumberSelectorMode.BOX,
            min=minimum,
            max=maximum,
            step=1,
        )
    )


def build_options_schema(default: dict[str, Any] | None = None) -> vol.Schema:
    """Build schema for general options: update interval and default frequencies."""
    default = default or {}
    schema: dict[Any, Any] = {
        vol.Required(
            const.CONF_UPDATE_INTERVAL,
            default=default.get(
                const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
            ),
        ): _number_selector(1),
    }
    for spec in const.CARE_ACTIONS.values():
        schema[
            vol.Required(
                spec.conf_default_frequency,
                default=default.get(
                    spec.conf_default_frequency, spec.default_frequency_days
                ),
            )
        ] = _number_selector(1, 365)
    return vol.Schema(schema)


class PlantCareConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for PlantCare."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Collect the profile name and experience level."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            username = user_input[const.CONF_USERNAME].strip()
            if not username:
                errors[const.CONF_USERNAME] = const.TRANS_KEY_ERROR_INVALID_VALUE
            else:
                return self.async_create_entry(
                    title=username,
                    data={
                        const.CONF_USERNAME: username,
                        const.CONF_EXPERIENCE_LEVEL: user_input[
                            const.CONF_EXPERIENCE_LEVEL
                        ],
                    },
                    options={
                        const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        const.CONF_USERNAME, default=const.DEFAULT_USERNAME
                    ): selector.TextSelector(),
                    vol.Required(
                        const.CONF_EXPERIENCE_LEVEL,
                        default=const.EXPERIENCE_LEVEL_BEGINNER,
                    ): selector.SelectSelector(
                        selector.SelectSelectorConfig(
                            options=const.EXPERIENCE_LEVELS,
                            mode=selector.SelectSelectorMode.LIST,
                            translation_key=const.CONF_EXPERIENCE_LEVEL,
                        )
                    ),
                }
            ),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> PlantCareOptionsFlowHandler:
        """Return the Options Flow."""
        return PlantCareOptionsFlowHandler()


class PlantCareOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for the refresh interval and default frequencies."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Show and save general options; the entry reloads on change."""
        if user_input is not None:
            return self.async_create_entry(
                data={key: int(value) for key, value in user_input.items()}
            )

        return self.async_show_form(
            step_id="init",
            data_schema=build_options_schema(dict(self.config_entry.options)),
        )
