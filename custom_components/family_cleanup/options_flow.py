# File: options_flow.py
"""Options Flow for the Family Cleanup integration.

Tunes the sync timings. Saving new options reloads the entry, which restarts
the coordinator with the new update interval and silence window.
"""

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from . import const


def build_sync_options_schema(default: dict) -> vol.Schema:
    """Build the schema for the sync timing options."""
    default_interval = default.get(
        const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
    )
    default_silence = default.get(
        const.CONF_SILENCE_WINDOW, const.DEFAULT_SILENCE_WINDOW
    )

    return vol.Schema(
        {
            vol.Required(
                const.CONF_UPDATE_INTERVAL, default=default_interval
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_INTERVAL_SECONDS,
                    max=const.MAX_INTERVAL_SECONDS,
                    step=1,
                    unit_of_measurement="s",
                )
            ),
            vol.Required(
                const.CONF_SILENCE_WINDOW, default=default_silence
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_INTERVAL_SECONDS,
                    max=const.MAX_INTERVAL_SECONDS,
                    step=1,
                    unit_of_measurement="s",
                )
            ),
        }
    )


class FamilyCleanupOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for the sync timings."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options = {}

    async def async_step_init(self, user_input=None):
        """Show and save the sync timing options."""
        self._entry_options = dict(self.config_entry.options)

        if user_input is not None:
            self._entry_options[const.CONF_UPDATE_INTERVAL] = int(
                user_input[const.CONF_UPDATE_INTERVAL]
            )
            self._entry_options[const.CONF_SILENCE_WINDOW] = int(
                user_input[const.CONF_SILENCE_WINDOW]
            )
            const.LOGGER.debug(
                "DEBUG: Sync options updated: interval=%ss silence=%ss",
                self._entry_options[const.CONF_UPDATE_INTERVAL],
                self._entry_options[const.CONF_SILENCE_WINDOW],
            )
            return self.async_create_entry(title="", data=self._entry_options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=build_sync_options_schema(self._entry_options),
        )
