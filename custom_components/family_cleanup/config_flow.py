# File: config_flow.py
"""Config flow for the Family Cleanup integration.

A single step collects the spreadsheet script URL. Only one household can be
configured per Home Assistant instance.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv

from . import const
from .options_flow import FamilyCleanupOptionsFlowHandler


def build_user_schema(default_url: str = "") -> vol.Schema:
    """Build the schema for the script URL step."""
    return vol.Schema(
        {vol.Required(const.CONF_SCRIPT_URL, default=default_url): cv.string}
    )


class FamilyCleanupConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Family Cleanup."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Ask for the script URL."""

        # Check if there's an existing Family Cleanup entry
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        default_url = ""

        if user_input is not None:
            default_url = user_input[const.CONF_SCRIPT_URL].strip()
            try:
                script_url = cv.url(default_url)
            except vol.Invalid:
                const.LOGGER.debug("DEBUG: Rejected script URL: %s", default_url)
                errors["base"] = const.ERROR_INVALID_URL
            else:
                return self.async_create_entry(
                    title=const.FAMILY_CLEANUP_TITLE,
                    data={const.CONF_SCRIPT_URL: script_url},
                    options={
                        const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
                        const.CONF_SILENCE_WINDOW: const.DEFAULT_SILENCE_WINDOW,
                    },
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=build_user_schema(default_url),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return FamilyCleanupOptionsFlowHandler(config_entry)
