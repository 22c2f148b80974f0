"""Diagnostics support for Family Cleanup integration.

The ``cache`` section is the stored blob as-is (the same
``{familyData, weeklySchedule}`` shape the offline cache uses), so it can be
inspected or compared against the spreadsheet directly. The script URL acts
as the spreadsheet's only credential and is redacted.
"""

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import FamilyCleanupCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: FamilyCleanupCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        const.DIAG_ENTRY: async_redact_data(dict(entry.data), const.DIAG_TO_REDACT),
        const.DIAG_CACHE: coordinator.storage_manager.data,
        const.DIAG_SYNC: {
            const.DIAG_LAST_UPDATE_SUCCESS: coordinator.last_update_success,
            const.DIAG_UPDATE_INTERVAL: (
                coordinator.update_interval.total_seconds()
                if coordinator.update_interval
                else None
            ),
            const.ATTR_PULL_IN_FLIGHT: coordinator.pull_in_flight,
            const.ATTR_SILENCE_WINDOW_ACTIVE: (
                coordinator.mutation_manager.silence_window_active
            ),
        },
    }
