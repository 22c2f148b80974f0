# File: __init__.py
"""Initialization file for the Family Cleanup integration.

Handles setting up the integration, including loading the cached household,
wiring the spreadsheet gateway and preparing the coordinator for syncing.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for optimistic sync with the spreadsheet.
- Storage management for the offline cache.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .api import FamilyCleanupApiClient
from .coordinator import FamilyCleanupCoordinator
from .services import async_setup_services, async_unload_services
from .storage_manager import FamilyCleanupStorageManager


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info(
        "INFO: Starting setup for Family Cleanup entry: %s", entry.entry_id
    )

    # Initialize the storage manager to handle the offline cache.
    storage_manager = FamilyCleanupStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_initialize()

    api = FamilyCleanupApiClient(
        async_get_clientsession(hass), entry.data[const.CONF_SCRIPT_URL]
    )

    # Create the coordinator for the sync loop.
    coordinator = FamilyCleanupCoordinator(hass, entry, storage_manager, api)

    try:
        # Restore the cache, then pull once (a failed pull keeps the cache).
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    # Store the coordinator and data manager in hass.data.
    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
    }

    # Set up services required by the integration.
    async_setup_services(hass)

    # Forward the setup to supported platforms.
    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Reload when the sync timings change.
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info(
        "INFO: Family Cleanup setup complete for entry: %s", entry.entry_id
    )
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after an options change."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Family Cleanup entry: %s", entry.entry_id)

    # Unload platforms
    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        coordinator: FamilyCleanupCoordinator = entry_data[const.COORDINATOR]
        await coordinator.async_shutdown()

        # Await service unloading
        await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Family Cleanup entry: %s", entry.entry_id)

    # The entry is already unloaded here, so open the store directly.
    storage_manager = FamilyCleanupStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()

    const.LOGGER.info("INFO: Family Cleanup cache cleared: %s", entry.entry_id)
