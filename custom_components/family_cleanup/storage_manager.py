# File: storage_manager.py
"""Handles the durable local cache for the Family Cleanup integration.

Uses Home Assistant's Storage helper to keep a snapshot of the household
(people, their lists and the weekly schedule) so the integration starts
instantly with the last known state, before the first remote pull.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .engines.family_engine import FamilyEngine

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import FamilyData


class FamilyCleanupStorageManager:
    """Manages loading, saving and clearing the cache blob.

    The blob keeps the ``{familyData, weeklySchedule}`` shape used by the
    browser client, so a cache exported from either side reads the same.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        self.hass = hass
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # Last persisted cache blob.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return the blob for an empty household with the default schedule."""
        return dict(FamilyEngine.to_cache_blob(FamilyEngine.empty_data()))

    async def async_initialize(self) -> None:
        """Load the cache blob during startup.

        If no data exists, initializes with an empty structure.
        """
        const.LOGGER.debug("DEBUG: FamilyCleanupStorageManager: Loading cache")
        existing_data = await self._store.async_load()

        if not isinstance(existing_data, dict):
            const.LOGGER.info("INFO: No existing cache found. Starting empty")
            self._data = self.get_default_structure()
        else:
            self._data = existing_data
            const.LOGGER.debug(
                "DEBUG: Loaded cache with %s people",
                len(self._data.get(const.CACHE_FAMILY_DATA) or []),
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the cache blob."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the cache blob."""
        self._data = new_data

    def load_family_data(self) -> FamilyData:
        """Rebuild the Local Store from the cache blob (best effort)."""
        return FamilyEngine.from_cache_blob(self._data)

    def store_family_data(self, family_data: FamilyData) -> None:
        """Snapshot the Local Store into the cache blob (no I/O)."""
        self._data = dict(FamilyEngine.to_cache_blob(family_data))

    async def async_save(self) -> None:
        """Write the cache blob. Failures are logged; the in-memory store is kept."""
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Cache saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save cache due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save cache due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save cache due to invalid data format: %s",
                err,
            )

    async def async_delete_storage(self) -> None:
        """Delete the cache file completely from disk."""
        self._data = self.get_default_structure()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Cache file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove cache file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
