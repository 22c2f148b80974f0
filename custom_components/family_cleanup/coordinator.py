# File: coordinator.py
"""Coordinator for the Family Cleanup integration.

Owns the Local Store, rehydrates it from the durable cache at startup and
periodically pulls the remote spreadsheet state, merging it in unless a pull
is already running, a local change is still inside its silence window, or the
user is in the middle of editing.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from . import const
from .engines.family_engine import FamilyCleanupError, FamilyEngine
from .managers.mutation_manager import MutationManager

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

    from .api import FamilyCleanupApiClient
    from .storage_manager import FamilyCleanupStorageManager
    from .type_defs import FamilyData, PersonData, WeeklySchedule


def _never_editing() -> bool:
    return False


class FamilyCleanupCoordinator(DataUpdateCoordinator["FamilyData"]):
    """Coordinator for Family Cleanup integration.

    The remote store is authoritative for people and tasks (replaced
    wholesale) and incrementally authoritative for the schedule (patched key
    by key). Local mutations go through ``mutation_manager``.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: FamilyCleanupStorageManager,
        api: FamilyCleanupApiClient,
    ) -> None:
        """Initialize the FamilyCleanupCoordinator."""
        update_interval_seconds = config_entry.options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )
        silence_window_seconds = config_entry.options.get(
            const.CONF_SILENCE_WINDOW, const.DEFAULT_SILENCE_WINDOW
        )

        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(seconds=update_interval_seconds),
        )
        self.storage_manager = storage_manager
        self.api = api
        self._data: FamilyData = FamilyEngine.empty_data()
        self._pull_in_flight = False
        self._is_user_editing: Callable[[], bool] = _never_editing
        self.mutation_manager = MutationManager(
            hass, self, api, silence_window=silence_window_seconds
        )

        if silence_window_seconds <= update_interval_seconds:
            const.LOGGER.warning(
                "WARNING: Silence window (%ss) does not exceed the update interval "
                "(%ss); a pull may overwrite a change before the remote store applies it",
                silence_window_seconds,
                update_interval_seconds,
            )

    # -------------------------------------------------------------------------------------
    # Local Store Access
    # -------------------------------------------------------------------------------------

    @property
    def family_data(self) -> FamilyData:
        """Return the Local Store (mutated in place by the MutationManager)."""
        return self._data

    @property
    def people(self) -> list[PersonData]:
        """Return the ordered list of people."""
        return self._data[const.DATA_PEOPLE]

    @property
    def schedule(self) -> WeeklySchedule:
        """Return the weekly focus schedule."""
        return self._data[const.DATA_SCHEDULE]

    @property
    def pull_in_flight(self) -> bool:
        """Return True while a remote read is awaiting its response."""
        return self._pull_in_flight

    def get_person(self, name: str) -> PersonData | None:
        """Return the person called ``name`` if present."""
        for person in self.people:
            if person[const.DATA_PERSON_NAME] == name:
                return person
        return None

    def todays_focus(self) -> str:
        """Return the schedule label for the local weekday."""
        # Python weekday(): Monday=0; schedule: Sunday=0
        weekday = (dt_util.now().weekday() + 1) % const.DAYS_IN_WEEK
        return FamilyEngine.label_for_day(self.schedule, weekday)

    @callback
    def set_editing_predicate(self, predicate: Callable[[], bool] | None) -> None:
        """Install the "is the user editing right now" check used to skip pulls."""
        self._is_user_editing = predicate or _never_editing

    @callback
    def async_local_update(self) -> None:
        """Persist the Local Store and push it to entities after a local change."""
        self._persist()
        self.async_update_listeners()

    # -------------------------------------------------------------------------------------
    # Periodic + First Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> FamilyData:
        """Pull remote state and merge it, unless a guard says to skip."""
        if self._pull_in_flight:
            const.LOGGER.debug("DEBUG: Pull skipped: another pull is in flight")
            return self._data
        if self.mutation_manager.silence_window_active:
            const.LOGGER.debug("DEBUG: Pull skipped: silence window active")
            return self._data
        if self._is_user_editing():
            const.LOGGER.debug("DEBUG: Pull skipped: user is editing")
            return self._data

        self._pull_in_flight = True
        try:
            payload = await self.api.async_fetch_all()
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Background sync failed: %s", err)
            return self._data
        finally:
            self._pull_in_flight = False

        # A local change made while the read was in flight wins over it
        if self.mutation_manager.silence_window_active:
            const.LOGGER.debug(
                "DEBUG: Discarding pulled state: local change made during the pull"
            )
            return self._data

        try:
            FamilyEngine.merge_remote(
                self._data,
                payload[const.REMOTE_TABLE_TASKS],
                payload[const.REMOTE_TABLE_SCHEDULE],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            const.LOGGER.warning(
                "WARNING: Background sync failed: could not merge remote state: %s",
                err,
            )
            return self._data
        self._persist()
        const.LOGGER.debug(
            "DEBUG: Merged remote state: %s people", len(self.people)
        )
        return self._data

    async def async_config_entry_first_refresh(self) -> None:
        """Load the cached household, then pull once."""
        self._data = self.storage_manager.load_family_data()
        const.LOGGER.info(
            "INFO: Restored %s people from cache", len(self.people)
        )

        # The focus sensor follows the weekday
        self.config_entry.async_on_unload(
            async_track_time_change(
                self.hass, self._async_handle_midnight, hour=0, minute=0, second=0
            )
        )

        await super().async_config_entry_first_refresh()

    @callback
    def _async_handle_midnight(self, _now: datetime) -> None:
        self.async_update_listeners()

    async def async_shutdown(self) -> None:
        """Cancel the silence window timer and stop polling."""
        self.mutation_manager.async_cancel_silence_window()
        await super().async_shutdown()

    # -------------------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.storage_manager.store_family_data(self._data)
        self.hass.async_create_task(self.storage_manager.async_save())
