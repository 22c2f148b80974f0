"""Base entity classes for Family Cleanup integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import FamilyCleanupCoordinator


class FamilyCleanupCoordinatorEntity(CoordinatorEntity[FamilyCleanupCoordinator]):
    """Base entity class for Family Cleanup sensors.

    All entities hang off a single household device per config entry.
    """

    def __init__(
        self, coordinator: FamilyCleanupCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the entity and attach it to the household device."""
        super().__init__(coordinator)
        self._attr_device_info = DeviceInfo(
            identifiers={(const.DOMAIN, entry.entry_id)},
            name=entry.title,
            manufacturer=const.FAMILY_CLEANUP_TITLE,
        )
