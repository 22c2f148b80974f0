"""Tests for Family Cleanup diagnostics module."""

from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.family_cleanup import const
from custom_components.family_cleanup.diagnostics import (
    async_get_config_entry_diagnostics,
)


async def test_config_entry_diagnostics(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Diagnostics return the cached blob and sync state, URL redacted."""
    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result[const.DIAG_ENTRY][const.CONF_SCRIPT_URL] == "**REDACTED**"

    cache = result[const.DIAG_CACHE]
    assert [p["name"] for p in cache[const.CACHE_FAMILY_DATA]] == ["Alice", "Bob"]
    assert cache[const.CACHE_WEEKLY_SCHEDULE]["1"] == "Bathrooms!"

    sync = result[const.DIAG_SYNC]
    assert sync[const.DIAG_LAST_UPDATE_SUCCESS] is True
    assert sync[const.DIAG_UPDATE_INTERVAL] == 15
    assert sync[const.ATTR_PULL_IN_FLIGHT] is False
    assert sync[const.ATTR_SILENCE_WINDOW_ACTIVE] is False


async def test_diagnostics_reflect_local_change(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A mutation shows up in the cache and opens the silence window."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADD_PERSON,
        {const.FIELD_NAME: "Carol"},
        blocking=True,
    )

    result = await async_get_config_entry_diagnostics(hass, init_integration)

    names = [p["name"] for p in result[const.DIAG_CACHE][const.CACHE_FAMILY_DATA]]
    assert names == ["Alice", "Bob", "Carol"]
    assert result[const.DIAG_SYNC][const.ATTR_SILENCE_WINDOW_ACTIVE] is True
