"""Tests for Family Cleanup config and options flows."""

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.family_cleanup.const import (
    CONF_SCRIPT_URL,
    CONF_SILENCE_WINDOW,
    CONF_UPDATE_INTERVAL,
    DEFAULT_SILENCE_WINDOW,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
)

from .conftest import SCRIPT_URL


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful user config flow."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "user"

    with patch(
        "custom_components.family_cleanup.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={CONF_SCRIPT_URL: f"  {SCRIPT_URL} "},
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == "Family Cleanup"
    assert result.get("data") == {CONF_SCRIPT_URL: SCRIPT_URL}
    assert result.get("options") == {
        CONF_UPDATE_INTERVAL: DEFAULT_UPDATE_INTERVAL,
        CONF_SILENCE_WINDOW: DEFAULT_SILENCE_WINDOW,
    }
    assert len(mock_setup_entry.mock_calls) == 1


async def test_form_rejects_invalid_url(hass: HomeAssistant) -> None:
    """Non-http URLs keep the form open with an error."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input={CONF_SCRIPT_URL: "ftp://example.com/exec"},
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {"base": "invalid_url"}


async def test_single_instance_only(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A second household cannot be configured."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == "single_instance_allowed"


async def test_options_flow_updates_timings(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """The options flow stores whole-second timings."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "init"

    result = await hass.config_entries.options.async_configure(
        result.get("flow_id"),
        user_input={CONF_UPDATE_INTERVAL: 20.0, CONF_SILENCE_WINDOW: 45.0},
    )

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert mock_config_entry.options == {
        CONF_UPDATE_INTERVAL: 20,
        CONF_SILENCE_WINDOW: 45,
    }
