"""Shared fixtures for Family Cleanup tests."""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry
from pytest_homeassistant_custom_component.test_util.aiohttp import (
    AiohttpClientMocker,
)

from custom_components.family_cleanup.const import (
    CONF_SCRIPT_URL,
    CONF_SILENCE_WINDOW,
    CONF_UPDATE_INTERVAL,
    DEFAULT_SILENCE_WINDOW,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
)
from custom_components.family_cleanup.coordinator import FamilyCleanupCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

SCRIPT_URL = "https://script.example.com/macros/s/test-deployment/exec"

REMOTE_PAYLOAD: dict[str, list[list[Any]]] = {
    "tasks": [
        ["Person", "Task", "Completed", "Category"],
        ["Alice", "Dishes", "TRUE", "tasks"],
        ["Alice", "Make bed", False, "routine"],
        ["Bob", "Vacuum", False, "tasks"],
        ["Bob", "Trash", True, "tasks"],
    ],
    "schedule": [
        ["Day", "Focus"],
        [1, "Bathrooms!"],
    ],
}


def create_cache_blob(
    people: list[dict[str, Any]] | None = None,
    schedule: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Create a cache blob in the stored ``{familyData, weeklySchedule}`` shape."""
    blob: dict[str, Any] = {"familyData": people or []}
    if schedule is not None:
        blob["weeklySchedule"] = schedule
    return blob


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Family Cleanup",
        data={CONF_SCRIPT_URL: SCRIPT_URL},
        options={
            CONF_UPDATE_INTERVAL: DEFAULT_UPDATE_INTERVAL,
            CONF_SILENCE_WINDOW: DEFAULT_SILENCE_WINDOW,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def mock_cache_blob() -> dict[str, Any]:
    """Return the cache blob found on disk at startup."""
    return create_cache_blob(
        people=[
            {
                "name": "Alice",
                "tasks": [
                    {
                        "internal_id": "cached-dishes",
                        "text": "Dishes",
                        "completed": False,
                    }
                ],
                "routine": [],
            }
        ],
    )


@pytest.fixture
def mock_storage_manager(
    mock_cache_blob: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MagicMock:
    """Return a mock storage manager."""
    mock = MagicMock()
    mock.data = mock_cache_blob
    mock.async_save = AsyncMock()
    return mock


@pytest.fixture
def mock_api() -> MagicMock:
    """Return a mock remote gateway."""
    mock = MagicMock()
    mock.script_url = SCRIPT_URL
    mock.async_fetch_all = AsyncMock(return_value=REMOTE_PAYLOAD)
    mock.async_send_mutation = AsyncMock()
    return mock


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_manager: MagicMock,  # pylint: disable=redefined-outer-name
    mock_api: MagicMock,  # pylint: disable=redefined-outer-name
) -> FamilyCleanupCoordinator:
    """Return a coordinator wired to mock storage and a mock gateway."""
    mock_config_entry.add_to_hass(hass)
    return FamilyCleanupCoordinator(
        hass, mock_config_entry, mock_storage_manager, mock_api
    )


@pytest.fixture
def mock_call_later() -> Any:
    """Patch the silence window timer so tests can fire it by hand."""
    with patch(
        "custom_components.family_cleanup.managers.mutation_manager.async_call_later"
    ) as mock_later:
        unsubs: list[MagicMock] = []

        def _call_later(*_args: Any) -> MagicMock:
            unsub = MagicMock()
            unsubs.append(unsub)
            return unsub

        mock_later.side_effect = _call_later
        mock_later.unsubs = unsubs
        yield mock_later


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    aioclient_mock: AiohttpClientMocker,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_cache_blob: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry, None]:
    """Set up the Family Cleanup integration with a cache and a mocked endpoint."""
    aioclient_mock.get(SCRIPT_URL, json=REMOTE_PAYLOAD)
    aioclient_mock.post(SCRIPT_URL, json={"status": "ok"})

    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our cache blob
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_cache_blob,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    yield mock_config_entry

    if mock_config_entry.state is ConfigEntryState.LOADED:
        await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()
