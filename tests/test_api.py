"""Tests for the Family Cleanup remote gateway."""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from pytest_homeassistant_custom_component.test_util.aiohttp import (
    AiohttpClientMocker,
)

from custom_components.family_cleanup.api import (
    FamilyCleanupApiClient,
    FamilyCleanupNetworkError,
    FamilyCleanupParseError,
)

from .conftest import REMOTE_PAYLOAD, SCRIPT_URL


@pytest.fixture
def api_client(
    hass: HomeAssistant, aioclient_mock: AiohttpClientMocker
) -> FamilyCleanupApiClient:
    """Return a client bound to the mocked session."""
    # pylint: disable=unused-argument
    return FamilyCleanupApiClient(async_get_clientsession(hass), SCRIPT_URL)


def _mock_post_session(post_side_effect: Exception | None = None) -> MagicMock:
    """Build a session whose post() works as an async context manager."""
    response = MagicMock()
    response.status = 200
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=None)
    session = MagicMock()
    if post_side_effect is not None:
        session.post.side_effect = post_side_effect
    else:
        session.post.return_value = context
    return session


async def test_fetch_all_returns_both_tables(
    api_client: FamilyCleanupApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """A successful read returns the tasks and schedule tables untouched."""
    aioclient_mock.get(SCRIPT_URL, json=REMOTE_PAYLOAD)

    payload = await api_client.async_fetch_all()

    assert payload == REMOTE_PAYLOAD
    assert aioclient_mock.call_count == 1


async def test_fetch_all_missing_tables_default_to_empty(
    api_client: FamilyCleanupApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """A body without tables reads as two empty tables."""
    aioclient_mock.get(SCRIPT_URL, json={"status": "ok"})

    payload = await api_client.async_fetch_all()

    assert payload == {"tasks": [], "schedule": []}


async def test_fetch_all_error_status_raises_network_error(
    api_client: FamilyCleanupApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Non-success statuses are network errors."""
    aioclient_mock.get(SCRIPT_URL, status=500)

    with pytest.raises(FamilyCleanupNetworkError):
        await api_client.async_fetch_all()


@pytest.mark.parametrize("exc", [aiohttp.ClientError(), TimeoutError()])
async def test_fetch_all_transport_error_raises_network_error(
    api_client: FamilyCleanupApiClient,
    aioclient_mock: AiohttpClientMocker,
    exc: Exception,
) -> None:
    """Transport failures and timeouts are network errors."""
    aioclient_mock.get(SCRIPT_URL, exc=exc)

    with pytest.raises(FamilyCleanupNetworkError):
        await api_client.async_fetch_all()


async def test_fetch_all_invalid_json_raises_parse_error(
    api_client: FamilyCleanupApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """An HTML error page is a parse error."""
    aioclient_mock.get(SCRIPT_URL, text="<html>Sign in</html>")

    with pytest.raises(FamilyCleanupParseError):
        await api_client.async_fetch_all()


@pytest.mark.parametrize(
    "body", [["not", "an", "object"], {"tasks": "nope", "schedule": []}]
)
async def test_fetch_all_unexpected_shape_raises_parse_error(
    api_client: FamilyCleanupApiClient,
    aioclient_mock: AiohttpClientMocker,
    body: object,
) -> None:
    """Bodies that are not two lists of rows are parse errors."""
    aioclient_mock.get(SCRIPT_URL, json=body)

    with pytest.raises(FamilyCleanupParseError):
        await api_client.async_fetch_all()


async def test_send_mutation_posts_action_and_fields() -> None:
    """Writes post the action discriminator merged with its fields."""
    session = _mock_post_session()
    client = FamilyCleanupApiClient(session, SCRIPT_URL)

    await client.async_send_mutation(
        "updateTask", person="Alice", text="Dishes", category="tasks", completed=True
    )

    session.post.assert_called_once_with(
        SCRIPT_URL,
        json={
            "action": "updateTask",
            "person": "Alice",
            "text": "Dishes",
            "category": "tasks",
            "completed": True,
        },
    )


async def test_send_mutation_reset_has_no_fields() -> None:
    """resetCheckboxes carries only the action."""
    session = _mock_post_session()
    client = FamilyCleanupApiClient(session, SCRIPT_URL)

    await client.async_send_mutation("resetCheckboxes")

    session.post.assert_called_once_with(
        SCRIPT_URL, json={"action": "resetCheckboxes"}
    )


@pytest.mark.parametrize("exc", [aiohttp.ClientError("boom"), TimeoutError()])
async def test_send_mutation_swallows_transport_errors(
    exc: Exception, caplog: pytest.LogCaptureFixture
) -> None:
    """Failed writes are logged, never raised."""
    client = FamilyCleanupApiClient(_mock_post_session(exc), SCRIPT_URL)

    await client.async_send_mutation("addPerson", person="Carol")

    assert "Background update 'addPerson' failed" in caplog.text


async def test_send_mutation_rejects_unknown_action() -> None:
    """Unknown actions are a programming error."""
    session = _mock_post_session()
    client = FamilyCleanupApiClient(session, SCRIPT_URL)

    with pytest.raises(ValueError):
        await client.async_send_mutation("dropTable")

    session.post.assert_not_called()
