# File: api.py
"""Remote gateway for the spreadsheet-backed Family Cleanup endpoint.

The endpoint exposes two operations on a single URL:
- GET returns the full state as two header-prefixed tables.
- POST appends a single mutation described by an ``action`` discriminator.

Reads raise on failure so the coordinator can keep local state. Writes are
fire-and-forget: failures are logged and swallowed, never raised to callers.
"""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import aiohttp

from . import const
from .engines.family_engine import FamilyCleanupError

if TYPE_CHECKING:
    from .type_defs import RemotePayload


class FamilyCleanupNetworkError(FamilyCleanupError):
    """Transport failure or non-success status while reading remote state."""


class FamilyCleanupParseError(FamilyCleanupError):
    """Remote state could not be decoded into the expected shape."""


class FamilyCleanupApiClient:
    """Thin async client around the spreadsheet script URL."""

    def __init__(self, session: aiohttp.ClientSession, script_url: str) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session (from async_get_clientsession).
            script_url: Deployed script endpoint handling both GET and POST.
        """
        self._session = session
        self._script_url = script_url

    @property
    def script_url(self) -> str:
        """Return the configured endpoint."""
        return self._script_url

    async def async_fetch_all(self) -> RemotePayload:
        """Read the full remote state.

        Raises:
            FamilyCleanupNetworkError: Transport error, timeout or non-200 status.
            FamilyCleanupParseError: Body is not a JSON object.
        """
        try:
            async with asyncio.timeout(const.REQUEST_TIMEOUT):
                async with self._session.get(self._script_url) as response:
                    if response.status != HTTPStatus.OK:
                        raise FamilyCleanupNetworkError(
                            f"HTTP {response.status} fetching remote state"
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as err:
            raise FamilyCleanupNetworkError(
                f"Error fetching remote state: {err}"
            ) from err
        except ValueError as err:
            raise FamilyCleanupParseError(
                f"Remote state is not valid JSON: {err}"
            ) from err

        if not isinstance(payload, dict):
            raise FamilyCleanupParseError(
                f"Unexpected remote state shape: {type(payload).__name__}"
            )

        tasks = payload.get(const.REMOTE_TABLE_TASKS) or []
        schedule = payload.get(const.REMOTE_TABLE_SCHEDULE) or []
        if not isinstance(tasks, list) or not isinstance(schedule, list):
            raise FamilyCleanupParseError("Remote tables must be lists of rows")

        const.LOGGER.debug(
            "DEBUG: Fetched remote state: %s task rows, %s schedule rows",
            max(len(tasks) - 1, 0),
            max(len(schedule) - 1, 0),
        )
        return {
            const.REMOTE_TABLE_TASKS: tasks,
            const.REMOTE_TABLE_SCHEDULE: schedule,
        }

    async def async_send_mutation(self, action: str, **fields: Any) -> None:
        """Post a single mutation, best effort.

        The response body is ignored and there is no acknowledgement; success
        is assumed unless the transport fails. Transport errors are logged and
        swallowed.

        Raises:
            ValueError: ``action`` is not a known remote action.
        """
        if action not in const.REMOTE_ACTIONS:
            raise ValueError(f"Unknown remote action: {action}")

        body = {const.REMOTE_FIELD_ACTION: action, **fields}
        try:
            async with asyncio.timeout(const.REQUEST_TIMEOUT):
                async with self._session.post(self._script_url, json=body) as response:
                    const.LOGGER.debug(
                        "DEBUG: Sent '%s' to remote store (HTTP %s)",
                        action,
                        response.status,
                    )
        except (aiohttp.ClientError, TimeoutError) as err:
            const.LOGGER.warning(
                "WARNING: Background update '%s' failed: %s", action, err
            )
