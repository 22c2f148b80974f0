"""Mutation Manager - Optimistic local changes with best-effort remote sync.

Every user action follows the same pipeline:
1. Apply the FamilyEngine mutation to the coordinator's data synchronously.
2. Persist the snapshot and push the new state to entities.
3. Arm the silence window (cancel any pending expiry, schedule a new one).
4. Forward the change to the remote store as a background task.

While the silence window is open the coordinator skips its periodic pull,
giving the remote store time to apply the write before it is read back.

ARCHITECTURE:
- MutationManager = "The Job" (STATEFUL pipeline, owns the silence timer)
- FamilyEngine = Pure mutation logic (STATELESS)
- FamilyCleanupCoordinator = Reconciler (periodic pull, persistence)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_call_later

from .. import const
from ..engines.family_engine import FamilyEngine

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.core import CALLBACK_TYPE, HomeAssistant

    from ..api import FamilyCleanupApiClient
    from ..coordinator import FamilyCleanupCoordinator
    from ..type_defs import PersonData, TaskData


# (action, fields) pairs sent in order by a single background task
RemoteMutation = tuple[str, dict[str, Any]]


__all__ = ["MutationManager"]


class MutationManager:
    """Applies user actions locally and forwards them to the remote store.

    Responsibilities:
    - Run every action through the apply / render / silence / send pipeline
    - Own the single-slot silence window timer
    - Fire the list-completed event when a list becomes fully checked

    NOT responsible for:
    - Pure mutation logic (delegated to FamilyEngine)
    - Pulling remote state (FamilyCleanupCoordinator)
    - Delivery guarantees (sends are at-most-once and unordered remotely)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: FamilyCleanupCoordinator,
        api: FamilyCleanupApiClient,
        silence_window: float = const.DEFAULT_SILENCE_WINDOW,
    ) -> None:
        """Initialize MutationManager with dependencies.

        Args:
            hass: Home Assistant instance
            coordinator: Coordinator owning the Local Store
            api: Remote gateway used for fire-and-forget writes
            silence_window: Seconds to suppress pulls after each mutation
        """
        self.hass = hass
        self._coordinator = coordinator
        self._api = api
        self._silence_window = silence_window
        self._silenced = False
        self._unsub_silence: CALLBACK_TYPE | None = None

    @property
    def silence_window_active(self) -> bool:
        """Return True while pulls must not touch the Local Store."""
        return self._silenced

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def toggle_task(
        self,
        person: str,
        category: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> TaskData:
        """Check or uncheck a task."""
        data = self._coordinator.family_data
        task = FamilyEngine.toggle_task(
            data, person, category, task_id=task_id, text=text
        )
        person_info = FamilyEngine.find_person(data, person)
        list_completed = task[
            const.DATA_TASK_COMPLETED
        ] and FamilyEngine.is_category_complete(person_info, category)
        self._commit(
            (
                const.REMOTE_ACTION_UPDATE_TASK,
                {
                    const.REMOTE_FIELD_PERSON: person,
                    const.REMOTE_FIELD_TEXT: task[const.DATA_TASK_TEXT],
                    const.REMOTE_FIELD_CATEGORY: category,
                    const.REMOTE_FIELD_COMPLETED: task[const.DATA_TASK_COMPLETED],
                },
            )
        )
        if list_completed:
            const.LOGGER.info(
                "INFO: %s finished every %s task", person, category
            )
            self.hass.bus.async_fire(
                const.EVENT_LIST_COMPLETED,
                {const.ATTR_PERSON: person, const.ATTR_CATEGORY: category},
            )
        return task

    def add_task(self, person: str, category: str, text: str) -> TaskData | None:
        """Append a task; blank text does nothing."""
        task = FamilyEngine.add_task(
            self._coordinator.family_data, person, category, text
        )
        if task is None:
            const.LOGGER.debug("DEBUG: Ignoring blank task for %s", person)
            return None
        self._commit(
            (
                const.REMOTE_ACTION_ADD_TASK,
                self._task_fields(person, task[const.DATA_TASK_TEXT], category),
            )
        )
        return task

    def delete_task(
        self,
        person: str,
        category: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> TaskData:
        """Remove a task."""
        task = FamilyEngine.delete_task(
            self._coordinator.family_data,
            person,
            category,
            task_id=task_id,
            text=text,
        )
        self._commit(
            (
                const.REMOTE_ACTION_DELETE_TASK,
                self._task_fields(person, task[const.DATA_TASK_TEXT], category),
            )
        )
        return task

    def edit_task(
        self,
        person: str,
        category: str,
        new_text: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> bool:
        """Rename a task.

        The remote store has no rename, so this sends deleteTask(old) and then
        addTask(new), in that order, from one background task. The remote row
        is re-added unchecked whatever the local completed flag is.
        """
        change = FamilyEngine.edit_task(
            self._coordinator.family_data,
            person,
            category,
            new_text,
            task_id=task_id,
            text=text,
        )
        if change is None:
            return False
        old_text, updated_text = change
        self._commit(
            (
                const.REMOTE_ACTION_DELETE_TASK,
                self._task_fields(person, old_text, category),
            ),
            (
                const.REMOTE_ACTION_ADD_TASK,
                self._task_fields(person, updated_text, category),
            ),
        )
        return True

    def add_person(self, name: str) -> PersonData | None:
        """Add a household member; blank names do nothing."""
        person = FamilyEngine.add_person(self._coordinator.family_data, name)
        if person is None:
            return None
        self._commit(
            (
                const.REMOTE_ACTION_ADD_PERSON,
                {const.REMOTE_FIELD_PERSON: person[const.DATA_PERSON_NAME]},
            )
        )
        return person

    def delete_person(self, name: str) -> PersonData:
        """Remove a household member and all their tasks."""
        person = FamilyEngine.delete_person(self._coordinator.family_data, name)
        self._commit(
            (const.REMOTE_ACTION_DELETE_PERSON, {const.REMOTE_FIELD_PERSON: name})
        )
        return person

    def reset_week(self) -> None:
        """Uncheck every box for everyone."""
        FamilyEngine.reset_all_checkboxes(self._coordinator.family_data)
        self._commit((const.REMOTE_ACTION_RESET_CHECKBOXES, {}))

    def save_schedule(self, schedule: dict[int, str]) -> dict[int, str]:
        """Replace the weekly focus schedule."""
        new_schedule = FamilyEngine.set_schedule(
            self._coordinator.family_data, schedule
        )
        self._commit(
            (
                const.REMOTE_ACTION_SAVE_SCHEDULE,
                {
                    const.REMOTE_FIELD_SCHEDULE: {
                        str(day): label for day, label in new_schedule.items()
                    }
                },
            )
        )
        return new_schedule

    # =========================================================================
    # PIPELINE
    # =========================================================================

    @staticmethod
    def _task_fields(person: str, text: str, category: str) -> dict[str, Any]:
        return {
            const.REMOTE_FIELD_PERSON: person,
            const.REMOTE_FIELD_TEXT: text,
            const.REMOTE_FIELD_CATEGORY: category,
        }

    def _commit(self, *mutations: RemoteMutation) -> None:
        """Render, silence pulls and forward ``mutations`` without awaiting them."""
        self._coordinator.async_local_update()
        self._arm_silence_window()
        self.hass.async_create_background_task(
            self._async_send(mutations),
            name=f"{const.DOMAIN}_send_{mutations[0][0]}",
        )

    async def _async_send(self, mutations: tuple[RemoteMutation, ...]) -> None:
        for action, fields in mutations:
            await self._api.async_send_mutation(action, **fields)

    def _arm_silence_window(self) -> None:
        """Open (or extend) the silence window, replacing any pending expiry."""
        self._silenced = True
        if self._unsub_silence is not None:
            self._unsub_silence()
        self._unsub_silence = async_call_later(
            self.hass, self._silence_window, self._async_close_silence_window
        )

    @callback
    def _async_close_silence_window(self, _now: datetime) -> None:
        self._silenced = False
        self._unsub_silence = None
        const.LOGGER.info("INFO: Silence window closed. Resuming background sync")

    @callback
    def async_cancel_silence_window(self) -> None:
        """Drop the pending expiry timer (used on unload)."""
        if self._unsub_silence is not None:
            self._unsub_silence()
            self._unsub_silence = None
        self._silenced = False
