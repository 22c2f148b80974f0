# File: services.py
"""Defines custom services for the Family Cleanup integration.

These services are the user actions of the household board: checking off,
adding, renaming and removing tasks, managing people, resetting the week and
editing the focus schedule. Each one updates the local state immediately and
syncs with the spreadsheet in the background.

Tasks can be referenced either by ``task_id`` (the ``id`` shown in the list
sensor attributes) or by ``task`` text (first match wins).
"""

from __future__ import annotations

from typing import Optional

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import FamilyCleanupCoordinator
from .engines.family_engine import FamilyCleanupError

# --- Service Schemas ---
_CATEGORY = vol.In(const.TASK_CATEGORIES)

_TASK_REFERENCE_FIELDS = {
    vol.Required(const.FIELD_PERSON): cv.string,
    vol.Optional(const.FIELD_CATEGORY, default=const.DEFAULT_CATEGORY): _CATEGORY,
    vol.Optional(const.FIELD_TASK): cv.string,
    vol.Optional(const.FIELD_TASK_ID): cv.string,
}

TOGGLE_TASK_SCHEMA = vol.All(
    vol.Schema(_TASK_REFERENCE_FIELDS),
    cv.has_at_least_one_key(const.FIELD_TASK, const.FIELD_TASK_ID),
)

DELETE_TASK_SCHEMA = vol.All(
    vol.Schema(_TASK_REFERENCE_FIELDS),
    cv.has_at_least_one_key(const.FIELD_TASK, const.FIELD_TASK_ID),
)

EDIT_TASK_SCHEMA = vol.All(
    vol.Schema(
        {
            **_TASK_REFERENCE_FIELDS,
            vol.Required(const.FIELD_TEXT): cv.string,
        }
    ),
    cv.has_at_least_one_key(const.FIELD_TASK, const.FIELD_TASK_ID),
)

ADD_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PERSON): cv.string,
        vol.Optional(const.FIELD_CATEGORY, default=const.DEFAULT_CATEGORY): _CATEGORY,
        vol.Required(const.FIELD_TEXT): cv.string,
    }
)

ADD_PERSON_SCHEMA = vol.Schema({vol.Required(const.FIELD_NAME): cv.string})

DELETE_PERSON_SCHEMA = vol.Schema({vol.Required(const.FIELD_NAME): cv.string})

RESET_WEEK_SCHEMA = vol.Schema({})

SAVE_SCHEDULE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SCHEDULE): vol.Schema(
            {
                vol.All(
                    vol.Coerce(int), vol.Range(min=0, max=const.DAYS_IN_WEEK - 1)
                ): cv.string
            }
        ),
    }
)

SYNC_NOW_SCHEMA = vol.Schema({})


def get_first_family_cleanup_entry(hass: HomeAssistant) -> Optional[str]:
    """Retrieve the first Family Cleanup config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def async_setup_services(hass: HomeAssistant):
    """Register Family Cleanup services."""

    def _get_coordinator(service_label: str) -> Optional[FamilyCleanupCoordinator]:
        entry_id = get_first_family_cleanup_entry(hass)
        if not entry_id:
            const.LOGGER.warning(
                "WARNING: %s: %s", service_label, const.MSG_NO_ENTRY_FOUND
            )
            return None
        return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]

    async def handle_toggle_task(call: ServiceCall):
        """Handle checking or unchecking a task."""
        coordinator = _get_coordinator("Toggle Task")
        if coordinator is None:
            return

        person = call.data[const.FIELD_PERSON]
        category = call.data[const.FIELD_CATEGORY]
        try:
            task = coordinator.mutation_manager.toggle_task(
                person,
                category,
                task_id=call.data.get(const.FIELD_TASK_ID),
                text=call.data.get(const.FIELD_TASK),
            )
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Toggle Task: %s", err)
            raise HomeAssistantError(str(err)) from err

        const.LOGGER.info(
            "INFO: Task '%s' for '%s' set to completed=%s",
            task[const.DATA_TASK_TEXT],
            person,
            task[const.DATA_TASK_COMPLETED],
        )

    async def handle_add_task(call: ServiceCall):
        """Handle adding a task to a person's list."""
        coordinator = _get_coordinator("Add Task")
        if coordinator is None:
            return

        person = call.data[const.FIELD_PERSON]
        try:
            task = coordinator.mutation_manager.add_task(
                person, call.data[const.FIELD_CATEGORY], call.data[const.FIELD_TEXT]
            )
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Add Task: %s", err)
            raise HomeAssistantError(str(err)) from err

        if task is not None:
            const.LOGGER.info(
                "INFO: Task '%s' added for '%s'", task[const.DATA_TASK_TEXT], person
            )

    async def handle_delete_task(call: ServiceCall):
        """Handle removing a task."""
        coordinator = _get_coordinator("Delete Task")
        if coordinator is None:
            return

        person = call.data[const.FIELD_PERSON]
        try:
            task = coordinator.mutation_manager.delete_task(
                person,
                call.data[const.FIELD_CATEGORY],
                task_id=call.data.get(const.FIELD_TASK_ID),
                text=call.data.get(const.FIELD_TASK),
            )
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Delete Task: %s", err)
            raise HomeAssistantError(str(err)) from err

        const.LOGGER.info(
            "INFO: Task '%s' deleted for '%s'", task[const.DATA_TASK_TEXT], person
        )

    async def handle_edit_task(call: ServiceCall):
        """Handle renaming a task."""
        coordinator = _get_coordinator("Edit Task")
        if coordinator is None:
            return

        person = call.data[const.FIELD_PERSON]
        try:
            changed = coordinator.mutation_manager.edit_task(
                person,
                call.data[const.FIELD_CATEGORY],
                call.data[const.FIELD_TEXT],
                task_id=call.data.get(const.FIELD_TASK_ID),
                text=call.data.get(const.FIELD_TASK),
            )
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Edit Task: %s", err)
            raise HomeAssistantError(str(err)) from err

        if changed:
            const.LOGGER.info("INFO: Task renamed for '%s'", person)

    async def handle_add_person(call: ServiceCall):
        """Handle adding a household member."""
        coordinator = _get_coordinator("Add Person")
        if coordinator is None:
            return

        try:
            person = coordinator.mutation_manager.add_person(
                call.data[const.FIELD_NAME]
            )
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Add Person: %s", err)
            raise HomeAssistantError(str(err)) from err

        if person is not None:
            const.LOGGER.info(
                "INFO: Person '%s' added", person[const.DATA_PERSON_NAME]
            )

    async def handle_delete_person(call: ServiceCall):
        """Handle removing a household member."""
        coordinator = _get_coordinator("Delete Person")
        if coordinator is None:
            return

        name = call.data[const.FIELD_NAME]
        try:
            coordinator.mutation_manager.delete_person(name)
        except FamilyCleanupError as err:
            const.LOGGER.warning("WARNING: Delete Person: %s", err)
            raise HomeAssistantError(str(err)) from err

        const.LOGGER.info("INFO: Person '%s' deleted", name)

    async def handle_reset_week(_call: ServiceCall):
        """Handle unchecking every task for everyone."""
        coordinator = _get_coordinator("Reset Week")
        if coordinator is None:
            return

        coordinator.mutation_manager.reset_week()
        const.LOGGER.info("INFO: All checkboxes have been reset")

    async def handle_save_schedule(call: ServiceCall):
        """Handle replacing the weekly focus schedule."""
        coordinator = _get_coordinator("Save Schedule")
        if coordinator is None:
            return

        coordinator.mutation_manager.save_schedule(call.data[const.FIELD_SCHEDULE])
        const.LOGGER.info("INFO: Weekly schedule saved")

    async def handle_sync_now(_call: ServiceCall):
        """Handle an on-demand pull (still subject to the sync guards)."""
        coordinator = _get_coordinator("Sync Now")
        if coordinator is None:
            return

        await coordinator.async_request_refresh()

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_TOGGLE_TASK,
        handle_toggle_task,
        schema=TOGGLE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_TASK,
        handle_add_task,
        schema=ADD_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_TASK,
        handle_delete_task,
        schema=DELETE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EDIT_TASK,
        handle_edit_task,
        schema=EDIT_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_PERSON,
        handle_add_person,
        schema=ADD_PERSON_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_PERSON,
        handle_delete_person,
        schema=DELETE_PERSON_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_WEEK,
        handle_reset_week,
        schema=RESET_WEEK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SAVE_SCHEDULE,
        handle_save_schedule,
        schema=SAVE_SCHEDULE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SYNC_NOW,
        handle_sync_now,
        schema=SYNC_NOW_SCHEMA,
    )

    const.LOGGER.info(
        "INFO: Family Cleanup services have been registered successfully"
    )


async def async_unload_services(hass: HomeAssistant):
    """Unregister Family Cleanup services when unloading the integration."""
    services = [
        const.SERVICE_TOGGLE_TASK,
        const.SERVICE_ADD_TASK,
        const.SERVICE_DELETE_TASK,
        const.SERVICE_EDIT_TASK,
        const.SERVICE_ADD_PERSON,
        const.SERVICE_DELETE_PERSON,
        const.SERVICE_RESET_WEEK,
        const.SERVICE_SAVE_SCHEDULE,
        const.SERVICE_SYNC_NOW,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Family Cleanup services have been unregistered")
