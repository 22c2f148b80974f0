# File: sensor.py
"""Sensors for the Family Cleanup integration.

Sensors Defined in This File (4):

# Person-Specific Sensors (1 per person and category)
01. PersonTaskListSensor

# Household Sensors (3)
02. FocusSensor
03. PeopleCountSensor
04. TaskCountSensor

People first seen in a remote pull after setup get their sensors added by a
coordinator listener. Sensors of removed people become unavailable.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import FamilyCleanupCoordinator
from .engines.family_engine import FamilyEngine
from .entity import FamilyCleanupCoordinatorEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Family Cleanup integration."""
    coordinator: FamilyCleanupCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    async_add_entities(
        [
            FocusSensor(coordinator, entry),
            PeopleCountSensor(coordinator, entry),
            TaskCountSensor(coordinator, entry),
        ]
    )

    known_lists: set[tuple[str, str]] = set()

    @callback
    def _async_add_person_sensors() -> None:
        """Create list sensors for people not seen before."""
        new_entities = []
        for person in coordinator.people:
            person_name = person[const.DATA_PERSON_NAME]
            for category in const.TASK_CATEGORIES:
                if (person_name, category) in known_lists:
                    continue
                known_lists.add((person_name, category))
                new_entities.append(
                    PersonTaskListSensor(coordinator, entry, person_name, category)
                )
        if new_entities:
            const.LOGGER.debug(
                "DEBUG: Adding %s person list sensors", len(new_entities)
            )
            async_add_entities(new_entities)

    _async_add_person_sensors()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_person_sensors))


class PersonTaskListSensor(FamilyCleanupCoordinatorEntity, SensorEntity):
    """Sensor for one person's cleanup tasks or daily chores.

    State is the number of unchecked tasks. Attributes carry the full list
    (with local task ids usable by the services) and the complete flag.
    """

    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: FamilyCleanupCoordinator,
        entry: ConfigEntry,
        person_name: str,
        category: str,
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: FamilyCleanupCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            person_name: Name of the person (case-sensitive key).
            category: Task category ("tasks" or "routine").
        """
        super().__init__(coordinator, entry)
        self._person_name = person_name
        self._category = category
        self._attr_unique_id = f"{entry.entry_id}_{person_name}_{category}"
        self._attr_name = f"{person_name} {const.CATEGORY_LABELS[category]}s"

    @property
    def available(self) -> bool:
        """Return False once the person is gone from the household."""
        return (
            super().available
            and self.coordinator.get_person(self._person_name) is not None
        )

    @property
    def native_value(self) -> int | None:
        """Return the number of unchecked tasks."""
        person = self.coordinator.get_person(self._person_name)
        if person is None:
            return None
        tasks = FamilyEngine.get_task_list(person, self._category)
        return sum(1 for task in tasks if not task[const.DATA_TASK_COMPLETED])

    @property
    def icon(self) -> str:
        """Return a check icon once the whole list is done."""
        person = self.coordinator.get_person(self._person_name)
        if person is not None and FamilyEngine.is_category_complete(
            person, self._category
        ):
            return "mdi:check-all"
        if self._category == const.CATEGORY_ROUTINE:
            return "mdi:calendar-check"
        return "mdi:broom"

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the task list and completion flag."""
        person = self.coordinator.get_person(self._person_name)
        tasks = FamilyEngine.get_task_list(person, self._category) if person else []
        return {
            const.ATTR_PERSON: self._person_name,
            const.ATTR_CATEGORY: self._category,
            const.ATTR_COMPLETE: (
                FamilyEngine.is_category_complete(person, self._category)
                if person
                else False
            ),
            const.ATTR_TASKS: [
                {
                    const.ATTR_TASK_ID: task[const.DATA_TASK_INTERNAL_ID],
                    const.DATA_TASK_TEXT: task[const.DATA_TASK_TEXT],
                    const.DATA_TASK_COMPLETED: task[const.DATA_TASK_COMPLETED],
                }
                for task in tasks
            ],
        }


class FocusSensor(FamilyCleanupCoordinatorEntity, SensorEntity):
    """Today's cleaning focus from the weekly schedule."""

    _attr_icon = "mdi:calendar-star"
    _attr_name = f"{const.FAMILY_CLEANUP_TITLE} Focus"

    def __init__(
        self, coordinator: FamilyCleanupCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_FOCUS}"

    @property
    def native_value(self) -> str:
        """Return the label for the current weekday."""
        return self.coordinator.todays_focus()

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the whole week and whether pulls are silenced."""
        return {
            const.ATTR_SCHEDULE: {
                const.WEEKDAY_NAMES[day]: label
                for day, label in sorted(self.coordinator.schedule.items())
                if 0 <= day < const.DAYS_IN_WEEK
            },
            const.ATTR_SILENCE_WINDOW_ACTIVE: (
                self.coordinator.mutation_manager.silence_window_active
            ),
        }


class PeopleCountSensor(FamilyCleanupCoordinatorEntity, SensorEntity):
    """Number of people in the household."""

    _attr_icon = "mdi:account-group"
    _attr_name = f"{const.FAMILY_CLEANUP_TITLE} People Count"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self, coordinator: FamilyCleanupCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_PEOPLE}"

    @property
    def native_value(self) -> int:
        """Return the people count."""
        return FamilyEngine.summary(self.coordinator.family_data)[const.DATA_PEOPLE]


class TaskCountSensor(FamilyCleanupCoordinatorEntity, SensorEntity):
    """Number of cleanup tasks across everyone (daily chores excluded)."""

    _attr_icon = "mdi:format-list-checks"
    _attr_name = f"{const.FAMILY_CLEANUP_TITLE} Task Count"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self, coordinator: FamilyCleanupCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_TASK_COUNT}"

    @property
    def native_value(self) -> int:
        """Return the cleanup task count."""
        return FamilyEngine.summary(self.coordinator.family_data)[
            const.CATEGORY_TASKS
        ]
