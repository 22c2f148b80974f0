"""Family Engine - Pure logic for the household task model.

This engine provides stateless, pure Python functions for:
- Local mutations (toggle, add, delete, edit, people, weekly reset, schedule)
- Transforming the remote tabular payload into the local shape
- Merging remote state (people replaced wholesale, schedule patched by key)
- Converting to and from the durable cache blob
- Query helpers (list completion, focus label, dashboard counters)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant runtime
dependencies and NO I/O. All functions are static methods that operate on
passed-in data. Persisting, re-rendering and remote sends belong to the
coordinator and the MutationManager.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING, Any, cast
import uuid

from .. import const

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import (
        CacheBlob,
        FamilyData,
        PersonData,
        RemoteRow,
        TaskData,
        WeeklySchedule,
    )


# =============================================================================
# EXCEPTIONS
# =============================================================================


class FamilyCleanupError(Exception):
    """Base error for the Family Cleanup integration."""


class PersonNotFoundError(FamilyCleanupError):
    """Raised when no person carries the requested name."""


class TaskNotFoundError(FamilyCleanupError):
    """Raised when a task reference matches nothing in a person's list."""


class DuplicatePersonError(FamilyCleanupError):
    """Raised when adding a person whose name is already taken."""


def _new_task_id() -> str:
    return uuid.uuid4().hex


class FamilyEngine:
    """Stateless operations over ``FamilyData``.

    Task references resolve by ``task_id`` first and fall back to the first
    task whose text matches, which mirrors how the remote store matches rows.
    """

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @staticmethod
    def default_schedule() -> WeeklySchedule:
        """Return a fresh copy of the default weekly schedule."""
        return dict(const.DEFAULT_SCHEDULE)

    @staticmethod
    def empty_data() -> FamilyData:
        """Return an empty store with the default schedule."""
        return {
            const.DATA_PEOPLE: [],
            const.DATA_SCHEDULE: FamilyEngine.default_schedule(),
        }

    @staticmethod
    def new_task(text: str, completed: bool = False) -> TaskData:
        """Build a task with a freshly generated local id."""
        return {
            const.DATA_TASK_INTERNAL_ID: _new_task_id(),
            const.DATA_TASK_TEXT: text,
            const.DATA_TASK_COMPLETED: completed,
        }

    @staticmethod
    def new_person(name: str) -> PersonData:
        """Build a person with empty task and routine lists."""
        return {
            const.DATA_PERSON_NAME: name,
            const.CATEGORY_TASKS: [],
            const.CATEGORY_ROUTINE: [],
        }

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def get_state(data: FamilyData) -> tuple[list[PersonData], WeeklySchedule]:
        """Return ``(people, schedule)``."""
        return data[const.DATA_PEOPLE], data[const.DATA_SCHEDULE]

    @staticmethod
    def find_person(data: FamilyData, name: str) -> PersonData:
        """Return the person called ``name`` or raise PersonNotFoundError."""
        for person in data[const.DATA_PEOPLE]:
            if person[const.DATA_PERSON_NAME] == name:
                return person
        raise PersonNotFoundError(const.ERROR_PERSON_NOT_FOUND_FMT.format(name))

    @staticmethod
    def get_task_list(person: PersonData, category: str) -> list[TaskData]:
        """Return the list for ``category`` (empty list if the category is absent)."""
        return cast("list[TaskData]", person.get(category, []))

    @staticmethod
    def find_task_index(
        person: PersonData,
        category: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> int:
        """Return the index of the referenced task or raise TaskNotFoundError."""
        tasks = FamilyEngine.get_task_list(person, category)
        if task_id is not None:
            for index, task in enumerate(tasks):
                if task[const.DATA_TASK_INTERNAL_ID] == task_id:
                    return index
        if text is not None:
            for index, task in enumerate(tasks):
                if task[const.DATA_TASK_TEXT] == text:
                    return index
        raise TaskNotFoundError(
            const.ERROR_TASK_NOT_FOUND_FMT.format(
                task_id if text is None else text,
                person[const.DATA_PERSON_NAME],
                category,
            )
        )

    @staticmethod
    def is_category_complete(person: PersonData, category: str) -> bool:
        """Return True when the list is non-empty and every task is checked."""
        tasks = FamilyEngine.get_task_list(person, category)
        return bool(tasks) and all(t[const.DATA_TASK_COMPLETED] for t in tasks)

    @staticmethod
    def label_for_day(schedule: WeeklySchedule, weekday: int) -> str:
        """Return the focus label for a 0=Sunday weekday index."""
        return schedule.get(weekday) or const.DEFAULT_FOCUS_LABEL

    @staticmethod
    def summary(data: FamilyData) -> dict[str, int]:
        """Return the dashboard counters (people, cleanup tasks)."""
        people = data[const.DATA_PEOPLE]
        return {
            const.DATA_PEOPLE: len(people),
            const.CATEGORY_TASKS: sum(
                len(p.get(const.CATEGORY_TASKS, [])) for p in people
            ),
        }

    # =========================================================================
    # LOCAL MUTATIONS
    # =========================================================================
    # Each mutation runs to completion without I/O. The caller persists a
    # snapshot, re-renders and forwards the change to the remote store.

    @staticmethod
    def toggle_task(
        data: FamilyData,
        person_name: str,
        category: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> TaskData:
        """Flip a task's completed flag and return the task."""
        person = FamilyEngine.find_person(data, person_name)
        index = FamilyEngine.find_task_index(
            person, category, task_id=task_id, text=text
        )
        task = FamilyEngine.get_task_list(person, category)[index]
        task[const.DATA_TASK_COMPLETED] = not task[const.DATA_TASK_COMPLETED]
        return task

    @staticmethod
    def add_task(
        data: FamilyData, person_name: str, category: str, text: str
    ) -> TaskData | None:
        """Append a new unchecked task. Blank text is a no-op returning None."""
        person = FamilyEngine.find_person(data, person_name)
        text = text.strip()
        if not text:
            return None
        task = FamilyEngine.new_task(text)
        person_lists = cast("dict[str, Any]", person)
        person_lists.setdefault(category, []).append(task)
        return task

    @staticmethod
    def delete_task(
        data: FamilyData,
        person_name: str,
        category: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> TaskData:
        """Remove a task and return it."""
        person = FamilyEngine.find_person(data, person_name)
        index = FamilyEngine.find_task_index(
            person, category, task_id=task_id, text=text
        )
        return FamilyEngine.get_task_list(person, category).pop(index)

    @staticmethod
    def edit_task(
        data: FamilyData,
        person_name: str,
        category: str,
        new_text: str,
        *,
        task_id: str | None = None,
        text: str | None = None,
    ) -> tuple[str, str] | None:
        """Rename a task in place.

        Returns ``(old_text, new_text)``, or None when the trimmed text is
        blank or unchanged.
        """
        person = FamilyEngine.find_person(data, person_name)
        index = FamilyEngine.find_task_index(
            person, category, task_id=task_id, text=text
        )
        task = FamilyEngine.get_task_list(person, category)[index]
        new_text = new_text.strip()
        old_text = task[const.DATA_TASK_TEXT]
        if not new_text or new_text == old_text:
            return None
        task[const.DATA_TASK_TEXT] = new_text
        return old_text, new_text

    @staticmethod
    def add_person(data: FamilyData, name: str) -> PersonData | None:
        """Add a person with a welcome task. Blank names are a no-op."""
        name = name.strip()
        if not name:
            return None
        if any(p[const.DATA_PERSON_NAME] == name for p in data[const.DATA_PEOPLE]):
            raise DuplicatePersonError(const.ERROR_DUPLICATE_PERSON_FMT.format(name))
        person = FamilyEngine.new_person(name)
        person[const.CATEGORY_TASKS].append(
            FamilyEngine.new_task(const.WELCOME_TASK_TEXT)
        )
        data[const.DATA_PEOPLE].append(person)
        return person

    @staticmethod
    def delete_person(data: FamilyData, name: str) -> PersonData:
        """Remove a person and all of their tasks."""
        person = FamilyEngine.find_person(data, name)
        data[const.DATA_PEOPLE].remove(person)
        return person

    @staticmethod
    def reset_all_checkboxes(data: FamilyData) -> None:
        """Uncheck every task of every person in every category."""
        for person in data[const.DATA_PEOPLE]:
            for key, value in person.items():
                if key == const.DATA_PERSON_NAME or not isinstance(value, list):
                    continue
                for task in value:
                    task[const.DATA_TASK_COMPLETED] = False

    @staticmethod
    def set_schedule(data: FamilyData, schedule: dict[int, str]) -> WeeklySchedule:
        """Replace all seven labels; days missing from ``schedule`` become blank."""
        new_schedule = {
            day: schedule.get(day, "") for day in range(const.DAYS_IN_WEEK)
        }
        data[const.DATA_SCHEDULE] = new_schedule
        return new_schedule

    # =========================================================================
    # REMOTE TRANSFORM & MERGE
    # =========================================================================

    @staticmethod
    def is_checked(value: Any) -> bool:
        """Return True for the spreadsheet's checked-box representations."""
        if value is True:
            return True
        return isinstance(value, str) and value in const.REMOTE_TRUE_STRINGS

    @staticmethod
    def people_from_rows(rows: Iterable[RemoteRow]) -> list[PersonData]:
        """Group ``[person, text, completed, category]`` rows by person.

        The first row is a header. Rows with an empty person name are skipped.
        People keep first-seen order. A missing category means "tasks"; an
        unexpected category creates a list under that name, except the reserved
        person name key, whose rows are dropped.
        """
        people: list[PersonData] = []
        by_name: dict[str, PersonData] = {}
        for row in list(rows)[1:]:
            if not isinstance(row, (list, tuple)) or not row or not row[0]:
                continue
            name = str(row[0])
            person = by_name.get(name)
            if person is None:
                person = FamilyEngine.new_person(name)
                by_name[name] = person
                people.append(person)
            text = row[1] if len(row) > 1 and row[1] is not None else ""
            completed = FamilyEngine.is_checked(row[2]) if len(row) > 2 else False
            category = str(
                (row[3] if len(row) > 3 else None) or const.DEFAULT_CATEGORY
            )
            if category == const.DATA_PERSON_NAME:
                # Would overwrite the person's name key
                continue
            person_lists = cast("dict[str, Any]", person)
            person_lists.setdefault(category, []).append(
                FamilyEngine.new_task(str(text), completed)
            )
        return people

    @staticmethod
    def patch_schedule(
        schedule: WeeklySchedule, rows: Iterable[RemoteRow]
    ) -> WeeklySchedule:
        """Return a copy of ``schedule`` with ``[day_index, label]`` rows applied.

        The first row is a header. Keys not present in the rows are kept.
        """
        patched = dict(schedule)
        for row in list(rows)[1:]:
            if not isinstance(row, (list, tuple)) or len(row) < 2:
                continue
            try:
                day = int(row[0])
            except (TypeError, ValueError):
                continue
            patched[day] = "" if row[1] is None else str(row[1])
        return patched

    @staticmethod
    def carry_over_ids(
        previous: list[PersonData], incoming: list[PersonData]
    ) -> None:
        """Reuse local task ids for incoming tasks that match by person, category and text.

        Duplicate texts are paired in order. Unmatched tasks keep their new id.
        """
        previous_by_name = {p[const.DATA_PERSON_NAME]: p for p in previous}
        for person in incoming:
            old_person = previous_by_name.get(person[const.DATA_PERSON_NAME])
            if old_person is None:
                continue
            for key, tasks in person.items():
                if key == const.DATA_PERSON_NAME or not isinstance(tasks, list):
                    continue
                available: dict[str, deque[str]] = defaultdict(deque)
                for old_task in FamilyEngine.get_task_list(old_person, key):
                    available[old_task[const.DATA_TASK_TEXT]].append(
                        old_task[const.DATA_TASK_INTERNAL_ID]
                    )
                for task in tasks:
                    ids = available.get(task[const.DATA_TASK_TEXT])
                    if ids:
                        task[const.DATA_TASK_INTERNAL_ID] = ids.popleft()

    @staticmethod
    def merge_remote(
        data: FamilyData,
        task_rows: Iterable[RemoteRow],
        schedule_rows: Iterable[RemoteRow],
    ) -> None:
        """Merge a remote read into ``data``.

        People are replaced wholesale. The schedule is patched key by key and
        only when the table has at least one data row. Both results are built
        before anything is assigned, so a failure leaves ``data`` untouched.
        """
        people = FamilyEngine.people_from_rows(task_rows)
        FamilyEngine.carry_over_ids(data[const.DATA_PEOPLE], people)
        schedule_rows = list(schedule_rows)
        schedule = (
            FamilyEngine.patch_schedule(data[const.DATA_SCHEDULE], schedule_rows)
            if len(schedule_rows) > 1
            else data[const.DATA_SCHEDULE]
        )
        data[const.DATA_PEOPLE] = people
        data[const.DATA_SCHEDULE] = schedule

    # =========================================================================
    # DURABLE CACHE
    # =========================================================================

    @staticmethod
    def to_cache_blob(data: FamilyData) -> CacheBlob:
        """Serialize the store into the JSON-friendly cache blob."""
        return {
            const.CACHE_FAMILY_DATA: [
                {
                    key: (
                        [dict(task) for task in value]
                        if isinstance(value, list)
                        else value
                    )
                    for key, value in person.items()
                }
                for person in data[const.DATA_PEOPLE]
            ],
            const.CACHE_WEEKLY_SCHEDULE: {
                str(day): label for day, label in data[const.DATA_SCHEDULE].items()
            },
        }

    @staticmethod
    def from_cache_blob(blob: Any) -> FamilyData:
        """Rebuild the store from a cache blob, best effort.

        Anything malformed is dropped; a missing schedule falls back to the
        defaults and cached days overwrite default days.
        """
        data = FamilyEngine.empty_data()
        if not isinstance(blob, dict):
            return data

        for raw_person in blob.get(const.CACHE_FAMILY_DATA) or []:
            if not isinstance(raw_person, dict):
                continue
            name = raw_person.get(const.DATA_PERSON_NAME)
            if not name:
                continue
            person = FamilyEngine.new_person(str(name))
            person_lists = cast("dict[str, Any]", person)
            for key, raw_tasks in raw_person.items():
                if key == const.DATA_PERSON_NAME or not isinstance(raw_tasks, list):
                    continue
                tasks = person_lists.setdefault(key, [])
                for raw_task in raw_tasks:
                    if not isinstance(raw_task, dict):
                        continue
                    task = FamilyEngine.new_task(
                        str(raw_task.get(const.DATA_TASK_TEXT, "")),
                        raw_task.get(const.DATA_TASK_COMPLETED) is True,
                    )
                    if raw_task.get(const.DATA_TASK_INTERNAL_ID):
                        task[const.DATA_TASK_INTERNAL_ID] = str(
                            raw_task[const.DATA_TASK_INTERNAL_ID]
                        )
                    tasks.append(task)
            data[const.DATA_PEOPLE].append(person)

        raw_schedule = blob.get(const.CACHE_WEEKLY_SCHEDULE)
        if isinstance(raw_schedule, dict):
            for key, label in raw_schedule.items():
                try:
                    data[const.DATA_SCHEDULE][int(key)] = (
                        "" if label is None else str(label)
                    )
                except (TypeError, ValueError):
                    continue
        return data
