"""Type definitions for Family Cleanup data structures.

TypedDict is used for structures whose keys are fixed (tasks, people, the
remote payload). The weekly schedule is a plain ``dict[int, str]``.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of remote and
cached data happens in engines/family_engine.py.
"""

from typing import Any, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PersonName = str  # Case-sensitive, remote join key
TaskId = str  # uuid4 hex, local only, never sent to the remote store
Category = str  # "tasks" | "routine" (remote may send others)
WeeklySchedule = dict[int, str]  # 0=Sunday .. 6=Saturday
RemoteRow = list[Any]


# =============================================================================
# Local Store
# =============================================================================


class TaskData(TypedDict):
    """A single checkbox item in a person's list."""

    internal_id: TaskId
    text: str
    completed: bool


class PersonData(TypedDict):
    """A household member and their two task lists.

    Remote rows with an unexpected category add extra list keys at runtime.
    """

    name: PersonName
    tasks: list[TaskData]
    routine: list[TaskData]


class FamilyData(TypedDict):
    """Everything the Local Store owns."""

    people: list[PersonData]
    schedule: WeeklySchedule


# =============================================================================
# Remote Gateway
# =============================================================================


class RemotePayload(TypedDict):
    """Full-state read from the spreadsheet endpoint.

    Both tables start with a header row.
    tasks rows: [person, text, completed, category]
    schedule rows: [day_index, label]
    """

    tasks: list[RemoteRow]
    schedule: list[RemoteRow]


# =============================================================================
# Durable Cache
# =============================================================================

# camelCase keys are shared with the browser client's cache blob
CacheBlob = TypedDict(
    "CacheBlob",
    {
        "familyData": list[dict[str, Any]],
        "weeklySchedule": dict[str, str],
    },
)
