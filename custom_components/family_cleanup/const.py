# File: const.py
"""Constants for the Family Cleanup integration.

This file centralizes configuration keys, defaults, storage keys, remote
protocol field names, service names and platform identifiers for consistency
across the integration.
"""

import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
FAMILY_CLEANUP_TITLE = "Family Cleanup"

# Integration Domain
DOMAIN = "family_cleanup"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "family_cleanup_cache"
STORAGE_VERSION = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_SCRIPT_URL = "script_url"
CONF_UPDATE_INTERVAL = "update_interval"
CONF_SILENCE_WINDOW = "silence_window"

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# Update Interval (seconds between background pulls)
DEFAULT_UPDATE_INTERVAL = 15

# Silence Window (seconds pulls stay suppressed after a local change)
DEFAULT_SILENCE_WINDOW = 30

# Bounds accepted by the options flow (seconds)
MIN_INTERVAL_SECONDS = 5
MAX_INTERVAL_SECONDS = 3600

# Remote request timeout (seconds)
REQUEST_TIMEOUT = 30

# ------------------------------------------------------------------------------------------------
# Data Keys (in-memory model)
# ------------------------------------------------------------------------------------------------
DATA_PEOPLE = "people"
DATA_SCHEDULE = "schedule"

DATA_PERSON_NAME = "name"

DATA_TASK_INTERNAL_ID = "internal_id"
DATA_TASK_TEXT = "text"
DATA_TASK_COMPLETED = "completed"

# Task categories
CATEGORY_TASKS = "tasks"
CATEGORY_ROUTINE = "routine"
TASK_CATEGORIES = [CATEGORY_TASKS, CATEGORY_ROUTINE]
DEFAULT_CATEGORY = CATEGORY_TASKS

CATEGORY_LABELS = {
    CATEGORY_TASKS: "Cleanup Task",
    CATEGORY_ROUTINE: "Daily Chore",
}

# New people start with one task so their card is not empty
WELCOME_TASK_TEXT = "Welcome!"

# ------------------------------------------------------------------------------------------------
# Durable Cache Keys (blob shape shared with the web client)
# ------------------------------------------------------------------------------------------------
CACHE_FAMILY_DATA = "familyData"
CACHE_WEEKLY_SCHEDULE = "weeklySchedule"

# ------------------------------------------------------------------------------------------------
# Weekly Schedule
# ------------------------------------------------------------------------------------------------
# 0=Sunday .. 6=Saturday
DEFAULT_SCHEDULE = {
    0: "Rest & Prep",
    1: "Bathrooms",
    2: "Floors",
    3: "Dusting",
    4: "Kitchen",
    5: "Laundry",
    6: "Yard",
}
DAYS_IN_WEEK = 7
DEFAULT_FOCUS_LABEL = "General Cleaning"
WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

# ------------------------------------------------------------------------------------------------
# Remote Protocol
# ------------------------------------------------------------------------------------------------
# Read payload tables
REMOTE_TABLE_TASKS = "tasks"
REMOTE_TABLE_SCHEDULE = "schedule"

# Strings treated as a checked box in the tasks table (boolean True also counts)
REMOTE_TRUE_STRINGS = ("TRUE", "true")

# Write payload fields
REMOTE_FIELD_ACTION = "action"
REMOTE_FIELD_PERSON = "person"
REMOTE_FIELD_TEXT = "text"
REMOTE_FIELD_CATEGORY = "category"
REMOTE_FIELD_COMPLETED = "completed"
REMOTE_FIELD_SCHEDULE = "schedule"

# Write actions
REMOTE_ACTION_ADD_TASK = "addTask"
REMOTE_ACTION_DELETE_TASK = "deleteTask"
REMOTE_ACTION_UPDATE_TASK = "updateTask"
REMOTE_ACTION_ADD_PERSON = "addPerson"
REMOTE_ACTION_DELETE_PERSON = "deletePerson"
REMOTE_ACTION_RESET_CHECKBOXES = "resetCheckboxes"
REMOTE_ACTION_SAVE_SCHEDULE = "saveSchedule"

REMOTE_ACTIONS = frozenset(
    {
        REMOTE_ACTION_ADD_TASK,
        REMOTE_ACTION_DELETE_TASK,
        REMOTE_ACTION_UPDATE_TASK,
        REMOTE_ACTION_ADD_PERSON,
        REMOTE_ACTION_DELETE_PERSON,
        REMOTE_ACTION_RESET_CHECKBOXES,
        REMOTE_ACTION_SAVE_SCHEDULE,
    }
)

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_PERSON = "add_person"
SERVICE_ADD_TASK = "add_task"
SERVICE_DELETE_PERSON = "delete_person"
SERVICE_DELETE_TASK = "delete_task"
SERVICE_EDIT_TASK = "edit_task"
SERVICE_RESET_WEEK = "reset_week"
SERVICE_SAVE_SCHEDULE = "save_schedule"
SERVICE_SYNC_NOW = "sync_now"
SERVICE_TOGGLE_TASK = "toggle_task"

FIELD_CATEGORY = "category"
FIELD_NAME = "name"
FIELD_PERSON = "person"
FIELD_SCHEDULE = "schedule"
FIELD_TASK = "task"
FIELD_TASK_ID = "task_id"
FIELD_TEXT = "text"

# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
EVENT_LIST_COMPLETED = f"{DOMAIN}_list_completed"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_FOCUS = "_focus"
SENSOR_UID_SUFFIX_PEOPLE = "_people"
SENSOR_UID_SUFFIX_TASK_COUNT = "_task_count"

ATTR_CATEGORY = "category"
ATTR_COMPLETE = "complete"
ATTR_PERSON = "person"
ATTR_PULL_IN_FLIGHT = "pull_in_flight"
ATTR_SCHEDULE = "schedule"
ATTR_SILENCE_WINDOW_ACTIVE = "silence_window_active"
ATTR_TASKS = "tasks"
ATTR_TASK_ID = "id"

# ------------------------------------------------------------------------------------------------
# Diagnostics
# ------------------------------------------------------------------------------------------------
DIAG_CACHE = "cache"
DIAG_SYNC = "sync"
DIAG_LAST_UPDATE_SUCCESS = "last_update_success"
DIAG_ENTRY = "entry"
DIAG_UPDATE_INTERVAL = "update_interval_seconds"
DIAG_TO_REDACT = {CONF_SCRIPT_URL}

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
MSG_NO_ENTRY_FOUND = "No Family Cleanup entry found"
ERROR_PERSON_NOT_FOUND_FMT = "Person '{}' not found"
ERROR_TASK_NOT_FOUND_FMT = "Task '{}' not found in {}'s {} list"
ERROR_DUPLICATE_PERSON_FMT = "Person '{}' already exists"
ERROR_INVALID_URL = "invalid_url"
ERROR_SINGLE_INSTANCE = "single_instance_allowed"
