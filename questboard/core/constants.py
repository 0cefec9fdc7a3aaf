"""
FILE: questboard/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - VALID_STATUSES: Workflow columns in board order
  - STATUS_*: Individual column keys
  - DEFAULT_*: Defaults for new tasks
  - KEY_*: Logical persistence keys
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Persistence key names are part of the on-disk format, do not rename
"""

# Task status constants (board order, left to right)
STATUS_BACKLOG = "backlog"
STATUS_TODO = "todo"
STATUS_DOING = "doing"
STATUS_DONE = "done"
VALID_STATUSES = (STATUS_BACKLOG, STATUS_TODO, STATUS_DOING, STATUS_DONE)

# Default values
DEFAULT_STATUS = STATUS_BACKLOG
DEFAULT_DIFFICULTY = "M"
DEFAULT_PRIORITY = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 5
UNASSIGNED_PROJECT = "Unassigned"
ALL_PROJECTS = "ALL"

# Sort modes for list queries
SORT_PRIORITY = "priority"
SORT_CREATED = "created"
SORT_DIFFICULTY = "difficulty"
VALID_SORTS = (SORT_PRIORITY, SORT_CREATED, SORT_DIFFICULTY)
DEFAULT_SORT = SORT_PRIORITY

# Persistence keys
KEY_TASKS = "tasks"
KEY_POINTS = "points"
KEY_INVENTORY = "inventory"
KEY_UPGRADES = "upgrades"
KEY_VIDEO_ENABLED = "videoEnabled"
KEY_VIDEO_URL = "videoUrl"
KEY_PERSIST_GRANTED = "persistGranted"
