"""
FILE: questboard/core/models.py
PURPOSE: Domain models for tasks and shop purchases
EXPORTS:
  - Task (dataclass)
  - PurchaseRecord (dataclass)
  - new_id() -> str
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - uuid (stdlib)
  - typing (stdlib)
NOTES:
  - All models have from_dict() for persisted record conversion
  - All models have to_dict()/to_json() for serialization
  - Timestamps are integer epoch milliseconds
  - from_dict() raises InvalidRecordError on unusable records
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
import json
import uuid

from .constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    MAX_PRIORITY,
    MIN_PRIORITY,
    STATUS_DONE,
    UNASSIGNED_PROJECT,
    VALID_STATUSES,
)
from .catalog import get_tier, is_known_difficulty
from .exceptions import InvalidRecordError


def new_id() -> str:
    """Short opaque identifier (8 hex chars)."""
    return uuid.uuid4().hex[:8]


def normalize_project(project: Optional[str]) -> str:
    project = (project or "").strip()
    return project or UNASSIGNED_PROJECT


def normalize_difficulty(difficulty: Optional[str]) -> str:
    difficulty = (difficulty or "").strip().upper()
    return difficulty if is_known_difficulty(difficulty) else DEFAULT_DIFFICULTY


def normalize_priority(priority: Any) -> int:
    """Coerce to int in [1, 5]; anything non-numeric (or 0) becomes the default."""
    try:
        value = int(priority)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    if value == 0:
        return DEFAULT_PRIORITY
    return max(MIN_PRIORITY, min(MAX_PRIORITY, value))


def parse_difficulty(difficulty: Any) -> Optional[str]:
    """Tier key for an edit, or None when it isn't one."""
    if not isinstance(difficulty, str):
        return None
    key = difficulty.strip().upper()
    return key if is_known_difficulty(key) else None


def parse_priority(priority: Any) -> Optional[int]:
    """Like normalize_priority(), but None instead of a default for garbage."""
    if isinstance(priority, bool):
        return None
    try:
        int(priority)
    except (TypeError, ValueError):
        return None
    return normalize_priority(priority)


def _int_field(data: Dict[str, Any], name: str, default: int = 0) -> int:
    value = data.get(name, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRecordError("task", f"{name} must be a number")
    return int(value)


def _optional_int(value: Any) -> Optional[int]:
    """int(value) for real numbers, None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


@dataclass
class Task:
    """A card on the board, with reward and time tracking."""

    id: str
    title: str
    created_at: int
    description: str = ""
    project: str = UNASSIGNED_PROJECT
    difficulty: str = DEFAULT_DIFFICULTY
    status: str = DEFAULT_STATUS
    priority: int = DEFAULT_PRIORITY
    completed_at: Optional[int] = None
    points_awarded: int = 0
    time_spent: int = 0
    timer_running: bool = False
    timer_started_at: int = 0

    @property
    def is_done(self) -> bool:
        return self.status == STATUS_DONE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Convert a persisted record back into a Task.

        Raises:
            InvalidRecordError: If id/title are missing or numeric fields are garbage

        Notes:
            - Unknown status falls back to backlog
            - A running timer without a start stamp is treated as stopped
            - completed_at/points_awarded are cleared on non-done tasks
            - A done task missing either gets them back: completed_at from
              created_at, points_awarded from its difficulty tier
        """
        if not isinstance(data, dict):
            raise InvalidRecordError("task", "not an object")

        task_id = data.get("id")
        title = data.get("title")
        if not task_id or not isinstance(task_id, str):
            raise InvalidRecordError("task", "missing id")
        if not isinstance(title, str) or not title.strip():
            raise InvalidRecordError("task", f"missing title for {task_id}")

        status = data.get("status")
        if status not in VALID_STATUSES:
            status = DEFAULT_STATUS

        timer_started_at = _int_field(data, "timer_started_at")
        timer_running = bool(data.get("timer_running")) and timer_started_at > 0

        created_at = _int_field(data, "created_at")
        difficulty = normalize_difficulty(data.get("difficulty"))

        completed_at = None
        points_awarded = 0
        if status == STATUS_DONE:
            completed_at = _optional_int(data.get("completed_at"))
            if completed_at is None:
                completed_at = created_at
            points_awarded = _optional_int(data.get("points_awarded")) or 0
            if points_awarded <= 0:
                points_awarded = get_tier(difficulty).reward_points

        return cls(
            id=task_id,
            title=title.strip(),
            created_at=created_at,
            description=str(data.get("description") or ""),
            project=normalize_project(data.get("project")),
            difficulty=difficulty,
            status=status,
            priority=normalize_priority(data.get("priority")),
            completed_at=completed_at,
            points_awarded=points_awarded,
            time_spent=max(0, _int_field(data, "time_spent")),
            timer_running=timer_running,
            timer_started_at=timer_started_at if timer_running else 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(asdict(self), indent=2, ensure_ascii=False)


@dataclass
class PurchaseRecord:
    """One line of the inventory."""

    id: str
    item_id: str
    name: str
    emoji: str
    purchased_at: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PurchaseRecord":
        if not isinstance(data, dict):
            raise InvalidRecordError("purchase", "not an object")
        try:
            return cls(
                id=str(data["id"]),
                item_id=str(data["item_id"]),
                name=str(data.get("name") or data["item_id"]),
                emoji=str(data.get("emoji") or ""),
                purchased_at=int(data.get("purchased_at") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidRecordError("purchase", str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2, ensure_ascii=False)
