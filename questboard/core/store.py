"""
FILE: questboard/core/store.py
PURPOSE: In-memory task collection and the column state machine
EXPORTS:
  - TaskStore (class)
  - is_valid_title(title) -> bool
DEPENDENCIES:
  - questboard.core.models (Task, normalizers)
  - questboard.core.timer (session handling on move/toggle)
  - questboard.core.events (TaskCompleted, TaskReopened)
  - questboard.core.catalog (rewards, tier ordering)
NOTES:
  - Owns the tasks exclusively; callers get the Task objects back but
    should treat them as read-only and go through the store to mutate
  - Rejections (empty title, unknown id, bad status) return None, never raise
  - move() is the only way to change status, and the only place points
    are decided; the ledger change itself is left to whoever handles the event
  - Newest tasks sit at the head of the collection
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from . import timer
from .catalog import get_tier, tier_rank
from .constants import (
    ALL_PROJECTS,
    DEFAULT_DIFFICULTY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    SORT_CREATED,
    SORT_DIFFICULTY,
    SORT_PRIORITY,
    STATUS_DONE,
    VALID_STATUSES,
)
from .events import TaskCompleted, TaskEvent, TaskReopened
from .models import (
    Task,
    new_id,
    normalize_difficulty,
    normalize_priority,
    normalize_project,
    parse_difficulty,
    parse_priority,
)

logger = logging.getLogger(__name__)

# Fields update() is allowed to touch. status goes through move() only.
EDITABLE_FIELDS = ("title", "description", "project", "difficulty", "priority")


def is_valid_title(title: Optional[str]) -> bool:
    return bool(title and title.strip())


class TaskStore:
    """Ordered task collection plus the backlog/todo/doing/done state machine."""

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        clock: Callable[[], int] = timer.now_ms,
    ) -> None:
        self._tasks: List[Task] = list(tasks or [])
        self._clock = clock

    # -------------------- queries --------------------

    def __len__(self) -> int:
        return len(self._tasks)

    def all(self) -> List[Task]:
        """Every task, newest first (a copy of the ordering, not of the tasks)."""
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def resolve_id(self, prefix: str) -> Optional[str]:
        """Full id for an exact id or a unique id prefix; None if ambiguous/unknown."""
        prefix = (prefix or "").strip().lower()
        if not prefix:
            return None
        if self.get(prefix):
            return prefix
        matches = [t.id for t in self._tasks if t.id.startswith(prefix)]
        return matches[0] if len(matches) == 1 else None

    def projects(self) -> List[str]:
        """Distinct project names in collection order."""
        seen: List[str] = []
        for task in self._tasks:
            if task.project not in seen:
                seen.append(task.project)
        return seen

    def list(
        self,
        search: str = "",
        sort: str = SORT_PRIORITY,
        project: Optional[str] = None,
    ) -> List[Task]:
        """
        Filtered, sorted view of the collection.

        Args:
            search: Case-insensitive substring over title, description and project
            sort: "priority" (ascending), "created" (newest first) or
                  "difficulty" (hardest first); anything else keeps store order
            project: Exact project name; None or "ALL" disables the filter

        Returns:
            A new list; the store itself is never reordered
        """
        result = list(self._tasks)

        if project and project != ALL_PROJECTS:
            result = [t for t in result if t.project == project]

        query = (search or "").strip().lower()
        if query:
            result = [
                t for t in result
                if any(query in (field or "").lower() for field in (t.title, t.description, t.project))
            ]

        # sorted() is stable, so ties keep store order
        if sort == SORT_PRIORITY:
            result = sorted(result, key=lambda t: t.priority)
        elif sort == SORT_CREATED:
            result = sorted(result, key=lambda t: t.created_at, reverse=True)
        elif sort == SORT_DIFFICULTY:
            result = sorted(result, key=lambda t: tier_rank(t.difficulty), reverse=True)

        return result

    def any_timer_running(self) -> bool:
        return any(t.timer_running for t in self._tasks)

    # -------------------- commands --------------------

    def create(
        self,
        title: str,
        description: str = "",
        project: str = "",
        difficulty: str = DEFAULT_DIFFICULTY,
        status: str = DEFAULT_STATUS,
        priority: Any = DEFAULT_PRIORITY,
    ) -> Optional[Task]:
        """
        Create a task at the head of the collection.

        Returns:
            The new Task, or None if the title is blank

        Notes:
            - An unknown status falls back to backlog
            - done is not a valid starting column (it would skip the reward);
              it falls back to backlog too, callers follow up with move()
        """
        if not is_valid_title(title):
            logger.debug("Rejected create: blank title")
            return None

        if status not in VALID_STATUSES or status == STATUS_DONE:
            status = DEFAULT_STATUS

        task_id = new_id()
        while self.get(task_id):
            task_id = new_id()

        task = Task(
            id=task_id,
            title=title.strip(),
            description=(description or "").strip(),
            project=normalize_project(project),
            difficulty=normalize_difficulty(difficulty),
            status=status,
            priority=normalize_priority(priority),
            created_at=self._clock(),
        )
        self._tasks.insert(0, task)
        logger.info("Created task %s %r in %s", task.id, task.title, task.status)
        return task

    def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """
        Merge editable fields into a task.

        Returns:
            The updated Task, or None for unknown ids, a blank new title,
            an unknown difficulty or a non-numeric priority. A rejected
            update changes nothing.

        Notes:
            - status and bookkeeping fields are ignored; use move()/toggle_timer()
            - points_awarded is NOT recomputed when difficulty changes
        """
        task = self.get(task_id)
        if task is None:
            logger.debug("Rejected update: unknown task %s", task_id)
            return None

        ignored = sorted(set(fields) - set(EDITABLE_FIELDS))
        if ignored:
            logger.debug("Ignoring non-editable fields on %s: %s", task_id, ", ".join(ignored))

        if "title" in fields and not is_valid_title(fields["title"]):
            logger.debug("Rejected update of %s: blank title", task_id)
            return None
        difficulty = parse_difficulty(fields["difficulty"]) if "difficulty" in fields else None
        if "difficulty" in fields and difficulty is None:
            logger.debug("Rejected update of %s: unknown difficulty %r", task_id, fields["difficulty"])
            return None
        priority = parse_priority(fields["priority"]) if "priority" in fields else None
        if "priority" in fields and priority is None:
            logger.debug("Rejected update of %s: bad priority %r", task_id, fields["priority"])
            return None

        if "title" in fields:
            task.title = fields["title"].strip()
        if "description" in fields:
            task.description = (fields["description"] or "").strip()
        if "project" in fields:
            task.project = normalize_project(fields["project"])
        if "difficulty" in fields:
            task.difficulty = difficulty
        if "priority" in fields:
            task.priority = priority

        logger.info("Updated task %s", task_id)
        return task

    def move(self, task_id: str, new_status: str) -> Optional[TaskEvent]:
        """
        Transition a task to another column.

        Steps, in order:
            1. Close a running timer session, whatever the direction
            2. Entering done: stamp completed_at, lock in the tier reward
            3. Leaving done: clear completed_at and points_awarded
            4. Set the new status

        Returns:
            TaskCompleted / TaskReopened when points should change, else None.
            Unknown ids and statuses are ignored (None).
        """
        if new_status not in VALID_STATUSES:
            logger.debug("Rejected move of %s: unknown status %r", task_id, new_status)
            return None
        task = self.get(task_id)
        if task is None:
            logger.debug("Rejected move: unknown task %s", task_id)
            return None

        now = self._clock()
        timer.close_session(task, now)

        was_done = task.is_done
        event: Optional[TaskEvent] = None

        if new_status == STATUS_DONE and not was_done:
            reward = get_tier(task.difficulty).reward_points
            task.completed_at = now
            task.points_awarded = reward
            event = TaskCompleted(task_id=task.id, reward=reward)
        elif was_done and new_status != STATUS_DONE:
            event = TaskReopened(task_id=task.id, refund=task.points_awarded or 0)
            task.completed_at = None
            task.points_awarded = 0

        previous = task.status
        task.status = new_status
        logger.info("Moved task %s %s -> %s", task.id, previous, new_status)
        return event

    def toggle_timer(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            logger.debug("Rejected timer toggle: unknown task %s", task_id)
            return None
        running = timer.toggle(task, self._clock())
        logger.info("Timer %s for task %s", "started" if running else "stopped", task_id)
        return task

    def remove(self, task_id: str) -> bool:
        """Delete a task. Points it earned stay on the ledger."""
        task = self.get(task_id)
        if task is None:
            logger.debug("Rejected delete: unknown task %s", task_id)
            return False
        self._tasks.remove(task)
        logger.info("Deleted task %s", task_id)
        return True

    def clear(self) -> None:
        self._tasks.clear()
