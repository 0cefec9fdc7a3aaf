"""
FILE: questboard/core/service.py
PURPOSE: Command surface of the board - the layer UIs talk to
EXPORTS:
  - BoardService (class)
    - create_task / update_task / delete_task / move_task / toggle_timer
    - purchase / reset_all
    - list_tasks / projects / stats / elapsed / can_afford / is_valid_title
    - set_video_enabled / set_video_url / video_active
    - flush()
  - BoardStats (dataclass)
  - load_service(store, clock) -> BoardService
DEPENDENCIES:
  - questboard.core.store (TaskStore)
  - questboard.core.economy (Economy)
  - questboard.core.events (EventBus, TaskCompleted)
  - questboard.core.repository (KeyValueStore)
  - questboard.core.models (Task, PurchaseRecord)
NOTES:
  - Every committed mutation is followed by a snapshot save
  - Rejected commands return None/False and save nothing
  - Persistence failures never reach the caller (the repository logs them)
  - move_task publishes the transition event; Economy applies the points
  - Single writer: commands run to completion one at a time
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import timer
from .catalog import VIDEO_UNLOCK, get_item
from .constants import (
    ALL_PROJECTS,
    DEFAULT_DIFFICULTY,
    DEFAULT_PRIORITY,
    DEFAULT_SORT,
    DEFAULT_STATUS,
    KEY_INVENTORY,
    KEY_PERSIST_GRANTED,
    KEY_POINTS,
    KEY_TASKS,
    KEY_UPGRADES,
    KEY_VIDEO_ENABLED,
    KEY_VIDEO_URL,
    STATUS_DOING,
    STATUS_DONE,
    VALID_STATUSES,
)
from .economy import Economy
from .events import EventBus, TaskCompleted
from .exceptions import InvalidInputError, InvalidRecordError, TaskNotFoundError
from .models import PurchaseRecord, Task
from .repository import KeyValueStore
from .store import TaskStore, is_valid_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardStats:
    total: int
    done_count: int
    in_progress_count: int
    total_elapsed_ms: int


def _load_records(raw: Any, factory: Callable[[Dict[str, Any]], Any], kind: str) -> List[Any]:
    """Rebuild a list of records, skipping the ones that don't parse."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Stored %s is not a list, starting empty", kind)
        return []
    records = []
    for item in raw:
        try:
            records.append(factory(item))
        except InvalidRecordError as e:
            logger.warning("Skipping stored %s: %s", kind, e)
    return records


class BoardService:
    """
    The board plus its economy, wired to a durable store.

    Construct with already-loaded parts, or use load_service() to read
    them from a KeyValueStore.
    """

    def __init__(
        self,
        store: KeyValueStore,
        tasks: Optional[TaskStore] = None,
        economy: Optional[Economy] = None,
        clock: Callable[[], int] = timer.now_ms,
        video_enabled: bool = False,
        video_url: str = "",
        persist_granted: bool = False,
    ) -> None:
        self.store = store
        self.clock = clock
        self.tasks = tasks if tasks is not None else TaskStore(clock=clock)
        self.economy = economy if economy is not None else Economy(clock=clock)
        self.events = EventBus()
        self.economy.subscribe(self.events)
        self.video_enabled = video_enabled
        self.video_url = video_url
        self.persist_granted = persist_granted

    # -------------------- persistence --------------------

    def snapshot(self) -> Dict[str, Any]:
        """Every mutable slice, keyed by its storage key."""
        return {
            KEY_TASKS: [t.to_dict() for t in self.tasks.all()],
            KEY_POINTS: self.economy.points,
            KEY_INVENTORY: [r.to_dict() for r in self.economy.inventory],
            KEY_UPGRADES: self.economy.upgrades,
            KEY_VIDEO_ENABLED: self.video_enabled,
            KEY_VIDEO_URL: self.video_url,
            KEY_PERSIST_GRANTED: self.persist_granted,
        }

    def _commit(self) -> None:
        self.store.save_many(self.snapshot())

    def flush(self) -> bool:
        """Save everything again (used on shutdown)."""
        return self.store.save_many(self.snapshot())

    def request_durability(self) -> bool:
        """Ask the store to protect data; remembers the answer for display."""
        self.persist_granted = self.store.request_durability()
        self.store.save(KEY_PERSIST_GRANTED, self.persist_granted)
        return self.persist_granted

    # -------------------- task commands --------------------

    def create_task(
        self,
        title: str,
        description: str = "",
        project: str = "",
        difficulty: str = DEFAULT_DIFFICULTY,
        status: str = DEFAULT_STATUS,
        priority: Any = DEFAULT_PRIORITY,
    ) -> Optional[Task]:
        """
        Create a task (newest first).

        Args:
            title: Required, must not be blank
            description: Free text
            project: Blank means "Unassigned"
            difficulty: Tier key (XS..XL), unknown keys become M
            status: Starting column
            priority: 1 (highest) .. 5

        Returns:
            The new Task, or None if the title is blank

        Notes:
            - Starting in done is a create in backlog followed by a move,
              so the reward is granted the normal way
        """
        start = DEFAULT_STATUS if status == STATUS_DONE else status
        task = self.tasks.create(
            title=title,
            description=description,
            project=project,
            difficulty=difficulty,
            status=start,
            priority=priority,
        )
        if task is None:
            return None
        if status == STATUS_DONE:
            event = self.tasks.move(task.id, STATUS_DONE)
            if event is not None:
                self.events.publish(event)
        self._commit()
        return task

    def update_task(self, task_id: str, **fields: Any) -> Optional[Task]:
        """
        Edit title/description/project/difficulty/priority.

        Returns:
            Updated Task, or None (unknown id, blank title)

        Notes:
            - status is not editable here; use move_task()
        """
        task = self.tasks.update(task_id, fields)
        if task is not None:
            self._commit()
        return task

    def delete_task(self, task_id: str) -> bool:
        """Remove a task. Points it earned are kept."""
        removed = self.tasks.remove(task_id)
        if removed:
            self._commit()
        return removed

    def move_task(self, task_id: str, status: str) -> Optional[Task]:
        """
        Move a task to another column, settling points.

        Returns:
            The moved Task, or None (unknown id or status)
        """
        task = self.tasks.get(task_id)
        if task is None or status not in VALID_STATUSES:
            logger.debug("Rejected move of %s to %r", task_id, status)
            return None
        event = self.tasks.move(task_id, status)
        if event is not None:
            self.events.publish(event)
        self._commit()
        return task

    def toggle_timer(self, task_id: str) -> Optional[Task]:
        task = self.tasks.toggle_timer(task_id)
        if task is not None:
            self._commit()
        return task

    # -------------------- economy commands --------------------

    def purchase(self, item_id: str) -> Optional[PurchaseRecord]:
        """Buy a shop item; None if unknown, owned, or unaffordable."""
        record = self.economy.purchase(item_id)
        if record is not None:
            self._commit()
        return record

    def reset_all(self) -> None:
        """
        Wipe tasks, points, inventory and upgrades together.

        Irreversible. Confirmation is the caller's job. Host settings
        (video, durability flag) are kept.
        """
        self.tasks.clear()
        self.economy.reset()
        self._commit()
        logger.info("Board reset")

    # -------------------- host settings --------------------

    def set_video_enabled(self, enabled: bool) -> bool:
        """Turn background video on/off. Turning it on needs the unlock."""
        if enabled and not self.economy.owns(VIDEO_UNLOCK):
            logger.debug("Rejected video enable: %s not owned", VIDEO_UNLOCK)
            return False
        self.video_enabled = bool(enabled)
        self._commit()
        return True

    def set_video_url(self, url: str) -> None:
        self.video_url = (url or "").strip()
        self._commit()

    def video_active(self) -> bool:
        return bool(self.video_enabled and self.economy.owns(VIDEO_UNLOCK) and self.video_url)

    # -------------------- queries --------------------

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    def resolve_task_id(self, prefix: str) -> Optional[str]:
        return self.tasks.resolve_id(prefix)

    def resolve_task_id_or_raise(self, prefix: str) -> str:
        """
        Like resolve_task_id(), for UI layers that want an error message.

        Raises:
            InvalidInputError: If the prefix is blank or matches several tasks
            TaskNotFoundError: If nothing matches
        """
        prefix = (prefix or "").strip().lower()
        if not prefix:
            raise InvalidInputError("Task ID required")
        task_id = self.tasks.resolve_id(prefix)
        if task_id:
            return task_id
        matches = [t.id for t in self.tasks.all() if t.id.startswith(prefix)]
        if len(matches) > 1:
            raise InvalidInputError(
                f"ID '{prefix}' is ambiguous: {', '.join(sorted(matches))}"
            )
        raise TaskNotFoundError(prefix)

    def list_tasks(
        self,
        search: str = "",
        sort: str = DEFAULT_SORT,
        project_filter: str = ALL_PROJECTS,
    ) -> List[Task]:
        """Filtered/sorted read-only view. Never mutates the board."""
        return self.tasks.list(search=search, sort=sort, project=project_filter)

    def columns(self, tasks: Optional[List[Task]] = None) -> Dict[str, List[Task]]:
        """Group tasks (default: all, priority order) by column, in board order."""
        if tasks is None:
            tasks = self.list_tasks()
        return {status: [t for t in tasks if t.status == status] for status in VALID_STATUSES}

    def projects(self) -> List[str]:
        return [ALL_PROJECTS] + self.tasks.projects()

    def elapsed(self, task_id: str) -> int:
        """Projected elapsed ms for a task right now (0 for unknown ids)."""
        task = self.tasks.get(task_id)
        return timer.elapsed_ms(task, self.clock()) if task else 0

    def any_timer_running(self) -> bool:
        return self.tasks.any_timer_running()

    def stats(self) -> BoardStats:
        now = self.clock()
        tasks = self.tasks.all()
        return BoardStats(
            total=len(tasks),
            done_count=sum(1 for t in tasks if t.status == STATUS_DONE),
            in_progress_count=sum(1 for t in tasks if t.status == STATUS_DOING),
            total_elapsed_ms=sum(timer.elapsed_ms(t, now) for t in tasks),
        )

    @property
    def points(self) -> int:
        return self.economy.points

    def can_afford(self, item_id: str) -> bool:
        return self.economy.can_afford(item_id)

    def can_purchase(self, item_id: str) -> bool:
        return self.economy.can_purchase(item_id)

    def has_upgrade(self, item_id: str) -> bool:
        return self.economy.owns(item_id)

    @staticmethod
    def is_valid_title(title: str) -> bool:
        return is_valid_title(title)

    def on_task_completed(self, handler: Callable[[TaskCompleted], None]) -> None:
        """Register view-side feedback for completions."""
        self.events.subscribe(TaskCompleted, handler)


def load_service(store: KeyValueStore, clock: Callable[[], int] = timer.now_ms) -> BoardService:
    """
    Build a BoardService from whatever the store holds.

    Every slice falls back to its empty default when missing or malformed.
    Running timers survive a restart: their start stamps are persisted, so
    the projection keeps counting from the original start.
    """
    tasks = _load_records(store.load(KEY_TASKS, []), Task.from_dict, "task")
    inventory = _load_records(store.load(KEY_INVENTORY, []), PurchaseRecord.from_dict, "purchase")

    points = store.load(KEY_POINTS, 0)
    if isinstance(points, bool) or not isinstance(points, int):
        logger.warning("Stored points value %r is invalid, using 0", points)
        points = 0

    upgrades = store.load(KEY_UPGRADES, {})
    if not isinstance(upgrades, dict):
        upgrades = {}
    upgrades = {str(k): bool(v) for k, v in upgrades.items() if get_item(str(k))}

    video_enabled = store.load(KEY_VIDEO_ENABLED, False)
    video_url = store.load(KEY_VIDEO_URL, "")
    persist_granted = store.load(KEY_PERSIST_GRANTED, False)

    # Drop duplicate ids, keeping the first (newest) occurrence
    seen = set()
    unique_tasks = []
    for task in tasks:
        if task.id in seen:
            logger.warning("Skipping duplicate task id %s", task.id)
            continue
        seen.add(task.id)
        unique_tasks.append(task)

    service = BoardService(
        store=store,
        tasks=TaskStore(unique_tasks, clock=clock),
        economy=Economy(points=points, inventory=inventory, upgrades=upgrades, clock=clock),
        clock=clock,
        video_enabled=video_enabled is True,
        video_url=video_url if isinstance(video_url, str) else "",
        persist_granted=persist_granted is True,
    )
    logger.info(
        "Board loaded: %d tasks, %d points, %d purchases",
        len(unique_tasks), service.points, len(inventory),
    )
    return service
