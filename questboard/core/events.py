"""
FILE: questboard/core/events.py
PURPOSE: Domain events raised by task transitions and a tiny pub/sub bus
EXPORTS:
  - TaskCompleted (dataclass)
  - TaskReopened (dataclass)
  - EventBus (class)
DEPENDENCIES:
  - dataclasses (stdlib)
  - logging (stdlib)
NOTES:
  - TaskStore.move() returns one of these; it never touches the ledger itself
  - Economy subscribes to both, view layers usually only to TaskCompleted
  - Subscribers run synchronously, in subscription order
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Type, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskCompleted:
    """A task entered the done column and earned `reward` points."""

    task_id: str
    reward: int


@dataclass(frozen=True)
class TaskReopened:
    """A done task left the done column; `refund` points should come back off."""

    task_id: str
    refund: int


TaskEvent = Union[TaskCompleted, TaskReopened]
Handler = Callable[[TaskEvent], None]


class EventBus:
    """Routes task events to subscribers by event type."""

    def __init__(self) -> None:
        self._subscribers: Dict[type, List[Handler]] = {}

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        """Register a callback for an event type."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: Type, handler: Handler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: TaskEvent) -> None:
        """
        Deliver an event to every subscriber of its type.

        A failing view-side subscriber must not undo a committed transition,
        so handler errors are logged and delivery continues.
        """
        for handler in list(self._subscribers.get(type(event), [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in %s handler %r", type(event).__name__, handler)
