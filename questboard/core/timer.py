"""
FILE: questboard/core/timer.py
PURPOSE: Per-task elapsed time tracking (sessions)
EXPORTS:
  - start_session(task, now) -> None
  - close_session(task, now) -> int
  - toggle(task, now) -> bool
  - elapsed_ms(task, now) -> int
  - now_ms() -> int
DEPENDENCIES:
  - time (stdlib)
  - questboard.core.models (Task)
NOTES:
  - A session is the open interval between a start and its stop
  - time_spent only grows when a session closes
  - elapsed_ms() is a pure projection, it never writes to the task
  - Clock skew (now < start) accrues nothing rather than going negative
"""

import time

from .models import Task


def now_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def _running_ms(task: Task, now: int) -> int:
    if not task.timer_running:
        return 0
    return max(0, now - (task.timer_started_at or 0))


def start_session(task: Task, now: int) -> None:
    task.timer_running = True
    # 0 means "not started", keep the stamp positive
    task.timer_started_at = max(1, now)


def close_session(task: Task, now: int) -> int:
    """
    Close the open session, if any.

    Returns:
        Milliseconds accrued into time_spent (0 if nothing was running)
    """
    if not task.timer_running:
        return 0
    delta = _running_ms(task, now)
    task.time_spent = (task.time_spent or 0) + delta
    task.timer_running = False
    task.timer_started_at = 0
    return delta


def toggle(task: Task, now: int) -> bool:
    """Flip the timer; returns True if a session is now open."""
    if task.timer_running:
        close_session(task, now)
        return False
    start_session(task, now)
    return True


def elapsed_ms(task: Task, now: int) -> int:
    return (task.time_spent or 0) + _running_ms(task, now)
