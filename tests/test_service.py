"""End-to-end tests for the board service (store + economy + persistence)."""

import logging

import pytest

from questboard.core.events import TaskCompleted
from questboard.core.exceptions import InvalidInputError, TaskNotFoundError
from questboard.core.models import Task
from questboard.core.service import BoardService, load_service
from questboard.core.store import TaskStore


def test_complete_and_reopen_moves_points(service):
    """'Ship v2' (L) earns 80 on done and gives it back on reopen."""
    task = service.create_task("Ship v2", difficulty="L", status="todo")
    assert service.points == 0

    service.move_task(task.id, "done")
    assert service.points == 80
    assert task.points_awarded == 80
    assert task.completed_at is not None

    service.move_task(task.id, "todo")
    assert service.points == 0
    assert task.points_awarded == 0
    assert task.completed_at is None
    print("✓ Points follow the done column")


def test_create_directly_in_done_pays_out(service):
    task = service.create_task("Already shipped", difficulty="XS", status="done")
    assert task.status == "done"
    assert task.points_awarded == 10
    assert service.points == 10


def test_rejected_commands_change_nothing(service):
    assert service.create_task("   ") is None
    task = service.create_task("Real")
    assert service.move_task(task.id, "archived") is None
    assert service.move_task("nope", "done") is None
    assert service.update_task(task.id, title="") is None
    assert service.toggle_timer("nope") is None
    assert service.delete_task("nope") is False
    assert service.points == 0
    assert task.status == "backlog"
    assert task.title == "Real"


def test_refund_clamp_after_spending(service):
    """Spend the reward, then reopen: the balance bottoms out at 0."""
    big = service.create_task("Big", difficulty="XL")
    medium = service.create_task("Medium", difficulty="L")
    service.move_task(big.id, "done")
    service.move_task(medium.id, "done")
    assert service.points == 200

    assert service.purchase("theme_dark") is not None
    assert service.points == 20

    service.move_task(big.id, "doing")
    assert service.points == 0
    assert service.has_upgrade("theme_dark") is True


def test_delete_keeps_points(service):
    task = service.create_task("Done and gone", difficulty="M", status="done")
    assert service.delete_task(task.id) is True
    assert service.points == 40
    assert service.get_task(task.id) is None


def test_timer_through_service(service, clock):
    task = service.create_task("Focus")
    service.toggle_timer(task.id)
    assert service.any_timer_running() is True
    clock.advance(5000)
    assert service.elapsed(task.id) == 5000
    service.toggle_timer(task.id)
    assert task.time_spent == 5000
    assert service.any_timer_running() is False
    assert service.elapsed("missing") == 0


def test_stats(service, clock):
    a = service.create_task("A", status="doing")
    b = service.create_task("B")
    service.create_task("C", status="done")
    service.toggle_timer(a.id)
    clock.advance(2000)
    service.toggle_timer(b.id)
    clock.advance(1000)

    stats = service.stats()
    assert stats.total == 3
    assert stats.done_count == 1
    assert stats.in_progress_count == 1
    assert stats.total_elapsed_ms == 4000


def test_list_tasks_and_columns(service):
    service.create_task("Low", project="Work", priority=5)
    service.create_task("High", project="Work", priority=1, status="doing")
    service.create_task("Home stuff", project="Home", priority=3)

    assert [t.title for t in service.list_tasks()] == ["High", "Home stuff", "Low"]
    assert [t.title for t in service.list_tasks(project_filter="Work")] == ["High", "Low"]
    assert service.projects() == ["ALL", "Home", "Work"]

    columns = service.columns()
    assert list(columns) == ["backlog", "todo", "doing", "done"]
    assert [t.title for t in columns["backlog"]] == ["Home stuff", "Low"]
    assert [t.title for t in columns["doing"]] == ["High"]


def test_resolve_task_id_or_raise(kv_store):
    tasks = TaskStore([
        Task(id="abc11111", title="One", created_at=1),
        Task(id="abc22222", title="Two", created_at=2),
    ])
    service = BoardService(kv_store, tasks=tasks)

    assert service.resolve_task_id_or_raise("abc1") == "abc11111"
    with pytest.raises(InvalidInputError, match="ambiguous"):
        service.resolve_task_id_or_raise("abc")
    with pytest.raises(TaskNotFoundError):
        service.resolve_task_id_or_raise("fff")
    with pytest.raises(InvalidInputError):
        service.resolve_task_id_or_raise("  ")


def test_state_survives_reload(service, kv_store, clock):
    """Everything written by commands comes back from the store."""
    done = service.create_task("Ship v2", difficulty="L", project="Work", status="done")
    running = service.create_task("Write docs", description="README")
    service.toggle_timer(running.id)
    service.purchase("video_unlock")
    service.set_video_url("https://example.com/loop.mp4")
    service.set_video_enabled(True)

    reloaded = load_service(kv_store, clock=clock)

    assert reloaded.points == 20
    assert [t.id for t in reloaded.tasks.all()] == [running.id, done.id]
    again = reloaded.get_task(done.id)
    assert again.status == "done"
    assert again.points_awarded == 80
    assert again.project == "Work"
    assert reloaded.get_task(running.id).timer_running is True
    assert reloaded.has_upgrade("video_unlock") is True
    assert [r.item_id for r in reloaded.economy.inventory] == ["video_unlock"]
    assert reloaded.video_active() is True

    # A running timer keeps counting from its original start across a restart
    clock.advance(7000)
    assert reloaded.elapsed(running.id) == 7000
    print("✓ Board round-trips through SQLite")


def test_load_skips_bad_records(kv_store, caplog):
    kv_store.save_many({
        "tasks": [
            {"id": "good0001", "title": "Fine", "created_at": 5, "status": "todo"},
            {"id": "bad00001"},
            "not a task",
            {"id": "good0001", "title": "Duplicate", "created_at": 6},
        ],
        "points": "lots",
        "upgrades": ["confetti"],
    })

    with caplog.at_level(logging.WARNING):
        service = load_service(kv_store)

    assert [t.title for t in service.tasks.all()] == ["Fine"]
    assert service.points == 0
    assert service.economy.upgrades == {}
    assert "Skipping" in caplog.text


def test_video_needs_unlock(service):
    assert service.set_video_enabled(True) is False
    assert service.video_enabled is False
    service.set_video_url("  https://example.com/v.mp4  ")
    assert service.video_url == "https://example.com/v.mp4"
    assert service.video_active() is False
    assert service.set_video_enabled(False) is True


def test_reset_all_keeps_host_settings(service, kv_store):
    service.create_task("Gone soon", difficulty="XL", status="done")
    service.purchase("video_unlock")
    service.set_video_url("https://example.com/v.mp4")

    service.reset_all()

    assert len(service.tasks) == 0
    assert service.points == 0
    assert service.economy.inventory == []
    assert service.video_url == "https://example.com/v.mp4"
    assert kv_store.load("tasks") == []
    assert kv_store.load("points") == 0


def test_completion_subscribers_see_events(service):
    seen = []
    service.on_task_completed(seen.append)
    task = service.create_task("Watch me", difficulty="S")
    service.move_task(task.id, "done")
    assert [(e.task_id, e.reward) for e in seen] == [(task.id, 20)]


def test_failing_subscriber_does_not_undo_completion(service, caplog):
    def broken(event):
        raise RuntimeError("view blew up")

    service.on_task_completed(broken)
    task = service.create_task("Resilient", difficulty="S")
    with caplog.at_level(logging.ERROR):
        service.move_task(task.id, "done")

    assert task.status == "done"
    assert service.points == 20
    assert "view blew up" in caplog.text


def test_request_durability_is_remembered(service, kv_store):
    granted = service.request_durability()
    assert service.persist_granted is granted
    assert kv_store.load("persistGranted") is granted


def test_is_valid_title():
    assert BoardService.is_valid_title("x") is True
    assert BoardService.is_valid_title("   ") is False
    assert BoardService.is_valid_title(None) is False


def test_resolve_task_id_is_quiet(kv_store):
    tasks = TaskStore([Task(id="abc11111", title="One", created_at=1)])
    service = BoardService(kv_store, tasks=tasks)
    assert service.resolve_task_id("abc") == "abc11111"
    assert service.resolve_task_id("xyz") is None


def test_unsubscribed_handlers_are_not_called(service):
    seen = []
    service.on_task_completed(seen.append)
    service.events.unsubscribe(TaskCompleted, seen.append)
    task = service.create_task("Quiet", status="done")
    assert seen == []
    assert task.points_awarded == 40
