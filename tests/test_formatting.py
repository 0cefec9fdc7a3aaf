"""Tests for shared output formatting."""

from rich import box
from rich.console import Console

from questboard.core.models import Task
from questboard.formatting import TaskFormatter, format_duration, shop_table, theme_for


def _render(renderable) -> str:
    console = Console(width=160, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_format_duration():
    assert format_duration(0) == "0h 0m 0s"
    assert format_duration(5000) == "0h 0m 5s"
    assert format_duration(3_723_000) == "1h 2m 3s"
    assert format_duration(59_999) == "0h 0m 59s"
    assert format_duration(-10) == "0h 0m 0s"


def test_theme_follows_upgrades():
    assert theme_for({}).table_box is box.SQUARE
    assert theme_for({"round_plus": True}).table_box is box.ROUNDED
    assert theme_for({"round_plus": True, "shadow_plus": True}).table_box is box.HEAVY
    assert theme_for({"glass_plus": True}).padding == 1
    assert theme_for({"theme_dark": True}).row_style != ""


def test_table_shows_live_elapsed():
    task = Task(id="abc11111", title="[red]not markup[/red]", created_at=1,
                time_spent=2000, timer_running=True, timer_started_at=10_000)
    text = _render(TaskFormatter.create_table([task], now=13_000))
    assert "abc11111" in text
    assert "[red]not markup[/red]" in text
    assert "0h 0m 5s" in text


def test_board_has_four_columns():
    tasks = {"backlog": [Task(id="t1", title="Queued", created_at=1)], "todo": [], "doing": [], "done": []}
    text = _render(TaskFormatter.create_board(tasks, now=0))
    for label in ("Backlog (1)", "To-Do (0)", "In progress (0)", "Done (0)"):
        assert label in text


def test_raw_lines():
    done = Task(id="t1", title="Shipped", created_at=1, status="done")
    todo = Task(id="t2", title="Later", created_at=2, status="todo")
    assert TaskFormatter.to_raw_lines([done, todo]) == [
        "t1: [x] Shipped (done)",
        "t2: [ ] Later (todo)",
    ]


def test_shop_table_states():
    text = _render(shop_table(100, {"confetti": True}))
    assert "you have 100 points" in text
    assert "Active" in text
    assert "need 80 more" in text
