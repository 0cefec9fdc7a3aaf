"""Tests for the one-shot Typer commands."""

import json

from typer.testing import CliRunner

from questboard.cli.main import app, get_service, reset_service

runner = CliRunner()


def _add(*args):
    result = runner.invoke(app, ["add", *args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_version(cli_env):
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Questboard v" in result.output


def test_add_and_ls(cli_env):
    task = _add("Ship v2", "-x", "L", "-s", "todo", "-p", "Work")
    assert task["difficulty"] == "L"
    assert task["status"] == "todo"
    assert task["project"] == "Work"

    result = runner.invoke(app, ["ls", "--raw"])
    assert result.exit_code == 0
    assert f"{task['id']}: [ ] Ship v2 (todo)" in result.output

    result = runner.invoke(app, ["ls", "--json", "--project", "Home"])
    assert json.loads(result.output) == []
    print("✓ add/ls work from the command line")


def test_add_rejects_blank_title_and_bad_status(cli_env):
    result = runner.invoke(app, ["add", "   "])
    assert result.exit_code == 1
    assert "empty" in result.output

    result = runner.invoke(app, ["add", "Task", "--status", "archived"])
    assert result.exit_code == 1
    assert "Invalid status" in result.output


def test_done_reopen_and_persistence(cli_env):
    """done pays out, the balance is on disk, reopening takes it back."""
    task = _add("Ship v2", "-x", "L", "-s", "todo")
    prefix = task["id"][:5]

    result = runner.invoke(app, ["done", prefix])
    assert result.exit_code == 0, result.output
    assert "+80 XP" in result.output
    assert get_service().points == 80

    # Reload from disk
    reset_service()
    assert get_service().points == 80
    assert get_service().get_task(task["id"]).status == "done"

    result = runner.invoke(app, ["mv", task["id"], "todo"])
    assert result.exit_code == 0
    assert "-80 XP" in result.output
    assert get_service().points == 0
    print("✓ Points survive a restart")


def test_unknown_task_id(cli_env):
    result = runner.invoke(app, ["show", "ffffffff"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_edit(cli_env):
    task = _add("Old title")
    result = runner.invoke(app, ["edit", task["id"], "--title", "New title", "-P", "1"])
    assert result.exit_code == 0
    edited = get_service().get_task(task["id"])
    assert edited.title == "New title"
    assert edited.priority == 1

    result = runner.invoke(app, ["edit", task["id"]])
    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_rm_asks_first(cli_env):
    task = _add("Delete me")
    result = runner.invoke(app, ["rm", task["id"]], input="n\n")
    assert "Cancelled" in result.output
    assert get_service().get_task(task["id"]) is not None

    result = runner.invoke(app, ["rm", task["id"], "--yes"])
    assert result.exit_code == 0
    assert get_service().get_task(task["id"]) is None


def test_timer_toggle(cli_env):
    task = _add("Focus")
    result = runner.invoke(app, ["timer", task["id"]])
    assert "Timer started" in result.output
    assert get_service().any_timer_running() is True
    result = runner.invoke(app, ["timer", task["id"]])
    assert "Timer stopped" in result.output
    assert get_service().any_timer_running() is False


def test_buy_flow(cli_env):
    result = runner.invoke(app, ["buy", "confetti"])
    assert result.exit_code == 1
    assert "Not enough points" in result.output

    task = _add("Big one", "-x", "XL")
    runner.invoke(app, ["done", task["id"]])

    result = runner.invoke(app, ["buy", "confetti"])
    assert result.exit_code == 0, result.output
    assert get_service().points == 30

    result = runner.invoke(app, ["buy", "confetti"])
    assert result.exit_code == 1
    assert "already active" in result.output

    result = runner.invoke(app, ["buy", "rocket"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["inventory", "--json"])
    assert [r["item_id"] for r in json.loads(result.output)] == ["confetti"]


def test_stats_json(cli_env):
    _add("One", "-s", "doing")
    runner.invoke(app, ["add", "Two", "-x", "S", "-s", "done"])
    result = runner.invoke(app, ["stats", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total"] == 2
    assert data["done"] == 1
    assert data["in_progress"] == 1
    assert data["points"] == 20


def test_video_locked_until_bought(cli_env):
    result = runner.invoke(app, ["video", "--enable"])
    assert result.exit_code == 1
    assert "Locked" in result.output

    task = _add("Earn", "-x", "L")
    runner.invoke(app, ["done", task["id"]])
    runner.invoke(app, ["buy", "video_unlock"])

    result = runner.invoke(app, ["video", "--enable", "--url", "https://example.com/v.mp4"])
    assert result.exit_code == 0, result.output
    assert get_service().video_active() is True


def test_reset_confirmation(cli_env):
    runner.invoke(app, ["add", "Something", "-s", "done"])
    result = runner.invoke(app, ["reset"], input="n\n")
    assert "Cancelled" in result.output
    assert get_service().points == 40

    result = runner.invoke(app, ["reset"], input="y\n")
    assert result.exit_code == 0
    assert get_service().points == 0
    assert len(get_service().tasks) == 0
