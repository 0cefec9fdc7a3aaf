"""
FILE: questboard/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL
"""

from typing import Optional

from ..main import console, repl_context
from ..parser import ParseResult
from ..style import celebrate_add, celebrate_delete
from ...cli.main import get_service
from ...core.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    STATUS_DONE,
    VALID_STATUSES,
)
from ...core.exceptions import QuestboardError
from ...formatting import TaskFormatter, format_duration, theme_for


def ask_confirmation(message: str) -> bool:
    """Ask user for confirmation (y/n)."""
    response = input(f"{message} (y/n): ").strip().lower()
    return response in ('y', 'yes')


def _resolve_arg(result: ParseResult, usage: str) -> Optional[str]:
    """First positional arg as a full task id, printing the problem if there is one."""
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print(f"[dim]Usage: {usage}[/dim]")
        return None
    try:
        return get_service().resolve_task_id_or_raise(result.args[0])
    except QuestboardError as e:
        console.print(f"[red]Error:[/red] {e}")
        return None


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    Usage:
        add Buy groceries
        add "Ship v2" -x L --status todo -P 1
    """
    if not result.args:
        console.print("[red]Error:[/red] Task title required")
        console.print("[dim]Usage: add <title> [--project P] [--difficulty XS..XL] [--priority 1-5] [--status col][/dim]")
        return

    # Join all args as the title (in case they didn't use quotes)
    title = " ".join(result.args)

    status = (result.flag_str("status") or DEFAULT_STATUS).lower()
    if status not in VALID_STATUSES:
        console.print(f"[red]Error:[/red] Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}")
        return

    # Default to context project if set
    project = result.flag_str("project")
    if project is None and repl_context.project != "ALL":
        project = repl_context.project

    task = get_service().create_task(
        title=title,
        description=result.flag_str("desc") or "",
        project=project or "",
        difficulty=result.flag_str("difficulty") or DEFAULT_DIFFICULTY,
        status=status,
        priority=result.flag_str("priority") or DEFAULT_PRIORITY,
    )
    if task is None:
        console.print("[red]Error:[/red] Task title cannot be empty")
        return
    console.print(f"[green]{celebrate_add()}[/green] [cyan]{task.id}[/cyan]: {task.title} [dim]({task.status})[/dim]")


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - list tasks in the current view.

    Usage:
        ls
        ls --status doing
    """
    service = get_service()
    tasks = repl_context.visible_tasks()
    status = result.flag_str("status")
    if status:
        tasks = [t for t in tasks if t.status == status.lower()]
    if not tasks:
        console.print("[dim]No tasks found[/dim]")
        return
    console.print(TaskFormatter.create_table(tasks, service.clock(), theme=theme_for(service.economy.upgrades)))


def handle_board_command(result: ParseResult) -> None:
    service = get_service()
    columns = service.columns(repl_context.visible_tasks())
    console.print(TaskFormatter.create_board(columns, service.clock(), theme=theme_for(service.economy.upgrades)))
    console.print(f"[bold]{service.points}[/bold] points")


def handle_show_command(result: ParseResult) -> None:
    task_id = _resolve_arg(result, "show <id>")
    if task_id is None:
        return
    service = get_service()
    console.print(TaskFormatter.create_detail(service.get_task(task_id), service.clock()))


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - change task fields.

    Usage:
        edit <id> New title words
        edit <id> --difficulty XL --priority 1
        edit <id> --project Work --desc "More detail"
    """
    task_id = _resolve_arg(result, "edit <id> [new title] [--title T] [--project P] [--difficulty D] [--priority N] [--desc D]")
    if task_id is None:
        return

    fields = {}
    if len(result.args) > 1:
        fields["title"] = " ".join(result.args[1:])
    for flag, name in (("title", "title"), ("desc", "description"), ("project", "project"),
                       ("difficulty", "difficulty"), ("priority", "priority")):
        value = result.flag_str(flag)
        if value is not None:
            fields[name] = value
    if "status" in result.flags:
        console.print("[yellow]Status can't be edited; use 'mv <id> <column>'[/yellow]")
    if not fields:
        console.print("[red]Error:[/red] Nothing to change")
        return

    task = get_service().update_task(task_id, **fields)
    if task is None:
        console.print("[red]Error:[/red] Title cannot be empty, difficulty must be XS..XL and priority a number")
        return
    console.print(f"[green]✓ Updated[/green] [cyan]{task.id}[/cyan]: {task.title}")


def handle_mv_command(result: ParseResult) -> None:
    """
    Handle 'mv' command - move task to another column.

    Usage:
        mv <id> <backlog|todo|doing|done>
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Task ID and column required")
        console.print(f"[dim]Usage: mv <id> <{'|'.join(VALID_STATUSES)}>[/dim]")
        return
    _move(result, result.args[1].lower())


def handle_done_command(result: ParseResult) -> None:
    _move(result, STATUS_DONE)


def _move(result: ParseResult, status: str) -> None:
    if status not in VALID_STATUSES:
        console.print(f"[red]Error:[/red] Invalid column '{status}'. Must be one of: {', '.join(VALID_STATUSES)}")
        return
    task_id = _resolve_arg(result, f"{result.command} <id>")
    if task_id is None:
        return
    service = get_service()
    before = service.points
    task = service.move_task(task_id, status)
    console.print(f"[green]✓ Moved[/green] [cyan]{task.id}[/cyan] to {status}")
    if service.points < before:
        console.print(f"[yellow]{service.points - before} XP[/yellow] [dim](balance {service.points})[/dim]")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete a task (asks first unless --yes).
    """
    task_id = _resolve_arg(result, "rm <id> [--yes]")
    if task_id is None:
        return
    service = get_service()
    task = service.get_task(task_id)
    if not result.flags.get("yes") and not ask_confirmation(f"Delete '{task.title}'?"):
        console.print("[dim]Cancelled[/dim]")
        return
    service.delete_task(task_id)
    console.print(f"[green]{celebrate_delete()}[/green] {task.title}")


def handle_timer_command(result: ParseResult) -> None:
    task_id = _resolve_arg(result, "timer <id>")
    if task_id is None:
        return
    service = get_service()
    task = service.toggle_timer(task_id)
    total = format_duration(service.elapsed(task_id))
    if task.timer_running:
        console.print(f"[green]▶ Started[/green] [cyan]{task.id}[/cyan] [dim](total {total})[/dim]")
    else:
        console.print(f"[yellow]■ Stopped[/yellow] [cyan]{task.id}[/cyan] [dim](total {total})[/dim]")
