"""
FILE: questboard/cli/commands/tasks.py
PURPOSE: Task commands (add, ls, board, show, edit, mv, done, rm, timer)
"""

from typing import Optional

import typer

from ..main import app, console, error_console, get_service
from ...core.catalog import COLUMNS, column_label
from ...core.constants import (
    ALL_PROJECTS,
    DEFAULT_DIFFICULTY,
    DEFAULT_PRIORITY,
    DEFAULT_SORT,
    DEFAULT_STATUS,
    STATUS_DONE,
    VALID_SORTS,
    VALID_STATUSES,
)
from ...core.exceptions import QuestboardError
from ...formatting import TaskFormatter, format_duration, theme_for


def _resolve(task_ref: str) -> str:
    """Full task id from an id or unique prefix, or exit 1 with a message."""
    try:
        return get_service().resolve_task_id_or_raise(task_ref)
    except QuestboardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _check_status(status: str) -> str:
    status = status.strip().lower()
    if status not in VALID_STATUSES:
        error_console.print(
            f"[red]Error:[/red] Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}"
        )
        raise typer.Exit(1)
    return status


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--desc", "-d", help="Description"),
    project: str = typer.Option("", "--project", "-p", help="Project name"),
    difficulty: str = typer.Option(DEFAULT_DIFFICULTY, "--difficulty", "-x", help="XS, S, M, L or XL"),
    priority: int = typer.Option(DEFAULT_PRIORITY, "--priority", "-P", help="1 (highest) to 5"),
    status: str = typer.Option(DEFAULT_STATUS, "--status", "-s", help="Starting column"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        questboard add "Ship v2" --difficulty L --status todo
        questboard add "Fix bug" -p Work -P 1
    """
    status = _check_status(status)
    service = get_service()
    task = service.create_task(
        title=title,
        description=description,
        project=project,
        difficulty=difficulty,
        status=status,
        priority=priority,
    )
    if task is None:
        error_console.print("[red]Error:[/red] Task title cannot be empty")
        raise typer.Exit(1)

    if json_output:
        console.print_json(task.to_json())
    elif raw:
        console.print(f"{task.id}: {task.title}")
    else:
        console.print(f"[green]✓ Created task [bold]{task.id}[/bold]:[/green] {task.title}")


@app.command()
def ls(
    search: str = typer.Option("", "--search", "-q", help="Substring match on title/description/project"),
    project: str = typer.Option(ALL_PROJECTS, "--project", "-p", help="Only this project"),
    sort: str = typer.Option(DEFAULT_SORT, "--sort", help=f"One of: {', '.join(VALID_SORTS)}"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Only this column"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks.

    Example:
        questboard ls
        questboard ls --project Work --sort difficulty
        questboard ls -q invoice --json
    """
    if sort not in VALID_SORTS:
        error_console.print(f"[red]Error:[/red] Invalid sort '{sort}'. Must be one of: {', '.join(VALID_SORTS)}")
        raise typer.Exit(1)

    service = get_service()
    tasks = service.list_tasks(search=search, sort=sort, project_filter=project)
    if status is not None:
        status = _check_status(status)
        tasks = [t for t in tasks if t.status == status]

    if json_output:
        console.print_json(TaskFormatter.to_json_array(tasks))
    elif raw:
        for line in TaskFormatter.to_raw_lines(tasks):
            console.print(line, markup=False)
    elif not tasks:
        console.print("[dim]No tasks found[/dim]")
    else:
        theme = theme_for(service.economy.upgrades)
        console.print(TaskFormatter.create_table(tasks, service.clock(), theme=theme))


@app.command()
def board(
    search: str = typer.Option("", "--search", "-q", help="Substring filter"),
    project: str = typer.Option(ALL_PROJECTS, "--project", "-p", help="Only this project"),
    sort: str = typer.Option(DEFAULT_SORT, "--sort", help=f"One of: {', '.join(VALID_SORTS)}"),
):
    """Show the four columns side by side."""
    service = get_service()
    tasks = service.list_tasks(search=search, sort=sort, project_filter=project)
    theme = theme_for(service.economy.upgrades)
    console.print(TaskFormatter.create_board(service.columns(tasks), service.clock(), theme=theme))
    console.print(f"[bold]{service.points}[/bold] points")


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """View full task details."""
    service = get_service()
    task = service.get_task(_resolve(task_id))
    if json_output:
        console.print_json(task.to_json())
    else:
        console.print(TaskFormatter.create_detail(task, service.clock()))


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="New project"),
    difficulty: Optional[str] = typer.Option(None, "--difficulty", "-x", help="XS, S, M, L or XL"),
    priority: Optional[int] = typer.Option(None, "--priority", "-P", help="1 (highest) to 5"),
):
    """
    Edit task fields. Use 'mv' to change columns.

    Example:
        questboard edit 3f2a --title "Ship v2.1" -x XL
    """
    fields = {
        name: value
        for name, value in (
            ("title", title),
            ("description", description),
            ("project", project),
            ("difficulty", difficulty),
            ("priority", priority),
        )
        if value is not None
    }
    if not fields:
        error_console.print("[red]Error:[/red] Nothing to change")
        raise typer.Exit(1)

    task = get_service().update_task(_resolve(task_id), **fields)
    if task is None:
        error_console.print("[red]Error:[/red] Title cannot be empty and difficulty must be XS, S, M, L or XL")
        raise typer.Exit(1)
    console.print(f"[green]✓ Updated task [bold]{task.id}[/bold]:[/green] {task.title}")


@app.command()
def mv(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    status: str = typer.Argument(..., help=f"Target column: {', '.join(c.key for c in COLUMNS)}"),
):
    """
    Move task to a different column.

    Example:
        questboard mv 3f2a doing
    """
    status = _check_status(status)
    service = get_service()
    before = service.points
    task = service.move_task(_resolve(task_id), status)
    console.print(f"[green]✓ Moved [bold]{task.id}[/bold] to {column_label(status)}[/green]")
    delta = service.points - before
    if delta < 0:
        console.print(f"[yellow]{delta} XP[/yellow] [dim](balance {service.points})[/dim]")


@app.command()
def done(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
):
    """Move task to done and collect its reward."""
    mv(task_id, STATUS_DONE)


@app.command()
def rm(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    force: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a task. Points it earned are kept."""
    service = get_service()
    resolved = _resolve(task_id)
    task = service.get_task(resolved)
    if not force and not typer.confirm(f"Delete '{task.title}'?"):
        console.print("[dim]Cancelled[/dim]")
        return
    service.delete_task(resolved)
    console.print(f"[green]✓ Deleted task {resolved}[/green]")


@app.command()
def timer(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
):
    """Start or stop the timer on a task."""
    service = get_service()
    task = service.toggle_timer(_resolve(task_id))
    total = format_duration(service.elapsed(task.id))
    if task.timer_running:
        console.print(f"[green]▶ Timer started[/green] for {task.id} [dim](total {total})[/dim]")
    else:
        console.print(f"[yellow]■ Timer stopped[/yellow] for {task.id} [dim](total {total})[/dim]")
