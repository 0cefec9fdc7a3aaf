"""
FILE: questboard/repl/commands/system.py
PURPOSE: View, settings and system command handlers for REPL
"""

from rich.panel import Panel

from ..main import console, repl_context
from ..parser import ParseResult
from .tasks import ask_confirmation
from ...cli.main import get_service
from ...core.catalog import VIDEO_UNLOCK, get_item
from ...core.constants import ALL_PROJECTS, VALID_SORTS
from ...formatting import format_duration


def handle_use_command(result: ParseResult) -> None:
    """
    Handle 'use' command - set the project filter.

    Usage:
        use             # Show current project filter
        use Work        # Only tasks in Work
        use all         # Clear filter
    """
    if not result.args:
        if repl_context.project != ALL_PROJECTS:
            console.print(f"Current project: [cyan]{repl_context.project}[/cyan]")
        else:
            console.print("[dim]No project filter (showing all projects)[/dim]")
        return

    name = " ".join(result.args)
    if name.lower() in ("all", "none", "clear"):
        repl_context.project = ALL_PROJECTS
        console.print("✓ Cleared project filter")
        return

    known = get_service().tasks.projects()
    match = next((p for p in known if p.lower() == name.lower()), None)
    if match is None:
        console.print(f"[red]Error:[/red] No tasks in project '{name}'")
        if known:
            console.print(f"[dim]Projects: {', '.join(known)}[/dim]")
        return
    repl_context.project = match
    console.print(f"✓ Showing [cyan]{match}[/cyan]")


def handle_sort_command(result: ParseResult) -> None:
    if not result.args:
        console.print(f"Sorting by [cyan]{repl_context.sort}[/cyan]")
        return
    mode = result.args[0].lower()
    if mode not in VALID_SORTS:
        console.print(f"[red]Error:[/red] Invalid sort '{mode}'. Must be one of: {', '.join(VALID_SORTS)}")
        return
    repl_context.sort = mode
    console.print(f"✓ Sorting by [cyan]{mode}[/cyan]")


def handle_find_command(result: ParseResult) -> None:
    """
    Handle 'find' command - free-text filter over title/description/project.

    Usage:
        find invoice
        find            # Clear filter
    """
    repl_context.search = " ".join(result.args).strip()
    if repl_context.search:
        console.print(f"✓ Filtering on [magenta]{repl_context.search}[/magenta]")
    else:
        console.print("✓ Cleared text filter")


def handle_stats_command(result: ParseResult) -> None:
    service = get_service()
    s = service.stats()
    console.print(f"  Tasks total   [bold]{s.total}[/bold]")
    console.print(f"  Done          [bold]{s.done_count}[/bold]")
    console.print(f"  In progress   [bold]{s.in_progress_count}[/bold]")
    console.print(f"  Time total    [bold]{format_duration(s.total_elapsed_ms)}[/bold]")
    console.print(f"  Points        [bold]{service.points}[/bold]")


def handle_video_command(result: ParseResult) -> None:
    """
    Handle 'video' command.

    Usage:
        video                       # Show settings
        video --url https://...     # Set URL
        video --enable / --disable
    """
    service = get_service()
    url = result.flag_str("url")
    if url is not None:
        service.set_video_url(url)
    if result.flags.get("enable") and not service.set_video_enabled(True):
        item = get_item(VIDEO_UNLOCK)
        console.print(f"[red]Locked:[/red] buy '{item.id}' ({item.cost} points) first")
    if result.flags.get("disable"):
        service.set_video_enabled(False)

    state = "[green]on[/green]" if service.video_active() else "[dim]off[/dim]"
    console.print(f"Background video: {state}")
    console.print(f"  url={service.video_url or '-'}", markup=False)


def handle_reset_command(result: ParseResult) -> None:
    if not result.flags.get("yes") and not ask_confirmation("Reset everything? This cannot be undone"):
        console.print("[dim]Cancelled[/dim]")
        return
    get_service().reset_all()
    console.print("[green]✓ Board reset[/green]")


def handle_help_command(result: ParseResult) -> None:
    """Show available commands."""
    help_text = """
[bold cyan]Tasks:[/bold cyan]

  [cyan]add <title> [-p P] [-x D] [-P N] [-s col][/cyan]  Create a task
  [cyan]ls [--status col][/cyan]         List tasks in view
  [cyan]board[/cyan]                     Four-column board
  [cyan]show <id>[/cyan]                 Task details
  [cyan]edit <id> [title] [flags][/cyan] Edit title/project/difficulty/priority/desc
  [cyan]mv <id> <column>[/cyan]          Move (backlog, todo, doing, done)
  [cyan]done <id>[/cyan]                 Complete and collect XP
  [cyan]rm <id> [--yes][/cyan]           Delete (earned XP is kept)
  [cyan]timer <id>[/cyan]                Start/stop time tracking

[bold cyan]Shop:[/bold cyan]

  [cyan]shop[/cyan] / [cyan]buy <item>[/cyan] / [cyan]inventory[/cyan]

[bold cyan]View & system:[/bold cyan]

  [cyan]use <project|all>[/cyan]         Project filter
  [cyan]find [text][/cyan]               Text filter (empty clears)
  [cyan]sort <priority|created|difficulty>[/cyan]
  [cyan]stats[/cyan]                     Totals and tracked time
  [cyan]video [--url U] [--enable|--disable][/cyan]
  [cyan]reset [--yes][/cyan]             Wipe tasks, points and purchases
  [cyan]clear[/cyan] / [cyan]help[/cyan] / [cyan]exit[/cyan]

[bold cyan]Examples:[/bold cyan]

  [dim]add "Ship v2" -x L -s todo
  done 3f2a                   # IDs can be shortened to a unique prefix
  buy confetti[/dim]
"""
    console.print(Panel(help_text, title="Questboard Help", border_style="cyan"))


def handle_clear_command(result: ParseResult) -> None:
    console.clear()
