"""
FILE: questboard/repl/main.py
PURPOSE: Interactive REPL for the board with prompt-toolkit
EXPORTS:
  - main() - Entry point for REPL mode
  - run_repl() - Main REPL loop
  - execute_command(result) -> bool
  - REPLContext / repl_context - current view filters
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion, live refresh)
  - rich (formatted output)
  - questboard.cli.main (shared board instance)
  - questboard.repl.parser / completer
NOTES:
  - Bottom toolbar shows points, running timers and rotating tips
  - While any timer runs the prompt refreshes every tick so the toolbar
    clock moves; with no timers running there is no refresh at all
  - The tick only re-renders, it never writes to the board
  - Ctrl+D or "exit"/"quit" to exit; the board is saved on the way out
"""

import sys
from dataclasses import dataclass
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from ..cli.main import get_service
from ..config import get_settings
from ..core.constants import ALL_PROJECTS, DEFAULT_SORT
from ..core.models import Task
from ..formatting import format_duration
from .completer import create_completer
from .parser import ParseResult, parse_command


# Rich console for formatted output
console = Console()


@dataclass
class REPLContext:
    """
    View filters for the session (not persisted).

    Attributes:
        project: Project filter ("ALL" for every project)
        search: Free-text filter
        sort: priority / created / difficulty
    """
    project: str = ALL_PROJECTS
    search: str = ""
    sort: str = DEFAULT_SORT

    def get_prompt(self) -> str:
        """Plain prompt like "quest> " or "quest:[Work | ~invoice]> "."""
        parts = self._parts()
        if parts:
            return f"quest:[{' | '.join(parts)}]> "
        return "quest> "

    def _parts(self) -> List[str]:
        parts = []
        if self.project != ALL_PROJECTS:
            parts.append(self.project)
        if self.search:
            parts.append(f"~{self.search}")
        return parts

    def visible_tasks(self) -> List[Task]:
        return get_service().list_tasks(search=self.search, sort=self.sort, project_filter=self.project)


# Global REPL context (persists during session, resets on restart)
repl_context = REPLContext()


def format_prompt() -> HTML:
    parts = []
    if repl_context.project != ALL_PROJECTS:
        parts.append(f"<cyan>{_html(repl_context.project)}</cyan>")
    if repl_context.search:
        parts.append(f"<ansimagenta>~{_html(repl_context.search)}</ansimagenta>")
    if parts:
        return HTML(f"<b>quest:[{' | '.join(parts)}]&gt; </b>")
    return HTML("<b>quest&gt; </b>")


def _html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


_TOOLBAR_TIPS = [
    "Tip: 'done <id>' collects the task's XP",
    "Tip: IDs can be shortened to any unique prefix",
    "Tip: 'timer <id>' starts and stops time tracking",
    "Tip: 'use <project>' filters the view, 'use all' clears it",
    "Tip: 'shop' lists upgrades, 'buy <item>' spends points",
    "Tip: Press Ctrl+D or type 'exit' to quit",
]
_tip_index = 0


def get_bottom_toolbar() -> HTML:
    """Points, running timers (live) and a rotating tip."""
    try:
        service = get_service()
        running = [t for t in service.tasks.all() if t.timer_running]
        tip = _TOOLBAR_TIPS[_tip_index % len(_TOOLBAR_TIPS)]
        text = f"⭐ {service.points} XP"
        if running:
            elapsed = sum(service.elapsed(t.id) for t in running)
            text += f" | ▶ {len(running)} running {format_duration(elapsed)}"
        return HTML(f"<style bg='#444444' fg='#ffffff'> {_html(text)} | {_html(tip)} </style>")
    except Exception:
        return HTML("<style bg='#444444' fg='#ffffff'> Questboard </style>")


def get_right_prompt() -> HTML:
    try:
        count = len(repl_context.visible_tasks())
        total = len(get_service().tasks)
    except Exception:
        return HTML("")
    if count != total:
        return HTML(f"<style fg='#888888'>[{count} in view]</style>")
    return HTML(f"<style fg='#888888'>[{total} total]</style>")


def refresh_interval() -> float:
    """Tick length while a timer runs, 0 (no ticking) otherwise."""
    return get_settings().tick_seconds if get_service().any_timer_running() else 0


# Import command handlers from command modules
from .commands import (
    handle_add_command,
    handle_ls_command,
    handle_board_command,
    handle_show_command,
    handle_edit_command,
    handle_mv_command,
    handle_done_command,
    handle_rm_command,
    handle_timer_command,
    handle_shop_command,
    handle_buy_command,
    handle_inventory_command,
    handle_stats_command,
    handle_video_command,
    handle_use_command,
    handle_sort_command,
    handle_find_command,
    handle_reset_command,
    handle_help_command,
    handle_clear_command,
)


def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    if not command:
        return True

    handlers = {
        "add": handle_add_command,
        "ls": handle_ls_command,
        "board": handle_board_command,
        "show": handle_show_command,
        "view": handle_show_command,
        "edit": handle_edit_command,
        "mv": handle_mv_command,
        "done": handle_done_command,
        "rm": handle_rm_command,
        "timer": handle_timer_command,
        "shop": handle_shop_command,
        "buy": handle_buy_command,
        "inventory": handle_inventory_command,
        "stats": handle_stats_command,
        "video": handle_video_command,
        "use": handle_use_command,
        "sort": handle_sort_command,
        "find": handle_find_command,
        "reset": handle_reset_command,
        "help": handle_help_command,
        "clear": handle_clear_command,
    }

    handler = handlers.get(command)
    if handler:
        handler(result)
        console.print()
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()

    return True


def run_repl() -> None:
    """
    Main REPL loop.

    Exits on Ctrl+D, "exit" or "quit". Ctrl+C only cancels the current line.
    """
    global _tip_index
    service = get_service()
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()

    session = None
    use_simple_input = not has_tty

    if has_tty:
        completer = create_completer(
            task_ids=lambda: [t.id for t in service.tasks.all()],
            projects=service.tasks.projects,
        )
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=completer,
                complete_while_typing=True,
                bottom_toolbar=get_bottom_toolbar,
                rprompt=get_right_prompt,
            )
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    console.print("[bold cyan]Questboard[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if service.persist_granted:
        console.print("[dim]storage pinned[/dim]")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    try:
        while True:
            try:
                if use_simple_input or session is None:
                    user_input = input(repl_context.get_prompt())
                else:
                    # Re-evaluated every prompt: ticking stops as soon as the
                    # last timer does
                    user_input = session.prompt(format_prompt(), refresh_interval=refresh_interval())

                if not execute_command(parse_command(user_input)):
                    break
                _tip_index += 1

            except KeyboardInterrupt:
                console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
                continue
            except EOFError:
                console.print()
                console.print("[dim]Goodbye![/dim]")
                break
            except Exception as e:
                # Unexpected error - show but don't crash
                console.print(f"[red]Unexpected error:[/red] {e}")
                import traceback
                console.print("[dim]" + traceback.format_exc() + "[/dim]")
    finally:
        service.flush()


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: questboard (or questboard repl)
    """
    try:
        run_repl()
    except Exception as e:
        console.print(f"[red]Fatal error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
