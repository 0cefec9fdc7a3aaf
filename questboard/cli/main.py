"""
FILE: questboard/cli/main.py
PURPOSE: Typer-based CLI for one-shot board commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - get_service() -> BoardService (lazily loaded, shared by commands)
  - reset_service() -> None
  - add/ls/board/show/edit/mv/done/rm/timer - task commands
  - shop/buy/inventory - economy commands
  - stats/video/reset/version/repl - system commands
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - questboard.core.service (board commands)
  - questboard.config / questboard.logging_setup (settings, logging)
NOTES:
  - Most listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error (rejected command)
  - The board is saved after every command and once more at exit
"""

import atexit
import sys
from typing import Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console

from ..config import get_settings
from ..core.catalog import CONFETTI
from ..core.events import TaskCompleted
from ..core.repository import KeyValueStore
from ..core.service import BoardService, load_service
from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="questboard",
    help="Gamified four-column task board with a points shop",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.2.0"

_service: Optional[BoardService] = None


def _celebrate(event: TaskCompleted) -> None:
    # Imported lazily: repl.style is shared with the REPL package
    from ..repl.style import celebrate_done, confetti_burst
    console.print(f"[green]{celebrate_done()} +{event.reward} XP[/green]")
    if _service is not None and _service.has_upgrade(CONFETTI):
        console.print(confetti_burst())


def get_service() -> BoardService:
    """
    Load the board once per process.

    Also asks the store for durable writes and registers a final save
    for interpreter shutdown.
    """
    global _service
    if _service is None:
        settings = get_settings()
        service = load_service(KeyValueStore(settings.db_path))
        service.request_durability()
        service.on_task_completed(_celebrate)
        atexit.register(service.flush)
        _service = service
    return _service


def reset_service() -> None:
    """Forget the loaded board (tests, or after changing QUESTBOARD_DATA_DIR)."""
    global _service
    if _service is not None:
        atexit.unregister(_service.flush)
    _service = None


@app.callback(invoke_without_command=True)
def default_command(ctx: typer.Context):
    """
    Default callback - sets up logging, launches REPL when no command is given.
    """
    settings = get_settings()
    setup_logging(
        log_dir=settings.log_dir if settings.log_to_file else None,
        console_level=settings.log_level,
    )
    if ctx.invoked_subcommand is None:
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (
    # Task commands
    add,
    ls,
    board,
    show,
    edit,
    mv,
    done,
    rm,
    timer,
    # Shop commands
    shop,
    buy,
    inventory,
    # System commands
    stats,
    video,
    reset,
    version,
    repl,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
