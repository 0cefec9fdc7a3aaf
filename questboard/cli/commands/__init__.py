"""
FILE: questboard/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    ls,
    board,
    show,
    edit,
    mv,
    done,
    rm,
    timer,
)
from .shop import (
    shop,
    buy,
    inventory,
)
from .system import (
    stats,
    video,
    reset,
    version,
    repl,
)

__all__ = [
    "add",
    "ls",
    "board",
    "show",
    "edit",
    "mv",
    "done",
    "rm",
    "timer",
    "shop",
    "buy",
    "inventory",
    "stats",
    "video",
    "reset",
    "version",
    "repl",
]
