"""
FILE: questboard/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_add_command,
    handle_ls_command,
    handle_board_command,
    handle_show_command,
    handle_edit_command,
    handle_mv_command,
    handle_done_command,
    handle_rm_command,
    handle_timer_command,
)
from .shop import (
    handle_shop_command,
    handle_buy_command,
    handle_inventory_command,
)
from .system import (
    handle_stats_command,
    handle_video_command,
    handle_use_command,
    handle_sort_command,
    handle_find_command,
    handle_reset_command,
    handle_help_command,
    handle_clear_command,
)

__all__ = [
    "handle_add_command",
    "handle_ls_command",
    "handle_board_command",
    "handle_show_command",
    "handle_edit_command",
    "handle_mv_command",
    "handle_done_command",
    "handle_rm_command",
    "handle_timer_command",
    "handle_shop_command",
    "handle_buy_command",
    "handle_inventory_command",
    "handle_stats_command",
    "handle_video_command",
    "handle_use_command",
    "handle_sort_command",
    "handle_find_command",
    "handle_reset_command",
    "handle_help_command",
    "handle_clear_command",
]
