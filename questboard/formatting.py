"""
FILE: questboard/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Class for formatting tasks
  - BoardTheme / theme_for(upgrades): Display flags bought in the shop
  - format_duration(ms) -> str
  - shop_table(points, upgrades, theme) -> Table
DEPENDENCIES:
  - rich (tables, boxes, columns)
  - json (for JSON serialization)
  - questboard.core (models, catalog, service)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - Elapsed time is always the projection at render time, nothing is written back
"""

import json
from dataclasses import dataclass
from typing import Dict, List

from rich import box
from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.catalog import COLUMNS, SHOP, get_tier
from .core.models import Task
from .core import timer


def format_duration(ms: int) -> str:
    """
    Format milliseconds as hours/minutes/seconds.

    Examples:
        >>> format_duration(3_723_000)
        '1h 2m 3s'
        >>> format_duration(0)
        '0h 0m 0s'
    """
    sec = max(0, int(ms)) // 1000
    h, rem = divmod(sec, 3600)
    m, s = divmod(rem, 60)
    return f"{h}h {m}m {s}s"


@dataclass(frozen=True)
class BoardTheme:
    """How tables look, driven by toggle upgrades."""

    table_box: box.Box = box.SQUARE
    header_style: str = "bold cyan"
    border_style: str = "white"
    row_style: str = ""
    padding: int = 0

    @property
    def text_style(self) -> str:
        return self.row_style or "white"


def theme_for(upgrades: Dict[str, bool]) -> BoardTheme:
    dark = upgrades.get("theme_dark", False)
    return BoardTheme(
        table_box=box.HEAVY if upgrades.get("shadow_plus") else (box.ROUNDED if upgrades.get("round_plus") else box.SQUARE),
        header_style="bold bright_white" if dark else "bold cyan",
        border_style="grey50" if dark else "white",
        row_style="bright_white on grey11" if dark else "",
        padding=1 if upgrades.get("glass_plus") else 0,
    )


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def difficulty_label(task: Task) -> str:
        tier = get_tier(task.difficulty)
        return f"[{tier.style}]{tier.key} · {tier.reward_points} XP[/{tier.style}]"

    @staticmethod
    def create_table(
        tasks: List[Task],
        now: int,
        title: str = "Tasks",
        theme: BoardTheme = BoardTheme(),
        show_status: bool = True,
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: Tasks in display order
            now: Clock reading used for running timers
            title: Table title
            theme: Styling from owned upgrades
            show_status: Whether to show the column (status) column

        Returns:
            Rich Table object ready for display
        """
        table = Table(
            title=title,
            show_header=True,
            header_style=theme.header_style,
            box=theme.table_box,
            border_style=theme.border_style,
            style=theme.row_style or None,
        )
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("Title", style=theme.text_style)
        if show_status:
            table.add_column("Status", style="magenta", width=11)
        table.add_column("Project", style="yellow", width=14)
        table.add_column("Tier", width=12, no_wrap=True)
        table.add_column("P", width=2, justify="right")
        table.add_column("Time", width=12, justify="right", no_wrap=True)

        for task in tasks:
            time_cell = format_duration(timer.elapsed_ms(task, now))
            if task.timer_running:
                time_cell = f"[bold green]▶ {time_cell}[/bold green]"
            row = [task.id, escape(task.title)]
            if show_status:
                row.append(task.status)
            row += [escape(task.project), TaskFormatter.difficulty_label(task), str(task.priority), time_cell]
            table.add_row(*row)

        return table

    @staticmethod
    def create_board(
        columns: Dict[str, List[Task]],
        now: int,
        theme: BoardTheme = BoardTheme(),
    ) -> Columns:
        """Four side-by-side panels, one per workflow column."""
        panels = []
        for column in COLUMNS:
            tasks = columns.get(column.key, [])
            body = Text()
            if not tasks:
                body.append("empty", style="dim")
            for i, task in enumerate(tasks):
                if i:
                    body.append("\n\n")
                tier = get_tier(task.difficulty)
                body.append(f"{task.id} ", style="cyan")
                body.append(task.title, style="bold")
                body.append(f"\n{tier.key} · {tier.reward_points} XP", style=tier.style)
                body.append(f"  P{task.priority}  {format_duration(timer.elapsed_ms(task, now))}", style="dim")
                if task.timer_running:
                    body.append(" ▶", style="bold green")
                if task.is_done:
                    body.append(f"\n+{task.points_awarded} XP earned", style="green")
            panels.append(
                Panel(
                    body,
                    title=f"{column.label} ({len(tasks)})",
                    box=theme.table_box,
                    border_style=theme.border_style,
                    style=theme.row_style or "none",
                    padding=(theme.padding, 1),
                    width=34,
                )
            )
        return Columns(panels, equal=True)

    @staticmethod
    def create_detail(task: Task, now: int) -> Panel:
        lines = [
            f"[bold]{escape(task.title)}[/bold]",
            "",
            f"[dim]ID:[/dim]          {task.id}",
            f"[dim]Status:[/dim]      {task.status}",
            f"[dim]Project:[/dim]     {escape(task.project)}",
            f"[dim]Difficulty:[/dim]  {TaskFormatter.difficulty_label(task)}",
            f"[dim]Priority:[/dim]    {task.priority}",
            f"[dim]Time:[/dim]        {format_duration(timer.elapsed_ms(task, now))}"
            + (" [green](running)[/green]" if task.timer_running else ""),
        ]
        if task.is_done:
            lines.append(f"[dim]Earned:[/dim]      {task.points_awarded} XP")
        if task.description:
            lines += ["", escape(task.description)]
        return Panel("\n".join(lines), title=f"Task {task.id}", expand=False)

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        return json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """One plain line per task, for --raw output and piping."""
        lines = []
        for task in tasks:
            status_marker = "x" if task.is_done else " "
            lines.append(f"{task.id}: [{status_marker}] {task.title} ({task.status})")
        return lines


def shop_table(points: int, upgrades: Dict[str, bool], theme: BoardTheme = BoardTheme()) -> Table:
    table = Table(
        title=f"Shop - you have {points} points",
        header_style=theme.header_style,
        box=theme.table_box,
        border_style=theme.border_style,
    )
    table.add_column("", width=3)
    table.add_column("Item", style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Cost", justify="right")
    table.add_column("State")
    for item in SHOP:
        if upgrades.get(item.id):
            state = "[green]Active[/green]"
        elif points >= item.cost:
            state = "[bold]Buy[/bold]"
        else:
            state = f"[dim]need {item.cost - points} more[/dim]"
        table.add_row(item.emoji, item.name, item.id, str(item.cost), state)
    return table
