"""
FILE: questboard/cli/commands/system.py
PURPOSE: System commands (stats, video, reset, version, repl)
"""

import json
from typing import Optional

import typer

from ..main import app, console, error_console, get_service, __version__
from ...core.catalog import VIDEO_UNLOCK, get_item
from ...formatting import format_duration


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show totals, points and tracked time."""
    service = get_service()
    s = service.stats()
    if json_output:
        console.print_json(json.dumps({
            "total": s.total,
            "done": s.done_count,
            "in_progress": s.in_progress_count,
            "total_elapsed_ms": s.total_elapsed_ms,
            "points": service.points,
        }))
        return
    console.print(f"  Tasks total   [bold]{s.total}[/bold]")
    console.print(f"  Done          [bold]{s.done_count}[/bold]")
    console.print(f"  In progress   [bold]{s.in_progress_count}[/bold]")
    console.print(f"  Time total    [bold]{format_duration(s.total_elapsed_ms)}[/bold]")
    console.print(f"  Points        [bold]{service.points}[/bold]")
    if service.persist_granted:
        console.print("  [green]storage pinned[/green]")


@app.command()
def video(
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Turn background video on/off"),
    url: Optional[str] = typer.Option(None, "--url", help="Video URL (a short muted loop works best)"),
):
    """
    Background video settings (needs the video unlock from the shop).

    Example:
        questboard video --url https://example.com/calm.mp4 --enable
    """
    service = get_service()
    if url is not None:
        service.set_video_url(url)
    if enable is not None and not service.set_video_enabled(enable):
        item = get_item(VIDEO_UNLOCK)
        error_console.print(f"[red]Locked:[/red] buy '{item.id}' ({item.cost} points) first")
        raise typer.Exit(1)

    state = "[green]on[/green]" if service.video_active() else "[dim]off[/dim]"
    console.print(f"Background video: {state}")
    console.print(f"  enabled={service.video_enabled} unlocked={service.has_upgrade(VIDEO_UNLOCK)}")
    console.print(f"  url={service.video_url or '-'}", markup=False)


@app.command()
def reset(
    force: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete ALL tasks, points and purchases. Cannot be undone."""
    if not force and not typer.confirm("Reset everything? This cannot be undone"):
        console.print("[dim]Cancelled[/dim]")
        raise typer.Exit(0)
    get_service().reset_all()
    console.print("[green]✓ Board reset[/green]")


@app.command()
def version():
    """Show Questboard version."""
    console.print(f"Questboard v{__version__}")


@app.command()
def repl():
    """Launch the interactive REPL."""
    from ...repl import main as repl_main
    repl_main()
