"""
FILE: questboard/cli/commands/shop.py
PURPOSE: Economy commands (shop, buy, inventory)
"""

import json

import typer

from ..main import app, console, error_console, get_service
from ...core.catalog import SHOP, get_item
from ...formatting import shop_table, theme_for


@app.command()
def shop():
    """Show shop items and your balance."""
    service = get_service()
    upgrades = service.economy.upgrades
    console.print(shop_table(service.points, upgrades, theme_for(upgrades)))
    console.print("[dim]Tip: finish L/XL tasks to earn points faster.[/dim]")


@app.command()
def buy(
    item_id: str = typer.Argument(..., help=f"Item ID: {', '.join(i.id for i in SHOP)}"),
):
    """
    Buy a shop item.

    Example:
        questboard buy confetti
    """
    service = get_service()
    item = get_item(item_id)
    if item is None:
        error_console.print(f"[red]Error:[/red] Unknown item '{item_id}'")
        raise typer.Exit(1)
    if service.has_upgrade(item_id):
        error_console.print(f"[yellow]{item.name} is already active[/yellow]")
        raise typer.Exit(1)
    if not service.can_afford(item_id):
        error_console.print(
            f"[red]Not enough points:[/red] {item.name} costs {item.cost}, you have {service.points}"
        )
        raise typer.Exit(1)

    record = service.purchase(item_id)
    console.print(f"[green]✓ Bought {record.emoji} {record.name}[/green] [dim](balance {service.points})[/dim]")


@app.command()
def inventory(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List purchased upgrades."""
    records = get_service().economy.inventory
    if json_output:
        console.print_json(json.dumps([r.to_dict() for r in records], ensure_ascii=False))
        return
    if not records:
        console.print("[dim]Empty. Open the shop with 'questboard shop'.[/dim]")
        return
    for record in records:
        console.print(f"  {record.emoji} {record.name}")
