"""
FILE: questboard/repl/commands/shop.py
PURPOSE: Shop command handlers for REPL
"""

from ..main import console
from ..parser import ParseResult
from ..style import celebrate_purchase
from ...cli.main import get_service
from ...core.catalog import SHOP, get_item
from ...formatting import shop_table, theme_for


def handle_shop_command(result: ParseResult) -> None:
    service = get_service()
    upgrades = service.economy.upgrades
    console.print(shop_table(service.points, upgrades, theme_for(upgrades)))


def handle_buy_command(result: ParseResult) -> None:
    """
    Handle 'buy' command.

    Usage:
        buy confetti
    """
    if not result.args:
        console.print("[red]Error:[/red] Item ID required")
        console.print(f"[dim]Items: {', '.join(i.id for i in SHOP)}[/dim]")
        return

    item_id = result.args[0]
    item = get_item(item_id)
    service = get_service()
    if item is None:
        console.print(f"[red]Error:[/red] Unknown item '{item_id}'")
        return
    if service.has_upgrade(item_id):
        console.print(f"[yellow]{item.name} is already active[/yellow]")
        return
    if not service.can_afford(item_id):
        console.print(f"[red]Not enough points:[/red] {item.cost} needed, you have {service.points}")
        return

    record = service.purchase(item_id)
    console.print(f"[green]{celebrate_purchase()}[/green] {record.emoji} {record.name} [dim](balance {service.points})[/dim]")


def handle_inventory_command(result: ParseResult) -> None:
    records = get_service().economy.inventory
    if not records:
        console.print("[dim]Empty. Try 'shop'.[/dim]")
        return
    for record in records:
        console.print(f"  {record.emoji} {record.name}")
