"""CLI commands for the menu."""

from __future__ import annotations

import click

from canteen.application.add_menu_item import AddMenuItemHandler
from canteen.application.set_stock import SetStockHandler
from canteen.application.show_menu import ShowMenuHandler
from canteen.domain.exceptions import DomainException
from canteen.domain.model.value_objects import format_amount
from canteen.infrastructure.bootstrap import menu_repository, settings


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option("--price", required=True, type=click.IntRange(min=0), help="Price in whole units.")
@click.option("--category", default="general", show_default=True, help="Menu section.")
@click.option("--stock", type=click.IntRange(min=0), default=None, help="Units in stock (omit for untracked).")
def menu_add(name: str, price: int, category: str, stock: int | None) -> None:
    """Add a new item to the menu."""
    handler = AddMenuItemHandler(menu_repo=menu_repository())

    try:
        item = handler.handle(name=name, price=price, category=category, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item.id} '{item.name}' added at {format_amount(item.price, settings().currency)}")


@click.command("list")
@click.option("--category", default=None, help="Only this menu section.")
@click.option("--search", default="", help="Filter by name.")
def menu_list(category: str | None, search: str) -> None:
    """List the menu with live stock."""
    handler = ShowMenuHandler(menu_repo=menu_repository())
    try:
        lines = handler.handle(category=category, search=search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No items found.")
        return

    currency = settings().currency
    click.echo(f"{'ID':<5} {'Name':<20} {'Category':<12} {'Price':>7} {'Stock':>9}")
    click.echo("-" * 57)
    for line in lines:
        if line.stock is None:
            stock = "-"
        elif not line.available:
            stock = "SOLD OUT"
        else:
            stock = f"{line.stock}{'!' if line.low_stock else ''}"
        price = f"{currency}{line.price}"
        click.echo(f"{line.id:<5} {line.name:<20} {line.category:<12} {price:>7} {stock:>9}")


@click.command("set-stock")
@click.option("--item", "item_name", required=True, help="Item name.")
@click.option("--stock", type=click.IntRange(min=0), default=None, help="New stock level.")
@click.option("--untracked", is_flag=True, default=False, help="Stop counting this item.")
def menu_set_stock(item_name: str, stock: int | None, untracked: bool) -> None:
    """Set the stock level for an item."""
    if (stock is None) == (not untracked):
        raise click.ClickException("Give exactly one of --stock or --untracked")

    handler = SetStockHandler(menu_repo=menu_repository())
    try:
        handler.handle(item_name=item_name, stock=None if untracked else stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{item_name}' set to {'untracked' if untracked else stock}")
