"""CLI commands for the student storefront."""

from __future__ import annotations

import click

from canteen.application.checkout import CheckoutHandler
from canteen.application.manage_cart import AddToCartHandler, RemoveFromCartHandler
from canteen.domain.exceptions import DomainException
from canteen.domain.model.value_objects import format_amount
from canteen.infrastructure.bootstrap import (
    cart_store,
    menu_repository,
    order_repository,
    settings,
    store_status_repository,
)


@click.command("add")
@click.option("--item", "item_id", required=True, type=int, help="Menu item ID.")
@click.option("--qty", default=1, show_default=True, type=click.IntRange(min=1), help="Units to add.")
def cart_add(item_id: int, qty: int) -> None:
    """Add an item to the cart."""
    store = cart_store()
    handler = AddToCartHandler(
        menu_repo=menu_repository(),
        store_status_repo=store_status_repository(),
    )

    added = []
    try:
        cart = store.load()
        for _ in range(qty):
            added.append(handler.handle(cart, item_id))
    except DomainException as exc:
        # Units added before a stock limit was hit stay in the cart.
        if added:
            store.save(cart)
        raise click.ClickException(str(exc))

    store.save(cart)
    click.echo(f"{added[-1].name} added ({cart.quantity_of(item_id)} in cart)")


@click.command("remove")
@click.option("--item", "item_id", required=True, type=int, help="Menu item ID.")
def cart_remove(item_id: int) -> None:
    """Remove one unit of an item from the cart."""
    store = cart_store()
    try:
        cart = store.load()
        item = RemoveFromCartHandler().handle(cart, item_id)
        store.save(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{item.name} removed from cart")


@click.command("show")
def cart_show() -> None:
    """Show the cart and its total."""
    try:
        cart = cart_store().load()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if cart.is_empty:
        click.echo("Your cart is empty.")
        return

    currency = settings().currency
    prices = {item.name: item.price for item in cart.items}
    for line in cart.grouped():
        click.echo(
            f"  {line.name:<20} {currency}{prices[line.name]} x {line.quantity:<3}"
            f" {currency}{prices[line.name] * line.quantity:>6}"
        )
    click.echo(f"  {'-' * 40}")
    click.echo(f"  {'Total':<30} {currency}{cart.total:>6}")


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""
    store = cart_store()
    try:
        cart = store.load()
        cart.clear()
        store.save(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Cart cleared.")


@click.command("checkout")
def cart_checkout() -> None:
    """Place the order and print the QR payload."""
    store = cart_store()
    handler = CheckoutHandler(
        order_repo=order_repository(),
        store_status_repo=store_status_repository(),
        clock=settings().clock(),
        currency=settings().currency,
    )

    try:
        cart = store.load()
        result = handler.handle(cart)
        store.save(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {result.order_id} placed (pending payment)")
    click.echo(f"Total: {format_amount(result.amount, settings().currency)}")
    click.echo()
    click.echo("Show this at the counter:")
    click.echo(result.payload)
