"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from canteen.application.show_order import ShowOrderHandler
from canteen.domain.exceptions import DomainException
from canteen.domain.model.value_objects import format_amount
from canteen.infrastructure.bootstrap import order_repository, settings


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order reference to display.")
@click.option("--payload", "show_payload", is_flag=True, default=False, help="Also print the QR text.")
def order_show(order_id: str, show_payload: bool) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo(f"Token:   {'#' + str(dto.token) if dto.token is not None else '---'}")
    click.echo(f"Created: {dto.created_at}")
    click.echo()
    for item in dto.items:
        click.echo(f"  {item.name:<20} x{item.quantity}")
    click.echo(f"  {'Total':<20} {format_amount(dto.amount, settings().currency)}")
    if show_payload:
        click.echo()
        click.echo(dto.payload)
