"""CLI commands for the kitchen display."""

from __future__ import annotations

import click

from canteen.application.live_projection import KitchenQueueProjection
from canteen.application.mark_ready import MarkReadyHandler
from canteen.application.start_order import StartOrderHandler
from canteen.domain.exceptions import DomainException
from canteen.infrastructure.bootstrap import order_repository, settings


@click.command("queue")
def kitchen_queue() -> None:
    """Show the orders waiting to be cooked."""
    view = KitchenQueueProjection(
        order_repository(),
        clock=settings().clock(),
        urgent_after=settings().urgent_after,
    )
    view.start()
    tickets = view.tickets()
    queued, preparing = view.queue_count, view.preparing_count
    view.close()

    if view.connection_error is not None:
        raise click.ClickException(f"Connection error: {view.connection_error}")

    click.echo(f"In queue: {queued}   Preparing: {preparing}")
    if not tickets:
        click.echo("All caught up!")
        return

    for ticket in tickets:
        label = "In Progress" if ticket.status == "preparing" else "Received"
        flag = "  URGENT" if ticket.urgent else ""
        click.echo(f"#{ticket.token}  [{ticket.order_id}]  {label}, {ticket.elapsed_minutes} min ago{flag}")
        for item in ticket.items:
            click.echo(f"    {item.name:<20} x{item.quantity}")


@click.command("start")
@click.option("--id", "order_id", required=True, help="Order reference.")
def kitchen_start(order_id: str) -> None:
    """Start cooking a paid order."""
    handler = StartOrderHandler(order_repository(), clock=settings().clock())
    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order {order_id} is being prepared.")


@click.command("ready")
@click.option("--id", "order_id", required=True, help="Order reference.")
def kitchen_ready(order_id: str) -> None:
    """Mark an order ready for pickup."""
    handler = MarkReadyHandler(order_repository(), clock=settings().clock())
    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order {order_id} is ready.")
