"""CLI commands for the admin point-of-sale."""

from __future__ import annotations

import click

from canteen.application.accept_order import AcceptOrderHandler
from canteen.application.live_projection import (
    DailyStatsProjection,
    HistoryProjection,
    HistoryRange,
)
from canteen.application.scan_order import ScanOrderHandler
from canteen.domain.exceptions import DomainException, InsufficientStockError
from canteen.domain.model.value_objects import format_amount
from canteen.infrastructure.bootstrap import (
    menu_repository,
    order_repository,
    settings,
    token_counter_repository,
)


def _read_payload(payload: str | None, payload_file) -> str:
    if payload is not None:
        return payload.replace("\\n", "\n")
    if payload_file is not None:
        return payload_file.read()
    raise click.ClickException("Give the scanned text with --payload or --file")


@click.command("scan")
@click.option("--payload", default=None, help="Scanned QR text (use \\n for line breaks).")
@click.option("--file", "payload_file", type=click.File("r", encoding="utf-8"), default=None,
              help="File holding the scanned QR text ('-' for stdin).")
def admin_scan(payload: str | None, payload_file) -> None:
    """Decode a scanned QR payload."""
    handler = ScanOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(_read_payload(payload, payload_file))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_id}  (status={dto.stored_status or 'unknown'})")
    for item in dto.items:
        click.echo(f"  {item.name:<20} x{item.quantity}")
    click.echo(f"  Total: {format_amount(dto.amount, settings().currency)}")


@click.command("accept")
@click.option("--id", "order_id", default=None, help="Order reference to accept.")
@click.option("--file", "payload_file", type=click.File("r", encoding="utf-8"), default=None,
              help="Accept the order named in a scanned payload file.")
def admin_accept(order_id: str | None, payload_file) -> None:
    """Accept payment: deduct stock and issue a token."""
    handler = AcceptOrderHandler(
        order_repo=order_repository(),
        menu_repo=menu_repository(),
        counter_repo=token_counter_repository(),
        clock=settings().clock(),
    )

    try:
        if order_id is None:
            scanned = ScanOrderHandler(order_repository()).handle(
                _read_payload(None, payload_file)
            )
            order_id = scanned.order_id
        result = handler.handle(order_id)
    except InsufficientStockError as exc:
        raise click.ClickException(
            f"{exc.item_name} is short: only {exc.available} left. Order stays pending."
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {result.order_id} paid")
    click.echo(f"TOKEN #{result.token}")


@click.command("stats")
def admin_stats() -> None:
    """Today's revenue, order count and last token."""
    view = DailyStatsProjection(order_repository(), clock=settings().clock())
    view.start()
    stats = view.stats()
    view.close()

    if view.connection_error is not None:
        raise click.ClickException(f"Connection error: {view.connection_error}")

    click.echo(f"Revenue:    {format_amount(stats.revenue, settings().currency)}")
    click.echo(f"Orders:     {stats.order_count}")
    click.echo(f"Completed:  {stats.ready_count}")
    click.echo(f"Last token: {stats.last_token if stats.last_token is not None else '--'}")


@click.command("history")
@click.option("--range", "range_name", default="today", show_default=True,
              type=click.Choice([r.value for r in HistoryRange]), help="Period to list.")
def admin_history(range_name: str) -> None:
    """List orders for a period, newest first."""
    view = HistoryProjection(order_repository(), clock=settings().clock())
    view.select(HistoryRange(range_name))
    entries = view.entries()
    view.close()

    if view.connection_error is not None:
        raise click.ClickException(f"Connection error: {view.connection_error}")
    if not entries:
        click.echo("No orders found.")
        return

    currency = settings().currency
    for entry in entries:
        token = f"#{entry.token}" if entry.token is not None else "#---"
        items = ", ".join(f"{i.name} x{i.quantity}" if i.quantity > 1 else i.name for i in entry.items)
        click.echo(
            f"{token:<6} {entry.created_at:%Y-%m-%d %H:%M}  {entry.status:<9}"
            f" +{currency}{entry.amount:<5} {items}"
        )
