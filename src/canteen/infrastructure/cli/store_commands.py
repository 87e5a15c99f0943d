"""CLI commands for the store-open flag."""

from __future__ import annotations

import click

from canteen.domain.exceptions import DomainException
from canteen.infrastructure.bootstrap import store_status_repository


def _set(is_open: bool) -> None:
    try:
        store_status_repository().set_open(is_open)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("open")
def store_open() -> None:
    """Start accepting orders."""
    _set(True)
    click.echo("Store is OPEN.")


@click.command("close")
def store_close() -> None:
    """Stop accepting orders."""
    _set(False)
    click.echo("Store is CLOSED.")


@click.command("status")
def store_status() -> None:
    """Show whether orders are accepted."""
    try:
        is_open = store_status_repository().is_open()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Store is OPEN." if is_open else "Store is CLOSED.")
