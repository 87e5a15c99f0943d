import click

from canteen.infrastructure import bootstrap
from canteen.infrastructure.cli.admin_commands import (
    admin_accept,
    admin_history,
    admin_scan,
    admin_stats,
)
from canteen.infrastructure.cli.cart_commands import (
    cart_add,
    cart_checkout,
    cart_clear,
    cart_remove,
    cart_show,
)
from canteen.infrastructure.cli.kitchen_commands import (
    kitchen_queue,
    kitchen_ready,
    kitchen_start,
)
from canteen.infrastructure.cli.menu_commands import menu_add, menu_list, menu_set_stock
from canteen.infrastructure.cli.order_commands import order_show
from canteen.infrastructure.cli.store_commands import store_close, store_open, store_status
from canteen.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """Canteen: storefront, admin scanner and kitchen display"""
    try:
        settings = bootstrap.settings()
    except ValueError as exc:
        raise click.ClickException(str(exc))
    configure_logging(settings.log_level, settings.log_format)


@cli.group()
def menu() -> None:
    """Manage the menu and stock."""


@cli.group()
def store() -> None:
    """Open or close ordering."""


@cli.group()
def cart() -> None:
    """Student storefront: build a cart and check out."""


@cli.group()
def admin() -> None:
    """Point-of-sale scanner: accept orders, stats, history."""


@cli.group()
def kitchen() -> None:
    """Kitchen display: cook and hand out orders."""


@cli.group()
def order() -> None:
    """Inspect orders."""


# Register subcommands
menu.add_command(menu_add)
menu.add_command(menu_list)
menu.add_command(menu_set_stock)
store.add_command(store_open)
store.add_command(store_close)
store.add_command(store_status)
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_clear)
cart.add_command(cart_checkout)
admin.add_command(admin_scan)
admin.add_command(admin_accept)
admin.add_command(admin_stats)
admin.add_command(admin_history)
kitchen.add_command(kitchen_queue)
kitchen.add_command(kitchen_start)
kitchen.add_command(kitchen_ready)
order.add_command(order_show)
