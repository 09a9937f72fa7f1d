# cli.py
import logging
import sys
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from shopcart.catalog import load_catalog
from shopcart.config import configure_logging, get_settings
from shopcart.controller import CartController
from shopcart.database import FileStorage
from shopcart.errors import CartError
from shopcart.store import CartStore
from shopcart.view import CartView, ProductCardView

console = Console()
logger = logging.getLogger("pycart.cli")

status_message = "Ready"

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: list[ProductCardView]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Description", width=40)
    table.add_column("Price", justify="right", width=10)
    table.add_column("", width=12)

    for p in products:
        label_style = "dim" if p.in_cart else "green"
        table.add_row(
            str(p.id),
            p.name,
            p.description,
            f"${p.price}",
            f"[{label_style}]{p.button_label}[/{label_style}]"
        )
    console.print(table)


def show_cart(view: CartView):
    title = Text()
    title.append("🛒 Cart - ", style="bold")
    title.append(f"{view.item_count} item(s)", style="bold cyan")

    if not view.items:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Product", style="bold", width=26)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Line total", justify="right", width=12)

    for it in view.items:
        table.add_row(str(it.id), it.name, str(it.quantity), f"${it.price}", f"${it.line_total}")

    totals = Table.grid(padding=(0, 2))
    totals.add_column(justify="right")
    totals.add_column(justify="right")
    totals.add_row("Subtotal", f"${view.subtotal}")
    totals.add_row("Tax (10%)", f"${view.tax}")
    totals.add_row("[bold]Total[/bold]", f"[bold green]${view.total}[/bold green]")

    grid = Table.grid()
    grid.add_row(table)
    grid.add_row(totals)
    console.print(Panel(grid, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def show_badge(view: CartView):
    # the cart-count indicator, refreshed on every change
    console.print(f"[bold cyan]🛒 {view.item_count}[/bold cyan]  [dim]total ${view.total}[/dim]")


# ---------------------------
# Intent wrapper
# ---------------------------
def try_intent(fn, *args, success_msg: Optional[str] = None):
    """
    Runs a controller intent. Storage failures are shown, never dropped.
    """
    global status_message
    try:
        result = fn(*args)
    except CartError as e:
        status_message = f"Error: {e}"
        logger.error("Intent %s failed: %s", getattr(fn, "__name__", fn), e)
        console.print(show_status(status_message, False))
        return None
    if success_msg:
        status_message = success_msg
    return result


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(ctl: CartController, in_cart_only: bool = False):
    products = ctl.catalog.all()
    if in_cart_only:
        products = [p for p in products if ctl.store.contains(p.id)]
    words = [str(p.id) for p in products] + [p.name for p in products]
    return WordCompleter(words, ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product_id(ctl: CartController, in_cart_only: bool = False) -> Optional[int]:
    raw = prompt_with_autocomplete(
        "Product ID or name", completer=get_product_completer(ctl, in_cart_only)
    ).strip()
    if raw.isdigit():
        return int(raw)
    matches = ctl.catalog.search(raw) if raw else []
    if len(matches) == 1:
        return matches[0].id
    console.print(f"[red]No single product matches '{raw}'[/red]")
    return None


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ pycart",
        "[bold blue]Shopping Cart[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu(ctl: CartController):
    global status_message

    console.clear()
    console.print(create_header())
    ctl.subscribe(show_badge)

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "➖ Decrease quantity"),
            ("2", "🛒 View cart", "6", "🗑️ Remove from cart"),
            ("3", "➕ Add to cart", "7", "🔢 Set quantity"),
            ("4", "⬆️ Increase quantity", "8", "✅ Checkout"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            show_products(ctl.render().products)

        elif choice == "2":
            show_cart(ctl.render())

        elif choice == "3":
            pid = ask_product_id(ctl)
            if pid is not None:
                added = try_intent(ctl.add, pid, success_msg=f"Added product {pid} to cart")
                if added is False:
                    status_message = f"Error: product {pid} not found"

        elif choice in ("4", "5"):
            pid = ask_product_id(ctl, in_cart_only=True)
            if pid is not None:
                if choice == "4":
                    try_intent(ctl.increment, pid, success_msg=f"Increased product {pid}")
                else:
                    try_intent(ctl.decrement, pid, success_msg=f"Decreased product {pid}")
                show_cart(ctl.render())

        elif choice == "6":
            pid = ask_product_id(ctl, in_cart_only=True)
            if pid is not None:
                try_intent(ctl.remove, pid, success_msg=f"Product {pid} removed from cart")
                show_cart(ctl.render())

        elif choice == "7":
            pid = ask_product_id(ctl, in_cart_only=True)
            if pid is not None:
                qty = IntPrompt.ask("New quantity (0 removes)", default=1)
                try_intent(ctl.set_quantity, pid, qty, success_msg=f"Quantity of product {pid} set to {qty}")
                show_cart(ctl.render())

        elif choice == "8":
            show_cart(ctl.render())
            if ctl.store.is_empty() or Confirm.ask("Confirm purchase?"):
                result = try_intent(ctl.confirm_checkout)
                if result is not None:
                    if result.placed:
                        status_message = result.message
                        console.print(Panel.fit(
                            f"[green]{result.message}[/green]\n"
                            f"Total: [bold]${result.receipt.total}[/bold]",
                            title="✅ Order Confirmation"
                        ))
                    else:
                        status_message = "Cart is empty"
                        console.print(Panel.fit(f"[yellow]{result.message}[/yellow]", title="🛒 Checkout"))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Your cart is saved. Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def build_controller() -> CartController:
    settings = get_settings()
    configure_logging(settings.log_level)
    store = CartStore.open(FileStorage(settings.storage_path), settings.storage_key)
    return CartController(store, load_catalog(settings.catalog_path))


if __name__ == "__main__":
    try:
        menu(build_controller())
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
