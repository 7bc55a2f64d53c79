# cli.py - interactive catalog CLI with autocomplete
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.pycatalog import CatalogClient, CatalogAPIError

console = Console()
c = CatalogClient()


status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
category_cache = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _price_text(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"${value:,.2f}"
    return "-"


def show_products(products: List[Dict[str, Any]], title: str = "📦 Products Catalog"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    # a projected list only carries some of the columns
    columns = [k for k in ("id", "name", "price", "category") if any(k in p for p in products)]

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    widths = {"id": 26, "name": 24, "price": 12, "category": 16}
    for col in columns:
        table.add_column(
            col.capitalize() if col != "id" else "ID",
            style="dim" if col == "id" else ("bold" if col == "name" else None),
            justify="right" if col == "price" else "left",
            width=widths[col],
        )

    for p in products:
        row = []
        for col in columns:
            if col == "price":
                row.append(_price_text(p.get("price")))
            else:
                row.append(str(p.get(col, "-")))
        table.add_row(*row)
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner and returns its result.
    API and connection errors are shown in the status panel and turn into None.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except CatalogAPIError as e:
        status_message = f"Error: {e.message} (HTTP {e.status_code})"
        console.print(show_status(status_message, False))
        return None
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return result


def refresh_cache():
    global product_cache
    body = try_api(c.list_products)
    if body is not None:
        product_cache = body.get("products", [])
        category_cache.update(p.get("category") for p in product_cache if p.get("category"))


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    if not product_cache:
        refresh_cache()
    return WordCompleter([p["id"] for p in product_cache if p.get("id")], ignore_case=True)


def get_category_completer():
    return WordCompleter(sorted(category_cache), ignore_case=True)


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Product Catalog",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_price(message: str, default: Optional[str] = "10.0", allow_blank: bool = False) -> Optional[float]:
    while True:
        raw = Prompt.ask(message, default=default or "")
        if allow_blank and not raw.strip():
            return None
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


# ---------------------------
# Menu actions
# ---------------------------
def list_products_action():
    global product_cache
    category = prompt_with_autocomplete("🏷️ Category (blank for all)", completer=get_category_completer()).strip()
    min_price = prompt_with_autocomplete("💰 Minimum price (blank for none)").strip()
    sort = prompt_with_autocomplete(
        "↕️ Sort (price / -price / blank)", completer=WordCompleter(["price", "-price"])
    ).strip()
    fields = prompt_with_autocomplete(
        "🧾 Fields (comma-separated, blank for all)",
        completer=WordCompleter(["id", "name", "price", "category"]),
    ).strip()

    body = try_api(
        c.list_products, category or None, min_price or None, sort or None, fields or None,
        success_msg="Products loaded successfully",
    )
    if body is None:
        return
    products = body.get("products", [])
    if not fields:
        product_cache = products
    show_products(products, title=f"📦 Products ({body.get('count', len(products))})")


def get_product_action():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    product = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
    if product:
        show_products([product])


def create_product_action():
    name = prompt_with_autocomplete("Enter product name").strip()
    price = ask_price("💰 Price", default="10.0")
    category = prompt_with_autocomplete("🏷️ Category", completer=get_category_completer()).strip()
    resp = try_api(c.create_product, name, price, category, success_msg=f"Product '{name}' created")
    if resp:
        console.print(Panel(f"Created product: [green]{resp['id']}[/green]"))
        refresh_cache()


def update_product_action():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    console.print("[dim]Leave a field blank to keep its current value.[/dim]")
    name = prompt_with_autocomplete("New name").strip() or None
    price = ask_price("New price", default=None, allow_blank=True)
    category = prompt_with_autocomplete("New category", completer=get_category_completer()).strip() or None
    resp = try_api(
        c.update_product, pid, name=name, price=price, category=category,
        success_msg=f"Product {pid} updated",
    )
    if resp:
        show_products([resp["product"]])
        refresh_cache()


def delete_product_action():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    if not Confirm.ask(f"[red]Delete product {pid}?[/red]"):
        return
    resp = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
    if resp:
        refresh_cache()


ACTIONS = {
    "1": list_products_action,
    "2": get_product_action,
    "3": create_product_action,
    "4": update_product_action,
    "5": delete_product_action,
}


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "4", "✏️ Update product"),
            ("2", "ℹ️ Get product by ID", "5", "🗑️ Delete product"),
            ("3", "➕ Create product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(list(ACTIONS) + ["q", "quit", "exit"])
        ).strip()

        if choice in ACTIONS:
            ACTIONS[choice]()
        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
