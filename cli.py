# cli.py
import sys
import logging
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from catalog_sdk.client import CatalogClient
from catalog_sdk.models import Product, CATEGORIES, SUBCATEGORIES, resolve_image, resolve_prices, quantity_label
from admin_console.config import get_settings
from admin_console.controller import CatalogController
from admin_console.errors import ValidationError
from admin_console.session import AdminSession

console = Console()
settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    handlers=[RichHandler(console=console, show_path=False)],
)

controller = CatalogController(
    CatalogClient(base_url=settings.API_BASE),
    AdminSession(settings.SESSION_FILE),
    settings.ADMIN_PASSWORD,
)

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(title: str, products: List[Product]):
    if not products:
        console.print(f"[italic yellow]No {title.lower()} yet[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Title", style="bold", width=22)
    table.add_column("Subcategory", width=14)
    table.add_column("Price", justify="right", width=16)
    table.add_column("Qty", justify="right", width=9)
    table.add_column("Badge", width=10)
    table.add_column("Image", overflow="fold", width=30)

    for p in products:
        current, original = resolve_prices(p)
        price = f"₹{current}" if current else "-"
        if original:
            price += f" [dim strike]₹{original}[/dim strike]"
        editing = " [yellow](editing)[/yellow]" if p.id == controller.reconciler.editing_id else ""
        table.add_row(
            p.id[:12],
            p.title + editing,
            p.subcategory or "-",
            price,
            quantity_label(p),
            p.badge or "-",
            resolve_image(p) or "[red]missing[/red]",
        )
    console.print(table)


def show_catalog():
    snapshot = controller.snapshot
    show_products("💍 Accessories", list(snapshot.accessories))
    show_products("🎁 Gifts", list(snapshot.gifts))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Catalog Admin",
        "[bold blue]Manage Accessories and Gifts[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Controller wrapper
# ---------------------------
def run(fn, *args, success_msg: Optional[str] = None) -> bool:
    """
    Calls a controller operation with a spinner and reports its outcome.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Working...", total=None)
        ok = fn(*args)

    if ok and success_msg:
        console.print(show_status(success_msg, True))
    elif not ok and controller.error:
        console.print(show_status(controller.error, False))
    return ok


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = "", **kwargs):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default, **kwargs)


def get_product_completer():
    snapshot = controller.snapshot
    products = list(snapshot.accessories) + list(snapshot.gifts)
    return WordCompleter([p.id for p in products] + [p.title for p in products], ignore_case=True)


def pick_product(message: str) -> Optional[Product]:
    term = prompt_with_autocomplete(message, completer=get_product_completer()).strip()
    if not term:
        return None
    snapshot = controller.snapshot
    for p in list(snapshot.accessories) + list(snapshot.gifts):
        if term in (p.id, p.title) or (len(term) >= 6 and p.id.startswith(term)):
            return p
    console.print(show_status(f"No product matches '{term}'", False))
    return None


def ask_field(label: str, name: str):
    value = prompt_with_autocomplete(label, default=getattr(controller.draft, name))
    controller.reconciler.set_field(name, value)


def compose_draft():
    """Walks the operator through every field of the current draft."""
    r = controller.reconciler
    editing = r.draft.editing

    ask_field("Title", "title")
    ask_field("Description", "description")

    while True:
        category = prompt_with_autocomplete(
            "🏷️ Category", completer=WordCompleter(list(CATEGORIES)), default=r.draft.category
        ).strip()
        try:
            if category != r.draft.category:
                r.set_category(category)
            break
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")

    vocabulary = SUBCATEGORIES.get(r.draft.category, ())
    while True:
        sub = prompt_with_autocomplete(
            f"Subcategory ({', '.join(vocabulary)})", completer=WordCompleter(list(vocabulary)),
            default=r.draft.subcategory
        ).strip()
        try:
            r.set_subcategory(sub)
            break
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")

    ask_field("Original price (₹)", "original_price")
    ask_field("Offer price (₹)", "offer_price")
    ask_field("Legacy price (₹, blank to use original)", "price")
    ask_field("Badge", "badge")
    if r.draft.category == "accessories":
        ask_field("📦 Available quantity (blank for unlimited)", "available_quantity")

    keep = " (blank keeps current image)" if editing else ""
    path = prompt_with_autocomplete(f"🖼️ Image file path{keep}").strip()
    if path:
        r.select_file(path)
    else:
        r.set_image_url(prompt_with_autocomplete(f"Image URL{keep}", default=r.draft.image_url).strip())


# ---------------------------
# Screens
# ---------------------------
def login_screen():
    while not controller.session.authenticated:
        console.print(Panel.fit("Enter the shared password to continue.", title="🔐 Admin Login"))
        password = prompt_with_autocomplete("Password", is_password=True)
        if run(controller.login, password):
            console.print(show_status("Logged in", True))


def menu():
    console.clear()
    console.print(create_header())

    if not run(controller.start):
        login_screen()
    show_catalog()

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 Show catalog", "4", "🗑️ Delete product"),
            ("2", "➕ Add product", "5", "🔄 Reload"),
            ("3", "✏️ Edit product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 6)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            show_catalog()

        elif choice in ("2", "3"):
            if choice == "3":
                product = pick_product("Product to edit (ID or title)")
                if product is None:
                    continue
                controller.begin_edit(product)
            elif controller.draft.editing is not None:
                controller.cancel_edit()

            compose_draft()
            verb = "Update" if controller.draft.editing else "Add"
            if not Confirm.ask(f"{verb} '{controller.draft.title}'?"):
                if Confirm.ask("Discard this draft?"):
                    controller.cancel_edit()
                continue
            title = controller.draft.title
            if run(controller.submit, success_msg=f"Product '{title}' saved"):
                show_catalog()

        elif choice == "4":
            product = pick_product("Product to delete (ID or title)")
            if product and Confirm.ask(f"[red]Delete '{product.title}'?[/red]"):
                if run(controller.delete, product, success_msg=f"Product '{product.title}' deleted"):
                    show_catalog()

        elif choice == "5":
            if run(controller.load, success_msg="Catalog reloaded"):
                show_catalog()

        elif choice.lower() in ("q", "quit", "exit"):
            console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
            sys.exit(0)

        console.print()
        console.rule(style="dim")


def main():
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
