import logging
from datetime import date, datetime
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt

from config import settings
from errors import DuplicateItemError, InvalidReturn, ItemUnavailable, StorageError
from item import make_item
from library import Library
from utils.ui_helpers import print_due_items, print_inventory, print_overdue, set_output_mode
from utils.validators import ItemTypeValidator, NumberValidator, TextValidator

APP_NAME = settings.app_name

console = Console()


class LibraryManager:
    """Holds the single Library the CLI works against for the whole process."""

    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        if cls._instance is None:
            cls._instance = Library()
            if not cls._instance.loaded:
                print(f"[WARN] Inventory could not be fully loaded; see {settings.error_log_file}")
        return cls._instance


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


TODAY_OPTION = typer.Option(None, "--today", formats=["%Y-%m-%d"], help="Override today's date (YYYY-MM-DD)")

# --- Typer CLI application ---
app = typer.Typer(help=f"{APP_NAME} CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show diagnostic log messages"),
):
    """Global CLI options (output mode, verbosity)."""
    logging.basicConfig(
        level=logging.INFO if verbose or settings.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list():
    """View the inventory."""
    print_inventory(LibraryManager.get_instance().list_items())


@app.command("add")
def cli_add(
    item_id: int = typer.Argument(..., help="Item ID"),
    title: str = typer.Argument(..., help="Title"),
    author: str = typer.Argument(..., help="Author"),
    item_type: str = typer.Option("Book", "--type", "-t", help="Book | Audiobook | EMagazine"),
    extra: str = typer.Option(..., "--extra", "-e", help="Page count, duration (e.g. 15h30m) or issue number"),
):
    """Add an item to the catalog (admin)."""
    print(_add_item(LibraryManager.get_instance(), item_id, title, author, item_type, extra))


@app.command("remove")
def cli_remove(item_id: int):
    """Remove every item with the given ID (admin)."""
    lib = LibraryManager.get_instance()
    if lib.remove_item(item_id):
        print("[INFO] Item removed successfully.")
    else:
        print(f"[WARN] Item with ID {item_id} not found.")


@app.command("find")
def cli_find(item_id: int):
    """Show the details of one item."""
    item = LibraryManager.get_instance().find_item(item_id)
    if item is None:
        print(f"[WARN] Item with ID {item_id} not found.")
        return
    print("Item Found")
    print(f"Type: {item.type_name}")
    print(f"Title: {item.title}")
    print(f"Author: {item.author}")
    print(f"Available: {'true' if item.available else 'false'}")
    print(f"Extra: {item.extra}")


@app.command("borrow")
def cli_borrow(
    item_id: int,
    user: str = typer.Option(settings.demo_user_id, "--user", "-u", help="Borrowing user ID"),
    today: Optional[datetime] = TODAY_OPTION,
):
    """Borrow an item for the configured loan period."""
    print(_borrow(LibraryManager.get_instance(), item_id, user, _as_date(today)))


@app.command("return")
def cli_return(item_id: int, today: Optional[datetime] = TODAY_OPTION):
    """Return a borrowed item."""
    print(_return(LibraryManager.get_instance(), item_id, _as_date(today)))


@app.command("overdue")
def cli_overdue(today: Optional[datetime] = TODAY_OPTION):
    """List every active loan past its due date (admin)."""
    print_overdue(LibraryManager.get_instance().list_overdue(_as_date(today)))


@app.command("due")
def cli_due(
    user: str = typer.Option(settings.demo_user_id, "--user", "-u", help="User ID"),
    today: Optional[datetime] = TODAY_OPTION,
):
    """List a user's active loans with days left until due."""
    print_due_items(LibraryManager.get_instance().list_due_for_user(user, _as_date(today)))


@app.command("play")
def cli_play(item_id: int):
    """Play an audiobook."""
    try:
        print(f"[INFO] {LibraryManager.get_instance().play(item_id)}")
    except (LookupError, TypeError) as e:
        print(f"[WARN] {e}")


@app.command("menu")
def cli_menu():
    """Interactive admin/user dashboards."""
    lib = LibraryManager.get_instance()
    while True:
        console.print(Panel.fit("[1] Admin Login\n[2] User Login\n[3] Exit", title=f"==== {APP_NAME} ===="))
        choice = Prompt.ask("Choose option", choices=["1", "2", "3"], show_choices=False)
        if choice == "1":
            _admin_menu(lib)
        elif choice == "2":
            _user_menu(lib)
        else:
            print("[INFO] Exiting... Goodbye!")
            return


# ------------------------- Shared actions ------------------------- #
def _add_item(lib: Library, item_id: int, title: str, author: str, item_type: str, extra: str) -> str:
    type_name = ItemTypeValidator.normalize_type(item_type)
    if type_name is None:
        return f"[WARN] Unknown item type: {item_type}. Use Book, Audiobook or EMagazine."
    title = TextValidator.sanitize_text(title)
    author = TextValidator.sanitize_text(author)
    if not TextValidator.validate_title(title):
        return "[WARN] Title cannot be empty."
    if not TextValidator.validate_author(author):
        return "[WARN] Invalid author."
    if not NumberValidator.validate_extra(type_name, extra):
        return f"[WARN] Invalid {'page count' if type_name == 'Book' else 'extra value'}: {extra}"
    try:
        saved = lib.add_item(make_item(type_name, item_id, title, author, TextValidator.sanitize_text(extra)))
    except DuplicateItemError as e:
        return f"[WARN] {e}"
    if not saved:
        return f"[ERROR] Item added but the inventory could not be saved; see {lib.error_log.path}"
    return "[INFO] Item added successfully."


def _borrow(lib: Library, item_id: int, user_id: str, today: Optional[date]) -> str:
    try:
        record = lib.borrow(item_id, user_id, today)
    except ItemUnavailable:
        return "[WARN] Item not available."
    except StorageError as e:
        return f"[ERROR] {e}"
    days = (record.due_date - record.borrow_date).days
    return f"[INFO] Borrowed successfully. Due in {days} days ({record.due_date})."


def _return(lib: Library, item_id: int, today: Optional[date]) -> str:
    try:
        lib.return_item(item_id, today)
    except InvalidReturn:
        return "[WARN] Invalid return request."
    except StorageError as e:
        return f"[ERROR] {e}"
    return "[INFO] Returned successfully."


def _admin_menu(lib: Library) -> None:
    while True:
        console.print(Panel.fit(
            "[1] View Inventory\n[2] View Overdue Items\n[3] Add Item\n[4] Remove Item\n[5] Back",
            title="==== Admin Dashboard ====",
        ))
        choice = Prompt.ask("Enter choice", choices=["1", "2", "3", "4", "5"], show_choices=False)
        if choice == "1":
            print_inventory(lib.list_items())
        elif choice == "2":
            print_overdue(lib.list_overdue())
        elif choice == "3":
            item_id = IntPrompt.ask("Enter Item ID")
            title = Prompt.ask("Enter Title")
            author = Prompt.ask("Enter Author")
            item_type = Prompt.ask("Enter Type (Book/Audiobook/EMagazine)")
            type_name = ItemTypeValidator.normalize_type(item_type)
            if type_name == "Book":
                extra = Prompt.ask("Enter Page Count")
            elif type_name == "Audiobook":
                extra = Prompt.ask("Enter Duration (e.g., 15h30m)")
            else:
                extra = Prompt.ask("Enter Issue Number")
            print(_add_item(lib, item_id, title, author, item_type, extra))
        elif choice == "4":
            item_id = IntPrompt.ask("Enter ID to remove")
            lib.remove_item(item_id)
            print("[INFO] Item removed successfully.")
        else:
            return


def _user_menu(lib: Library) -> None:
    while True:
        console.print(Panel.fit(
            "[1] View Catalog\n[2] Borrow Item\n[3] Return Item\n[4] View My Due Items\n[5] Back",
            title="==== User Dashboard ====",
        ))
        choice = Prompt.ask("Enter choice", choices=["1", "2", "3", "4", "5"], show_choices=False)
        if choice == "1":
            print_inventory(lib.list_items())
        elif choice == "2":
            item_id = IntPrompt.ask("Enter Item ID to borrow")
            print(_borrow(lib, item_id, settings.demo_user_id, None))
        elif choice == "3":
            item_id = IntPrompt.ask("Enter Item ID to return")
            print(_return(lib, item_id, None))
        elif choice == "4":
            print_due_items(lib.list_due_for_user(settings.demo_user_id))
        else:
            return


if __name__ == "__main__":
    app()
