import os
import json
from typing import List, Any, Tuple
from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIBRANET_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_inventory(items: List[Any]) -> None:
    """Print the catalog in the current output mode.
    - plain: '[id] title by author | Available: true | Extra: x' lines, or 'No items in inventory.'
    - json: JSON array of item dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not items:
        print("No items in inventory.")
        return

    if mode == "json":
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Inventory", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Type")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Available")
        table.add_column("Extra")
        for i in items:
            table.add_row(
                str(i.item_id),
                i.type_name,
                i.title,
                i.author,
                "[green]yes[/]" if i.available else "[red]no[/]",
                i.extra,
            )
        _console.print(table)
    else:
        for i in items:
            available = "true" if i.available else "false"
            print(f"[{i.item_id}] {i.title:<20} by {i.author:<15} | Available: {available:<5} | Extra: {i.extra}")


def print_overdue(entries: List[Tuple[Any, int]]) -> None:
    """Print (record, days_overdue) pairs."""
    mode = get_output_mode()

    if not entries:
        print("No overdue items.")
        return

    if mode == "json":
        payload = [dict(record.to_dict(), days_overdue=days) for record, days in entries]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Overdue Items", header_style="bold red")
        table.add_column("Item ID", style="magenta")
        table.add_column("User ID")
        table.add_column("Due")
        table.add_column("Days Overdue", justify="right")
        for record, days in entries:
            table.add_row(str(record.item_id), record.user_id, record.due_date.isoformat(), str(days))
        _console.print(table)
    else:
        for record, _days in entries:
            print(f"[OVERDUE] ItemID: {record.item_id} | UserID: {record.user_id} | Due: {record.due_date}")


def print_due_items(entries: List[Tuple[Any, int]]) -> None:
    """Print (record, days_left) pairs; negative days mean overdue."""
    mode = get_output_mode()

    if not entries:
        print("No borrowed items.")
        return

    if mode == "json":
        payload = [dict(record.to_dict(), days_left=days) for record, days in entries]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Your Due Items", header_style="bold cyan")
        table.add_column("Item ID", style="magenta")
        table.add_column("Due")
        table.add_column("Status")
        for record, days in entries:
            status = f"due in {days} days" if days >= 0 else "[red]OVERDUE[/]"
            table.add_row(str(record.item_id), record.due_date.isoformat(), status)
        _console.print(table)
    else:
        for record, days in entries:
            if days >= 0:
                print(f"[INFO] ItemID: {record.item_id} | Due in {days} days ({record.due_date})")
            else:
                print(f"[WARN] ItemID: {record.item_id} | OVERDUE since {record.due_date}")
