import json
from datetime import date

import pytest
from typer.testing import CliRunner

from item import Audiobook, Book
from main import LibraryManager, app

runner = CliRunner()


@pytest.fixture
def cli_lib(lib, monkeypatch):
    monkeypatch.setattr(LibraryManager, "_instance", lib)
    return lib


def test_list_no_items(cli_lib):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No items in inventory." in result.stdout


def test_list_json(cli_lib):
    cli_lib.add_item(Book(1, "T", "A", 200))
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == [{"id": 1, "type": "Book", "title": "T", "author": "A", "available": True, "extra": "200"}]


def test_add_book_success(cli_lib):
    result = runner.invoke(app, ["add", "1", "T", "A", "--type", "book", "--extra", "200"])
    assert result.exit_code == 0
    assert "[INFO] Item added successfully." in result.stdout
    assert cli_lib.find_item(1).page_count == 200


def test_add_rejects_bad_input(cli_lib):
    result = runner.invoke(app, ["add", "1", "T", "A", "--type", "Scroll", "--extra", "1"])
    assert "Unknown item type: Scroll" in result.stdout

    result = runner.invoke(app, ["add", "1", "T", "A", "--type", "Book", "--extra", "many"])
    assert "Invalid page count: many" in result.stdout
    assert cli_lib.list_items() == []


def test_remove(cli_lib):
    cli_lib.add_item(Book(1, "T", "A", 200))

    result = runner.invoke(app, ["remove", "1"])
    assert "[INFO] Item removed successfully." in result.stdout

    result = runner.invoke(app, ["remove", "1"])
    assert "[WARN] Item with ID 1 not found." in result.stdout


def test_find(cli_lib):
    cli_lib.add_item(Audiobook(2, "Dune", "Frank Herbert", "21h2m"))

    result = runner.invoke(app, ["find", "2"])
    assert "Item Found" in result.stdout
    assert "Type: Audiobook" in result.stdout
    assert "Extra: 21h2m" in result.stdout

    result = runner.invoke(app, ["find", "3"])
    assert "[WARN] Item with ID 3 not found." in result.stdout


def test_borrow_and_return(cli_lib):
    cli_lib.add_item(Book(1, "T", "A", 200))

    result = runner.invoke(app, ["borrow", "1", "--user", "U1", "--today", "2024-01-01"])
    assert "[INFO] Borrowed successfully. Due in 7 days (2024-01-08)." in result.stdout

    result = runner.invoke(app, ["borrow", "1"])
    assert "[WARN] Item not available." in result.stdout

    result = runner.invoke(app, ["return", "1"])
    assert "[INFO] Returned successfully." in result.stdout

    result = runner.invoke(app, ["return", "1"])
    assert "[WARN] Invalid return request." in result.stdout


def test_overdue_and_due(cli_lib):
    cli_lib.add_item(Book(42, "T", "A", 200))
    cli_lib.borrow(42, "U1", date(2024, 1, 1))

    result = runner.invoke(app, ["overdue", "--today", "2024-01-10"])
    assert "[OVERDUE] ItemID: 42 | UserID: U1 | Due: 2024-01-08" in result.stdout

    result = runner.invoke(app, ["overdue", "--today", "2024-01-08"])
    assert "No overdue items." in result.stdout

    result = runner.invoke(app, ["due", "--user", "U1", "--today", "2024-01-05"])
    assert "[INFO] ItemID: 42 | Due in 3 days (2024-01-08)" in result.stdout

    result = runner.invoke(app, ["due", "--user", "U1", "--today", "2024-01-09"])
    assert "[WARN] ItemID: 42 | OVERDUE since 2024-01-08" in result.stdout


def test_play(cli_lib):
    cli_lib.add_item(Audiobook(2, "Dune", "Frank Herbert", "21h2m"))
    cli_lib.add_item(Book(1, "T", "A", 200))

    result = runner.invoke(app, ["play", "2"])
    assert "[INFO] Playing audiobook: Dune by Frank Herbert (21h2m)" in result.stdout

    result = runner.invoke(app, ["play", "1"])
    assert "cannot be played" in result.stdout


def test_menu_user_borrows(cli_lib):
    cli_lib.add_item(Book(1, "T", "A", 200))

    result = runner.invoke(app, ["menu"], input="2\n2\n1\n5\n3\n")
    assert result.exit_code == 0
    assert "[INFO] Borrowed successfully." in result.stdout
    assert "[INFO] Exiting... Goodbye!" in result.stdout
    assert cli_lib.find_item(1).available is False
    assert cli_lib.list_due_for_user("U001")[0][0].item_id == 1


def test_menu_admin_adds_item(cli_lib):
    result = runner.invoke(app, ["menu"], input="1\n3\n7\nWired\nVarious\nemagazine\n32\n5\n3\n")
    assert result.exit_code == 0
    assert "[INFO] Item added successfully." in result.stdout
    assert cli_lib.find_item(7).issue_number == "32"


def test_overdue_json(cli_lib):
    cli_lib.add_item(Book(42, "T", "A", 200))
    cli_lib.borrow(42, "U1", date(2024, 1, 1))

    result = runner.invoke(app, ["-o", "json", "overdue", "--today", "2024-01-10"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == [{
        "user_id": "U1",
        "item_id": 42,
        "borrow_date": "2024-01-01",
        "due_date": "2024-01-08",
        "status": "ACTIVE",
        "days_overdue": 2,
    }]


def test_due_json(cli_lib):
    cli_lib.add_item(Book(42, "T", "A", 200))
    cli_lib.borrow(42, "U1", date(2024, 1, 1))

    result = runner.invoke(app, ["-o", "json", "due", "--user", "U1", "--today", "2024-01-05"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [(p["item_id"], p["days_left"]) for p in payload] == [(42, 3)]


def test_menu_admin_removes_item(cli_lib):
    cli_lib.add_item(Book(1, "T", "A", 200))
    cli_lib.add_item(Book(2, "U", "B", 100))

    result = runner.invoke(app, ["menu"], input="1\n4\n1\n5\n3\n")
    assert result.exit_code == 0
    assert "[INFO] Item removed successfully." in result.stdout
    assert [i.item_id for i in cli_lib.list_items()] == [2]
