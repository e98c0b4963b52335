"""Exceptions raised by the catalog, the loan ledger and the orchestration layer."""


class LibraryError(Exception):
    """Base class for every LibraNet error."""


class StorageError(LibraryError):
    """A catalog or ledger file could not be read or written."""


class CatalogParseError(LibraryError):
    """A catalog row could not be turned into an item."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason} ({line!r})")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class ItemUnavailable(LibraryError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item {item_id} is not available.")
        self.item_id = item_id


class InvalidReturn(LibraryError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item {item_id} cannot be returned.")
        self.item_id = item_id


class DuplicateItemError(LibraryError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item with ID {item_id} already exists.")
        self.item_id = item_id
