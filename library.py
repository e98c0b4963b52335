import csv
import logging
import os
from datetime import date
from typing import List, Optional, Tuple

from config import settings
from error_log import ErrorLog
from errors import (
    CatalogParseError,
    DuplicateItemError,
    InvalidReturn,
    ItemUnavailable,
    StorageError,
)
from item import CATALOG_HEADER, Audiobook, Item, item_from_row
from ledger import LoanLedger, LoanRecord

logger = logging.getLogger(__name__)


class CatalogStore:
    """In-memory catalog flushed in full to a delimited text file on every change."""

    def __init__(self, path: str, error_log: ErrorLog, reject_duplicate_ids: bool = False) -> None:
        self.path = path
        self.error_log = error_log
        self.reject_duplicate_ids = reject_duplicate_ids
        self.items: List[Item] = []

    # ------------------------- Persistence ------------------------- #
    def load(self) -> bool:
        """Read the catalog file into memory.

        Stops at the first malformed row or I/O error, keeping the rows read so
        far, logs the failure and returns False. A missing file is an empty
        catalog.
        """
        self.items = []
        if not os.path.exists(self.path):
            logger.info("Catalog file %s not found, starting empty", self.path)
            return True
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                next(f, None)  # header
                for line_number, line in enumerate(f, 2):
                    line = line.rstrip("\n")
                    if not line.strip():
                        continue
                    self.items.append(self._parse_line(line, line_number))
        except (CatalogParseError, OSError, UnicodeDecodeError) as e:
            self.error_log.error(f"Failed to load inventory: {e}")
            return False
        logger.info("Loaded %d items from %s", len(self.items), self.path)
        return True

    def save(self) -> bool:
        try:
            with open(self.path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, lineterminator="\n")
                writer.writerow(CATALOG_HEADER)
                writer.writerows(item.to_row() for item in self.items)
        except OSError as e:
            self.error_log.error(f"Failed to save inventory: {e}")
            return False
        return True

    @staticmethod
    def _parse_line(line: str, line_number: int) -> Item:
        """One row per physical line, so a stray quote cannot swallow the rows after it."""
        try:
            return item_from_row(next(csv.reader([line])))
        except (csv.Error, ValueError) as e:
            raise CatalogParseError(line_number, line, str(e)) from e

    # ------------------------- Core operations ------------------------- #
    def add(self, item: Item) -> bool:
        if self.reject_duplicate_ids and self.find(item.item_id) is not None:
            raise DuplicateItemError(item.item_id)
        self.items.append(item)
        return self.save()

    def remove(self, item_id: int) -> bool:
        """Drop every item with ``item_id``; True if something was removed and saved."""
        before = len(self.items)
        self.items = [i for i in self.items if i.item_id != item_id]
        saved = self.save()
        return saved and len(self.items) < before

    def find(self, item_id: int) -> Optional[Item]:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def set_available(self, item_id: int, available: bool) -> bool:
        item = self.find(item_id)
        if item is None:
            return False
        item.available = available
        return True

    def list_items(self) -> List[Item]:
        return list(self.items)


class Library:
    """Owns the catalog and the loan ledger and runs borrow/return across both."""

    def __init__(
        self,
        inventory_file: Optional[str] = None,
        borrowed_file: Optional[str] = None,
        error_log_file: Optional[str] = None,
        *,
        loan_days: Optional[int] = None,
        reject_duplicate_ids: Optional[bool] = None,
    ) -> None:
        self.error_log = ErrorLog(error_log_file or settings.error_log_file)
        if reject_duplicate_ids is None:
            reject_duplicate_ids = settings.reject_duplicate_ids
        self.catalog = CatalogStore(
            inventory_file or settings.inventory_file,
            self.error_log,
            reject_duplicate_ids=reject_duplicate_ids,
        )
        self.ledger = LoanLedger(
            borrowed_file or settings.borrowed_file,
            self.error_log,
            loan_days=loan_days if loan_days is not None else settings.loan_days,
        )
        self.loaded = self.catalog.load()

    # ------------------------- Catalog ------------------------- #
    def add_item(self, item: Item) -> bool:
        return self.catalog.add(item)

    def remove_item(self, item_id: int) -> bool:
        return self.catalog.remove(item_id)

    def find_item(self, item_id: int) -> Optional[Item]:
        return self.catalog.find(item_id)

    def list_items(self) -> List[Item]:
        return self.catalog.list_items()

    def play(self, item_id: int) -> str:
        """Play an audiobook; raises LookupError / TypeError for other ids."""
        item = self.catalog.find(item_id)
        if item is None:
            raise LookupError(f"Item {item_id} not found.")
        if not isinstance(item, Audiobook):
            raise TypeError(f"{item.type_name} '{item.title}' cannot be played.")
        return item.play()

    # ------------------------- Lending ------------------------- #
    def borrow(self, item_id: int, user_id: Optional[str] = None, today: Optional[date] = None) -> LoanRecord:
        user_id = user_id or settings.demo_user_id
        item = self.catalog.find(item_id)
        if item is None or not item.available:
            raise ItemUnavailable(item_id)

        self.catalog.set_available(item_id, False)
        if not self.catalog.save():
            self.catalog.set_available(item_id, True)
            raise StorageError(f"Could not save inventory while borrowing item {item_id}.")

        record = self.ledger.record_borrow(user_id, item_id, today)
        if record is None:
            raise StorageError(f"Item {item_id} marked as borrowed but the loan could not be recorded.")
        return record

    def return_item(self, item_id: int, today: Optional[date] = None) -> Optional[LoanRecord]:
        """Return a borrowed item.

        ``today`` is accepted for symmetry with :meth:`borrow`; the ledger keeps
        no return date. Returns the ledger record that was closed, or None when
        the ledger held no ACTIVE loan for the item. Raises StorageError when
        either file cannot be written; the catalog change is kept in that case.
        """
        item = self.catalog.find(item_id)
        if item is None or item.available:
            raise InvalidReturn(item_id)

        self.catalog.set_available(item_id, True)
        if not self.catalog.save():
            self.catalog.set_available(item_id, False)
            raise StorageError(f"Could not save inventory while returning item {item_id}.")

        return self.ledger.record_return(item_id)

    def list_overdue(self, today: Optional[date] = None) -> List[Tuple[LoanRecord, int]]:
        return self.ledger.list_overdue(today)

    def list_due_for_user(self, user_id: Optional[str] = None, today: Optional[date] = None) -> List[Tuple[LoanRecord, int]]:
        return self.ledger.list_due_for_user(user_id or settings.demo_user_id, today)

    def close(self) -> None:
        self.error_log.close()
