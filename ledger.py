from __future__ import annotations

import csv
import io
import logging
import os
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from error_log import ErrorLog
from errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_LOAN_DAYS = 7


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"


@dataclass
class LoanRecord:
    user_id: str
    item_id: int
    borrow_date: date
    due_date: date
    status: LoanStatus = LoanStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE

    def days_until_due(self, today: date) -> int:
        """Signed day count: negative once the due date has passed."""
        return (self.due_date - today).days

    def is_overdue(self, today: date) -> bool:
        return self.is_active and self.due_date < today

    def to_row(self) -> List[str]:
        return [
            self.user_id,
            str(self.item_id),
            self.borrow_date.isoformat(),
            self.due_date.isoformat(),
            self.status.value,
        ]

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "item_id": self.item_id,
            "borrow_date": self.borrow_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "status": self.status.value,
        }

    @staticmethod
    def from_row(row: List[str]) -> "LoanRecord":
        if len(row) != 5:
            raise ValueError(f"expected 5 columns, got {len(row)}")
        user_id, item_id, borrow_date, due_date, status = row
        return LoanRecord(
            user_id=user_id,
            item_id=int(item_id),
            borrow_date=date.fromisoformat(borrow_date),
            due_date=date.fromisoformat(due_date),
            status=LoanStatus(status.strip()),
        )


class LoanLedger:
    """Borrow/return history kept in a headerless delimited text file.

    Rows are ``UserID,ItemID,BorrowDate,DueDate,Status`` in insertion order.
    Borrowing appends a row; returning flips the status column of the first
    ACTIVE row for the item and rewrites the whole file. Queries re-read the
    file every time. I/O failures go to the error log; reads that fail yield
    no records, while failed borrows and returns are reported to the caller.
    """

    def __init__(self, path: str, error_log: ErrorLog, loan_days: int = DEFAULT_LOAN_DAYS) -> None:
        self.path = path
        self.error_log = error_log
        self.loan_days = loan_days

    # ------------------------- Writes ------------------------- #
    def record_borrow(self, user_id: str, item_id: int, today: Optional[date] = None) -> Optional[LoanRecord]:
        today = today or date.today()
        record = LoanRecord(
            user_id=user_id,
            item_id=item_id,
            borrow_date=today,
            due_date=today + timedelta(days=self.loan_days),
        )
        try:
            with open(self.path, "a", newline="", encoding="utf-8") as f:
                csv.writer(f, lineterminator="\n").writerow(record.to_row())
        except OSError as e:
            self.error_log.error(f"Failed to save borrowed: {e}")
            return None
        logger.info("Recorded loan of item %s to %s, due %s", item_id, user_id, record.due_date)
        return record

    def record_return(self, item_id: int) -> Optional[LoanRecord]:
        """Mark the first ACTIVE loan of ``item_id`` as RETURNED.

        Returns the updated record, or None when no ACTIVE loan exists (the
        file is left untouched). Raises StorageError, after logging, when the
        file cannot be read or rewritten. Other lines are written back as-is.
        """
        try:
            lines = self._read_lines()
        except (OSError, UnicodeDecodeError) as e:
            self.error_log.error(f"Failed to update borrowed: {e}")
            raise StorageError(f"Could not read {self.path}: {e}") from e

        returned: Optional[LoanRecord] = None
        for index, line in enumerate(lines):
            record = self._parse(line, index + 1)
            if record is None or record.item_id != item_id or not record.is_active:
                continue
            record.status = LoanStatus.RETURNED
            lines[index] = _format_row(record.to_row())
            returned = record
            break

        if returned is None:
            return None

        try:
            with open(self.path, "w", newline="", encoding="utf-8") as f:
                f.writelines(line + "\n" for line in lines)
        except OSError as e:
            self.error_log.error(f"Failed to update borrowed: {e}")
            raise StorageError(f"Could not rewrite {self.path}: {e}") from e
        logger.info("Marked loan of item %s as returned", item_id)
        return returned

    # ------------------------- Queries ------------------------- #
    def records(self) -> List[LoanRecord]:
        """All parseable records in file order; an unreadable file yields []."""
        try:
            lines = self._read_lines()
        except (OSError, UnicodeDecodeError) as e:
            self.error_log.error(f"Failed to read borrowed: {e}")
            return []
        parsed = (self._parse(line, n) for n, line in enumerate(lines, 1))
        return [r for r in parsed if r is not None]

    def active_records(self) -> List[LoanRecord]:
        return [r for r in self.records() if r.is_active]

    def list_overdue(self, today: Optional[date] = None) -> List[Tuple[LoanRecord, int]]:
        """ACTIVE loans due strictly before ``today``, with days overdue."""
        today = today or date.today()
        return [
            (r, -r.days_until_due(today))
            for r in self.active_records()
            if r.is_overdue(today)
        ]

    def list_due_for_user(self, user_id: str, today: Optional[date] = None) -> List[Tuple[LoanRecord, int]]:
        """ACTIVE loans of ``user_id`` with the signed days left until due."""
        today = today or date.today()
        return [
            (r, r.days_until_due(today))
            for r in self.active_records()
            if r.user_id == user_id
        ]

    # ------------------------- Helpers ------------------------- #
    def _read_lines(self) -> List[str]:
        """Non-blank raw lines; each one is parsed on its own."""
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            return [line.rstrip("\n") for line in f if line.strip()]

    def _parse(self, line: str, line_number: int) -> Optional[LoanRecord]:
        try:
            return LoanRecord.from_row(next(csv.reader([line])))
        except (csv.Error, ValueError) as e:
            self.error_log.error(f"Malformed borrowed record at line {line_number}: {e}")
            return None


def _format_row(row: List[str]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="").writerow(row)
    return buf.getvalue()
