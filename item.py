from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Type, Union


class CatalogItem(ABC):
    """Fields shared by every lendable item in the catalog."""

    type_name = ""

    def __init__(self, item_id: int, title: str, author: str, available: bool = True) -> None:
        self.item_id = int(item_id)
        self.title = title
        self.author = author
        self.available = bool(available)

    @property
    @abstractmethod
    def extra(self) -> str:
        """The variant-specific column: page count, duration or issue number."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogItem):
            return NotImplemented
        return type(self) is type(other) and self.to_row() == other.to_row()

    def to_row(self) -> List[str]:
        """Columns in catalog file order: ID, Type, Title, Author, Availability, Extra."""
        return [
            str(self.item_id),
            self.type_name,
            self.title,
            self.author,
            "true" if self.available else "false",
            self.extra,
        ]

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "type": self.type_name,
            "title": self.title,
            "author": self.author,
            "available": self.available,
            "extra": self.extra,
        }


class Book(CatalogItem):
    type_name = "Book"

    def __init__(self, item_id: int, title: str, author: str, page_count: int, available: bool = True) -> None:
        super().__init__(item_id, title, author, available)
        self.page_count = int(page_count)

    @property
    def extra(self) -> str:
        return str(self.page_count)


class Audiobook(CatalogItem):
    type_name = "Audiobook"

    def __init__(self, item_id: int, title: str, author: str, duration: str, available: bool = True) -> None:
        super().__init__(item_id, title, author, available)
        self.duration = duration

    @property
    def extra(self) -> str:
        return self.duration

    def play(self) -> str:
        """Describe the playback; no audio is involved."""
        return f"Playing audiobook: {self.title} by {self.author} ({self.duration})"


class EMagazine(CatalogItem):
    type_name = "EMagazine"

    def __init__(self, item_id: int, title: str, author: str, issue_number: str, available: bool = True) -> None:
        super().__init__(item_id, title, author, available)
        self.issue_number = issue_number

    @property
    def extra(self) -> str:
        return self.issue_number


Item = Union[Book, Audiobook, EMagazine]

ITEM_TYPES: Dict[str, Type[CatalogItem]] = {
    Book.type_name: Book,
    Audiobook.type_name: Audiobook,
    EMagazine.type_name: EMagazine,
}

CATALOG_HEADER = ["ID", "Type", "Title", "Author", "Availability", "Extra"]


def make_item(type_name: str, item_id: int, title: str, author: str, extra: str, available: bool = True) -> Item:
    """Build the variant named by ``type_name``; raises ValueError for bad input."""
    cls = ITEM_TYPES.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown item type: {type_name}")
    if cls is Book:
        return Book(item_id, title, author, int(extra), available)
    return cls(item_id, title, author, extra, available)


def item_from_row(row: List[str]) -> Item:
    """Parse one catalog row. Availability follows ``true`` (any case) / anything else."""
    if len(row) != len(CATALOG_HEADER):
        raise ValueError(f"expected {len(CATALOG_HEADER)} columns, got {len(row)}")
    raw_id, type_name, title, author, availability, extra = row
    return make_item(
        type_name.strip(),
        int(raw_id),
        title,
        author,
        extra,
        available=availability.strip().lower() == "true",
    )
