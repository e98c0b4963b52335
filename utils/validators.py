import re
from typing import Optional

from item import ITEM_TYPES


class ItemTypeValidator:
    """Maps user-typed item types onto the catalog's type names."""

    @staticmethod
    def normalize_type(raw: Optional[str]) -> Optional[str]:
        """'book', ' AUDIOBOOK ' and 'EMagazine' all resolve; anything else is None."""
        if raw is None:
            return None
        wanted = raw.strip().lower()
        for name in ITEM_TYPES:
            if name.lower() == wanted:
                return name
        return None


class TextValidator:
    """Basic checks for free text typed into the catalog."""

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        if title is None:
            return False
        return bool(title.strip())

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        # must not be digits only
        if author is None:
            return False
        t = author.strip()
        if not t:
            return False
        return not t.isdigit()

    @staticmethod
    def sanitize_text(text: Optional[str]) -> str:
        """Collapse line breaks so a value always stays on one catalog row."""
        if text is None:
            return ""
        return re.sub(r"[\r\n]+", " ", text).strip()


class NumberValidator:
    @staticmethod
    def validate_page_count(raw: str) -> bool:
        try:
            return int(str(raw).strip()) > 0
        except ValueError:
            return False

    @staticmethod
    def validate_extra(type_name: str, extra: Optional[str]) -> bool:
        """Book needs a page count; the other types need any non-empty text."""
        if extra is None or not extra.strip():
            return False
        if type_name == "Book":
            return NumberValidator.validate_page_count(extra)
        return True
