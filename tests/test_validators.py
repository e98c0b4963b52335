import pytest

from utils.validators import ItemTypeValidator, NumberValidator, TextValidator


@pytest.mark.parametrize("raw,expected", [
    ("Book", "Book"),
    (" audiobook ", "Audiobook"),
    ("EMAGAZINE", "EMagazine"),
    ("magazine", None),
    (None, None),
])
def test_normalize_type(raw, expected):
    assert ItemTypeValidator.normalize_type(raw) == expected


def test_title_and_author():
    assert TextValidator.validate_title("Dune")
    assert not TextValidator.validate_title("   ")
    assert TextValidator.validate_author("Frank Herbert")
    assert not TextValidator.validate_author("12345")
    assert not TextValidator.validate_author(None)


def test_sanitize_text_keeps_one_line():
    assert TextValidator.sanitize_text("  Two\r\nLines ") == "Two Lines"
    assert TextValidator.sanitize_text(None) == ""


def test_extra_validation():
    assert NumberValidator.validate_extra("Book", "200")
    assert not NumberValidator.validate_extra("Book", "0")
    assert not NumberValidator.validate_extra("Book", "two")
    assert NumberValidator.validate_extra("Audiobook", "15h30m")
    assert not NumberValidator.validate_extra("EMagazine", " ")
