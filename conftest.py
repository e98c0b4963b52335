import pytest

from library import Library
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # set_output_mode writes to os.environ; keep each test on plain output
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def paths(tmp_path):
    return {
        "inventory_file": str(tmp_path / "inventory.txt"),
        "borrowed_file": str(tmp_path / "borrowed.txt"),
        "error_log_file": str(tmp_path / "errors.log"),
    }


@pytest.fixture
def lib(paths):
    # Each test gets its own catalog, ledger and error log files
    lib = Library(**paths, loan_days=7, reject_duplicate_ids=False)
    yield lib
    lib.close()
