# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from sheetrules.logging.init import reset_logging
from sheetrules.models import Row, Sheet, Workbook


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # the console handler binds sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """settings:
  workers: 1
  sheet_failure: stop_session
  validator_errors: raise
  show_progress: false
excel:
  header_row: 1
workbook_rules:
  - key: HasSheets
    type: min_sheets
    params: {count: 1}
sheets:
  - index: 0
    sheet_rules:
      - key: Columns
        type: required_columns
        params: {columns: [name, amount]}
    rules:
      - key: Required
        type: required
        field: amount
        message: amount is required
      - key: Range
        type: number_range
        field: amount
        params: {min: 0, max: 100}
        depends_on: [Required]
        message: amount must be between 0 and 100
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "rules.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_excel() -> Callable[[Path, str, dict[str, list[list[object]]]], Path]:
    """Write a real .xlsx with header-less rows per sheet."""
    def _make(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
        p = directory / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return p
    return _make


@pytest.fixture()
def amounts_workbook() -> Workbook:
    """One sheet, row 0 without amount, row 1 with an in-range amount."""
    rows = [
        Row(index=0, values={"name": "Alice", "amount": None}),
        Row(index=1, values={"name": "Bob", "amount": 42}),
    ]
    return Workbook(sheets=[Sheet(index=0, name="Amounts", rows=rows, columns=["name", "amount"])], name="amounts.xlsx")
