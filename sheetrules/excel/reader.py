from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from sheetrules.models.row_data import Row
from sheetrules.models.workbook import Sheet, Workbook

"""Excel reader: .xlsx -> Workbook model.

- Row `header_row` (1-based) supplies the column names; later rows are data
- Fully empty rows are dropped
- NaN -> None, strings stripped, empty strings -> None
- Row.index is the 0-based data row position, Row.number the 1-based sheet row
"""

__all__ = [
    "ReaderError",
    "SheetHeaderError",
    "normalize_sheet",
    "read_excel_file",
    "read_workbook",
]


class ReaderError(Exception):
    """Raised when the workbook file cannot be opened or parsed."""


class SheetHeaderError(ReaderError):
    """Raised when the header row is missing or empty."""


def read_excel_file(path: Path, keep_na_strings: list[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read every sheet of an Excel file without header, keyed by sheet name (physical order).

    Parameters
    ----------
    path: Excel file path
    keep_na_strings: strings that must stay strings instead of pandas' default NaN conversion (e.g. ['NA'])
    """
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        na_values = list(parsers.STR_NA_VALUES - set(keep_na_strings))
        keep_default_na = False
    else:
        na_values = None
        keep_default_na = True

    if not path.exists():
        raise ReaderError(f"workbook not found: {path}")
    try:
        xls = pd.ExcelFile(path)
        return {
            str(name): xls.parse(name, header=None, keep_default_na=keep_default_na, na_values=na_values)
            for name in xls.sheet_names
        }
    except (ValueError, OSError) as e:
        raise ReaderError(f"cannot read workbook {path.name}: {e}") from e


def _normalize_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return None if stripped == "" else stripped
    if pd.isna(value):
        return None
    return value


def normalize_sheet(df: pd.DataFrame, index: int, name: str, header_row: int = 1) -> Sheet:
    """Turn a raw header-less DataFrame into a Sheet.

    Raises:
        SheetHeaderError: the sheet has fewer than `header_row` rows or the header is empty
    """
    header_pos = header_row - 1
    if df.shape[0] <= header_pos:
        raise SheetHeaderError(f"sheet '{name}' lacks header row {header_row}")

    columns = [
        "" if pd.isna(c) else str(c).strip()
        for c in df.iloc[header_pos].tolist()
    ]
    if not any(columns):
        raise SheetHeaderError(f"sheet '{name}' has an empty header row {header_row}")

    rows: list[Row] = []
    data_part = df.iloc[header_pos + 1:]
    for offset, (_, raw) in enumerate(data_part.iterrows()):
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if not col:  # unnamed column
                continue
            values[col] = _normalize_value(val)
        if all(v is None for v in values.values()):
            continue
        rows.append(Row(index=len(rows), values=values, number=header_row + 1 + offset))

    return Sheet(index=index, name=name, rows=rows, columns=[c for c in columns if c])


def read_workbook(path: Path, *, header_row: int = 1, keep_na_strings: list[str] | None = None) -> Workbook:
    """Read an .xlsx file into a Workbook; sheets keep their physical order."""
    raw_sheets = read_excel_file(path, keep_na_strings=keep_na_strings)
    sheets = [
        normalize_sheet(df, index, name, header_row=header_row)
        for index, (name, df) in enumerate(raw_sheets.items())
    ]
    return Workbook(sheets=sheets, name=path.name)
