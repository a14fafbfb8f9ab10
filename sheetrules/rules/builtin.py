from __future__ import annotations

import math
import operator
import re
from collections.abc import Callable, Iterable
from numbers import Number
from typing import Any

from sheetrules.models.row_data import Cell, Row
from sheetrules.models.workbook import Sheet, Workbook

"""Built-in check factories.

Each factory returns the `check` callable of a validator. Blank values (None)
pass every cell and row check except `required` / `all_required`, so presence
and format are separate rules chained with depends_on.
"""

__all__ = [
    "all_required",
    "field_compare",
    "is_number",
    "max_length",
    "min_rows",
    "min_sheets",
    "number_range",
    "one_of",
    "pattern",
    "required",
    "required_columns",
    "required_sheets",
]

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "==": operator.eq,
    "!=": operator.ne,
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return isinstance(value, float) and math.isnan(value)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Number):
        number = float(value)  # type: ignore[arg-type]
        return None if math.isnan(number) else number
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


# cell checks ------------------------------------------------------------

def required() -> Callable[[Cell], bool]:
    return lambda cell: not _is_blank(cell.value)


def is_number() -> Callable[[Cell], bool]:
    return lambda cell: _is_blank(cell.value) or _as_number(cell.value) is not None


def number_range(min: float | None = None, max: float | None = None) -> Callable[[Cell], bool]:
    """Inclusive range; either bound may be omitted. Non-numbers fail."""
    if min is not None and max is not None and min > max:
        raise ValueError(f"number_range min {min} is greater than max {max}")

    def check(cell: Cell) -> bool:
        if _is_blank(cell.value):
            return True
        number = _as_number(cell.value)
        if number is None:
            return False
        if min is not None and number < min:
            return False
        return max is None or number <= max

    return check


def pattern(regex: str) -> Callable[[Cell], bool]:
    compiled = re.compile(regex)
    return lambda cell: _is_blank(cell.value) or compiled.fullmatch(str(cell.value)) is not None


def one_of(values: Iterable[Any]) -> Callable[[Cell], bool]:
    allowed = list(values)
    allowed_text = {str(v) for v in allowed}
    return lambda cell: _is_blank(cell.value) or cell.value in allowed or str(cell.value) in allowed_text


def max_length(length: int) -> Callable[[Cell], bool]:
    return lambda cell: _is_blank(cell.value) or len(str(cell.value)) <= length


# row checks -------------------------------------------------------------

def all_required(fields: Iterable[str]) -> Callable[[Row], bool]:
    names = list(fields)
    return lambda row: all(not _is_blank(row.get(name)) for name in names)


def field_compare(left: str, op: str, right: str) -> Callable[[Row], bool]:
    """Compare two fields of a row, e.g. start <= end. Blank operands pass."""
    if op not in _COMPARATORS:
        raise ValueError(f"unknown comparison operator: {op}")
    compare = _COMPARATORS[op]

    def check(row: Row) -> bool:
        a, b = row.get(left), row.get(right)
        if _is_blank(a) or _is_blank(b):
            return True
        na, nb = _as_number(a), _as_number(b)
        if na is not None and nb is not None:
            a, b = na, nb
        try:
            return bool(compare(a, b))
        except TypeError:
            return False

    return check


# sheet / workbook checks ------------------------------------------------

def required_columns(columns: Iterable[str]) -> Callable[[Sheet], bool]:
    expected = set(columns)
    return lambda sheet: expected <= set(sheet.columns)


def min_rows(count: int) -> Callable[[Sheet], bool]:
    return lambda sheet: sheet.row_count >= count


def min_sheets(count: int) -> Callable[[Workbook], bool]:
    return lambda workbook: len(workbook.sheets) >= count


def required_sheets(names: Iterable[str]) -> Callable[[Workbook], bool]:
    expected = set(names)
    return lambda workbook: expected <= set(workbook.sheet_names)
