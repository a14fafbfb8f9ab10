from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from .row_data import Cell, Row
from .workbook import Sheet, Workbook

"""Validator variants for the workbook rule engine.

Every variant exposes the same single capability, `validate(target) -> bool`,
wrapping a user supplied `check` callable. Row and cell variants also carry a
rule key, a sheet index and the keys they depend on; `resolve(row)` returns
what `check` receives (the whole row, or the matched cell).
"""

__all__ = [
    "CellValidator",
    "RowValidator",
    "SheetValidator",
    "WorkbookValidator",
]


def _freeze_keys(keys: Iterable[str] | str | None) -> frozenset[str]:
    if keys is None:
        return frozenset()
    if isinstance(keys, str):
        return frozenset({keys})
    return frozenset(keys)


@dataclass(frozen=True)
class WorkbookValidator:
    """Workbook-level check. Any failure stops the session."""
    key: str
    check: Callable[[Workbook], bool]
    message: str | None = None

    def validate(self, workbook: Workbook) -> bool:
        return bool(self.check(workbook))

    def describe(self) -> str:
        return self.message or f"workbook rule '{self.key}' failed"


@dataclass(frozen=True)
class SheetValidator:
    """Sheet-level check. `sheet_index=None` applies it to every sheet."""
    key: str
    check: Callable[[Sheet], bool]
    message: str | None = None
    sheet_index: int | None = None

    def applies_to(self, sheet_index: int) -> bool:
        return self.sheet_index is None or self.sheet_index == sheet_index

    def validate(self, sheet: Sheet) -> bool:
        return bool(self.check(sheet))

    def describe(self) -> str:
        return self.message or f"sheet rule '{self.key}' failed"


@dataclass(frozen=True)
class RowValidator:
    """Rule over a whole row, registered under `key` on one sheet."""
    key: str
    sheet_index: int
    check: Callable[[Row], bool]
    depends_on: frozenset[str] = field(default_factory=frozenset)
    message: str | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("validator key must be a non-empty string")
        object.__setattr__(self, "depends_on", _freeze_keys(self.depends_on))

    def resolve(self, row: Row) -> Any:
        return row

    def validate(self, target: Any) -> bool:
        return bool(self.check(target))

    def describe(self) -> str:
        return self.message or f"rule '{self.key}' failed"


@dataclass(frozen=True)
class CellValidator:
    """Rule over one cell of a row, addressed by `match_field`."""
    key: str
    sheet_index: int
    match_field: str
    check: Callable[[Cell], bool]
    depends_on: frozenset[str] = field(default_factory=frozenset)
    message: str | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("validator key must be a non-empty string")
        object.__setattr__(self, "depends_on", _freeze_keys(self.depends_on))

    def resolve(self, row: Row) -> Cell:
        return row.cell(self.match_field)

    def validate(self, target: Any) -> bool:
        return bool(self.check(target))

    def describe(self) -> str:
        return self.message or f"rule '{self.key}' failed on field '{self.match_field}'"
