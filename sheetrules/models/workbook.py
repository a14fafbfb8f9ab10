from __future__ import annotations

from dataclasses import dataclass, field

from .row_data import Row

"""Sheet and Workbook models for the workbook rule engine.

These are the read-only collaborators the validation session walks:
Workbook -> ordered sheets -> ordered rows.
"""

__all__ = [
    "Sheet",
    "Workbook",
]


@dataclass(frozen=True)
class Sheet:
    """One worksheet (FR: sheets are processed in physical order).

    `index` is the 0-based physical position and is the value row and cell
    validators are registered against.
    """
    index: int
    name: str
    rows: list[Row] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)  # header names in sheet order

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Workbook:
    """Ordered collection of sheets, optionally named after its source file."""
    sheets: list[Sheet] = field(default_factory=list)
    name: str | None = None

    def sheet(self, index: int) -> Sheet:
        for s in self.sheets:
            if s.index == index:
                return s
        raise KeyError(f"no sheet with index {index}")

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]
