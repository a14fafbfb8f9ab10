from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Row and Cell models for the workbook rule engine.

A Row is one data row of a sheet after reading and normalization. Cells are
materialized on demand through Row.cell() so cell validators always receive a
Cell, even for a column the sheet does not have.
"""

__all__ = [
    "Cell",
    "Row",
]


@dataclass(frozen=True)
class Cell:
    """Single value addressed by field (column) name."""
    field: str
    value: Any = None

    @property
    def is_blank(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class Row:
    """Logical representation of a single data row.

    `index` is the 0-based position among the sheet's data rows and is what
    validation messages report. `number` is the physical 1-based sheet row when
    the row came from a file (None for rows built in memory).
    """
    index: int
    values: dict[str, Any]  # field name -> normalized value
    number: int | None = None

    def cell(self, field: str) -> Cell:
        """Return the cell for `field`; an absent field yields a blank cell."""
        return Cell(field=field, value=self.values.get(field))

    def get(self, field: str, default: Any = None) -> Any:
        return self.values.get(field, default)
