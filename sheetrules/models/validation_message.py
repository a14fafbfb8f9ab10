from __future__ import annotations

import json
from dataclasses import asdict, dataclass

"""ValidationMessage model.

A ValidationMessage is produced for every recorded failure: a workbook
validator returning False, a sheet validator returning False, a rule key whose
outcome for a row is FAIL, or (with the skip_row policy) a validator that
raised. It is the unit written to the JSON Lines message log.
"""

__all__ = [
    "MessageLevel",
    "ValidationMessage",
]


class MessageLevel:
    """Origin of a message. Plain string constants keep the JSON output flat."""
    WORKBOOK = "workbook"
    SHEET = "sheet"
    ROW = "row"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationMessage:
    """Structured validation failure.

    Attributes:
        sheet_index: Sheet the failure belongs to. None for workbook-level failures
        row_index: 0-based data row index. None for workbook- and sheet-level failures
        key: Rule key (validator key for workbook/sheet validators)
        text: Human readable description
        level: One of MessageLevel values
    """
    sheet_index: int | None
    row_index: int | None
    key: str
    text: str
    level: str = MessageLevel.ROW

    @staticmethod
    def for_workbook(key: str, text: str) -> ValidationMessage:
        return ValidationMessage(None, None, key, text, MessageLevel.WORKBOOK)

    @staticmethod
    def for_sheet(sheet_index: int, key: str, text: str) -> ValidationMessage:
        return ValidationMessage(sheet_index, None, key, text, MessageLevel.SHEET)

    @staticmethod
    def for_row(sheet_index: int, row_index: int, key: str, text: str) -> ValidationMessage:
        return ValidationMessage(sheet_index, row_index, key, text, MessageLevel.ROW)

    def location(self) -> str:
        """Short location label used in console output, e.g. `sheet=0 row=3`."""
        if self.sheet_index is None:
            return "workbook"
        if self.row_index is None:
            return f"sheet={self.sheet_index}"
        return f"sheet={self.sheet_index} row={self.row_index}"

    def to_json_line(self) -> str:
        """Serialize to one JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False, default=str)
