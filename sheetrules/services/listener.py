from __future__ import annotations

from ..engine.evaluator import RowEvaluation
from ..models.row_data import Row
from ..models.validation_message import ValidationMessage
from ..models.workbook import Sheet, Workbook

"""Lifecycle hooks of a validation session.

Subclass SessionListener and override the hooks you need; the session calls
them synchronously from its own thread (after_row is called in row order even
when rows are evaluated on a worker pool).
"""

__all__ = [
    "NoopSessionListener",
    "SessionListener",
]


class SessionListener:
    """Base listener; every hook is a no-op."""

    def before_workbook(self, workbook: Workbook) -> None:
        pass

    def before_sheet(self, sheet: Sheet) -> None:
        pass

    def after_row(self, sheet: Sheet, row: Row, evaluation: RowEvaluation) -> None:
        pass

    def after_row_error(self, sheet: Sheet, row: Row, error: Exception) -> None:
        """Called instead of after_row when validator code raised and the row was skipped."""

    def after_sheet(self, sheet: Sheet, messages: list[ValidationMessage]) -> None:
        """Called after a sheet with the messages that sheet produced."""

    def after_workbook(self, workbook: Workbook, passed: bool) -> None:
        pass


class NoopSessionListener(SessionListener):
    """Default listener used when none is given."""
