from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .validation_message import ValidationMessage

"""Session result models.

SheetStat records what happened to each sheet and SessionResult aggregates
them together with the ordered message list for the SUMMARY output line.
"""


class SheetStatus(Enum):
    """Status of one sheet within a session.

    State transitions: pending -> (passed | failed | halted)

    - PENDING: Sheet not reached (session stopped earlier)
    - PASSED: Sheet and all its rows produced no messages
    - FAILED: Rows were evaluated and at least one produced a message
    - HALTED: A sheet validator failed, rows were not evaluated
    """
    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    HALTED = "halted"


@dataclass
class SheetStat:
    """Per-sheet evaluation statistics."""
    index: int
    name: str
    status: SheetStatus = SheetStatus.PENDING
    rows_evaluated: int = 0
    failed_rows: int = 0  # rows with at least one FAIL key
    skipped_rules: int = 0  # sum of SKIPPED outcomes across rows
    elapsed_seconds: float = 0.0


@dataclass(frozen=True)
class SessionResult:
    """Aggregated result of one ValidationSession.run()."""
    passed: bool
    messages: list[ValidationMessage]
    sheet_stats: list[SheetStat] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def total_rows(self) -> int:
        return sum(s.rows_evaluated for s in self.sheet_stats)

    @property
    def failed_rows(self) -> int:
        return sum(s.failed_rows for s in self.sheet_stats)

    @property
    def skipped_rules(self) -> int:
        return sum(s.skipped_rules for s in self.sheet_stats)

    @property
    def evaluated_sheets(self) -> int:
        return sum(1 for s in self.sheet_stats if s.status is not SheetStatus.PENDING)
