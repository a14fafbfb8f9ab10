"""Domain models for the workbook rule engine.

This package contains the data model walked by a validation session
(workbook, sheet, row, cell), the validator variants, outcomes, messages and
configuration types.
"""

from .config_models import ExcelSettings, RuleConfig, RulesConfig, SessionSettings, SheetRulesConfig
from .outcome import Outcome
from .row_data import Cell, Row
from .session_result import SessionResult, SheetStat, SheetStatus
from .validation_message import MessageLevel, ValidationMessage
from .validators import CellValidator, RowValidator, SheetValidator, WorkbookValidator
from .workbook import Sheet, Workbook

__all__ = [
    # Configuration models
    "ExcelSettings",
    "RuleConfig",
    "RulesConfig",
    "SessionSettings",
    "SheetRulesConfig",
    # Data models
    "Cell",
    "Row",
    "Sheet",
    "Workbook",
    # Validators
    "CellValidator",
    "RowValidator",
    "SheetValidator",
    "WorkbookValidator",
    # Results
    "MessageLevel",
    "Outcome",
    "SessionResult",
    "SheetStat",
    "SheetStatus",
    "ValidationMessage",
]
