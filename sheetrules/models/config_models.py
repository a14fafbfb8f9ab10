from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

"""Config dataclasses for the workbook rule engine.

These are the typed form of config/rules.yml produced by
sheetrules.config.loader.load_config() after schema validation.
"""

SHEET_FAILURE_STOP_SESSION = "stop_session"
SHEET_FAILURE_SKIP_SHEET = "skip_sheet"
VALIDATOR_ERRORS_RAISE = "raise"
VALIDATOR_ERRORS_SKIP_ROW = "skip_row"


@dataclass(frozen=True)
class SessionSettings:
    """Runtime policies of a ValidationSession.

    sheet_failure decides what a failed sheet validator does: stop the whole
    session (reference behaviour) or skip only that sheet's rows.
    validator_errors decides what an exception raised by validator code does:
    propagate to the caller, or record an error message and move to the next row.
    """
    workers: int = 1
    sheet_failure: str = SHEET_FAILURE_STOP_SESSION
    validator_errors: str = VALIDATOR_ERRORS_RAISE
    timeout_seconds: float | None = None
    show_progress: bool = True

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.sheet_failure not in (SHEET_FAILURE_STOP_SESSION, SHEET_FAILURE_SKIP_SHEET):
            raise ValueError(f"unknown sheet_failure policy: {self.sheet_failure}")
        if self.validator_errors not in (VALIDATOR_ERRORS_RAISE, VALIDATOR_ERRORS_SKIP_ROW):
            raise ValueError(f"unknown validator_errors policy: {self.validator_errors}")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")


@dataclass(frozen=True)
class ExcelSettings:
    """How .xlsx files are turned into the Workbook model."""
    header_row: int = 1  # 1-based sheet row holding column names
    keep_na_strings: list[str] = field(default_factory=list)  # strings pandas must not turn into NaN


@dataclass(frozen=True)
class RuleConfig:
    """One declared rule.

    For row-level rules `field` decides the validator variant: set -> cell
    validator on that field, unset -> row validator.
    """
    key: str
    type: str
    params: dict[str, Any] = dataclasses.field(default_factory=dict)
    # shadows dataclasses.field inside this class body
    field: str | None = None
    depends_on: list[str] = dataclasses.field(default_factory=list)
    message: str | None = None


@dataclass(frozen=True)
class SheetRulesConfig:
    """Rules declared for one sheet index."""
    index: int
    sheet_rules: list[RuleConfig] = field(default_factory=list)
    rules: list[RuleConfig] = field(default_factory=list)


@dataclass(frozen=True)
class RulesConfig:
    """Root configuration object."""
    settings: SessionSettings = field(default_factory=SessionSettings)
    excel: ExcelSettings = field(default_factory=ExcelSettings)
    workbook_rules: list[RuleConfig] = field(default_factory=list)
    sheets: list[SheetRulesConfig] = field(default_factory=list)
