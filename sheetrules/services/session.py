from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

from ..engine.errors import ConfigurationError, SessionCancelledError
from ..engine.evaluator import RowEvaluation, RowEvaluator
from ..engine.graph import DependencyAuditor, build_dependency_map
from ..engine.registry import ValidatorRegistry
from ..models.config_models import SHEET_FAILURE_STOP_SESSION, VALIDATOR_ERRORS_RAISE, SessionSettings
from ..models.row_data import Row
from ..models.session_result import SessionResult, SheetStat, SheetStatus
from ..models.validation_message import MessageLevel, ValidationMessage
from ..models.workbook import Sheet, Workbook
from .listener import NoopSessionListener, SessionListener
from .progress import ProgressTracker, SheetProgressIndicator

logger = logging.getLogger(__name__)

"""Validation session orchestration.

This module drives one validation run over a workbook:
1. Workbook validators (any failure ends the run)
2. Per sheet, in physical order: dependency map build + audit, sheet validators
3. Per row, in physical order: RowEvaluator, FAIL keys recorded as messages

Audit and sheet validators complete before any row of the sheet is evaluated,
also when rows run on a worker pool.
"""

__all__ = [
    "VALIDATOR_ERROR_KEY",
    "ValidationSession",
]

# key of the message recorded for a row whose validator raised (skip_row policy)
VALIDATOR_ERROR_KEY = "<validator-error>"


class ValidationSession:
    """Runs the registered validators over a workbook and collects messages."""

    def __init__(
        self,
        registry: ValidatorRegistry,
        settings: SessionSettings | None = None,
        listener: SessionListener | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or SessionSettings()
        self.listener = listener or NoopSessionListener()
        self._messages: list[ValidationMessage] = []
        self._result: SessionResult | None = None

    @property
    def messages(self) -> list[ValidationMessage]:
        """Messages of the last run, in recording order."""
        return list(self._messages)

    @property
    def result(self) -> SessionResult | None:
        return self._result

    def run(
        self,
        workbook: Workbook | None,
        *,
        deadline: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bool:
        """Validate `workbook`; True when no message was recorded.

        Args:
            workbook: Workbook to validate
            deadline: Absolute time.monotonic() value after which the run is cancelled.
                Defaults to now + settings.timeout_seconds when that is set
            cancel_event: Cancels the run once set

        Raises:
            ConfigurationError: workbook is None, or a sheet's dependency declarations
                are missing a key or cyclic
            SessionCancelledError: deadline passed or cancel_event set
        """
        if workbook is None:
            raise ConfigurationError("workbook is null")

        start = time.monotonic()
        if deadline is None and self.settings.timeout_seconds is not None:
            deadline = start + self.settings.timeout_seconds

        self._messages = []
        self._result = None
        stats = [SheetStat(index=s.index, name=s.name) for s in workbook.sheets]
        self.listener.before_workbook(workbook)

        if self._run_workbook_validators(workbook):
            indicator = SheetProgressIndicator(
                workbook.name or "<workbook>",
                len(workbook.sheets),
                enabled=self.settings.show_progress,
            )
            for sheet, stat in zip(workbook.sheets, stats):
                self._check_cancelled(deadline, cancel_event)
                indicator.start_sheet(sheet.name)
                sheet_start = time.monotonic()
                self._process_sheet(sheet, stat, deadline, cancel_event)
                stat.elapsed_seconds = time.monotonic() - sheet_start
                indicator.finish_sheet(
                    success=stat.status is SheetStatus.PASSED,
                    rows_evaluated=stat.rows_evaluated,
                )
                if stat.status is SheetStatus.HALTED and self.settings.sheet_failure == SHEET_FAILURE_STOP_SESSION:
                    logger.warning(f"sheet {sheet.index} ({sheet.name}) failed sheet rules; stopping session")
                    break

        passed = not self._messages
        self._result = SessionResult(
            passed=passed,
            messages=list(self._messages),
            sheet_stats=stats,
            elapsed_seconds=time.monotonic() - start,
        )
        self.listener.after_workbook(workbook, passed)
        return passed

    # workbook / sheet level ------------------------------------------

    def _run_workbook_validators(self, workbook: Workbook) -> bool:
        ok = True
        for validator in self.registry.workbook_validators:
            if not validator.validate(workbook):
                ok = False
                self._messages.append(ValidationMessage.for_workbook(validator.key, validator.describe()))
        if not ok:
            logger.warning(f"workbook rules failed for {workbook.name or '<workbook>'}; sheets not evaluated")
        return ok

    def _run_sheet_validators(self, sheet: Sheet) -> bool:
        ok = True
        for validator in self.registry.sheet_validators_for(sheet.index):
            if not validator.validate(sheet):
                ok = False
                self._messages.append(ValidationMessage.for_sheet(sheet.index, validator.key, validator.describe()))
        return ok

    def _process_sheet(
        self,
        sheet: Sheet,
        stat: SheetStat,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> None:
        graph = build_dependency_map(self.registry, sheet.index)
        order = DependencyAuditor(sheet.index).audit(graph)
        logger.debug(f"sheet {sheet.index} evaluation order: {order}")

        first_message = len(self._messages)
        self.listener.before_sheet(sheet)
        logger.info(f"sheet {sheet.index} ({sheet.name}): {sheet.row_count} rows, {len(graph)} rules")

        if not self._run_sheet_validators(sheet):
            stat.status = SheetStatus.HALTED
            logger.warning(f"sheet {sheet.index} ({sheet.name}) failed sheet rules; rows not evaluated")
            self.listener.after_sheet(sheet, self._messages[first_message:])
            return

        evaluator = RowEvaluator(graph, self.registry.validators_for(sheet.index), order)
        keys = evaluator.keys
        with ProgressTracker(
            sheet.row_count,
            description=f"Sheet {sheet.index}",
            enabled=self.settings.show_progress,
        ) as progress:
            for row, evaluation in self._evaluate_rows(sheet, evaluator, deadline, cancel_event):
                stat.rows_evaluated += 1
                progress.advance()
                if isinstance(evaluation, Exception):
                    error = evaluation
                    stat.failed_rows += 1
                    self._messages.append(
                        ValidationMessage(
                            sheet.index,
                            row.index,
                            VALIDATOR_ERROR_KEY,
                            f"{type(error).__name__}: {error}",
                            MessageLevel.ERROR,
                        )
                    )
                    self.listener.after_row_error(sheet, row, error)
                    continue
                stat.skipped_rules += evaluation.skipped_count
                failed = evaluation.failed_keys(keys)
                if failed:
                    stat.failed_rows += 1
                for key in failed:
                    self._messages.append(
                        ValidationMessage.for_row(sheet.index, row.index, key, self._describe_failure(evaluation, key))
                    )
                self.listener.after_row(sheet, row, evaluation)
            progress.set_postfix(failed=stat.failed_rows)

        sheet_messages = self._messages[first_message:]
        stat.status = SheetStatus.FAILED if sheet_messages else SheetStatus.PASSED
        logger.info(
            f"sheet {sheet.index} ({sheet.name}) done: rows={stat.rows_evaluated} "
            f"failed_rows={stat.failed_rows} skipped_rules={stat.skipped_rules}"
        )
        self.listener.after_sheet(sheet, sheet_messages)

    # rows ---------------------------------------------------------------

    def _evaluate_rows(
        self,
        sheet: Sheet,
        evaluator: RowEvaluator,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> Iterator[tuple[Row, RowEvaluation | Exception]]:
        """Yield (row, evaluation or the exception its validators raised) in row order.

        Rows run serially, or on a worker pool when more than one worker is configured.
        """
        if self.settings.workers == 1 or len(sheet.rows) < 2:
            for row in sheet.rows:
                yield row, self._evaluate_row(evaluator, row, deadline, cancel_event)
            return

        with ThreadPoolExecutor(max_workers=self.settings.workers, thread_name_prefix="sheetrules") as pool:
            futures = [
                pool.submit(self._evaluate_row, evaluator, row, deadline, cancel_event)
                for row in sheet.rows
            ]
            try:
                for row, future in zip(sheet.rows, futures):
                    yield row, future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _evaluate_row(
        self,
        evaluator: RowEvaluator,
        row: Row,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> RowEvaluation | Exception:
        self._check_cancelled(deadline, cancel_event)
        try:
            return evaluator.evaluate(row)
        except Exception as e:
            if self.settings.validator_errors == VALIDATOR_ERRORS_RAISE:
                raise
            logger.warning(f"row {row.index}: validator raised {type(e).__name__}: {e}; row skipped")
            return e

    @staticmethod
    def _describe_failure(evaluation: RowEvaluation, key: str) -> str:
        validator = evaluation.first_failure(key)
        text = validator.describe() if validator is not None else f"rule '{key}' failed"
        if key in evaluation.disagreements:
            text += " (validators disagree)"
        return text

    @staticmethod
    def _check_cancelled(deadline: float | None, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise SessionCancelledError("validation session cancelled")
        if deadline is not None and time.monotonic() > deadline:
            raise SessionCancelledError("validation session deadline exceeded")
