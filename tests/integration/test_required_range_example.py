from __future__ import annotations

from pathlib import Path

from sheetrules.config.loader import load_config
from sheetrules.engine.registry import ValidatorRegistry
from sheetrules.excel.reader import read_workbook
from sheetrules.models import CellValidator, Outcome, SessionSettings, ValidationMessage
from sheetrules.rules import builtin
from sheetrules.rules.factory import build_registry
from sheetrules.services.listener import SessionListener
from sheetrules.services.session import ValidationSession

"""Integration: amount Required, then Range only when Required passed.

Row 0 lacks an amount: Required fails and Range is skipped, so exactly one
message is recorded. Row 1 is in range and produces nothing.
"""


class _Recorder(SessionListener):
    def __init__(self) -> None:
        self.evaluations = {}

    def after_row(self, sheet, row, evaluation):
        self.evaluations[(sheet.index, row.index)] = evaluation


def _registry() -> ValidatorRegistry:
    registry = ValidatorRegistry()
    registry.register_cell_validator(
        CellValidator("Required", 0, "amount", builtin.required(), message="amount is required"),
        CellValidator(
            "Range", 0, "amount", builtin.number_range(0, 100),
            depends_on=frozenset({"Required"}), message="amount must be between 0 and 100",
        ),
    )
    return registry


def _assert_example_outcome(session: ValidationSession, recorder: _Recorder, passed: bool) -> None:
    assert passed is False
    assert session.messages == [ValidationMessage.for_row(0, 0, "Required", "amount is required")]

    first = recorder.evaluations[(0, 0)]
    assert first.outcomes == {"Required": Outcome.FAIL, "Range": Outcome.SKIPPED}

    second = recorder.evaluations[(0, 1)]
    assert second.outcomes == {"Required": Outcome.PASS, "Range": Outcome.PASS}
    assert second.passed


def test_in_memory_workbook(amounts_workbook):
    recorder = _Recorder()
    session = ValidationSession(_registry(), SessionSettings(show_progress=False), recorder)

    passed = session.run(amounts_workbook)

    _assert_example_outcome(session, recorder, passed)
    stat = session.result.sheet_stats[0]
    assert (stat.rows_evaluated, stat.failed_rows, stat.skipped_rules) == (2, 1, 1)


def test_in_memory_workbook_on_worker_pool(amounts_workbook):
    recorder = _Recorder()
    session = ValidationSession(_registry(), SessionSettings(workers=4, show_progress=False), recorder)

    passed = session.run(amounts_workbook)

    _assert_example_outcome(session, recorder, passed)


def test_from_config_and_xlsx(temp_workdir: Path, write_config, make_excel):
    book = make_excel(
        temp_workdir / "data", "amounts.xlsx",
        {"Amounts": [["name", "amount"], ["Alice", None], ["Bob", 42]]},
    )
    cfg = load_config(write_config)
    workbook = read_workbook(book, header_row=cfg.excel.header_row)
    recorder = _Recorder()
    session = ValidationSession(build_registry(cfg), cfg.settings, recorder)

    passed = session.run(workbook)

    _assert_example_outcome(session, recorder, passed)
