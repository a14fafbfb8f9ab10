from __future__ import annotations

from sheetrules.engine.registry import ValidatorRegistry
from sheetrules.models import CellValidator, RowValidator, SheetValidator, WorkbookValidator


def _true(_):
    return True


def test_register_no_validators_is_noop():
    registry = ValidatorRegistry()
    registry.register_workbook_validator()
    registry.register_sheet_validator()
    registry.register_row_validator()
    registry.register_cell_validator(None)

    assert len(registry) == 0
    assert registry.workbook_validators == []
    assert registry.validators_for(0) == {}


def test_validators_sharing_a_key_keep_registration_order():
    first = RowValidator(key="K", sheet_index=0, check=_true)
    second = CellValidator(key="K", sheet_index=0, match_field="f", check=_true)
    third = RowValidator(key="K", sheet_index=0, check=_true)
    registry = ValidatorRegistry()
    registry.register_row_validator(first)
    registry.register_cell_validator(second)
    registry.register_row_validator(third)

    assert registry.validators_by_key(0, "K") == [first, second, third]


def test_keys_are_partitioned_by_sheet():
    registry = ValidatorRegistry()
    registry.register_row_validator(
        RowValidator(key="A", sheet_index=0, check=_true),
        RowValidator(key="A", sheet_index=1, check=_true),
        RowValidator(key="B", sheet_index=0, check=_true),
    )

    assert registry.keys_for(0) == ["A", "B"]
    assert registry.keys_for(1) == ["A"]
    assert registry.keys_for(2) == []
    assert registry.sheet_indexes() == {0, 1}
    assert set(registry.validators_for(0)) == {"A", "B"}


def test_sheet_validators_scoped_by_index():
    everywhere = SheetValidator(key="all", check=_true)
    only_one = SheetValidator(key="one", check=_true, sheet_index=1)
    registry = ValidatorRegistry()
    registry.register_sheet_validator(everywhere, only_one)

    assert registry.sheet_validators_for(0) == [everywhere]
    assert registry.sheet_validators_for(1) == [everywhere, only_one]


def test_workbook_validators_returned_as_copy():
    registry = ValidatorRegistry()
    registry.register_workbook_validator(WorkbookValidator(key="w", check=_true))

    registry.workbook_validators.clear()

    assert len(registry.workbook_validators) == 1
    assert len(registry) == 1
