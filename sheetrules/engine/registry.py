from __future__ import annotations

from collections.abc import Iterable

from ..models.validators import CellValidator, RowValidator, SheetValidator, WorkbookValidator

"""Validator registry.

Workbook and sheet validators are kept as plain ordered lists. Row and cell
validators share one namespace per sheet and are stored under the composite
key (sheet_index, rule_key), keeping registration order both across keys and
within one key.
"""

__all__ = [
    "RelationValidator",
    "ValidatorRegistry",
]

RelationValidator = RowValidator | CellValidator


class ValidatorRegistry:
    """Holds every validator a session runs."""

    def __init__(self) -> None:
        self._workbook_validators: list[WorkbookValidator] = []
        self._sheet_validators: list[SheetValidator] = []
        # dict preserves first-registration order of (sheet_index, key)
        self._relation_validators: dict[tuple[int, str], list[RelationValidator]] = {}

    # registration -----------------------------------------------------

    def register_workbook_validator(self, *validators: WorkbookValidator | None) -> None:
        self._workbook_validators.extend(v for v in validators if v is not None)

    def register_sheet_validator(self, *validators: SheetValidator | None) -> None:
        self._sheet_validators.extend(v for v in validators if v is not None)

    def register_row_validator(self, *validators: RowValidator | None) -> None:
        self._add_relation(validators)

    def register_cell_validator(self, *validators: CellValidator | None) -> None:
        self._add_relation(validators)

    def _add_relation(self, validators: Iterable[RelationValidator | None]) -> None:
        for validator in validators:
            if validator is None:
                continue
            slot = (validator.sheet_index, validator.key)
            self._relation_validators.setdefault(slot, []).append(validator)

    # queries ----------------------------------------------------------

    @property
    def workbook_validators(self) -> list[WorkbookValidator]:
        return list(self._workbook_validators)

    def sheet_validators_for(self, sheet_index: int) -> list[SheetValidator]:
        return [v for v in self._sheet_validators if v.applies_to(sheet_index)]

    def keys_for(self, sheet_index: int) -> list[str]:
        """Rule keys registered on a sheet, in first-registration order."""
        return [key for (index, key) in self._relation_validators if index == sheet_index]

    def validators_by_key(self, sheet_index: int, key: str) -> list[RelationValidator]:
        return list(self._relation_validators.get((sheet_index, key), []))

    def validators_for(self, sheet_index: int) -> dict[str, list[RelationValidator]]:
        """key -> validators for one sheet (row and cell validators unioned)."""
        return {
            key: list(validators)
            for (index, key), validators in self._relation_validators.items()
            if index == sheet_index
        }

    def sheet_indexes(self) -> set[int]:
        return {index for (index, _) in self._relation_validators}

    def __len__(self) -> int:
        return (
            len(self._workbook_validators)
            + len(self._sheet_validators)
            + sum(len(v) for v in self._relation_validators.values())
        )
