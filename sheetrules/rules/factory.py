from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from sheetrules.config.loader import ConfigError
from sheetrules.engine.registry import ValidatorRegistry
from sheetrules.models.config_models import RuleConfig, RulesConfig
from sheetrules.models.validators import CellValidator, RowValidator, SheetValidator, WorkbookValidator

from . import builtin

logger = logging.getLogger(__name__)

"""Rule factory: RulesConfig -> populated ValidatorRegistry.

Rule `type` names resolve through per-level catalogs. Applications can add
their own check factories with register_check() before building.
"""

__all__ = [
    "CELL",
    "ROW",
    "SHEET",
    "WORKBOOK",
    "build_registry",
    "register_check",
]

WORKBOOK = "workbook"
SHEET = "sheet"
ROW = "row"
CELL = "cell"

CheckFactory = Callable[..., Callable[[Any], bool]]

# level -> type name -> (factory, required params)
_CATALOG: dict[str, dict[str, tuple[CheckFactory, tuple[str, ...]]]] = {
    WORKBOOK: {
        "min_sheets": (builtin.min_sheets, ("count",)),
        "required_sheets": (builtin.required_sheets, ("names",)),
    },
    SHEET: {
        "required_columns": (builtin.required_columns, ("columns",)),
        "min_rows": (builtin.min_rows, ("count",)),
    },
    ROW: {
        "all_required": (builtin.all_required, ("fields",)),
        "field_compare": (builtin.field_compare, ("left", "op", "right")),
    },
    CELL: {
        "required": (builtin.required, ()),
        "is_number": (builtin.is_number, ()),
        "number_range": (builtin.number_range, ()),
        "pattern": (builtin.pattern, ("regex",)),
        "one_of": (builtin.one_of, ("values",)),
        "max_length": (builtin.max_length, ("length",)),
    },
}


def register_check(level: str, name: str, factory: CheckFactory, required: tuple[str, ...] = ()) -> None:
    """Make `name` usable as a rule type at `level` (workbook|sheet|row|cell)."""
    if level not in _CATALOG:
        raise ValueError(f"unknown rule level: {level}")
    _CATALOG[level][name] = (factory, required)


def _make_check(level: str, rule: RuleConfig, where: str) -> Callable[[Any], bool]:
    try:
        factory, required = _CATALOG[level][rule.type]
    except KeyError:
        raise ConfigError(f"{where}: unknown {level} rule type '{rule.type}' (key '{rule.key}')") from None
    missing = [p for p in required if p not in rule.params]
    if missing:
        raise ConfigError(f"{where}: rule '{rule.key}' ({rule.type}) missing params {missing}")
    try:
        return factory(**rule.params)
    except (TypeError, ValueError, re.error) as e:  # unexpected param names, invalid values, bad regex
        raise ConfigError(f"{where}: rule '{rule.key}' ({rule.type}) invalid params: {e}") from e


def build_registry(config: RulesConfig) -> ValidatorRegistry:
    """Create a registry holding every rule declared in `config`.

    Raises:
        ConfigError: unknown rule type or invalid parameters
    """
    registry = ValidatorRegistry()

    for rule in config.workbook_rules:
        check = _make_check(WORKBOOK, rule, "workbook_rules")
        registry.register_workbook_validator(WorkbookValidator(key=rule.key, check=check, message=rule.message))

    for sheet in config.sheets:
        where = f"sheets[{sheet.index}]"
        for rule in sheet.sheet_rules:
            check = _make_check(SHEET, rule, where)
            registry.register_sheet_validator(
                SheetValidator(key=rule.key, check=check, message=rule.message, sheet_index=sheet.index)
            )
        for rule in sheet.rules:
            if rule.field is not None:
                check = _make_check(CELL, rule, where)
                registry.register_cell_validator(
                    CellValidator(
                        key=rule.key,
                        sheet_index=sheet.index,
                        match_field=rule.field,
                        check=check,
                        depends_on=frozenset(rule.depends_on),
                        message=rule.message,
                    )
                )
            else:
                check = _make_check(ROW, rule, where)
                registry.register_row_validator(
                    RowValidator(
                        key=rule.key,
                        sheet_index=sheet.index,
                        check=check,
                        depends_on=frozenset(rule.depends_on),
                        message=rule.message,
                    )
                )

    logger.debug(f"registry built with {len(registry)} validators")
    return registry
