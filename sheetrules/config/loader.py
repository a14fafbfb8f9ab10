from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from sheetrules.models.config_models import (
    ExcelSettings,
    RuleConfig,
    RulesConfig,
    SessionSettings,
    SheetRulesConfig,
)

"""Config loader.

Responsibilities:
- Load YAML rule configuration (default config/rules.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for omitted sections and convert to typed RulesConfig
"""

DEFAULT_CONFIG_PATH = Path("config/rules.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path)
        suffix = f" at {location}" if location else ""
        raise ConfigError(f"config validation failed{suffix}: {e.message}") from e


def _rule(raw: dict[str, Any]) -> RuleConfig:
    return RuleConfig(
        key=raw["key"],
        type=raw["type"],
        params=dict(raw.get("params") or {}),
        field=raw.get("field"),
        depends_on=list(raw.get("depends_on") or []),
        message=raw.get("message"),
    )


def parse_config(data: dict[str, Any]) -> RulesConfig:
    """Validate and convert already-parsed config data."""
    _validate_config_schema(data)

    settings_raw = data.get("settings") or {}
    try:
        settings = SessionSettings(**settings_raw)
    except ValueError as e:
        raise ConfigError(f"invalid settings: {e}") from e

    excel_raw = data.get("excel") or {}
    excel = ExcelSettings(
        header_row=excel_raw.get("header_row", 1),
        keep_na_strings=list(excel_raw.get("keep_na_strings") or []),
    )

    sheets: list[SheetRulesConfig] = []
    seen: set[int] = set()
    for sheet_raw in data.get("sheets") or []:
        index = sheet_raw["index"]
        if index in seen:
            raise ConfigError(f"sheet index {index} declared more than once")
        seen.add(index)
        sheets.append(
            SheetRulesConfig(
                index=index,
                sheet_rules=[_rule(r) for r in sheet_raw.get("sheet_rules") or []],
                rules=[_rule(r) for r in sheet_raw.get("rules") or []],
            )
        )

    return RulesConfig(
        settings=settings,
        excel=excel,
        workbook_rules=[_rule(r) for r in data.get("workbook_rules") or []],
        sheets=sheets,
    )


def load_config(path: Path) -> RulesConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return parse_config(data)
