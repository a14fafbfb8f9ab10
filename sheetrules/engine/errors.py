from __future__ import annotations

"""Exceptions raised by the rule engine.

ConfigurationError and its subclasses are fatal and data independent: they
abort a session before (or instead of) evaluating rows. Data failures are never
exceptions; they become ValidationMessage entries.
"""

__all__ = [
    "ConfigurationError",
    "CyclicDependencyError",
    "MissingDependencyError",
    "SessionCancelledError",
]


class ConfigurationError(Exception):
    """Fatal setup error (no workbook, broken dependency declarations)."""


class MissingDependencyError(ConfigurationError):
    """A rule depends on a key that is not registered on the same sheet."""

    def __init__(self, key: str, depends_on: str, sheet_index: int | None = None) -> None:
        self.key = key
        self.depends_on = depends_on
        self.sheet_index = sheet_index
        where = f" on sheet {sheet_index}" if sheet_index is not None else ""
        super().__init__(f"dependency missing key [{depends_on}] required by [{key}]{where}")


class CyclicDependencyError(ConfigurationError):
    """Dependency declarations form a cycle through `key` and `depends_on`."""

    def __init__(self, key: str, depends_on: str, sheet_index: int | None = None) -> None:
        self.key = key
        self.depends_on = depends_on
        self.sheet_index = sheet_index
        where = f" on sheet {sheet_index}" if sheet_index is not None else ""
        super().__init__(f"dependency cycling on [{key}] and [{depends_on}]{where}")


class SessionCancelledError(Exception):
    """The session deadline passed or its cancel event was set."""
