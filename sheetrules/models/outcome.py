from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

"""Per-row, per-key outcome of rule evaluation."""

__all__ = [
    "Outcome",
]


class Outcome(Enum):
    """Result of one rule key for one row.

    - PASS: every validator registered under the key returned True
    - FAIL: at least one validator returned False (including disagreement)
    - SKIPPED: a dependency did not pass, validators were not invoked
    """
    PASS = "pass"
    FAIL = "fail"
    SKIPPED = "skipped"

    @classmethod
    def from_results(cls, results: Iterable[bool]) -> Outcome:
        """Collapse the raw boolean results of a key into an Outcome.

        Exactly {True} is PASS. Any False is FAIL. An empty result set (key
        without validators) counts as PASS.
        """
        return cls.FAIL if False in set(results) else cls.PASS
