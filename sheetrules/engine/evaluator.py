from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from ..models.outcome import Outcome
from ..models.row_data import Row
from .graph import DependencyAuditor, DependencyMap
from .registry import RelationValidator

"""Per-row rule evaluation with dependency ordering and skip propagation.

A key is resolved only after all of its dependencies are resolved. If any
dependency did not PASS the key is SKIPPED and its validators never run.
Resolution results are memoized in a table owned by a single row evaluation,
so a key referenced by several dependents still runs its validators once.
"""

__all__ = [
    "RowEvaluation",
    "RowEvaluator",
    "should_skip",
]


def should_skip(dependency_outcomes: Iterable[Outcome]) -> bool:
    """True iff there are dependency outcomes and they are not exactly {PASS}."""
    results = set(dependency_outcomes)
    return bool(results) and results != {Outcome.PASS}


@dataclass
class RowEvaluation:
    """Outcome of every rule key for one row.

    Attributes:
        row_index: Index of the evaluated row
        outcomes: key -> Outcome, filled in resolution order
        disagreements: keys whose validators returned both True and False
        failures: key -> first validator that returned False (message source)
    """
    row_index: int
    outcomes: dict[str, Outcome] = field(default_factory=dict)
    disagreements: set[str] = field(default_factory=set)
    failures: dict[str, RelationValidator] = field(default_factory=dict)

    def failed_keys(self, order: Sequence[str] | None = None) -> list[str]:
        """FAIL keys, in `order` when given (registration order) else resolution order."""
        keys = order if order is not None else list(self.outcomes)
        return [k for k in keys if self.outcomes.get(k) is Outcome.FAIL]

    def first_failure(self, key: str) -> RelationValidator | None:
        return self.failures.get(key)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes.values() if o is Outcome.SKIPPED)

    @property
    def passed(self) -> bool:
        return Outcome.FAIL not in self.outcomes.values()


class RowEvaluator:
    """Evaluates the row and cell rules of one sheet against single rows.

    The evaluator itself holds only read-only state (the dependency map, its
    dependency-first order and the key -> validators table), so one instance
    can serve rows on several threads; each evaluate() call allocates its own
    memo table.
    """

    def __init__(
        self,
        graph: DependencyMap,
        validators_by_key: Mapping[str, Sequence[RelationValidator]],
        order: Sequence[str] | None = None,
    ) -> None:
        """
        Args:
            graph: key -> keys it depends on
            validators_by_key: key -> validators registered under it
            order: Keys with every dependency before its dependents, as returned by
                DependencyAuditor.audit(). Audited here when omitted

        Raises:
            ConfigurationError: `order` omitted and `graph` has a missing key or a cycle
        """
        self._graph = graph
        self._validators_by_key = validators_by_key
        # registration order first, then any graph-only key
        self._keys = list(validators_by_key) + [k for k in graph if k not in validators_by_key]
        if order is None:
            order = DependencyAuditor().audit(graph)
        ordered = set(order)
        self._order = list(order) + [k for k in self._keys if k not in ordered]

    @property
    def keys(self) -> list[str]:
        return list(self._keys)

    def evaluate(self, row: Row) -> RowEvaluation:
        """Resolve every key for `row`.

        Keys are resolved in dependency-first order, so each dependency
        outcome is already in the memo table when its dependents are reached.
        Exceptions raised by validator code propagate unchanged.
        """
        evaluation = RowEvaluation(row_index=row.index)
        memo: dict[str, Outcome] = {}
        for key in self._order:
            memo[key] = self._resolve(key, row, memo, evaluation)
        evaluation.outcomes = memo
        return evaluation

    def _resolve(
        self,
        key: str,
        row: Row,
        memo: dict[str, Outcome],
        evaluation: RowEvaluation,
    ) -> Outcome:
        if should_skip(memo[dep] for dep in self._graph.get(key, ())):
            return Outcome.SKIPPED

        results: set[bool] = set()
        for validator in self._validators_by_key.get(key, ()):
            ok = validator.validate(validator.resolve(row))
            results.add(ok)
            if not ok and key not in evaluation.failures:
                evaluation.failures[key] = validator
        if results == {True, False}:
            evaluation.disagreements.add(key)

        return Outcome.from_results(results)
