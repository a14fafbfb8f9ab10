from __future__ import annotations

from .errors import CyclicDependencyError, MissingDependencyError
from .registry import ValidatorRegistry

"""Dependency map construction and auditing for one sheet.

The dependency map merges the row and cell validator key spaces of a sheet
into key -> set of keys it depends on. The auditor proves the map is usable
before any row is evaluated: every referenced key exists and no key reaches
itself.
"""

__all__ = [
    "DependencyAuditor",
    "DependencyMap",
    "build_dependency_map",
]

DependencyMap = dict[str, set[str]]


def build_dependency_map(registry: ValidatorRegistry, sheet_index: int) -> DependencyMap:
    """Union the depends_on declarations of every row/cell validator on a sheet.

    Keys appear in registration order; keys without declared dependencies map
    to an empty set.
    """
    graph: DependencyMap = {}
    for key, validators in registry.validators_for(sheet_index).items():
        deps = graph.setdefault(key, set())
        for validator in validators:
            deps.update(validator.depends_on)
    return graph


class DependencyAuditor:
    """Depth-first audit of a dependency map.

    Each traversal keeps the set of keys on the current path; meeting one of
    them again is a cycle. Keys whose whole dependency closure was checked are
    remembered as satisfied, so later traversals stop there immediately.
    """

    def __init__(self, sheet_index: int | None = None) -> None:
        self.sheet_index = sheet_index
        self.satisfied: set[str] = set()

    def audit(self, graph: DependencyMap) -> list[str]:
        """Validate `graph` and return its keys, each after all of its dependencies.

        Raises:
            MissingDependencyError: a dependency key is absent from `graph`
            CyclicDependencyError: a dependency key is already on the current path
        """
        self.satisfied = set()
        order: list[str] = []
        for key in graph:
            self._visit(graph, key, order)
        return order

    def _visit(self, graph: DependencyMap, root: str, order: list[str]) -> None:
        if root in self.satisfied:
            return
        # explicit stack, chain depth is not bounded by the recursion limit
        path = {root}
        # sorted: deterministic error reporting regardless of set ordering
        stack = [(root, iter(sorted(graph[root])))]
        while stack:
            key, pending = stack[-1]
            for depends_on in pending:
                if depends_on not in graph:
                    raise MissingDependencyError(key, depends_on, self.sheet_index)
                if depends_on in path:
                    raise CyclicDependencyError(key, depends_on, self.sheet_index)
                if depends_on in self.satisfied:
                    continue
                path.add(depends_on)
                stack.append((depends_on, iter(sorted(graph[depends_on]))))
                break
            else:
                stack.pop()
                path.discard(key)
                self.satisfied.add(key)
                order.append(key)
