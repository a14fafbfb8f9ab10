"""Rule engine core: registry, dependency audit and per-row evaluation."""

from .errors import ConfigurationError, CyclicDependencyError, MissingDependencyError, SessionCancelledError
from .evaluator import RowEvaluation, RowEvaluator, should_skip
from .graph import DependencyAuditor, DependencyMap, build_dependency_map
from .registry import ValidatorRegistry

__all__ = [
    "ConfigurationError",
    "CyclicDependencyError",
    "DependencyAuditor",
    "DependencyMap",
    "MissingDependencyError",
    "RowEvaluation",
    "RowEvaluator",
    "SessionCancelledError",
    "ValidatorRegistry",
    "build_dependency_map",
    "should_skip",
]
