from __future__ import annotations

import pytest

from sheetrules.engine.errors import ConfigurationError, CyclicDependencyError, MissingDependencyError
from sheetrules.engine.graph import DependencyAuditor, build_dependency_map
from sheetrules.engine.registry import ValidatorRegistry
from sheetrules.models import CellValidator, RowValidator


def _row(key: str, sheet: int = 0, depends_on=()) -> RowValidator:
    return RowValidator(key=key, sheet_index=sheet, check=lambda row: True, depends_on=frozenset(depends_on))


def _cell(key: str, field: str, sheet: int = 0, depends_on=()) -> CellValidator:
    return CellValidator(
        key=key, sheet_index=sheet, match_field=field, check=lambda cell: True, depends_on=frozenset(depends_on)
    )


def test_build_dependency_map_unions_row_and_cell_keys():
    registry = ValidatorRegistry()
    registry.register_row_validator(_row("Dates"), _row("Order", depends_on={"Dates"}))
    registry.register_cell_validator(_cell("Amount", "amount"), _cell("Order", "end", depends_on={"Amount"}))
    registry.register_row_validator(_row("Other", sheet=1, depends_on={"X"}))

    graph = build_dependency_map(registry, 0)

    assert graph == {"Dates": set(), "Order": {"Dates", "Amount"}, "Amount": set()}
    assert list(graph) == ["Dates", "Order", "Amount"]


def test_build_dependency_map_empty_sheet():
    assert build_dependency_map(ValidatorRegistry(), 3) == {}


def test_audit_missing_dependency():
    graph = {"Range": {"Required"}}

    with pytest.raises(MissingDependencyError) as e:
        DependencyAuditor().audit(graph)

    assert e.value.key == "Range"
    assert e.value.depends_on == "Required"
    assert isinstance(e.value, ConfigurationError)


def test_audit_two_key_cycle_names_both_keys():
    graph = {"a": {"b"}, "b": {"a"}}

    with pytest.raises(CyclicDependencyError) as e:
        DependencyAuditor(sheet_index=2).audit(graph)

    assert {e.value.key, e.value.depends_on} == {"a", "b"}
    assert "[a]" in str(e.value) and "[b]" in str(e.value)
    assert "sheet 2" in str(e.value)


def test_audit_self_dependency_is_a_cycle():
    with pytest.raises(CyclicDependencyError):
        DependencyAuditor().audit({"a": {"a"}})


def test_audit_long_cycle():
    graph = {"a": {"b"}, "b": {"c"}, "c": {"d"}, "d": {"b"}}
    with pytest.raises(CyclicDependencyError):
        DependencyAuditor().audit(graph)


def test_audit_diamond_is_not_a_cycle():
    # a -> b -> d, a -> c -> d: d is reached twice but never on the same path
    graph = {"a": {"b", "c"}, "b": {"d"}, "c": {"d"}, "d": set()}

    order = DependencyAuditor().audit(graph)

    assert sorted(order) == ["a", "b", "c", "d"]
    assert order.index("d") < order.index("b") < order.index("a")
    assert order.index("c") < order.index("a")


def test_audit_order_puts_dependencies_first():
    graph = {"Range": {"Required"}, "Required": set(), "Other": set()}

    order = DependencyAuditor().audit(graph)

    assert order == ["Required", "Range", "Other"]


def test_audit_records_satisfied_keys():
    auditor = DependencyAuditor()
    auditor.audit({"a": {"b"}, "b": set()})
    assert auditor.satisfied == {"a", "b"}

    # a second audit starts from scratch
    auditor.audit({"x": set()})
    assert auditor.satisfied == {"x"}


def test_audit_empty_graph():
    assert DependencyAuditor().audit({}) == []


def test_audit_deep_chain():
    graph = {f"k{i}": {f"k{i - 1}"} for i in range(1, 2000)}
    graph["k0"] = set()

    order = DependencyAuditor().audit(graph)

    assert order == [f"k{i}" for i in range(2000)]


def test_audit_deep_chain_missing_root():
    graph = {f"k{i}": {f"k{i - 1}"} for i in range(1, 2000)}

    with pytest.raises(MissingDependencyError) as e:
        DependencyAuditor().audit(graph)

    assert (e.value.key, e.value.depends_on) == ("k1", "k0")


def test_audit_deep_cycle():
    graph = {f"k{i}": {f"k{i - 1}"} for i in range(1, 2000)}
    graph["k0"] = {"k1999"}

    with pytest.raises(CyclicDependencyError):
        DependencyAuditor().audit(graph)
