from __future__ import annotations

import pytest

from sheetrules.models.row_data import Cell, Row


def test_row_cell_returns_value():
    row = Row(index=0, values={"name": "Alice", "age": 30}, number=2)

    cell = row.cell("age")

    assert cell == Cell(field="age", value=30)
    assert not cell.is_blank
    assert row.number == 2


def test_row_cell_missing_field_is_blank():
    row = Row(index=3, values={"name": "Alice"})

    cell = row.cell("email")

    assert cell.field == "email"
    assert cell.value is None
    assert cell.is_blank
    assert row.number is None


def test_row_get_default():
    row = Row(index=0, values={"a": 1})
    assert row.get("a") == 1
    assert row.get("b", "fallback") == "fallback"


def test_row_immutable():
    row = Row(index=0, values={})
    with pytest.raises(AttributeError):
        row.index = 1  # type: ignore
