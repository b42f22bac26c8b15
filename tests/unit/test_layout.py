from __future__ import annotations

import json
import pickle
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from synthexport import generators
from synthexport.layout import LayoutError, LayoutSpec, load_layout

LAYOUT = {
    "data_size_bytes": 2000,
    "number_of_files": 2,
    "tables": [
        {
            "id": "A",
            "percent_size": "0.5",
            "columns": [
                {
                    "name": "code",
                    "size": 3,
                    "sql_type": "CHAR[3]",
                    "generator": {"kind": "constant", "params": {"value": "ABC"}},
                }
            ],
        },
        {
            "id": "B",
            "delimiter": ",",
            "percent_size": "0.5",
            "columns": [
                {
                    "name": "number",
                    "size": 4,
                    "sql_type": "CHAR[4]",
                    "generator": {"kind": "digits", "params": {"length": 4}},
                }
            ],
        },
    ],
}


def test_generators_produce_requested_shapes() -> None:
    assert generators.constant("X")() == "X"
    assert len(generators.alphanumeric(8)()) == 8
    assert set(generators.alphanumeric(50)()) <= set(generators.ALPHANUMERIC)
    assert generators.digits(5)().isdigit()
    assert generators.choice(["a", "b"])() in {"a", "b"}


def test_generators_are_picklable() -> None:
    restored = pickle.loads(pickle.dumps(generators.constant("X")))
    assert restored() == "X"


@pytest.mark.parametrize(
    "factory, args",
    [(generators.alphanumeric, (-1,)), (generators.digits, (-2,)), (generators.choice, ([],))],
)
def test_generator_factories_reject_bad_params(factory, args) -> None:
    with pytest.raises(ValueError):
        factory(*args)


def test_load_layout_builds_export_file(tmp_path: Path, fork_join) -> None:
    path = tmp_path / "layout.json"
    path.write_text(json.dumps(LAYOUT), encoding="utf-8")

    spec = load_layout(path)
    export_file = spec.build_export_file(
        data_size_bytes=spec.data_size_bytes,
        number_of_files=spec.number_of_files,
        fork_join=fork_join,
    )

    assert export_file.file_size_bytes == 1000
    assert [t.id_value for t in export_file.tables] == ["A", "B"]
    assert export_file.tables[0].delimiter == "|"
    assert export_file.tables[1].percent_size == Decimal("0.5")
    assert export_file.build_schema() == {"A": {"code": "CHAR[3]"}, "B": {"number": "CHAR[4]"}}

    row = export_file.tables[1].generate_table_row()
    assert row.startswith("B,") and row.endswith("\n")


def test_unknown_generator_kind_is_a_layout_error() -> None:
    bad = json.loads(json.dumps(LAYOUT))
    bad["tables"][0]["columns"][0]["generator"] = {"kind": "uuid"}
    with pytest.raises(LayoutError, match="Unknown generator kind 'uuid'"):
        LayoutSpec.model_validate(bad).build_tables()


def test_bad_generator_params_are_a_layout_error() -> None:
    bad = json.loads(json.dumps(LAYOUT))
    bad["tables"][1]["columns"][0]["generator"]["params"] = {"width": 4}
    with pytest.raises(LayoutError, match="Invalid params"):
        LayoutSpec.model_validate(bad).build_tables()


def test_layout_requires_tables() -> None:
    with pytest.raises(ValidationError):
        LayoutSpec.model_validate({"data_size_bytes": 10})
