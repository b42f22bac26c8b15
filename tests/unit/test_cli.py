from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from synthexport.main import app

runner = CliRunner()

LAYOUT = {
    "tables": [
        {
            "id": "A",
            "percent_size": "1.0",
            "columns": [
                {
                    "name": "column",
                    "size": 3,
                    "sql_type": "CHAR[3]",
                    "generator": {"kind": "constant", "params": {"value": "ABC"}},
                }
            ],
        }
    ]
}


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """The runner's captured streams close after each invoke; keep handlers off them."""
    monkeypatch.setattr("synthexport.main.configure_logging", lambda **kwargs: None)


@pytest.fixture
def layout_path(tmp_path: Path) -> Path:
    path = tmp_path / "layout.json"
    path.write_text(json.dumps(LAYOUT), encoding="utf-8")
    return path


def test_info_shows_defaults() -> None:
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "backend=thread" in result.stdout
    assert "chunk_rows=10000" in result.stdout


def test_schema_prints_json(layout_path: Path) -> None:
    result = runner.invoke(app, ["schema", str(layout_path)])
    assert result.exit_code == 0
    assert result.stdout.strip() == '{"A":{"column":"CHAR[3]"}}'


def test_plan_lists_row_counts(layout_path: Path) -> None:
    result = runner.invoke(app, ["plan", str(layout_path), "--size", "300", "--files", "1"])
    assert result.exit_code == 0
    assert "100" in result.stdout


def test_generate_writes_files_and_schema(layout_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["generate", str(layout_path), "--size", "600", "--files", "2", "--output", str(out), "--schema"],
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == [
        "file_300_2_0.txt",
        "file_300_2_1.txt",
        "schema.json",
    ]
    assert (out / "file_300_2_0.txt").read_text(encoding="utf-8") == "A|ABC\n" * 100


def test_invalid_configuration_exits_with_error(layout_path: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["generate", str(layout_path), "--size", "5", "--files", "5", "--output", str(tmp_path)]
    )
    assert result.exit_code == 1


@pytest.mark.parametrize("option", ["--size", "--files"])
def test_zero_size_or_file_count_is_rejected_not_ignored(layout_path: Path, option: str) -> None:
    result = runner.invoke(app, ["plan", str(layout_path), option, "0"])
    assert result.exit_code == 2


def test_layout_sizes_are_used_when_options_are_omitted(tmp_path: Path) -> None:
    layout = dict(LAYOUT, data_size_bytes=30, number_of_files=1)
    path = tmp_path / "sized.json"
    path.write_text(json.dumps(layout), encoding="utf-8")

    result = runner.invoke(app, ["plan", str(path)])

    assert result.exit_code == 0, result.output
    assert "30B" in result.stdout


def test_zero_width_table_is_reported_as_an_error(tmp_path: Path) -> None:
    layout = json.loads(json.dumps(LAYOUT))
    layout["tables"][0]["columns"][0]["size"] = 0
    path = tmp_path / "zero.json"
    path.write_text(json.dumps(layout), encoding="utf-8")

    result = runner.invoke(app, ["plan", str(path), "--size", "300"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ZeroDivisionError)
