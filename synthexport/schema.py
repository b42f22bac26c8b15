"""
Schema derivation: table id -> {column name -> SQL type label}.

Duplicate checks happen here rather than when an ExportFile is constructed, so an
export with duplicate names can still generate data as long as no schema is built.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable

from synthexport.domain.models import Table
from synthexport.errors import DuplicateColumns, DuplicateTables

Schema = Dict[str, Dict[str, str]]


def build_schema(tables: Iterable[Table]) -> Schema:
    """
    Walk tables and columns in order, failing on the first duplicate.

    A repeated column name fails inside its table; a repeated table id fails only
    after that table's columns were all accepted.
    """
    schema: Schema = {}
    for table in tables:
        columns: Dict[str, str] = {}
        for column in table.columns:
            if column.name in columns:
                raise DuplicateColumns(table=table.id_value, column=column.name)
            columns[column.name] = column.sql_type

        if table.id_value in schema:
            raise DuplicateTables(table=table.id_value)
        schema[table.id_value] = columns
    return schema


def schema_to_json(schema: Schema) -> str:
    """Compact JSON object of objects, e.g. {"A":{"column":"CHAR[3]"}}."""
    return json.dumps(schema, separators=(",", ":"))


def write_schema_json(schema: Schema, path: Path | str) -> Path:
    target = Path(path)
    target.write_text(schema_to_json(schema), encoding="utf-8")
    return target


__all__ = ["Schema", "build_schema", "schema_to_json", "write_schema_json"]
