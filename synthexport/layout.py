"""
JSON layout files describing tables for the CLI.

Example layout:

    {
      "data_size_bytes": 1048576,
      "number_of_files": 2,
      "tables": [
        {
          "id": "A",
          "delimiter": "|",
          "percent_size": "0.5",
          "columns": [
            {"name": "code", "size": 3, "sql_type": "CHAR[3]",
             "generator": {"kind": "alphanumeric", "params": {"length": 3}}}
          ]
        }
      ]
    }
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from synthexport.domain.models import Column, Table
from synthexport.export_file import ExportFile
from synthexport.generators import GENERATOR_KINDS, ValueGenerator
from synthexport.parallel import ForkJoin


class LayoutError(Exception):
    """Raised when a layout file references something that cannot be built."""


class GeneratorSpec(BaseModel):
    kind: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def build(self) -> ValueGenerator:
        factory = GENERATOR_KINDS.get(self.kind)
        if factory is None:
            raise LayoutError(
                f"Unknown generator kind '{self.kind}'. Available: {', '.join(sorted(GENERATOR_KINDS))}"
            )
        try:
            return factory(**self.params)
        except (TypeError, ValueError) as exc:
            raise LayoutError(f"Invalid params for generator '{self.kind}': {exc}") from exc


class ColumnSpec(BaseModel):
    name: str
    size: int = Field(..., ge=0)
    sql_type: str
    generator: GeneratorSpec

    def build(self) -> Column:
        return Column(
            name=self.name,
            size=self.size,
            sql_type=self.sql_type,
            generator=self.generator.build(),
        )


class TableSpec(BaseModel):
    id: str
    delimiter: str = "|"
    percent_size: Decimal
    columns: List[ColumnSpec]

    def build(self) -> Table:
        return Table(
            id_value=self.id,
            columns=[column.build() for column in self.columns],
            delimiter=self.delimiter,
            percent_size=self.percent_size,
        )


class LayoutSpec(BaseModel):
    data_size_bytes: Optional[int] = Field(None, gt=0)
    number_of_files: Optional[int] = Field(None, gt=0)
    tables: List[TableSpec]

    def build_tables(self) -> List[Table]:
        return [table.build() for table in self.tables]

    def build_export_file(
        self,
        data_size_bytes: int,
        number_of_files: int,
        fork_join: Optional[ForkJoin] = None,
    ) -> ExportFile:
        return ExportFile(
            self.build_tables(),
            data_size_bytes=data_size_bytes,
            number_of_files=number_of_files,
            fork_join=fork_join,
        )


def load_layout(path: Path | str) -> LayoutSpec:
    """Read and validate a layout file; raises pydantic.ValidationError on bad input."""
    text = Path(path).read_text(encoding="utf-8")
    return LayoutSpec.model_validate_json(text)


__all__ = [
    "ColumnSpec",
    "GeneratorSpec",
    "LayoutError",
    "LayoutSpec",
    "TableSpec",
    "load_layout",
]
