"""
Domain models for synthetic-export.

A Column pairs a fixed, advisory byte width with a value generator. A Table groups
columns under an id and a delimiter and is entitled to a fraction of every output
file. Both are immutable once constructed.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, Field

from synthexport.errors import SizeConversionError
from synthexport.parallel import ForkJoin, ordered_concat
from synthexport.utils.logging import get_logger

log = get_logger(__name__)

U64_MAX = 2**64 - 1


class Column(BaseModel):
    """
    A named field with a declared byte width and a zero-argument value generator.

    The declared size is only used for sizing; generated values are not checked
    against it. Generators must be safe to call concurrently.
    """

    name: str = Field(..., description="Column name, unique within a table.")
    size: int = Field(..., ge=0, description="Declared byte width of the column.")
    sql_type: str = Field(..., description="Descriptive SQL type label.")
    generator: Callable[[], str] = Field(..., description="Produces one value per call.")

    model_config = {
        "frozen": True,
    }

    def generate_value(self) -> str:
        value = self.generator()
        if not isinstance(value, str):
            raise TypeError(
                f"Generator for column {self.name!r} returned {type(value).__name__}, expected str"
            )
        return value


class Table(BaseModel):
    """
    An ordered set of columns sharing a delimiter and a share of each file.

    Every generated row starts with `id_value`, but `row_size_bytes` only counts
    the declared column sizes; row counts are computed from that figure.
    """

    id_value: str = Field(..., description="Table identifier, first field of every row.")
    columns: Tuple[Column, ...] = Field(..., description="Columns in output order.")
    delimiter: str = Field(..., description="Field separator.")
    percent_size: Decimal = Field(..., description="Fraction of each file for this table.")

    model_config = {
        "frozen": True,
    }

    @property
    def row_size_bytes(self) -> int:
        return sum(column.size for column in self.columns)

    def table_size_bytes(self, file_size_bytes: int) -> int:
        """floor(file_size_bytes * percent_size), checked against the u64 range."""
        product = Decimal(file_size_bytes) * self.percent_size
        if product < 0 or product > U64_MAX:
            raise SizeConversionError(product)
        return int(product)

    def row_count(self, file_size_bytes: int) -> int:
        # A table of zero-size columns divides by zero here.
        return self.table_size_bytes(file_size_bytes) // self.row_size_bytes

    def generate_table_row_vec(self) -> List[str]:
        """Generate one row as a list of fields, id first."""
        return [self.id_value] + [column.generate_value() for column in self.columns]

    def generate_table_row(self) -> str:
        """Generate one delimited, newline-terminated row."""
        return self.delimiter.join(self.generate_table_row_vec()) + "\n"

    def _generate_text_chunk(self, rows: range) -> str:
        return ordered_concat([self.generate_table_row() for _ in rows])

    def _generate_vec_chunk(self, rows: range) -> List[List[str]]:
        return [self.generate_table_row_vec() for _ in rows]

    def generate_table(self, file_size_bytes: int, fork_join: Optional[ForkJoin] = None) -> str:
        """
        Generate as many rows as fit this table's share of `file_size_bytes`.

        Rows are generated in parallel chunks and concatenated in index order. The
        first failing generator aborts the whole table.
        """
        fork_join = fork_join or ForkJoin.from_settings()
        row_count = self.row_count(file_size_bytes)
        log.debug(
            "Generating table text",
            extra={"table": self.id_value, "rows": row_count, "file_size_bytes": file_size_bytes},
        )
        parts = fork_join.map(self._generate_text_chunk, fork_join.chunks(row_count))
        return ordered_concat(parts)

    def generate_table_vec(
        self, file_size_bytes: int, fork_join: Optional[ForkJoin] = None
    ) -> List[List[str]]:
        """Same sizing and fan-out as `generate_table`, collecting field lists."""
        fork_join = fork_join or ForkJoin.from_settings()
        row_count = self.row_count(file_size_bytes)
        log.debug(
            "Generating table rows",
            extra={"table": self.id_value, "rows": row_count, "file_size_bytes": file_size_bytes},
        )
        rows: List[List[str]] = []
        for chunk in fork_join.map(self._generate_vec_chunk, fork_join.chunks(row_count)):
            rows.extend(chunk)
        return rows


__all__ = ["Column", "Table", "U64_MAX"]
