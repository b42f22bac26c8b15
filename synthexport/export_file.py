"""
ExportFile: the entry point for validating a table layout and generating output.

An ExportFile splits a total byte budget evenly across `number_of_files` files and
gives every table a fixed fraction of each file. Construction validates that the
layout is feasible; generation methods never mutate the instance.

Usage:
    from decimal import Decimal
    from synthexport import Column, ExportFile, Table

    column = Column(name="code", size=3, sql_type="CHAR[3]", generator=lambda: "ABC")
    table = Table(id_value="A", columns=[column], delimiter="|", percent_size=Decimal("1.0"))
    export_file = ExportFile([table], data_size_bytes=1024 * 1024, number_of_files=4)
    export_file.generate_all_files("output")
"""

from __future__ import annotations

import multiprocessing as mp
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Optional, Tuple

from synthexport.config import get_settings
from synthexport.domain.models import Table
from synthexport.errors import ReduceFailed, SumPercentSizeIncorrect, TooManyFiles
from synthexport.parallel import ForkJoin, ordered_concat
from synthexport.schema import Schema, build_schema, schema_to_json, write_schema_json
from synthexport.utils.logging import get_logger

log = get_logger(__name__)

Backend = Literal["thread", "process"]


@dataclass(frozen=True)
class TablePlan:
    table: str
    percent_size: Decimal
    row_size_bytes: int
    table_size_bytes: int
    row_count: int


@dataclass(frozen=True)
class TableRows:
    """Outcome of generating one table's rows: either rows or the error raised."""

    rows: Optional[List[List[str]]] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> List[List[str]]:
        if self.error is not None:
            raise self.error
        return self.rows or []


def export_file_name(file_size_bytes: int, number_of_files: int, index: int) -> str:
    return f"file_{file_size_bytes}_{number_of_files}_{index}.txt"


def _write_export_file(export_file: "ExportFile", folder: Path, index: int) -> Path:
    """Worker: regenerate a full export and write it as file number `index`."""
    path = folder / export_file_name(export_file.file_size_bytes, export_file.number_of_files, index)
    export_file.generate_export_to_file(path)
    return path


class ExportFile:
    """
    A validated set of tables plus a total byte budget split across files.

    Raises
    ------
    TooManyFiles
        If `number_of_files >= data_size_bytes`, or a table's share of one file
        cannot hold a single row.
    ReduceFailed
        If `tables` is empty.
    SumPercentSizeIncorrect
        If the tables' percent sizes do not sum to exactly 1.0.
    """

    def __init__(
        self,
        tables: Iterable[Table],
        data_size_bytes: int,
        number_of_files: int,
        fork_join: Optional[ForkJoin] = None,
    ) -> None:
        tables = tuple(tables)
        if number_of_files < 1:
            raise ValueError(f"number_of_files must be positive, got {number_of_files}")
        if number_of_files >= data_size_bytes:
            raise TooManyFiles(files=number_of_files)

        file_size_bytes = data_size_bytes // number_of_files

        if not tables:
            raise ReduceFailed()
        is_possible = all(
            Decimal(file_size_bytes) * table.percent_size >= Decimal(table.row_size_bytes)
            for table in tables
        )
        if not is_possible:
            raise TooManyFiles(files=number_of_files)

        sum_percent_size = sum((table.percent_size for table in tables), Decimal(0))
        if sum_percent_size != Decimal("1.0"):
            raise SumPercentSizeIncorrect(sum_percent_size=sum_percent_size)

        self._tables: Tuple[Table, ...] = tables
        self._data_size_bytes = data_size_bytes
        self._number_of_files = number_of_files
        self._file_size_bytes = file_size_bytes
        self._fork_join = fork_join or ForkJoin.from_settings()

    @property
    def tables(self) -> Tuple[Table, ...]:
        return self._tables

    @property
    def data_size_bytes(self) -> int:
        return self._data_size_bytes

    @property
    def number_of_files(self) -> int:
        return self._number_of_files

    @property
    def file_size_bytes(self) -> int:
        return self._file_size_bytes

    @property
    def fork_join(self) -> ForkJoin:
        return self._fork_join

    def __repr__(self) -> str:
        return (
            f"ExportFile(tables={[t.id_value for t in self._tables]}, "
            f"data_size_bytes={self._data_size_bytes}, number_of_files={self._number_of_files})"
        )

    def plan(self) -> List[TablePlan]:
        """Per-table sizing for one file, without generating any data."""
        return [
            TablePlan(
                table=table.id_value,
                percent_size=table.percent_size,
                row_size_bytes=table.row_size_bytes,
                table_size_bytes=table.table_size_bytes(self._file_size_bytes),
                row_count=table.row_count(self._file_size_bytes),
            )
            for table in self._tables
        ]

    # Generation

    def _generate_table_text(self, table: Table) -> str:
        return table.generate_table(self._file_size_bytes, self._fork_join)

    def generate_export(self) -> str:
        """Generate every table for one file and concatenate them in declaration order."""
        return ordered_concat(self._fork_join.map(self._generate_table_text, self._tables))

    def _generate_table_rows(self, table: Table) -> TableRows:
        try:
            return TableRows(rows=table.generate_table_vec(self._file_size_bytes, self._fork_join))
        except Exception as exc:  # noqa: BLE001 - stored per table, surfaced by unwrap()
            log.warning(
                "Table generation failed",
                extra={"table": table.id_value, "error": str(exc)},
            )
            return TableRows(error=exc)

    def generate_raw_tables(self) -> Dict[str, TableRows]:
        """
        Generate structured rows for every table, keyed by table id.

        A failing table is recorded in its TableRows and does not abort the other
        tables. With duplicate table ids the later table wins.
        """
        results = self._fork_join.map(self._generate_table_rows, self._tables)
        return {table.id_value: rows for table, rows in zip(self._tables, results)}

    @staticmethod
    def raw_tables_to_string(tables: Dict[str, TableRows], delimiter: str) -> str:
        """
        Flatten `generate_raw_tables` output into delimited, newline-terminated text.

        Raises the stored error of the first failed table.
        """
        parts: List[str] = []
        for table_rows in tables.values():
            parts.extend(delimiter.join(row) + "\n" for row in table_rows.unwrap())
        return ordered_concat(parts)

    # Files

    def generate_export_to_file(self, path: Path | str) -> Path:
        """Generate one export and write it to `path` in a single write."""
        target = Path(path)
        exported = self.generate_export()
        with target.open("w", encoding="utf-8", newline="") as f:
            f.write(exported)
        log.info("Export written", extra={"path": str(target), "chars": len(exported)})
        return target

    def generate_all_files(
        self,
        folder_path: Path | str,
        backend: Optional[Backend] = None,
        processes: Optional[int] = None,
    ) -> List[Path]:
        """
        Write `number_of_files` independently generated exports under `folder_path`.

        Every file is a fresh `generate_export()` call. The process backend needs
        picklable generators (module-level functions or partials of them).
        """
        folder = Path(folder_path)
        folder.mkdir(parents=True, exist_ok=True)

        settings = get_settings()
        backend = backend or settings.backend
        worker = partial(_write_export_file, self, folder)
        indices = range(self._number_of_files)

        log.info(
            "Generating export files",
            extra={
                "folder": str(folder),
                "files": self._number_of_files,
                "file_size_bytes": self._file_size_bytes,
                "backend": backend,
            },
        )

        if backend == "process":
            ctx = mp.get_context("spawn")
            pool_size = processes or settings.workers or max(mp.cpu_count() - 1, 1)
            with ctx.Pool(processes=pool_size) as pool:
                paths = list(pool.map_async(worker, indices).get())
        elif backend == "thread":
            paths = self._fork_join.map(worker, indices)
        else:
            raise ValueError(f"Unknown backend '{backend}'. Available: thread, process")
        return paths

    # Schema

    def build_schema(self) -> Schema:
        return build_schema(self._tables)

    def get_schema_json_str(self) -> str:
        return schema_to_json(self.build_schema())

    def schema_json(self, path: Path | str) -> Path:
        """Build the schema and write it as JSON to `path`."""
        return write_schema_json(self.build_schema(), path)


__all__ = ["Backend", "ExportFile", "TablePlan", "TableRows", "export_file_name"]
