"""
Error types raised by the export engine.

Validation failures are raised synchronously when an ExportFile is constructed or
when its schema is built. Generator, filesystem, and JSON failures are not wrapped:
they propagate to the caller unchanged.
"""

from __future__ import annotations

from decimal import Decimal


class ExportFileError(Exception):
    """Base class for export configuration and schema errors."""


class SumPercentSizeIncorrect(ExportFileError):
    def __init__(self, sum_percent_size: Decimal) -> None:
        self.sum_percent_size = sum_percent_size
        super().__init__(
            f"Sum of table percentage sizes must be equal 1. It was {sum_percent_size}."
        )


class DuplicateColumns(ExportFileError):
    def __init__(self, table: str, column: str) -> None:
        self.table = table
        self.column = column
        super().__init__(f"Table {table} has a duplicate column {column}.")


class DuplicateTables(ExportFileError):
    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Export File contains duplicate table {table}.")


class TooManyFiles(ExportFileError):
    """
    Raised when the file count is not smaller than the data size, or when the
    per-file allotment of some table cannot hold a single row.
    """

    def __init__(self, files: int) -> None:
        self.files = files
        super().__init__(f"Too many files to generate {files}")


class ReduceFailed(ExportFileError):
    """Raised when the table list is empty and feasibility cannot be computed."""

    def __init__(self) -> None:
        super().__init__("ReduceFailed")


class SizeConversionError(ExportFileError, ValueError):
    """Decimal byte size does not fit an unsigned 64-bit integer."""

    def __init__(self, value: Decimal) -> None:
        self.value = value
        super().__init__(f"Failed to convert {value} to an unsigned 64-bit byte count")


__all__ = [
    "ExportFileError",
    "SumPercentSizeIncorrect",
    "DuplicateColumns",
    "DuplicateTables",
    "TooManyFiles",
    "ReduceFailed",
    "SizeConversionError",
]
