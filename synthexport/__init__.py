"""
synthetic-export - sized, delimited synthetic datasets for exercising storage and
ETL systems.

A layout of tables, each a list of fixed-size columns with a value generator, is
given a total byte budget and a file count. The package:

- Validates that every table fits its share of each file and that shares sum to 1
- Computes how many rows of each table fit that share
- Generates rows in parallel and concatenates them in order
- Writes one independently generated export per file
- Derives a JSON schema of table -> column -> SQL type
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from synthexport.config import Settings, get_settings
from synthexport.domain.models import Column, Table
from synthexport.errors import (
    DuplicateColumns,
    DuplicateTables,
    ExportFileError,
    ReduceFailed,
    SizeConversionError,
    SumPercentSizeIncorrect,
    TooManyFiles,
)
from synthexport.export_file import ExportFile, TablePlan, TableRows
from synthexport.parallel import ForkJoin
from synthexport.utils.logging import configure_logging, get_logger

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Model
    "Column",
    "Table",
    "ExportFile",
    "TablePlan",
    "TableRows",
    "ForkJoin",
    # Errors
    "ExportFileError",
    "SumPercentSizeIncorrect",
    "DuplicateColumns",
    "DuplicateTables",
    "TooManyFiles",
    "ReduceFailed",
    "SizeConversionError",
    # Logging
    "configure_logging",
    "get_logger",
]
