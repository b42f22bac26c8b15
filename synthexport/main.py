from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from synthexport.config import get_settings
from synthexport.errors import ExportFileError
from synthexport.export_file import ExportFile
from synthexport.layout import LayoutError, load_layout
from synthexport.parallel import ForkJoin
from synthexport.reporter import render_generation_summary, render_plan
from synthexport.utils.logging import configure_logging, get_logger
from synthexport.utils.profiler import profile_block

app = typer.Typer(help="Generate sized, delimited synthetic datasets from a table layout.")
log = get_logger(__name__)

_EXPECTED_ERRORS = (ExportFileError, LayoutError, ValidationError, OSError)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _first_given(*values: Optional[int]) -> int:
    return next(value for value in values if value is not None)


def _load_export_file(
    layout: Path, size: Optional[int], files: Optional[int]
) -> ExportFile:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        spec = load_layout(layout)
        export_file = spec.build_export_file(
            data_size_bytes=_first_given(size, spec.data_size_bytes, settings.data_size_bytes),
            number_of_files=_first_given(files, spec.number_of_files, settings.number_of_files),
            fork_join=ForkJoin.from_settings(),
        )
    except _EXPECTED_ERRORS as exc:
        log.error("Could not build export from layout", extra={"layout": str(layout)})
        _fail(str(exc))

    # Row counts divide by the row width.
    for table in export_file.tables:
        if table.row_size_bytes == 0:
            _fail(f"Table {table.id_value} has a row size of 0 bytes; give its columns a size")
    return export_file


_LAYOUT_ARG = typer.Argument(..., exists=True, dir_okay=False, help="JSON table layout file.")
_SIZE_OPT = typer.Option(None, "--size", "-s", min=1, help="Total data size in bytes.")
_FILES_OPT = typer.Option(None, "--files", "-f", min=1, help="Number of output files.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"size={settings.data_size_bytes} files={settings.number_of_files} "
        f"output={settings.output_dir} | backend={settings.backend} "
        f"workers={settings.workers or 'auto'} chunk_rows={settings.chunk_rows} "
        f"log_level={settings.log_level}"
    )


@app.command()
def plan(
    layout: Path = _LAYOUT_ARG,
    size: Optional[int] = _SIZE_OPT,
    files: Optional[int] = _FILES_OPT,
) -> None:
    """
    Show how many rows of each table fit one output file.
    """
    export_file = _load_export_file(layout, size, files)
    try:
        render_plan(export_file)
    except ExportFileError as exc:
        _fail(str(exc))


@app.command()
def generate(
    layout: Path = _LAYOUT_ARG,
    size: Optional[int] = _SIZE_OPT,
    files: Optional[int] = _FILES_OPT,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory (default from settings)."
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Parallel backend for files: thread or process."
    ),
    schema: bool = typer.Option(
        False, "--schema", help="Also write schema.json into the output directory."
    ),
) -> None:
    """
    Generate every output file for the layout.
    """
    export_file = _load_export_file(layout, size, files)
    folder = output or get_settings().output_dir
    if backend is not None and backend not in ("thread", "process"):
        _fail(f"Unknown backend '{backend}'. Available: thread, process")

    schema_path: Optional[Path] = None
    try:
        if schema:
            folder.mkdir(parents=True, exist_ok=True)
            schema_path = export_file.schema_json(folder / "schema.json")
        with profile_block("generate") as stats:
            paths = export_file.generate_all_files(folder, backend=backend)  # type: ignore[arg-type]
    except _EXPECTED_ERRORS as exc:
        log.error("Generation failed", extra={"folder": str(folder)})
        _fail(str(exc))

    render_generation_summary(paths, stats, schema_path=schema_path)


@app.command(name="schema")
def schema_command(
    layout: Path = _LAYOUT_ARG,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the schema JSON here instead of stdout."
    ),
) -> None:
    """
    Print or write the JSON schema (table -> column -> SQL type).
    """
    export_file = _load_export_file(layout, None, None)
    try:
        if output is None:
            typer.echo(export_file.get_schema_json_str())
        else:
            export_file.schema_json(output)
            typer.echo(f"Schema written to {output}")
    except _EXPECTED_ERRORS as exc:
        _fail(str(exc))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
