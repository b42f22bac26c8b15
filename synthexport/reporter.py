from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from synthexport.export_file import ExportFile, TablePlan
from synthexport.utils.profiler import ProfileStats


def _format_bytes(value: Optional[int]) -> str:
    if value is None:
        return "-"
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:,.0f}{unit}" if unit == "B" else f"{size:,.1f}{unit}"
        size /= 1024
    return f"{size:,.1f}GB"


def build_plan_table(export_file: ExportFile, plan: Sequence[TablePlan]) -> Table:
    table = Table(
        title=(
            f"Per-file plan: {export_file.number_of_files} file(s) x "
            f"{_format_bytes(export_file.file_size_bytes)}"
        ),
        box=box.SIMPLE_HEAVY,
    )
    table.add_column("Table", style="bold cyan")
    table.add_column("Percent", justify="right")
    table.add_column("Row bytes", justify="right")
    table.add_column("Table bytes", justify="right")
    table.add_column("Rows", justify="right", style="green")

    for entry in plan:
        table.add_row(
            entry.table,
            f"{entry.percent_size}",
            f"{entry.row_size_bytes:,}",
            f"{entry.table_size_bytes:,}",
            f"{entry.row_count:,}",
        )
    return table


def render_plan(export_file: ExportFile, console: Optional[Console] = None) -> None:
    """Print the per-table sizing plan for one output file."""
    console = console or Console()
    console.print(build_plan_table(export_file, export_file.plan()))


def render_generation_summary(
    paths: List[Path],
    stats: ProfileStats,
    schema_path: Optional[Path] = None,
    console: Optional[Console] = None,
) -> None:
    """Print written files with their sizes, followed by timing and memory."""
    console = console or Console()
    table = Table(title="Generated files", box=box.SIMPLE_HEAVY)
    table.add_column("File", style="bold cyan")
    table.add_column("Size", justify="right")

    total = 0
    for path in paths:
        size = path.stat().st_size
        total += size
        table.add_row(str(path), _format_bytes(size))

    console.print(table)
    console.print(
        f"Wrote {len(paths)} file(s), {_format_bytes(total)} in {stats.duration_seconds:.2f}s "
        f"(peak RSS {_format_bytes(stats.peak_rss_bytes)})"
    )
    if schema_path is not None:
        console.print(f"Schema written to {schema_path}")


__all__ = ["build_plan_table", "render_generation_summary", "render_plan"]
