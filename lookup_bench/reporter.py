from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

_HEADLINES = {
    "lookup": "aggregate lookup",
    "lookup_pipeline": "aggregate lookup pipeline",
}


def headline(result: Dict[str, Any]) -> str:
    """The one-line console report for a strategy, in whole seconds."""
    what = _HEADLINES.get(result.get("strategy", ""), result.get("strategy", "unknown"))
    return f"It took {result.get('elapsed_seconds', 0)} seconds to get the data with {what}"


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render lookup results as a rich table, in execution order.

    Unlike the headline, durations here keep sub-second precision.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="Mongo Lookup Benchmark Results",
        box=box.ROUNDED,
        caption="Duration covers aggregation and full cursor materialization",
    )

    table.add_column("Strategy", style="cyan", no_wrap=True)
    table.add_column("Parents", justify="right", style="magenta")
    table.add_column("Children", justify="right", style="magenta")
    table.add_column("Duration (s)", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    table.add_column("Output", style="dim")

    for res in results:
        mem_bytes = res.get("peak_rss_bytes") or 0
        cpu = res.get("cpu_percent") or 0.0
        table.add_row(
            res.get("strategy", "Unknown"),
            f"{res.get('documents', 0):,}",
            f"{res.get('children', 0):,}",
            f"{res.get('duration_seconds', 0.0):.4f}",
            f"{mem_bytes / (1024 * 1024):.2f}",
            f"{cpu:.1f}",
            res.get("output", ""),
        )

    console.print(table)
