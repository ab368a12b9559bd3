"""
ⒸAngelaMos | 2026
report/console.py
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from infosphere.models import Rating
from infosphere.report.rating import format_number, format_sphericity, rate

if TYPE_CHECKING:
    from infosphere.models import AnalysisResult


RATING_STYLES: dict[Rating, str] = {
    Rating.GOOD: "green",
    Rating.WARNING: "yellow",
    Rating.COLLAPSE: "bold red",
    Rating.UNKNOWN: "dim",
}


def print_report(result: AnalysisResult, console: Console | None = None) -> None:
    """
    Print ranked hotspots, lowest sphericity first
    """
    console = console or Console()

    console.print()
    console.print("[bold]Information Sphere — Ranked hotspots (lowest S first)[/bold]")
    console.print(f"alpha = {format_number(result.alpha)}")
    console.print()

    if not result.results:
        console.print(
            "[yellow]No source files found by the analyzer. "
            "Check sphere.config.json include patterns.[/yellow]"
        )
        return

    for m in result.results:
        rating = rate(m.s, result.thresholds)
        style = RATING_STYLES[rating]
        console.print(f"Module: [cyan]{escape(m.file)}[/cyan]", highlight = False)
        console.print(f"  Internal cohesion (V): {format_number(m.V)}", highlight = False)
        console.print(f"  Public surface (A): {format_number(m.A)}", highlight = False)
        console.print(f"  Cohesion (calls internal / calls total): {m.cohesion:.3f}", highlight = False)
        console.print(
            f"  Sphericity (S): {format_sphericity(m.s)}  [{style}]{rating.value}[/{style}]",
            highlight = False,
        )
        console.print()

    console.print(f"Analyzed {len(result.results)} modules.")
