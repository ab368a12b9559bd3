"""
ⒸAngelaMos | 2026
report/markdown.py
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from infosphere.core.config import MarkdownStyle, Thresholds
from infosphere.models import Rating
from infosphere.report.rating import count_ratings, format_number, format_sphericity, rate

if TYPE_CHECKING:
    from infosphere.models import AnalysisResult


def render_markdown(result: AnalysisResult) -> str:
    """
    Full report: hotspots lowest sphericity first, then a rating summary
    """
    shown = result.thresholds or Thresholds()
    lines = [
        "# Information Sphere Report",
        f"Alpha: {format_number(result.alpha)}",
        f"Thresholds: good > {format_number(shown.good)}, warning > {format_number(shown.warning)}",
        "",
        "## Hotspots (lowest sphericity first)",
    ]

    for m in result.results:
        rating = rate(m.s, result.thresholds)
        lines.append(f"- **module** `{m.file}` — S={format_sphericity(m.s)} — **{rating.value}**")
        lines.append(f"  - V: {format_number(m.V)}, A: {format_number(m.A)}")

    counts = count_ratings(result.results, result.thresholds)
    lines.extend([
        "",
        "## Summary",
        f"- Good: {counts[Rating.GOOD]}",
        f"- Warning: {counts[Rating.WARNING]}",
        f"- Collapse: {counts[Rating.COLLAPSE]}",
    ])
    return "\n".join(lines)


def render_markdown_simple(result: AnalysisResult) -> str:
    """
    One line per module
    """
    lines = [
        "# Information Sphere Report",
        "",
        f"Alpha: {format_number(result.alpha)}",
        "",
    ]
    for m in result.results:
        rating = rate(m.s, result.thresholds)
        lines.append(f"- {m.file} — S={format_sphericity(m.s)} — {rating.value}")
    return "\n".join(lines)


def write_markdown_report(
    result: AnalysisResult,
    path: Path,
    style: MarkdownStyle = MarkdownStyle.FULL,
) -> Path:
    """
    Write the Markdown report in the requested style
    """
    text = render_markdown_simple(result) if style == MarkdownStyle.SIMPLE else render_markdown(result)
    path.parent.mkdir(parents = True, exist_ok = True)
    path.write_text(text, encoding = "utf-8")
    return path
