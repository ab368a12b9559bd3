"""
ⒸAngelaMos | 2026
report/__init__.py
"""
from infosphere.report.console import print_report
from infosphere.report.json_report import build_json_report, render_json, write_json_report
from infosphere.report.markdown import render_markdown, render_markdown_simple, write_markdown_report
from infosphere.report.rating import count_ratings, format_sphericity, rate


__all__ = [
    "build_json_report",
    "count_ratings",
    "format_sphericity",
    "print_report",
    "rate",
    "render_json",
    "render_markdown",
    "render_markdown_simple",
    "write_json_report",
    "write_markdown_report",
]
