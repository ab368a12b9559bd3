"""
ⒸAngelaMos | 2026
report/json_report.py
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from infosphere.report.rating import rate

if TYPE_CHECKING:
    from infosphere.models import AnalysisResult


def build_json_report(result: AnalysisResult) -> dict[str, Any]:
    """
    Report payload: run metadata plus every module annotated with its rating
    """
    return {
        "meta": {"alpha": result.alpha},
        "results": [
            {**m.model_dump(), "rating": rate(m.s, result.thresholds).value}
            for m in result.results
        ],
    }


def render_json(result: AnalysisResult) -> bytes:
    return orjson.dumps(build_json_report(result), option = orjson.OPT_INDENT_2)


def write_json_report(result: AnalysisResult, path: Path) -> Path:
    """
    Write the JSON report, creating parent directories as needed
    """
    path.parent.mkdir(parents = True, exist_ok = True)
    path.write_bytes(render_json(result))
    return path
