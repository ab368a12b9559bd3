"""
ⒸAngelaMos | 2026
models.py
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from infosphere.core.config import Thresholds


class Language(str, Enum):
    """
    Supported source languages for corpus analysis
    """
    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JAVASCRIPT = "javascript"


LANGUAGE_EXTENSIONS: dict[str, Language] = {
    ".ts": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".tsx": Language.TSX,
    ".js": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
}


class Rating(str, Enum):
    """
    Sphericity rating labels
    """
    GOOD = "GOOD"
    WARNING = "WARNING"
    COLLAPSE = "COLLAPSE"
    UNKNOWN = "UNKNOWN"


class ModuleMetrics(BaseModel):
    """
    Final shape metrics for one analyzed module
    Immutable once produced by the analyzer
    """
    model_config = ConfigDict(frozen = True)

    id: str
    file: str
    V: float
    A: float
    s: float
    cohesion: float = Field(ge = 0.0, le = 1.0)
    extras: dict[str, int] = Field(default_factory = dict)


class AnalysisResult(BaseModel):
    """
    Outcome of one analysis run, modules ordered by ascending sphericity
    """
    model_config = ConfigDict(frozen = True)

    results: tuple[ModuleMetrics, ...] = ()
    alpha: float
    thresholds: Thresholds | None = None
