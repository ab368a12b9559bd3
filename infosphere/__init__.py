"""
ⒸAngelaMos | 2026
__init__.py
"""
from infosphere.core import (
    ConfigError,
    SphereSettings,
    Thresholds,
    Weights,
    configure_logging,
    get_logger,
    load_settings,
)
from infosphere.models import (
    AnalysisResult,
    Language,
    ModuleMetrics,
    Rating,
)

__version__ = "0.1.0"
__all__ = [
    "AnalysisResult",
    "ConfigError",
    "Language",
    "ModuleMetrics",
    "Rating",
    "SphereSettings",
    "Thresholds",
    "Weights",
    "__version__",
    "configure_logging",
    "get_logger",
    "load_settings",
]
