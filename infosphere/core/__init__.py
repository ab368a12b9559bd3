"""
ⒸAngelaMos | 2026
core/__init__.py
"""
from infosphere.core.config import (
    ConfigError,
    MarkdownStyle,
    ReportSettings,
    SphereSettings,
    Thresholds,
    Weights,
    load_settings,
)
from infosphere.core.logging import configure_logging, get_logger


__all__ = [
    "ConfigError",
    "MarkdownStyle",
    "ReportSettings",
    "SphereSettings",
    "Thresholds",
    "Weights",
    "configure_logging",
    "get_logger",
    "load_settings",
]
