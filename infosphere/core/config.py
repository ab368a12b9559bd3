"""
ⒸAngelaMos | 2026
config.py
"""
from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import orjson
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


CONFIG_FILENAMES = (
    "sphere.config.json",
    "sphere.config.yaml",
    "sphere.config.yml",
)

PositiveFloat = Annotated[float, Field(gt = 0)]


class ConfigError(Exception):
    """
    Configuration source exists but cannot be used
    """


class Weights(BaseModel):
    """
    Multipliers converting raw feature counts into volume and area
    """
    model_config = ConfigDict(
        frozen = True,
        extra = "forbid",
        alias_generator = to_camel,
        populate_by_name = True,
    )

    private_method: PositiveFloat = 1
    internal_call: PositiveFloat = 1
    internal_type: PositiveFloat = 2
    exported_symbol: PositiveFloat = 3
    public_method: PositiveFloat = 2
    external_import: PositiveFloat = 2
    outgoing_call: PositiveFloat = 2


class Thresholds(BaseModel):
    """
    Sphericity cut-offs for the GOOD and WARNING ratings
    """
    model_config = ConfigDict(frozen = True, extra = "forbid")

    good: float = 10
    warning: float = 3


class MarkdownStyle(str, Enum):
    FULL = "full"
    SIMPLE = "simple"


class ReportSettings(BaseModel):
    """
    Output destinations for the downstream reporters
    """
    model_config = ConfigDict(frozen = True, extra = "ignore", populate_by_name = True)

    json_path: str | None = Field(default = "sphere-report.json", alias = "json")
    markdown_path: str | None = Field(default = "sphere-report.md", alias = "markdown")
    markdown_style: MarkdownStyle = MarkdownStyle.FULL


class SphereSettings(BaseSettings):
    """
    Resolved configuration for one analysis run
    Loads from sphere.config.json or YAML with env var overrides
    """
    model_config = SettingsConfigDict(
        env_prefix = "SPHERE_",
        env_nested_delimiter = "__",
        extra = "ignore",
        frozen = True,
    )

    debug: bool = False
    root: Path = Field(default_factory = Path.cwd)
    include: list[str] = Field(default_factory = lambda: ["src/**/*.ts"])
    exclude: list[str] = Field(default_factory = list)
    weights: Weights = Field(default_factory = Weights)
    alpha: PositiveFloat = 1.8
    thresholds: Thresholds | None = Field(default_factory = Thresholds)
    report: ReportSettings = Field(default_factory = ReportSettings)

    @field_validator("root", mode = "before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        """
        Expand ~ and environment variables in path
        """
        if isinstance(v, str):
            return Path(os.path.expanduser(os.path.expandvars(v)))
        return v

    @field_validator("include", "exclude", mode = "before")
    @classmethod
    def coerce_patterns(cls, v: Any) -> Any:
        """
        Accept a single pattern string where a list is expected
        """
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


def find_config_file(root: Path) -> Path | None:
    """
    Locate the first known config file in the working root
    """
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> dict:
    """
    Read and decode a JSON or YAML config file
    Raises ConfigError on unreadable or malformed content
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        if path.suffix == ".json":
            data = orjson.loads(raw) if raw.strip() else {}
        else:
            data = yaml.safe_load(raw) or {}
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def merge_configs(base: dict, override: dict) -> dict:
    """
    Deep merge two config dictionaries
    Override takes precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    root: Path | str | None = None,
    config_path: Path | str | None = None,
    **overrides,
) -> SphereSettings:
    """
    Load settings for a run from the config file and optional overrides

    Priority (highest to lowest):
    1. Explicit overrides passed to this function
    2. Config file (sphere.config.json, then sphere.config.yaml)
    3. Environment variables (SPHERE_ prefix)
    4. Default values

    A missing config file falls back to defaults, an explicitly named one
    that does not exist is an error.
    """
    root_path = Path(os.path.expanduser(os.path.expandvars(str(root)))) if root else Path.cwd()

    if config_path is not None:
        path = Path(os.path.expanduser(os.path.expandvars(str(config_path))))
        if not path.is_absolute():
            path = root_path / path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = find_config_file(root_path)

    file_config = load_config_file(path) if path is not None else {}

    merged = merge_configs(file_config, overrides)
    merged["root"] = root_path

    try:
        return SphereSettings(**merged)
    except ValidationError as e:
        source = str(path) if path is not None else "overrides"
        raise ConfigError(f"Invalid configuration ({source}): {e}") from e
