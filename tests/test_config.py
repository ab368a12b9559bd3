"""Tests for core/config.py - run settings from files, env and overrides."""

import pytest

from infosphere.core.config import (
    ConfigError,
    MarkdownStyle,
    SphereSettings,
    Thresholds,
    Weights,
    find_config_file,
    load_config_file,
    load_settings,
    merge_configs,
)


class TestDefaults:
    """Values used when nothing is configured."""

    def test_defaults(self, tmp_path):
        settings = load_settings(root=tmp_path)

        assert settings.root == tmp_path
        assert settings.include == ["src/**/*.ts"]
        assert settings.exclude == []
        assert settings.alpha == 1.8
        assert settings.weights == Weights()
        assert settings.thresholds == Thresholds(good=10, warning=3)
        assert settings.report.json_path == "sphere-report.json"
        assert settings.report.markdown_path == "sphere-report.md"

    def test_default_weights(self):
        w = Weights()
        assert (w.private_method, w.internal_call, w.internal_type) == (1, 1, 2)
        assert (w.exported_symbol, w.public_method, w.external_import, w.outgoing_call) == (3, 2, 2, 2)

    def test_settings_are_immutable(self, tmp_path):
        settings = load_settings(root=tmp_path)
        with pytest.raises(Exception):
            settings.alpha = 2.0


class TestConfigFiles:
    """Reading sphere.config.json and YAML variants."""

    def test_json_config_with_camel_case_weights(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text(
            '{"include": ["app/**/*.ts"], "alpha": 2, "weights": {"privateMethod": 4, "exportedSymbol": 1}}'
        )
        settings = load_settings(root=tmp_path)

        assert settings.include == ["app/**/*.ts"]
        assert settings.alpha == 2
        assert settings.weights.private_method == 4
        assert settings.weights.exported_symbol == 1
        assert settings.weights.public_method == 2

    def test_yaml_config(self, tmp_path):
        (tmp_path / "sphere.config.yaml").write_text(
            "exclude: src/generated/**\nthresholds:\n  good: 20\n  warning: 5\n"
            "report:\n  markdown_style: simple\n"
        )
        settings = load_settings(root=tmp_path)

        assert settings.exclude == ["src/generated/**"]
        assert settings.thresholds == Thresholds(good=20, warning=5)
        assert settings.report.markdown_style == MarkdownStyle.SIMPLE

    def test_json_preferred_over_yaml(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text("{}")
        (tmp_path / "sphere.config.yaml").write_text("alpha: 3\n")
        assert find_config_file(tmp_path).name == "sphere.config.json"

    def test_null_thresholds(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text('{"thresholds": null}')
        assert load_settings(root=tmp_path).thresholds is None

    def test_empty_json_file(self, tmp_path):
        path = tmp_path / "sphere.config.json"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_malformed_json(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Malformed"):
            load_settings(root=tmp_path)

    def test_non_mapping(self, tmp_path):
        (tmp_path / "sphere.config.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(root=tmp_path)

    def test_invalid_values(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text('{"alpha": -1}')
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(root=tmp_path)

    def test_unknown_weight_rejected(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text('{"weights": {"bogus": 1}}')
        with pytest.raises(ConfigError):
            load_settings(root=tmp_path)

    def test_explicit_missing_config(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(root=tmp_path, config_path="custom.json")

    def test_explicit_config_relative_to_root(self, tmp_path):
        (tmp_path / "custom.yml").write_text("alpha: 1.2\n")
        assert load_settings(root=tmp_path, config_path="custom.yml").alpha == 1.2


class TestPriority:
    """Overrides beat the file, the file beats the environment."""

    def test_overrides_win(self, tmp_path):
        (tmp_path / "sphere.config.json").write_text('{"alpha": 2, "report": {"json": "out.json"}}')
        settings = load_settings(root=tmp_path, alpha=3, report={"markdown": "out.md"})

        assert settings.alpha == 3
        assert settings.report.json_path == "out.json"
        assert settings.report.markdown_path == "out.md"

    def test_env_used_when_file_silent(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SPHERE_ALPHA", "2.5")
        assert load_settings(root=tmp_path).alpha == 2.5

    def test_file_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SPHERE_ALPHA", "2.5")
        (tmp_path / "sphere.config.json").write_text('{"alpha": 1.5}')
        assert load_settings(root=tmp_path).alpha == 1.5

    def test_direct_construction(self, tmp_path):
        settings = SphereSettings(root=str(tmp_path), include="lib/*.ts")
        assert settings.include == ["lib/*.ts"]


class TestMergeConfigs:
    """Deep merging of config dictionaries."""

    def test_nested_merge(self):
        base = {"weights": {"privateMethod": 2, "internalCall": 3}, "alpha": 1}
        override = {"weights": {"internalCall": 5}}
        assert merge_configs(base, override) == {
            "weights": {"privateMethod": 2, "internalCall": 5},
            "alpha": 1,
        }
