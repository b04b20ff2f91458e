"""
Test cases for configuration loading
"""

from pathlib import Path

import pytest

from callchain.config import LOG_LEVEL_ENV, AnalyzerConfig, find_config, load_config
from callchain.errors import ConfigError


class TestLoadConfig:
    """YAML configuration in the workspace root"""

    def setup_method(self):
        self.defaults = AnalyzerConfig()

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        config = load_config(tmp_path)

        assert config == self.defaults
        assert config.walker.max_depth == 64
        assert config.noise.framework_roots == ["builtins"]
        assert config.log_level == "WARNING"

    def test_sections_are_loaded(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        (tmp_path / "callchain.yaml").write_text(
            "noise:\n"
            "  framework_roots: [builtins, django]\n"
            "  include_stdlib: false\n"
            "entry:\n"
            "  controller_marker: View\n"
            "walker:\n"
            "  max_depth: 12\n"
            "  expand_repeated_paths: true\n"
            "workspace:\n"
            "  exclude_dirs: [migrations]\n"
            "log_level: debug\n"
        )

        config = load_config(tmp_path)

        assert config.noise.framework_roots == ["builtins", "django"]
        assert not config.noise.include_stdlib
        assert config.entry.controller_marker == "View"
        assert config.walker.max_depth == 12
        assert config.walker.expand_repeated_paths
        assert not config.walker.unify_property_dependencies
        assert config.workspace.exclude_dirs == ["migrations"]
        assert config.log_level == "DEBUG"

    def test_hidden_file_name(self, tmp_path: Path):
        (tmp_path / ".callchain.yaml").write_text("walker:\n  max_depth: 3\n")

        assert find_config(tmp_path) == tmp_path / ".callchain.yaml"
        assert load_config(tmp_path).walker.max_depth == 3

    def test_environment_overrides_log_level(self, tmp_path: Path, monkeypatch):
        (tmp_path / "callchain.yaml").write_text("log_level: ERROR\n")
        monkeypatch.setenv(LOG_LEVEL_ENV, "info")

        assert load_config(tmp_path).log_level == "INFO"

    def test_invalid_values_raise(self, tmp_path: Path):
        (tmp_path / "callchain.yaml").write_text("walker:\n  max_depth: 0\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_log_level_raises(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_non_mapping_raises(self, tmp_path: Path):
        (tmp_path / "callchain.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_malformed_yaml_raises(self, tmp_path: Path):
        (tmp_path / "callchain.yaml").write_text("walker: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)
