"""Tests for configuration loading and merging."""

import pytest

from docdelta.config import AnalysisConfig, ScoringConfig, load_config
from docdelta.exceptions import ConfigurationError


class TestDefaults:
    def test_default_values(self):
        config = load_config()
        assert config.max_concurrent_reads == 64
        assert config.verbosity == "normal"
        assert config.scoring == ScoringConfig()
        assert ".git" in config.exclude_dirs
        assert config.cache_ttl_seconds == 24 * 3600

    def test_validation(self):
        with pytest.raises(ValueError):
            AnalysisConfig(max_concurrent_reads=0)
        with pytest.raises(ValueError):
            AnalysisConfig(markdown_extensions=["md"])


class TestMerging:
    def test_project_file_then_env_then_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "docdelta.toml").write_text(
            "max_concurrent_reads = 8\n"
            "cache_enabled = false\n"
            "disabled_detectors = [\"todos\"]\n"
            "\n[scoring]\nhigh_penalty = 20\n"
        )
        monkeypatch.setenv("DOCDELTA_MAX_CONCURRENT_READS", "16")

        config = load_config()
        assert config.max_concurrent_reads == 16
        assert config.cache_enabled is False
        assert config.disabled_detectors == ["todos"]
        assert config.scoring.high_penalty == 20
        assert config.scoring.low_penalty == 2

        overridden = load_config(max_concurrent_reads=4, verbose=True)
        assert overridden.max_concurrent_reads == 4
        assert overridden.verbosity == "verbose"

    def test_global_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".docdelta.toml").write_text('cache_dir = "/tmp/dd-cache"\n')
        assert load_config().cache_dir == "/tmp/dd-cache"

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("enable_history = false\n")
        assert load_config(config_file=path).enable_history is False

    def test_quiet_flag(self):
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(quiet=False).verbosity == "normal"


class TestErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("this is = = not toml")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "unknown.toml"
        path.write_text("no_such_option = 1\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("max_files = 0\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_invalid_scoring(self, tmp_path):
        path = tmp_path / "scoring.toml"
        path.write_text("[scoring]\nhigh_penalty = -5\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("DOCDELTA_CACHE_ENABLED", "maybe")
        with pytest.raises(ConfigurationError):
            load_config()
