"""Tests for CliSettings environment loading."""

import pathlib as _pathlib

import pydantic as _pydantic
import pytest as _pytest

import deepfuse.config as config


class TestCliSettingsDefaults:
    """Tests for defaults without environment."""

    def test_defaults(self) -> None:
        """Without DEEPFUSE_* variables the defaults apply."""
        settings = config.CliSettings.construct_without_dotenv()
        assert settings.output_format == "yaml"
        assert settings.indent == 2
        assert settings.log_level == "WARNING"
        assert settings.color is None
        assert settings.merge == {}

    def test_default_merge_settings(self) -> None:
        """Empty merge options resolve to default MergeSettings."""
        settings = config.CliSettings.construct_without_dotenv()
        assert settings.merge_settings() == config.MergeSettings()


class TestCliSettingsEnvironment:
    """Tests for DEEPFUSE_ environment variables."""

    def test_scalar_fields(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Top-level fields read DEEPFUSE_<FIELD>."""
        monkeypatch.setenv("DEEPFUSE_OUTPUT_FORMAT", "json")
        monkeypatch.setenv("DEEPFUSE_INDENT", "4")
        monkeypatch.setenv("DEEPFUSE_COLOR", "false")
        settings = config.CliSettings.construct_without_dotenv()
        assert settings.output_format == "json"
        assert settings.indent == 4
        assert settings.color is False

    def test_nested_merge_options(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Merge options use the double underscore delimiter."""
        monkeypatch.setenv("DEEPFUSE_MERGE__APPEND_ARRAYS", "true")
        monkeypatch.setenv("DEEPFUSE_MERGE__DEDUP_ARRAYS", "1")
        merge_settings = config.CliSettings.construct_without_dotenv().merge_settings()
        assert merge_settings.append_arrays is True
        assert merge_settings.dedup_arrays is True

    def test_invalid_format_rejected(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Unknown output formats fail validation."""
        monkeypatch.setenv("DEEPFUSE_OUTPUT_FORMAT", "toml")
        with _pytest.raises(_pydantic.ValidationError):
            config.CliSettings.construct_without_dotenv()

    def test_indent_range(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Indent is bounded."""
        monkeypatch.setenv("DEEPFUSE_INDENT", "12")
        with _pytest.raises(_pydantic.ValidationError):
            config.CliSettings.construct_without_dotenv()

    def test_constructor_beats_environment(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Explicit arguments take precedence over the environment."""
        monkeypatch.setenv("DEEPFUSE_INDENT", "4")
        settings = config.CliSettings.construct_without_dotenv(indent=0)
        assert settings.indent == 0


class TestCliSettingsDotenv:
    """Tests for .env loading."""

    def test_env_file(self, tmp_path: _pathlib.Path) -> None:
        """Values are read from an explicit env file."""
        env_file = tmp_path / "deepfuse.env"
        env_file.write_text("DEEPFUSE_OUTPUT_FORMAT=json\nDEEPFUSE_MERGE__SORT_ARRAYS=true\n")
        settings = config.CliSettings(_env_file=env_file)  # type: ignore[call-arg]
        assert settings.output_format == "json"
        assert settings.merge_settings().sort_arrays is True
