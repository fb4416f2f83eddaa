"""
CLI settings using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with DEEPFUSE_ prefix
3. .env file (if DEEPFUSE_ENV_FILE points at one)

Default merge options use the double underscore delimiter:
  DEEPFUSE_MERGE__APPEND_ARRAYS=true
  DEEPFUSE_MERGE__DEDUP_ARRAYS=true
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import deepfuse.config.types as types
import deepfuse.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only DEEPFUSE_ENV_FILE is honored; if it is set but missing, no .env is
    loaded rather than silently falling back.
    """
    if env_file := _os.environ.get("DEEPFUSE_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class CliSettings(_pydantic_settings.BaseSettings):
    """
    Settings for the deepfuse command.

    All settings can be overridden via environment variables with the
    DEEPFUSE_ prefix. Command-line flags take precedence over both.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    output_format: _typing.Literal["json", "yaml"] = "yaml"
    """Serialization format of the merged document."""

    indent: int = _pydantic.Field(default=2, ge=0, le=8)
    """Indentation width for the output."""

    log_level: _typing.Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    """Log level used when --verbose is not given."""

    color: bool | None = None
    """Force color on/off; None auto-detects a terminal."""

    merge: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)
    """Default merge options, layered under command-line flags."""

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "CliSettings":
        """Create settings from environment variables only, without loading .env."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    def merge_settings(self) -> types.MergeSettings:
        """
        Resolve the default merge options.

        Raises:
            pydantic.ValidationError: If an option value is malformed.
        """
        return types.MergeSettings().layer(self.merge)
