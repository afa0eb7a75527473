"""ShortStory configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortstory.exceptions import ConfigurationError, check_config_keys


class ShortStorySettings(BaseSettings):
    """ShortStory configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: shortstory list --stories-dir ./Content/Stories

    2. Config file values (YAML, TOML, or JSON)
       Example: shortstory --config shortstory.yaml
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with SHORTSTORY_)
       Example: export SHORTSTORY_MAX_LINE_LENGTH=60

    4. .env file (in current directory or specified path)

    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="SHORTSTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Story locations
    stories_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "Stories",
        description="Root directory that holds .tos story files",
    )
    config_dir: Path | None = Field(
        default=None,
        description="Directory with timing tables (defaults to <stories_dir>/Config)",
    )
    project_dir: Path = Field(
        default_factory=Path.cwd,
        description="Project root, last fallback when resolving background paths",
    )
    story_extension: str = Field(
        default=".tos",
        description="File extension of story files",
        pattern=r"^\.[A-Za-z0-9_]+$",
    )

    # Parsing
    max_line_length: int = Field(
        default=80,
        description="Maximum characters per displayed line before wrapping",
        ge=20,
        le=300,
    )
    asset_path_prefixes: list[str] = Field(
        default_factory=lambda: ["/Game", "/Engine"],
        description="Prefixes that mark a background as a virtual asset reference",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    @field_validator(
        "stories_dir", "config_dir", "project_dir", "log_file", mode="before"
    )
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and user home, then resolve the path."""
        if v is None:
            return None
        if isinstance(v, str):
            return Path(os.path.expandvars(v)).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        raise ValueError(
            f"Path fields must be string or Path, got {type(v).__name__}: {v!r}"
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Normalize log format to lowercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"log_format must be a string, got {type(v).__name__}")

    @property
    def config_directory(self) -> Path:
        """Directory holding the timing tables."""
        return self.config_dir or self.stories_dir / "Config"

    @classmethod
    def from_env(cls) -> ShortStorySettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ShortStorySettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> ShortStorySettings:
        """Load settings with proper precedence from multiple sources.

        Args:
            config_files: Config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        for config_file in config_files or []:
            try:
                file_settings = cls.from_file(config_file)
            except FileNotFoundError:
                from shortstory.config.logging import get_logger as _get_logger

                _get_logger("shortstory.config.settings").warning(
                    "Configuration file not found, using defaults",
                    config_file=str(config_file),
                )
                continue
            data.update(file_settings.model_dump(exclude_unset=True))

        if env_file:
            settings = cast(
                "ShortStorySettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: ShortStorySettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Get existing config files, lowest priority first."""
    potential_paths = [
        Path.home() / ".config" / "shortstory" / "config.yaml",
        Path.home() / ".config" / "shortstory" / "config.toml",
        Path.cwd() / "shortstory.yaml",
        Path.cwd() / "shortstory.toml",
        Path.cwd() / "shortstory.json",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> ShortStorySettings:
    """Get the global settings instance.

    Returns:
        Global ShortStorySettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = ShortStorySettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = ShortStorySettings.from_env()
    return _settings


def set_settings(settings: ShortStorySettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Clear the global settings cache.

    Forces get_settings() to re-read environment variables and configuration
    files on the next call.
    """
    global _settings
    _settings = None


def reset_settings() -> None:
    """Reset the global settings instance."""
    clear_settings_cache()


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ShortStorySettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: CLI argument overrides; only non-None values are applied.

    Returns:
        ShortStorySettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return ShortStorySettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered_overrides:
            data = settings.model_dump()
            data.update(filtered_overrides)
            settings = ShortStorySettings(**data)
    return settings
