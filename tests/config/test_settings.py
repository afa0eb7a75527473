"""Tests for the settings configuration module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from shortstory.config import (
    ShortStorySettings,
    clear_settings_cache,
    get_settings,
    get_settings_for_cli,
    set_settings,
)
from shortstory.exceptions import ConfigurationError


class TestShortStorySettings:
    """Test field defaults and validation."""

    def test_default_values(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = ShortStorySettings()

        assert settings.stories_dir == (tmp_path / "Stories").resolve()
        assert settings.config_dir is None
        assert settings.config_directory == settings.stories_dir / "Config"
        assert settings.story_extension == ".tos"
        assert settings.max_line_length == 80
        assert settings.asset_path_prefixes == ["/Game", "/Engine"]
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.debug is False

    def test_explicit_config_dir(self, tmp_path):
        settings = ShortStorySettings(stories_dir=tmp_path, config_dir=tmp_path / "T")
        assert settings.config_directory == (tmp_path / "T").resolve()

    @pytest.mark.parametrize("value", [19, 301])
    def test_max_line_length_bounds(self, value):
        with pytest.raises(ValidationError):
            ShortStorySettings(max_line_length=value)

    def test_invalid_story_extension(self):
        with pytest.raises(ValidationError):
            ShortStorySettings(story_extension="tos")

    def test_log_level_and_format_are_normalized(self):
        settings = ShortStorySettings(log_level="debug", log_format="JSON")
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ShortStorySettings(log_level="LOUD")

    def test_path_expansion(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STORY_ROOT", str(tmp_path))
        settings = ShortStorySettings(stories_dir="$STORY_ROOT/Stories")
        assert settings.stories_dir == (tmp_path / "Stories").resolve()

    def test_environment_variable_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHORTSTORY_STORIES_DIR", str(tmp_path))
        monkeypatch.setenv("SHORTSTORY_MAX_LINE_LENGTH", "60")
        monkeypatch.setenv("SHORTSTORY_DEBUG", "true")

        settings = ShortStorySettings.from_env()
        assert settings.stories_dir == tmp_path.resolve()
        assert settings.max_line_length == 60
        assert settings.debug is True


class TestFromFile:
    """Test loading settings from configuration files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "shortstory.yaml"
        path.write_text(
            yaml.safe_dump({"stories_dir": str(tmp_path), "max_line_length": 40})
        )
        settings = ShortStorySettings.from_file(path)
        assert settings.stories_dir == tmp_path.resolve()
        assert settings.max_line_length == 40

    def test_toml(self, tmp_path):
        path = tmp_path / "shortstory.toml"
        path.write_text('story_extension = ".story"\nlog_level = "info"\n')
        settings = ShortStorySettings.from_file(path)
        assert settings.story_extension == ".story"
        assert settings.log_level == "INFO"

    def test_json(self, tmp_path):
        path = tmp_path / "shortstory.json"
        path.write_text(json.dumps({"asset_path_prefixes": ["/Content"]}))
        settings = ShortStorySettings.from_file(path)
        assert settings.asset_path_prefixes == ["/Content"]

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ShortStorySettings.from_file(path).max_line_length == 80

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ShortStorySettings.from_file(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[x]\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ShortStorySettings.from_file(path)
        assert exc_info.value.message == "Unsupported configuration file format: .ini"
        assert exc_info.value.hint is not None

    def test_misnamed_key_gets_a_hint(self, tmp_path):
        path = tmp_path / "shortstory.yaml"
        path.write_text(yaml.safe_dump({"stories_path": str(tmp_path)}))
        with pytest.raises(ConfigurationError) as exc_info:
            ShortStorySettings.from_file(path)
        assert exc_info.value.hint == "Use 'stories_dir' instead of 'stories_path'"
        assert "Hint:" in str(exc_info.value)


class TestFromMultipleSources:
    """Test precedence when merging sources."""

    def test_later_files_override_earlier(self, tmp_path):
        first = tmp_path / "a.yaml"
        second = tmp_path / "b.toml"
        first.write_text(yaml.safe_dump({"max_line_length": 40, "debug": True}))
        second.write_text("max_line_length = 50\n")

        settings = ShortStorySettings.from_multiple_sources(
            config_files=[first, second]
        )
        assert settings.max_line_length == 50
        assert settings.debug is True

    def test_missing_files_are_skipped(self, tmp_path):
        settings = ShortStorySettings.from_multiple_sources(
            config_files=[tmp_path / "missing.yaml"]
        )
        assert settings.max_line_length == 80

    def test_cli_args_win_and_none_is_ignored(self, tmp_path):
        path = tmp_path / "a.yaml"
        path.write_text(yaml.safe_dump({"max_line_length": 40, "log_level": "ERROR"}))

        settings = ShortStorySettings.from_multiple_sources(
            config_files=[path],
            cli_args={"max_line_length": 100, "log_level": None},
        )
        assert settings.max_line_length == 100
        assert settings.log_level == "ERROR"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("SHORTSTORY_MAX_LINE_LENGTH=33\n")
        settings = ShortStorySettings.from_multiple_sources(env_file=env_file)
        assert settings.max_line_length == 33


class TestGlobalSettings:
    """Test the process-wide settings instance."""

    def test_set_and_get(self, tmp_path):
        settings = ShortStorySettings(stories_dir=tmp_path)
        set_settings(settings)
        assert get_settings() is settings

    def test_clear_cache_rereads_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHORTSTORY_MAX_LINE_LENGTH", "55")
        clear_settings_cache()
        assert get_settings().max_line_length == 55
        assert get_settings() is get_settings()

    def test_project_config_file_is_discovered(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        Path("shortstory.yaml").write_text(yaml.safe_dump({"max_line_length": 42}))
        clear_settings_cache()
        assert get_settings().max_line_length == 42

    def test_settings_for_cli_overrides(self, isolated_settings):
        settings = get_settings_for_cli(cli_overrides={"max_line_length": 120})
        assert settings.max_line_length == 120
        assert settings.stories_dir == isolated_settings.stories_dir
        assert get_settings().max_line_length == 80

    def test_settings_for_cli_with_file(self, tmp_path):
        path = tmp_path / "cli.yaml"
        path.write_text(yaml.safe_dump({"max_line_length": 70}))
        settings = get_settings_for_cli(
            config_file=path, cli_overrides={"debug": True}
        )
        assert settings.max_line_length == 70
        assert settings.debug is True

    def test_settings_for_cli_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_settings_for_cli(config_file=tmp_path / "missing.yaml")
