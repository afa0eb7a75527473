"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from shortstory.config import ShortStorySettings, reset_settings, set_settings
from shortstory.timing import (
    InMemoryTableSource,
    TimingConfig,
    load_timing_config,
    reset_timing_config,
)
from tests.utils import SAMPLE_STORY, TIMING_TABLES, write_timing_tables


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary stories directory for every test."""
    for name in ("STORIES_DIR", "CONFIG_DIR", "DEBUG", "LOG_LEVEL"):
        monkeypatch.delenv(f"SHORTSTORY_{name}", raising=False)

    stories_dir = tmp_path / "Stories"
    stories_dir.mkdir()
    settings = ShortStorySettings(stories_dir=stories_dir, project_dir=tmp_path)
    set_settings(settings)

    yield settings

    reset_settings()
    reset_timing_config()


@pytest.fixture
def stories_dir(isolated_settings) -> Path:
    """The temporary stories directory."""
    return isolated_settings.stories_dir


@pytest.fixture
def timing() -> TimingConfig:
    """Timing configuration loaded from the standard in-memory tables."""
    return load_timing_config(InMemoryTableSource(TIMING_TABLES))


@pytest.fixture
def sample_story_file(stories_dir) -> Path:
    """The sample story written to ``<stories>/lighthouse.tos``."""
    path = stories_dir / "lighthouse.tos"
    path.write_text(SAMPLE_STORY, encoding="utf-8")
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def sample_story_text() -> str:
    """Source of the sample two-screen story."""
    return SAMPLE_STORY


@pytest.fixture
def timing_dir(stories_dir) -> Path:
    """Standard timing tables written as CSV into ``<stories>/Config``."""
    directory = stories_dir / "Config"
    write_timing_tables(directory)
    return directory
