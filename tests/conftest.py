"""Shared test fixtures."""

from pathlib import Path

import pytest
from notesite.config import Config, LiveReloadConfig, SiteConfig
from notesite.core.site import SiteRenderer
from notesite.core.templates import TemplateRegistry


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Create an empty notes source directory."""
    source = tmp_path / "notes"
    source.mkdir(exist_ok=True)
    return source


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Destination path for builds (not created)."""
    return tmp_path / "public"


@pytest.fixture
def renderer(source_dir: Path) -> SiteRenderer:
    """Create a renderer over the source directory with packaged templates."""
    return SiteRenderer(source_dir, TemplateRegistry())


@pytest.fixture
def test_config(source_dir: Path, dest_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Live reload is disabled; tests that need it enable it explicitly.
    """
    return Config(
        site=SiteConfig(source_dir=source_dir, dest_dir=dest_dir),
        live_reload=LiveReloadConfig(enabled=False),
    )
