"""Tests for configuration loading."""

from pathlib import Path

import pytest
from notesite.config import CONFIG_FILENAME, Config


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_missing_file__raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "missing.toml")

    def test__no_file_found__defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        config = Config.load()

        assert config.site.source_dir == Path(".")
        assert config.site.dest_dir == Path("_public")
        assert config.site.edit_url is None
        assert config.server.port == 3000
        assert config.live_reload.enabled is True
        assert config.live_reload.debounce_ms == 100
        assert config.templates.dir is None
        assert config.config_path is None

    def test__discovered_in_parent__loaded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text('[server]\nport = 4000\n')
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)

        config = Config.load()

        assert config.server.port == 4000
        assert config.config_path == tmp_path / CONFIG_FILENAME

    def test__empty_file__site_relative_to_config(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")

        config = Config.load(path)

        assert config.site.source_dir == tmp_path
        assert config.site.dest_dir == tmp_path / "_public"

    def test__full_file__parsed(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(
            """
[site]
source_dir = "notes"
dest_dir = "out"
edit_url = "https://example.com/edit/"

[server]
host = "0.0.0.0"
port = 8000

[build]
threads = 3
queue_size = 9

[live_reload]
enabled = false
debounce_ms = 250

[templates]
dir = "theme"
""",
        )

        config = Config.load(path)

        assert config.site.source_dir == tmp_path / "notes"
        assert config.site.dest_dir == tmp_path / "out"
        assert config.site.edit_url == "https://example.com/edit/"
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8000
        assert config.build.threads == 3
        assert config.build.queue_size == 9
        assert config.live_reload.enabled is False
        assert config.live_reload.debounce_ms == 250
        assert config.templates.dir == tmp_path / "theme"

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("site = 1", "site section must be a dictionary"),
            ('[site]\nsource_dir = 1', "site.source_dir must be a string"),
            ("[site]\nedit_url = true", "site.edit_url must be a string"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("[build]\nthreads = 0", "build.threads must be a positive integer"),
            ('[build]\nqueue_size = "x"', "build.queue_size must be a positive integer"),
            ('[live_reload]\nenabled = "yes"', "live_reload.enabled must be a boolean"),
            ("[live_reload]\ndebounce_ms = -1", "live_reload.debounce_ms must be a non-negative integer"),
            ("[templates]\ndir = 3", "templates.dir must be a string"),
            ("not toml [", "Invalid TOML"),
        ],
    )
    def test__invalid_value__raises_value_error(self, tmp_path: Path, content: str, message: str) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(path)


class TestConfigWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__no_overrides__equal(self) -> None:
        config = Config()

        assert config.with_overrides() == config

    def test__overrides__applied_without_mutating(self) -> None:
        config = Config()

        updated = config.with_overrides(
            source_dir=Path("src"),
            port=9000,
            threads=2,
            live_reload_enabled=False,
        )

        assert updated.site.source_dir == Path("src")
        assert updated.site.dest_dir == config.site.dest_dir
        assert updated.server.port == 9000
        assert updated.server.host == config.server.host
        assert updated.build.threads == 2
        assert updated.live_reload.enabled is False
        assert config.server.port == 3000
        assert config.live_reload.enabled is True
