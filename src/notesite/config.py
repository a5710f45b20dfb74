"""Site configuration loaded from `notesite.toml`.

The file is looked up from the working directory upwards when no explicit
path is given. Relative paths in it are resolved against its own directory.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TypeVar

CONFIG_FILENAME = "notesite.toml"

_Section = TypeVar("_Section")


@dataclass
class SiteConfig:
    """Source and output locations."""

    source_dir: Path = field(default_factory=lambda: Path("."))
    dest_dir: Path = field(default_factory=lambda: Path("_public"))
    edit_url: str | None = None


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class BuildConfig:
    """Batch build configuration."""

    threads: int | None = None
    queue_size: int | None = None


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    debounce_ms: int = 100


@dataclass
class TemplatesConfig:
    """Template source configuration.

    When ``dir`` is None, the templates packaged with notesite are used.
    """

    dir: Path | None = None


@dataclass
class Config:
    """Everything read from a `notesite.toml` file, with defaults filled in."""

    site: SiteConfig = field(default_factory=SiteConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    live_reload: LiveReloadConfig = field(default_factory=LiveReloadConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Read configuration, discovering the file when no path is given.

        Args:
            config_path: Explicit file to read; skips discovery

        Returns:
            Parsed Config, or all defaults when no file is found by discovery

        Raises:
            FileNotFoundError: If ``config_path`` is given but missing
            ValueError: If the file is not valid TOML or a value has the wrong type
        """
        if config_path is None:
            config_path = find_config_file(Path.cwd())
            if config_path is None:
                return cls()
        elif not config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls.from_file(config_path)

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Parse one configuration file.

        Raises:
            ValueError: If the file is not valid TOML or a value has the wrong type
        """
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        base = path.parent
        return cls(
            site=cls._parse_site(data.get("site"), base),
            server=cls._parse_server(_section(data, "server")),
            build=cls._parse_build(_section(data, "build")),
            live_reload=cls._parse_live_reload(_section(data, "live_reload")),
            templates=cls._parse_templates(_section(data, "templates"), base),
            config_path=path,
        )

    @classmethod
    def _parse_site(cls, data: object, base: Path) -> SiteConfig:
        # Without a [site] table the notes live next to the config file.
        if data is None:
            return SiteConfig(source_dir=base, dest_dir=base / "_public")
        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        return SiteConfig(
            source_dir=base / _string(data, "source_dir", "site", default="."),
            dest_dir=base / _string(data, "dest_dir", "site", default="_public"),
            edit_url=_string(data, "edit_url", "site"),
        )

    @classmethod
    def _parse_server(cls, data: dict) -> ServerConfig:
        return ServerConfig(
            host=_string(data, "host", "server", default=ServerConfig.host),
            port=_integer(data, "port", "server", default=ServerConfig.port),
        )

    @classmethod
    def _parse_build(cls, data: dict) -> BuildConfig:
        return BuildConfig(
            threads=_positive(data, "threads", "build"),
            queue_size=_positive(data, "queue_size", "build"),
        )

    @classmethod
    def _parse_live_reload(cls, data: dict) -> LiveReloadConfig:
        enabled = data.get("enabled", LiveReloadConfig.enabled)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        debounce_ms = _integer(data, "debounce_ms", "live_reload", default=LiveReloadConfig.debounce_ms)
        if debounce_ms < 0:
            raise ValueError("live_reload.debounce_ms must be a non-negative integer")

        return LiveReloadConfig(enabled=enabled, debounce_ms=debounce_ms)

    @classmethod
    def _parse_templates(cls, data: dict, base: Path) -> TemplatesConfig:
        template_dir = _string(data, "dir", "templates")
        if template_dir is None:
            return TemplatesConfig()
        return TemplatesConfig(dir=base / template_dir)

    def with_overrides(
        self,
        *,
        source_dir: Path | None = None,
        dest_dir: Path | None = None,
        host: str | None = None,
        port: int | None = None,
        threads: int | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Return a copy with command-line values applied.

        Arguments left as None keep the configured value; ``self`` is unchanged.
        """
        return replace(
            self,
            site=_updated(self.site, source_dir=source_dir, dest_dir=dest_dir),
            server=_updated(self.server, host=host, port=port),
            build=_updated(self.build, threads=threads),
            live_reload=_updated(self.live_reload, enabled=live_reload_enabled),
        )


def find_config_file(start: Path) -> Path | None:
    """Find the nearest `notesite.toml` in ``start`` or one of its parents."""
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _updated(section: _Section, **values: object) -> _Section:
    changes = {key: value for key, value in values.items() if value is not None}
    return replace(section, **changes) if changes else section


def _section(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"{name} section must be a dictionary")
    return value


def _string(data: dict, key: str, section: str, default: str | None = None) -> str | None:
    value = data.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{section}.{key} must be a string")
    return value


def _integer(data: dict, key: str, section: str, default: int) -> int:
    value = data.get(key, default)
    # bool is a subclass of int, but `port = true` is still a mistake
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{section}.{key} must be an integer")
    return value


def _positive(data: dict, key: str, section: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"{section}.{key} must be a positive integer")
    return value
