"""CLI interface for notesite.

Command-line tool for building and serving a site of Markdown notes.
"""

import logging
import sys
from pathlib import Path

import click

from notesite.config import Config
from notesite.core.resources import Directory, Note, walk_resources

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover notesite.toml)",
)

source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Notes source directory (overrides config)",
)

verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)


@click.group()
def cli() -> None:
    """notesite - render a tree of Markdown notes as HTML."""


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--dest-dir",
    "-d",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory, replaced on every build (overrides config)",
)
@click.option(
    "--threads",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of render threads (default: hardware thread count)",
)
@verbose_option
def build(
    config_path: Path | None,
    source_dir: Path | None,
    dest_dir: Path | None,
    threads: int | None,
    verbose: bool,
) -> None:
    """Render every note into the destination directory."""
    from notesite.core.pool import WorkerPool
    from notesite.core.site import SiteRenderer
    from notesite.core.templates import TemplateRegistry

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        source_dir=source_dir,
        dest_dir=dest_dir,
        threads=threads,
    )

    click.echo(f"Source directory: {config.site.source_dir}")
    click.echo(f"Output directory: {config.site.dest_dir}")

    renderer = SiteRenderer(
        config.site.source_dir,
        TemplateRegistry(config.templates.dir),
        edit_url=config.site.edit_url,
    )

    try:
        with WorkerPool(config.build.threads, config.build.queue_size) as pool:
            stats = renderer.render_site(pool, config.site.dest_dir)
    except OSError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(
        f"Rendered {stats.notes - stats.failures} of {stats.notes} notes, "
        f"copied {stats.static_files} files",
    )
    if not stats.ok:
        click.echo(
            click.style(f"{stats.failures} note(s) failed to render", fg="red"),
            err=True,
        )
        sys.exit(1)

    click.echo(click.style("Build complete!", fg="green", bold=True))


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
@verbose_option
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
    verbose: bool,
) -> None:
    """Start the development server."""
    from notesite.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        source_dir=source_dir,
        host=host,
        port=port,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.site.source_dir}")
    if config.templates.dir is not None:
        click.echo(f"Templates: {config.templates.dir}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command(name="list")
@config_option
@source_dir_option
def list_resources(config_path: Path | None, source_dir: Path | None) -> None:
    """List every file and directory that would be rendered."""
    config = _load_config(config_path).with_overrides(source_dir=source_dir)
    root = config.site.source_dir

    for resource in walk_resources(root):
        if resource.path == root:
            continue
        if isinstance(resource, Directory):
            kind = "dir"
        elif isinstance(resource, Note):
            kind = "note"
        else:
            kind = "static"
        click.echo(f"{kind:<6} {resource.path.relative_to(root).as_posix()}")


def _load_config(config_path: Path | None) -> Config:
    """Load configuration or exit with an error message.

    Raises:
        SystemExit: If the configuration file is invalid
    """
    try:
        return Config.load(config_path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    cli()
