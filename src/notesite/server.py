"""aiohttp server for notesite.

Application factory and route registration for serve mode.
"""

import logging

from aiohttp import web

from notesite.api.pages import create_pages_routes
from notesite.app_keys import channel_key, renderer_key, watch_key
from notesite.config import Config
from notesite.core.site import SiteRenderer
from notesite.core.templates import TemplateRegistry
from notesite.live.channel import ReloadChannel
from notesite.live.notify import create_notify_routes
from notesite.live.watch import Watch

logger = logging.getLogger(__name__)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    templates = TemplateRegistry(config.templates.dir)
    renderer = SiteRenderer(
        config.site.source_dir,
        templates,
        edit_url=config.site.edit_url,
        live_reload=config.live_reload.enabled,
    )
    channel = ReloadChannel()

    app[renderer_key] = renderer
    app[channel_key] = channel

    # Notification route must be registered before the catch-all page route
    if config.live_reload.enabled:
        roots = [config.site.source_dir]
        if templates.template_dir is not None:
            roots.append(templates.template_dir)
        app[watch_key] = Watch(
            roots,
            channel,
            debounce=config.live_reload.debounce_ms / 1000,
            on_reload=templates.reload,
        )
        app.router.add_routes(create_notify_routes())
        app.on_startup.append(_start_watch)
        app.on_shutdown.append(_close_channel)
        app.on_cleanup.append(_stop_watch)

    app.router.add_routes(create_pages_routes())

    return app


async def _start_watch(app: web.Application) -> None:
    """Start the filesystem watch on application startup."""
    await app[watch_key].start()


async def _close_channel(app: web.Application) -> None:
    """End open notification streams so shutdown doesn't wait on them."""
    app[channel_key].close()


async def _stop_watch(app: web.Application) -> None:
    """Stop the filesystem watch on application cleanup."""
    await app[watch_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        print=lambda msg: logger.info(msg.strip()),
    )
