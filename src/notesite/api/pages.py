"""Page serving endpoint.

Maps request paths onto source resources: notes are rendered on request,
static files are sent as-is, and directories are not listed.
"""

import io
import logging
import mimetypes

from aiohttp import web

from notesite.app_keys import renderer_key
from notesite.core.resources import Directory, Note, resolve_resource
from notesite.core.templates import STYLESHEET

logger = logging.getLogger(__name__)


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/{path:.*}", get_resource),
    ]


async def get_resource(request: web.Request) -> web.StreamResponse:
    path = request.match_info["path"]
    renderer = request.app[renderer_key]

    resource = resolve_resource(renderer.source_dir, path)
    if resource is None:
        if path == STYLESHEET:
            return web.Response(
                text=renderer.templates.read_asset(STYLESHEET),
                content_type="text/css",
            )
        return web.Response(status=404, text="not found")

    if isinstance(resource, Directory):
        return web.Response(status=501, text="directory listings are not supported")

    buf = io.BytesIO()
    try:
        renderer.render_resource(resource, buf)
    except Exception:
        logger.exception("Error rendering %s", resource.path)
        return web.Response(status=500, text="error rendering page")

    if isinstance(resource, Note):
        return web.Response(body=buf.getvalue(), content_type="text/html", charset="utf-8")

    content_type = mimetypes.guess_type(resource.path.name)[0] or "application/octet-stream"
    return web.Response(body=buf.getvalue(), content_type=content_type)
