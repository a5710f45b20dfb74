"""Server-sent events endpoint for live reload.

Every connected page holds a ``GET /_notify`` stream open and receives an
``event: reload`` message each time the watch broadcasts.
"""

from aiohttp import web

from notesite.app_keys import channel_key

NOTIFY_PATH = "/_notify"


def create_notify_routes() -> list[web.RouteDef]:
    return [web.get(NOTIFY_PATH, handle_notify)]


async def handle_notify(request: web.Request) -> web.StreamResponse:
    """Stream reload events to a client until it disconnects or the server stops."""
    channel = request.app[channel_key]

    response = web.StreamResponse(
        headers={
            "Content-Type": "text/event-stream",
            "Cache-Control": "no-cache",
        },
    )

    async with channel.subscribe() as subscription:
        await response.prepare(request)
        await response.write(b": connected\n\n")
        try:
            async for event in subscription:
                await response.write(f"event: {event.value}\ndata: \n\n".encode())
        except ConnectionResetError:
            # Client went away mid-write
            pass

    return response
