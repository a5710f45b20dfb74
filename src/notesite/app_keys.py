"""Application keys for type-safe app configuration access."""

from aiohttp import web

from notesite.core.site import SiteRenderer
from notesite.live.channel import ReloadChannel
from notesite.live.watch import Watch

renderer_key = web.AppKey("renderer", SiteRenderer)
channel_key = web.AppKey("channel", ReloadChannel)
watch_key = web.AppKey("watch", Watch)
