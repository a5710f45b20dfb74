"""Live reload: filesystem watching and reload notifications."""

from notesite.live.channel import ReloadChannel, ReloadEvent, Subscription
from notesite.live.watch import Debouncer, Watch

__all__ = ["Debouncer", "ReloadChannel", "ReloadEvent", "Subscription", "Watch"]
