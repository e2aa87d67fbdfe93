"""Push channel registry.

The process-wide ConnectionHub is used unless a test swaps in a fake.
"""

from partstore.realtime.hub import ConnectionHub
from partstore.realtime.port import PushChannel

_channel: PushChannel | None = None


def get_channel() -> PushChannel:
    global _channel
    if _channel is None:
        _channel = ConnectionHub()
    return _channel


def set_channel(channel: PushChannel) -> None:
    global _channel
    _channel = channel


def reset_channel() -> None:
    global _channel
    _channel = None
