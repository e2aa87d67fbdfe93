"""Fake push channel that records messages for test assertions."""

from partstore.realtime.hub import envelope
from partstore.realtime.port import PushChannel


class FakePushChannel(PushChannel):
    def __init__(self) -> None:
        self.sent: list[dict] = []

    def emit_to_user(self, user_id, event, data) -> None:
        self.sent.append({"room": f"user:{user_id}", **envelope(event, data)})

    def emit_to_admins(self, event, data) -> None:
        self.sent.append({"room": "admins", **envelope(event, data)})

    def stats(self) -> dict:
        return {"connected_users": 0, "connected_admins": 0, "total_connections": 0}

    def events_for(self, room: str) -> list[str]:
        return [message["event"] for message in self.sent if message["room"] == room]

    def reset(self) -> None:
        self.sent.clear()
