"""Real-time push port: deliver ``{event, data}`` messages to connected clients."""

from abc import ABC, abstractmethod


class PushChannel(ABC):
    @abstractmethod
    def emit_to_user(self, user_id: str, event: str, data: dict) -> None:
        """Push to every connection of one customer (room ``user:{id}``)."""
        ...

    @abstractmethod
    def emit_to_admins(self, event: str, data: dict) -> None:
        """Push to every connected admin."""
        ...

    @abstractmethod
    def stats(self) -> dict:
        ...
