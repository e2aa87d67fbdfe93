"""In-process WebSocket hub.

Connections are kept in memory, keyed by user id for customers and in a flat
set for admins. The registry is lost on restart and is only meaningful when a
single process serves every socket.

Sends are scheduled on the running event loop and never awaited by the
caller; a send that fails drops the dead connection.
"""

import asyncio
from datetime import UTC, datetime

import structlog

from partstore.realtime.port import PushChannel

logger = structlog.get_logger(__name__)


def envelope(event: str, data: dict) -> dict:
    return {"event": event, "data": {**data, "timestamp": datetime.now(UTC).isoformat()}}


class ConnectionHub(PushChannel):
    def __init__(self) -> None:
        self.users: dict[str, set] = {}
        self.admins: set = set()
        self._pending: set[asyncio.Task] = set()

    # -------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------
    def register(self, websocket, user_id: str, is_admin: bool = False) -> None:
        if is_admin:
            self.admins.add(websocket)
        else:
            self.users.setdefault(str(user_id), set()).add(websocket)
        logger.info("socket_connected", user_id=str(user_id), is_admin=is_admin)

    def unregister(self, websocket, user_id: str | None = None) -> None:
        self.admins.discard(websocket)
        keys = [str(user_id)] if user_id is not None else list(self.users)
        for key in keys:
            sockets = self.users.get(key)
            if sockets is None:
                continue
            sockets.discard(websocket)
            if not sockets:
                del self.users[key]
        logger.info("socket_disconnected", user_id=user_id)

    def stats(self) -> dict:
        return {
            "connected_users": len(self.users),
            "connected_admins": len(self.admins),
            "total_connections": sum(len(s) for s in self.users.values()) + len(self.admins),
        }

    # -------------------------------------------------------------------
    # Push
    # -------------------------------------------------------------------
    def emit_to_user(self, user_id, event, data) -> None:
        sockets = list(self.users.get(str(user_id), ()))
        self._broadcast(sockets, envelope(event, data))

    def emit_to_admins(self, event, data) -> None:
        self._broadcast(list(self.admins), envelope(event, data))

    def _broadcast(self, sockets, message) -> None:
        if not sockets:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("push_skipped_no_loop", push_event=message["event"])
            return

        for websocket in sockets:
            task = loop.create_task(self._send(websocket, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _send(self, websocket, message) -> None:
        try:
            await websocket.send_json(message)
        except Exception as exc:  # noqa: BLE001
            logger.warning("push_failed", push_event=message["event"], error=str(exc))
            self.unregister(websocket)
