"""Tests for the in-process WebSocket hub."""

import asyncio
from unittest.mock import AsyncMock

from partstore.realtime.hub import ConnectionHub, envelope


def _socket(fails=False):
    socket = AsyncMock()
    if fails:
        socket.send_json.side_effect = RuntimeError("connection closed")
    return socket


class TestEnvelope:
    def test_adds_timestamp(self):
        message = envelope("order_placed", {"order_id": "o1"})
        assert message["event"] == "order_placed"
        assert message["data"]["order_id"] == "o1"
        assert "timestamp" in message["data"]


class TestRegistry:
    def test_register_user_and_admin(self):
        hub = ConnectionHub()
        hub.register(_socket(), "cust-001")
        hub.register(_socket(), "cust-001")
        hub.register(_socket(), "admin-1", is_admin=True)

        assert hub.stats() == {"connected_users": 1, "connected_admins": 1, "total_connections": 3}

    def test_unregister_drops_empty_user(self):
        hub = ConnectionHub()
        socket = _socket()
        hub.register(socket, "cust-001")
        hub.unregister(socket, "cust-001")
        assert hub.users == {}

    def test_unregister_without_user_id_searches_all(self):
        hub = ConnectionHub()
        socket = _socket()
        hub.register(socket, "cust-001")
        hub.register(_socket(), "cust-002")
        hub.unregister(socket)
        assert list(hub.users) == ["cust-002"]


class TestPush:
    def test_no_running_loop_skips(self):
        hub = ConnectionHub()
        socket = _socket()
        hub.register(socket, "cust-001")
        hub.emit_to_user("cust-001", "order_placed", {"order_id": "o1"})
        socket.send_json.assert_not_called()

    def test_sends_to_every_user_socket(self):
        hub = ConnectionHub()
        phone, laptop, other = _socket(), _socket(), _socket()
        hub.register(phone, "cust-001")
        hub.register(laptop, "cust-001")
        hub.register(other, "cust-002")

        async def scenario():
            hub.emit_to_user("cust-001", "order_placed", {"order_id": "o1"})
            await asyncio.sleep(0.01)

        asyncio.run(scenario())

        for socket in (phone, laptop):
            message = socket.send_json.call_args.args[0]
            assert message["event"] == "order_placed"
        other.send_json.assert_not_called()

    def test_admin_broadcast(self):
        hub = ConnectionHub()
        admin = _socket()
        hub.register(admin, "admin-1", is_admin=True)

        async def scenario():
            hub.emit_to_admins("new_order", {"order_id": "o1"})
            await asyncio.sleep(0.01)

        asyncio.run(scenario())
        assert admin.send_json.call_args.args[0]["event"] == "new_order"

    def test_failed_send_drops_connection(self):
        hub = ConnectionHub()
        dead = _socket(fails=True)
        hub.register(dead, "cust-001")

        async def scenario():
            hub.emit_to_user("cust-001", "order_placed", {})
            await asyncio.sleep(0.01)

        asyncio.run(scenario())
        assert hub.stats()["total_connections"] == 0
