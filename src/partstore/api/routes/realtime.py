"""WebSocket endpoint for real-time order, payment and notification events."""

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from partstore.identity.tokens import authenticate, bearer_token
from partstore.realtime import get_channel
from partstore.realtime.hub import ConnectionHub, envelope
from partstore.shared.errors import AuthenticationError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["realtime"])

POLICY_VIOLATION = 1008


def _handshake_token(websocket: WebSocket) -> str | None:
    return bearer_token(websocket.headers.get("authorization")) or websocket.query_params.get("token")


def _is_ping(message: str) -> bool:
    """Clients send either the bare word or an ``{"event": "ping"}`` frame."""
    text = message.strip()
    if text.lower() == "ping":
        return True
    try:
        frame = json.loads(text)
    except ValueError:
        return False
    return isinstance(frame, dict) and frame.get("event") == "ping"


@router.websocket("/ws")
async def realtime(websocket: WebSocket):
    domain = websocket.app.state.domain
    with domain.domain_context():
        try:
            principal = authenticate(_handshake_token(websocket))
        except AuthenticationError as exc:
            logger.info("socket_rejected", reason=exc.message)
            await websocket.close(code=POLICY_VIOLATION)
            return

    await websocket.accept()
    hub = get_channel()
    if isinstance(hub, ConnectionHub):
        hub.register(websocket, principal.id, is_admin=principal.is_admin)

    await websocket.send_json(
        envelope("connected", {"user_id": principal.id, "role": principal.kind, "message": "Connected"})
    )
    try:
        while True:
            message = await websocket.receive_text()
            if _is_ping(message):
                await websocket.send_json(envelope("pong", {}))
    except WebSocketDisconnect:
        pass
    finally:
        if isinstance(hub, ConnectionHub):
            hub.unregister(websocket, principal.id if not principal.is_admin else None)
