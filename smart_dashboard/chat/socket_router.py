"""Real-time channel: JSON frames ``{"event": ..., "data": {...}}`` over one WebSocket."""
from __future__ import annotations

import asyncio
import json
import logging
from collections import defaultdict
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from smart_dashboard.chat import chat_service
from smart_dashboard.models.user import DEMO_USER_ID

logger = logging.getLogger("smart_dashboard.realtime")

router = APIRouter()

CHAT_ERROR = "Sorry, I encountered an error."


class ConnectionManager:
    """Sockets grouped into per-user rooms (``user-<id>``)."""

    def __init__(self):
        self.rooms: dict[str, set[WebSocket]] = defaultdict(set)

    def join(self, room: str, websocket: WebSocket) -> None:
        self.rooms[room].add(websocket)

    def leave(self, websocket: WebSocket) -> None:
        for room in list(self.rooms):
            self.rooms[room].discard(websocket)
            if not self.rooms[room]:
                del self.rooms[room]

    async def broadcast(self, room: str, event: str, data: Any, exclude: WebSocket | None = None) -> int:
        sent = 0
        for socket in list(self.rooms.get(room, ())):
            if socket is exclude:
                continue
            # no ack, no retry: a dead socket simply misses the event
            try:
                await socket.send_json({"event": event, "data": data})
                sent += 1
            except (RuntimeError, WebSocketDisconnect):
                self.leave(socket)
        return sent


def _chat_turn(session_factory, message: str, rng) -> dict:
    db = session_factory()
    try:
        chat_service.save_user_message(db, DEMO_USER_ID, message)
        reply = chat_service.answer(db, DEMO_USER_ID, message, rng=rng)
        return {
            "id": reply.id,
            "message": reply.message,
            "timestamp": reply.created_at.isoformat(),
            "type": reply.type,
        }
    finally:
        db.close()


async def _on_chat_message(websocket: WebSocket, data: dict) -> None:
    message = str(data.get("message") or "").strip()
    if not message:
        await websocket.send_json({"event": "chat-error", "data": {"message": "Message is required"}})
        return

    state = websocket.app.state
    await asyncio.sleep(chat_service.reply_delay(state.reply_delay, state.rng))
    try:
        reply = await run_in_threadpool(_chat_turn, state.session_factory, message, state.rng)
    except SQLAlchemyError:
        logger.exception("ws_chat_failed", extra={"message_length": len(message)})
        await websocket.send_json({"event": "chat-error", "data": {"message": CHAT_ERROR}})
        return

    await websocket.send_json({"event": "chat-response", "data": reply})


@router.websocket("/ws")
async def realtime(websocket: WebSocket) -> None:
    await websocket.accept()
    manager: ConnectionManager = websocket.app.state.connections
    logger.info("ws_connected", extra={"client": str(websocket.client)})

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
                event = frame["event"]
                data = frame.get("data") or {}
                if not isinstance(data, dict):
                    raise TypeError("data must be an object")
            except (ValueError, KeyError, TypeError, AttributeError):
                await websocket.send_json({"event": "error", "data": {"message": "Invalid message format"}})
                continue

            if event == "join-room":
                room = f"user-{data.get('userId', DEMO_USER_ID)}"
                manager.join(room, websocket)
                await websocket.send_json({"event": "joined", "data": {"room": room}})
            elif event == "chat-message":
                await _on_chat_message(websocket, data)
            elif event == "task-update":
                room = f"user-{data.get('userId', DEMO_USER_ID)}"
                await manager.broadcast(room, "task-updated", data, exclude=websocket)
            else:
                await websocket.send_json({"event": "error", "data": {"message": f"Unknown event: {event}"}})
    except WebSocketDisconnect:
        logger.info("ws_disconnected", extra={"client": str(websocket.client)})
    finally:
        manager.leave(websocket)
