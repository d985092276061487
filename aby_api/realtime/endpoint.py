"""
Dashboard WebSocket endpoint

Connect with: ws://host/ws

Clients only listen; a text ``ping`` is answered with ``{"event": "pong"}``.
"""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from aby_api.core.config import settings
from .manager import manager

router = APIRouter()


@router.websocket(settings.WS_PATH)
async def events_websocket(websocket: WebSocket):
    connection_id = await manager.connect(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await manager.send_personal_message({"event": "pong"}, connection_id)
    except WebSocketDisconnect:
        manager.disconnect(connection_id)
