"""
WebSocket connection manager
Keeps the dashboard sockets and fans events out to all of them
"""
from typing import Dict, Optional
import logging
import uuid

from fastapi import WebSocket

logger = logging.getLogger("aby_api.realtime")


class ConnectionManager:
    """Manages WebSocket connections for live dashboard updates."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, connection_id: Optional[str] = None) -> str:
        await websocket.accept()
        connection_id = connection_id or uuid.uuid4().hex
        self.active_connections[connection_id] = websocket
        logger.info(f"Socket {connection_id} connected ({len(self.active_connections)} open)")
        return connection_id

    def disconnect(self, connection_id: str):
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
            logger.info(f"Socket {connection_id} disconnected ({len(self.active_connections)} open)")

    async def send_personal_message(self, message: dict, connection_id: str):
        if connection_id in self.active_connections:
            try:
                await self.active_connections[connection_id].send_json(message)
            except Exception as e:
                logger.warning(f"Dropping socket {connection_id}: {e}")
                self.disconnect(connection_id)

    async def broadcast(self, message: dict) -> int:
        """Send to every socket; sockets that fail are dropped. Returns the number reached."""
        disconnected = []
        delivered = 0
        for connection_id, connection in list(self.active_connections.items()):
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping socket {connection_id}: {e}")
                disconnected.append(connection_id)

        for connection_id in disconnected:
            self.disconnect(connection_id)
        return delivered

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)


manager = ConnectionManager()
