"""
Tests for the real-time event gateways
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from aby_api.realtime import ConnectionManager, Gateway


class FakeSocket:
    def __init__(self, broken: bool = False):
        self.broken = broken
        self.accepted = False
        self.messages = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.messages.append(message)


class TestGateway:
    """Event names and fan-out"""

    def test_emit_reaches_every_socket(self):
        connections = ConnectionManager()
        first, second = FakeSocket(), FakeSocket()
        asyncio.run(connections.connect(first, "a"))
        asyncio.run(connections.connect(second, "b"))
        gateway = Gateway("clients", ["clientCreated"], connections)

        delivered = asyncio.run(gateway.emit("clientCreated", {"id": 1}))

        assert delivered == 2
        assert first.messages == [{"event": "clientCreated", "data": {"id": 1}}]
        assert second.messages == first.messages

    def test_unknown_event(self):
        gateway = Gateway("clients", ["clientCreated"], ConnectionManager())

        with pytest.raises(ValueError, match="Unknown clients event"):
            asyncio.run(gateway.emit("clientArchived", {}))

    def test_broken_socket_is_dropped(self):
        connections = ConnectionManager()
        asyncio.run(connections.connect(FakeSocket(), "ok"))
        asyncio.run(connections.connect(FakeSocket(broken=True), "gone"))

        delivered = asyncio.run(Gateway("stock", ["stockInDeleted"], connections).emit("stockInDeleted", {"id": 3}))

        assert delivered == 1
        assert list(connections.active_connections) == ["ok"]


class TestWebSocketEndpoint:
    """Dashboard socket at /ws"""

    def test_ping(self, client: TestClient):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("ping")

            assert ws.receive_json() == {"event": "pong"}

    def test_created_client_is_broadcast(self, client: TestClient, auth_headers):
        with client.websocket_connect("/ws") as ws:
            response = client.post(
                "/api/v1/clients/", json={"names": "Kivu Hotels"}, headers=auth_headers
            )
            assert response.status_code == 201

            message = ws.receive_json()

        assert message["event"] == "clientCreated"
        assert message["data"]["names"] == "Kivu Hotels"
        assert message["data"]["id"] == response.json()["id"]
