"""Tests for the live connection registry and its writer tasks"""

import asyncio

import pytest

from core.errors import RecipientUnavailable
from services.signaling_relay import SignalingRelay
from signaling.connections import ConnectionManager


class RecordingWebSocket:
    client = ("127.0.0.1", 50000)

    def __init__(self):
        self.accepted = False
        self.frames = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        self.frames.append(data)


class ClosedWebSocket(RecordingWebSocket):

    async def send_json(self, data):
        raise RuntimeError("Cannot call send once a close message has been sent")


async def let_writers_run():
    for _ in range(5):
        await asyncio.sleep(0)


class TestConnectionManager:

    def test_connect_sends_confirmation(self):
        async def scenario():
            manager = ConnectionManager()
            websocket = RecordingWebSocket()
            connection = await manager.connect(websocket)
            assert manager.send(connection.id, {"type": "pong"}) is True
            await let_writers_run()
            manager.disconnect(connection.id)
            return websocket, connection

        websocket, connection = asyncio.run(scenario())

        assert websocket.accepted
        assert websocket.frames == [
            {"type": "connection", "status": "connected", "id": connection.id},
            {"type": "pong"},
        ]

    def test_failed_write_stops_further_sends(self):
        async def scenario():
            manager = ConnectionManager()
            connection = await manager.connect(ClosedWebSocket())
            await let_writers_run()

            assert manager.send(connection.id, {"type": "pong"}) is False
            with pytest.raises(RecipientUnavailable):
                SignalingRelay(manager).deliver("webrtc_offer", "peer", connection.id, {"sdp": "v=0"})

            manager.disconnect(connection.id)
            assert not manager.is_connected(connection.id)

        asyncio.run(scenario())

    def test_send_after_disconnect(self):
        async def scenario():
            manager = ConnectionManager()
            connection = await manager.connect(RecordingWebSocket())
            manager.disconnect(connection.id)
            return manager.send(connection.id, {"type": "pong"})

        assert asyncio.run(scenario()) is False
