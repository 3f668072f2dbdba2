from fastapi import WebSocket
from typing import Dict, Optional
import asyncio
import logging
import uuid

from models.session import Connection

logger = logging.getLogger(__name__)

class ConnectionManager:
    """
    Registry of live WebSocket connections.

    Each connection gets an outbox drained by its own writer task, so
    `send` never waits on the network and a slow client cannot hold up
    a handler that is notifying many peers.
    """

    def __init__(self):
        self.active_connections: Dict[str, Connection] = {}  # {conn_id: Connection}
        self._outboxes: Dict[str, asyncio.Queue] = {}
        self._writers: Dict[str, asyncio.Task] = {}

    async def connect(self, websocket: WebSocket) -> Connection:
        """
        Accept the WebSocket and assign it a connection id.

        Args:
            websocket: WebSocket connection

        Returns:
            The unbound Connection record
        """
        await websocket.accept()

        connection = Connection(uuid.uuid4().hex)
        outbox: asyncio.Queue = asyncio.Queue()
        self.active_connections[connection.id] = connection
        self._outboxes[connection.id] = outbox
        self._writers[connection.id] = asyncio.create_task(
            self._write_loop(connection.id, websocket, outbox)
        )

        logger.info(f"WebSocket connected: id={connection.id}, client={websocket.client}")

        self.send(connection.id, {
            "type": "connection",
            "status": "connected",
            "id": connection.id
        })
        return connection

    def disconnect(self, conn_id: str) -> Optional[Connection]:
        """
        Forget a connection and stop its writer.

        Args:
            conn_id: Connection ID
        """
        connection = self.active_connections.pop(conn_id, None)
        self._outboxes.pop(conn_id, None)

        writer = self._writers.pop(conn_id, None)
        if writer:
            writer.cancel()

        if connection:
            logger.info(f"WebSocket disconnected: id={conn_id}")
        return connection

    def send(self, conn_id: str, data: dict) -> bool:
        """
        Queue a message for a connection without waiting for delivery.

        Returns:
            False if the connection is not live
        """
        outbox = self._outboxes.get(conn_id)
        if outbox is None:
            return False
        outbox.put_nowait(data)
        return True

    def is_connected(self, conn_id: str) -> bool:
        return conn_id in self.active_connections

    def get(self, conn_id: str) -> Optional[Connection]:
        return self.active_connections.get(conn_id)

    async def _write_loop(self, conn_id: str, websocket: WebSocket, outbox: asyncio.Queue):
        while True:
            message = await outbox.get()
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.error(f"Failed to send message to {conn_id}: {str(e)}")
                if self._outboxes.get(conn_id) is outbox:
                    del self._outboxes[conn_id]
                return
