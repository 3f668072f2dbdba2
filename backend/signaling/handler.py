from fastapi import WebSocket
from pydantic import BaseModel, ValidationError
from typing import Any, Callable, Dict, Optional, Type
import logging

from core.errors import AlreadyBound, InvalidMessage, SignalingError
from core.state import SessionStore
from models.messages import (
    CREATE_SESSION,
    END_INTERVIEW,
    END_INTERVIEW_NOW,
    JOIN_SESSION,
    PING,
    RELAY_KINDS,
    START_NEXT,
    ClientMessage,
    SessionCodeRequest,
    ack,
    ack_error,
)
from models.session import Connection, ConnectionRole
from services.queue_manager import QueueManager
from services.signaling_relay import SignalingRelay
from signaling.connections import ConnectionManager

logger = logging.getLogger(__name__)

# Requests the client always expects a direct reply to
ACKED_EVENTS = frozenset({CREATE_SESSION, JOIN_SESSION})

def _parse(model: Type[BaseModel], payload: Dict[str, Any]):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidMessage(f"Invalid payload: {e.error_count()} error(s)")

class SignalingHandler:
    """
    Binds each connection to a role and session, dispatches its messages
    to the queue manager or the relay, and repairs state when it closes.
    """

    def __init__(
        self,
        store: SessionStore,
        connections=None,
        enforce_host_role: bool = True
    ):
        self.store = store
        self.connections = connections if connections is not None else ConnectionManager()
        self.queue = QueueManager(store, self.connections, enforce_host=enforce_host_role)
        self.relay = SignalingRelay(self.connections)

        self._handlers: Dict[str, Callable[[Connection, Dict[str, Any]], Optional[dict]]] = {
            CREATE_SESSION: self.create_session,
            JOIN_SESSION: self.join_session,
            START_NEXT: self.start_next,
            END_INTERVIEW: self.end_interview,
            END_INTERVIEW_NOW: self.end_interview_now,
        }

    # ============ Transport Hooks ============

    async def connect(self, websocket: WebSocket) -> Connection:
        return await self.connections.connect(websocket)

    async def handle_message(self, connection: Connection, data: Dict[str, Any]):
        async with self.store.lock:
            self.dispatch(connection, data)

    async def close(self, connection: Connection):
        async with self.store.lock:
            self.handle_close(connection)

    # ============ Dispatch ============

    def dispatch(self, connection: Connection, data: Dict[str, Any]):
        """
        Route one client message.

        Relayed signaling goes straight to the relay. Session requests are
        acknowledged when the client always expects a reply or supplied a
        request_id; otherwise failures are only logged.
        """
        try:
            envelope = ClientMessage.model_validate(data)
        except ValidationError:
            self.connections.send(connection.id, {"type": "error", "message": "Message needs a type"})
            return

        message_type = envelope.type
        request_id = envelope.request_id
        payload = {k: v for k, v in data.items() if k not in ("type", "request_id")}

        if message_type == PING:
            self.connections.send(connection.id, {"type": "pong"})
            return

        if message_type in RELAY_KINDS:
            self.relay.relay(message_type, connection.id, payload)
            return

        wants_reply = message_type in ACKED_EVENTS or request_id is not None

        handler = self._handlers.get(message_type)
        if handler is None:
            logger.warning(f"Unknown message type: {message_type}")
            if wants_reply:
                self.connections.send(connection.id, ack_error(message_type, "Unknown message type", request_id))
            return

        try:
            reply = handler(connection, payload) or {}
        except SignalingError as e:
            logger.warning(f"{message_type} failed for {connection.id}: {e.message}")
            if wants_reply:
                self.connections.send(connection.id, ack_error(message_type, e.message, request_id))
            return

        if wants_reply:
            self.connections.send(connection.id, ack(message_type, request_id, **reply))

    def handle_close(self, connection: Connection):
        """
        Repair session state after a connection terminates.

        A departing host takes its session with it; a departing candidate
        leaves the queue or the active slot.
        """
        self.connections.disconnect(connection.id)

        if connection.role == ConnectionRole.HOST:
            self.queue.close_session(connection.session_code)
        elif connection.role == ConnectionRole.CANDIDATE:
            self.queue.remove_on_disconnect(connection.session_code, connection.id)

    # ============ Session Requests ============

    def create_session(self, connection: Connection, payload: Dict[str, Any]) -> dict:
        if connection.is_bound:
            raise AlreadyBound(connection.id, connection.session_code)

        session = self.store.create(connection.id)
        connection.bind(ConnectionRole.HOST, session.code)

        self.connections.send(connection.id, {"type": "session_created", "code": session.code})
        return {"code": session.code}

    def join_session(self, connection: Connection, payload: Dict[str, Any]) -> dict:
        request = _parse(SessionCodeRequest, payload)
        self.store.get(request.code)

        if connection.role == ConnectionRole.HOST:
            raise AlreadyBound(connection.id, connection.session_code)

        # A candidate that left, was evicted or lost its host may join elsewhere
        if connection.role == ConnectionRole.CANDIDATE and connection.session_code != request.code:
            current = self.store.find(connection.session_code)
            if current is not None and current.is_member(connection.id):
                raise AlreadyBound(connection.id, connection.session_code)

        position = self.queue.enqueue(request.code, connection.id)
        connection.bind(ConnectionRole.CANDIDATE, request.code)
        return {"position": position}

    def start_next(self, connection: Connection, payload: Dict[str, Any]) -> dict:
        request = _parse(SessionCodeRequest, payload)
        candidate = self.queue.promote_next(request.code, caller=connection.id)
        return {"candidate": candidate}

    def end_interview(self, connection: Connection, payload: Dict[str, Any]) -> dict:
        request = _parse(SessionCodeRequest, payload)
        candidate = self.queue.end_interview(request.code, caller=connection.id)
        return {"candidate": candidate}

    def end_interview_now(self, connection: Connection, payload: Dict[str, Any]) -> dict:
        candidate = self.queue.end_interview_for_host(connection.id)
        return {"candidate": candidate}
