"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for the queue, relay and signaling handler tests.
"""

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from core.state import SessionStore
from main import create_app
from models.session import Connection
from services.queue_manager import QueueManager
from services.signaling_relay import SignalingRelay
from signaling.handler import SignalingHandler

SESSION_CODE = "ABC123"


class RecordingConnections:
    """Stand-in for ConnectionManager that keeps every message it is given"""

    def __init__(self):
        self.live = set()
        self.sent = []

    def open(self, conn_id: str) -> Connection:
        self.live.add(conn_id)
        return Connection(conn_id)

    def send(self, conn_id, data) -> bool:
        if conn_id not in self.live:
            return False
        self.sent.append((conn_id, data))
        return True

    def disconnect(self, conn_id):
        self.live.discard(conn_id)

    def messages(self, conn_id, message_type=None):
        return [
            m for c, m in self.sent
            if c == conn_id and (message_type is None or m["type"] == message_type)
        ]

    def clear(self):
        self.sent.clear()


def fixed_codes(*codes):
    """Code factory that hands out the given codes in order"""
    remaining = iter(codes)
    return lambda: next(remaining)


# =============================================================================
# COMPONENT FIXTURES
# =============================================================================

@pytest.fixture
def connections():
    return RecordingConnections()


@pytest.fixture
def store():
    return SessionStore(code_factory=fixed_codes(SESSION_CODE, "DEF456", "GHJ789"))


@pytest.fixture
def session(store, connections):
    """Session ABC123 hosted by H with candidates X, Y, Z connected but not joined"""
    for conn_id in ("H", "X", "Y", "Z"):
        connections.open(conn_id)
    return store.create("H")


@pytest.fixture
def queue(store, connections):
    return QueueManager(store, connections)


@pytest.fixture
def relay(connections):
    return SignalingRelay(connections)


@pytest.fixture
def handler(store, connections):
    return SignalingHandler(store, connections)


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        RECORDINGS_DIR=str(tmp_path / "recordings"),
        STATIC_DIR=str(tmp_path / "no-frontend"),
    )


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
