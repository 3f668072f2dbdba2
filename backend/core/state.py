"""In-memory session store"""

import asyncio
import logging
import secrets
from typing import Callable, Dict, Optional

from core.errors import CodeSpaceExhausted, SessionNotFound
from models.session import Session

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

def make_code(length: int = 6, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Random session code drawn from the unambiguous alphabet"""
    return "".join(secrets.choice(alphabet) for _ in range(length))

class SessionStore:
    """
    Live sessions keyed by code.
    Owned by the application instance; nothing here survives a restart.
    """

    def __init__(
        self,
        code_length: int = 6,
        alphabet: str = DEFAULT_ALPHABET,
        max_attempts: int = 1000,
        code_factory: Optional[Callable[[], str]] = None
    ):
        self.sessions: Dict[str, Session] = {}
        self.lock = asyncio.Lock()
        self.max_attempts = max_attempts
        self._code_factory = code_factory or (lambda: make_code(code_length, alphabet))

    def create(self, host: str) -> Session:
        """
        Create a session hosted by `host` under a fresh code.

        Raises:
            CodeSpaceExhausted: every attempt collided with a live code
        """
        for _ in range(self.max_attempts):
            code = self._code_factory()
            if code not in self.sessions:
                session = Session(code, host)
                self.sessions[code] = session
                logger.info(f"Session created: code={code}, host={host}")
                return session
        raise CodeSpaceExhausted(self.max_attempts)

    def get(self, code: str) -> Session:
        session = self.sessions.get(code)
        if session is None:
            raise SessionNotFound(code)
        return session

    def find(self, code: str) -> Optional[Session]:
        return self.sessions.get(code)

    def find_by_host(self, conn_id: str) -> Optional[Session]:
        """Scan for the session hosted by `conn_id`"""
        for session in self.sessions.values():
            if session.host == conn_id:
                return session
        return None

    def delete(self, code: str) -> Optional[Session]:
        session = self.sessions.pop(code, None)
        if session:
            logger.info(f"Session deleted: code={code}")
        return session

    def __len__(self):
        return len(self.sessions)

    def __contains__(self, code: str):
        return code in self.sessions
