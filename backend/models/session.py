from typing import List, Optional
import enum

class ConnectionRole(str, enum.Enum):
    """Role a connection takes once it creates or joins a session"""
    UNBOUND = "unbound"
    HOST = "host"
    CANDIDATE = "candidate"

class Session:
    """
    One host's interview round.
    Holds the FIFO queue of waiting candidates and the single active slot.
    A connection id is never in both the queue and the active slot.
    """

    def __init__(self, code: str, host: str):
        self.code = code
        """Short human-readable session code"""

        self.host = host
        """Connection id of the host, fixed for the session lifetime"""

        self.queue: List[str] = []
        """Waiting candidate connection ids in arrival order"""

        self.active_candidate: Optional[str] = None
        """Candidate currently paired with the host"""

    def position_of(self, conn_id: str) -> Optional[int]:
        """1-indexed queue position, or None when not queued"""
        try:
            return self.queue.index(conn_id) + 1
        except ValueError:
            return None

    def is_member(self, conn_id: str) -> bool:
        return conn_id in self.queue or conn_id == self.active_candidate

    def members(self) -> List[str]:
        """Every candidate id attached to the session, queued first"""
        ids = list(self.queue)
        if self.active_candidate:
            ids.append(self.active_candidate)
        return ids

    def __repr__(self):
        return f"<Session(code={self.code}, host={self.host}, queued={len(self.queue)}, active={self.active_candidate})>"

class Connection:
    """Per-connection binding of identity to role and session"""

    def __init__(self, conn_id: str):
        self.id = conn_id
        self.role = ConnectionRole.UNBOUND
        self.session_code: Optional[str] = None

    def bind(self, role: ConnectionRole, session_code: str):
        self.role = role
        self.session_code = session_code

    @property
    def is_bound(self) -> bool:
        return self.role != ConnectionRole.UNBOUND

    def __repr__(self):
        return f"<Connection(id={self.id}, role={self.role.value}, session={self.session_code})>"
