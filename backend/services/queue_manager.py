from typing import List, Optional
import logging

from core.errors import AlreadyBound, NotSessionHost, SessionNotFound
from core.state import SessionStore
from models.session import Session
from utils.broadcast import broadcast_queue, notify_all

logger = logging.getLogger(__name__)

class QueueManager:
    """
    FIFO admission and promotion of candidates within a session.

    Every method mutates the session and queues its notifications without
    awaiting anything, so a call is one atomic step on the event loop.
    `connections` is anything with `send(conn_id, message) -> bool`.
    """

    def __init__(
        self,
        store: SessionStore,
        connections,
        enforce_host: bool = True
    ):
        self.store = store
        self.connections = connections
        self.enforce_host = enforce_host

    def _session_for(self, code: str, caller: Optional[str] = None) -> Session:
        session = self.store.get(code)
        if self.enforce_host and caller is not None and caller != session.host:
            raise NotSessionHost(code, caller)
        return session

    def enqueue(self, code: str, conn_id: str) -> Optional[int]:
        """
        Add a candidate to the tail of the queue.

        Joining again while queued or active changes nothing and reports
        the current position (None for the active candidate).

        Args:
            code: Session code
            conn_id: Candidate connection id

        Returns:
            1-indexed queue position
        """
        session = self.store.get(code)

        if conn_id == session.host:
            raise AlreadyBound(conn_id, code)

        if session.is_member(conn_id):
            logger.debug(f"Repeated join ignored: session={code}, candidate={conn_id}")
            return session.position_of(conn_id)

        session.queue.append(conn_id)
        position = len(session.queue)
        logger.info(f"Candidate joined: session={code}, candidate={conn_id}, position={position}")

        broadcast_queue(session, self.connections)
        return position

    def _evict_active(self, session: Session) -> Optional[str]:
        previous = session.active_candidate
        session.active_candidate = None
        if previous:
            self.connections.send(previous, {"type": "interview_ended"})
            logger.info(f"Interview ended: session={session.code}, candidate={previous}")
        self.connections.send(session.host, {"type": "interview_ended_host"})
        return previous

    def promote_next(self, code: str, caller: Optional[str] = None) -> Optional[str]:
        """
        End the current interview, if any, and start one with the queue head.

        Returns:
            Connection id of the new active candidate, or None if the queue
            was empty
        """
        session = self._session_for(code, caller)

        if session.active_candidate:
            self._evict_active(session)

        if not session.queue:
            broadcast_queue(session, self.connections)
            logger.info(f"Queue empty, nobody to start: session={code}")
            return None

        candidate = session.queue.pop(0)
        session.active_candidate = candidate

        self.connections.send(candidate, {"type": "interview_start", "hostId": session.host})
        self.connections.send(session.host, {"type": "candidate_selected", "candidate": candidate})
        logger.info(f"Interview started: session={code}, candidate={candidate}, waiting={len(session.queue)}")

        broadcast_queue(session, self.connections)
        return candidate

    def end_interview(self, code: str, caller: Optional[str] = None) -> Optional[str]:
        """
        Clear the active slot without promoting anyone.
        The host is told the interview ended even when the slot was empty.

        Returns:
            The evicted candidate id, if there was one
        """
        session = self._session_for(code, caller)
        evicted = self._evict_active(session)
        broadcast_queue(session, self.connections)
        return evicted

    def end_interview_for_host(self, host: str) -> Optional[str]:
        """End the interview of whichever session `host` is hosting"""
        session = self.store.find_by_host(host)
        if session is None:
            raise SessionNotFound("")
        return self.end_interview(session.code)

    def remove_on_disconnect(self, code: str, conn_id: str) -> bool:
        """
        Drop a departed candidate from the queue or the active slot.

        Returns:
            True if the candidate was attached to the session
        """
        session = self.store.find(code)
        if session is None:
            return False

        removed = False

        position = session.position_of(conn_id)
        if position is not None:
            session.queue.pop(position - 1)
            removed = True
            logger.info(f"Queued candidate left: session={code}, candidate={conn_id}, was={position}")
            broadcast_queue(session, self.connections)

        if session.active_candidate == conn_id:
            session.active_candidate = None
            removed = True
            logger.info(f"Active candidate left: session={code}, candidate={conn_id}")
            self.connections.send(session.host, {"type": "candidate_disconnected"})

        return removed

    def close_session(self, code: str) -> List[str]:
        """
        Delete a session whose host is gone and tell every candidate.

        Returns:
            Candidate ids that were notified
        """
        session = self.store.delete(code)
        if session is None:
            return []

        members = session.members()
        notify_all(members, self.connections, {"type": "session_deleted"})
        logger.info(f"Session closed: code={code}, notified={len(members)}")
        return members
