"""Broadcast utilities"""

import logging
from typing import Any, Dict, List, Optional

from models.session import Session

logger = logging.getLogger(__name__)

def queue_update(queue: List[str], you: Optional[int] = None) -> Dict[str, Any]:
    message: Dict[str, Any] = {"type": "queue_update", "queue": list(queue)}
    if you is not None:
        message["you"] = you
    return message

def broadcast_queue(session: Session, connections) -> int:
    """
    Send the current queue to the host and to every waiting candidate.
    Candidates also get their own 1-indexed position as `you`.

    Returns:
        Number of messages handed to live connections
    """
    delivered = 0
    if connections.send(session.host, queue_update(session.queue)):
        delivered += 1

    for position, conn_id in enumerate(session.queue, start=1):
        if connections.send(conn_id, queue_update(session.queue, position)):
            delivered += 1

    logger.debug(f"Queue broadcast: session={session.code}, size={len(session.queue)}, delivered={delivered}")
    return delivered

def notify_all(conn_ids: List[str], connections, message: Dict[str, Any]) -> int:
    """Send the same event to each id, skipping ones that are gone"""
    delivered = 0
    for conn_id in conn_ids:
        if connections.send(conn_id, dict(message)):
            delivered += 1
    return delivered
