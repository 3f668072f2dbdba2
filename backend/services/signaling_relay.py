"""Store-and-forward of WebRTC negotiation messages between peers"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from core.errors import InvalidMessage, RecipientUnavailable
from models.messages import RELAY_KINDS, RelayRequest

logger = logging.getLogger(__name__)

class SignalingRelay:
    """
    Forwards offers, answers, ICE candidates and peer notices by connection id.
    Payloads are never inspected; delivery is best effort.
    """

    def __init__(self, connections):
        self.connections = connections

    def deliver(self, kind: str, sender: str, recipient: str, fields: Dict[str, Any]):
        message = dict(fields)
        message["type"] = kind
        message["from"] = sender
        if not self.connections.send(recipient, message):
            raise RecipientUnavailable(recipient)

    def relay(self, kind: str, sender: str, payload: Dict[str, Any]) -> bool:
        """
        Forward `payload` to the connection named in its `to` field.

        Args:
            kind: Relayed message type, e.g. "webrtc_offer"
            sender: Connection id of the sender
            payload: Client message without `type` / `request_id`

        Returns:
            True if the message was handed to a live connection
        """
        if kind not in RELAY_KINDS:
            raise InvalidMessage(f"Not a relayed message type: {kind}")

        try:
            request = RelayRequest.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Malformed {kind} from {sender}: {e.error_count()} error(s)")
            return False

        if not request.to:
            logger.debug(f"Dropped {kind} from {sender}: no recipient")
            return False

        try:
            self.deliver(kind, sender, request.to, request.forwarded_fields())
        except RecipientUnavailable:
            logger.debug(f"Dropped {kind} from {sender}: {request.to} not connected")
            return False

        logger.debug(f"Signal: {kind} from {sender} to {request.to}")
        return True
