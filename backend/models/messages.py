"""Inbound WebSocket message payloads and outbound acknowledgements"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, field_validator

# ============ Message Types ============

CREATE_SESSION = "create_session"
JOIN_SESSION = "join_session"
START_NEXT = "start_next"
END_INTERVIEW = "end_interview"
END_INTERVIEW_NOW = "end_interview_now"
PING = "ping"

# Forwarded verbatim between peers
RELAY_KINDS = frozenset({
    "webrtc_offer",
    "webrtc_answer",
    "webrtc_ice",
    "host_ready",
    "screen_share_started",
    "screen_share_stopped",
})

# ============ Request Models ============

class ClientMessage(BaseModel):
    """Envelope common to every client frame"""
    model_config = ConfigDict(extra="allow")

    type: str
    request_id: Optional[Any] = None

def normalize_code(code: str) -> str:
    """Session codes are matched case-insensitively, ignoring surrounding spaces"""
    return code.strip().upper()

class SessionCodeRequest(BaseModel):
    """Payload of join_session / start_next / end_interview"""
    model_config = ConfigDict(extra="ignore")

    code: str

    @field_validator("code")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_code(value)

class RelayRequest(BaseModel):
    """
    Signaling payload addressed to another connection.
    Everything besides `to` is opaque and forwarded as-is.
    """
    model_config = ConfigDict(extra="allow")

    to: Optional[str] = None

    def forwarded_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

# ============ Response Helpers ============

def ack(event: str, request_id: Any = None, ok: bool = True, **fields) -> Dict[str, Any]:
    """Build the direct reply to a client request"""
    message = {"type": "ack", "event": event, "request_id": request_id, "ok": ok}
    message.update(fields)
    return message

def ack_error(event: str, error: str, request_id: Any = None) -> Dict[str, Any]:
    return ack(event, request_id, ok=False, error=error)
