"""Session routes - signaling WebSocket and session lookup"""

import json
import logging
from fastapi import APIRouter, HTTPException, Request, WebSocket, WebSocketDisconnect, status

from core.errors import SessionNotFound
from models.messages import normalize_code
from signaling.handler import SignalingHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])

# ============ REST API ENDPOINTS ============

@router.get("/api/sessions/{code}")
async def get_session(code: str, request: Request):
    """Check a session code before joining"""
    handler: SignalingHandler = request.app.state.signaling
    try:
        session = handler.store.get(normalize_code(code))
    except SessionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return {
        "code": session.code,
        "queue_length": len(session.queue),
        "has_active_candidate": session.active_candidate is not None
    }

# ============ WEBSOCKET ENDPOINT ============

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    Signaling WebSocket shared by hosts and candidates.

    Client messages are JSON objects with a `type`:
        create_session, join_session {code}, start_next {code},
        end_interview {code}, end_interview_now, ping,
        webrtc_offer / webrtc_answer / webrtc_ice / host_ready /
        screen_share_started / screen_share_stopped {to, ...}
    """
    handler: SignalingHandler = websocket.app.state.signaling

    try:
        connection = await handler.connect(websocket)
    except Exception as e:
        logger.error(f"❌ WebSocket accept failed: {e}")
        return

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON from {connection.id}: {str(e)}")
                handler.connections.send(connection.id, {"type": "error", "message": "Invalid JSON"})
                continue

            if not isinstance(message, dict):
                handler.connections.send(connection.id, {"type": "error", "message": "Expected a JSON object"})
                continue

            await handler.handle_message(connection, message)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected: {connection.id}")
    except Exception:
        logger.exception(f"WebSocket error: {connection.id}")
    finally:
        await handler.close(connection)
