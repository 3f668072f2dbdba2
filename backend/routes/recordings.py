"""Recording upload route - stores the raw blob recorded in the browser"""

import logging
import shutil
import time
from pathlib import Path
from typing import Optional
from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recordings", tags=["recordings"])

def safe_file_name(file_name: Optional[str]) -> str:
    """Base name of the requested file, or a timestamped default"""
    name = Path(file_name).name if file_name else ""
    if name in ("", ".", ".."):
        name = f"recording-{int(time.time() * 1000)}.webm"
    return name

@router.post("")
async def upload_recording(
    request: Request,
    recording: UploadFile = File(...),
    fileName: Optional[str] = Form(None)
):
    """
    Save an uploaded recording under RECORDINGS_DIR.
    No format checks: the body is written as-is.
    """
    directory = Path(request.app.state.settings.RECORDINGS_DIR)
    name = safe_file_name(fileName)
    target = directory / name

    try:
        directory.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            shutil.copyfileobj(recording.file, f)
    except OSError as e:
        logger.error(f"Recording upload failed: {str(e)}")
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})
    finally:
        await recording.close()

    logger.info(f"💾 Recording saved: {target}")

    return {
        "ok": True,
        "message": "Recording uploaded",
        "fileName": name,
        "path": str(target)
    }
