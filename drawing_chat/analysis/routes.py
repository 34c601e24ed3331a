"""
Analysis Routes - FastAPI endpoints for drawing upload and follow-up chat

Uploads are validated and written to disk here; the assistant only ever sees
a stored image path, the original file name and the generated cache key.
"""
import os
import time
import uuid
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .. import config
from .assistant import AnalysisNotFound, DrawingAssistant, build_default_assistant
from .imaging import ImagePreparationError, verify_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

_assistant: Optional[DrawingAssistant] = None


def get_assistant() -> DrawingAssistant:
    """Get or create the process-wide assistant instance."""
    global _assistant
    if _assistant is None:
        _assistant = build_default_assistant()
    return _assistant


def set_assistant(assistant: Optional[DrawingAssistant]) -> None:
    """Replace the process-wide assistant (used at startup and in tests)."""
    global _assistant
    _assistant = assistant


def _upload_key(original_name: str) -> str:
    """Generate a unique stored name, which doubles as the cache key."""
    extension = os.path.splitext(original_name or "")[1].lower()
    return f"document-{int(time.time() * 1000)}-{uuid.uuid4().hex[:10]}{extension}"


# =============================================================================
# STATUS ENDPOINTS
# =============================================================================
@router.get("/health")
async def health():
    """Report service status and whether a model backend is reachable."""
    assistant = get_assistant()
    available = await run_in_threadpool(assistant.gateway.is_usable)
    return {
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'aiProvider': assistant.gateway.provider_label,
        'modelsAvailable': available,
    }


@router.get("/models")
async def list_models():
    """List backend models and the preferred vision/text selections."""
    assistant = get_assistant()
    gateway = assistant.gateway
    descriptors = await run_in_threadpool(gateway.list_models)

    if not gateway.is_usable(descriptors):
        return {
            'available': False,
            'provider': gateway.provider_label,
            'models': [],
            'preferredVisionModel': None,
            'preferredTextModel': None,
        }

    vision = gateway.select_vision_model(descriptors)
    text = gateway.select_text_model(descriptors)
    return {
        'available': True,
        'provider': gateway.provider_label,
        'models': [model.name for model in descriptors],
        'preferredVisionModel': vision.name if vision else None,
        'preferredTextModel': text.name if text else None,
    }


# =============================================================================
# UPLOAD & ANALYSIS
# =============================================================================
@router.post("/upload")
async def upload_document(document: Optional[UploadFile] = File(None)):
    """Validate and store an uploaded drawing, then analyze it."""
    if document is None or not document.filename:
        return JSONResponse(content={'error': 'No file uploaded'}, status_code=400)

    if document.content_type not in config.ALLOWED_IMAGE_TYPES:
        return JSONResponse(
            content={'error': 'Invalid file type. Only images are supported.'},
            status_code=400,
        )

    # One byte past the limit is enough to detect an oversized upload.
    content = await document.read(config.MAX_FILE_SIZE + 1)
    if len(content) > config.MAX_FILE_SIZE:
        return JSONResponse(
            content={
                'error': 'File too large',
                'details': f"Maximum upload size is {config.MAX_FILE_SIZE} bytes",
            },
            status_code=413,
        )

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    key = _upload_key(document.filename)
    stored_path = os.path.join(config.UPLOAD_DIR, key)

    try:
        with open(stored_path, 'wb') as f:
            f.write(content)

        try:
            verify_image(stored_path)
        except ImagePreparationError as exc:
            logger.warning("Rejected unreadable upload %s: %s", document.filename, exc)
            os.remove(stored_path)
            return JSONResponse(
                content={'error': 'Uploaded file is not a readable image'},
                status_code=400,
            )

        logger.info(f"Starting analysis of {document.filename} as {key}")
        outcome = await run_in_threadpool(
            get_assistant().analyze, stored_path, document.filename, key
        )
        return JSONResponse(content=outcome.to_dict())

    except Exception as e:
        logger.error(f"Upload error: {str(e)}", exc_info=True)
        return JSONResponse(
            content={'error': 'Failed to analyze document', 'details': str(e)},
            status_code=500,
        )


# =============================================================================
# FOLLOW-UP CHAT
# =============================================================================
@router.post("/chat")
async def chat(request: Request):
    """Answer a question about a previously analyzed drawing."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        payload = {}

    question = payload.get('question')
    file_name = payload.get('fileName')
    if not isinstance(question, str) or not question.strip() or not isinstance(file_name, str) or not file_name:
        return JSONResponse(content={'error': 'Question and fileName are required'}, status_code=400)

    try:
        answer = await run_in_threadpool(get_assistant().ask, question.strip(), file_name)
        return JSONResponse(content=answer.to_dict())

    except AnalysisNotFound:
        return JSONResponse(content={'error': 'Document analysis not found'}, status_code=404)

    except Exception as e:
        logger.error(f"Chat error: {str(e)}", exc_info=True)
        return JSONResponse(
            content={'error': 'Failed to process question', 'details': str(e)},
            status_code=500,
        )
