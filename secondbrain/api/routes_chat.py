from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from secondbrain.api.schemas import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter()

GENERIC_ERROR = "An unexpected error occurred. Please try again later."


def generic_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=GENERIC_ERROR).model_dump())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unreadable bodies (invalid JSON, non-object payloads) get the same answer as any other failure."""
    logger.warning("Rejected chat request body (%d validation errors)", len(exc.errors()))
    return generic_error_response()


@router.post("/api/chat")
def chat(req: ChatRequest, request: Request):
    chat_service = request.app.state.chat_service
    try:
        deltas = chat_service.stream_answer(req.message_dicts())
    except Exception:
        logger.exception("Chat request failed")
        return generic_error_response()

    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")
