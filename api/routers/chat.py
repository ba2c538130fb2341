# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-02-27
# Description: chat.py
# -----------------------------------------------------------------------------
import logging
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from api.dependencies import get_chat_service
from api.schemas.chat import ChatErrorResponse, ChatRequest
from services.MemberChatService import MemberChatService
from utility.errors import ProviderUnavailable, ValidationError
from utility.sse import ChatEvent, encode_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _sse(events: Iterator[ChatEvent]) -> Iterator[str]:
    try:
        for event in events:
            yield encode_event(event)
    finally:
        # client disconnects close the generator; propagate to the backend stream
        close = getattr(events, "close", None)
        if callable(close):
            close()


@router.post("")
def post_chat(
        req: ChatRequest,
        svc: MemberChatService = Depends(get_chat_service),
):
    history = [h.model_dump() for h in req.history]
    logger.info("POST /chat (start) message_len=%d history=%d", len((req.message or "").strip()), len(history))

    try:
        events = svc.open_stream(req.message, history)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=ChatErrorResponse(error=str(e)).model_dump())
    except ProviderUnavailable as e:
        logger.error("POST /chat rejected: %s", e)
        return JSONResponse(status_code=503, content=ChatErrorResponse(error=str(e)).model_dump())

    return StreamingResponse(_sse(events), media_type="text/event-stream", headers=SSE_HEADERS)
