"""Chat endpoint — POST /ai/chat/stream-sse → SSE stream."""

from fastapi import APIRouter, Depends
from openai import AsyncOpenAI
from sse_starlette.sse import EventSourceResponse

from chatrelay.config import settings
from chatrelay.models import ChatRequest
from chatrelay.relay import generate_events
from chatrelay.sse_bridge import FRAME_SEPARATOR, stream_sse_events
from chatrelay.upstream import get_upstream_client

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Cache-Control",
}


@router.post("/ai/chat/stream-sse")
async def chat_stream_sse(
    request: ChatRequest,
    client: AsyncOpenAI = Depends(get_upstream_client),
) -> EventSourceResponse:
    """Send a message, receive the model's answer as SSE frames.

    Events emitted: start, chunk, end | error.
    """
    event_source = generate_events(
        request,
        client if settings.upstream_configured else None,
        model=settings.openai_model,
        default_system_prompt=settings.default_system_prompt,
    )
    return EventSourceResponse(
        stream_sse_events(event_source),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        ping=settings.sse_ping_seconds,
        sep=FRAME_SEPARATOR,
    )
