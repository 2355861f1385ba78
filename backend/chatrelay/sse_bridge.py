"""SSE bridge — translates StreamEvent models to ServerSentEvent frames.

This module sits between the relay layer and the HTTP response. Every
frame is a bare `data:` line holding the event JSON; the event type
travels inside the payload, so no `event:` field is set.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from sse_starlette.sse import ServerSentEvent

from chatrelay.models import StreamEvent

FRAME_SEPARATOR = "\n"


async def stream_sse_events(
    event_source: AsyncGenerator[StreamEvent, None],
) -> AsyncGenerator[ServerSentEvent, None]:
    """Convert relay events to SSE frames.

    Args:
        event_source: Async generator from relay.generate_events().

    Yields:
        ServerSentEvent objects ready for EventSourceResponse.
    """
    async for event in event_source:
        yield ServerSentEvent(
            data=event.model_dump_json(),
            sep=FRAME_SEPARATOR,
        )
