"""Relay layer: turns one chat request into an ordered stream of events.

The critical interface is `generate_events()`, an async generator that
yields `StreamEvent` models: one `start`, zero or more `chunk`, then
exactly one of `end` or `error`. The SSE bridge and route consume this
interface and never look at upstream types.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator

import openai
from openai import AsyncOpenAI

from chatrelay.models import (
    ChatRequest,
    ChunkEvent,
    EndEvent,
    ErrorEvent,
    ErrorKind,
    Message,
    StartEvent,
    StreamEvent,
)
from chatrelay.upstream import classify_upstream_error, stream_completion

logger = logging.getLogger(__name__)


def build_messages(request: ChatRequest, default_system_prompt: str) -> list[Message]:
    """System message first, user message second."""
    return [
        Message(role="system", content=request.system_prompt or default_system_prompt),
        Message(role="user", content=request.message),
    ]


async def generate_events(
    request: ChatRequest,
    client: AsyncOpenAI | None,
    *,
    model: str,
    default_system_prompt: str,
) -> AsyncGenerator[StreamEvent, None]:
    """Yield the event sequence for one chat turn.

    `client` is None when no upstream credentials are configured; the turn
    then fails with `upstream_rejected` without any network call.
    """
    yield StartEvent()

    if client is None:
        logger.warning("Upstream API key not configured; rejecting chat request")
        yield ErrorEvent.for_kind(ErrorKind.UPSTREAM_REJECTED)
        return

    messages = build_messages(request, default_system_prompt)
    chunks = 0
    try:
        async for text in stream_completion(client, messages, model):
            chunks += 1
            yield ChunkEvent(content=text)
    except asyncio.CancelledError:
        logger.info("Client disconnected after %d chunks; upstream stream closed", chunks)
        raise
    except openai.APIError as e:
        kind = classify_upstream_error(e)
        logger.error("Upstream API error (%s): %s", kind.value, e)
        yield ErrorEvent.for_kind(kind)
        return
    except Exception as e:
        kind = classify_upstream_error(e)
        logger.exception("Unexpected error in SSE chat stream (%s)", kind.value)
        yield ErrorEvent.for_kind(kind)
        return

    logger.debug("Chat stream finished with %d chunks", chunks)
    yield EndEvent()
