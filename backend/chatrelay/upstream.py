"""Upstream layer: streams text deltas from an OpenAI-compatible chat API.

`stream_completion()` is an async generator of plain text fragments. It
owns the upstream HTTP response: closing the generator (normally, on
error, or because the consuming task was cancelled) closes the upstream
stream as well.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from chatrelay.config import settings
from chatrelay.models import ErrorKind, Message

logger = logging.getLogger(__name__)


@lru_cache
def get_upstream_client() -> AsyncOpenAI:
    """Shared AsyncOpenAI client, built once from settings."""
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.upstream_timeout_seconds,
        max_retries=0,
    )


async def close_upstream_client() -> None:
    if get_upstream_client.cache_info().currsize:
        await get_upstream_client().close()
        get_upstream_client.cache_clear()


async def stream_completion(
    client: AsyncOpenAI,
    messages: list[Message],
    model: str,
) -> AsyncGenerator[str, None]:
    """Yield each non-empty text delta of a streaming completion, in order."""
    stream = await client.chat.completions.create(
        model=model,
        messages=[m.model_dump() for m in messages],
        stream=True,
    )
    async with stream:
        async for chunk in stream:
            # Some providers send a trailing usage chunk with no choices
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content


def classify_upstream_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised while streaming to a stable ErrorKind."""
    if isinstance(exc, openai.APIResponseValidationError):
        return ErrorKind.MALFORMED_RESPONSE
    if isinstance(exc, openai.APIConnectionError):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 429 or exc.status_code >= 500:
            return ErrorKind.UPSTREAM_UNAVAILABLE
        return ErrorKind.UPSTREAM_REJECTED
    if isinstance(exc, (ValidationError, json.JSONDecodeError, AttributeError)):
        return ErrorKind.MALFORMED_RESPONSE
    return ErrorKind.UPSTREAM_UNAVAILABLE
