"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from openai.types.chat import ChatCompletionChunk
from openai.types.chat.chat_completion_chunk import Choice, ChoiceDelta

from chatrelay.config import settings
from chatrelay.main import app
from chatrelay.upstream import get_upstream_client


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(autouse=True)
def configured_upstream():
    """Pretend an API key is configured unless a test says otherwise."""
    with patch.object(settings, "openai_api_key", "test-key"):
        yield


# ---------------------------------------------------------------------------
# Mock helpers for the upstream OpenAI-compatible API
# ---------------------------------------------------------------------------


def make_chunk(content: str | None, *, with_choice: bool = True) -> ChatCompletionChunk:
    """Create a real ChatCompletionChunk carrying one text delta."""
    choices = []
    if with_choice:
        choices.append(
            Choice(index=0, delta=ChoiceDelta(content=content), finish_reason=None)
        )
    return ChatCompletionChunk(
        id="chatcmpl-test",
        choices=choices,
        created=0,
        model="qwen-plus",
        object="chat.completion.chunk",
    )


def make_text_chunks(text: str = "Hello from the model!", chunk_size: int = 5):
    return [make_chunk(text[i : i + chunk_size]) for i in range(0, len(text), chunk_size)]


def make_status_error(cls, status: int, message: str = "upstream says no"):
    """Build an openai.APIStatusError subclass with a real httpx response."""
    request = httpx.Request("POST", "https://upstream.test/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls(message, response=response, body=None)


class FakeStream:
    """Stands in for openai.AsyncStream: async-iterable and closable."""

    def __init__(self, items):
        self._items = items
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    async def __aiter__(self):
        for item in self._items:
            if isinstance(item, BaseException):
                raise item
            yield item


@pytest.fixture
def mock_upstream():
    """Override the upstream client dependency with canned responses.

    Yields a dict with the fake client, a helper to set the streamed items
    (chunks, or exceptions raised mid-stream) and a helper to make
    `create()` itself fail.

    Usage:
        def test_chat(mock_upstream):
            mock_upstream["set_chunks"](make_text_chunks("Hi!"))
    """
    state = {"items": make_text_chunks(), "streams": []}

    async def create(**kwargs):
        stream = FakeStream(state["items"])
        state["streams"].append(stream)
        return stream

    completions = SimpleNamespace(create=AsyncMock(side_effect=create))
    fake_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    def set_chunks(items):
        state["items"] = items

    def fail_with(exc):
        completions.create.side_effect = exc

    app.dependency_overrides[get_upstream_client] = lambda: fake_client
    yield {
        "client": fake_client,
        "create": completions.create,
        "set_chunks": set_chunks,
        "fail_with": fail_with,
        "streams": state["streams"],
    }
    app.dependency_overrides.pop(get_upstream_client, None)


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """sse-starlette keeps a module-level exit event bound to the first loop."""
    from sse_starlette.sse import AppStatus

    AppStatus.should_exit_event = None
    yield
    AppStatus.should_exit_event = None
