"""Streaming chat client, the Python counterpart of a UI chat hook.

`ChatSession` posts a message to the relay, reads the SSE response frame
by frame and folds each event into a `Conversation`. Everything that can
go wrong ends up as an assistant entry rather than an exception.

Usage:
    async with httpx.AsyncClient(base_url="http://localhost:3000") as http:
        session = ChatSession(http)
        task = session.send_message("2+2?")
        await task
        print(session.messages[-1].content)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from chatrelay.client.conversation import Conversation, ConversationEntry
from chatrelay.client.render import render_markdown
from chatrelay.client.sse import SSEDecoder
from chatrelay.models import (
    ChunkEvent,
    EndEvent,
    ErrorEvent,
    StartEvent,
    StreamEvent,
    stream_event_adapter,
)

logger = logging.getLogger(__name__)

DEFAULT_URL = "/ai/chat/stream-sse"
SERVICE_UNAVAILABLE = "Service unavailable"


class StreamInterrupted(Exception):
    """The SSE stream ended without a terminal frame."""


class ChatSession:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        url: str = DEFAULT_URL,
        conversation: Conversation | None = None,
        renderer: Callable[[str], str] | None = None,
        on_update: Callable[[Conversation], None] | None = None,
    ) -> None:
        self._http = http_client
        self._url = url
        self.conversation = conversation if conversation is not None else Conversation()
        self._render = renderer or render_markdown
        self._on_update = on_update
        self._task: asyncio.Task[None] | None = None

    @property
    def messages(self) -> list[ConversationEntry]:
        return self.conversation.entries

    @property
    def is_streaming(self) -> bool:
        return self.conversation.is_streaming

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def send_message(self, text: str) -> asyncio.Task[None] | None:
        """Start a chat turn. Blank input is ignored and returns None.

        Must be called from a running event loop. The user entry is added
        before this returns; the answer streams in on the returned task.
        """
        message = text.strip()
        if not message:
            return None

        self.stop_conversation()
        self.conversation.add_user(text)
        self.conversation.is_streaming = True
        self._notify()

        self._task = asyncio.create_task(self._query_answer(message))
        return self._task

    def stop_conversation(self) -> bool:
        """Abort the in-flight turn, if any. Returns True if one was aborted."""
        task = self._task
        if task is None or task.done() or not self.conversation.is_streaming:
            return False

        task.cancel()
        self._task = None
        self.conversation.finish()
        self.conversation.is_streaming = False
        self._notify()
        return True

    # -----------------------------------------------------------------
    # Stream handling
    # -----------------------------------------------------------------

    async def _query_answer(self, message: str) -> None:
        try:
            await self._consume(message)
        except asyncio.CancelledError:
            logger.debug("Chat stream cancelled by caller")
            raise
        except (httpx.HTTPError, ValidationError, StreamInterrupted) as e:
            logger.warning("Chat stream failed: %s", e)
            self.conversation.fail(SERVICE_UNAVAILABLE)
            self._notify()

    async def _consume(self, message: str) -> None:
        decoder = SSEDecoder()
        async with self._http.stream(
            "POST",
            self._url,
            json={"message": message},
            headers={"Accept": "text/event-stream"},
        ) as resp:
            resp.raise_for_status()
            async for line in resp.aiter_lines():
                data = decoder.feed(line)
                if data is None:
                    continue
                if self._handle_event(stream_event_adapter.validate_json(data)):
                    return
            data = decoder.flush()
            if data is not None and self._handle_event(
                stream_event_adapter.validate_json(data)
            ):
                return
        raise StreamInterrupted("connection closed before end of stream")

    def _handle_event(self, event: StreamEvent) -> bool:
        """Apply one frame. Returns True once the turn is over."""
        done = False
        if isinstance(event, StartEvent):
            self.conversation.begin_assistant()
        elif isinstance(event, ChunkEvent):
            entry = self.conversation.append_chunk(event.content)
            if entry is not None:
                self._refresh_view(entry)
        elif isinstance(event, EndEvent):
            self.conversation.finish()
            self.conversation.is_streaming = False
            done = True
        elif isinstance(event, ErrorEvent):
            kind = event.kind.value if event.kind else "error"
            logger.info("Relay reported %s: %s", kind, event.message)
            self.conversation.fail(event.message)
            done = True
        self._notify()
        return done

    def _refresh_view(self, entry: ConversationEntry) -> None:
        entry.html_str = self._render(entry.content)

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self.conversation)
