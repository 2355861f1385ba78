"""Pydantic models — the shared contract between relay and client.

These models define the request body and the SSE event payloads. Each
frame on the wire is `data: <event JSON>` followed by a blank line, and
the `type` field tells the events apart.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class ChatRequest(BaseModel):
    """POST /ai/chat/stream-sse request body."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    system_prompt: str | None = Field(default=None, alias="systemPrompt")


class Message(BaseModel):
    """One entry of the messages array sent upstream."""
    role: Literal["system", "user", "assistant"]
    content: str


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    """GET /api/health response."""
    status: Literal["ok", "degraded"]
    version: str = "0.1.0"
    upstream_configured: bool


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorKind(str, Enum):
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_REJECTED = "upstream_rejected"
    MALFORMED_RESPONSE = "malformed_response"


GENERIC_ERROR = "Internal server error"

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UPSTREAM_UNAVAILABLE: (
        "The model service is temporarily unavailable. Please try again later."
    ),
    ErrorKind.UPSTREAM_REJECTED: "The model service rejected the request.",
    ErrorKind.MALFORMED_RESPONSE: "The model service returned an unexpected response.",
}


# ---------------------------------------------------------------------------
# SSE event data shapes (what goes in the `data` field of each SSE frame)
# ---------------------------------------------------------------------------

class StartEvent(BaseModel):
    type: Literal["start"] = "start"


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    content: str


class EndEvent(BaseModel):
    type: Literal["end"] = "end"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str = GENERIC_ERROR
    message: str
    kind: ErrorKind | None = None

    @classmethod
    def for_kind(cls, kind: ErrorKind) -> ErrorEvent:
        return cls(message=ERROR_MESSAGES[kind], kind=kind)


StreamEvent = Annotated[
    Union[StartEvent, ChunkEvent, EndEvent, ErrorEvent],
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)
