"""Client-side conversation state.

`Conversation` owns the ordered entry list, the single in-progress
assistant entry and the streaming flag. Mutations here only touch raw
content; the derived HTML view is filled in separately by the session.
"""

from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel, Field


class ConversationEntry(BaseModel):
    """One chat bubble."""
    mid: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Literal["user", "assistant"]
    content: str = ""
    html_str: str | None = None
    final: bool = False


class Conversation(BaseModel):
    entries: list[ConversationEntry] = Field(default_factory=list)
    current: ConversationEntry | None = None
    is_streaming: bool = False

    def add_user(self, content: str) -> ConversationEntry:
        entry = ConversationEntry(role="user", content=content, final=True)
        self.entries.append(entry)
        return entry

    def begin_assistant(self) -> ConversationEntry:
        """Append an empty assistant entry and make it the current one."""
        self.finish()
        entry = ConversationEntry(role="assistant")
        self.entries.append(entry)
        self.current = entry
        return entry

    def append_chunk(self, text: str) -> ConversationEntry | None:
        if self.current is None:
            return None
        self.current.content += text
        return self.current

    def finish(self) -> None:
        """Freeze the current entry as it stands."""
        if self.current is not None:
            self.current.final = True
            self.current = None

    def fail(self, message: str) -> ConversationEntry:
        """End the turn with an error message.

        The in-progress entry, if any, is replaced by the message so one
        failed turn leaves exactly one assistant entry.
        """
        entry = self.current
        if entry is None:
            entry = ConversationEntry(role="assistant")
            self.entries.append(entry)
        entry.content = message
        entry.html_str = None
        entry.final = True
        self.current = None
        self.is_streaming = False
        return entry
