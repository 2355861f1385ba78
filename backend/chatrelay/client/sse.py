"""Incremental SSE frame decoder.

Feed it lines as they come off the wire; it returns the `data` payload of
each completed frame. Handles both \\n and \\r\\n line endings and skips
comment lines (keep-alive pings).
"""

from __future__ import annotations


class SSEDecoder:
    def __init__(self) -> None:
        self._data: list[str] = []

    def feed(self, line: str) -> str | None:
        """Consume one line; return the frame data when a frame completes."""
        line = line.rstrip("\r")
        if line == "":
            return self.flush()
        if line.startswith(":"):
            return None
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data.append(value)
        return None

    def flush(self) -> str | None:
        """Dispatch whatever has been buffered, if anything."""
        if not self._data:
            return None
        data = "\n".join(self._data)
        self._data = []
        return data
