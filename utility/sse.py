# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-24
# Description: sse.py
# -----------------------------------------------------------------------------
"""
Line-oriented chat event framing (server-sent events).

Each event is a named block followed by a blank line:

    event: delta
    data: {"text": "Hello"}

    event: done
    data: [DONE]

The literal payload [DONE] marks the end of the stream.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Optional

DONE_PAYLOAD = "[DONE]"
EVENT_DELTA = "delta"
EVENT_DONE = "done"


@dataclass(frozen=True)
class ChatEvent:
    type: str  # "delta" | "done"
    text: str = ""

    @property
    def is_done(self) -> bool:
        return self.type == EVENT_DONE

    @classmethod
    def delta(cls, text: str) -> "ChatEvent":
        return cls(type=EVENT_DELTA, text=text)

    @classmethod
    def done(cls) -> "ChatEvent":
        return cls(type=EVENT_DONE)


def encode_event(event: ChatEvent) -> str:
    if event.is_done:
        return f"event: {EVENT_DONE}\ndata: {DONE_PAYLOAD}\n\n"
    return f"event: {EVENT_DELTA}\ndata: {json.dumps({'text': event.text})}\n\n"


class SSEDecoder:
    """
    Incremental decoder. feed() accepts arbitrary network chunks and returns
    the complete events they finish; a trailing partial event is buffered
    until the next feed().
    """

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, chunk: str) -> List[ChatEvent]:
        self._buffer += chunk.replace("\r\n", "\n")
        events: List[ChatEvent] = []
        while "\n\n" in self._buffer:
            block, self._buffer = self._buffer.split("\n\n", 1)
            event = self._parse_block(block)
            if event is not None:
                events.append(event)
        return events

    @property
    def pending(self) -> str:
        return self._buffer

    @staticmethod
    def _parse_block(block: str) -> Optional[ChatEvent]:
        name: Optional[str] = None
        data_lines: List[str] = []
        for line in block.split("\n"):
            if not line or line.startswith(":"):
                continue
            field, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]
            if field == "event":
                name = value
            elif field == "data":
                data_lines.append(value)

        if not data_lines:
            return None

        data = "\n".join(data_lines)
        if data == DONE_PAYLOAD or name == EVENT_DONE:
            return ChatEvent.done()

        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            return ChatEvent.delta(data)
        if isinstance(payload, dict):
            return ChatEvent.delta(str(payload.get("text", "")))
        return ChatEvent.delta(str(payload))
