# FILE: vocapp/chat/stream.py
"""
Side channel between a running turn and the SSE transport.

The turn pushes events; the transport drains them. Exactly one terminal
event ends the stream: {"type": "final", "payload": {...}} or
{"type": "error", "message": "..."}. After the client disconnects the
channel is closed and every later event is dropped.
"""
from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, Optional

_END = None


class TurnStream:
    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Optional[Dict[str, Any]]]" = asyncio.Queue()
        self.closed = False
        self.finished = False
        self.final_payload: Optional[Dict[str, Any]] = None

    @property
    def writable(self) -> bool:
        return not (self.closed or self.finished)

    def emit(self, event: Dict[str, Any]) -> None:
        if self.writable:
            self._queue.put_nowait(event)

    def finish(self, payload: Dict[str, Any]) -> None:
        """Send the final structured outcome and end the stream."""
        if self.finished:
            return
        self.final_payload = payload
        self.emit({"type": "final", "payload": payload})
        self._end()

    def fail(self, message: str) -> None:
        if self.finished:
            return
        self.emit({"type": "error", "message": message})
        self._end()

    def close(self) -> None:
        """Transport side: the client went away."""
        self.closed = True
        self._queue.put_nowait(_END)

    def _end(self) -> None:
        self.finished = True
        self._queue.put_nowait(_END)

    async def events(self) -> AsyncIterator[Dict[str, Any]]:
        while True:
            event = await self._queue.get()
            if event is _END:
                return
            yield event
