"""
Progress events and the channel that carries them.

The pipeline pushes typed events into an EventChannel; whoever drives the
request (CLI, HTTP streaming layer, test) iterates the channel. Closing or
cancelling from the consumer side tells the pipeline to stop between batches.
"""

from __future__ import annotations
import asyncio
import json
from dataclasses import dataclass, asdict
from typing import Any, AsyncIterator, Dict, List, Optional, Union


@dataclass
class StatusEvent:
    message: str
    type: str = "status"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass
class StatsEvent:
    total_products: int
    total_items: int
    unique_items: int
    type: str = "stats"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "totalProducts": self.total_products,
            "totalItems": self.total_items,
            "uniqueItems": self.unique_items,
        }


@dataclass
class ProgressEvent:
    completed: int
    total: int
    percent: int = 0
    type: str = "progress"

    @classmethod
    def of(cls, completed: int, total: int) -> ProgressEvent:
        percent = round(completed / total * 100) if total else 100
        return cls(completed=completed, total=total, percent=percent)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CompleteEvent:
    translated_document: str
    translation_count: int
    message: str
    type: str = "complete"
    terminal = True

    def to_dict(self) -> Dict[str, Any]:
        # Key names match the feed translator's browser client
        return {
            "type": self.type,
            "translatedXml": self.translated_document,
            "translationCount": self.translation_count,
            "message": self.message,
        }


@dataclass
class ErrorEvent:
    message: str
    type: str = "error"
    terminal = True

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


FeedEvent = Union[StatusEvent, StatsEvent, ProgressEvent, CompleteEvent, ErrorEvent]


def is_terminal(event: FeedEvent) -> bool:
    return getattr(event, "terminal", False)


def to_sse(event: FeedEvent) -> str:
    """Serialize an event as one Server-Sent-Events frame."""
    return f"data: {json.dumps(event.to_dict(), ensure_ascii=False)}\n\n"


_CLOSED = object()


class EventChannel:
    """
    Single-producer, single-consumer queue of feed events.

    Usage:
        channel = EventChannel()
        task = asyncio.create_task(pipeline.run(job, channel))
        async for event in channel:
            ...
    """

    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._cancelled = False
        self.terminal_event: Optional[FeedEvent] = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def emit(self, event: FeedEvent) -> None:
        """Push an event; silently dropped once the channel is closed or cancelled."""
        if self._closed or self._cancelled:
            return
        if is_terminal(event):
            if self.terminal_event is not None:
                return
            self.terminal_event = event
        await self._queue.put(event)

    async def close(self) -> None:
        """Producer side: no more events will follow."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    def cancel(self) -> None:
        """Consumer side: abandon the request."""
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    async def get(self) -> Optional[FeedEvent]:
        """Next event, or None once the channel is closed and drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the sentinel available for any further get()
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def __aiter__(self) -> AsyncIterator[FeedEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[FeedEvent]:
        while True:
            event = await self.get()
            if event is None:
                return
            yield event

    async def collect(self) -> List[FeedEvent]:
        """Drain every remaining event into a list."""
        return [event async for event in self]
