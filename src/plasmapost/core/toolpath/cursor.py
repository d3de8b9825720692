"""Peekable cursor over a toolpath event stream."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .base import ToolpathEvent

_EMPTY = object()       # nothing looked ahead yet
_EXHAUSTED = object()   # lookahead hit the end of the stream


class EventCursor:
    """Iterate events once, with a one-event lookahead through :meth:`peek`."""

    def __init__(self, events: Iterable[ToolpathEvent]):
        self._events = iter(events)
        self._lookahead = _EMPTY

    def __iter__(self) -> Iterator[ToolpathEvent]:
        return self

    def __next__(self) -> ToolpathEvent:
        if self._lookahead is _EXHAUSTED:
            raise StopIteration
        if self._lookahead is not _EMPTY:
            event, self._lookahead = self._lookahead, _EMPTY
            return event
        return next(self._events)

    def peek(self) -> Optional[ToolpathEvent]:
        """Return the next event without consuming it (``None`` at the end)."""
        if self._lookahead is _EMPTY:
            self._lookahead = next(self._events, _EXHAUSTED)
        if self._lookahead is _EXHAUSTED:
            return None
        return self._lookahead
