"""Block sequence numbering (``N`` words)."""

from __future__ import annotations

from .errors import ConfigError

SEQUENCE_CEILING = 99999


class SequenceNumberer:
    """Monotonic sequence numbers that wrap back to *start* past *ceiling*."""

    def __init__(
        self,
        start: int = 10,
        increment: int = 5,
        ceiling: int = SEQUENCE_CEILING,
    ):
        if start < 0 or start > ceiling:
            raise ConfigError(f"Sequence start {start} outside [0, {ceiling}]")
        if increment <= 0:
            raise ConfigError(f"Sequence increment must be positive, got {increment}")
        self.start = start
        self.increment = increment
        self.ceiling = ceiling
        self.current = start

    def next(self) -> int:
        value = self.current
        self.current += self.increment
        if self.current > self.ceiling:
            self.current = self.start
        return value
