"""Circular move aggregation.

Consecutive arcs around the same center are merged into one arc, and a
merged sweep that closes the circle is written as a single full-circle
block.  The aggregator relies on the caller telling it whether the next
event is also circular; with merging enabled it keeps at most one buffer
open, and the buffer is always flushed before a non-circular event is
processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..core.toolpath.base import CircularMove, Plane, Point
from ..core.toolpath.geometry import TWO_PI, arc_radius, arc_sweep, distance, linearize_arc
from . import codes
from .modal import ModalGroup
from .numbers import ValueKind

if TYPE_CHECKING:
    from .context import GenerationContext

CENTER_TOLERANCE_MM = 0.2
FULL_CIRCLE_EPSILON = 1e-4


@dataclass
class CircularMoveBuffer:
    center: Point
    start: Point
    end: Point
    clockwise: bool
    radius: float
    sweep: float
    plane: Plane = Plane.XY
    feed: Optional[float] = None

    @property
    def is_full_circle(self) -> bool:
        return self.sweep >= TWO_PI - FULL_CIRCLE_EPSILON


class CircularMoveAggregator:
    def __init__(self) -> None:
        self.buffer: Optional[CircularMoveBuffer] = None

    def push(self, ctx: GenerationContext, move: CircularMove, next_is_circular: bool) -> None:
        """Take one circular event; write whatever can no longer change."""
        ctx.compensation.check_motion("circular")

        start = ctx.position
        sweep = arc_sweep(start, move.end, move.center, move.clockwise, move.plane)

        if self.buffer is not None and self._can_merge(ctx, move, sweep):
            self.buffer.sweep += sweep
            self.buffer.end = move.end
            if move.feed is not None:
                self.buffer.feed = move.feed
            if self.buffer.is_full_circle or not next_is_circular:
                self.flush(ctx)
        else:
            self.flush(ctx)
            self.buffer = CircularMoveBuffer(
                center=move.center,
                start=start,
                end=move.end,
                clockwise=move.clockwise,
                radius=arc_radius(start, move.center, move.plane),
                sweep=sweep,
                plane=move.plane,
                feed=move.feed,
            )
            hold = ctx.config.merge_circles and next_is_circular
            if not hold or self.buffer.is_full_circle:
                self.flush(ctx)

        ctx.position = move.end

    def _can_merge(self, ctx: GenerationContext, move: CircularMove, sweep: float) -> bool:
        b = self.buffer
        return (
            move.clockwise == b.clockwise
            and move.plane is b.plane
            and distance(move.center, b.center) <= ctx.from_mm(CENTER_TOLERANCE_MM)
            and b.sweep + sweep <= TWO_PI + FULL_CIRCLE_EPSILON
        )

    def flush(self, ctx: GenerationContext) -> None:
        """Write the buffered arc, if any, and close the buffer."""
        b = self.buffer
        if b is None:
            return
        self.buffer = None

        if b.plane is not Plane.XY:
            # No arc words outside XY: approximate with chords.
            tolerance = ctx.from_mm(ctx.config.chordal_tolerance)
            for point in linearize_arc(
                b.start, b.center, b.end, b.clockwise, b.plane, b.sweep, tolerance
            ):
                ctx.move(codes.LINEAR, point.x, point.y, feed=b.feed)
            return

        code = codes.ARC_CW if b.clockwise else codes.ARC_CCW
        # Center offsets are always relative to where the move starts.
        offsets = (
            ctx.formatter.word("I", b.center.x - b.start.x, ValueKind.ARC_OFFSET),
            ctx.formatter.word("J", b.center.y - b.start.y, ValueKind.ARC_OFFSET),
        )
        if b.is_full_circle:
            ctx.modal.force(ModalGroup.X, ModalGroup.Y)
            ctx.move(code, b.start.x, b.start.y, feed=b.feed, trailing=offsets)
        else:
            ctx.move(code, b.end.x, b.end.y, feed=b.feed, trailing=offsets)

    def finish(self, ctx: GenerationContext) -> None:
        self.flush(ctx)
