"""Event stream validation and sanity checks.

Checks the toolpath against the cutting table and feed limits of the
controller before any program is written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from shapely.geometry import LineString, Point as ShapelyPoint, box

from ..core.toolpath.base import (
    ORIGIN,
    CircularMove,
    LinearMove,
    Point,
    RapidMove,
    SectionStart,
    ToolpathEvent,
)
from ..core.toolpath.geometry import arc_sweep, linearize_arc
from ..core.units import Units

# Chordal tolerance (mm) used when tracing arcs for the table check.
_TRACE_TOLERANCE_MM = 0.5


@dataclass
class MachineEnvelope:
    """Cutting table limits in millimetres, feed limit in mm/min."""

    x_min: float = 0.0
    x_max: float = 3048.0
    y_min: float = 0.0
    y_max: float = 1524.0
    max_feed: float = 15000.0


@dataclass
class ValidationIssue:
    """A single validation problem found in the event stream."""

    severity: str  # "error" or "warning"
    message: str
    event: Optional[ToolpathEvent] = None


@dataclass
class ValidationResult:
    """Result of validating an event stream."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    @property
    def is_ok(self) -> bool:
        return len(self.issues) == 0


@dataclass
class _Trace:
    name: str
    points: list[tuple[float, float]] = field(default_factory=list)


def _to_mm(p: Point, units: Units) -> tuple[float, float]:
    return units.to_mm(p.x), units.to_mm(p.y)


def validate_events(
    events: Iterable[ToolpathEvent],
    envelope: MachineEnvelope,
    units: Units = Units.INCH,
) -> ValidationResult:
    """Check *events* against *envelope* limits.

    Checks performed:
    - The path of every section stays on the cutting table
    - Feed rates within machine maximum
    - The stream contains at least one cutting move
    """
    result = ValidationResult()
    table = box(envelope.x_min, envelope.y_min, envelope.x_max, envelope.y_max)

    position = ORIGIN
    traces: list[_Trace] = [_Trace("(before first section)")]
    has_cut = False

    for event in events:
        if isinstance(event, SectionStart):
            traces.append(_Trace(event.name or f"section {len(traces)}"))
            if event.initial_position is not None:
                position = event.initial_position
                traces[-1].points.append(_to_mm(position, units))
            continue

        feed = getattr(event, "feed", None)
        if feed is not None and units.to_mm(feed) > envelope.max_feed:
            result.issues.append(ValidationIssue(
                "warning",
                f"Feed {feed:.1f} {units.label()}/min exceeds machine max "
                f"({units.from_mm(envelope.max_feed):.1f})",
                event,
            ))

        if isinstance(event, (RapidMove, LinearMove)):
            position = Point(
                position.x if event.x is None else event.x,
                position.y if event.y is None else event.y,
                position.z,
            )
            traces[-1].points.append(_to_mm(position, units))
            has_cut = has_cut or isinstance(event, LinearMove)
        elif isinstance(event, CircularMove):
            sweep = arc_sweep(position, event.end, event.center, event.clockwise, event.plane)
            chords = linearize_arc(
                position, event.center, event.end, event.clockwise, event.plane,
                sweep, units.from_mm(_TRACE_TOLERANCE_MM),
            )
            traces[-1].points.extend(_to_mm(p, units) for p in chords)
            position = event.end
            has_cut = True

    for trace in traces:
        if not trace.points:
            continue
        if len(trace.points) == 1:
            path = ShapelyPoint(trace.points[0])
        else:
            path = LineString(trace.points)
        if not table.covers(path):
            xmin, ymin, xmax, ymax = path.bounds
            result.issues.append(ValidationIssue(
                "error",
                f"{trace.name}: path X[{xmin:.3f}, {xmax:.3f}] "
                f"Y[{ymin:.3f}, {ymax:.3f}] mm leaves the table "
                f"X[{envelope.x_min}, {envelope.x_max}] "
                f"Y[{envelope.y_min}, {envelope.y_max}]",
            ))

    if not has_cut:
        result.issues.append(ValidationIssue(
            "warning",
            "No cutting moves, the program will not cut anything",
        ))

    return result
