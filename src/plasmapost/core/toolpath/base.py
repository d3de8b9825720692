"""Toolpath event stream produced by the CAM planner.

Every event is an immutable dataclass.  ``ToolpathEvent`` is the closed
union of all of them; the post-processor keeps one handler per member.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional, Union, get_args

from ..tool import JetMode, Tool


class Point(NamedTuple):
    x: float
    y: float
    z: float = 0.0


ORIGIN = Point(0.0, 0.0)


class MoveType(Enum):
    """Semantic hint attached to a linear move."""
    CUTTING = "cutting"      # torch on, following the contour
    PLUNGE = "plunge"        # pierce into the material
    LEAD_IN = "lead_in"
    LEAD_OUT = "lead_out"


class Plane(Enum):
    """Working plane, valued by its G code."""
    XY = 17
    ZX = 18
    YZ = 19


class CompensationSide(Enum):
    OFF = "off"
    LEFT = "left"
    RIGHT = "right"


class CommandKind(Enum):
    """Machine commands the planner may request."""
    STOP = "stop"
    OPTIONAL_STOP = "optional_stop"
    END = "end"
    POWER_ON = "power_on"
    POWER_OFF = "power_off"
    SPINDLE_CLOCKWISE = "spindle_clockwise"
    SPINDLE_COUNTERCLOCKWISE = "spindle_counterclockwise"
    START_SPINDLE = "start_spindle"
    STOP_SPINDLE = "stop_spindle"
    LOCK_MULTI_AXIS = "lock_multi_axis"
    UNLOCK_MULTI_AXIS = "unlock_multi_axis"
    BREAK_CONTROL = "break_control"
    COOLANT_ON = "coolant_on"
    COOLANT_OFF = "coolant_off"
    ORIENTATE_SPINDLE = "orientate_spindle"
    LOAD_TOOL = "load_tool"
    TOOL_MEASURE = "tool_measure"
    CALIBRATE = "calibrate"
    VERIFY = "verify"
    CLEAN = "clean"


@dataclass(frozen=True)
class RapidMove:
    """Positioning move, no cutting.  ``None`` leaves an axis unchanged."""
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class LinearMove:
    x: Optional[float] = None
    y: Optional[float] = None
    feed: Optional[float] = None
    move_type: MoveType = MoveType.CUTTING


@dataclass(frozen=True)
class CircularMove:
    """Arc from the current position to *end* around *center*."""
    clockwise: bool
    center: Point
    end: Point
    feed: Optional[float] = None
    plane: Plane = Plane.XY


@dataclass(frozen=True)
class Dwell:
    seconds: float


@dataclass(frozen=True)
class PowerRequest:
    on: bool


@dataclass(frozen=True)
class ParameterChange:
    name: str
    value: Any = None


@dataclass(frozen=True)
class CompensationRequest:
    side: CompensationSide


@dataclass(frozen=True)
class MultiAxisMove:
    """Simultaneous 5-axis move.  Never supported by a plasma table."""
    x: float
    y: float
    z: float
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    feed: Optional[float] = None


@dataclass(frozen=True)
class SectionStart:
    tool: Tool
    work_offset: int = 0
    jet_mode: JetMode = JetMode.THROUGH
    initial_position: Optional[Point] = None
    force_tool_change: bool = False
    name: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def small_hole(self) -> bool:
        return bool(self.properties.get("small_hole", False))


@dataclass(frozen=True)
class SectionEnd:
    pass


@dataclass(frozen=True)
class Command:
    kind: CommandKind


ToolpathEvent = Union[
    RapidMove,
    LinearMove,
    CircularMove,
    Dwell,
    PowerRequest,
    ParameterChange,
    CompensationRequest,
    MultiAxisMove,
    SectionStart,
    SectionEnd,
    Command,
]

# Concrete classes of the union, in declaration order.
EVENT_TYPES: tuple[type, ...] = get_args(ToolpathEvent)
