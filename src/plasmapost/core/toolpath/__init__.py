"""Toolpath event stream package."""

from .base import (
    EVENT_TYPES,
    ORIGIN,
    CircularMove,
    Command,
    CommandKind,
    CompensationRequest,
    CompensationSide,
    Dwell,
    LinearMove,
    MoveType,
    MultiAxisMove,
    ParameterChange,
    Plane,
    Point,
    PowerRequest,
    RapidMove,
    SectionEnd,
    SectionStart,
    ToolpathEvent,
)
from .cursor import EventCursor

__all__ = [
    "EVENT_TYPES",
    "ORIGIN",
    "CircularMove",
    "Command",
    "CommandKind",
    "CompensationRequest",
    "CompensationSide",
    "Dwell",
    "EventCursor",
    "LinearMove",
    "MoveType",
    "MultiAxisMove",
    "ParameterChange",
    "Plane",
    "Point",
    "PowerRequest",
    "RapidMove",
    "SectionEnd",
    "SectionStart",
    "ToolpathEvent",
]
