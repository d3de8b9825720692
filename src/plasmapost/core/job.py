"""Job files: operations and their events, loaded from JSON.

The Job class is the top-level entry point for the CLI.  A job file looks
like::

    {
      "name": "bracket",
      "units": "inch",
      "operations": [
        {
          "name": "Outer profile",
          "tool": 1,
          "work_offset": 1,
          "initial_position": [0.5, 0.5],
          "events": [
            {"type": "rapid", "x": 0.5, "y": 0.5},
            {"type": "power", "on": true},
            {"type": "linear", "x": 4.0, "y": 0.5, "feed": 120}
          ]
        }
      ]
    }

``tool`` is either a tool number looked up in a tool library or an
inline tool object.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from .operation import Operation
from .tool import JetMode, Tool, ToolLibrary
from .toolpath.base import (
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
    ToolpathEvent,
)
from .units import Units


class JobFormatError(ValueError):
    """The job file does not describe a valid job."""


@dataclass
class Job:
    """A complete cutting job: a name, units and ordered operations."""

    name: str = "Untitled"
    units: Units = Units.INCH
    operations: list[Operation] = field(default_factory=list)

    def events(self) -> Iterator[ToolpathEvent]:
        """The full event stream, one section per operation."""
        for op in self.operations:
            yield from op.stream()

    @property
    def total_events(self) -> int:
        return sum(len(op.events) for op in self.operations)


def _point(value: Any) -> Point:
    if isinstance(value, dict):
        return Point(float(value["x"]), float(value["y"]), float(value.get("z", 0.0)))
    return Point(*(float(v) for v in value))


def _optional_float(d: dict, key: str) -> Optional[float]:
    value = d.get(key)
    return None if value is None else float(value)


_EVENT_PARSERS: dict[str, Callable[[dict], ToolpathEvent]] = {
    "rapid": lambda d: RapidMove(_optional_float(d, "x"), _optional_float(d, "y")),
    "linear": lambda d: LinearMove(
        _optional_float(d, "x"),
        _optional_float(d, "y"),
        _optional_float(d, "feed"),
        MoveType(d.get("move_type", MoveType.CUTTING.value)),
    ),
    "circular": lambda d: CircularMove(
        clockwise=bool(d["clockwise"]),
        center=_point(d["center"]),
        end=_point(d["end"]),
        feed=_optional_float(d, "feed"),
        plane=Plane[d.get("plane", "XY").upper()],
    ),
    "dwell": lambda d: Dwell(float(d["seconds"])),
    "power": lambda d: PowerRequest(bool(d["on"])),
    "parameter": lambda d: ParameterChange(d["name"], d.get("value")),
    "compensation": lambda d: CompensationRequest(CompensationSide(d["side"])),
    "multi_axis": lambda d: MultiAxisMove(
        **{k: float(v) for k, v in d.items() if k != "type"}
    ),
    "command": lambda d: Command(CommandKind(d["kind"])),
}


def event_from_dict(d: dict) -> ToolpathEvent:
    """Build one toolpath event from its JSON form."""
    kind = d.get("type")
    parser = _EVENT_PARSERS.get(kind)
    if parser is None:
        raise JobFormatError(f"Unknown event type: {kind!r}")
    try:
        return parser(d)
    except (KeyError, TypeError, ValueError) as exc:
        raise JobFormatError(f"Invalid {kind} event {d}: {exc}") from exc


def _tool(value: Any, library: Optional[ToolLibrary]) -> Tool:
    if isinstance(value, dict):
        return Tool.from_dict(value)
    tool = library.get(int(value)) if library is not None else None
    if tool is None:
        raise JobFormatError(f"Tool T{value} not found in the tool library")
    return tool


def operation_from_dict(d: dict, library: Optional[ToolLibrary] = None) -> Operation:
    initial = d.get("initial_position")
    return Operation(
        name=d.get("name", ""),
        tool=_tool(d["tool"], library),
        events=[event_from_dict(e) for e in d.get("events", [])],
        work_offset=int(d.get("work_offset", 0)),
        jet_mode=JetMode(d.get("jet_mode", JetMode.THROUGH.value)),
        initial_position=None if initial is None else _point(initial),
        force_tool_change=bool(d.get("force_tool_change", False)),
        small_hole=bool(d.get("small_hole", False)),
    )


def load_job(path: Path, library: Optional[ToolLibrary] = None) -> Job:
    """Read a JSON job file.

    Raises
    ------
    JobFormatError:
        If the file is not a valid job description.
    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise JobFormatError(f"{path}: {exc}") from exc
    try:
        operations = [operation_from_dict(op, library) for op in data.get("operations", [])]
        units = Units(data.get("units", Units.INCH.value))
    except JobFormatError:
        raise
    except KeyError as exc:
        raise JobFormatError(f"{path}: missing field {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise JobFormatError(f"{path}: {exc}") from exc
    return Job(name=data.get("name", path.stem), units=units, operations=operations)
