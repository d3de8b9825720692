"""Cutting operation containers.

An Operation binds a tool and its section settings to the events the
planner produced for it.  The Job wraps every operation in section
boundaries when the post-processor asks for the event stream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .tool import JetMode, Tool
from .toolpath.base import Point, SectionEnd, SectionStart, ToolpathEvent


@dataclass
class Operation:
    """Parameters and events of a single cutting operation."""

    name: str
    tool: Tool
    events: list[ToolpathEvent] = field(default_factory=list)

    work_offset: int = 0
    jet_mode: JetMode = JetMode.THROUGH
    initial_position: Optional[Point] = None
    force_tool_change: bool = False

    # Slow the machine down for holes smaller than the torch can cut at
    # full speed.
    small_hole: bool = False

    def section_start(self) -> SectionStart:
        return SectionStart(
            tool=self.tool,
            work_offset=self.work_offset,
            jet_mode=self.jet_mode,
            initial_position=self.initial_position,
            force_tool_change=self.force_tool_change,
            name=self.name,
            properties={"small_hole": self.small_hole},
        )

    def stream(self) -> Iterator[ToolpathEvent]:
        yield self.section_start()
        yield from self.events
        yield SectionEnd()
