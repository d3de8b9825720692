"""Cutting tool definitions and tool library with JSON persistence."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Optional


class ToolType(Enum):
    PLASMA_CUTTER = "plasma_cutter"
    WATERJET = "waterjet"
    LASER_CUTTER = "laser_cutter"
    MILLING = "milling"


class JetMode(Enum):
    """Cutting strategy of a jet tool."""
    THROUGH = "through"
    ETCHING = "etching"
    VAPORIZE = "vaporize"


@dataclass
class Tool:
    """A cutting tool definition.

    The kerf width is in millimetres; the controller reads the actual
    compensation from its own kerf register (D word = tool number).
    """
    number: int
    name: str
    tool_type: ToolType = ToolType.PLASMA_CUTTER
    kerf_width: float = 0.0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["tool_type"] = self.tool_type.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> Tool:
        d = dict(d)
        d["tool_type"] = ToolType(d.get("tool_type", ToolType.PLASMA_CUTTER.value))
        return cls(**d)


class ToolLibrary:
    """Persistent tool library backed by a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        if path is None:
            path = Path.home() / ".plasmapost" / "tools.json"
        self._path = path
        self._tools: dict[int, Tool] = {}
        if self._path.exists():
            self.load()

    def add(self, tool: Tool) -> None:
        self._tools[tool.number] = tool

    def get(self, number: int) -> Optional[Tool]:
        return self._tools.get(number)

    def list_tools(self) -> list[Tool]:
        return sorted(self._tools.values(), key=lambda t: t.number)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = [t.to_dict() for t in self.list_tools()]
        self._path.write_text(json.dumps(data, indent=2))

    def load(self) -> None:
        data = json.loads(self._path.read_text())
        self._tools = {}
        for d in data:
            tool = Tool.from_dict(d)
            self._tools[tool.number] = tool
