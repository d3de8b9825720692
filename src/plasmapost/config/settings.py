"""Post-processor options (persisted to disk as JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from enum import Enum
from pathlib import Path

from ..core.units import Units
from ..gcode.errors import ConfigError
from .controllers import ControllerModel

SLOW_SPEED_RANGE = (10, 99)


@dataclass
class PostConfig:
    """Options of one generation run.

    Tolerances are given in millimetres and converted to the program unit.
    """

    units: Units = Units.INCH
    controller: ControllerModel = ControllerModel.STANDARD
    sequencing: bool = False
    sequence_start: int = 10
    sequence_increment: int = 5
    word_separator: str = " "
    automatic_material_selection: bool = False
    merge_circles: bool = True
    slow_speed_percent: int = 50
    blend_tolerance: float = 0.0      # 0 -> use cam_tolerance
    cam_tolerance: float = 0.01
    chordal_tolerance: float = 0.01
    pierce_delay: float = 0.0         # seconds after torch on
    write_comments: bool = True
    program_name: str = ""
    program_comment: str = ""

    @property
    def path_blend_tolerance(self) -> float:
        """Blend tolerance in the program unit."""
        tolerance = self.blend_tolerance if self.blend_tolerance > 0 else self.cam_tolerance
        return self.units.from_mm(tolerance)

    def validate(self) -> None:
        lo, hi = SLOW_SPEED_RANGE
        if not lo <= self.slow_speed_percent <= hi:
            raise ConfigError(
                f"Slow speed percentage {self.slow_speed_percent} outside [{lo}, {hi}]"
            )
        if self.word_separator not in (" ", ""):
            raise ConfigError(f"Word separator must be a space or empty, got {self.word_separator!r}")
        if self.sequence_start < 0:
            raise ConfigError(f"Sequence start must not be negative, got {self.sequence_start}")
        if self.sequence_increment <= 0:
            raise ConfigError(
                f"Sequence increment must be positive, got {self.sequence_increment}"
            )
        for name in ("blend_tolerance", "cam_tolerance", "pierce_delay"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.chordal_tolerance <= 0:
            raise ConfigError("chordal_tolerance must be positive")

    def to_dict(self) -> dict:
        d = asdict(self)
        for key, value in d.items():
            if isinstance(value, Enum):
                d[key] = value.value
        return d

    @classmethod
    def from_dict(cls, data: dict) -> PostConfig:
        known = {f.name for f in fields(cls)}
        d = {k: v for k, v in data.items() if k in known}
        if "units" in d:
            d["units"] = Units(d["units"])
        if "controller" in d:
            d["controller"] = ControllerModel(d["controller"])
        return cls(**d)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: Path) -> PostConfig:
        if path.exists():
            return cls.from_dict(json.loads(path.read_text()))
        return cls()
