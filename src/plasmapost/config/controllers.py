"""Plasma controller profiles.

Table limits are in millimetres; the feed limit is in mm/min.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.tool import JetMode, ToolType
from ..gcode.validate import MachineEnvelope


class TorchControl(Enum):
    """How the torch is switched on and off."""
    POWER_EVENTS = "power_events"   # explicit power requests from the planner
    MOTION_HINTS = "motion_hints"   # plunge moves ignite, rapids extinguish


@dataclass
class ControllerProfile:
    """Capabilities of one plasma controller."""

    model: str
    inch_only: bool
    torch_control: TorchControl
    supported_tools: frozenset[ToolType]
    supported_jet_modes: frozenset[JetMode]
    envelope: MachineEnvelope

    def __str__(self) -> str:
        units = "inch only" if self.inch_only else "inch/mm"
        return (
            f"{self.model}  ({units}, torch: {self.torch_control.value})  "
            f"table {self.envelope.x_max - self.envelope.x_min:g} x "
            f"{self.envelope.y_max - self.envelope.y_min:g} mm"
        )


class ControllerModel(Enum):
    STANDARD = "standard"
    INCH_ONLY = "inch-only"
    MOTION_THC = "motion-thc"


_PLASMA_ONLY = frozenset({ToolType.PLASMA_CUTTER})
_THROUGH_ONLY = frozenset({JetMode.THROUGH})

_PROFILES: dict[ControllerModel, ControllerProfile] = {
    ControllerModel.STANDARD: ControllerProfile(
        model="Standard plasma controller",
        inch_only=False,
        torch_control=TorchControl.POWER_EVENTS,
        supported_tools=_PLASMA_ONLY,
        supported_jet_modes=_THROUGH_ONLY,
        envelope=MachineEnvelope(
            x_min=0.0, x_max=3048.0,
            y_min=0.0, y_max=1524.0,
            max_feed=15000.0,
        ),
    ),
    ControllerModel.INCH_ONLY: ControllerProfile(
        model="Inch-only plasma controller",
        inch_only=True,
        torch_control=TorchControl.POWER_EVENTS,
        supported_tools=_PLASMA_ONLY,
        supported_jet_modes=_THROUGH_ONLY,
        envelope=MachineEnvelope(
            x_min=0.0, x_max=1524.0,
            y_min=0.0, y_max=1524.0,
            max_feed=12700.0,
        ),
    ),
    ControllerModel.MOTION_THC: ControllerProfile(
        model="Motion-triggered THC controller",
        inch_only=False,
        torch_control=TorchControl.MOTION_HINTS,
        supported_tools=_PLASMA_ONLY,
        supported_jet_modes=_THROUGH_ONLY,
        envelope=MachineEnvelope(
            x_min=0.0, x_max=2540.0,
            y_min=0.0, y_max=1270.0,
            max_feed=12000.0,
        ),
    ),
}


def get_profile(model: ControllerModel) -> ControllerProfile:
    return _PROFILES[model]


def list_profiles() -> list[ControllerProfile]:
    return list(_PROFILES.values())
