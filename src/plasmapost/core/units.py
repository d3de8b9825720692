"""Unit system enum and conversion helpers."""

from enum import Enum

class Units(Enum):
    INCH = "inch"
    MM = "mm"

    def to_mm(self, value: float) -> float:
        if self is Units.MM:
            return value
        return value * 25.4

    def from_mm(self, value: float) -> float:
        if self is Units.MM:
            return value
        return value / 25.4

    def label(self) -> str:
        return "in" if self is Units.INCH else "mm"

    @property
    def modal_code(self) -> int:
        """Numeric G code of the units modal group."""
        return 20 if self is Units.INCH else 21
