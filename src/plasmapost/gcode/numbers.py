"""Fixed-decimal, unit-aware number formatting for NC words."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from ..core.units import Units
from .errors import NonFiniteValueError


class ValueKind(Enum):
    COORDINATE = "coordinate"
    ARC_OFFSET = "arc_offset"    # I/J center offsets
    FEED = "feed"
    TIME = "time"                # seconds
    PERCENT = "percent"
    INTEGER = "integer"          # codes, tool numbers, registers


@dataclass(frozen=True)
class FormatSpec:
    """Rendering policy for one value kind."""

    decimals: int
    force_decimal: bool = False   # whole numbers keep their point: "5."
    trim_zeros: bool = True       # "1.500000" -> "1.5"
    leading_zero: bool = True     # False renders "0.5" as ".5"


_COORDINATE_MM = FormatSpec(5, force_decimal=True)
_COORDINATE_INCH = FormatSpec(6, force_decimal=True)
_TIME = FormatSpec(3, force_decimal=True)
_WHOLE = FormatSpec(0)

DEFAULT_SPECS: dict[tuple[ValueKind, Units], FormatSpec] = {
    (ValueKind.COORDINATE, Units.MM): _COORDINATE_MM,
    (ValueKind.COORDINATE, Units.INCH): _COORDINATE_INCH,
    (ValueKind.ARC_OFFSET, Units.MM): _COORDINATE_MM,
    (ValueKind.ARC_OFFSET, Units.INCH): _COORDINATE_INCH,
    (ValueKind.FEED, Units.MM): FormatSpec(1),
    (ValueKind.FEED, Units.INCH): FormatSpec(2),
    (ValueKind.TIME, Units.MM): _TIME,
    (ValueKind.TIME, Units.INCH): _TIME,
    (ValueKind.PERCENT, Units.MM): _WHOLE,
    (ValueKind.PERCENT, Units.INCH): _WHOLE,
    (ValueKind.INTEGER, Units.MM): _WHOLE,
    (ValueKind.INTEGER, Units.INCH): _WHOLE,
}


class NumericFormatter:
    """Render numbers for a fixed unit system.

    Rounding is half away from zero, applied to the shortest decimal
    representation of the float so that ``2.675`` becomes ``2.68``.
    """

    def __init__(
        self,
        units: Units,
        overrides: Optional[dict[ValueKind, FormatSpec]] = None,
    ):
        self.units = units
        self._specs = {kind: DEFAULT_SPECS[(kind, units)] for kind in ValueKind}
        if overrides:
            self._specs.update(overrides)

    def spec(self, kind: ValueKind) -> FormatSpec:
        return self._specs[kind]

    def format(self, value: Optional[float], kind: ValueKind) -> Optional[str]:
        if value is None:
            return None
        if not math.isfinite(value):
            raise NonFiniteValueError(f"Cannot write {value} as a {kind.value} value")
        spec = self._specs[kind]
        quantum = Decimal(1).scaleb(-spec.decimals)
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = abs(rounded)
        text = f"{rounded:f}"

        if "." in text:
            if spec.trim_zeros:
                text = text.rstrip("0")
            if text.endswith(".") and not spec.force_decimal:
                text = text[:-1]
        elif spec.force_decimal:
            text += "."

        if not spec.leading_zero:
            sign = "-" if text.startswith("-") else ""
            body = text.lstrip("-")
            if body.startswith("0.") and len(body) > 2:
                text = sign + body[1:]
        return text

    def word(self, letter: str, value: Optional[float], kind: ValueKind) -> Optional[str]:
        """Letter-prefixed word such as ``X1.25``, or ``None`` for no value."""
        text = self.format(value, kind)
        if text is None:
            return None
        return f"{letter}{text}"
