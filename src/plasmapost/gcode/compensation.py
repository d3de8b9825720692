"""Deferred cutter radius compensation."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..core.toolpath.base import CompensationSide
from . import codes
from .errors import InvalidCompensationTimingError
from .modal import ModalGroup
from .numbers import ValueKind

if TYPE_CHECKING:
    from .context import GenerationContext


class CompensationState(Enum):
    OFF = "off"                     # no change waiting
    PENDING_LEFT = "pending_left"
    PENDING_RIGHT = "pending_right"


_PENDING = {
    CompensationSide.LEFT: CompensationState.PENDING_LEFT,
    CompensationSide.RIGHT: CompensationState.PENDING_RIGHT,
}


class CutterCompensationFSM:
    """Holds a left/right activation until the next linear move.

    The controller only accepts G41/G42 together with a straight move, so
    an activation request is parked here and written in front of that
    move's words.  Deactivation is written immediately.
    """

    def __init__(self) -> None:
        self.state = CompensationState.OFF
        self.active_side = CompensationSide.OFF

    @property
    def pending(self) -> bool:
        return self.state is not CompensationState.OFF

    def request(self, ctx: GenerationContext, side: CompensationSide) -> None:
        if side is CompensationSide.OFF:
            self.state = CompensationState.OFF
            self.active_side = CompensationSide.OFF
            ctx.writer.block(ctx.modal.word(ModalGroup.COMPENSATION, codes.COMPENSATION_OFF))
            return
        self.state = _PENDING[side]

    def check_motion(self, motion: str) -> None:
        """Reject a *motion* move while an activation is still waiting."""
        if self.pending:
            raise InvalidCompensationTimingError(
                f"Radius compensation cannot be activated on a {motion} move; "
                "it must be followed by a linear move"
            )

    def activation_words(self, ctx: GenerationContext) -> list[str]:
        """Consume a pending activation, returning the words to prefix.

        Empty when nothing is pending or the side is already active.
        """
        if not self.pending:
            return []
        if self.state is CompensationState.PENDING_LEFT:
            side, code = CompensationSide.LEFT, codes.COMPENSATION_LEFT
        else:
            side, code = CompensationSide.RIGHT, codes.COMPENSATION_RIGHT
        self.state = CompensationState.OFF
        self.active_side = side

        word = ctx.modal.word(ModalGroup.COMPENSATION, code)
        if word is None:
            return []
        tool = ctx.sections.current.tool.number if ctx.sections.current else 0
        return [word, ctx.formatter.word("D", tool, ValueKind.INTEGER)]

    def clear(self) -> None:
        """Forget the active side once the footer cancels compensation."""
        self.state = CompensationState.OFF
        self.active_side = CompensationSide.OFF
