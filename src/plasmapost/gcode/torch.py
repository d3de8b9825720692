"""Idempotent torch power control."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from . import codes
from .numbers import ValueKind

if TYPE_CHECKING:
    from .context import GenerationContext


class TorchState(Enum):
    ON = "on"
    OFF = "off"


class TorchPowerFSM:
    """Cached torch state; a repeated request never reaches the relay."""

    def __init__(self) -> None:
        self.state = TorchState.OFF

    @property
    def is_on(self) -> bool:
        return self.state is TorchState.ON

    def request(self, ctx: GenerationContext, on: bool) -> None:
        """Switch the torch; a request for the current state only writes a comment."""
        target = TorchState.ON if on else TorchState.OFF
        if target is self.state:
            ctx.writer.comment(f"Torch already {target.value}")
            return
        ctx.writer.block(ctx.m(codes.TORCH_ON if on else codes.TORCH_OFF))
        self.state = target
        if on and ctx.config.pierce_delay > 0:
            ctx.writer.block(
                ctx.g(codes.DWELL),
                ctx.formatter.word("P", ctx.config.pierce_delay, ValueKind.TIME),
            )

    def shutdown(self, ctx: GenerationContext) -> None:
        """Unconditional torch off for the end of the program."""
        ctx.writer.block(ctx.m(codes.TORCH_OFF))
        self.state = TorchState.OFF
