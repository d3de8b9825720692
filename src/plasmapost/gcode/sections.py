"""Section boundaries: tool calls, work offsets and small-hole speed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..core.toolpath.base import SectionStart
from . import codes
from .errors import (
    MixedWorkOffsetSchemeError,
    UnsupportedCutModeError,
    UnsupportedToolTypeError,
)
from .modal import ModalGroup
from .numbers import ValueKind

if TYPE_CHECKING:
    from .context import GenerationContext


class SectionTransitionHandler:
    """Tracks the current and previous section of the stream."""

    def __init__(self) -> None:
        self.current: Optional[SectionStart] = None
        self.previous: Optional[SectionStart] = None
        self.active_offset: Optional[int] = None
        self.count = 0
        self._started_at_zero = False

    @property
    def current_name(self) -> Optional[str]:
        if self.current is None:
            return None
        return self.current.name or f"#{self.count}"

    def needs_tool_call(self, section: SectionStart) -> bool:
        previous = self.current or self.previous
        return (
            previous is None
            or section.force_tool_change
            or section.tool.number != previous.tool.number
        )

    def start(self, ctx: GenerationContext, section: SectionStart) -> None:
        insert_tool_call = self.needs_tool_call(section)
        is_first = self.count == 0
        if self.current is not None:
            self.previous = self.current
        self.current = section
        self.count += 1

        if section.name:
            ctx.comment(section.name)
        self._validate(ctx, section)
        self._select_work_offset(ctx, section.work_offset, is_first)
        if insert_tool_call:
            self._tool_call(ctx, section)
        if section.small_hole:
            ctx.writer.block(
                ctx.m(codes.SLOW_SPEED_ON),
                ctx.formatter.word("P", ctx.config.slow_speed_percent, ValueKind.PERCENT),
            )

    def end(self, ctx: GenerationContext) -> None:
        if self.current is not None and self.current.small_hole:
            ctx.writer.block(ctx.m(codes.SLOW_SPEED_OFF))
        # Position after a section boundary is not assumed continuous.
        ctx.modal.reset(ModalGroup.X, ModalGroup.Y, ModalGroup.FEED)
        self.previous = self.current
        self.current = None

    def _validate(self, ctx: GenerationContext, section: SectionStart) -> None:
        if section.tool.tool_type not in ctx.profile.supported_tools:
            raise UnsupportedToolTypeError(
                f"Tool T{section.tool.number} type '{section.tool.tool_type.value}' "
                f"is not supported by {ctx.profile.model}"
            )
        if section.jet_mode not in ctx.profile.supported_jet_modes:
            raise UnsupportedCutModeError(
                f"Cutting mode '{section.jet_mode.value}' is not supported by "
                f"{ctx.profile.model}"
            )

    def _select_work_offset(self, ctx: GenerationContext, offset: int, is_first: bool) -> None:
        if is_first and offset == 0:
            self._started_at_zero = True
            self.active_offset = 0
            return
        if offset == self.active_offset:
            return
        if self._started_at_zero:
            raise MixedWorkOffsetSchemeError(
                f"Work offset {offset} requested after the program started "
                "without a work offset"
            )
        if offset == 0:
            # No select word returns the controller to its default frame.
            raise MixedWorkOffsetSchemeError(
                f"Section without a work offset after work offset {self.active_offset}"
            )
        ctx.writer.block(*codes.work_offset_words(offset))
        self.active_offset = offset

    def _tool_call(self, ctx: GenerationContext, section: SectionStart) -> None:
        tool = section.tool
        ctx.retracted = True
        ctx.comment(
            f"T{tool.number} {tool.name} KERF="
            f"{ctx.formatter.format(ctx.from_mm(tool.kerf_width), ValueKind.COORDINATE)}"
        )
        ctx.writer.block(ctx.formatter.word("T", tool.number, ValueKind.INTEGER))
        if ctx.config.automatic_material_selection:
            ctx.writer.block(
                ctx.g(codes.MATERIAL_SELECT),
                codes.MATERIAL_SELECT_VARIABLE,
                ctx.formatter.word("F", tool.number, ValueKind.INTEGER),
            )
        ctx.modal.reset(ModalGroup.MOTION)
        if section.initial_position is not None:
            ctx.compensation.check_motion("rapid")
            ctx.modal.force(ModalGroup.X, ModalGroup.Y)
            ctx.move(codes.RAPID, section.initial_position.x, section.initial_position.y)
