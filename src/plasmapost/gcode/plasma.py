"""Plasma post-processor: toolpath events to an NC program.

Output conventions:
- Program wrapped in ``%`` lines.
- Header: units, G90 G17 G40, G64 P<blend>, motion pause / reverse run
  enable (M65, M66), THC enable (M51), torch enable (M62).
- Torch on/off: M7 / M8, with an optional pierce dwell after M7.
- Cutter compensation: G41/G42 D<tool> written with the next G1.
- Small holes: M67 P<percent> slow speed, cancelled by M68.
- Footer: G0 X0 Y0, G40, M50, M63, M8, M30.
"""

from __future__ import annotations

import math
import warnings
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config.controllers import ControllerProfile, TorchControl, get_profile
from ..config.settings import PostConfig
from ..core.toolpath.base import (
    EVENT_TYPES,
    CircularMove,
    Command,
    CompensationRequest,
    Dwell,
    LinearMove,
    MoveType,
    MultiAxisMove,
    ParameterChange,
    PowerRequest,
    RapidMove,
    SectionEnd,
    SectionStart,
    ToolpathEvent,
)
from ..core.toolpath.cursor import EventCursor
from ..core.units import Units
from . import codes
from .context import GenerationContext
from .errors import (
    DwellOutOfRangeWarning,
    InvalidCompensationTimingError,
    NonFiniteValueError,
    PostProcessorError,
    UnsupportedMotionError,
    UnsupportedUnitError,
)
from .modal import ModalGroup
from .numbers import ValueKind

Handler = Callable[[GenerationContext, ToolpathEvent], None]

# Parameter names whose value is written as an operator comment.
COMMENT_PARAMETERS = frozenset({"operation-comment", "comment"})


class PlasmaPostProcessor:
    """Generate a plasma NC program from a toolpath event stream."""

    def __init__(
        self,
        config: Optional[PostConfig] = None,
        profile: Optional[ControllerProfile] = None,
    ):
        self.config = config or PostConfig()
        self.profile = profile or get_profile(self.config.controller)
        self._handlers: dict[type, Handler] = {
            RapidMove: self._on_rapid,
            LinearMove: self._on_linear,
            CircularMove: self._on_circular,
            Dwell: self._on_dwell,
            PowerRequest: self._on_power,
            ParameterChange: self._on_parameter,
            CompensationRequest: self._on_compensation,
            MultiAxisMove: self._on_multi_axis,
            SectionStart: self._on_section_start,
            SectionEnd: self._on_section_end,
            Command: self._on_command,
        }
        missing = set(EVENT_TYPES) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for events: {sorted(t.__name__ for t in missing)}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, events: Iterable[ToolpathEvent], output_path: Path) -> None:
        """Write the NC program to *output_path*."""
        lines = self.get_lines(events)
        output_path.write_text("\n".join(lines) + "\n")

    def get_lines(self, events: Iterable[ToolpathEvent]) -> list[str]:
        """Return the NC program as a list of lines.

        Raises
        ------
        PostProcessorError:
            On the first condition the controller cannot handle; no
            partial program is returned.
        """
        self.config.validate()
        self._check_units()

        cursor = EventCursor(events)
        ctx = GenerationContext.create(self.config, self.profile, cursor)

        self._write_header(ctx)
        for index, event in enumerate(cursor):
            handler = self._handlers.get(type(event))
            if handler is None:
                raise TypeError(f"Not a toolpath event: {event!r}")
            try:
                handler(ctx, event)
            except PostProcessorError as exc:
                exc.locate(index, event, ctx.sections.current_name)
                raise
        ctx.arcs.finish(ctx)
        self._write_footer(ctx)
        return ctx.writer.lines

    # ------------------------------------------------------------------
    # Program boundaries
    # ------------------------------------------------------------------

    def _check_units(self) -> None:
        if self.profile.inch_only and self.config.units is not Units.INCH:
            raise UnsupportedUnitError(
                f"{self.profile.model} only accepts inch programs, "
                f"got {self.config.units.value}"
            )

    def _write_header(self, ctx: GenerationContext) -> None:
        cfg = self.config
        ctx.writer.raw("%")
        if cfg.program_name:
            ctx.comment(cfg.program_name)
        if cfg.program_comment:
            ctx.comment(cfg.program_comment)

        modal = ctx.modal
        ctx.writer.block(modal.word(ModalGroup.UNITS, cfg.units.modal_code))
        ctx.writer.block(
            modal.word(ModalGroup.DISTANCE, codes.ABSOLUTE),
            modal.word(ModalGroup.PLANE, 17),
            modal.word(ModalGroup.COMPENSATION, codes.COMPENSATION_OFF),
        )
        ctx.writer.block(
            modal.word(ModalGroup.PATH_BLEND, codes.PATH_BLEND),
            ctx.formatter.word("P", cfg.path_blend_tolerance, ValueKind.COORDINATE),
        )
        ctx.writer.block(ctx.m(codes.MOTION_PAUSE_ENABLE))
        ctx.writer.block(ctx.m(codes.REVERSE_RUN_ENABLE))
        ctx.writer.block(ctx.m(codes.THC_ENABLE))
        ctx.writer.block(ctx.m(codes.TORCH_ENABLE))

    def _write_footer(self, ctx: GenerationContext) -> None:
        ctx.compensation.check_motion("final rapid")
        ctx.compensation.clear()
        ctx.modal.reset(ModalGroup.MOTION)
        ctx.modal.force(ModalGroup.X, ModalGroup.Y)
        ctx.move(codes.RAPID, 0.0, 0.0)
        ctx.modal.force(ModalGroup.COMPENSATION)
        ctx.writer.block(ctx.modal.word(ModalGroup.COMPENSATION, codes.COMPENSATION_OFF))
        ctx.writer.block(ctx.m(codes.THC_DISABLE))
        ctx.writer.block(ctx.m(codes.TORCH_DISABLE))
        ctx.torch.shutdown(ctx)
        ctx.writer.block(ctx.m(codes.PROGRAM_END))
        ctx.writer.raw("%")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _hints_drive_torch(self) -> bool:
        return self.profile.torch_control is TorchControl.MOTION_HINTS

    def _on_rapid(self, ctx: GenerationContext, event: RapidMove) -> None:
        ctx.compensation.check_motion("rapid")
        if self._hints_drive_torch() and ctx.torch.is_on:
            ctx.torch.request(ctx, False)
        if ctx.retracted:
            ctx.modal.force(ModalGroup.X, ModalGroup.Y)
        ctx.move(codes.RAPID, event.x, event.y)

    def _on_linear(self, ctx: GenerationContext, event: LinearMove) -> None:
        if ctx.compensation.pending and not ctx.would_move(event.x, event.y):
            raise InvalidCompensationTimingError(
                "Radius compensation cannot be activated without an XY move"
            )
        if (
            self._hints_drive_torch()
            and event.move_type is MoveType.PLUNGE
            and not ctx.torch.is_on
        ):
            ctx.torch.request(ctx, True)
        leading = ctx.compensation.activation_words(ctx)
        ctx.move(codes.LINEAR, event.x, event.y, feed=event.feed, leading=leading)

    def _on_circular(self, ctx: GenerationContext, event: CircularMove) -> None:
        ctx.arcs.push(ctx, event, isinstance(ctx.cursor.peek(), CircularMove))

    def _on_dwell(self, ctx: GenerationContext, event: Dwell) -> None:
        seconds = event.seconds
        if not math.isfinite(seconds):
            raise NonFiniteValueError(f"Dwell time must be finite, got {seconds}")
        if not codes.DWELL_MIN <= seconds <= codes.DWELL_MAX:
            clamped = min(max(seconds, codes.DWELL_MIN), codes.DWELL_MAX)
            warnings.warn(
                f"Dwell of {seconds:g}s out of range, clamped to {clamped:g}s",
                DwellOutOfRangeWarning,
                stacklevel=2,
            )
            ctx.writer.comment(
                f"Dwell out of range, clamped to "
                f"{ctx.formatter.format(clamped, ValueKind.TIME)} seconds"
            )
            seconds = clamped
        ctx.writer.block(
            ctx.g(codes.DWELL),
            ctx.formatter.word("P", seconds, ValueKind.TIME),
        )

    def _on_power(self, ctx: GenerationContext, event: PowerRequest) -> None:
        if self._hints_drive_torch():
            return
        ctx.torch.request(ctx, event.on)

    def _on_parameter(self, ctx: GenerationContext, event: ParameterChange) -> None:
        if event.name in COMMENT_PARAMETERS and event.value:
            ctx.comment(str(event.value))

    def _on_compensation(self, ctx: GenerationContext, event: CompensationRequest) -> None:
        ctx.compensation.request(ctx, event.side)

    def _on_multi_axis(self, ctx: GenerationContext, event: MultiAxisMove) -> None:
        raise UnsupportedMotionError("Simultaneous 5-axis motion is not supported")

    def _on_section_start(self, ctx: GenerationContext, event: SectionStart) -> None:
        ctx.sections.start(ctx, event)

    def _on_section_end(self, ctx: GenerationContext, event: SectionEnd) -> None:
        ctx.sections.end(ctx)

    def _on_command(self, ctx: GenerationContext, event: Command) -> None:
        if event.kind in codes.TORCH_COMMANDS:
            if not self._hints_drive_torch():
                ctx.torch.request(ctx, codes.TORCH_COMMANDS[event.kind])
            return
        code = codes.command_code(event.kind)
        if code is not None:
            ctx.writer.block(ctx.m(code))
