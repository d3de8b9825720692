"""Per-run generation state.

Everything a generation pass mutates lives on one ``GenerationContext``;
a new context is built for every run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.controllers import ControllerProfile
from ..config.settings import PostConfig
from ..core.toolpath.base import ORIGIN, Point
from ..core.toolpath.cursor import EventCursor
from .arcs import CircularMoveAggregator
from .compensation import CutterCompensationFSM
from .gcode_writer import BlockWriter
from .modal import ModalGroup, ModalWordTracker
from .numbers import NumericFormatter, ValueKind
from .sections import SectionTransitionHandler
from .sequence import SequenceNumberer
from .torch import TorchPowerFSM


@dataclass
class GenerationContext:
    config: PostConfig
    profile: ControllerProfile
    formatter: NumericFormatter
    modal: ModalWordTracker
    writer: BlockWriter
    compensation: CutterCompensationFSM
    torch: TorchPowerFSM
    arcs: CircularMoveAggregator
    sections: SectionTransitionHandler
    cursor: EventCursor
    position: Point = ORIGIN
    retracted: bool = True

    @classmethod
    def create(
        cls,
        config: PostConfig,
        profile: ControllerProfile,
        cursor: EventCursor,
    ) -> GenerationContext:
        formatter = NumericFormatter(config.units)
        sequence = None
        if config.sequencing:
            sequence = SequenceNumberer(config.sequence_start, config.sequence_increment)
        return cls(
            config=config,
            profile=profile,
            formatter=formatter,
            modal=ModalWordTracker(formatter),
            writer=BlockWriter(config.word_separator, sequence),
            compensation=CutterCompensationFSM(),
            torch=TorchPowerFSM(),
            arcs=CircularMoveAggregator(),
            sections=SectionTransitionHandler(),
            cursor=cursor,
        )

    # -- word helpers ---------------------------------------------------

    def g(self, code: float) -> str:
        return self.formatter.word("G", code, ValueKind.INTEGER)

    def m(self, code: float) -> str:
        return self.formatter.word("M", code, ValueKind.INTEGER)

    def coordinate(self, letter: str, value: Optional[float]) -> Optional[str]:
        return self.formatter.word(letter, value, ValueKind.COORDINATE)

    def comment(self, text: str) -> None:
        """Informational comment, dropped when comments are switched off."""
        if self.config.write_comments:
            self.writer.comment(text)

    def from_mm(self, value: float) -> float:
        return self.config.units.from_mm(value)

    # -- motion ---------------------------------------------------------

    def would_move(self, x: Optional[float], y: Optional[float]) -> bool:
        return self.modal.would_emit(ModalGroup.X, x) or self.modal.would_emit(ModalGroup.Y, y)

    def move(
        self,
        code: int,
        x: Optional[float],
        y: Optional[float],
        *,
        feed: Optional[float] = None,
        leading: Sequence[Optional[str]] = (),
        trailing: Sequence[Optional[str]] = (),
    ) -> Optional[str]:
        """Write one motion block and advance the tool position.

        A move that changes neither X nor Y writes only a changed feed
        rate, or nothing at all.
        """
        x_word = self.modal.word(ModalGroup.X, x)
        y_word = self.modal.word(ModalGroup.Y, y)
        if x_word is None and y_word is None and not any(trailing):
            feed_word = self.modal.word(ModalGroup.FEED, feed)
            if feed_word is None:
                return None
            return self.writer.block(
                *leading, self.modal.word(ModalGroup.MOTION, code), feed_word
            )

        line = self.writer.block(
            *leading,
            self.modal.word(ModalGroup.MOTION, code),
            x_word,
            y_word,
            *trailing,
            self.modal.word(ModalGroup.FEED, feed),
        )
        self.position = Point(
            self.position.x if x is None else x,
            self.position.y if y is None else y,
            self.position.z,
        )
        self.retracted = False
        return line
