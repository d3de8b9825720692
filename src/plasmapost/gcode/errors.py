"""Errors raised while generating an NC program.

Every error is fatal for the whole generation pass.  The post-processor
attaches the position of the offending event before re-raising, so the
message alone identifies where the stream went wrong.
"""

from __future__ import annotations

from typing import Any, Optional


class PostProcessorError(RuntimeError):
    """Base class of all fatal post-processing errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.event_index: Optional[int] = None
        self.event: Any = None
        self.section: Optional[str] = None

    def locate(self, index: int, event: Any, section: Optional[str] = None) -> None:
        self.event_index = index
        self.event = event
        self.section = section

    def __str__(self) -> str:
        if self.event_index is None:
            return self.message
        where = f"event #{self.event_index} ({type(self.event).__name__})"
        if self.section:
            where += f" in section '{self.section}'"
        return f"{self.message} [{where}]"


class ConfigError(PostProcessorError):
    """An option of the post configuration is out of range."""


class UnsupportedUnitError(PostProcessorError):
    pass


class UnsupportedToolTypeError(PostProcessorError):
    pass


class UnsupportedCutModeError(PostProcessorError):
    pass


class UnsupportedMotionError(PostProcessorError):
    pass


class InvalidCompensationTimingError(PostProcessorError):
    """A radius compensation change is pending where it cannot be applied."""


class MixedWorkOffsetSchemeError(PostProcessorError):
    pass


class UnsupportedCommandError(PostProcessorError):
    pass


class NonFiniteValueError(PostProcessorError):
    """A NaN or infinite number was about to be written."""


class DwellOutOfRangeWarning(UserWarning):
    """A dwell was clamped to the range the controller can represent."""
