"""G/M code table of the plasma controller and the command-to-code map."""

from __future__ import annotations

from typing import Optional

from ..core.toolpath.base import CommandKind
from .errors import UnsupportedCommandError

# Motion (G)
RAPID = 0
LINEAR = 1
ARC_CW = 2
ARC_CCW = 3
DWELL = 4

# Other G codes
ABSOLUTE = 90
COMPENSATION_OFF = 40
COMPENSATION_LEFT = 41
COMPENSATION_RIGHT = 42
PATH_BLEND = 64
MATERIAL_SELECT = 59          # G59 V503 F<tool>
MATERIAL_SELECT_VARIABLE = "V503"

# Machine (M)
TORCH_ON = 7
TORCH_OFF = 8
PROGRAM_END = 30
THC_DISABLE = 50
THC_ENABLE = 51
TORCH_ENABLE = 62
TORCH_DISABLE = 63
MOTION_PAUSE_ENABLE = 65
REVERSE_RUN_ENABLE = 66
SLOW_SPEED_ON = 67            # M67 P<percent>
SLOW_SPEED_OFF = 68

# Dwell range in seconds
DWELL_MIN = 0.0
DWELL_MAX = 99999.999

COMMAND_CODES: dict[CommandKind, int] = {
    CommandKind.STOP: 0,
    CommandKind.OPTIONAL_STOP: 1,
    CommandKind.END: 2,
}

# Drive the torch rather than map to a code.
TORCH_COMMANDS: dict[CommandKind, bool] = {
    CommandKind.POWER_ON: True,
    CommandKind.POWER_OFF: False,
}

# Accepted without output: there is no spindle or rotary axis to drive.
IGNORED_COMMANDS = frozenset({
    CommandKind.SPINDLE_CLOCKWISE,
    CommandKind.SPINDLE_COUNTERCLOCKWISE,
    CommandKind.START_SPINDLE,
    CommandKind.STOP_SPINDLE,
    CommandKind.LOCK_MULTI_AXIS,
    CommandKind.UNLOCK_MULTI_AXIS,
    CommandKind.BREAK_CONTROL,
})


def command_code(kind: CommandKind) -> Optional[int]:
    """M code for *kind*; ``None`` for commands that are silently accepted.

    Raises
    ------
    UnsupportedCommandError:
        For every command the controller cannot execute.
    """
    if kind in COMMAND_CODES:
        return COMMAND_CODES[kind]
    if kind in IGNORED_COMMANDS:
        return None
    raise UnsupportedCommandError(f"Unsupported command: {kind.value}")


def work_offset_words(offset: int) -> tuple[str, ...]:
    """Words selecting work offset *offset* (1 = G54)."""
    if offset < 1:
        raise ValueError(f"Work offset must be positive, got {offset}")
    if offset <= 6:
        return (f"G{53 + offset}",)
    return ("G54.1", f"P{offset - 6}")
