"""Modal word cache.

The controller remembers the last value of every modal group.  The tracker
mirrors that memory so redundant words are left out of the program, and
lets callers drop the mirror whenever the controller state can no longer be
assumed (new section, tool change, dependent group change).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .numbers import NumericFormatter, ValueKind


class ModalGroup(Enum):
    MOTION = "motion"              # G0 G1 G2 G3
    PLANE = "plane"                # G17 G18 G19
    DISTANCE = "distance"          # G90 G91
    UNITS = "units"                # G20 G21
    COMPENSATION = "compensation"  # G40 G41 G42
    PATH_BLEND = "path_blend"      # G61 G64
    X = "x"
    Y = "y"
    FEED = "feed"


_GROUP_WORDS: dict[ModalGroup, tuple[str, ValueKind]] = {
    ModalGroup.MOTION: ("G", ValueKind.INTEGER),
    ModalGroup.PLANE: ("G", ValueKind.INTEGER),
    ModalGroup.DISTANCE: ("G", ValueKind.INTEGER),
    ModalGroup.UNITS: ("G", ValueKind.INTEGER),
    ModalGroup.COMPENSATION: ("G", ValueKind.INTEGER),
    ModalGroup.PATH_BLEND: ("G", ValueKind.INTEGER),
    ModalGroup.X: ("X", ValueKind.COORDINATE),
    ModalGroup.Y: ("Y", ValueKind.COORDINATE),
    ModalGroup.FEED: ("F", ValueKind.FEED),
}

# Emitting a group invalidates the groups listed here.
_DEPENDENTS: dict[ModalGroup, tuple[ModalGroup, ...]] = {
    ModalGroup.PLANE: (ModalGroup.MOTION,),
}


class ModalWordTracker:
    """Last emitted word per modal group.

    The cache is keyed on the *formatted* word, so two values that print
    the same are the same to the controller.
    """

    def __init__(self, formatter: NumericFormatter):
        self._formatter = formatter
        self._cache: dict[ModalGroup, str] = {}
        self._forced: set[ModalGroup] = set()

    def _format(self, group: ModalGroup, value: Optional[float]) -> Optional[str]:
        letter, kind = _GROUP_WORDS[group]
        return self._formatter.word(letter, value, kind)

    def would_emit(self, group: ModalGroup, value: Optional[float]) -> bool:
        token = self._format(group, value)
        if token is None:
            return False
        return group in self._forced or self._cache.get(group) != token

    def word(self, group: ModalGroup, value: Optional[float]) -> Optional[str]:
        """Return the word for *value*, or ``None`` when the controller has it.

        A returned word is recorded as written; callers must put it in
        the output.
        """
        token = self._format(group, value)
        if token is None:
            return None
        if group not in self._forced and self._cache.get(group) == token:
            return None
        self._cache[group] = token
        self._forced.discard(group)
        for dependent in _DEPENDENTS.get(group, ()):
            self.reset(dependent)
        return token

    def current(self, group: ModalGroup) -> Optional[str]:
        return self._cache.get(group)

    def reset(self, *groups: ModalGroup) -> None:
        """Forget the cached value so the next word is always written."""
        for group in groups:
            self._cache.pop(group, None)

    def force(self, *groups: ModalGroup) -> None:
        """Write the next word of each group once, even if unchanged."""
        self._forced.update(groups)

    def reset_all(self) -> None:
        self._cache.clear()
        self._forced.clear()
