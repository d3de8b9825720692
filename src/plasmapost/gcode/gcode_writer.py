"""Low-level NC line formatting: blocks and comments."""

from __future__ import annotations

from typing import Optional

from .sequence import SequenceNumberer

PERMITTED_COMMENT_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.,=_- ")


def filter_comment(text: str) -> str:
    """Upper-case *text* and drop every character the controller rejects."""
    return "".join(c for c in text.upper() if c in PERMITTED_COMMENT_CHARS).strip()


def comment(text: str) -> str:
    """Wrap *text* in a parenthetical comment."""
    return f"({filter_comment(text)})"


class BlockWriter:
    """Collects output lines, numbering blocks when sequencing is enabled."""

    def __init__(
        self,
        separator: str = " ",
        sequence: Optional[SequenceNumberer] = None,
    ):
        self.separator = separator
        self.sequence = sequence
        self.lines: list[str] = []

    def block(self, *words: Optional[str]) -> Optional[str]:
        """Write the non-empty *words* as one block.

        Nothing is written, and no sequence number consumed, when every
        word is empty.
        """
        parts = [w for w in words if w]
        if not parts:
            return None
        if self.sequence is not None:
            parts.insert(0, f"N{self.sequence.next()}")
        line = self.separator.join(parts)
        self.lines.append(line)
        return line

    def comment(self, text: str) -> Optional[str]:
        if not filter_comment(text):
            return None
        line = comment(text)
        self.lines.append(line)
        return line

    def raw(self, line: str) -> None:
        self.lines.append(line)
