"""
Module implementing the escape table for legacy Rust symbol segments.

Characters which cannot appear in a linker symbol are encoded as `$`-delimited
markers inside a segment. The table is checked in order and the first match wins.
"""

from dataclasses import dataclass
from io import TextIOBase
from typing import Optional, Sequence

from rust_demangler.io_util import peek_exact, read_exact

MARKER_START = "$"


@dataclass(frozen=True)
class Escape:
    """
    A single `(marker, replacement)` pair from the escape table.
    """

    marker: str
    replacement: str

    def matches(self, src: TextIOBase) -> bool:
        """
        Determine if the buffer currently points at this marker.
        The buffer is not modified.
        """
        return peek_exact(src, len(self.marker)) == self.marker

    @staticmethod
    def peek(src: TextIOBase, table: Optional[Sequence["Escape"]] = None) -> Optional["Escape"]:
        """
        Find the first escape in table order whose marker starts at the current
        location of the buffer. The buffer is not modified.

        If no marker matches, returns `None`.
        """
        if table is None:
            table = ESCAPES

        for escape in table:
            if escape.matches(src):
                return escape

        return None

    @staticmethod
    def read(src: TextIOBase, table: Optional[Sequence["Escape"]] = None) -> Optional["Escape"]:
        """
        Like `peek`, but consume the marker from the buffer if one matched.
        """
        escape = Escape.peek(src, table)
        if escape is not None:
            read_exact(src, len(escape.marker))
        return escape

    def __str__(self) -> str:
        return self.replacement


# Markers are not required to be prefix-free, so this order is part of the format.
ESCAPES: tuple[Escape, ...] = (
    Escape("$SP$", "@"),
    Escape("$BP$", "*"),
    Escape("$RF$", "&"),
    Escape("$LT$", "<"),
    Escape("$GT$", ">"),
    Escape("$LP$", "("),
    Escape("$RP$", ")"),
    Escape("$C$", ","),
    # Only the common code points, not arbitrary `$uXX$`.
    Escape("$u7e$", "~"),
    Escape("$u20$", " "),
    Escape("$u27$", "'"),
    Escape("$u5b$", "["),
    Escape("$u5d$", "]"),
)
