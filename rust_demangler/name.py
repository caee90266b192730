"""
Module implementing the decoded form of a mangled symbol and its rendering.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

SEPARATOR = "::"

# `h` followed by exactly 16 lowercase hex digits.
HASH_PATTERN = re.compile(r"h[0-9a-f]{16}")


def is_rust_hash(segment: str) -> bool:
    """
    Determine if a segment looks like the disambiguation hash the compiler appends
    to every legacy symbol.
    """
    return HASH_PATTERN.fullmatch(segment) is not None


@dataclass
class DecodedName:
    """
    Represents a demangled qualified name.

    `segments` holds the path components, most general first, with escapes already
    substituted. If the last component of the symbol was a hash suffix, it is kept
    separately in `hash` so it can be left out when rendering.
    """

    segments: list[str] = field(default_factory=list)
    hash: Optional[str] = None

    def add_segment(self, segment: str):
        """
        Append a path component to this name.
        """
        assert self.hash is None, "Cannot add a segment after the hash suffix!"
        self.segments.append(segment)

    def tag_hash(self) -> bool:
        """
        If the last segment is a hash suffix, move it out of the path and into
        `hash`. This also applies when the hash is the only segment.

        Returns whether a hash was tagged.
        """
        if self.hash is None and self.segments and is_rust_hash(self.segments[-1]):
            self.hash = self.segments.pop()
            return True

        return False

    def __str__(self) -> str:
        return render(self, include_hash=True)


def render(name: DecodedName, include_hash: bool) -> str:
    """
    Render `name` as `::`-separated text. The hash suffix, if the name has one, is
    appended as a final segment only when `include_hash` is set.
    """
    parts = list(name.segments)
    if include_hash and name.hash is not None:
        parts.append(name.hash)

    return SEPARATOR.join(parts)
