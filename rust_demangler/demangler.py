"""
Demangler for legacy Rust symbols.

A legacy symbol looks like `_ZN` + (length, segment)* + `E`, where each segment is a
path component whose unsafe characters were replaced by `$` escape markers. The last
segment is usually a hash of the form `h` + 16 hex digits.
"""

import logging
from io import TextIOBase
from typing import Callable, Iterable, Optional, Sequence

from rust_demangler.escape import ESCAPES, MARKER_START, Escape
from rust_demangler.io_util import (
    as_stringio,
    bytes_left,
    lookahead_for,
    peek,
    peek_number,
    read_exact,
    read_number,
)
from rust_demangler.name import DecodedName, render

log = logging.getLogger(__name__)

# Some symbol tables strip the leading underscore, so the bare form is accepted too.
# Each prefix is paired with the length a symbol must exceed to be considered.
PREFIXES: tuple[tuple[str, int], ...] = (
    ("_ZN", 4),
    ("ZN", 3),
)
SUFFIX = "E"

# Any scheme's decoder: returns `None` when the token should be left unchanged.
Decoder = Callable[[str], Optional[DecodedName]]


def _strip_delimiters(symbol: str) -> str:
    """
    Validate the prefix and suffix of `symbol`, and return the text between them.
    """
    for prefix, min_len in PREFIXES:
        if len(symbol) > min_len and symbol.startswith(prefix) and symbol.endswith(SUFFIX):
            return symbol[len(prefix) : -len(SUFFIX)]

    raise ValueError(f"Not a legacy mangled symbol: {symbol!r}")


class LegacyDemangler:
    """
    Demangler object.

    Instances are callable and implement the `Decoder` contract, so they can be
    placed directly into a `DecoderChain`.
    """

    def __init__(self, escapes: Sequence[Escape] = ESCAPES):
        self._escapes = tuple(escapes)

    def parse(self, symbol: str) -> DecodedName:
        """
        Parse the given symbol. Raises a ValueError if it is not structurally valid.
        """
        inner = _strip_delimiters(symbol)

        # Validate the whole layout before substituting anything, so that a bad
        # symbol never produces a partial result.
        with as_stringio(inner) as buf:
            raw_segments = self._read_segments(buf)

        name = DecodedName()
        for raw in raw_segments:
            name.add_segment(self._unescape(raw))
        name.tag_hash()

        return name

    def decode(self, symbol: str) -> Optional[DecodedName]:
        """
        Like `parse`, but return `None` instead of raising if the symbol is invalid.
        """
        try:
            return self.parse(symbol)
        except ValueError as e:
            log.debug("Leaving %r unchanged: %s", symbol, e)
            return None

    __call__ = decode

    def _read_segments(self, src: TextIOBase) -> list[str]:
        """
        Split the buffer into its raw, still escaped, segments.

        The buffer must be made entirely of length-prefixed segments. It may end
        with a single `0` length field, which acts as an explicit terminator.
        """
        segments: list[str] = []

        while True:
            if peek_number(src) is None:
                # The implicit terminator: nothing left after the last segment.
                next_char = peek(src)
                if next_char:
                    raise ValueError(f"Expected a segment length, got {next_char!r}!")
                break

            length = read_number(src, allow_zero=True)
            if length == 0:
                if peek(src):
                    raise ValueError("Zero length field is only allowed at the end of a symbol!")
                break

            if length > bytes_left(src):
                raise ValueError(
                    f"Segment length {length} exceeds remaining length of buffer ({bytes_left(src)})!"
                )
            segments.append(read_exact(src, length))

        if not segments:
            raise ValueError("Symbol has no segments.")

        return segments

    def _unescape(self, segment: str) -> str:
        """
        Substitute the escape markers of a single segment.

        If a `$` does not start any known marker, the rest of the segment is kept
        verbatim. Following segments are not affected.
        """
        out: list[str] = []

        with as_stringio(segment) as src:
            while peek(src):
                offset = lookahead_for(src, [MARKER_START])
                if offset is None:
                    out.append(src.read())
                    break

                if offset > 0:
                    out.append(read_exact(src, offset))
                    continue

                escape = Escape.read(src, self._escapes)
                if escape is None:
                    out.append(src.read())
                    break
                out.append(escape.replacement)

        return "".join(out)


class DecoderChain:
    """
    Tries a sequence of decoders in order and returns the first decoded name.

    This is how additional mangling schemes plug into the scanner: a decoder for
    another scheme only has to return `None` for tokens it does not recognize.
    """

    def __init__(self, decoders: Iterable[Decoder]):
        self.decoders: tuple[Decoder, ...] = tuple(decoders)

    def __call__(self, symbol: str) -> Optional[DecodedName]:
        for decoder in self.decoders:
            name = decoder(symbol)
            if name is not None:
                return name

        return None


def parse(mangled: str) -> DecodedName:
    p = LegacyDemangler()
    result = p.parse(mangled)
    return result


def decode(mangled: str) -> Optional[DecodedName]:
    return LegacyDemangler().decode(mangled)


def demangle(mangled: str, include_hash: bool = True) -> str:
    try:
        return render(parse(mangled), include_hash)
    except ValueError:
        return mangled
