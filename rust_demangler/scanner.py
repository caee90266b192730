"""
Finds mangled symbols embedded in arbitrary text and replaces them in place.

Everything outside a recognized symbol, including line terminators and bytes which
are not valid UTF-8, is written out exactly as it was read.
"""

import logging
import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import AnyStr, BinaryIO, Iterable, Optional

from rust_demangler.demangler import Decoder, DecoderChain, LegacyDemangler
from rust_demangler.io_util import LineBuffer
from rust_demangler.name import render

log = logging.getLogger(__name__)

# Legacy (`_ZN`, `ZN`) and v0 (`_R`) prefixes followed by symbol characters.
# Recognition is lexical only, the decoders decide whether a span is valid.
TOKEN_PATTERN = rb"(?:_ZN|ZN|_R)[$._0-9A-Za-z]*"


@dataclass(frozen=True)
class TokenMatcher:
    """
    Compiled token recognition patterns. Build one and share it between scanners.
    """

    pattern: Pattern[bytes]
    text_pattern: Pattern[str]

    @staticmethod
    def compile(pattern: bytes = TOKEN_PATTERN) -> "TokenMatcher":
        return TokenMatcher(
            pattern=re.compile(pattern),
            text_pattern=re.compile(pattern.decode("ascii")),
        )


DEFAULT_MATCHER = TokenMatcher.compile()


class Scanner:
    """
    Line-oriented symbol replacer.

    The scanner owns a single `LineBuffer` which is reused for every line of every
    stream it processes, so a scanner must not be shared between threads.
    """

    def __init__(
        self,
        include_hash: bool = False,
        decoders: Optional[Iterable[Decoder]] = None,
        matcher: TokenMatcher = DEFAULT_MATCHER,
    ):
        if decoders is None:
            decoders = [LegacyDemangler()]

        self.include_hash = include_hash
        self.decoder = DecoderChain(decoders)
        self.matcher = matcher
        self._buf = LineBuffer()

    def replace(self, token: str) -> str:
        """
        Demangle a single isolated token, or return it as-is if no decoder accepts it.
        """
        name = self.decoder(token)
        if name is None:
            return token
        return render(name, self.include_hash)

    def _replace_text(self, match: Match[str]) -> str:
        return self.replace(match.group(0))

    def _replace_bytes(self, match: Match[bytes]) -> bytes:
        return self.replace(match.group(0).decode("ascii")).encode("utf-8")

    def demangle_line(self, line: AnyStr) -> AnyStr:
        """
        Replace every symbol in `line`. Accepts either `str` or `bytes`, and returns
        the same type.
        """
        if isinstance(line, str):
            return self.matcher.text_pattern.sub(self._replace_text, line)
        return self.matcher.pattern.sub(self._replace_bytes, line)

    def process(self, src: BinaryIO, dst: BinaryIO):
        """
        Copy `src` to `dst` line by line, replacing symbols along the way.

        I/O errors are propagated as-is. Anything written before the error stays
        written.
        """
        buf = self._buf
        lines = 0

        try:
            while buf.fill(src):
                self._write_line(dst)
                lines += 1
                buf.clear()
        finally:
            buf.clear()

        log.debug("Processed %d lines", lines)

    def _write_line(self, dst: BinaryIO):
        """
        Write the line currently held in the buffer to `dst`.
        """
        buf = self._buf
        pos = 0

        for match in buf.finditer(self.matcher.pattern):
            start, end = match.span()
            buf.write_to(dst, pos, start)

            name = self.decoder(buf.span(start, end).decode("ascii"))
            if name is None:
                buf.write_to(dst, start, end)
            else:
                dst.write(render(name, self.include_hash).encode("utf-8"))
            pos = end

        buf.write_to(dst, pos)

    def process_names(self, names: Iterable[str], dst: BinaryIO):
        """
        Demangle each of `names` as a whole, without scanning for embedded symbols,
        and write one per line to `dst`.
        """
        for name in names:
            line = self.replace(name) + "\n"
            dst.write(line.encode("utf-8", errors="surrogateescape"))


def demangle_line(line: AnyStr, include_hash: bool = False) -> AnyStr:
    return Scanner(include_hash).demangle_line(line)


def demangle_stream(src: BinaryIO, dst: BinaryIO, include_hash: bool = False):
    Scanner(include_hash).process(src, dst)


def demangle_names(names: Iterable[str], dst: BinaryIO, include_hash: bool = False):
    Scanner(include_hash).process_names(names, dst)
