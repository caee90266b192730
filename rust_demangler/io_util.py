"""
Utility functions for working with text and byte streams.
"""

from contextlib import contextmanager
from io import StringIO, TextIOBase
from re import Match, Pattern
from typing import BinaryIO, Iterator, Optional


def _is_digit(char: str) -> bool:
    # `str.isdecimal` alone accepts non-ASCII digits.
    return char.isascii() and char.isdecimal()


def read_exact(src: TextIOBase, size: int) -> str:
    """
    Read exactly `n` characters from `src`, or raise a ValueError
    """
    value = src.read(size)
    if len(value) != size:
        raise ValueError(f"Unable to read {size} characters; got {value!r}")
    return value


@contextmanager
def peeking(src: TextIOBase, offset: int = 0) -> Iterator[None]:
    """
    Store the current offset in `src`,
    and restore it at the end of the context.
    An optional offset can be added to start peeking further ahead from the current
    location.
    """
    ptr = src.tell()
    if offset:
        src.seek(ptr + offset)

    try:
        yield
    finally:
        src.seek(ptr)


def peek(src: TextIOBase, n: int = 1, offset: int = 0) -> str:
    """
    Read up to `n` characters from `src` without advancing the offset.
    An optional offset can be added to peek starting further ahead of
    the current location.
    """
    with peeking(src, offset=offset):
        return src.read(n)


def peek_exact(src: TextIOBase, n: int = 1, offset: int = 0) -> str:
    """
    Try to read exactly `n` characters from `src` without advancing the offset.
    If there are not enough characters in the buffer, return "".
    """
    string = peek(src, n, offset=offset)
    if len(string) != n:
        string = ""
    return string


def bytes_left(src: TextIOBase, offset: int = 0) -> int:
    """
    Retrieve the number of characters left in `src`.
    An optional offset can be added.
    """
    start: int = src.tell() + offset
    with peeking(src):
        src.seek(0, 2)
        end: int = src.tell()

    return end - start


def lookahead_for(src: TextIOBase, chars: list[str]) -> Optional[int]:
    """
    Look ahead in the buffer for a character in the given list.

    If one is found, return the number of chars that need to be read from the current
    offset in order to reach the character.

    If none of the given chars are found and the end of the buffer is found,
    returns None.
    """
    offset: int = 0
    with peeking(src):
        char = src.read(1)
        while char:
            if char in chars:
                return offset
            offset += 1
            char = src.read(1)

    return None


@contextmanager
def as_stringio(src: str) -> Iterator[StringIO]:
    """Wrap `src` in a `StringIO`, and assert it was fully consumed at the end of the context"""
    buf = StringIO(src)
    yield buf
    leftover = buf.read()
    if leftover:
        raise ValueError(f"Unable to parse full input, leftover chars: {leftover!r}")


def peek_number(src: TextIOBase) -> Optional[tuple[int, int]]:
    """
    Peek subsequent ASCII digits from the source and return them as a positive
    base-10 integer.

    The first element of the tuple contains the read count.
    The second element of the tuple contains the offset from the current base which
    points to the first character after the sequence of digits.

    If a number cannot be read, `None` will be returned.
    """
    offset = 0
    number_str = ""

    with peeking(src):
        while _is_digit(peek(src)):
            number_str += read_exact(src, 1)
            offset += 1

    if number_str == "":
        return None
    return (int(number_str), offset)


def read_number(src: TextIOBase, allow_zero: bool = False) -> int:
    """
    Read subsequent ASCII digits from the source and return them as a positive
    base-10 integer.

    If a number cannot be read, an error will be thrown.
    If the read number is zero and `allow_zero` is False, an error will be thrown.
    """
    result = peek_number(src)

    if not result:
        raise ValueError("Unable to parse expected number from string.")

    number, next_offset = result

    if not allow_zero:
        if number == 0:
            raise ValueError("length must be positive")

    read_exact(src, next_offset)
    return number


class LineBuffer:
    """
    Reusable byte buffer holding a single line of a stream.

    `clear` only resets the logical length, so the underlying storage grows to fit
    the longest line seen and is then reused for every following line.
    """

    def __init__(self):
        self._data = bytearray()
        self._len: int = 0

    def __len__(self) -> int:
        return self._len

    @property
    def capacity(self) -> int:
        return len(self._data)

    def clear(self):
        self._len = 0

    def fill(self, src: BinaryIO) -> int:
        """
        Replace the buffer contents with the next line of `src`, line terminator
        included. Returns the number of bytes read, which is 0 at the end of the
        stream.

        `readline` still hands back a fresh `bytes` per line. Only the copy held
        between lines lives in the kept storage, and the transient line is
        released as soon as this call returns.
        """
        line = src.readline()
        size = len(line)
        if size > len(self._data):
            self._data.extend(bytes(size - len(self._data)))

        self._data[:size] = line
        self._len = size
        return size

    def finditer(self, pattern: Pattern[bytes]) -> Iterator[Match[bytes]]:
        """
        Iterate over the matches of `pattern` within the current line.
        """
        return pattern.finditer(self._data, 0, self._len)

    def span(self, start: int, end: int) -> bytes:
        return bytes(self._data[start:end])

    def write_to(self, dst: BinaryIO, start: int = 0, end: Optional[int] = None):
        """
        Write the bytes between `start` and `end` (default: end of line) to `dst`
        without copying them out of the buffer.
        """
        if end is None:
            end = self._len
        if start >= end:
            return

        with memoryview(self._data)[start:end] as view:
            dst.write(view)
