"""
Python package which implements a demangler for legacy Rust symbols, both for single
names and for symbols embedded in text streams.
"""

from rust_demangler.demangler import (
    Decoder,
    DecoderChain,
    LegacyDemangler,
    decode,
    demangle,
    parse,
)
from rust_demangler.escape import ESCAPES, Escape
from rust_demangler.name import DecodedName, is_rust_hash, render
from rust_demangler.scanner import (
    DEFAULT_MATCHER,
    Scanner,
    TokenMatcher,
    demangle_line,
    demangle_names,
    demangle_stream,
)

__all__ = [
    "parse",
    "decode",
    "demangle",
    "render",
    "demangle_line",
    "demangle_stream",
    "demangle_names",
    "LegacyDemangler",
    "Decoder",
    "DecoderChain",
    "DecodedName",
    "is_rust_hash",
    "Escape",
    "ESCAPES",
    "Scanner",
    "TokenMatcher",
    "DEFAULT_MATCHER",
]
