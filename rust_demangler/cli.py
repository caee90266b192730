"""
CLI for the demangler.
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from rust_demangler.scanner import Scanner

log = logging.getLogger(__name__)

parser = argparse.ArgumentParser(
    "rust-demangler", description="Demangler for legacy Rust symbols in text streams."
)
parser.add_argument(
    "names",
    help="Symbols to demangle, one per output line. If none are given, a stream is filtered instead.",
    nargs="*",
)
parser.add_argument("--input", "-i", help="Read the stream from FILE instead of stdin.", type=Path)
parser.add_argument("--output", "-o", help="Write to FILE instead of stdout.", type=Path)
parser.add_argument(
    "--hash", "-H", help="Keep the trailing hash segment.", dest="include_hash", action="store_true"
)
parser.add_argument("--verbose", "-v", help="Log debugging information.", action="store_true")


def main(argv: Optional[list[str]] = None) -> int:
    args = parser.parse_args(argv)  # noqa
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    if args.names and args.input is not None:
        parser.error("symbol names cannot be combined with --input")
    if args.input is not None and not args.input.is_file():
        parser.error(f"input file {str(args.input)!r} does not exist or is not a regular file")
    if args.output is not None and args.output.exists():
        parser.error(f"output file {str(args.output)!r} already exists")

    scanner = Scanner(include_hash=args.include_hash)
    try:
        with ExitStack() as stack:
            if args.output is not None:
                dst = stack.enter_context(args.output.open("xb"))
            else:
                dst = sys.stdout.buffer

            if args.names:
                scanner.process_names(args.names, dst)
            else:
                if args.input is not None:
                    src = stack.enter_context(args.input.open("rb"))
                else:
                    src = sys.stdin.buffer
                scanner.process(src, dst)

            dst.flush()
    except OSError as e:
        log.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
