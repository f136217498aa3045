"""Convert between JSON and TOON.

Usage:

    $ echo '{"name": "Alice", "age": 30}' | toonify encode
    name: Alice
    age: 30
    $ toonify decode data.toon
    {
      "name": "Alice",
      "age": 30
    }
"""

import argparse
import json
import logging
import sys

from . import __version__
from .decode import decode
from .encode import encode
from .errors import ToonError
from .types import DecodeOptions, EncodeOptions

logger = logging.getLogger(__name__)

DELIMITER_NAMES = {"comma": ",", "tab": "\t", "pipe": "|"}


def main(argv=None, stdin=None, stdout=None, stderr=None):
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = _parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=stderr, format="%(name)s: %(message)s")

    try:
        inp = _read_input(args.file, stdin)
        if args.command == "encode":
            out = _encode(inp, args)
        else:
            out = _decode(inp, args)
    except (ToonError, ValueError, OSError) as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"toonify: {e}", file=stderr)
        return 1

    print(out, file=stdout)
    return 0


def _read_input(path, stdin):
    if path == "-":
        return stdin.read()
    with open(path, encoding="utf-8") as fp:
        return fp.read()


def _encode(inp, args):
    try:
        data = json.loads(inp)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from e
    opts = EncodeOptions(indent=args.indent, delimiter=DELIMITER_NAMES[args.delimiter])
    return encode(data, opts)


def _decode(inp, args):
    opts = DecodeOptions(indent=args.indent, strict=not args.lenient)
    data = decode(inp, opts)
    return json.dumps(data, indent=2, ensure_ascii=False)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="toonify",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    encode_parser = subparsers.add_parser("encode", help="convert JSON to TOON")
    encode_parser.add_argument(
        "--delimiter",
        choices=sorted(DELIMITER_NAMES),
        default="comma",
        help="delimiter for tabular rows (default is comma)",
    )

    decode_parser = subparsers.add_parser("decode", help="convert TOON to JSON")
    decode_parser.add_argument(
        "--lenient",
        action="store_true",
        help="accept tabs in indentation",
    )

    for sub in (encode_parser, decode_parser):
        sub.add_argument(
            "--indent",
            type=_positive_int,
            default=2,
            help="spaces per nesting level (default is 2)",
        )
        sub.add_argument(
            "file",
            metavar="FILE",
            nargs="?",
            default="-",
            help='optional file to read from; if not specified or "-", '
            "will read from stdin instead",
        )

    return parser.parse_args(argv)


def _positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"indent must be positive: {value!r}")
    return number


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
