"""
Command line entry point: dumps the contents of a bencoded file.
"""
import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from . import config
from .bencode import iter_decode
from .errors import BencodeDecodeError
from .values import BCustom, BDict, BList, BNumber, BString, Value

logger = logging.getLogger(__name__)


def _is_printable(data: bytes) -> bool:
    return all(0x20 <= b <= 0x7e for b in data)


def render(value: Value, indent: int = 0) -> str:
    """Render a value as an indented, human readable tree."""
    pad = '  ' * indent

    if isinstance(value, BDict):
        if not value:
            return '{}'
        lines = ['{']
        for key, item in value.items():
            lines.append(f"{pad}  {key!r}: {render(item, indent + 1)}")
        lines.append(pad + '}')
        return '\n'.join(lines)

    if isinstance(value, BList):
        if not value:
            return '[]'
        lines = ['[']
        for item in value:
            lines.append(f"{pad}  {render(item, indent + 1)}")
        lines.append(pad + ']')
        return '\n'.join(lines)

    if isinstance(value, BString):
        data = value.value
        if isinstance(data, str) or _is_printable(data):
            return repr(data)
        # Binary data such as piece hashes is easier to read as hex
        return f"hex({len(data)} bytes):'{data.hex()}'"

    if isinstance(value, BNumber):
        return str(value.value)

    return f"custom({value.token:#04x}):{value.value!r}"


def to_json(value: Value) -> Any:
    """Convert a value into something json.dumps accepts."""
    if isinstance(value, BDict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, BList):
        return [to_json(item) for item in value]
    if isinstance(value, BString):
        data = value.value
        if isinstance(data, str):
            return data
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError:
            return data.hex()
    if isinstance(value, BNumber):
        return str(value.value) if value.is_decimal else value.value
    if isinstance(value, BCustom):
        return repr(value.value)
    raise TypeError(f"Not a decoded value: {type(value).__name__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='bdecode-dump',
                                     description="Dump the values stored in a bencoded file.")
    parser.add_argument('file', help="Bencoded file to read.")
    parser.add_argument('--charset', default=config.BENCODE_CHARSET,
                        help="Encoding used for dictionary keys and text.")
    strings = parser.add_mutually_exclusive_group()
    strings.add_argument('--strings', dest='strings', action='store_true',
                         help="Decode every byte-string as text.")
    strings.add_argument('--bytes', '--no-strings', dest='strings', action='store_false',
                         help="Keep byte-strings as raw bytes.")
    parser.set_defaults(strings=config.BENCODE_DECODE_AS_STRING)
    parser.add_argument('--json', action='store_true', help="Print JSON instead of a tree.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    logger.debug(f"Dumping {args.file} (charset={args.charset}, strings={args.strings})")

    try:
        with open(args.file, 'rb') as f:
            count = 0
            for value in iter_decode(f, charset=args.charset, decode_as_string=args.strings):
                if args.json:
                    print(json.dumps(to_json(value), indent=2))
                else:
                    print(render(value))
                count += 1
    except (OSError, LookupError, BencodeDecodeError) as e:
        logger.debug(f"Failed to dump {args.file}", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Decoded {count} value(s) from {args.file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
