"""
Bencode decoding engine.

A Decoder pulls bytes from a PushbackSource and turns them into the value
types from ``values``. The lead byte of every value picks the grammar:

    d<key><value>...e   dictionary, keys are byte-strings
    l<value>...e        list
    i<number>e          integer, or decimal when a '.' is present
    <length>:<bytes>    byte-string

Any other lead byte goes to the custom handler, if one was given.
"""
import codecs
import logging
import re
from decimal import Decimal
from typing import BinaryIO, Callable, Optional, Union

from . import config
from .errors import DecodeError, MalformedLength, NumberFormatError, TypeMismatchError
from .source import PushbackSource
from .values import BCustom, BDict, BList, BNumber, BString, SortedMap, Value

logger = logging.getLogger(__name__)

DICTIONARY = ord('d')
LIST = ord('l')
NUMBER = ord('i')
END = ord('e')
LENGTH_DELIMITER = ord(':')
DECIMAL_POINT = ord('.')

_INTEGER_RE = re.compile(rb'-?\d+')
_DECIMAL_RE = re.compile(rb'-?\d+\.\d+')

# handler(decoder, lead_byte) -> Value, called with the lead byte still unread
CustomHandler = Callable[['Decoder', int], Value]


def is_digit(token: int) -> bool:
    return 0x30 <= token <= 0x39


def token_kind(token: int) -> str:
    """Name the value kind a lead byte starts."""
    if token == DICTIONARY:
        return BDict.kind
    if token == LIST:
        return BList.kind
    if token == NUMBER:
        return BNumber.kind
    if is_digit(token):
        return BString.kind
    if token == END:
        return 'end marker'
    return f"byte {token:#04x}"


class Decoder:
    """
    Reads bencoded values from a binary stream.

    Args:
        stream: A blocking binary stream or an existing PushbackSource
        charset: Encoding used whenever a byte-string becomes text
        decode_as_string: Return byte-strings as text instead of bytes
        text_errors: Codec error handler for text decoding
        custom: Handler for lead bytes that match no built-in grammar
        max_depth: Deepest list/dictionary nesting accepted
    """

    def __init__(self, stream: Union[BinaryIO, PushbackSource],
                 charset: Optional[str] = None,
                 decode_as_string: Optional[bool] = None,
                 text_errors: Optional[str] = None,
                 custom: Optional[CustomHandler] = None,
                 max_depth: Optional[int] = None):
        if isinstance(stream, PushbackSource):
            self.source = stream
        else:
            self.source = PushbackSource(stream)

        # Fail early on unknown codecs or error handlers
        self.charset = codecs.lookup(charset or config.BENCODE_CHARSET).name
        self.text_errors = text_errors or config.BENCODE_TEXT_ERRORS
        codecs.lookup_error(self.text_errors)

        if decode_as_string is None:
            decode_as_string = config.BENCODE_DECODE_AS_STRING
        self.decode_as_string = decode_as_string
        self.custom = custom
        self.max_depth = max_depth or config.BENCODE_MAX_DEPTH
        self._depth = 0

        logger.debug(f"Decoder created (charset={self.charset}, "
                     f"decode_as_string={self.decode_as_string}, "
                     f"custom={'yes' if custom else 'no'})")

    def peek_kind(self) -> str:
        """Name the kind of the next value without consuming anything."""
        return token_kind(self.source.peek())

    def read_object(self) -> Value:
        """Read the next value of any kind."""
        token = self.source.peek()

        if token == DICTIONARY:
            return self.read_dict()
        elif token == LIST:
            return self.read_list()
        elif token == NUMBER:
            return self.read_number()
        elif is_digit(token):
            data = self.read_bytes()
            return BString(self.decode_text(data) if self.decode_as_string else data)
        else:
            return self._read_custom(token)

    def _read_custom(self, token: int) -> Value:
        if self.custom is None:
            raise DecodeError(f"Unexpected token: {bytes((token,))!r}", self.source.position)

        logger.debug(f"Passing token {bytes((token,))!r} at byte "
                     f"{self.source.position} to custom handler")
        value = self.custom(self, token)
        if not isinstance(value, (BString, BNumber, BList, BDict, BCustom)):
            value = BCustom(token, value)
        return value

    def _enter(self) -> None:
        if self._depth >= self.max_depth:
            raise DecodeError(f"Nesting deeper than {self.max_depth} levels", self.source.position)
        self._depth += 1

    def _expect(self, token: int, kind: str) -> None:
        """Consume ``token`` or fail without consuming anything."""
        actual = self.source.peek()
        if actual != token:
            raise TypeMismatchError(kind, token_kind(actual), self.source.position)
        self.source.pop()

    def read_bytes(self) -> bytes:
        """
        Read a byte-string and return its raw contents.

        Format: <length>:<data>
        Example: 5:hello -> b'hello'
        """
        start = self.source.position
        digits = bytearray()

        while True:
            token = self.source.pop()
            if token == LENGTH_DELIMITER:
                break
            if not is_digit(token):
                raise MalformedLength(
                    f"Invalid byte {bytes((token,))!r} in string length",
                    self.source.position - 1)
            digits.append(token)

        if not digits:
            raise MalformedLength("Missing string length", start)

        return self.source.read_fully(int(bytes(digits)))

    def decode_text(self, data: bytes, encoding: Optional[str] = None) -> str:
        return data.decode(encoding or self.charset, self.text_errors)

    def read_text(self, encoding: Optional[str] = None) -> str:
        """Read a byte-string and decode it with ``encoding`` or the charset."""
        return self.decode_text(self.read_bytes(), encoding)

    def read_number(self) -> BNumber:
        """
        Read a number.

        Format: i<digits>e or i<digits>.<digits>e
        Example: i42e -> 42, i3.14e -> Decimal('3.14')
        """
        start = self.source.position
        self._expect(NUMBER, BNumber.kind)

        body = bytearray()
        decimal = False
        while True:
            token = self.source.pop()
            if token == END:
                break
            if token == DECIMAL_POINT:
                decimal = True
            body.append(token)

        numeral = bytes(body)
        if decimal:
            if not _DECIMAL_RE.fullmatch(numeral):
                raise NumberFormatError(f"Invalid decimal: {numeral!r}", start)
            return BNumber(Decimal(numeral.decode('ascii')))

        if not _INTEGER_RE.fullmatch(numeral):
            raise NumberFormatError(f"Invalid integer: {numeral!r}", start)
        return BNumber(int(numeral))

    def read_list(self) -> BList:
        """
        Read a list.

        Format: l<value>...e
        Example: l4:spami42ee -> [b'spam', 42]
        """
        self._expect(LIST, BList.kind)
        self._enter()

        items = []
        try:
            while self.source.peek() != END:
                items.append(self.read_object())
            self.source.pop()
        finally:
            self._depth -= 1

        return BList(tuple(items))

    def read_dict(self) -> BDict:
        """
        Read a dictionary. Keys are always decoded as text.

        Format: d<key><value>...e
        Example: d3:bar4:spam3:fooi42ee -> {'bar': b'spam', 'foo': 42}
        """
        self._expect(DICTIONARY, BDict.kind)
        self._enter()

        entries = {}
        raw_keys = {}
        try:
            while self.source.peek() != END:
                raw = self.read_bytes()
                key = self.decode_text(raw)
                raw_keys[key] = raw
                entries[key] = self.read_object()
            self.source.pop()
        finally:
            self._depth -= 1

        return BDict(SortedMap(entries, self.charset, raw_keys))
