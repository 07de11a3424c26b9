"""
Typed accessors on top of the bencode decoder.

TypedReader wraps a Decoder and checks every value it reads against the
kind the caller asked for, raising TypeMismatchError instead of handing back
something unexpected. Numeric readers narrow to fixed widths the same way a
two's-complement cast does.
"""
import math
import struct
from collections.abc import MutableMapping
from decimal import Decimal
from enum import Enum
from typing import BinaryIO, Optional, Tuple, Type, TypeVar, Union

from .decoder import Decoder, is_digit, token_kind
from .errors import DecodeError, TypeMismatchError, UnknownEnumValue
from .values import BDict, BList, BString, Value, kind_of

E = TypeVar('E', bound=Enum)
C = TypeVar('C')
M = TypeVar('M', bound=MutableMapping)

ValueTypes = Union[type, Tuple[type, ...]]


def narrow(number: Union[int, Decimal], bits: int) -> int:
    """Truncate toward zero, then keep the low ``bits`` bits as a signed int."""
    value = int(number) & ((1 << bits) - 1)
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def to_double(number: Union[int, Decimal]) -> float:
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


def to_single(number: Union[int, Decimal]) -> float:
    """Round to the nearest IEEE 754 single-precision value."""
    value = to_double(number)
    try:
        return struct.unpack('<f', struct.pack('<f', value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _kind_names(of: ValueTypes) -> str:
    if isinstance(of, tuple):
        return ' or '.join(getattr(cls, 'kind', cls.__name__) for cls in of)
    return getattr(of, 'kind', of.__name__)


class TypedReader:
    """Reads values of a requested kind from a Decoder."""

    def __init__(self, decoder: Decoder):
        self.decoder = decoder

    @classmethod
    def from_stream(cls, stream: BinaryIO, **options) -> 'TypedReader':
        """Build a reader with a fresh Decoder; options go to Decoder."""
        return cls(Decoder(stream, **options))

    @property
    def charset(self) -> str:
        return self.decoder.charset

    def _require_string(self) -> None:
        token = self.decoder.source.peek()
        if not is_digit(token):
            raise TypeMismatchError(BString.kind, token_kind(token), self.decoder.source.position)

    # ----- Values -----

    def read_object(self) -> Value:
        return self.decoder.read_object()

    def read_list(self, of: Optional[ValueTypes] = None) -> BList:
        """
        Read a list whose items must all be instances of ``of``.

        Args:
            of: A value class such as BNumber, or a tuple of them.
                None accepts any item.

        Raises:
            TypeMismatchError: If the next value is not a list or an item
                has the wrong kind.
        """
        value = self.decoder.read_list()
        if of is not None:
            for index, item in enumerate(value.items):
                if not isinstance(item, of):
                    raise TypeMismatchError(
                        f"{_kind_names(of)} at list index {index}", kind_of(item))
        return value

    def read_array(self, of: Optional[ValueTypes] = None) -> Tuple[Value, ...]:
        return self.read_list(of).items

    def read_collection(self, into: C, of: Optional[ValueTypes] = None) -> C:
        """
        Read a list and add its items to ``into``, which is returned.

        ``into`` may be anything with ``append`` (lists, deques) or ``add``
        (sets). Nothing is added if an item has the wrong kind.
        """
        items = self.read_list(of).items
        add = into.append if hasattr(into, 'append') else into.add
        for item in items:
            add(item)
        return into

    def read_map(self, of: Optional[ValueTypes] = None,
                 into: Optional[M] = None) -> Union[BDict, M]:
        """
        Read a dictionary whose values must all be instances of ``of``.

        When ``into`` is given, the entries are stored in it in key order and
        it is returned instead of the read-only BDict.
        """
        value = self.decoder.read_dict()
        if of is not None:
            for key, item in value.items():
                if not isinstance(item, of):
                    raise TypeMismatchError(
                        f"{_kind_names(of)} for key {key!r}", kind_of(item))
        if into is None:
            return value
        for key, item in value.items():
            into[key] = item
        return into

    # ----- Text -----

    def read_bytes(self) -> bytes:
        """Read a byte-string as raw bytes, whatever decode_as_string says."""
        self._require_string()
        return self.decoder.read_bytes()

    def read_string(self, encoding: Optional[str] = None) -> str:
        """Read a byte-string as text using ``encoding`` or the charset."""
        self._require_string()
        return self.decoder.read_text(encoding)

    def read_utf(self) -> str:
        return self.read_string('utf-8')

    def read_line(self) -> str:
        """Same as read_string(); byte-strings have no line structure."""
        return self.read_string()

    def read_char(self) -> str:
        text = self.read_string()
        if not text:
            raise DecodeError("Cannot read a character from an empty string",
                              self.decoder.source.position)
        return text[0]

    def read_enum(self, enum_cls: Type[E]) -> E:
        """Read text and look it up by member name in ``enum_cls``."""
        name = self.read_string()
        try:
            return enum_cls[name]
        except KeyError:
            raise UnknownEnumValue(enum_cls, name) from None

    # ----- Numbers -----

    def read_number(self) -> Union[int, Decimal]:
        return self.decoder.read_number().value

    def read_byte(self) -> int:
        return narrow(self.read_number(), 8)

    def read_unsigned_byte(self) -> int:
        return self.read_byte() & 0xFF

    def read_short(self) -> int:
        return narrow(self.read_number(), 16)

    def read_unsigned_short(self) -> int:
        return self.read_short() & 0xFFFF

    def read_int(self) -> int:
        return narrow(self.read_number(), 32)

    def read_long(self) -> int:
        return narrow(self.read_number(), 64)

    def read_float(self) -> float:
        return to_single(self.read_number())

    def read_double(self) -> float:
        return to_double(self.read_number())

    def read_boolean(self) -> bool:
        return self.read_int() != 0

    # ----- Raw bytes -----

    def read_fully(self, length: int) -> bytes:
        return self.decoder.source.read_fully(length)

    def skip_bytes(self, count: int) -> int:
        return self.decoder.source.skip(count)
