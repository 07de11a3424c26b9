"""
Exceptions raised while decoding bencoded data.
"""
from typing import Optional


class BencodeDecodeError(ValueError):
    """Exception raised for errors in bencode decoding."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(message)


class EndOfInput(BencodeDecodeError, EOFError):
    """The stream ended in the middle of a token or value."""
    pass


class MalformedLength(BencodeDecodeError):
    """A byte-string length prefix is missing or not a number."""
    pass


class NumberFormatError(BencodeDecodeError):
    """The body of an ``i...e`` token is not a valid numeral."""
    pass


class DecodeError(BencodeDecodeError):
    """A lead byte matched no grammar and no custom handler was installed."""
    pass


class TypeMismatchError(BencodeDecodeError, TypeError):
    """A decoded value is not the kind the caller asked for."""

    def __init__(self, expected: str, actual: str, position: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {actual}", position)


class UnknownEnumValue(BencodeDecodeError, LookupError):
    """Decoded text does not name a member of the requested enumeration."""

    def __init__(self, enum_cls: type, value: str):
        self.enum_cls = enum_cls
        self.value = value
        super().__init__(f"{value!r} is not a member of {enum_cls.__name__}")
