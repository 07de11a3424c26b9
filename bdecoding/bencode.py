"""
Bencode encoding and decoding entry points.
"""
import io
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, BinaryIO, Iterator, Optional, Union

from .decoder import CustomHandler, Decoder
from .values import BCustom, BDict, BList, BNumber, BString, Value, unwrap

Source = Union[BinaryIO, bytes, bytearray, str]


def _as_stream(data: Source) -> BinaryIO:
    if isinstance(data, str):
        data = data.encode('utf-8')
    if isinstance(data, (bytes, bytearray)):
        return io.BytesIO(data)
    return data


def decode(data: Source,
           charset: Optional[str] = None,
           decode_as_string: Optional[bool] = None,
           custom: Optional[CustomHandler] = None,
           max_depth: Optional[int] = None) -> Value:
    """
    Decode one bencoded value from a stream, bytes or str.

    Args:
        data: A binary file-like object or bytes containing bencoded data.
            A str is encoded as UTF-8 first.
        charset: Encoding for text, defaults to the configured charset
        decode_as_string: Return byte-strings as text
        custom: Handler for non-standard lead bytes
        max_depth: Deepest list/dictionary nesting accepted

    Returns:
        The decoded value
    """
    decoder = Decoder(_as_stream(data), charset=charset,
                      decode_as_string=decode_as_string, custom=custom,
                      max_depth=max_depth)
    return decoder.read_object()


def iter_decode(data: Source, **options) -> Iterator[Value]:
    """Yield consecutive values until the stream ends between two values."""
    decoder = Decoder(_as_stream(data), **options)
    while not decoder.source.at_eof():
        yield decoder.read_object()


def encode(obj: Any, charset: str = 'utf-8') -> bytes:
    """
    Encode an object to bencode format.

    Args:
        obj: A decoded value, or an int, Decimal, str, bytes, list, tuple
            or mapping made of those
        charset: Encoding used for str objects

    Returns:
        The bencoded data as bytes
    """
    if isinstance(obj, (BString, BNumber)):
        return encode(obj.value, charset)
    elif isinstance(obj, BList):
        return encode(obj.items, charset)
    elif isinstance(obj, BDict):
        return encode(obj.entries, charset)
    elif isinstance(obj, BCustom):
        raise TypeError(f"Cannot encode custom value for token {obj.token:#04x}")
    elif isinstance(obj, int):
        return f"i{int(obj)}e".encode()
    elif isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Cannot encode {obj}")
        numeral = f"{obj:f}"
        if '.' not in numeral:
            numeral += '.0'
        return f"i{numeral}e".encode()
    elif isinstance(obj, (str, bytes, bytearray)):
        if isinstance(obj, str):
            obj = obj.encode(charset)
        return f"{len(obj)}:".encode() + bytes(obj)
    elif isinstance(obj, (list, tuple)):
        return b"l" + b"".join(encode(item, charset) for item in obj) + b"e"
    elif isinstance(obj, Mapping):
        pairs = []
        for k, v in obj.items():
            if isinstance(k, str):
                k = k.encode(charset)
            elif not isinstance(k, bytes):
                raise TypeError("Dictionary keys must be strings")
            pairs.append((k, v))
        pairs.sort(key=lambda pair: pair[0])

        result = [b"d"]
        for k, v in pairs:
            result.append(encode(k))
            result.append(encode(v, charset))
        result.append(b"e")
        return b"".join(result)
    else:
        raise TypeError(f"Unsupported type: {type(obj)}")


def bdecode(data: Source, **options) -> Any:
    """Decode bencoded data into plain Python objects."""
    return unwrap(decode(data, **options))


def bencode(obj: Any) -> bytes:
    """Encode an object to bencode format."""
    return encode(obj)
