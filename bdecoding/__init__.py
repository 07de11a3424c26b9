"""bdecoding — stream decoder for bencoded data with typed accessors."""

from .bencode import bdecode, bencode, decode, encode, iter_decode
from .decoder import Decoder
from .errors import (
    BencodeDecodeError,
    DecodeError,
    EndOfInput,
    MalformedLength,
    NumberFormatError,
    TypeMismatchError,
    UnknownEnumValue,
)
from .reader import TypedReader
from .source import PushbackSource
from .values import BCustom, BDict, BList, BNumber, BString, SortedMap, Value, unwrap

__all__ = [
    "decode",
    "iter_decode",
    "encode",
    "bdecode",
    "bencode",
    "Decoder",
    "TypedReader",
    "PushbackSource",
    "Value",
    "BString",
    "BNumber",
    "BList",
    "BDict",
    "BCustom",
    "SortedMap",
    "unwrap",
    "BencodeDecodeError",
    "DecodeError",
    "EndOfInput",
    "MalformedLength",
    "NumberFormatError",
    "TypeMismatchError",
    "UnknownEnumValue",
]
