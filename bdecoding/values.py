"""
Value types produced by the bencode decoder.

Every decoded value is one of the frozen dataclasses below. Aggregates hold
tuples and SortedMap instances, so a decoded tree cannot be changed after
the decoder returns it.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional, Tuple, Union


class SortedMap(Mapping):
    """Read-only mapping of text keys, iterated in byte-lexicographic key order.

    Keys are ordered by their raw wire bytes when ``raw_keys`` has them, and
    by their encoding in ``charset`` otherwise. Later duplicates in ``items``
    replace earlier ones.
    """

    def __init__(self, items: Union[Mapping, Iterable[Tuple[str, Any]]] = (),
                 charset: str = 'utf-8',
                 raw_keys: Optional[Mapping] = None):
        if isinstance(items, Mapping):
            items = items.items()
        data = {}
        for key, value in items:
            data[key] = value
        self._charset = charset
        self._raw_keys = dict(raw_keys or {})
        self._data = data
        self._keys = sorted(data, key=self._sort_key)

    def _sort_key(self, key: str) -> bytes:
        if key in self._raw_keys:
            return self._raw_keys[key]
        return key.encode(self._charset, 'replace')

    @property
    def charset(self) -> str:
        return self._charset

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        body = ', '.join(f"{key!r}: {self._data[key]!r}" for key in self._keys)
        return f"SortedMap({{{body}}})"


@dataclass(frozen=True)
class BString:
    """A byte-string, kept raw or materialized as text."""
    value: Union[bytes, str]

    kind = 'string'


@dataclass(frozen=True)
class BNumber:
    """An integer, or a decimal when the numeral had a decimal point."""
    value: Union[int, Decimal]

    kind = 'number'

    @property
    def is_decimal(self) -> bool:
        return isinstance(self.value, Decimal)


@dataclass(frozen=True)
class BList:
    items: Tuple['Value', ...] = ()

    kind = 'list'

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]


@dataclass(frozen=True)
class BDict:
    entries: SortedMap = field(default_factory=SortedMap)

    kind = 'dict'

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, key: str) -> 'Value':
        return self.entries[key]

    def __contains__(self, key) -> bool:
        return key in self.entries

    def get(self, key: str, default=None):
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()


@dataclass(frozen=True)
class BCustom:
    """A value read by a custom handler for a non-standard lead byte."""
    token: int
    value: Any

    kind = 'custom'


Value = Union[BString, BNumber, BList, BDict, BCustom]

VARIANTS = (BString, BNumber, BList, BDict, BCustom)


def kind_of(value: Any) -> str:
    """Return the short name of a value's variant, or its Python type name."""
    if isinstance(value, VARIANTS):
        return value.kind
    return type(value).__name__


def unwrap(value: Value) -> Any:
    """
    Convert a decoded value tree into plain Python objects.

    Strings become bytes or str, numbers int or Decimal, lists become lists
    and dictionaries become dicts whose insertion order follows the sorted
    key order. Custom values are returned as their payload.
    """
    if isinstance(value, (BString, BNumber)):
        return value.value
    if isinstance(value, BList):
        return [unwrap(item) for item in value.items]
    if isinstance(value, BDict):
        return {key: unwrap(item) for key, item in value.entries.items()}
    if isinstance(value, BCustom):
        return value.value
    raise TypeError(f"Not a decoded value: {type(value).__name__}")
