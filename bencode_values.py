from collections import OrderedDict
from dataclasses import dataclass
from typing import Tuple

from bencode_exceptions import InvalidDictionaryKey, UnsupportedValueType

DEFAULT_TEXT_ENCODING = 'utf-8'


class Value:
    """
    Base of the four Bencode variants. Values are immutable and compare
    structurally; List and Dictionary comparisons are order sensitive.
    """
    __slots__ = ()

    def to_native(self):
        raise NotImplementedError


@dataclass(frozen=True)
class Integer(Value):
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise UnsupportedValueType(
                'Integer expects int, got {}'.format(type(self.value).__name__))

    def to_native(self) -> int:
        return self.value


@dataclass(frozen=True)
class ByteString(Value):
    value: bytes

    def __post_init__(self):
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, 'value', bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise UnsupportedValueType(
                'ByteString expects bytes, got {}'.format(type(self.value).__name__))

    @classmethod
    def from_text(cls, text: str, encoding: str = DEFAULT_TEXT_ENCODING) -> 'ByteString':
        return cls(text.encode(encoding))

    def text(self, encoding: str = DEFAULT_TEXT_ENCODING) -> str:
        return self.value.decode(encoding)

    def to_native(self) -> bytes:
        return self.value

    def __len__(self):
        return len(self.value)


@dataclass(frozen=True)
class List(Value):
    items: Tuple[Value, ...] = ()

    def __post_init__(self):
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, Value):
                raise UnsupportedValueType(
                    'List item is not a Bencode value: {!r}'.format(item))
        object.__setattr__(self, 'items', items)

    def to_native(self) -> list:
        return [item.to_native() for item in self.items]

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]


@dataclass(frozen=True)
class Dictionary(Value):
    """
    Ordered (key, value) pairs. Stored order is the encoding order; duplicate
    keys are kept as separate entries.
    """
    entries: Tuple[Tuple[ByteString, Value], ...] = ()

    def __post_init__(self):
        if isinstance(self.entries, (dict, str, bytes)):
            raise UnsupportedValueType(
                'Dictionary expects (key, value) pairs, got {}'.format(type(self.entries).__name__))
        entries = tuple(self.entries)
        for entry in entries:
            if not isinstance(entry, tuple) or len(entry) != 2:
                raise UnsupportedValueType(
                    'Dictionary entry is not a (key, value) pair: {!r}'.format(entry))
        for key, value in entries:
            if not isinstance(key, ByteString):
                raise InvalidDictionaryKey(
                    'Bencoded dictionary key is not String type {!r}'.format(key))
            if not isinstance(value, Value):
                raise UnsupportedValueType(
                    'Dictionary value is not a Bencode value: {!r}'.format(value))
        object.__setattr__(self, 'entries', entries)

    def get(self, key, default=None):
        """Returns the value of the first entry whose key matches."""
        if isinstance(key, str):
            key = key.encode(DEFAULT_TEXT_ENCODING)
        elif isinstance(key, ByteString):
            key = key.value
        for entry_key, value in self.entries:
            if entry_key.value == key:
                return value
        return default

    def keys(self):
        return [key for key, _ in self.entries]

    def to_native(self) -> OrderedDict:
        res = OrderedDict()
        for key, value in self.entries:
            res[key.value] = value.to_native()
        return res

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)


def from_native(data) -> Value:
    """
    Maps a native Python structure onto the Value model.

    int -> Integer, bytes-like -> ByteString, str -> ByteString (UTF-8),
    list/tuple -> List, dict -> Dictionary in iteration order.
    """
    if isinstance(data, Value):
        return data
    elif isinstance(data, bool):
        raise UnsupportedValueType(
            "The type of the encodable object isn't Bencodable: {!r}".format(data))
    elif isinstance(data, int):
        return Integer(data)
    elif isinstance(data, (bytes, bytearray, memoryview)):
        return ByteString(data)
    elif isinstance(data, str):
        return ByteString.from_text(data)
    elif isinstance(data, (list, tuple)):
        return List(tuple(from_native(item) for item in data))
    elif isinstance(data, dict):
        return Dictionary(tuple((_native_key(key), from_native(value))
                                for key, value in data.items()))
    else:
        raise UnsupportedValueType(
            "The type of the encodable object isn't Bencodable: {!r}".format(data))


def _native_key(key) -> ByteString:
    if isinstance(key, ByteString):
        return key
    elif isinstance(key, (bytes, bytearray)):
        return ByteString(key)
    elif isinstance(key, str):
        return ByteString.from_text(key)
    raise InvalidDictionaryKey(
        'Bencoded dictionary key is not String type {!r}'.format(key))
