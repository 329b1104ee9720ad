import io
import logging

from bencode_exceptions import (
    IntegerOutOfRange,
    IntegerOverflow,
    MalformedDictionary,
    MalformedInteger,
    MalformedLengthPrefix,
    TrailingData,
    TruncatedCollection,
    TruncatedInput,
    TruncatedString,
    UnexpectedToken,
    UnsupportedValueType,
)
from bencode_values import ByteString, Dictionary, Integer, List, Value, from_native

# Constants for Bencoding tokens
TOKEN_INTEGER = b'i'
TOKEN_NEGATIVE = b'-'
TOKEN_LIST = b'l'
TOKEN_DICT = b'd'
TOKEN_END = b'e'
TOKEN_STRING_SEPARATOR = b':'
DIGITS = b'0123456789'

# Upper bound for a single read while collecting string bytes
READ_CHUNK_SIZE = 64 * 1024


def _int_bounds(int_bits):
    if int_bits is None:
        return None
    if int_bits < 1:
        raise ValueError('int_bits must be positive')
    return -(1 << (int_bits - 1)), (1 << (int_bits - 1)) - 1


class Decoder:
    """
    Decodes bencoded binary data into Values, one top-level value per call.

    The source is either a bytes-like object or a binary file-like object
    with read(n). decode() returns None once the source is exhausted at a
    value boundary, and keeps returning None on later calls.
    """
    def __init__(self, source, int_bits=None, close_source=None):
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._source = io.BytesIO(bytes(source))
            owned = True
        elif hasattr(source, 'read'):
            self._source = source
            owned = False
        else:
            raise TypeError('Argument "source" must be bytes or a binary stream')
        self._close_source = owned if close_source is None else close_source
        self._bounds = _int_bounds(int_bits)
        self._lookahead = None
        self._position = 0
        self._exhausted = False

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    def decode(self):
        """
        Decodes the next top-level value, or returns None at the end of the
        source.
        """
        if self._exhausted:
            return None
        c = self._peek()
        if c is None:
            self._finish()
            return None
        return self._decode_next('Object')

    def _finish(self):
        self._exhausted = True
        if self._close_source:
            self._source.close()

    def _peek(self):
        if self._lookahead is None:
            self._lookahead = self._source.read(1) or None
        return self._lookahead

    def _consume(self):
        c = self._peek()
        self._lookahead = None
        if c is not None:
            self._position += 1
        return c

    def _bytes_left(self):
        # Best effort, None when the source cannot seek
        try:
            current = self._source.tell()
            end = self._source.seek(0, io.SEEK_END)
            self._source.seek(current)
        except (AttributeError, OSError, ValueError):
            return None
        left = end - current
        if self._lookahead is not None:
            left += 1
        return left

    def _unexpected(self, error_cls, production, c):
        return error_cls.unexpected(production, c, self._bytes_left(), self._position - 1)

    def _decode_next(self, production):
        c = self._peek()
        if c in DIGITS:
            return self._decode_string()
        elif c == TOKEN_INTEGER:
            self._consume()  # eat 'i'
            return self._decode_int()
        elif c == TOKEN_LIST:
            self._consume()  # eat 'l'
            return self._decode_list()
        elif c == TOKEN_DICT:
            self._consume()  # eat 'd'
            return self._decode_dict()
        else:
            self._consume()
            raise self._unexpected(UnexpectedToken, production, c)

    def _decode_length(self):
        length = 0
        while True:
            c = self._consume()
            if c is None:
                raise MalformedLengthPrefix.stream_end('String length', self._position)
            elif c == TOKEN_STRING_SEPARATOR:
                return length
            elif c in DIGITS:
                length = length * 10 + (c[0] - 0x30)
            else:
                raise self._unexpected(MalformedLengthPrefix, 'String', c)

    def _decode_string(self):
        length = self._decode_length()
        data = bytearray()
        while len(data) < length:
            chunk = self._source.read(min(length - len(data), READ_CHUNK_SIZE))
            if not chunk:
                self._position += len(data)
                raise TruncatedString.stream_end('String', self._position)
            data += chunk
        self._position += length
        return ByteString(data)

    def _decode_int(self):
        sign = 1
        magnitude = 0
        digits = 0
        while True:
            c = self._consume()
            if c is None:
                raise MalformedInteger.stream_end('Integer', self._position)
            elif c in DIGITS:
                magnitude = magnitude * 10 + (c[0] - 0x30)
                digits += 1
            elif c == TOKEN_NEGATIVE and digits == 0 and sign == 1:
                sign = -1
            elif c == TOKEN_END and digits:
                break
            else:
                raise self._unexpected(MalformedInteger, 'Integer', c)

        number = sign * magnitude
        if self._bounds is not None and not self._bounds[0] <= number <= self._bounds[1]:
            raise IntegerOverflow(
                'Integer value {} does not fit in {} bits'.format(number, self._bounds[1].bit_length() + 1),
                'Integer', None, self._bytes_left(), self._position - 1)
        return Integer(number)

    def _decode_list(self):
        res = []
        # Recursive decode until we hit 'e'
        while True:
            c = self._peek()
            if c is None:
                raise TruncatedCollection.stream_end('List', self._position)
            elif c == TOKEN_END:
                self._consume()  # eat 'e'
                return List(tuple(res))
            res.append(self._decode_next('List'))

    def _decode_dict(self):
        res = []
        while True:
            c = self._peek()
            if c is None:
                raise TruncatedCollection.stream_end('Dict', self._position)
            elif c == TOKEN_END:
                self._consume()  # eat 'e'
                return Dictionary(tuple(res))
            elif c not in DIGITS:
                self._consume()
                raise self._unexpected(MalformedDictionary, 'Dict', c)
            key = self._decode_string()
            if self._peek() is None:
                raise TruncatedCollection.stream_end('Dict', self._position)
            res.append((key, self._decode_next('Object')))


class Encoder:
    """
    Encodes Values, or native Python structures mapped onto Values, into
    bencoded binary data. Dictionaries are written in their stored order.
    """
    def __init__(self, data, int_bits=None):
        self._data = data
        self._bounds = _int_bounds(int_bits)

    def encode(self) -> bytes:
        return self._encode_next(from_native(self._data))

    def encode_to(self, sink) -> int:
        """Writes the encoding to a binary sink, returns the number of bytes written."""
        encoded = self.encode()
        sink.write(encoded)
        return len(encoded)

    def _encode_next(self, data):
        if isinstance(data, Integer):
            return self._encode_int(data.value)
        elif isinstance(data, ByteString):
            return self._encode_string(data.value)
        elif isinstance(data, List):
            return self._encode_list(data)
        elif isinstance(data, Dictionary):
            return self._encode_dict(data)
        else:
            raise UnsupportedValueType(
                "The type of the encodable object isn't Bencodable: {!r}".format(data))

    def _encode_int(self, value):
        if self._bounds is not None and not self._bounds[0] <= value <= self._bounds[1]:
            raise IntegerOutOfRange(
                'Integer value {} does not fit in {} bits'.format(value, self._bounds[1].bit_length() + 1))
        return str(value).encode('ascii').join([TOKEN_INTEGER, TOKEN_END])

    def _encode_string(self, value: bytes):
        length = str(len(value)).encode('ascii')
        return length + TOKEN_STRING_SEPARATOR + value

    def _encode_list(self, data):
        encoded = b''.join([self._encode_next(item) for item in data.items])
        return TOKEN_LIST + encoded + TOKEN_END

    def _encode_dict(self, data):
        # Keys go out in stored order, no sorting
        encoded_items = []
        for key, value in data.entries:
            encoded_items.append(self._encode_string(key.value) + self._encode_next(value))
        return TOKEN_DICT + b''.join(encoded_items) + TOKEN_END


def encode(data, int_bits=None) -> bytes:
    return Encoder(data, int_bits).encode()


def decode(data, int_bits=None) -> Value:
    """
    Decodes exactly one value from data. Unlike Decoder.decode(), empty input
    and bytes left after the value are errors.
    """
    decoder = Decoder(data, int_bits)
    value = decoder.decode()
    if value is None:
        raise TruncatedInput('no Bencode value in input', 'Object', None, 0, 0)
    c = decoder._peek()
    if c is not None:
        raise TrailingData.unexpected('Object', c, decoder._bytes_left(), decoder.position)
    return value


def iterdecode(source, int_bits=None):
    """Yields top-level values from source until it is cleanly exhausted."""
    decoder = Decoder(source, int_bits)
    while True:
        value = decoder.decode()
        if value is None:
            return
        logging.debug(f"Decoded {type(value).__name__} ending at offset {decoder.position}")
        yield value


def encode_stream(values, sink, close=True, int_bits=None) -> int:
    """
    Encodes every value the producer yields into sink, back to back, then
    flushes the sink and closes it when close is set.
    """
    written = 0
    count = 0
    for value in values:
        written += Encoder(value, int_bits).encode_to(sink)
        count += 1
    sink.flush()
    if close:
        sink.close()
    logging.debug(f"Encoded {count} values ({written} bytes)")
    return written


def decode_stream(source, consumer, int_bits=None) -> int:
    """
    Hands every decoded value to consumer.send() and calls consumer.close()
    once the source is cleanly exhausted. A primed generator works as a
    consumer. Returns the number of values delivered.
    """
    count = 0
    for value in iterdecode(source, int_bits):
        consumer.send(value)
        count += 1
    consumer.close()
    logging.debug(f"Decoded {count} values")
    return count
