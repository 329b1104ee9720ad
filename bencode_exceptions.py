MSG_UNEXPECTED_CHAR = ' value contains unexpected character - '
MSG_STREAM_END = 'unexpected end of stream while decoding '


class BencodeError(ValueError):
    pass


class DecodeError(BencodeError):
    """
    Raised when bytes do not conform to the Bencode grammar.

    Carries the production being decoded, the offending byte (None when the
    source ran out), an estimate of the bytes left unread (None when the
    source cannot tell) and the offset of the offending byte.
    """
    def __init__(self, message, production=None, char=None, remaining=None, position=None):
        super().__init__(message)
        self.production = production
        self.char = char
        self.remaining = remaining
        self.position = position

    @classmethod
    def unexpected(cls, production, char, remaining=None, position=None):
        message = production + MSG_UNEXPECTED_CHAR + char.decode('latin-1')
        if remaining is not None:
            message += ' Bytes left {}'.format(remaining)
        return cls(message, production, char, remaining, position)

    @classmethod
    def stream_end(cls, production, position=None):
        return cls(MSG_STREAM_END + production, production, None, 0, position)


class MalformedLengthPrefix(DecodeError):
    pass


class TruncatedString(DecodeError):
    pass


class MalformedInteger(DecodeError):
    pass


class IntegerOverflow(MalformedInteger):
    pass


class TruncatedCollection(DecodeError):
    pass


class MalformedDictionary(DecodeError):
    pass


class UnexpectedToken(DecodeError):
    pass


class TruncatedInput(DecodeError):
    pass


class TrailingData(DecodeError):
    pass


class EncodeError(BencodeError):
    pass


class InvalidDictionaryKey(EncodeError):
    pass


class UnsupportedValueType(EncodeError):
    pass


class IntegerOutOfRange(EncodeError):
    pass
