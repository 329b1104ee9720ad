from collections import OrderedDict

from bencode_values import ByteString, Dictionary, Integer, List

STREAM_CODE = (b'0:li777e6:StRingi-42e6:!@$#%^'
               b'i0eei2147483647ed4:key112:string value4:key2i42e'
               b'4:key3li777e6:StRingi-42e6:!@$#%^i0eeei-2147483648e')

SIMPLE_LIST_CODE = b'li777e6:StRingi-42e6:!@$#%^i0ee'


def simple_list_native():
    return [777, 'StRing', -42, '!@$#%^', 0]


def stream_native():
    bdict = OrderedDict()
    bdict['key1'] = 'string value'
    bdict['key2'] = 42
    bdict['key3'] = simple_list_native()
    return ['', simple_list_native(), 2147483647, bdict, -2147483648]


def simple_list_values():
    return List((Integer(777), ByteString(b'StRing'), Integer(-42),
                 ByteString(b'!@$#%^'), Integer(0)))


def stream_values():
    bdict = Dictionary((
        (ByteString(b'key1'), ByteString(b'string value')),
        (ByteString(b'key2'), Integer(42)),
        (ByteString(b'key3'), simple_list_values()),
    ))
    return [ByteString(b''), simple_list_values(), Integer(2147483647), bdict,
            Integer(-2147483648)]
