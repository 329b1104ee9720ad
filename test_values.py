import dataclasses
import unittest
from collections import OrderedDict

from bencode_exceptions import InvalidDictionaryKey, UnsupportedValueType
from fixtures import stream_native, stream_values
from bencode_values import ByteString, Dictionary, Integer, List, from_native


class TestValueModel(unittest.TestCase):
    def test_structural_equality(self):
        self.assertEqual(List((Integer(1), ByteString(b'a'))), List((Integer(1), ByteString(b'a'))))
        self.assertNotEqual(List((Integer(1), Integer(2))), List((Integer(2), Integer(1))))
        self.assertNotEqual(Integer(1), ByteString(b'1'))

    def test_dictionary_equality_is_order_sensitive(self):
        a = Dictionary(((ByteString(b'x'), Integer(1)), (ByteString(b'y'), Integer(2))))
        b = Dictionary(((ByteString(b'y'), Integer(2)), (ByteString(b'x'), Integer(1))))
        self.assertNotEqual(a, b)

    def test_values_are_immutable(self):
        value = Integer(5)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            value.value = 6

    def test_values_are_hashable(self):
        seen = {ByteString(b'a'), ByteString(b'a'), List((Integer(1),))}
        self.assertEqual(len(seen), 2)

    def test_list_items_become_tuple(self):
        items = [Integer(1)]
        value = List(items)
        items.append(Integer(2))
        self.assertEqual(value.items, (Integer(1),))

    def test_bytestring_normalizes_bytes_like(self):
        self.assertEqual(ByteString(bytearray(b'ab')), ByteString(b'ab'))
        self.assertEqual(ByteString(memoryview(b'ab')).value, b'ab')

    def test_bytestring_text(self):
        value = ByteString.from_text('hé')
        self.assertEqual(value.value, b'h\xc3\xa9')
        self.assertEqual(value.text(), 'hé')
        self.assertEqual(value.text('latin-1'), 'hÃ©')

    def test_constructor_validation(self):
        with self.assertRaises(UnsupportedValueType):
            Integer(True)
        with self.assertRaises(UnsupportedValueType):
            Integer('1')
        with self.assertRaises(UnsupportedValueType):
            ByteString('text')
        with self.assertRaises(UnsupportedValueType):
            List((1,))
        with self.assertRaises(InvalidDictionaryKey):
            Dictionary(((Integer(1), Integer(1)),))
        with self.assertRaises(UnsupportedValueType):
            Dictionary(((ByteString(b'k'), 1),))

    def test_dictionary_rejects_non_pair_entries(self):
        with self.assertRaises(UnsupportedValueType):
            Dictionary({ByteString(b'k'): Integer(1)})
        with self.assertRaises(UnsupportedValueType):
            Dictionary((ByteString(b'k'),))
        with self.assertRaises(UnsupportedValueType):
            Dictionary(((ByteString(b'k'), Integer(1), Integer(2)),))

    def test_dictionary_lookup(self):
        value = Dictionary(((ByteString(b'k'), Integer(1)), (ByteString(b'k'), Integer(2))))
        self.assertEqual(value.get('k'), Integer(1))
        self.assertEqual(value.get(ByteString(b'k')), Integer(1))
        self.assertIsNone(value.get(b'missing'))
        self.assertEqual(len(value), 2)


class TestNativeMapping(unittest.TestCase):
    def test_from_native(self):
        self.assertEqual([from_native(v) for v in stream_native()], stream_values())

    def test_from_native_passes_values_through(self):
        value = Integer(3)
        self.assertIs(from_native(value), value)

    def test_from_native_tuple_and_bytes_keys(self):
        res = from_native((1, {b'k': 'v'}))
        self.assertEqual(res, List((Integer(1), Dictionary(((ByteString(b'k'), ByteString(b'v')),)))))

    def test_from_native_rejects(self):
        with self.assertRaises(UnsupportedValueType):
            from_native(object())
        with self.assertRaises(InvalidDictionaryKey):
            from_native({(1, 2): 'x'})

    def test_to_native(self):
        native = [v.to_native() for v in stream_values()]
        self.assertEqual(native[0], b'')
        self.assertEqual(native[1], [777, b'StRing', -42, b'!@$#%^', 0])
        self.assertIsInstance(native[3], OrderedDict)
        self.assertEqual(list(native[3].keys()), [b'key1', b'key2', b'key3'])
        self.assertEqual(native[4], -2147483648)


if __name__ == '__main__':
    unittest.main()
