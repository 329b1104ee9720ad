import unittest
# Import all test modules
from test_values import TestValueModel, TestNativeMapping
from test_bencoding import TestDecoder, TestDecoderErrors, TestFileSource, TestEncoder, TestRoundTrip, TestDecodeOne
from test_streams import TestEncodeStream, TestDecodeStream
from test_cli import TestCommandLine, TestValueToJson

if __name__ == '__main__':
    unittest.main()
