import argparse
import json
import logging
import sys

from bencode_exceptions import BencodeError
from bencoding import encode_stream, iterdecode
from bencode_values import ByteString, Dictionary, Integer, List

DEFAULT_LOG_FILE = 'bencoding.log'
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def value_to_json(value):
    """
    Renders a decoded Value as JSON-compatible data. Byte strings that are
    not valid UTF-8 become {"hex": "..."}. A dictionary whose keys are not
    all distinct UTF-8 text is rendered as a list of [key, value] pairs so
    no entry is lost.
    """
    if isinstance(value, Integer):
        return value.value
    elif isinstance(value, ByteString):
        try:
            return value.text()
        except UnicodeDecodeError:
            return {'hex': value.value.hex()}
    elif isinstance(value, List):
        return [value_to_json(item) for item in value.items]
    elif isinstance(value, Dictionary):
        keys = [key.value for key, _ in value.entries]
        if all(_is_utf8(key) for key in keys) and len(set(keys)) == len(keys):
            return {key.text(): value_to_json(item) for key, item in value.entries}
        return [[value_to_json(key), value_to_json(item)] for key, item in value.entries]
    raise TypeError('Not a Bencode value: {!r}'.format(value))


def _is_utf8(data):
    try:
        data.decode('utf-8')
    except UnicodeDecodeError:
        return False
    return True


def read_json_lines(stream):
    for lineno, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Line {lineno}: invalid JSON ({e.msg})")


def cmd_encode(args):
    from_stdin = args.input == '-'
    to_stdout = args.output == '-'
    source = sys.stdin if from_stdin else open(args.input, 'r', encoding='utf-8')
    sink = sys.stdout.buffer if to_stdout else open(args.output, 'wb')
    try:
        written = encode_stream(read_json_lines(source), sink, close=not to_stdout,
                                int_bits=args.int_bits)
    finally:
        if not from_stdin:
            source.close()
        if not to_stdout:
            sink.close()
    logging.info(f"Wrote {written} bytes to {args.output}")


def cmd_decode(args):
    from_stdin = args.input == '-'
    source = sys.stdin.buffer if from_stdin else open(args.input, 'rb')
    count = 0
    try:
        for value in iterdecode(source, int_bits=args.int_bits):
            print(json.dumps(value_to_json(value)))
            count += 1
    finally:
        if not from_stdin:
            source.close()
    logging.info(f"Decoded {count} values from {args.input}")


def build_parser():
    parser = argparse.ArgumentParser(description='Bencode encoder/decoder')
    parser.add_argument('--log-file', default=DEFAULT_LOG_FILE,
                        help=f'Log file, "-" for stderr (default: {DEFAULT_LOG_FILE})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log at DEBUG level')
    parser.add_argument('--int-bits', type=int, default=None,
                        help='Reject integers outside a signed range of this width')
    sub = parser.add_subparsers(dest='command', required=True)

    enc = sub.add_parser('encode', help='Encode JSON lines into a Bencode stream')
    enc.add_argument('input', help='JSON lines file, one value per line ("-" for stdin)')
    enc.add_argument('output', help='Bencode output file ("-" for stdout)')
    enc.set_defaults(func=cmd_encode)

    dec = sub.add_parser('decode', help='Print each value of a Bencode stream as JSON')
    dec.add_argument('input', help='Bencode file ("-" for stdin)')
    dec.set_defaults(func=cmd_decode)
    return parser


def configure_logging(log_file, verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    if log_file == '-':
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        logging.basicConfig(
            filename=log_file,
            filemode='w',
            level=level,
            format=LOG_FORMAT
        )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    try:
        args.func(args)
    except (BencodeError, ValueError, OSError) as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
