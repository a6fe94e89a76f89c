"""
    turning Values back into JSON text

    By default output is compact, object members come out in insertion
    order, and string bytes are copied through as they are. Everything
    else is a SerializationOptions field:

    - pretty: newlines and two space indents
    - sort_keys: members in byte order of their keys
    - encode_non_ascii: every code point past 0x7F as `\\uXXXX` (or two)
    - validate_utf8: fail on malformed strings instead of passing them on
    - extra_ascii_to_escape_bitmap: see escapes.py
    - allow_nan_inf: write NaN/Infinity/-Infinity instead of failing

    `"`, `\\` and control codes are always escaped.
"""
import re
import io
import sys
import math
import functools

from collections import namedtuple

from .dynamic import Value, Kind, encode_string
from .errors import EncodingError, LimitExceeded
from .escapes import EMPTY_BITMAP, bitmap_chars

SerializationOptions = namedtuple('SerializationOptions', [
    'pretty',
    'sort_keys',
    'encode_non_ascii',
    'validate_utf8',
    'extra_ascii_to_escape_bitmap',
    'allow_nan_inf',
], defaults=(False, False, False, False, EMPTY_BITMAP, False))

INDENT = b'  '

escaped = {
    0x08: '\\b',
    0x0A: '\\n',
    0x0C: '\\f',
    0x0D: '\\r',
    0x09: '\\t',
    0x22: '\\"',
    0x5C: '\\\\',
}


def escape_code_point(n):
    if n in escaped:
        return escaped[n]
    if n > 0xFFFF:
        n -= 0x10000
        return '\\u{:04x}\\u{:04x}'.format(0xD800 + (n >> 10), 0xDC00 + (n & 0x3FF))
    return '\\u{:04x}'.format(n)


@functools.lru_cache(maxsize=64)
def escape_pattern(bitmap, encode_non_ascii):
    extra = re.escape(bitmap_chars(bitmap).decode('ascii'))
    if encode_non_ascii:
        return re.compile(r'[\x00-\x1f"\\' + extra + r'\x80-\U0010ffff]+')
    return re.compile((r'[\x00-\x1f"\\' + extra + ']+').encode('ascii'))


def _escape_text(m):
    return ''.join(escape_code_point(ord(c)) for c in m.group(0))


def _escape_bytes(m):
    return ''.join(escape_code_point(c) for c in m.group(0)).encode('ascii')


def check_utf8(data):
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise EncodingError("Invalid utf-8 at byte {} of {}: {}".format(
            e.start, repr(data[:40]), e.reason)) from e


def escape_string(data, options=None):
    """Quote and escape one string (str or bytes), returning bytes."""
    if options is None:
        options = SerializationOptions()
    data = encode_string(data)
    bitmap = tuple(options.extra_ascii_to_escape_bitmap)

    if options.encode_non_ascii:
        # invalid bytes have no code point to write out, validating or not
        text = check_utf8(data)
        out = escape_pattern(bitmap, True).sub(_escape_text, text).encode('ascii')
    else:
        if options.validate_utf8:
            check_utf8(data)
        out = escape_pattern(bitmap, False).sub(_escape_bytes, data)

    return b'"' + out + b'"'


def format_double(x, options):
    if math.isfinite(x):
        # repr is the shortest string that reads back as the same double
        return repr(x).encode('ascii')
    if not options.allow_nan_inf:
        raise EncodingError("Can't write {} as JSON, unless allow_nan_inf is set".format(x))
    if x != x:
        return b'NaN'
    return b'Infinity' if x > 0 else b'-Infinity'


class Serializer:
    def __init__(self, options=None):
        self.options = options if options is not None else SerializationOptions()

    def serialize(self, value):
        buf = io.BytesIO()
        try:
            if not isinstance(value, Value):
                value = Value.from_python(value)
            self.dump_value(value, buf, 0)
        except RecursionError as e:
            raise LimitExceeded(sys.getrecursionlimit(), None, "Nesting too deep for the python stack") from e
        return buf.getvalue()

    def newline(self, buf, level):
        if self.options.pretty:
            buf.write(b'\n')
            buf.write(INDENT * level)

    def dump_value(self, value, buf, level):
        kind = value.kind

        if kind is Kind.NULL:
            buf.write(b'null')
        elif kind is Kind.BOOL:
            buf.write(b'true' if value.as_bool() else b'false')
        elif kind is Kind.INT64:
            buf.write(str(value.as_int()).encode('ascii'))
        elif kind is Kind.DOUBLE:
            buf.write(format_double(value.as_double(), self.options))
        elif kind is Kind.STRING:
            buf.write(escape_string(value.as_bytes(), self.options))

        elif kind is Kind.ARRAY:
            if not len(value):
                buf.write(b'[]')
                return
            buf.write(b'[')
            first = True
            for x in value:
                if first:
                    first = False
                else:
                    buf.write(b',')
                self.newline(buf, level + 1)
                self.dump_value(x, buf, level + 1)
            self.newline(buf, level)
            buf.write(b']')

        elif kind is Kind.OBJECT:
            if not len(value):
                buf.write(b'{}')
                return
            items = value.items()
            if self.options.sort_keys:
                items = sorted(items, key=lambda kv: kv[0])
            separator = b': ' if self.options.pretty else b':'
            buf.write(b'{')
            first = True
            for k, v in items:
                if first:
                    first = False
                else:
                    buf.write(b',')
                self.newline(buf, level + 1)
                buf.write(escape_string(k, self.options))
                buf.write(separator)
                self.dump_value(v, buf, level + 1)
            self.newline(buf, level)
            buf.write(b'}')


def serialize(value, options=None):
    """Write a Value (or anything Value() accepts) out as JSON bytes."""
    return Serializer(options).serialize(value)
