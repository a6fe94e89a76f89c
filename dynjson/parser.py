r"""
# Parsing JSON into Values

## JSON in a nutshell:

 - utf-8 text, whitespace is `\t`, `\r`, `\n`, `\x20`
 - a document is any one value, i.e `1` is a valid document
 - lists are `[]`, `[obj]`, `[ obj, obj ]`, ...
 - objects: `{ "key": value}`, only string keys
 - built-ins: `true`, `false`, `null`
 - `"strings"` with escapes `\" \\ \/ \b \f \n \r \t \uXXXX`, no control codes unescaped,
   and code points past U+FFFF written as a surrogate pair of `\uXXXX` escapes
 - int/float numbers (unary minus, no leading zeros, except for `0.xxx`)
 - no comments, no trailing commas

## Options

Comments, trailing commas and `NaN`/`Infinity` can be switched on in
ParseOptions. Duplicate keys are always accepted: the last one wins.

Integers that fit in 64 bits come back as int64, every other number as a
double.

Nesting deeper than `recursion_limit` (or than the python stack allows,
when the limit is None or very large), or input bigger than `max_size`
raises LimitExceeded.
"""

import re
import sys
import logging

from collections import namedtuple

from .comments import strip_comments
from .dynamic import Value, Kind, INT64_MIN, INT64_MAX
from .errors import ParseError, LimitExceeded

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_LIMIT = 100

ParseOptions = namedtuple('ParseOptions', [
    'allow_comments',
    'allow_trailing_comma',
    'allow_nan_inf',
    'validate_utf8',
    'recursion_limit',
    'max_size',
], defaults=(False, False, False, False, DEFAULT_RECURSION_LIMIT, None))

whitespace = re.compile(rb"[ \t\r\n]+")

number = re.compile(rb"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?")
digit = re.compile(rb"[0-9]")

string_chars = re.compile(rb'[^"\\\x00-\x1F]*')
unicode_escape = re.compile(rb"\\u([0-9a-fA-F]{4})")

identifier = re.compile(rb"[A-Za-z]+")

str_escapes = {
    b'b': b'\b',
    b'n': b'\n',
    b'f': b'\f',
    b'r': b'\r',
    b't': b'\t',
    b'/': b'/',
    b'"': b'"',
    b'\\': b'\\',
}

builtin_names = {
    b'null': (Kind.NULL, None),
    b'true': (Kind.BOOL, True),
    b'false': (Kind.BOOL, False),
}

non_finite_names = {
    b'NaN': float('nan'),
    b'Infinity': float('inf'),
}


def expected(buf, pos, what):
    if pos >= len(buf):
        return ParseError(buf, pos, "Unexpected end of input, expecting {}".format(what))
    return ParseError(buf, pos, "Expecting {} but found {}".format(what, repr(buf[pos:pos + 1])))


class Parser:
    def __init__(self, options=None):
        self.options = options if options is not None else ParseOptions()

    def parse(self, buf):
        if isinstance(buf, str):
            buf = buf.encode('utf-8', 'surrogatepass')
        else:
            buf = bytes(buf)

        max_size = self.options.max_size
        if max_size is not None and len(buf) > max_size:
            logger.debug("Refusing to parse %d bytes, max_size is %d", len(buf), max_size)
            raise LimitExceeded(max_size, len(buf), "Input too large")

        if self.options.allow_comments:
            buf = strip_comments(buf)

        try:
            obj, pos = self.parse_value(buf, self.skip(buf, 0), 0)
        except RecursionError as e:
            logger.debug("Ran out of python stack, recursion_limit is %s", self.options.recursion_limit)
            raise LimitExceeded(sys.getrecursionlimit(), None, "Nesting too deep for the python stack") from e

        pos = self.skip(buf, pos)
        if pos != len(buf):
            raise ParseError(buf, pos, "Trailing content: {}".format(
                repr(buf[pos:pos + 10])))

        return obj

    def skip(self, buf, pos):
        m = whitespace.match(buf, pos)
        if m:
            return m.end()
        return pos

    def check_depth(self, depth):
        limit = self.options.recursion_limit
        if limit is not None and depth > limit:
            logger.debug("Nesting depth %d over recursion_limit %d", depth, limit)
            raise LimitExceeded(limit, depth, "Nesting too deep")

    def parse_value(self, buf, pos, depth):
        peek = buf[pos:pos + 1]

        if peek == b'':
            raise ParseError(buf, pos)

        elif peek == b'{':
            return self.parse_object(buf, pos, depth + 1)

        elif peek == b'[':
            return self.parse_array(buf, pos, depth + 1)

        elif peek == b'"':
            s, pos = self.parse_string(buf, pos)
            return Value._make(Kind.STRING, s), pos

        elif peek in b"-0123456789":
            return self.parse_number(buf, pos)

        else:
            return self.parse_builtin(buf, pos)

    def parse_object(self, buf, pos, depth):
        self.check_depth(depth)
        out = {}

        pos = self.skip(buf, pos + 1)
        if buf[pos:pos + 1] == b'}':
            return Value._make(Kind.OBJECT, out), pos + 1

        while True:
            if buf[pos:pos + 1] != b'"':
                raise expected(buf, pos, "a string key")
            key, pos = self.parse_string(buf, pos)

            pos = self.skip(buf, pos)
            if buf[pos:pos + 1] != b':':
                raise expected(buf, pos, "a ':' after key {}".format(repr(key)))
            pos = self.skip(buf, pos + 1)

            item, pos = self.parse_value(buf, pos, depth)
            out[key] = item

            pos = self.skip(buf, pos)
            peek = buf[pos:pos + 1]
            if peek == b',':
                pos = self.skip(buf, pos + 1)
                if self.options.allow_trailing_comma and buf[pos:pos + 1] == b'}':
                    return Value._make(Kind.OBJECT, out), pos + 1
            elif peek == b'}':
                return Value._make(Kind.OBJECT, out), pos + 1
            else:
                raise expected(buf, pos, "a ',' or a '}'")

    def parse_array(self, buf, pos, depth):
        self.check_depth(depth)
        out = []

        pos = self.skip(buf, pos + 1)
        if buf[pos:pos + 1] == b']':
            return Value._make(Kind.ARRAY, out), pos + 1

        while True:
            item, pos = self.parse_value(buf, pos, depth)
            out.append(item)

            pos = self.skip(buf, pos)
            peek = buf[pos:pos + 1]
            if peek == b',':
                pos = self.skip(buf, pos + 1)
                if self.options.allow_trailing_comma and buf[pos:pos + 1] == b']':
                    return Value._make(Kind.ARRAY, out), pos + 1
            elif peek == b']':
                return Value._make(Kind.ARRAY, out), pos + 1
            else:
                raise expected(buf, pos, "a ',' or a ']'")

    def parse_string(self, buf, pos):
        """Returns the decoded bytes of the string starting at pos, and the position after it."""
        s = bytearray()
        lo = pos + 1  # skip quote

        while True:
            hi = string_chars.match(buf, lo).end()
            s.extend(buf[lo:hi])

            peek = buf[hi:hi + 1]
            if peek == b'"':
                break
            elif peek == b'\\':
                esc = buf[hi + 1:hi + 2]
                if esc == b'u':
                    n, lo = self.parse_unicode_escape(buf, hi)
                    s.extend(chr(n).encode('utf-8'))
                elif esc and esc in str_escapes:
                    s.extend(str_escapes[esc])
                    lo = hi + 2
                else:
                    raise ParseError(buf, hi, "Unknown escape character {}".format(repr(esc)))
            elif peek == b'':
                raise ParseError(buf, pos, "Unterminated string")
            else:
                raise ParseError(buf, hi, "Control character {} must be escaped".format(repr(peek)))

        out = bytes(s)
        if self.options.validate_utf8:
            try:
                out.decode('utf-8')
            except UnicodeDecodeError as e:
                raise ParseError(buf, pos, "Invalid utf-8 in string: {}".format(e.reason)) from e
        return out, hi + 1

    def parse_unicode_escape(self, buf, pos):
        m = unicode_escape.match(buf, pos)
        if not m:
            raise ParseError(buf, pos, "Invalid unicode escape {}".format(repr(buf[pos:pos + 6])))
        n = int(m.group(1), 16)
        end = m.end()

        if 0xD800 <= n <= 0xDBFF:
            low = unicode_escape.match(buf, end)
            if not low:
                raise ParseError(buf, pos, "High surrogate must be followed by a low surrogate")
            lo = int(low.group(1), 16)
            if not 0xDC00 <= lo <= 0xDFFF:
                raise ParseError(buf, end, "Invalid low surrogate \\u{:04x}".format(lo))
            n = 0x10000 + ((n - 0xD800) << 10) + (lo - 0xDC00)
            end = low.end()
        elif 0xDC00 <= n <= 0xDFFF:
            raise ParseError(buf, pos, "Low surrogate without a high surrogate")

        return n, end

    def parse_number(self, buf, pos):
        m = number.match(buf, pos)
        if not m:
            if self.options.allow_nan_inf and buf.startswith(b'-Infinity', pos):
                return Value._make(Kind.DOUBLE, float('-inf')), pos + 9
            raise ParseError(buf, pos, "Invalid number")

        end = m.end()
        if digit.match(buf, end):
            raise ParseError(buf, pos, "Numbers can't have leading zeros")

        text = m.group(0)
        if m.group(1) is None and m.group(2) is None:
            n = int(text)
            if INT64_MIN <= n <= INT64_MAX:
                return Value._make(Kind.INT64, n), end

        out = float(text)
        if out in (float('inf'), float('-inf')) and not self.options.allow_nan_inf:
            raise ParseError(buf, pos, "Number out of range: {}".format(text.decode('ascii')))
        return Value._make(Kind.DOUBLE, out), end

    def parse_builtin(self, buf, pos):
        m = identifier.match(buf, pos)
        if not m:
            raise ParseError(buf, pos)

        item = m.group(0)
        if item in builtin_names:
            kind, out = builtin_names[item]
            return Value._make(kind, out), m.end()

        if self.options.allow_nan_inf and item in non_finite_names:
            return Value._make(Kind.DOUBLE, non_finite_names[item]), m.end()

        raise ParseError(buf, pos, "{} is not a recognised built-in".format(repr(item)))


def parse(text, options=None):
    """Parse a whole JSON document (bytes or str) into a Value."""
    return Parser(options).parse(text)
