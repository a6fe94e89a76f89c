import sys
import math

import pytest

from dynjson.serializer import serialize, escape_string, SerializationOptions, Serializer
from dynjson.escapes import build_extra_escape_bitmap
from dynjson.parser import parse, ParseOptions
from dynjson.dynamic import Value, INT64_MIN
from dynjson.errors import EncodingError, LimitExceeded

large_non_ascii = b"qwerty \xc2\x80 \xef\xbf\xbf poiuy" * 10
large_special = b"<script>foo%@bar.com</script>" * 7


def check_dump(obj, buf, **options):
    out = serialize(Value(obj), SerializationOptions(**options))
    assert out == buf, '{} != {}'.format(out, buf)


@pytest.mark.parametrize("obj, buf", [
    (None, b"null"),
    (True, b"true"),
    (False, b"false"),
    (0, b"0"),
    (-12, b"-12"),
    (INT64_MIN, b"-9223372036854775808"),
    (1.0, b"1.0"),
    (-0.0, b"-0.0"),
    (0.1, b"0.1"),
    (1e16, b"1e+16"),
    (1.5e-7, b"1.5e-07"),
    ("", b'""'),
    ("foo", b'"foo"'),
    ([], b"[]"),
    ({}, b"{}"),
    ([1, [2, []], {}], b"[1,[2,[]],{}]"),
    ({"a": [None]}, b'{"a":[null]}'),
])
def test_dump(obj, buf):
    check_dump(obj, buf)


def test_mandatory_escapes():
    check_dump('"\\/', b'"\\"\\\\/"')
    check_dump("\b\f\n\r\t", b'"\\b\\f\\n\\r\\t"')
    check_dump("\x00\x01\x1f\x7f", b'"\\u0000\\u0001\\u001f\x7f"')


def test_raw_utf8_passthrough():
    check_dump(large_non_ascii, b'"' + large_non_ascii + b'"')


def test_encode_non_ascii():
    check_dump("\xe9\N{BLACK HEART SUIT}", b'"\\u00e9\\u2665"', encode_non_ascii=True)
    check_dump("\U0001F600", b'"\\ud83d\\ude00"', encode_non_ascii=True)
    out = serialize(Value(large_non_ascii), SerializationOptions(encode_non_ascii=True))
    assert out.isascii()
    assert parse(out) == Value(large_non_ascii)


def test_encode_non_ascii_needs_valid_utf8():
    with pytest.raises(EncodingError):
        serialize(Value(b"\xc2"), SerializationOptions(encode_non_ascii=True))


def test_validate_utf8():
    bad = Value(b"ab\xc2cd")
    assert serialize(bad) == b'"ab\xc2cd"'
    with pytest.raises(EncodingError):
        serialize(bad, SerializationOptions(validate_utf8=True))
    with pytest.raises(EncodingError):
        serialize(Value({b"\xc2": 1}), SerializationOptions(validate_utf8=True))
    with pytest.raises(EncodingError):
        serialize(Value([1, [b"\xed\xa0\x80"]]), SerializationOptions(validate_utf8=True))

    options = SerializationOptions(validate_utf8=True)
    assert serialize(Value(large_non_ascii), options) == b'"' + large_non_ascii + b'"'


def test_extra_escapes():
    options = SerializationOptions(extra_ascii_to_escape_bitmap=build_extra_escape_bitmap("<%@"))
    assert serialize(Value("a<b%c@d>"), options) == b'"a\\u003cb\\u0025c\\u0040d>"'

    out = serialize(Value(large_special), options)
    assert b"<" not in out and b"%" not in out and b"@" not in out
    assert out.count(b"\\u003c") == 14
    assert parse(out) == Value(large_special)


def test_extra_escapes_with_non_ascii():
    options = SerializationOptions(
        encode_non_ascii=True,
        extra_ascii_to_escape_bitmap=build_extra_escape_bitmap("<-]"))
    assert serialize(Value("<\xe9-]a"), options) == b'"\\u003c\\u00e9\\u002d\\u005da"'


def test_extra_escapes_dont_override_short_forms():
    options = SerializationOptions(extra_ascii_to_escape_bitmap=build_extra_escape_bitmap('"\n'))
    assert serialize(Value('"\n'), options) == b'"\\"\\n"'


def test_sort_keys():
    obj = Value.object([("b", 1), ("a", {"d": 1, "c": 2}), ("ab", 3)])
    check_dump(obj, b'{"b":1,"a":{"d":1,"c":2},"ab":3}')
    check_dump(obj, b'{"a":{"c":2,"d":1},"ab":3,"b":1}', sort_keys=True)


def test_pretty():
    obj = Value.object([("a", [1, {"b": None}]), ("c", []), ("d", {})])
    check_dump(obj, b'\n'.join([
        b'{',
        b'  "a": [',
        b'    1,',
        b'    {',
        b'      "b": null',
        b'    }',
        b'  ],',
        b'  "c": [],',
        b'  "d": {}',
        b'}',
    ]), pretty=True)
    check_dump(1, b"1", pretty=True)


def test_non_finite():
    for x in (float('nan'), float('inf'), float('-inf')):
        with pytest.raises(EncodingError):
            serialize(Value(x))
    options = SerializationOptions(allow_nan_inf=True)
    assert serialize(Value([float('nan'), float('inf'), float('-inf')]), options) == b"[NaN,Infinity,-Infinity]"


def test_shortest_round_trip_doubles():
    for x in (0.1, 1 / 3, 2 ** -1074, 1.7976931348623157e308, 123456789.125, -1e-300):
        out = serialize(Value(x))
        assert float(out.decode("ascii")) == x
        assert parse(out) == Value(x)
    assert serialize(Value(0.1 + 0.2)) == b"0.30000000000000004"


def test_plain_python_values():
    assert serialize({"a": [1, 2.5, None]}) == b'{"a":[1,2.5,null]}'


def test_escape_string():
    assert escape_string("a\"b") == b'"a\\"b"'
    assert escape_string(b"\xff") == b'"\xff"'
    with pytest.raises(EncodingError):
        escape_string(b"\xff", SerializationOptions(validate_utf8=True))


def test_serializer_is_reusable():
    s = Serializer(SerializationOptions(sort_keys=True))
    assert s.serialize(Value({"b": 1, "a": 2})) == b'{"a":2,"b":1}'
    assert s.serialize(Value({"d": 1, "c": 2})) == b'{"c":2,"d":1}'


def test_bad_bitmap():
    with pytest.raises(ValueError):
        serialize(Value("a"), SerializationOptions(extra_ascii_to_escape_bitmap=(True,)))


def test_nan_round_trip_with_options():
    out = serialize(Value(float('nan')), SerializationOptions(allow_nan_inf=True))
    assert math.isnan(parse(out, ParseOptions(allow_nan_inf=True)).as_double())


def test_nesting_past_python_stack():
    depth = sys.getrecursionlimit() * 2
    root = Value([])
    cur = root
    for _ in range(depth):
        cur.append([])
        cur = cur[0]
    with pytest.raises(LimitExceeded) as e:
        serialize(root)
    assert e.value.limit == sys.getrecursionlimit()

    nested = []
    for _ in range(depth):
        nested = [nested]
    with pytest.raises(LimitExceeded):
        serialize(nested, SerializationOptions(pretty=True))
