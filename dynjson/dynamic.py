"""
    Value: a JSON value that knows which of the seven kinds it is

    - null, bool, int64, double
    - string (bytes, normally utf-8, but not checked until serialized)
    - array (list of Value), object (dict of bytes -> Value)

    Containers own their children: anything put into an array or object
    is converted, and an existing Value is copied, so a tree never shares
    nodes and can't contain itself.
"""
import enum
import functools
import operator

from .errors import TypeMismatch, EncodingError

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class Kind(enum.IntEnum):
    # values also give the ordering between kinds
    NULL = 0
    BOOL = 1
    INT64 = 2
    DOUBLE = 3
    STRING = 4
    ARRAY = 5
    OBJECT = 6


def encode_string(s):
    if isinstance(s, str):
        return s.encode('utf-8', 'surrogatepass')
    if isinstance(s, (bytes, bytearray, memoryview)):
        return bytes(s)
    if isinstance(s, Value):
        return s.as_bytes()
    raise TypeMismatch('string', type(s).__name__)


def decode_string(data):
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise EncodingError("Invalid utf-8 in string: {}".format(repr(data))) from e


def check_int64(n):
    n = operator.index(n)
    if not INT64_MIN <= n <= INT64_MAX:
        raise OverflowError("{} does not fit in a signed 64 bit integer".format(n))
    return n


@functools.total_ordering
class Value:
    """A JSON value.

    `Value(obj)` converts plain python objects (None, bool, int, float, str,
    bytes, lists, tuples and dicts) recursively, and copies other Values.
    The classmethods build a value of one specific kind.

    Payloads are read through the `as_*` accessors, which raise TypeMismatch
    if the value is of another kind.
    """
    __slots__ = ('_kind', '_payload')

    def __init__(self, obj=None):
        if isinstance(obj, Value):
            kind, payload = obj._kind, obj._payload
            if kind is Kind.ARRAY:
                payload = [Value(x) for x in payload]
            elif kind is Kind.OBJECT:
                payload = {k: Value(v) for k, v in payload.items()}
        elif obj is None:
            kind, payload = Kind.NULL, None
        elif isinstance(obj, bool):
            kind, payload = Kind.BOOL, obj
        elif isinstance(obj, int):
            kind, payload = Kind.INT64, check_int64(obj)
        elif isinstance(obj, float):
            kind, payload = Kind.DOUBLE, obj
        elif isinstance(obj, (str, bytes, bytearray, memoryview)):
            kind, payload = Kind.STRING, encode_string(obj)
        elif isinstance(obj, (list, tuple)):
            kind, payload = Kind.ARRAY, [Value(x) for x in obj]
        elif isinstance(obj, dict):
            kind, payload = Kind.OBJECT, {encode_string(k): Value(v) for k, v in obj.items()}
        else:
            raise TypeError("Can't make a JSON value from {}".format(type(obj).__name__))
        self._kind = kind
        self._payload = payload

    @classmethod
    def _make(cls, kind, payload):
        # no conversion or copying: caller hands over ownership
        self = cls.__new__(cls)
        self._kind = kind
        self._payload = payload
        return self

    @classmethod
    def from_python(cls, obj):
        return cls(obj)

    @classmethod
    def null(cls):
        return cls._make(Kind.NULL, None)

    @classmethod
    def boolean(cls, b):
        return cls._make(Kind.BOOL, bool(b))

    @classmethod
    def int64(cls, n):
        return cls._make(Kind.INT64, check_int64(n))

    @classmethod
    def double(cls, x):
        return cls._make(Kind.DOUBLE, float(x))

    @classmethod
    def string(cls, s):
        return cls._make(Kind.STRING, encode_string(s))

    @classmethod
    def array(cls, items=()):
        return cls._make(Kind.ARRAY, [cls(x) for x in items])

    @classmethod
    def object(cls, members=()):
        return cls._make(Kind.OBJECT, {encode_string(k): cls(v) for k, v in dict(members).items()})

    @property
    def kind(self):
        return self._kind

    def copy(self):
        return Value(self)

    def to_python(self):
        """Inverse of Value(obj): strings and keys come back as str."""
        if self._kind is Kind.STRING:
            return decode_string(self._payload)
        elif self._kind is Kind.ARRAY:
            return [x.to_python() for x in self._payload]
        elif self._kind is Kind.OBJECT:
            return {decode_string(k): v.to_python() for k, v in self._payload.items()}
        return self._payload

    # accessors

    def _expect(self, kind):
        if self._kind is not kind:
            raise TypeMismatch(kind.name.lower(), self._kind.name.lower())
        return self._payload

    def is_null(self): return self._kind is Kind.NULL
    def is_bool(self): return self._kind is Kind.BOOL
    def is_int(self): return self._kind is Kind.INT64
    def is_double(self): return self._kind is Kind.DOUBLE
    def is_number(self): return self._kind in (Kind.INT64, Kind.DOUBLE)
    def is_string(self): return self._kind is Kind.STRING
    def is_array(self): return self._kind is Kind.ARRAY
    def is_object(self): return self._kind is Kind.OBJECT

    def as_bool(self):
        return self._expect(Kind.BOOL)

    def as_int(self):
        return self._expect(Kind.INT64)

    def as_double(self):
        return self._expect(Kind.DOUBLE)

    def as_bytes(self):
        return self._expect(Kind.STRING)

    def as_string(self):
        return decode_string(self._expect(Kind.STRING))

    def as_list(self):
        # a new list, but the items are borrowed, not copied
        return list(self._expect(Kind.ARRAY))

    def as_dict(self):
        return dict(self._expect(Kind.OBJECT))

    # container protocol

    def _container(self):
        if self._kind is Kind.ARRAY or self._kind is Kind.OBJECT:
            return self._payload
        raise TypeMismatch('array or object', self._kind.name.lower())

    def __len__(self):
        if self._kind is Kind.STRING:
            return len(self._payload)
        return len(self._container())

    def __bool__(self):
        # same truth as the plain python value
        return bool(self._payload)

    def __iter__(self):
        return iter(self._container())

    def __contains__(self, item):
        if self._kind is Kind.OBJECT:
            return encode_string(item) in self._payload
        return Value(item) in self._container()

    def __getitem__(self, index):
        if self._kind is Kind.OBJECT:
            return self._payload[encode_string(index)]
        return self._container()[index]

    def __setitem__(self, index, item):
        if self._kind is Kind.OBJECT:
            self._payload[encode_string(index)] = Value(item)
        else:
            self._container()[index] = Value(item)

    def __delitem__(self, index):
        if self._kind is Kind.OBJECT:
            del self._payload[encode_string(index)]
        else:
            del self._container()[index]

    def append(self, item):
        self._expect(Kind.ARRAY).append(Value(item))

    def get(self, key, default=None):
        return self._expect(Kind.OBJECT).get(encode_string(key), default)

    def keys(self):
        return self._expect(Kind.OBJECT).keys()

    def values(self):
        return self._expect(Kind.OBJECT).values()

    def items(self):
        return self._expect(Kind.OBJECT).items()

    # comparison: kind first, then payload. 1 and 1.0 are different values.

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._payload == other._payload

    def __lt__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self._kind is not other._kind:
            return self._kind < other._kind
        if self._kind is Kind.OBJECT:
            raise TypeMismatch('an ordered kind', 'object')
        if self._kind is Kind.NULL:
            return False
        return self._payload < other._payload

    __hash__ = None

    def __repr__(self):
        return "Value.{}({})".format(
            self._kind.name.lower(), '' if self._kind is Kind.NULL else repr(self._payload))
