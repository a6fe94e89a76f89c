"""
    everything the codec raises
"""
class JsonError(Exception): pass

# Bad input text: carries where in the buffer things went wrong

class ParseError(JsonError, ValueError):
    def __init__(self, buf, pos, reason=None):
        self.buf = buf
        self.pos = pos
        self.line = buf.count(b'\n', 0, pos) + 1
        self.column = pos - (buf.rfind(b'\n', 0, pos) + 1) + 1
        if reason is None:
            if pos >= len(buf):
                reason = "Unexpected end of input"
            else:
                reason = "Unexpected character {} (context: {})".format(
                    repr(buf[pos:pos + 1]), repr(buf[max(pos - 10, 0):pos + 5]))
        self.reason = reason
        JsonError.__init__(self, "{} (at line={}, column={}, pos={})".format(
            reason, self.line, self.column, pos))

# Bad strings on the way out

class EncodingError(JsonError, ValueError): pass

# Wrong accessor used on a Value

class TypeMismatch(JsonError, TypeError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        JsonError.__init__(self, "expected {}, but value is {}".format(expected, actual))

# Caller supplied guard tripped

class LimitExceeded(JsonError):
    def __init__(self, limit, value, reason):
        self.limit = limit
        self.value = value
        if value is None:
            JsonError.__init__(self, "{} (limit {})".format(reason, limit))
        else:
            JsonError.__init__(self, "{} ({} > {})".format(reason, value, limit))
