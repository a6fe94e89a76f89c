"""
    strip `//` and `/* */` comments out of JSON text

    Comment markers inside string literals are left alone. Removed text is
    not replaced with anything, except newlines: those are kept, so the
    output has the same lines as the input and line numbers in parse
    errors still point at the right place.

    An unterminated `/*` runs to the end of the input. That isn't an
    error here, the parser will complain about whatever is left.
"""
import re
import logging

logger = logging.getLogger(__name__)

# outside of a string, only a quote or a slash can change anything
special = re.compile(rb'["/]')
# inside a string, the closing quote, or an escape to skip over
string_special = re.compile(rb'["\\]')


def strip_comments(text):
    """Returns text without comments: bytes for bytes, str for str."""
    if isinstance(text, str):
        buf = text.encode('utf-8', 'surrogatepass')
        return _strip(buf).decode('utf-8', 'surrogatepass')
    return _strip(bytes(text))


def _strip(buf):
    out = bytearray()
    pos = 0
    end = len(buf)

    while pos < end:
        m = special.search(buf, pos)
        if not m:
            out += buf[pos:]
            break

        hi = m.start()
        out += buf[pos:hi]

        if buf[hi:hi + 1] == b'"':
            lo = hi + 1
            while True:
                s = string_special.search(buf, lo)
                if not s:
                    lo = end
                    break
                if buf[s.start():s.end()] == b'\\':
                    lo = s.start() + 2
                else:
                    lo = s.end()
                    break
            out += buf[hi:lo]
            pos = lo

        elif buf.startswith(b'//', hi):
            nl = buf.find(b'\n', hi)
            pos = end if nl < 0 else nl

        elif buf.startswith(b'/*', hi):
            close = buf.find(b'*/', hi + 2)
            if close < 0:
                logger.debug("Unterminated block comment at pos=%d, dropping %d bytes", hi, end - hi)
                close = end
            else:
                close += 2
            out += b'\n' * buf.count(b'\n', hi, close)
            pos = close

        else:
            out += b'/'
            pos = hi + 1

    return bytes(out)
