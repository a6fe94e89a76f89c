"""
    the short way in and out of JSON

    parse_json(text)       -> Value
    to_json(value)         -> compact bytes
    to_pretty_json(value)  -> indented bytes

    Codec binds a pair of option records, for callers that read and write
    the same flavour of JSON over and over.
"""
import logging

from .errors import ParseError
from .parser import Parser, ParseOptions
from .serializer import Serializer, SerializationOptions

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


class Codec:
    content_type = CONTENT_TYPE

    def __init__(self, parse_options=None, serialization_options=None):
        self.parser = Parser(parse_options)
        self.serializer = Serializer(serialization_options)

    def parse(self, buf):
        try:
            return self.parser.parse(buf)
        except ParseError as e:
            logger.debug("JSON parse error on line %d, column %d: %s", e.line, e.column, e.reason)
            raise

    def dump(self, obj):
        return self.serializer.serialize(obj) + b'\n'


def parse_json(text, **options):
    """`parse_json(text, allow_comments=True)`: keywords are ParseOptions fields."""
    return Codec(ParseOptions(**options)).parse(text)


def to_json(value):
    return Serializer().serialize(value)


def to_pretty_json(value):
    return Serializer(SerializationOptions(pretty=True)).serialize(value)
