from hypothesis.strategies import text, integers, booleans, floats, none, one_of, sampled_from
from hypothesis.stateful import rule, precondition, invariant, RuleBasedStateMachine

from dynjson.codec import parse_json, to_json, to_pretty_json
from dynjson.dynamic import Value

scalars = one_of(none(), booleans(), integers(min_value=-2**63, max_value=2**63 - 1),
                 floats(allow_nan=False, allow_infinity=False), text(max_size=10))


class DocumentMachine(RuleBasedStateMachine):
    """Edits one document, and a plain python copy of it, in step."""

    def __init__(self):
        RuleBasedStateMachine.__init__(self)
        self.doc = Value({"items": [], "meta": {}})
        self.model = {"items": [], "meta": {}}

    @rule(item=scalars)
    def append(self, item):
        self.doc["items"].append(item)
        self.model["items"].append(item)

    @rule(key=text(max_size=5), item=scalars)
    def set_meta(self, key, item):
        self.doc["meta"][key] = item
        self.model["meta"][key] = item

    @precondition(lambda self: self.model["items"])
    @rule(index=integers(min_value=0))
    def remove(self, index):
        index %= len(self.model["items"])
        del self.doc["items"][index]
        del self.model["items"][index]

    @precondition(lambda self: self.model["meta"])
    @rule(data=sampled_from([0, -1]))
    def forget(self, data):
        key = list(self.model["meta"])[data]
        del self.doc["meta"][key]
        del self.model["meta"][key]

    @rule()
    def reload(self):
        self.doc = parse_json(to_pretty_json(self.doc))

    @invariant()
    def matches_model(self):
        assert self.doc == Value(self.model)

    @invariant()
    def round_trips(self):
        assert parse_json(to_json(self.doc)) == self.doc


TestDocument = DocumentMachine.TestCase
