"""
Validator combinators for untrusted wire data.

A check is a callable that takes a decoded JSON value and returns a Result. Checks never raise
for bad input and never coerce: a number sent as a string is invalid, not parsed.

>>> bool(number(1.5))
True
>>> bool(number('1.5'))
False
>>> record(required={'x': number})({'x': 1, 'extra': True}).value
{'x': 1, 'extra': True}
"""
import math
from numbers import Real


class Result:
    """ the outcome of a check. Truthy when the value is valid. """
    value = None

    def __bool__(self):
        raise NotImplementedError


class Valid(Result):
    def __init__(self, value):
        self.value = value

    def __bool__(self):
        return True

    def __repr__(self):
        return "Valid(%r)" % (self.value,)


class Invalid(Result):
    def __init__(self, reason, path=()):
        self.reason = reason
        self.path = tuple(path)

    def __bool__(self):
        return False

    def where(self):
        return '.'.join(str(p) for p in self.path) or '<root>'

    def __repr__(self):
        return "Invalid(%s: %s)" % (self.where(), self.reason)


class Check:
    description = 'value'

    def __call__(self, value, path=()) -> Result:
        return Valid(value) if self.accepts(value) else Invalid("expected %s, got %r" % (self.description, value), path)

    def accepts(self, value) -> bool:
        raise NotImplementedError

    def __repr__(self):
        return self.description


class TypeCheck(Check):
    """ accepts instances of the given types. bool is only accepted when asked for explicitly,
    since python treats True as the number 1. """

    def __init__(self, types, description):
        self.types = types
        self.description = description

    def accepts(self, value):
        if isinstance(value, bool) and bool not in self.types:
            return False
        return isinstance(value, self.types)


class NumberCheck(TypeCheck):
    """ JSON numbers are finite: NaN and the infinities are rejected. """

    def accepts(self, value):
        return super().accepts(value) and (isinstance(value, int) or math.isfinite(value))


number = NumberCheck((Real,), 'number')
integer = TypeCheck((int,), 'integer')
boolean = TypeCheck((bool,), 'boolean')
string = TypeCheck((str,), 'string')
null = TypeCheck((type(None),), 'null')


class Literal(Check):
    """ accepts one of a fixed set of values. The type must match too, so 1 does not match True. """

    def __init__(self, *values):
        self.values = values
        self.description = ' | '.join(repr(v) for v in values)

    def accepts(self, value):
        return any(type(value) is type(v) and value == v for v in self.values)


def literal(*values):
    return Literal(*values)


class ArrayOf(Check):
    def __init__(self, item: Check):
        self.item = item
        self.description = 'array of %s' % item

    def __call__(self, value, path=()):
        if not isinstance(value, list):
            return Invalid("expected %s, got %r" % (self.description, value), path)
        for index, element in enumerate(value):
            result = self.item(element, tuple(path) + (index,))
            if not result:
                return result
        return Valid(value)


def array_of(item):
    return ArrayOf(item)


class AnyOf(Check):
    """ the first alternative that accepts the value wins. """

    def __init__(self, *alternatives):
        self.alternatives = alternatives
        self.description = ' | '.join(str(a) for a in alternatives)

    def __call__(self, value, path=()):
        for alternative in self.alternatives:
            result = alternative(value, path)
            if result:
                return result
        return Invalid("expected %s, got %r" % (self.description, value), path)


def any_of(*alternatives):
    return AnyOf(*alternatives)


def nullable(check):
    return AnyOf(null, check)


class RecordCheck(Check):
    """
    Checks a JSON object field by field.

    :param required: field name to check. The field must be present.
    :param optional: field name to check. The field may be absent; when present it must pass.
    Fields not named are ignored, so newer peers can add fields without breaking older ones.
    """

    def __init__(self, required=None, optional=None, name=None):
        self.required = dict(required or {})
        self.optional = dict(optional or {})
        self.description = name or 'object'

    def __call__(self, value, path=()):
        path = tuple(path)
        if not isinstance(value, dict):
            return Invalid("expected %s, got %r" % (self.description, value), path)
        for field, check in self.required.items():
            if field not in value:
                return Invalid("missing required field '%s'" % field, path)
            result = check(value[field], path + (field,))
            if not result:
                return result
        for field, check in self.optional.items():
            if field in value:
                result = check(value[field], path + (field,))
                if not result:
                    return result
        return Valid(value)


def record(required=None, optional=None, name=None):
    return RecordCheck(required, optional, name)
