import copy


def freeze(value):
    """ a hashable equivalent of a JSON-like value. """
    if isinstance(value, dict):
        return tuple(sorted((k, freeze(v)) for k, v in value.items()))
    if isinstance(value, list):
        return tuple(freeze(v) for v in value)
    return value


def _copy_out(value):
    return copy.deepcopy(value) if isinstance(value, (list, dict)) else value


def quote(val):
    return "'" + str(val) + "'" if isinstance(val, str) else str(val)


class Record:
    """
    An immutable value object over a mapping of named fields.

    Fields are reachable as attributes (record.x) or items (record['x']). Two records are equal
    when they have the same class and equal fields. Nested containers are copied on the way in
    and on the way out, so callers can not mutate a record through values they hold.
    """
    __slots__ = ('_fields',)

    def __init__(self, fields=None, **kwargs):
        values = dict(fields or {})
        values.update(kwargs)
        object.__setattr__(self, '_fields', copy.deepcopy(values))

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return _copy_out(self._fields[name])
        except KeyError:
            raise AttributeError("%s has no field '%s'" % (type(self).__name__, name)) from None

    def __getitem__(self, name):
        return _copy_out(self._fields[name])

    def __contains__(self, name):
        return name in self._fields

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __delattr__(self, name):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def get(self, name, default=None):
        return _copy_out(self._fields.get(name, default))

    def keys(self):
        return self._fields.keys()

    def as_dict(self) -> dict:
        return copy.deepcopy(self._fields)

    def __eq__(self, other):
        return type(other) is type(self) and other._fields == self._fields

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self), freeze(self._fields)))

    def _sorted_items_string(self):
        return "{" + ", ".join("'%s': %s" % (key, quote(val)) for key, val in sorted(self._fields.items())) + "}"

    def __repr__(self):
        return type(self).__name__ + self._sorted_items_string()

    __str__ = __repr__
