from cncchannel.schema.messages import default_registry
from cncchannel.support.streams import StaticStream


class FeatureStreams:
    """
    A named group of read-only streams belonging to one feature of the controller.

    Subclasses list their stream names in `names` and provide canned values for the offline
    variant in canned(). The live variant is a view over a router's streams and does no
    validation of its own.
    """
    names = ()

    def __init__(self, streams):
        missing = [name for name in self.names if name not in streams]
        if missing:
            raise ValueError("%s is missing streams %s" % (type(self).__name__, ', '.join(missing)))
        self._streams = {name: streams[name] for name in self.names}

    def stream(self, name):
        return self._streams[name]

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._streams[name]
        except KeyError:
            raise AttributeError("%s has no stream '%s'" % (type(self).__name__, name)) from None

    @classmethod
    def live(cls, router):
        return cls({name: router.stream(name) for name in cls.names})

    @classmethod
    def mock(cls):
        canned = cls.canned()
        return cls({name: StaticStream(*canned.get(name, ())) for name in cls.names})

    @classmethod
    def canned(cls):
        """ a mapping from stream name to the values the offline stream replays. """
        return {}


def canned_top_level(raw):
    """ builds a message from raw wire data, failing loudly if the canned data is invalid. """
    registry = default_registry()
    for kind in registry.top_level():
        message = kind.validate(raw)
        if message:
            return message
    raise ValueError("canned message does not validate: %r" % (raw,))


def canned_reply(raw, to='mock'):
    message = default_registry().unwrap({'type': 'reply', 'to': to, 'msg': raw})
    if not message:
        raise ValueError("canned reply does not validate: %r (%r)" % (raw, message))
    return message
