"""
Binds consumers to the streams of whichever handle is currently active.

A source is anything with a `handle` attribute (None while there is no handle) and an `events`
stream that fires whenever the handle changes. ConnectionLifecycle is the usual source;
StaticHandleSource wraps a fixed handle, e.g. the offline mock.

A Binding follows one stream by name across handle changes. Each time the handle changes, the
subscription to the previous handle's stream is cancelled before the new one is made, so a sink
never receives values from two handles, and never receives anything from a stale handle.
"""
import logging

from cncchannel.support.streams import EventSubject

logger = logging.getLogger(__name__)


class Stage:
    """ A transform applied to values on their way to the sink. Stages with state reset on every subscription. """

    def reset(self):
        pass

    def apply(self, value, downstream):
        """ passes zero or more values to downstream. """
        raise NotImplementedError


class Map(Stage):
    def __init__(self, fn):
        self.fn = fn

    def apply(self, value, downstream):
        downstream(self.fn(value))


class Filter(Stage):
    def __init__(self, predicate):
        self.predicate = predicate

    def apply(self, value, downstream):
        if self.predicate(value):
            downstream(value)


class Scan(Stage):
    """
    Accumulates values, passing each intermediate accumulation downstream.

    >>> scan = Scan(lambda total, v: total + v, 0)
    >>> out = []
    >>> for v in (1, 2, 3): scan.apply(v, out.append)
    >>> out
    [1, 3, 6]
    """

    def __init__(self, fn, seed):
        self.fn = fn
        self.seed = seed
        self.accumulated = seed

    def reset(self):
        self.accumulated = self.seed

    def apply(self, value, downstream):
        self.accumulated = self.fn(self.accumulated, value)
        downstream(self.accumulated)


def _pipeline(stages, sink):
    """ composes the stages into a single callable feeding the sink. """
    downstream = sink
    for stage in reversed(stages):
        downstream = (lambda s, d: lambda value: s.apply(value, d))(stage, downstream)
    return downstream


class StaticHandleSource:
    """ A source whose handle never changes. """

    def __init__(self, handle):
        self.handle = handle
        self.events = EventSubject('handle events').as_stream()


class Binding:
    """
    Delivers the named stream of the source's current handle to the sink, through the stages.

    :param source: provides the current handle and fires an event when it changes.
    :param name: the stream name, e.g. 'position'.
    :param sink: receives the values.
    :param stages: Map, Filter and Scan stages applied in order.
    """

    def __init__(self, source, name, sink, *stages):
        self.source = source
        self.name = name
        self.sink = sink
        self.stages = stages
        self.handle = None
        self._subscription = None
        self._generation = 0
        self.closed = False
        self._events = source.events.subscribe(self._handle_changed)
        self._rebind()

    def _handle_changed(self, event):
        self._rebind()

    def _unbind(self):
        self._generation += 1
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()
        self.handle = None

    def _rebind(self):
        if self.closed:
            return
        handle = self.source.handle
        if handle is self.handle and self._subscription is not None:
            return
        self._unbind()
        if handle is None:
            return
        for stage in self.stages:
            stage.reset()
        self.handle = handle
        logger.debug("binding %s to %r" % (self.name, handle))
        pipeline = _pipeline(self.stages, self.sink)
        generation = self._generation

        def deliver(value):
            # replayed values arrive before subscribe() returns the subscription
            if self._generation == generation:
                pipeline(value)

        subscription = handle.stream(self.name).subscribe(deliver)
        if self._generation == generation:
            self._subscription = subscription
        else:
            subscription.cancel()

    @property
    def active(self):
        return self._subscription is not None and self._subscription.active

    def close(self):
        """ stops delivery. No value reaches the sink after this returns. """
        if not self.closed:
            self.closed = True
            self._events.cancel()
            self._unbind()


class SubscriptionScope:
    """
    The bindings of one consumer. There is at most one binding per stream name: binding a name
    again replaces the previous binding.
    """

    def __init__(self, source):
        self.source = source
        self._bindings = {}

    def bind(self, name, sink, *stages) -> Binding:
        previous = self._bindings.pop(name, None)
        if previous is not None:
            previous.close()
        binding = self._bindings[name] = Binding(self.source, name, sink, *stages)
        return binding

    def unbind(self, name):
        binding = self._bindings.pop(name, None)
        if binding is not None:
            binding.close()

    def bindings(self):
        return dict(self._bindings)

    def close(self):
        for name in list(self._bindings):
            self.unbind(name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
