"""
Multicast streams with three delivery disciplines.

- EventSubject: observers receive only values emitted after they subscribed.
- LatestValueSubject: a new observer immediately receives the most recent value, if any.
- HistorySubject: a new observer immediately receives up to N most recent values, oldest first.

All delivery happens synchronously on the calling thread, in emission order.
"""
import logging
from collections import deque

logger = logging.getLogger(__name__)


class Subscription:
    """ The link between a stream and one observer. Cancelling it stops delivery immediately. """

    def __init__(self, source, observer):
        self._source = source
        self.observer = observer
        self.active = True

    def cancel(self):
        if self.active:
            self.active = False
            source = self._source
            self._source = None
            if source is not None:
                source._remove(self)

    def deliver(self, value):
        """ passes the value to the observer, unless this subscription was cancelled. """
        if not self.active:
            return
        try:
            self.observer(value)
        except Exception as e:
            logger.exception("observer %s failed on %s: %s" % (self.observer, value, e))


class Stream:
    """ A read-only, live sequence of values. """

    def subscribe(self, observer) -> Subscription:
        raise NotImplementedError


class ReadOnlyStream(Stream):
    """ Exposes only the subscribe side of a subject. """

    def __init__(self, subject):
        self._subject = subject

    def subscribe(self, observer) -> Subscription:
        return self._subject.subscribe(observer)

    def __repr__(self):
        return "ReadOnlyStream(%r)" % self._subject


class Subject(Stream):
    """
    A stream that values can be pushed into. Subclasses decide what a new subscriber
    receives on subscription by overriding _replay().
    """

    def __init__(self, name=None):
        self.name = name
        self._subscriptions = []
        self.closed = False

    def subscribe(self, observer) -> Subscription:
        subscription = Subscription(self, observer)
        if self.closed:
            subscription.active = False
            return subscription
        self._subscriptions.append(subscription)
        for value in self._replay():
            subscription.deliver(value)
        return subscription

    def _remove(self, subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def observers(self):
        return tuple(s.observer for s in self._subscriptions if s.active)

    def emit(self, value):
        if self.closed:
            return
        self._remember(value)
        for subscription in tuple(self._subscriptions):
            subscription.deliver(value)

    def close(self):
        """ detaches every observer. A closed subject ignores further emissions. """
        self.closed = True
        subscriptions = self._subscriptions
        self._subscriptions = []
        for subscription in subscriptions:
            subscription.active = False

    def as_stream(self) -> Stream:
        return ReadOnlyStream(self)

    def _remember(self, value):
        pass

    def _replay(self):
        return ()

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, self.name or '')


class EventSubject(Subject):
    """ Fire-once notifications. Nothing is retained. """


class LatestValueSubject(Subject):
    """ Retains the last value emitted and replays it to new subscribers. """

    def __init__(self, name=None):
        super().__init__(name)
        self._has_value = False
        self._value = None

    @property
    def value(self):
        """ the most recent value, or None when nothing was emitted yet. """
        return self._value

    @property
    def has_value(self):
        return self._has_value

    def _remember(self, value):
        self._value = value
        self._has_value = True

    def _replay(self):
        return (self._value,) if self._has_value else ()


class HistorySubject(Subject):
    """ Retains a bounded, append-only history and replays it to new subscribers. """

    def __init__(self, size, name=None):
        if size < 1:
            raise ValueError("history size must be positive, got %s" % size)
        super().__init__(name)
        self.size = size
        self._history = deque(maxlen=size)

    @property
    def history(self):
        return tuple(self._history)

    def _remember(self, value):
        self._history.append(value)

    def _replay(self):
        return tuple(self._history)


class StaticStream(Stream):
    """
    Replays a fixed sequence of values to every subscriber and then stays silent.
    Used to stand in for a live stream when there is no connection.
    """

    def __init__(self, *values):
        self.values = values

    def subscribe(self, observer) -> Subscription:
        subscription = Subscription(None, observer)
        for value in self.values:
            subscription.deliver(value)
        return subscription

    def __repr__(self):
        return "StaticStream%r" % (self.values,)
