import asyncio
import logging

from cncchannel.connector.base import Connector, ConnectorError
from cncchannel.protocol.commands import CommandEncoder
from cncchannel.protocol.router import ChannelRouter
from cncchannel.schema.messages import MessageRegistry, default_registry
from cncchannel.services.handle import live_handle
from cncchannel.support.retry_strategy import FixedDelayRetryStrategy, RetryStrategy
from cncchannel.support.streams import EventSubject

logger = logging.getLogger(__name__)

# seconds between losing a connection and the next attempt
RECONNECT_DELAY = 1

DISCONNECTED = 'disconnected'
CONNECTING = 'connecting'
CONNECTED = 'connected'


class ChannelEvent:
    """ Describes a change of the active handle. """

    def __init__(self, lifecycle, handle):
        self.lifecycle = lifecycle
        self.handle = handle

    def __eq__(self, other):
        return type(other) is type(self) and other.lifecycle is self.lifecycle and other.handle is self.handle

    def __hash__(self):
        return hash((type(self), id(self.handle)))

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.handle)


class ChannelConnectedEvent(ChannelEvent):
    """ A connection was established. `handle` is the new live handle. """


class ChannelDisconnectedEvent(ChannelEvent):
    """ The connection closed. `handle` is the handle that is no longer live. """


class ConnectionLifecycle:
    """
    Keeps a connection to the controller open, reconnecting after a fixed delay whenever it closes.

    Each connection gets its own router, encoder and live handle. While disconnected or connecting
    there is no handle. Consumers follow handle changes through `events`, or bind to streams with
    subscription.Binding, which does that for them.

    The lifecycle is the only owner of the conduit: nothing else may close or reopen it.

    :param connector: opens conduits to the controller.
    :param retry_strategy: how long to wait before reconnecting.
    :param registry: the message kinds routed on each connection.
    """

    def __init__(self, connector: Connector, retry_strategy: RetryStrategy=None, registry: MessageRegistry=None,
                 log=logger):
        self.connector = connector
        self.retry_strategy = retry_strategy or FixedDelayRetryStrategy(RECONNECT_DELAY)
        self.registry = registry or default_registry()
        self.logger = log
        self.state = DISCONNECTED
        self.handle = None
        self.connections = 0
        self._events = EventSubject('channel events')
        self.events = self._events.as_stream()
        self._conduit = None
        self._stop = asyncio.Event()

    @property
    def stopped(self):
        return self._stop.is_set()

    async def run(self):
        """ connects and serves connections until stop() is called. """
        try:
            while not self.stopped:
                await self._connect()
                if self.stopped:
                    break
                await self._wait(self.retry_strategy())
        finally:
            self.state = DISCONNECTED

    def stop(self):
        """ closes the current connection, if any, and ends run(). """
        self._stop.set()
        conduit = self._conduit
        if conduit is not None:
            conduit.close()

    async def _wait(self, delay):
        """ sleeps for the retry delay, waking early when stopped. """
        if delay <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stop.wait(), delay)
        except asyncio.TimeoutError:
            pass

    async def _connect(self):
        """
        attempts to open a conduit and serves it until it closes.
        Errors opening or reading the connection are logged, not raised; the connection counts as closed.
        """
        self.state = CONNECTING
        try:
            conduit = await self.connector.connect()
        except ConnectorError as e:
            self.logger.debug("unable to connect to %s: %s" % (self.connector.endpoint, e))
            return
        except Exception as e:
            self.logger.exception("unexpected exception '%s' connecting to %s" % (e, self.connector.endpoint))
            return
        self.retry_strategy.reset()
        await self._serve(conduit)

    async def _serve(self, conduit):
        router = ChannelRouter(self.registry)
        handle = live_handle(router, CommandEncoder(conduit))
        self._conduit = conduit
        self.handle = handle
        self.state = CONNECTED
        self.connections += 1
        self.logger.info("connected to %s" % conduit.target)
        try:
            self._events.emit(ChannelConnectedEvent(self, handle))
            async for frame in conduit.frames():
                router.route(frame)
        except Exception as e:
            self.logger.exception("unexpected exception '%s' on %s, closing." % (e, conduit.target))
        finally:
            self._conduit = None
            conduit.close()
            router.close()
            self.handle = None
            self.state = DISCONNECTED if self.stopped else CONNECTING
            self.logger.info("disconnected from %s" % conduit.target)
            self._events.emit(ChannelDisconnectedEvent(self, handle))
        try:
            await conduit.wait_closed()
        except Exception as e:
            self.logger.debug("error closing %s: %s" % (conduit.target, e))
