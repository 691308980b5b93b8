import logging

from cncchannel.protocol.commands import Command, CommandEncoder, encode
from cncchannel.protocol.router import ChannelRouter
from cncchannel.services.controller import ControllerStreams
from cncchannel.services.program import ProgramStreams
from cncchannel.services.settings import SettingsStreams
from cncchannel.services.telemetry import TelemetryStreams

logger = logging.getLogger(__name__)

FEATURES = (TelemetryStreams, ControllerStreams, ProgramStreams, SettingsStreams)


class ServiceHandle:
    """
    The send capability plus every feature stream of one connection, or of the offline mock.

    Streams are available as attributes (handle.position) and by name (handle.stream('position')).
    A handle is never reused across connections: after a reconnect, consumers must subscribe to the
    new handle's streams.

    :param features: the feature stream sets making up the handle.
    :param sender: callable taking a Command, returning True when it was written to the connection.
    :param live: True when backed by a connection.
    """

    def __init__(self, features, sender, live):
        self.features = tuple(features)
        self._sender = sender
        self.live = live
        self._streams = {}
        for feature in self.features:
            for name in feature.names:
                if name in self._streams:
                    raise ValueError("stream '%s' is provided by more than one feature" % name)
                self._streams[name] = feature.stream(name)

    def send(self, command: Command) -> bool:
        return self._sender(command)

    def stream(self, name):
        try:
            return self._streams[name]
        except KeyError:
            raise KeyError("no stream named '%s'" % name) from None

    def stream_names(self):
        return tuple(self._streams)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._streams[name]
        except KeyError:
            raise AttributeError("handle has no stream '%s'" % name) from None

    def __repr__(self):
        return "ServiceHandle(%s)" % ('live' if self.live else 'mock')


class MockSender:
    """ Accepts commands and drops them. The commands are kept in `sent` for inspection. """

    def __init__(self):
        self.sent = []

    def __call__(self, command: Command) -> bool:
        encode(command)
        self.sent.append(command)
        logger.debug("offline, not sending %r" % (command,))
        return False


def live_handle(router: ChannelRouter, encoder: CommandEncoder) -> ServiceHandle:
    return ServiceHandle([feature.live(router) for feature in FEATURES], encoder.send, live=True)


def mock_handle(sender=None) -> ServiceHandle:
    """ builds a handle whose streams replay canned values and whose send does nothing. """
    return ServiceHandle([feature.mock() for feature in FEATURES], sender or MockSender(), live=False)
