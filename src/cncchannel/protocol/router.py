"""
Demultiplexes inbound frames onto one stream per message kind.

A frame is parsed as JSON and checked against the top-level kinds in priority order. A reply
envelope is unwrapped and its payload is dispatched on the payload's own discriminant, since
program and settings replies share the envelope. A frame that matches nothing is dropped.
"""
import json
import logging

from cncchannel.schema.messages import MessageRegistry, default_registry
from cncchannel.support.streams import Stream

logger = logging.getLogger(__name__)


def _reject_constant(name):
    """ NaN and Infinity are accepted by the json module but are not JSON. """
    raise ValueError("invalid JSON constant %s" % name)


class ChannelRouter:
    """
    Owns the streams of one connection. A new router is built for every connection, so nothing
    received on one connection is visible on the next.
    """

    def __init__(self, registry: MessageRegistry=None):
        self.registry = registry or default_registry()
        self._subjects = {name: discipline.new_subject(name)
                          for name, discipline in self.registry.streams().items()}
        self.closed = False

    def stream(self, name) -> Stream:
        """ retrieves a read-only view of the named stream. Raises KeyError for unknown names. """
        return self._subjects[name].as_stream()

    def subject(self, name):
        return self._subjects[name]

    def stream_names(self):
        return tuple(self._subjects)

    def route(self, frame):
        """
        Publishes the message carried by the frame on its stream.
        :param frame: a text or binary frame holding one JSON object.
        :return: the message published, or None when the frame was dropped.
        """
        if self.closed:
            return None
        try:
            raw = json.loads(frame, parse_constant=_reject_constant)
        except (TypeError, ValueError, RecursionError) as e:
            logger.debug("dropping unparseable frame %.200r: %s" % (frame, e))
            return None
        try:
            message, kind = self._resolve(raw)
        except RecursionError as e:
            logger.debug("dropping frame nested too deeply: %s" % e)
            return None
        if message is None:
            return None
        self._subjects[kind.stream].emit(message)
        return message

    def _resolve(self, raw):
        """ finds the first kind that accepts the raw data. """
        for kind in self.registry.top_level():
            message = kind.validate(raw)
            if message:
                return message, kind
        if isinstance(raw, dict) and raw.get('type') == 'reply':
            message = self.registry.unwrap(raw)
            if message:
                return message, self.registry.reply_kind(raw['msg']['type'])
            logger.debug("dropping unroutable reply: %r" % message)
        else:
            logger.debug("dropping unknown frame %r" % (raw,))
        return None, None

    def close(self):
        """ discards all streams. Subscribers stop receiving values. """
        self.closed = True
        for subject in self._subjects.values():
            subject.close()
