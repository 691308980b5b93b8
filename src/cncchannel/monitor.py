"""
A console monitor for the controller channel. Logs telemetry and program replies, and fetches the
program list and settings every time a connection is made.
"""
import logging

from cncchannel.connection_lifecycle import ChannelConnectedEvent
from cncchannel.protocol.commands import GetPrograms, GetRuntimeSettings, GetSystemSettings
from cncchannel.subscription import Map, SubscriptionScope

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def state_fetch_commands():
    """ the commands re-issued on every connect, since commands sent while disconnected are lost. """
    return [GetPrograms(), GetSystemSettings(), GetRuntimeSettings()]


class ChannelMonitor:
    """
    :param source: the connection lifecycle, or a StaticHandleSource for the offline mock.
    :param log: the logger receiving the output.
    """

    def __init__(self, source, log=logger):
        self.source = source
        self.log = log
        self.scope = SubscriptionScope(source)
        self._events = None

    def attach(self):
        scope = self.scope
        scope.bind('session', lambda m: self.log.info("session %s" % m.id))
        scope.bind('position', lambda p: self.log.info("position x=%s y=%s z=%s" % (p.x, p.y, p.z)))
        scope.bind('status', self._status, Map(lambda s: (s.mode, s.get('currentProg'), s.stepsDone, s.stepsTodo)))
        scope.bind('info', lambda m: self.log.log(LOG_LEVELS[m.lvl], "controller: %s" % m.message))
        scope.bind('available_programs', lambda m: self.log.info(
            "programs: %s" % ', '.join(p['name'] for p in m.progs)))
        scope.bind('start_program', lambda m: self.log.info("started %s" % m.programName))
        scope.bind('cancel_program', lambda m: self.log.info("program cancelled: %s" % m.ok))
        scope.bind('save_program', lambda m: self.log.info("saved %s: %s" % (m.programName, m.ok)))
        scope.bind('delete_program', lambda m: self.log.info("deleted %s: %s" % (m.programName, m.ok)))
        self._events = self.source.events.subscribe(self._channel_event)
        if self.source.handle is not None:
            self.refresh(self.source.handle)

    def _status(self, status):
        mode, program, done, todo = status
        if program:
            self.log.info("status %s %s %s/%s" % (mode, program, done, todo))
        else:
            self.log.info("status %s" % mode)

    def _channel_event(self, event):
        if isinstance(event, ChannelConnectedEvent):
            self.refresh(event.handle)

    def refresh(self, handle):
        for command in state_fetch_commands():
            handle.send(command)

    def detach(self):
        if self._events is not None:
            self._events.cancel()
            self._events = None
        self.scope.close()
