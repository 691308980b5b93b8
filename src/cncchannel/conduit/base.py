import asyncio
import logging
from abc import abstractmethod

logger = logging.getLogger(__name__)


class ConduitClosedError(IOError):
    """ A frame was written to a conduit that is no longer open. """


class Conduit:
    """
    A conduit is one full-duplex, message-oriented connection. Each frame is a complete message:
    inbound frames are read with frames(), outbound frames are queued with write().
    """

    @property
    @abstractmethod
    def target(self):
        """ describes the remote end, for logging. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open. Frames can only be written to an open conduit. """
        raise NotImplementedError

    @abstractmethod
    def write(self, frame):
        """ queues a frame for sending, without waiting for it to be sent.
            Raises ConduitClosedError when the conduit is closed. """
        raise NotImplementedError

    @abstractmethod
    def frames(self):
        """ an asynchronous iterator over inbound frames. The iteration ends when the conduit closes. """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """ stops traffic in both directions. Safe to call more than once. """
        raise NotImplementedError

    async def wait_closed(self):
        """ waits until the underlying transport has shut down. """


_HANG_UP = object()


class MemoryConduit(Conduit):
    """
    An in-process conduit. Inbound frames are supplied with feed(), the remote end closing the
    connection is simulated with hang_up(), and frames written are collected in `written`.
    """

    def __init__(self, target='memory'):
        self._target = target
        self._open = True
        self._inbox = asyncio.Queue()
        self.written = []

    @property
    def target(self):
        return self._target

    @property
    def open(self):
        return self._open

    def feed(self, *frames):
        for frame in frames:
            self._inbox.put_nowait(frame)

    def hang_up(self):
        self._inbox.put_nowait(_HANG_UP)

    def write(self, frame):
        if not self._open:
            raise ConduitClosedError("conduit %s is closed" % self._target)
        self.written.append(frame)

    async def frames(self):
        while self._open:
            frame = await self._inbox.get()
            if frame is _HANG_UP:
                break
            yield frame
        self._open = False

    def close(self):
        if self._open:
            self._open = False
            self.hang_up()
