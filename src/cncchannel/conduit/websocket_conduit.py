import asyncio
import logging

from websockets.exceptions import ConnectionClosed

from cncchannel.conduit.base import Conduit, ConduitClosedError

logger = logging.getLogger(__name__)


class WebSocketConduit(Conduit):
    """
    A conduit over an established websocket connection. Outbound frames are queued and sent in
    order by a sender task, so write() never blocks the caller.
    """

    def __init__(self, ws, target=None):
        self._ws = ws
        self._target = target
        self._open = True
        self._outgoing = asyncio.Queue()
        self._sender = None
        self._closing = None

    @property
    def target(self):
        return self._target

    @property
    def open(self):
        return self._open

    def start(self):
        """ starts the sender task. Must be called from the event loop. """
        if self._sender is None:
            self._sender = asyncio.ensure_future(self._send_loop())

    async def _send_loop(self):
        while True:
            frame = await self._outgoing.get()
            try:
                await self._ws.send(frame)
            except ConnectionClosed as e:
                logger.debug("send to %s failed, connection closed: %s" % (self._target, e))
                break

    def write(self, frame):
        if not self._open:
            raise ConduitClosedError("websocket to %s is closed" % self._target)
        self._outgoing.put_nowait(frame)

    async def frames(self):
        try:
            async for frame in self._ws:
                yield frame
        except ConnectionClosed as e:
            logger.info("websocket to %s closed: %s" % (self._target, e))
        finally:
            self._open = False

    def close(self):
        self._open = False
        if self._sender is not None:
            self._sender.cancel()
            self._sender = None
        if self._closing is None:
            self._closing = asyncio.ensure_future(self._ws.close())

    async def wait_closed(self):
        if self._closing is not None:
            await self._closing
