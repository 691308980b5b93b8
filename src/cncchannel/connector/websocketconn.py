import asyncio
import logging

import websockets
from websockets.exceptions import WebSocketException

from cncchannel.conduit.base import Conduit
from cncchannel.conduit.websocket_conduit import WebSocketConduit
from cncchannel.connector.base import ConnectionNotAvailableError, Connector

logger = logging.getLogger(__name__)

DEFAULT_PORT = 1506
DEFAULT_PATH = '/ws'


def endpoint_url(host, port=DEFAULT_PORT, path=DEFAULT_PATH):
    """
    >>> endpoint_url('cnc.local')
    'ws://cnc.local:1506/ws'
    >>> endpoint_url('10.0.0.2', 8000, 'ws')
    'ws://10.0.0.2:8000/ws'
    """
    if not path.startswith('/'):
        path = '/' + path
    return "ws://%s:%s%s" % (host, port, path)


class WebSocketConnector(Connector):
    """
    A connector to the controller's websocket endpoint.

    :param url: the websocket url, see endpoint_url().
    :param open_timeout: seconds to wait for the opening handshake.
    :param connect: the websocket client factory.
    """

    def __init__(self, url, open_timeout=5, connect=websockets.connect, report_errors=False):
        self.url = url
        self.open_timeout = open_timeout
        self._connect = connect
        self._report_errors = report_errors

    @property
    def endpoint(self):
        return self.url

    async def connect(self) -> Conduit:
        try:
            ws = await self._connect(self.url, open_timeout=self.open_timeout)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            method = logger.warning if self._report_errors else logger.debug
            method("error opening websocket to %s: %s" % (self.url, e))
            raise ConnectionNotAvailableError("unable to connect to %s" % self.url) from e
        logger.info("opened websocket to %s" % self.url)
        conduit = WebSocketConduit(ws, self.url)
        conduit.start()
        return conduit
