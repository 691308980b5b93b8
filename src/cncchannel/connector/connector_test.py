import unittest
from unittest.mock import AsyncMock

from hamcrest import assert_that, is_, instance_of

from cncchannel.conduit.base import MemoryConduit
from cncchannel.conduit.websocket_conduit import WebSocketConduit
from cncchannel.connector.base import ConnectionNotAvailableError, ConnectorError, MemoryConnector
from cncchannel.connector.websocketconn import WebSocketConnector, endpoint_url


class EndpointUrlTest(unittest.TestCase):

    def test_defaults(self):
        assert_that(endpoint_url('localhost'), is_('ws://localhost:1506/ws'))

    def test_path_is_host_relative(self):
        assert_that(endpoint_url('cnc', 80, 'socket'), is_('ws://cnc:80/socket'))


class MemoryConnectorTest(unittest.IsolatedAsyncioTestCase):

    async def test_hands_out_conduits_in_order(self):
        first, second = MemoryConduit(), MemoryConduit()
        sut = MemoryConnector(first)
        sut.add(second)
        assert_that(await sut.connect(), is_(first))
        assert_that(await sut.connect(), is_(second))
        assert_that(sut.attempts, is_(2))

    async def test_refuses_when_exhausted(self):
        sut = MemoryConnector(endpoint='bench')
        with self.assertRaises(ConnectionNotAvailableError):
            await sut.connect()
        assert_that(issubclass(ConnectionNotAvailableError, ConnectorError), is_(True))

    def test_add_creates_conduit(self):
        sut = MemoryConnector(endpoint='bench')
        assert_that(sut.add().target, is_('bench'))
        assert_that(sut.endpoint, is_('bench'))


class WebSocketConnectorTest(unittest.IsolatedAsyncioTestCase):

    async def test_connect_wraps_websocket(self):
        ws = AsyncMock()
        connect = AsyncMock(return_value=ws)
        sut = WebSocketConnector('ws://cnc:1506/ws', open_timeout=2, connect=connect)
        conduit = await sut.connect()
        assert_that(conduit, is_(instance_of(WebSocketConduit)))
        assert_that(conduit.target, is_('ws://cnc:1506/ws'))
        connect.assert_awaited_once_with('ws://cnc:1506/ws', open_timeout=2)
        conduit.close()
        await conduit.wait_closed()
        ws.close.assert_awaited_once()

    async def test_refused_connection_raises_connector_error(self):
        connect = AsyncMock(side_effect=ConnectionRefusedError("refused"))
        sut = WebSocketConnector('ws://cnc:1506/ws', connect=connect, report_errors=True)
        with self.assertRaises(ConnectorError):
            await sut.connect()

    def test_endpoint(self):
        assert_that(WebSocketConnector('ws://x/ws').endpoint, is_('ws://x/ws'))
