import asyncio
import json
import unittest
from unittest.mock import Mock, call

from hamcrest import assert_that, is_, contains_exactly, has_item

from cncchannel.__main__ import channel_config, parse_args
from cncchannel.connection_lifecycle import CONNECTED, ConnectionLifecycle
from cncchannel.connector.base import MemoryConnector
from cncchannel.monitor import ChannelMonitor, state_fetch_commands
from cncchannel.protocol.commands import GetPrograms, GetRuntimeSettings, GetSystemSettings
from cncchannel.services.handle import MockSender, mock_handle
from cncchannel.subscription import StaticHandleSource
from cncchannel.support.retry_strategy import FixedDelayRetryStrategy


class ChannelMonitorTest(unittest.TestCase):

    def test_offline_logs_canned_values(self):
        log = Mock()
        sender = MockSender()
        sut = ChannelMonitor(StaticHandleSource(mock_handle(sender)), log)
        sut.attach()
        assert_that(log.info.call_args_list, has_item(call('position x=10.1 y=-15.6 z=42.1')))
        assert_that(log.info.call_args_list, has_item(call('status manual')))
        assert_that(log.info.call_args_list, has_item(call('programs: demo.ngc')))
        log.log.assert_called_once_with(30, 'controller: testMessage')
        assert_that(sender.sent, is_(state_fetch_commands()))
        sut.detach()
        assert_that(sut.scope.bindings(), is_({}))

    def test_state_fetch_commands(self):
        assert_that(state_fetch_commands(), contains_exactly(GetPrograms(), GetSystemSettings(),
                                                             GetRuntimeSettings()))


class MonitorReconnectTest(unittest.IsolatedAsyncioTestCase):

    async def test_refetches_state_on_every_connect(self):
        connector = MemoryConnector()
        first, second = connector.add(), connector.add()
        lifecycle = ConnectionLifecycle(connector, FixedDelayRetryStrategy(0))
        sut = ChannelMonitor(lifecycle, Mock())
        sut.attach()
        task = asyncio.ensure_future(lifecycle.run())
        try:
            while len(first.written) < 3:
                await asyncio.sleep(0)
            first.hang_up()
            while len(second.written) < 3:
                await asyncio.sleep(0)
            for conduit in (first, second):
                assert_that([json.loads(frame)['action'] for frame in conduit.written],
                            is_(['get', 'getSystem', 'getRuntime']))
            assert_that(lifecycle.state, is_(CONNECTED))
        finally:
            lifecycle.stop()
            sut.detach()
            await asyncio.wait_for(task, 1)


class ArgsTest(unittest.TestCase):

    def test_overrides_config(self):
        config = channel_config(parse_args(['--host', 'cnc', '--port', '8000', '--retry-delay', '2']))
        assert_that(config.endpoint_url(), is_('ws://cnc:8000/ws'))
        assert_that(config.retry_delay, is_(2.0))

    def test_offline_flag(self):
        assert_that(parse_args(['--offline']).offline, is_(True))
        assert_that(parse_args([]).offline, is_(False))
