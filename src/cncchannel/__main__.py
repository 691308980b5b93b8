import argparse
import asyncio
import logging

from cncchannel.config.config import load_channel_config
from cncchannel.connection_lifecycle import ConnectionLifecycle
from cncchannel.connector.websocketconn import WebSocketConnector
from cncchannel.monitor import ChannelMonitor
from cncchannel.services.handle import mock_handle
from cncchannel.subscription import StaticHandleSource
from cncchannel.support.retry_strategy import FixedDelayRetryStrategy

logger = logging.getLogger('cncchannel')


def parse_args(args=None):
    parser = argparse.ArgumentParser(prog='cncchannel', description='CNC controller channel monitor')
    parser.add_argument('--host', help='controller host')
    parser.add_argument('--port', type=int, help='controller websocket port')
    parser.add_argument('--path', help='websocket path')
    parser.add_argument('--retry-delay', type=float, help='seconds between reconnect attempts')
    parser.add_argument('--offline', action='store_true', help='monitor the mock handle instead of a controller')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='logging level')
    parser.add_argument('--config', help='directory holding channel.cfg files')
    return parser.parse_args(args)


def channel_config(args):
    """ loads the configuration files and applies any command line overrides. """
    config = load_channel_config(args.config)
    for name in ('host', 'port', 'path', 'retry_delay', 'log_level'):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    return config


async def monitor(config):
    connector = WebSocketConnector(config.endpoint_url(), open_timeout=config.open_timeout)
    lifecycle = ConnectionLifecycle(connector, FixedDelayRetryStrategy(config.retry_delay))
    channel_monitor = ChannelMonitor(lifecycle)
    channel_monitor.attach()
    logger.info("monitoring %s" % config.endpoint_url())
    try:
        await lifecycle.run()
    finally:
        lifecycle.stop()
        channel_monitor.detach()


def main(args=None):
    args = parse_args(args)
    config = channel_config(args)
    logging.basicConfig(level=config.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    if args.offline:
        channel_monitor = ChannelMonitor(StaticHandleSource(mock_handle()))
        channel_monitor.attach()
        channel_monitor.detach()
        return
    try:
        asyncio.run(monitor(config))
    except KeyboardInterrupt:
        logger.info("stopped")


if __name__ == '__main__':
    main()
