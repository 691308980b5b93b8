import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from configobj.validate import Validator

from cncchannel.connector.websocketconn import endpoint_url

# The default extension for configuration files
config_extension = '.cfg'

# the directory holding the shipped channel configuration
config_directory = os.path.dirname(__file__)


def config_flavor(name, flavor=None):
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, flavor=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The file is named after the base, followed by a
    period and then the specialization, if given, otherwise just the base name. A missing file
    gives an empty configuration.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def load_config(name, directory, home=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later ones overriding earlier ones:
        - the default specialization
        - the platform specialization
        - the user override, ~/<name>.cfg
        - the base configuration
        The merged configuration is validated against the "schema" specialization, which also
        supplies defaults for anything not set.
    :param directory: the location of the configuration files
    :param home: the directory holding the user override. Defaults to the user's home.
    """
    home = home if home is not None else os.path.expanduser('~')
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    config.merge(load_config_file_base(config_filename(name, home), must_exist=False))
    config.merge(config_flavor_file(name, directory))

    config.configspec = config_flavor_file(name, directory, 'schema')
    result = config.validate(Validator())
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the nested sections
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Applies the values in a configuration section to a target object, by setting any attributes with
    the same name. Values without a matching attribute are ignored.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)


class ChannelConfig:
    """
    Where the controller is and how the channel behaves.

    :param host: the controller's host name or address.
    :param port: the websocket port.
    :param path: the websocket path.
    :param retry_delay: seconds to wait before reconnecting.
    :param open_timeout: seconds to wait for the websocket handshake.
    :param log_level: the logging level name used by the monitor.
    """

    def __init__(self, host='localhost', port=1506, path='/ws', retry_delay=1.0, open_timeout=5.0,
                 log_level='INFO'):
        self.host = host
        self.port = port
        self.path = path
        self.retry_delay = retry_delay
        self.open_timeout = open_timeout
        self.log_level = log_level

    def endpoint_url(self):
        return endpoint_url(self.host, self.port, self.path)

    def __repr__(self):
        return "ChannelConfig(%s, retry_delay=%s)" % (self.endpoint_url(), self.retry_delay)


def load_channel_config(directory=None, home=None, name='channel') -> ChannelConfig:
    """
    Loads the [channel] section of the channel configuration files into a ChannelConfig.
    :param directory: where the configuration files are. Defaults to the files shipped with this package.
    """
    conf = load_config(name, directory or config_directory, home)
    target = ChannelConfig()
    section = fetch_conf_path(conf, ['channel'])
    if section is not None:
        apply_conf(section, target)
    return target
