import logging
from abc import abstractmethod

from cncchannel.conduit.base import Conduit, MemoryConduit

logger = logging.getLogger(__name__)


class ConnectorError(Exception):
    """ Indicates an error condition with a connection. """


class ConnectionNotAvailableError(ConnectorError):
    """ Indicates the endpoint could not be reached. """


class Connector:
    """ A connector describes an endpoint to which a conduit can be established. """

    @property
    @abstractmethod
    def endpoint(self):
        """ the endpoint that this connector reaches out to """
        raise NotImplementedError

    @abstractmethod
    async def connect(self) -> Conduit:
        """
        Opens a new conduit to the endpoint.
        Raises ConnectorError if the connection cannot be established.
        """
        raise NotImplementedError


class MemoryConnector(Connector):
    """
    Hands out in-process conduits, one per connect() call. When the supplied conduits are used
    up, connecting fails as if the endpoint was down.
    """

    def __init__(self, *conduits, endpoint='memory'):
        self._conduits = list(conduits)
        self._endpoint = endpoint
        self.attempts = 0

    @property
    def endpoint(self):
        return self._endpoint

    def add(self, conduit: MemoryConduit=None):
        conduit = conduit or MemoryConduit(self._endpoint)
        self._conduits.append(conduit)
        return conduit

    async def connect(self) -> Conduit:
        self.attempts += 1
        if not self._conduits:
            raise ConnectionNotAvailableError("nothing listening on %s" % self._endpoint)
        return self._conduits.pop(0)
