"""
Access to the key-value backend holding session records.

:class:`BackendClient` exposes the four operations the session store needs
(``GET``, ``SET ... EX``, ``DEL``, ``EXISTS``) in the same way whether it
talks to a single Redis node or to a Redis Cluster. Routing of keys to cluster
shards is left to :class:`redis.cluster.RedisCluster`; transient failures
(lost connections, moved slots, a cluster that is failing over) are retried
here a bounded number of times before being raised as
:class:`.BackendError`.

The redis-py clients are thread safe, and connections are attached at the
time a command is executed, so one :class:`BackendClient` may be shared by
every request in the process.
"""

import logging
import time
from typing import Any, Callable, Iterable, Optional, Tuple

import redis
from redis import exceptions as rexc
from redis.cluster import ClusterNode, RedisCluster

from .exceptions import BackendError, UnknownSession

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    rexc.ConnectionError,
    rexc.TimeoutError,
    rexc.ClusterDownError,
    rexc.TryAgainError,
    rexc.AskError,      # Includes MovedError.
    rexc.ClusterError,
)


class BackendClient(object):
    """
    Uniform interface to a Redis node or cluster.

    Parameters
    ----------
    client : :class:`redis.Redis` or :class:`redis.cluster.RedisCluster`
        Anything that implements the redis-py command API.
    retries : int
        Number of times a transient failure is retried.
    retry_delay : float
        Seconds to wait before the first retry; grows linearly.

    """

    def __init__(self, client: Any, retries: int = 3,
                 retry_delay: float = 0.05) -> None:
        self.r = client
        self.retries = retries
        self.retry_delay = retry_delay

    @classmethod
    def single(cls, host: str = 'localhost', port: int = 6379, db: int = 0,
               password: Optional[str] = None, max_connections: int = 50,
               pool_timeout: float = 5.0, socket_timeout: float = 5.0,
               retries: int = 3) -> 'BackendClient':
        """
        Connect to a single Redis node.

        Connections come from a :class:`redis.BlockingConnectionPool`, so a
        request waits at most ``pool_timeout`` seconds for a free connection.
        """
        logger.debug('New Redis connection at %s, port %s', host, port)
        pool = redis.BlockingConnectionPool(
            host=host, port=port, db=db, password=password,
            max_connections=max_connections, timeout=pool_timeout,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout
        )
        return cls(redis.Redis(connection_pool=pool), retries=retries)

    @classmethod
    def cluster(cls, startup_nodes: Iterable[Tuple[str, int]],
                password: Optional[str] = None, max_connections: int = 50,
                socket_timeout: float = 5.0,
                retries: int = 3) -> 'BackendClient':
        """Connect to a Redis Cluster through any of its nodes."""
        nodes = [ClusterNode(host, int(port)) for host, port in startup_nodes]
        logger.debug('New Redis cluster connection via %s', nodes)
        client = RedisCluster(
            startup_nodes=nodes, password=password,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            require_full_coverage=False
        )
        return cls(client, retries=retries)

    def get(self, key: str) -> bytes:
        """
        Get the record stored at ``key``.

        Raises
        ------
        :class:`.UnknownSession`
            If there is no such key, or it has expired.
        :class:`.BackendError`

        """
        data: Optional[bytes] = self._call('GET', self.r.get, key)
        if data is None:
            raise UnknownSession(f'Failed to find {key}')
        return data

    def set_with_ttl(self, key: str, value: bytes, ttl: int,
                     persist: bool = False) -> None:
        """
        Store ``value`` at ``key``, expiring after ``ttl`` seconds.

        A non-positive ``ttl`` stores the value without expiry, but only if
        ``persist`` is set; otherwise it is refused.
        """
        if ttl > 0:
            self._call('SET', self.r.set, key, value, ex=ttl)
        elif persist:
            self._call('SET', self.r.set, key, value)
        else:
            raise ValueError(f'Refusing to store {key} without expiry')

    def delete(self, key: str) -> None:
        """Delete ``key``; deleting a missing key is not an error."""
        self._call('DEL', self.r.delete, key)

    def exists(self, key: str) -> bool:
        """Check whether ``key`` is present."""
        return bool(self._call('EXISTS', self.r.exists, key))

    def ttl(self, key: str) -> int:
        """Remaining lifetime of ``key``, in seconds (negative if none)."""
        return int(self._call('TTL', self.r.ttl, key))

    def ping(self) -> bool:
        """Check that the backend is reachable."""
        return bool(self._call('PING', self.r.ping))

    def close(self) -> None:
        """Release pooled connections."""
        self.r.close()

    def _call(self, name: str, command: Callable, *args: Any,
              **kwargs: Any) -> Any:
        attempt = 0
        while True:
            try:
                return command(*args, **kwargs)
            except TRANSIENT_ERRORS as e:
                attempt += 1
                if attempt > self.retries:
                    logger.error('%s failed after %i attempts: %s',
                                 name, attempt, e)
                    raise BackendError(f'{name} failed: {e}') from e
                logger.warning('%s failed (attempt %i), retrying: %s',
                               name, attempt, e)
                time.sleep(self.retry_delay * attempt)
            except rexc.RedisError as e:
                raise BackendError(f'{name} failed: {e}') from e
