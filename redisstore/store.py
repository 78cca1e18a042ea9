"""
Server-side session store.

Session values live in a key-value backend under ``key_prefix + session_id``
and expire with the session's ``max_age``. The client only holds a signed
token carrying the session ID (see :mod:`.codec`).

Loading never fails a request: a missing, forged or expired token, a record
that has expired, or a backend outage all produce a fresh, empty session.
Saving does fail loudly, since a failed save means that state was lost.

Changes to :attr:`RedisStore.key_prefix` and :attr:`RedisStore.options` apply
to sessions created afterwards. Sessions already handed out keep the prefix
and options they were created with, and records written under an old prefix
are left to expire.
"""

import logging
from typing import Any, Callable, Mapping, MutableMapping, Optional, Tuple, \
    List

from . import config as default_config
from .backend import BackendClient
from .codec import SessionCodec
from .domain import Cookie, Session, SessionOptions
from .exceptions import BackendError, ConfigurationError, InvalidToken, \
    SerializationError, SessionCreationFailed, SessionDeletionFailed, \
    UnknownSession
from .keys import generate_session_id, key
from .serializers import JSONSerializer

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


class RedisStore(object):
    """
    Creates, loads and saves sessions.

    Parameters
    ----------
    backend : :class:`.BackendClient`
    codec : :class:`.SessionCodec`
    key_prefix : str
        Namespace for the keys of new sessions.
    options : :class:`.SessionOptions`
        Default options given to new sessions.
    serializer : :class:`.JSONSerializer`
        Anything with ``dumps(dict) -> bytes`` and ``loads(bytes) -> dict``.
    key_generator : callable
        Produces new session IDs.

    """

    def __init__(self, backend: BackendClient, codec: SessionCodec,
                 key_prefix: str = 'session:',
                 options: Optional[SessionOptions] = None,
                 serializer: Optional[JSONSerializer] = None,
                 key_generator: Callable[[], str] = generate_session_id) \
            -> None:
        self.backend = backend
        self.codec = codec
        self.key_prefix = key_prefix
        self.options = options if options is not None else SessionOptions()
        self.serializer = serializer if serializer is not None \
            else JSONSerializer()
        self.key_generator = key_generator

    def new(self, cookie_token: Optional[str], name: str) -> Session:
        """
        Get the session for a request.

        Parameters
        ----------
        cookie_token : str or None
            Value of the session cookie on the request, if any.
        name : str
            Name of the session cookie.

        Returns
        -------
        :class:`.Session`
            With ``is_new=False`` and the stored values if the token is valid
            and its record still exists; otherwise a new, empty session.

        """
        backend_ok = True
        if cookie_token:
            try:
                session_id, _ = self.codec.decode(cookie_token)
                session = Session(session_id=session_id, name=name,
                                  options=self.options, is_new=False,
                                  key_prefix=self.key_prefix)
                self.load(session, missing_ok=False)
                return session
            except InvalidToken as e:
                logger.info('Session token rejected: %s', e)
            except UnknownSession as e:
                logger.info('Session not found: %s', e)
            except SerializationError as e:
                logger.warning('Discarding unreadable session: %s', e)
            except BackendError as e:
                logger.warning('Could not load session: %s', e)
                backend_ok = False

        session_id = self._generate_id(self.key_prefix, check=backend_ok)
        return Session(session_id=session_id, name=name,
                       options=self.options, is_new=True,
                       key_prefix=self.key_prefix)

    def load(self, session: Session, missing_ok: bool = True) -> bool:
        """
        Read the stored values of ``session`` from the backend.

        Returns ``False`` (leaving the values untouched) if there is no stored
        record and ``missing_ok`` is set; otherwise raises
        :class:`.UnknownSession`.
        """
        try:
            data = self.backend.get(key(session.key_prefix, session.session_id))
        except UnknownSession:
            if missing_ok:
                return False
            raise
        session.values = self.serializer.loads(data)
        return True

    def save(self, session: Session) -> Cookie:
        """
        Persist or delete a session, according to its ``max_age``.

        May be called more than once; each call looks at the options as they
        are at that moment.

        Returns
        -------
        :class:`.Cookie`
            The cookie to set on the response. When the session was deleted,
            this is an empty cookie that expires immediately.

        Raises
        ------
        :class:`.SerializationError`
            If the values cannot be serialized, or the token would not fit
            in a cookie (:class:`.TokenTooLarge`). Nothing is written.
        :class:`.SessionCreationFailed`
            If the values could not be written.
        :class:`.SessionDeletionFailed`
            If the record could not be deleted.

        """
        options = session.options
        session_key = key(session.key_prefix, session.session_id)
        if options.deletes:
            try:
                self.backend.delete(session_key)
            except BackendError as e:
                logger.error('Failed to delete session %s', session.session_id)
                raise SessionDeletionFailed(f'Failed to delete: {e}') from e
            return Cookie.expired(session.name, options)

        data = self.serializer.dumps(session.values)
        # Nothing is written unless the client can be given a token for it.
        token = self.codec.encode(session.session_id, max_age=options.max_age)
        try:
            self.backend.set_with_ttl(session_key, data, options.max_age)
        except BackendError as e:
            logger.error('Failed to save session %s', session.session_id)
            raise SessionCreationFailed(f'Failed to save: {e}') from e
        return Cookie.for_options(session.name, token, options)

    def close(self) -> None:
        """Release the backend connections."""
        self.backend.close()

    def _generate_id(self, prefix: str, check: bool = True) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            session_id = self.key_generator()
            if not check:
                return session_id
            try:
                if not self.backend.exists(key(prefix, session_id)):
                    return session_id
            except BackendError as e:
                logger.warning('Could not check new session ID: %s', e)
                return session_id
            logger.error('Generated session ID is already in use')
        raise ConfigurationError('Key generator keeps producing IDs in use')


def _flag(value: Any) -> bool:
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _nodes(config: Mapping[str, Any]) -> List[Tuple[str, int]]:
    nodes = []
    for node in filter(None, str(config.get('REDIS_NODES') or '').split(',')):
        host, _, port = node.strip().rpartition(':')
        nodes.append((host, int(port)))
    if not nodes:
        nodes.append((config['REDIS_HOST'], int(config['REDIS_PORT'])))
    return nodes


def init_config(config: MutableMapping[str, Any]) -> None:
    """Set default configuration parameters on ``config``."""
    for name in dir(default_config):
        if name.isupper():
            config.setdefault(name, getattr(default_config, name))


def get_backend(config: Mapping[str, Any]) -> BackendClient:
    """Get a :class:`.BackendClient` as described by ``config``."""
    retries = int(config['REDIS_RETRIES'])
    if _flag(config.get('REDIS_FAKE')):
        import fakeredis
        logger.info('Using fake redis backend')
        return BackendClient(fakeredis.FakeRedis(), retries=retries)
    if _flag(config['REDIS_CLUSTER']):
        return BackendClient.cluster(
            _nodes(config),
            password=config.get('REDIS_TOKEN'),
            max_connections=int(config['REDIS_MAX_CONNECTIONS']),
            socket_timeout=float(config['REDIS_SOCKET_TIMEOUT']),
            retries=retries
        )
    return BackendClient.single(
        host=config['REDIS_HOST'],
        port=int(config['REDIS_PORT']),
        db=int(config['REDIS_DATABASE']),
        password=config.get('REDIS_TOKEN'),
        max_connections=int(config['REDIS_MAX_CONNECTIONS']),
        pool_timeout=float(config['REDIS_POOL_TIMEOUT']),
        socket_timeout=float(config['REDIS_SOCKET_TIMEOUT']),
        retries=retries
    )


def from_config(config: Optional[Mapping[str, Any]] = None) -> RedisStore:
    """
    Build a :class:`.RedisStore` from configuration.

    ``config`` is a mapping of upper-case settings, like a Flask app config;
    anything missing is taken from :mod:`redisstore.config`.
    """
    settings: MutableMapping[str, Any] = dict(config or {})
    init_config(settings)
    try:
        backend = get_backend(settings)
        max_token_age = settings['SESSION_MAX_TOKEN_AGE']
        codec = SessionCodec(
            settings['JWT_SECRET'],
            max_token_age=int(max_token_age) if max_token_age else None
        )
        options = SessionOptions(
            path=settings['SESSION_COOKIE_PATH'],
            domain=settings['SESSION_COOKIE_DOMAIN'],
            max_age=int(settings['SESSION_DURATION']),
            secure=_flag(settings['SESSION_COOKIE_SECURE']),
            http_only=_flag(settings['SESSION_COOKIE_HTTPONLY'])
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f'Bad session configuration: {e}') from e
    return RedisStore(backend, codec,
                      key_prefix=settings['SESSION_KEY_PREFIX'],
                      options=options)
