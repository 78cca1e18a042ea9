"""
Server-side sessions in Redis.

Session values are kept in Redis (a single node or a cluster) under a
namespaced key that expires with the session. The client holds only a signed
token with the session ID, exchanged through a cookie.

.. code-block:: python

   from redisstore import BackendClient, RedisStore, SessionCodec

   store = RedisStore(BackendClient.single('localhost', 6379),
                      SessionCodec('foosecret'), key_prefix='s:')
   session = store.new(request.cookies.get('hello'), 'hello')
   session.values['username'] = 'henry'
   cookie = store.save(session)    # Set this on the response.

See :mod:`.store`.
"""

from .backend import BackendClient
from .codec import SessionCodec
from .domain import Cookie, Session, SessionOptions
from .exceptions import BackendError, ConfigurationError, ExpiredToken, \
    InvalidSignature, InvalidToken, MalformedToken, SerializationError, \
    SessionCreationFailed, SessionDeletionFailed, TokenTooLarge, \
    UnknownSession
from .keys import generate_session_id, key
from .serializers import JSONSerializer
from .store import RedisStore, from_config, init_config

__all__ = (
    'BackendClient', 'SessionCodec', 'Cookie', 'Session', 'SessionOptions',
    'BackendError', 'ConfigurationError', 'ExpiredToken', 'InvalidSignature',
    'InvalidToken', 'MalformedToken', 'SerializationError',
    'SessionCreationFailed', 'SessionDeletionFailed', 'TokenTooLarge',
    'UnknownSession', 'generate_session_id', 'key', 'JSONSerializer',
    'RedisStore', 'from_config', 'init_config',
)
