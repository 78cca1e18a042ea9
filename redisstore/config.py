"""Default configuration, read from the environment."""

import os
import secrets

#################### Backend ####################
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_TOKEN = os.environ.get('REDIS_TOKEN', None)
"""This is the token used in the AUTH procedure."""

REDIS_CLUSTER = os.environ.get('REDIS_CLUSTER', '0')
"""If 1, expects a redis cluster; otherwise expects a single redis node."""

REDIS_NODES = os.environ.get('REDIS_NODES', '')
"""
Comma-delimited ``host:port`` startup nodes for a cluster.

If empty, ``REDIS_HOST`` and ``REDIS_PORT`` are used as the only startup node.
"""

REDIS_FAKE = os.environ.get('REDIS_FAKE', False)
"""Use the FakeRedis library instead of a redis service.

Useful for testing and dev."""

REDIS_MAX_CONNECTIONS = os.environ.get('REDIS_MAX_CONNECTIONS', '50')
REDIS_POOL_TIMEOUT = os.environ.get('REDIS_POOL_TIMEOUT', '5')
"""Seconds to wait for a free pooled connection."""

REDIS_SOCKET_TIMEOUT = os.environ.get('REDIS_SOCKET_TIMEOUT', '5')
REDIS_RETRIES = os.environ.get('REDIS_RETRIES', '3')
"""Number of retries for transient backend errors, e.g. a moved slot."""

#################### Tokens ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(32))
"""Secret used to sign session tokens. Set this for more than one process!"""

SESSION_MAX_TOKEN_AGE = os.environ.get('SESSION_MAX_TOKEN_AGE', '')
"""If set, tokens issued more than this many seconds ago are refused."""

#################### Sessions ####################
SESSION_KEY_PREFIX = os.environ.get('SESSION_KEY_PREFIX', 'session:')
SESSION_DURATION = os.environ.get('SESSION_DURATION', str(86400 * 30))
"""Default session lifetime in seconds."""

SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME', 'session')
SESSION_COOKIE_PATH = os.environ.get('SESSION_COOKIE_PATH', '/')
SESSION_COOKIE_DOMAIN = os.environ.get('SESSION_COOKIE_DOMAIN', '')
SESSION_COOKIE_SECURE = \
    bool(int(os.environ.get('SESSION_COOKIE_SECURE', '1')))
SESSION_COOKIE_HTTPONLY = \
    bool(int(os.environ.get('SESSION_COOKIE_HTTPONLY', '1')))

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
