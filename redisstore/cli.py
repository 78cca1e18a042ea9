"""
Command-line tools for operating a session store.

Settings are read from the environment (see :mod:`redisstore.config`).

.. code-block:: bash

   $ JWT_SECRET=foosecret REDIS_PORT=7000 REDIS_CLUSTER=1 redisstore ping
   PONG
   $ JWT_SECRET=foosecret redisstore inspect eyJ0eXAiOiJKV1Qi...
   {
     "session_id": "B2J6...",
     "key": "session:B2J6...",
     "ttl": 298,
     "values": {"username": "henry"}
   }

"""

import json

import click

from . import config
from .app_logging import setup_logger
from .domain import Session
from .exceptions import BackendError, InvalidToken, SerializationError, \
    UnknownSession
from .keys import key
from .store import RedisStore, from_config


@click.group()
@click.option('--loglevel', default=config.LOGLEVEL, show_default=True)
@click.pass_context
def main(ctx: click.Context, loglevel: str) -> None:
    """Inspect and manage stored sessions."""
    setup_logger(loglevel.upper())
    if ctx.obj is None:
        ctx.obj = from_config()


@main.command()
@click.pass_obj
def ping(store: RedisStore) -> None:
    """Check that the backend is reachable."""
    try:
        store.backend.ping()
    except BackendError as e:
        raise click.ClickException(f'Backend unreachable: {e}') from e
    click.echo('PONG')


@main.command()
@click.argument('token')
@click.pass_obj
def inspect(store: RedisStore, token: str) -> None:
    """Show the stored values for a session cookie TOKEN."""
    session_id = _session_id(store, token)
    session_key = key(store.key_prefix, session_id)
    try:
        values = store.serializer.loads(store.backend.get(session_key))
        ttl = store.backend.ttl(session_key)
    except UnknownSession as e:
        raise click.ClickException(f'No such session: {session_id}') from e
    except (BackendError, SerializationError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps({'session_id': session_id, 'key': session_key,
                           'ttl': ttl, 'values': values}, indent=2))


@main.command()
@click.argument('token')
@click.pass_obj
def delete(store: RedisStore, token: str) -> None:
    """Delete the session for a session cookie TOKEN."""
    session_id = _session_id(store, token)
    session = Session(session_id=session_id, name=config.SESSION_COOKIE_NAME,
                      options=store.options._replace(max_age=-1),
                      is_new=False, key_prefix=store.key_prefix)
    try:
        cookie = store.save(session)
    except BackendError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'Deleted {session_id}; clear cookie {cookie.name}')


def _session_id(store: RedisStore, token: str) -> str:
    try:
        session_id, _ = store.codec.decode(token)
    except InvalidToken as e:
        raise click.ClickException(f'Bad token: {e}') from e
    return session_id
