"""Tests for :mod:`redisstore.cli`."""

import json
import logging
from unittest import TestCase, mock

import fakeredis
from click.testing import CliRunner

from redisstore import cli
from redisstore.backend import BackendClient
from redisstore.codec import SessionCodec
from redisstore.store import RedisStore

SECRET = 'foosecret' * 4


class TestCLI(TestCase):
    """Operators can look at and remove sessions by cookie token."""

    def setUp(self):
        """Create a store holding one session."""
        self.handlers = list(logging.getLogger().handlers)
        self.redis = fakeredis.FakeRedis(server=fakeredis.FakeServer())
        self.store = RedisStore(BackendClient(self.redis), SessionCodec(SECRET),
                                key_prefix='s:')
        self.session = self.store.new(None, 'hello')
        self.session.values['username'] = 'henry'
        self.token = self.store.save(self.session).value
        self.runner = CliRunner()

    def tearDown(self):
        """Remove log handlers installed by the command."""
        logging.getLogger().handlers = self.handlers

    def test_ping(self):
        """The backend answers."""
        result = self.runner.invoke(cli.main, ['ping'], obj=self.store)
        self.assertEqual(result.exit_code, 0)
        self.assertIn('PONG', result.output)

    def test_inspect(self):
        """Stored values and the remaining TTL are shown as JSON."""
        result = self.runner.invoke(cli.main, ['inspect', self.token],
                                    obj=self.store)
        self.assertEqual(result.exit_code, 0)
        data = json.loads(result.stdout)
        self.assertEqual(data['session_id'], self.session.session_id)
        self.assertEqual(data['key'], f's:{self.session.session_id}')
        self.assertEqual(data['values'], {'username': 'henry'})
        self.assertGreater(data['ttl'], 0)

    @mock.patch.object(cli.config, 'SESSION_COOKIE_NAME', 'hello')
    def test_delete(self):
        """The session is removed and the configured cookie is cleared."""
        result = self.runner.invoke(cli.main, ['delete', self.token],
                                    obj=self.store)
        self.assertEqual(result.exit_code, 0)
        self.assertFalse(self.redis.exists(f's:{self.session.session_id}'))
        self.assertIn('clear cookie hello', result.output)

        result = self.runner.invoke(cli.main, ['inspect', self.token],
                                    obj=self.store)
        self.assertEqual(result.exit_code, 1)
        self.assertIn('No such session', result.output)

    def test_bad_token(self):
        """A token that does not verify is refused."""
        result = self.runner.invoke(cli.main, ['inspect', 'notatoken'],
                                    obj=self.store)
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Bad token', result.output)
