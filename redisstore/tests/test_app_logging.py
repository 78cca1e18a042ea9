"""Tests for :mod:`redisstore.app_logging`."""

import importlib
import io
import json
import logging
import warnings
from unittest import TestCase, mock

from redisstore import app_logging


class TestSetupLogger(TestCase):
    """Log records are written as JSON."""

    def setUp(self):
        """Remember the root logger's state."""
        self.root = logging.getLogger()
        self.handlers = list(self.root.handlers)
        self.level = self.root.level

    def tearDown(self):
        """Restore the root logger."""
        self.root.handlers = self.handlers
        self.root.setLevel(self.level)

    @mock.patch('sys.stderr', new_callable=io.StringIO)
    def test_json_records(self, mock_stderr):
        """Records carry renamed level and timestamp fields."""
        app_logging.setup_logger('DEBUG')
        logging.getLogger('redisstore.store').warning('Could not load session')

        record = json.loads(mock_stderr.getvalue().strip().splitlines()[-1])
        self.assertEqual(record['level'], 'WARNING')
        self.assertEqual(record['name'], 'redisstore.store')
        self.assertEqual(record['message'], 'Could not load session')
        self.assertIn('timestamp', record)
        self.assertEqual(self.root.level, logging.DEBUG)

    def test_no_deprecated_formatter(self):
        """The formatter comes from the current python-json-logger module."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            importlib.reload(app_logging)
        self.assertEqual(
            [w for w in caught if issubclass(w.category, DeprecationWarning)],
            []
        )
        self.assertEqual(app_logging.JsonFormatter.__module__,
                         'pythonjsonlogger.json')
