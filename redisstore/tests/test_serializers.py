"""Tests for :mod:`redisstore.serializers`."""

from datetime import datetime
from unittest import TestCase

from redisstore.exceptions import SerializationError
from redisstore.serializers import JSONSerializer


class TestJSONSerializer(TestCase):
    """Session values are stored as JSON."""

    def setUp(self):
        """Create a serializer."""
        self.serializer = JSONSerializer()

    def test_round_trip(self):
        """Scalars and nested containers come back unchanged."""
        values = {
            'username': 'henry',
            'visits': 42,
            'ratio': 0.25,
            'admin': False,
            'nothing': None,
            'prefs': {'theme': 'dark', 'sizes': [1, 2.5, True, {'x': 'y'}]},
        }
        data = self.serializer.dumps(values)
        self.assertIsInstance(data, bytes)
        self.assertEqual(self.serializer.loads(data), values)

    def test_tuple(self):
        """Tuples are stored as lists."""
        data = self.serializer.dumps({'pair': (1, 2)})
        self.assertEqual(self.serializer.loads(data), {'pair': [1, 2]})

    def test_unserializable(self):
        """Values that JSON can't represent are refused."""
        with self.assertRaises(SerializationError):
            self.serializer.dumps({'when': datetime.now()})

    def test_non_string_keys(self):
        """Keys are not quietly converted to strings."""
        with self.assertRaises(SerializationError):
            self.serializer.dumps({'nested': {1: 'one'}})
        with self.assertRaises(SerializationError):
            self.serializer.dumps({'items': [{None: 'x'}]})

    def test_not_a_dict(self):
        """Only mappings are session values."""
        with self.assertRaises(SerializationError):
            self.serializer.dumps(['a', 'b'])

    def test_corrupted_record(self):
        """Garbage in the backend is a :class:`.SerializationError`."""
        with self.assertRaises(SerializationError):
            self.serializer.loads(b'{"username": ')
        with self.assertRaises(SerializationError):
            self.serializer.loads(b'\xff\xfe')
        with self.assertRaises(SerializationError):
            self.serializer.loads(b'[1, 2]')

    def test_circular(self):
        """Values that contain themselves are a :class:`.SerializationError`."""
        loop = {}
        loop['self'] = loop
        with self.assertRaises(SerializationError):
            self.serializer.dumps({'loop': loop})

        items = []
        items.append(items)
        with self.assertRaises(SerializationError):
            self.serializer.dumps({'items': items})

    def test_shared_reference(self):
        """The same container may appear more than once."""
        shared = ['a', 'b']
        data = self.serializer.dumps({'one': shared, 'two': [shared]})
        self.assertEqual(self.serializer.loads(data),
                         {'one': ['a', 'b'], 'two': [['a', 'b']]})
