"""
Serialization of session values.

Values are stored as JSON. Strings, integers, floats, booleans and ``None``
round-trip unchanged, as do dicts with string keys and lists of the same.
Tuples are stored as lists. Anything else is rejected with
:class:`.SerializationError` rather than being coerced.
"""

import json
from typing import Any, Dict, Optional, Set

from .exceptions import SerializationError


class JSONSerializer(object):
    """Encode session values as compact JSON."""

    def dumps(self, values: Dict[str, Any]) -> bytes:
        """Serialize a mapping of session values."""
        if not isinstance(values, dict):
            raise SerializationError(f'Values must be a dict, not {type(values).__name__}')
        try:
            _check_keys(values)
        except RecursionError as e:
            raise SerializationError('Values are nested too deeply') from e
        try:
            return json.dumps(values, separators=(',', ':')).encode('utf-8')
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f'Cannot serialize values: {e}') from e

    def loads(self, data: bytes) -> Dict[str, Any]:
        """Deserialize a stored record."""
        try:
            values = json.loads(data)
        except (TypeError, ValueError) as e:   # Includes JSONDecodeError.
            raise SerializationError(f'Corrupted session record: {e}') from e
        if not isinstance(values, dict):
            raise SerializationError('Session record is not a JSON object')
        return values


def _check_keys(obj: Any, seen: Optional[Set[int]] = None) -> None:
    # json.dumps would quietly turn 1, True or None keys into strings.
    if not isinstance(obj, (dict, list, tuple)):
        return
    seen = set() if seen is None else seen
    if id(obj) in seen:
        raise SerializationError('Circular reference in session values')
    seen.add(id(obj))
    if isinstance(obj, dict):
        for k, v in obj.items():
            if not isinstance(k, str):
                raise SerializationError(f'Non-string key: {k!r}')
            _check_keys(v, seen)
    else:
        for item in obj:
            _check_keys(item, seen)
    seen.discard(id(obj))
