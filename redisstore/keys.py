"""Session identifiers and the keys under which sessions are stored."""

import secrets
from base64 import b32encode

ID_BYTES = 32


def generate_session_id() -> str:
    """Generate an unguessable session ID (256 random bits, base32)."""
    return b32encode(secrets.token_bytes(ID_BYTES)).decode('ascii').rstrip('=')


def key(prefix: str, session_id: str) -> str:
    """
    Get the backend key for a session.

    Unique IDs under a fixed prefix map to unique keys. Records written under
    an old prefix are not moved when the prefix changes; they expire on their
    own TTL.
    """
    return prefix + session_id
