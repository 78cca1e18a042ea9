"""
Encoding and decoding of the session token carried in the cookie.

The token is a JSON web token signed with HS256. It carries the session ID
(``sid``), the time it was issued (``iat``) and, when the session has a
positive lifetime, an expiry (``exp``) so that a copied cookie cannot outlive
the lifetime it was issued with. In the cookie-value variant the session
values are embedded as well (``val``); the server-side store only puts the ID
in the token.

PyJWT compares signatures with :func:`hmac.compare_digest`.
"""

import time
from typing import Any, Dict, Optional, Tuple

import jwt

from .exceptions import ConfigurationError, ExpiredToken, InvalidSignature, \
    MalformedToken, SerializationError, TokenTooLarge

MAX_TOKEN_LENGTH = 4096
"""Browsers only guarantee 4096 bytes per cookie."""

ALGORITHM = 'HS256'


class SessionCodec(object):
    """Signs and verifies session tokens with a process-wide secret."""

    def __init__(self, secret: str, max_token_age: Optional[int] = None,
                 max_length: int = MAX_TOKEN_LENGTH) -> None:
        if not secret:
            raise ConfigurationError('A signing secret is required')
        self._secret = secret
        self.max_token_age = max_token_age
        self.max_length = max_length

    def encode(self, session_id: str, values: Optional[Dict[str, Any]] = None,
               max_age: Optional[int] = None) -> str:
        """
        Generate a signed token for a session.

        Parameters
        ----------
        session_id : str
        values : dict
            Embedded in the token only when given.
        max_age : int
            Lifetime of the token in seconds. If positive, the token expires
            after this many seconds.

        Returns
        -------
        str

        Raises
        ------
        :class:`.SerializationError`
            If ``values`` is not JSON-serializable.
        :class:`.TokenTooLarge`
            If the token would not fit in a cookie.

        """
        issued_at = int(time.time())
        claims: Dict[str, Any] = {'sid': session_id, 'iat': issued_at}
        if max_age is not None and max_age > 0:
            claims['exp'] = issued_at + max_age
        if values is not None:
            claims['val'] = values
        try:
            token: str = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        except (TypeError, ValueError) as e:
            raise SerializationError(f'Cannot encode token: {e}') from e
        if len(token) > self.max_length:
            raise TokenTooLarge(f'Token is {len(token)} bytes; the limit is'
                                f' {self.max_length}')
        return token

    def decode(self, token: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        """
        Verify a token and extract the session ID (and values, if any).

        Raises
        ------
        :class:`.InvalidSignature`
        :class:`.MalformedToken`
        :class:`.ExpiredToken`

        """
        if not token or not isinstance(token, str):
            raise MalformedToken('Empty token')
        if len(token) > self.max_length:
            raise MalformedToken('Token is too long')
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.exceptions.ExpiredSignatureError as e:
            raise ExpiredToken('Token has expired') from e
        except jwt.exceptions.InvalidSignatureError as e:
            raise InvalidSignature('Invalid token; likely a forgery') from e
        except jwt.exceptions.InvalidTokenError as e:
            raise MalformedToken(f'Token is malformed: {e}') from e

        session_id = claims.get('sid')
        if not session_id or not isinstance(session_id, str):
            raise MalformedToken('Token payload malformed')
        if self.max_token_age is not None:
            issued_at = claims.get('iat')
            if not isinstance(issued_at, int):
                raise MalformedToken('Token has no issue time')
            if time.time() - issued_at > self.max_token_age:
                raise ExpiredToken('Token is older than the maximum age')

        values = claims.get('val')
        if values is not None and not isinstance(values, dict):
            raise MalformedToken('Token values are not a mapping')
        return session_id, values
