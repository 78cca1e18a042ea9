"""Defines the session concepts handled by the store."""

from typing import Any, Dict, NamedTuple
from dataclasses import dataclass, field

DEFAULT_MAX_AGE = 86400 * 30


class SessionOptions(NamedTuple):
    """Cookie and lifetime settings applied when a session is saved."""

    path: str = '/'
    """Path attribute of the session cookie."""

    domain: str = ''
    """Domain attribute of the session cookie."""

    max_age: int = DEFAULT_MAX_AGE
    """
    Lifetime of the session in seconds.

    Zero or less means that the session should be deleted on save.
    """

    secure: bool = True
    """Whether the cookie should only be sent over HTTPS."""

    http_only: bool = True
    """Whether the cookie should be hidden from client-side scripts."""

    @property
    def deletes(self) -> bool:
        """Saving with these options deletes the session."""
        return self.max_age <= 0


class Cookie(NamedTuple):
    """An outgoing cookie directive, to be written by the HTTP layer."""

    name: str
    value: str
    path: str = '/'
    domain: str = ''
    max_age: int = -1
    secure: bool = True
    http_only: bool = True

    @classmethod
    def for_options(cls, name: str, value: str,
                    options: SessionOptions) -> 'Cookie':
        """Build a cookie that carries ``value`` with ``options``."""
        return cls(name=name, value=value, path=options.path,
                   domain=options.domain, max_age=options.max_age,
                   secure=options.secure, http_only=options.http_only)

    @classmethod
    def expired(cls, name: str, options: SessionOptions) -> 'Cookie':
        """Build a cookie that tells the client to drop the session."""
        return cls(name=name, value='', path=options.path,
                   domain=options.domain, max_age=-1,
                   secure=options.secure, http_only=options.http_only)


@dataclass
class Session:
    """
    Per-request session state.

    A session belongs to the request that created it. Callers mutate
    :attr:`values` and :attr:`options` freely and then hand the session back
    to :meth:`.RedisStore.save`. There is no locking; do not share a session
    between threads.
    """

    session_id: str
    """Unique identifier for the session."""

    name: str
    """Name of the cookie that carries the session token."""

    options: SessionOptions = field(default_factory=SessionOptions)
    """Cookie and lifetime settings used on the next save."""

    values: Dict[str, Any] = field(default_factory=dict)
    """Caller-supplied session data."""

    is_new: bool = True
    """True if no stored record was found for this request."""

    key_prefix: str = ''
    """Key namespace captured from the store when the session was created."""
