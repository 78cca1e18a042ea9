"""Exceptions raised by the session store."""


class ConfigurationError(RuntimeError):
    """Raised when a required parameter is missing or invalid."""


class InvalidToken(RuntimeError):
    """Raised when a cookie token cannot be decoded or verified."""


class InvalidSignature(InvalidToken):
    """The token was not signed with our secret; likely a forgery."""


class MalformedToken(InvalidToken):
    """The token is not structurally valid."""


class ExpiredToken(InvalidToken):
    """The token is past its expiry."""


class UnknownSession(RuntimeError):
    """Failed to locate a session in the session store."""


class BackendError(RuntimeError):
    """The key-value backend could not complete a request."""


class SessionCreationFailed(BackendError):
    """Failed to write a session to the session store."""


class SessionDeletionFailed(BackendError):
    """Failed to delete a session in the session store."""


class SerializationError(RuntimeError):
    """Session values could not be serialized or deserialized."""


class TokenTooLarge(SerializationError):
    """The encoded token does not fit in a cookie."""
