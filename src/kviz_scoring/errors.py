"""
Exceptions raised by the API client layer.

The scoring core never raises; these cover talking to the Kviz API.
"""


class KvizError(Exception):
    """Base exception for kviz-scoring errors."""
    pass


class KvizApiError(KvizError):
    """The Kviz API returned an error or could not be reached."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(KvizApiError):
    """Token missing, expired or lacking the required role."""
    pass


class NotFoundError(KvizApiError):
    """Requested resource does not exist."""
    pass
