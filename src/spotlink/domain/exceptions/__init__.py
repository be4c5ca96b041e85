"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so callers can inspect it without
    # parsing str(exception). Never raise this directly, always a subclass below so callers
    # can catch precisely (AuthError vs UpstreamStatusError need very different handling).
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class AuthError(DomainException):
    """Access token could not be obtained or the session could not be renewed.

    Fatal to the whole operation. Nothing in this package retries it.

    Example:
        raise AuthError("No login credentials available to create a new session")
    """

    pass


class TransportError(DomainException):
    """Network failure or timeout on a single fetch.

    Raised for catalog HTTP requests and for message-bus requests alike.
    Propagated, never retried here.
    """

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class UpstreamStatusError(DomainException):
    """Upstream answered with a non-success status code.

    Carries the status code so callers can tell 401 from 404 from 429 without
    string parsing.

    Example:
        raise UpstreamStatusError(404, "https://api.spotify.com/v1/albums/xyz")
    """

    def __init__(
        self, status_code: int, endpoint: str, message: str | None = None
    ) -> None:
        super().__init__(
            message or f"{endpoint} returned non-OK status code: {status_code}"
        )
        self.status_code = status_code
        self.endpoint = endpoint


class DecodeError(DomainException):
    """Response body did not match the expected JSON shape.

    Also used when a search for one catalog type comes back as another type.
    """

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class ConversionError(DomainException):
    """An upstream record could not be projected into a domain record.

    Expected to happen (local files, unavailable tracks, records without id).
    Always caught by the ``try_*`` helpers and turned into a dropped item.
    """

    pass


class ValidationError(DomainException):
    """Input validation failed (malformed id, bad argument).

    Example:
        raise ValidationError("Invalid track id: 'abc'")
    """

    pass


class ConfigurationError(DomainException):
    """Settings are missing or invalid.

    Example:
        raise ConfigurationError("client_id must not be empty")
    """

    pass


__all__ = [
    "DomainException",
    "AuthError",
    "TransportError",
    "UpstreamStatusError",
    "DecodeError",
    "ConversionError",
    "ValidationError",
    "ConfigurationError",
]
