"""Domain ports (interfaces) for dependency inversion.

Hey future me - the streaming session is an EXTERNAL collaborator. We never speak its
wire protocol; whoever embeds spotlink provides an ISessionFactory that knows how to
log in and hands back ISession objects. Keep these interfaces narrow: token, validity,
keyed message-bus GET. That's all the core is allowed to need.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """Username/password pair used to open a session."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class SessionConfig:
    """Connection options for the session handshake."""

    proxy: str | None = None
    ap_port: int | None = None


@dataclass(frozen=True)
class AccessToken:
    """Bearer token issued by the session's token provider."""

    access_token: str
    expires_in: int = 3600
    token_type: str = "Bearer"
    scopes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MercuryResponse:
    """Response of a message-bus GET: status code plus raw payload blocks."""

    status_code: int
    payload: list[bytes] = field(default_factory=list)


class ISession(ABC):
    """An authenticated streaming session."""

    @abstractmethod
    def is_invalid(self) -> bool:
        """True once the session has been dropped by the server."""
        pass

    @abstractmethod
    async def get_token(self, client_id: str, scopes: str) -> AccessToken:
        """Request a Web API access token for the given client id and scopes."""
        pass

    @abstractmethod
    async def mercury_get(self, uri: str) -> MercuryResponse:
        """Keyed request/response over the session's message bus."""
        pass


class ISessionFactory(ABC):
    """Creates new sessions (the credential exchange lives behind this)."""

    @abstractmethod
    async def connect(
        self, config: SessionConfig, credentials: Credentials
    ) -> ISession:
        """Open a brand-new session, raising on authentication failure."""
        pass


__all__ = [
    "AccessToken",
    "Credentials",
    "ISession",
    "ISessionFactory",
    "MercuryResponse",
    "SessionConfig",
]
