"""Shared fixtures: settings, a fake session and a wired-up API client."""

from collections.abc import AsyncIterator

import pytest

from spotlink.config.settings import LoginCredentials, Settings
from spotlink.domain.ports import (
    AccessToken,
    Credentials,
    ISession,
    ISessionFactory,
    MercuryResponse,
    SessionConfig,
)
from spotlink.infrastructure.integrations.spotify_client import SpotifyApiClient
from spotlink.infrastructure.integrations.token_source import TokenSource

API = "https://api.test/v1"


class FakeSession(ISession):
    """In-memory session: hands out numbered tokens and canned message-bus replies."""

    def __init__(self, name: str = "session-1") -> None:
        self.name = name
        self.invalid = False
        self.token_requests: list[tuple[str, str]] = []
        self.mercury: dict[str, MercuryResponse] = {}
        self.mercury_requests: list[str] = []

    def is_invalid(self) -> bool:
        return self.invalid

    async def get_token(self, client_id: str, scopes: str) -> AccessToken:
        self.token_requests.append((client_id, scopes))
        return AccessToken(access_token=f"{self.name}-token-{len(self.token_requests)}")

    async def mercury_get(self, uri: str) -> MercuryResponse:
        self.mercury_requests.append(uri)
        return self.mercury[uri]


class FakeSessionFactory(ISessionFactory):
    """Counts connects and returns a fresh FakeSession each time."""

    def __init__(self) -> None:
        self.connects: list[tuple[SessionConfig, Credentials]] = []

    async def connect(
        self, config: SessionConfig, credentials: Credentials
    ) -> ISession:
        self.connects.append((config, credentials))
        return FakeSession(name=f"session-{len(self.connects) + 1}")


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake API host, rate limiting effectively off."""
    return Settings(
        login=LoginCredentials(username="alice", password="secret"),  # type: ignore[arg-type]
        api_base_url=API,
        rate_limit_per_second=1000.0,
        rate_limit_burst=1000,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def token_source(
    session: FakeSession, session_factory: FakeSessionFactory, settings: Settings
) -> TokenSource:
    return TokenSource(session, session_factory, settings)


@pytest.fixture
async def api(
    token_source: TokenSource, settings: Settings
) -> AsyncIterator[SpotifyApiClient]:
    client = SpotifyApiClient(token_source, settings)
    yield client
    await client.close()
