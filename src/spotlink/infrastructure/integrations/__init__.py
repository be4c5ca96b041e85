"""Spotify integration: Web API client, token source, pagination and converters."""

from spotlink.infrastructure.integrations.pagination import collect_all
from spotlink.infrastructure.integrations.spotify_client import (
    SearchType,
    SpotifyApiClient,
    patch_response_text,
)
from spotlink.infrastructure.integrations.token_source import (
    TokenSource,
    connect_session,
)

__all__ = [
    "SearchType",
    "SpotifyApiClient",
    "TokenSource",
    "collect_all",
    "connect_session",
    "patch_response_text",
]
