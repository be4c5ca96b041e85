"""Public entry point: the Client facade and its factory.

Hey future me - Client is deliberately dumb. Each public method:
1. tags the call with a fresh correlation id (so its page fetches group in the logs)
2. makes sure the session is still valid (re-auth if it was dropped)
3. delegates to exactly one service method
No business logic in here. If you find yourself writing a loop in this file, it
belongs in a service.
"""

import logging
from typing import Any

from spotlink.application.services.context_service import ContextService
from spotlink.application.services.library_service import LibraryService
from spotlink.application.services.playlist_service import PlaylistService
from spotlink.application.services.radio_service import RadioService
from spotlink.config.settings import Settings
from spotlink.domain.entities import (
    Album,
    AlbumContext,
    Artist,
    ArtistContext,
    Category,
    Playlist,
    PlaylistContext,
    SearchResults,
    Track,
    TracksId,
)
from spotlink.domain.exceptions import ConfigurationError
from spotlink.domain.ports import ISessionFactory
from spotlink.domain.value_objects import AlbumId, ArtistId, PlaylistId, TrackId, UserId
from spotlink.infrastructure.integrations.spotify_client import SpotifyApiClient
from spotlink.infrastructure.integrations.token_source import (
    TokenSource,
    connect_session,
)
from spotlink.infrastructure.observability import set_correlation_id

logger = logging.getLogger(__name__)


class Client:
    """Aggregating Spotify client.

    Use as an async context manager (or call close()) to release the HTTP client:

        async with await create_client(settings, factory) as client:
            ctx = await client.playlist_context(PlaylistId.from_uri(uri))
    """

    def __init__(
        self,
        settings: Settings,
        token_source: TokenSource,
        api: SpotifyApiClient,
    ) -> None:
        self.settings = settings
        self.token_source = token_source
        self.api = api
        self.contexts = ContextService(api)
        self.library = LibraryService(api)
        self.radio = RadioService(token_source, api)
        self.playlists = PlaylistService(api)

    async def close(self) -> None:
        await self.api.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def username(self) -> UserId:
        """The configured login name.

        Raises:
            ConfigurationError: If no login is stored in the settings
        """
        if self.settings.login is None:
            raise ConfigurationError("No stored login, username is unknown")
        return UserId.from_id(self.settings.login.username)

    async def check_valid_session(self) -> None:
        """Re-authenticate if the current session was dropped."""
        await self.token_source.ensure_valid()

    async def _begin(self) -> None:
        set_correlation_id()
        await self.check_valid_session()

    # =========================================================================
    # CONTEXTS & SEARCH
    # =========================================================================

    async def playlist_context(self, playlist_id: PlaylistId) -> PlaylistContext:
        await self._begin()
        return await self.contexts.playlist_context(playlist_id)

    async def album_context(self, album_id: AlbumId) -> AlbumContext:
        await self._begin()
        return await self.contexts.album_context(album_id)

    async def artist_context(self, artist_id: ArtistId) -> ArtistContext:
        await self._begin()
        return await self.contexts.artist_context(artist_id)

    async def artist_albums(self, artist_id: ArtistId) -> list[Album]:
        await self._begin()
        return await self.contexts.artist_albums(artist_id)

    async def search(self, query: str) -> SearchResults:
        await self._begin()
        return await self.contexts.search(query)

    # =========================================================================
    # LIBRARY
    # =========================================================================

    async def saved_tracks(self) -> list[Track]:
        await self._begin()
        return await self.library.saved_tracks()

    async def recently_played_tracks(self) -> list[Track]:
        await self._begin()
        return await self.library.recently_played_tracks()

    async def top_tracks(self) -> list[Track]:
        await self._begin()
        return await self.library.top_tracks()

    async def current_user_playlists(self) -> list[Playlist]:
        await self._begin()
        return await self.library.current_user_playlists()

    async def followed_artists(self) -> list[Artist]:
        await self._begin()
        return await self.library.followed_artists()

    async def saved_albums(self) -> list[Album]:
        await self._begin()
        return await self.library.saved_albums()

    async def browse_categories(self) -> list[Category]:
        await self._begin()
        return await self.library.browse_categories()

    async def browse_category_playlists(self, category_id: str) -> list[Playlist]:
        await self._begin()
        return await self.library.browse_category_playlists(category_id)

    async def tracks_by_id(self, tracks_id: TracksId) -> list[Track]:
        await self._begin()
        return await self.library.tracks_by_id(tracks_id)

    # =========================================================================
    # RADIO
    # =========================================================================

    async def radio_tracks(self, seed_uri: str) -> list[Track]:
        await self._begin()
        return await self.radio.radio_tracks(seed_uri)

    # =========================================================================
    # PLAYLIST WRITES
    # =========================================================================

    async def add_track_to_playlist(
        self, playlist_id: PlaylistId, track_id: TrackId
    ) -> None:
        await self._begin()
        await self.playlists.add_track(playlist_id, track_id)

    async def delete_track_from_playlist(
        self, playlist_id: PlaylistId, track_id: TrackId
    ) -> None:
        await self._begin()
        await self.playlists.delete_track(playlist_id, track_id)

    async def reorder_playlist_items(
        self,
        playlist_id: PlaylistId,
        insert_index: int,
        range_start: int,
        range_length: int | None = None,
        snapshot_id: str | None = None,
    ) -> None:
        await self._begin()
        await self.playlists.reorder(
            playlist_id, insert_index, range_start, range_length, snapshot_id
        )

    async def create_playlist(
        self,
        user_id: UserId,
        name: str,
        public: bool = False,
        collaborative: bool = False,
        description: str = "",
    ) -> Playlist:
        await self._begin()
        return await self.playlists.create_playlist(
            user_id, name, public, collaborative, description
        )


async def create_client(settings: Settings, session_factory: ISessionFactory) -> Client:
    """Connect a session and build a ready Client.

    Logging is left alone; the embedding program calls configure_logging() itself
    (settings.log_level and settings.log_json are there for that).

    The first access token is requested right away so bad credentials or a broken
    session surface here, not on the first real call.

    Raises:
        AuthError: If the session cannot be created or issues no token
    """
    session = await connect_session(session_factory, settings)
    token_source = TokenSource(session, session_factory, settings)
    api = SpotifyApiClient(token_source, settings)
    await token_source.current_token()
    return Client(settings, token_source, api)
