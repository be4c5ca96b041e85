"""LibraryService: the current user's collections and the browse catalog."""

import logging

from spotlink.application.services.reconciler import dedup_recently_played
from spotlink.domain.entities import (
    USER_LIKED_TRACKS_ID,
    USER_RECENTLY_PLAYED_TRACKS_ID,
    USER_TOP_TRACKS_ID,
    Album,
    Artist,
    Category,
    Playlist,
    Track,
    TracksId,
)
from spotlink.domain.exceptions import ValidationError
from spotlink.infrastructure.integrations import spotify_models as sm
from spotlink.infrastructure.integrations.converters import (
    category_from_model,
    try_album_from_simplified,
    try_artist_from_simplified,
    try_playlist_from_simplified,
    try_track_from_full,
)
from spotlink.infrastructure.integrations.pagination import collect_all
from spotlink.infrastructure.integrations.spotify_client import SpotifyApiClient

logger = logging.getLogger(__name__)


class LibraryService:
    """Reads the user's library. Every list is walked to the last page.

    The browse endpoints are the exception: categories and category playlists
    return the first page only (that's all the API gives without a next-walk,
    and nobody wants 2000 categories).
    """

    def __init__(self, api: SpotifyApiClient) -> None:
        self._api = api

    async def saved_tracks(self) -> list[Track]:
        """Liked tracks, in the order the API returns them (newest saved first)."""
        first_page = await self._api.get_saved_tracks_page()
        items = await collect_all(
            first_page,
            self._api.page_fetcher(sm.Page[sm.SavedTrack], self._api.market_query()),
        )
        return [t for t in (try_track_from_full(i.track) for i in items) if t is not None]

    async def recently_played_tracks(self) -> list[Track]:
        """Recently played tracks, one entry per track name (first play wins)."""
        first_page = await self._api.get_recently_played_page()
        items = await collect_all(
            first_page, self._api.page_fetcher(sm.CursorBasedPage[sm.PlayHistory])
        )
        tracks = [
            t for t in (try_track_from_full(i.track) for i in items) if t is not None
        ]
        return dedup_recently_played(tracks)

    async def top_tracks(self) -> list[Track]:
        first_page = await self._api.get_top_tracks_page()
        items = await collect_all(
            first_page, self._api.page_fetcher(sm.Page[sm.FullTrack])
        )
        return [t for t in map(try_track_from_full, items) if t is not None]

    async def current_user_playlists(self) -> list[Playlist]:
        first_page = await self._api.get_current_user_playlists_page()
        items = await collect_all(
            first_page, self._api.page_fetcher(sm.Page[sm.SimplifiedPlaylist])
        )
        return [p for p in map(try_playlist_from_simplified, items) if p is not None]

    async def followed_artists(self) -> list[Artist]:
        """Followed artists. Their pages come wrapped under "artists", unwrap each."""
        fetch_wrapped = self._api.page_fetcher(sm.CursorPageFullArtists)

        async def fetch_next(url: str) -> sm.CursorBasedPage[sm.FullArtist]:
            return (await fetch_wrapped(url)).artists

        first_page = await self._api.get_followed_artists_page()
        items = await collect_all(first_page, fetch_next)
        return [a for a in map(try_artist_from_simplified, items) if a is not None]

    async def saved_albums(self) -> list[Album]:
        first_page = await self._api.get_saved_albums_page()
        items = await collect_all(
            first_page, self._api.page_fetcher(sm.Page[sm.SavedAlbum])
        )
        return [a for a in (try_album_from_simplified(i.album) for i in items) if a]

    async def browse_categories(self) -> list[Category]:
        page = await self._api.get_categories_page()
        return [category_from_model(c) for c in page.items]

    async def browse_category_playlists(self, category_id: str) -> list[Playlist]:
        page = await self._api.get_category_playlists_page(category_id)
        return [
            p for p in map(try_playlist_from_simplified, page.items) if p is not None
        ]

    async def tracks_by_id(self, tracks_id: TracksId) -> list[Track]:
        """Resolve one of the synthetic track collections.

        Raises:
            ValidationError: If tracks_id is not a known collection
        """
        logger.info(f"Get tracks: {tracks_id.uri}")
        if tracks_id == USER_TOP_TRACKS_ID:
            return await self.top_tracks()
        if tracks_id == USER_RECENTLY_PLAYED_TRACKS_ID:
            return await self.recently_played_tracks()
        if tracks_id == USER_LIKED_TRACKS_ID:
            return await self.saved_tracks()
        raise ValidationError(f"Unknown tracks collection: {tracks_id.uri}")
