"""ContextService: playlist, album and artist contexts plus multi-type search.

Hey future me - a "context" is everything a view needs for one resource in ONE object:
playlist + all its tracks, album + all its tracks, artist + top tracks + discography +
related artists. Rules that matter here:

1. Page walks are sequential (each `next` comes from the previous page)
2. Artist context and search fan out with asyncio.gather; first failure fails the lot
3. Per-item conversion failures are dropped, never raised
4. The PRIMARY resource failing conversion is a DecodeError (we can't build a context
   around nothing)
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from spotlink.application.services.reconciler import merge_artist_albums
from spotlink.domain.entities import (
    Album,
    AlbumContext,
    Artist,
    ArtistContext,
    PlaylistContext,
    SearchResults,
    Track,
)
from spotlink.domain.exceptions import DecodeError
from spotlink.domain.value_objects import AlbumId, ArtistId, PlaylistId
from spotlink.infrastructure.integrations import spotify_models as sm
from spotlink.infrastructure.integrations.converters import (
    try_album_from_simplified,
    try_artist_from_simplified,
    try_playlist_from_simplified,
    try_track_from_full,
    try_track_from_simplified,
)
from spotlink.infrastructure.integrations.pagination import collect_all
from spotlink.infrastructure.integrations.spotify_client import (
    SearchType,
    SpotifyApiClient,
)

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """One single-type search response, tagged with the type it actually holds."""

    search_type: SearchType
    page: sm.Page[Any]


def _require[R](value: R | None, what: str) -> R:
    if value is None:
        raise DecodeError(f"{what} could not be converted")
    return value


class ContextService:
    """Builds contexts and search results on top of SpotifyApiClient."""

    def __init__(self, api: SpotifyApiClient) -> None:
        self._api = api

    async def playlist_context(self, playlist_id: PlaylistId) -> PlaylistContext:
        """Playlist metadata plus every playable track in it."""
        logger.info(f"Get playlist context: {playlist_id.uri}")

        playlist = await self._api.get_playlist(playlist_id)
        items = await collect_all(
            playlist.tracks,
            self._api.page_fetcher(sm.Page[sm.PlaylistItem], self._api.market_query()),
        )

        # episodes and removed entries are not tracks; local files fail conversion
        tracks = [
            track
            for item in items
            if isinstance(item.track, sm.FullTrack)
            and (track := try_track_from_full(item.track)) is not None
        ]

        return PlaylistContext(
            playlist=_require(
                try_playlist_from_simplified(playlist), f"Playlist {playlist_id.uri}"
            ),
            tracks=tracks,
        )

    async def album_context(self, album_id: AlbumId) -> AlbumContext:
        """Album metadata plus all its tracks, each pointing back at the album."""
        logger.info(f"Get album context: {album_id.uri}")

        data = await self._api.get_album(album_id)
        album = _require(try_album_from_simplified(data), f"Album {album_id.uri}")

        items = await collect_all(
            data.tracks, self._api.page_fetcher(sm.Page[sm.SimplifiedTrack])
        )

        # simplified tracks don't carry their album, backfill the one we already have
        tracks: list[Track] = []
        for item in items:
            track = try_track_from_simplified(item)
            if track is not None:
                track.album = album
                tracks.append(track)

        return AlbumContext(album=album, tracks=tracks)

    async def artist_context(self, artist_id: ArtistId) -> ArtistContext:
        """Artist, top tracks, discography and related artists, fetched concurrently."""
        logger.info(f"Get artist context: {artist_id.uri}")

        artist, top_tracks, albums, related_artists = await asyncio.gather(
            self.artist(artist_id),
            self.artist_top_tracks(artist_id),
            self.artist_albums(artist_id),
            self.related_artists(artist_id),
        )

        return ArtistContext(
            artist=artist,
            top_tracks=top_tracks,
            albums=albums,
            related_artists=related_artists,
        )

    async def artist(self, artist_id: ArtistId) -> Artist:
        data = await self._api.get_artist(artist_id)
        return _require(try_artist_from_simplified(data), f"Artist {artist_id.uri}")

    async def artist_top_tracks(self, artist_id: ArtistId) -> list[Track]:
        data = await self._api.get_artist_top_tracks(artist_id)
        return [t for t in map(try_track_from_full, data) if t is not None]

    async def related_artists(self, artist_id: ArtistId) -> list[Artist]:
        data = await self._api.get_related_artists(artist_id)
        return [a for a in map(try_artist_from_simplified, data) if a is not None]

    async def artist_albums(self, artist_id: ArtistId) -> list[Album]:
        """An artist's singles and albums, newest first, one entry per name."""
        singles = await self._artist_albums_of_type(artist_id, "single")
        albums = await self._artist_albums_of_type(artist_id, "album")
        return merge_artist_albums(singles, albums)

    async def _artist_albums_of_type(
        self, artist_id: ArtistId, album_type: str
    ) -> list[Album]:
        first_page = await self._api.get_artist_albums_page(artist_id, album_type)
        items = await collect_all(
            first_page,
            self._api.page_fetcher(
                sm.Page[sm.SimplifiedAlbum], self._api.market_query()
            ),
        )
        return [a for a in map(try_album_from_simplified, items) if a is not None]

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def search(self, query: str) -> SearchResults:
        """Search tracks, artists, albums and playlists concurrently.

        Raises:
            DecodeError: If any branch comes back with the wrong catalog type
            (plus whatever a failing branch raised; no partial results)
        """
        track_result, artist_result, album_result, playlist_result = (
            await asyncio.gather(
                self.search_specific_type(query, SearchType.TRACK),
                self.search_specific_type(query, SearchType.ARTIST),
                self.search_specific_type(query, SearchType.ALBUM),
                self.search_specific_type(query, SearchType.PLAYLIST),
            )
        )

        return SearchResults(
            tracks=_convert_all(
                _expect(track_result, SearchType.TRACK), try_track_from_full
            ),
            artists=_convert_all(
                _expect(artist_result, SearchType.ARTIST), try_artist_from_simplified
            ),
            albums=_convert_all(
                _expect(album_result, SearchType.ALBUM), try_album_from_simplified
            ),
            playlists=_convert_all(
                _expect(playlist_result, SearchType.PLAYLIST),
                try_playlist_from_simplified,
            ),
        )

    async def search_specific_type(
        self, query: str, search_type: SearchType
    ) -> SearchResult:
        """Search one catalog type; the result is tagged with what actually came back.

        Raises:
            DecodeError: If the response holds no result type or more than one
        """
        response = await self._api.search(query, search_type)
        present = [
            (kind, page)
            for kind in SearchType
            if (page := getattr(response, f"{kind.value}s")) is not None
        ]
        if len(present) != 1:
            raise DecodeError(
                f"Search for {search_type.value} returned "
                f"{[kind.value for kind, _ in present] or 'no'} result types",
                endpoint="search",
            )
        kind, page = present[0]
        return SearchResult(search_type=kind, page=page)


def _convert_all[S, D](
    items: Iterable[S | None], convert: Callable[[S], D | None]
) -> list[D]:
    """Convert items, skipping nulls (search pages have them) and failures."""
    return [d for s in items if s is not None and (d := convert(s)) is not None]


def _expect(result: SearchResult, search_type: SearchType) -> list[Any]:
    if result.search_type is not search_type:
        raise DecodeError(
            f"expect a {search_type.value} search result, "
            f"got {result.search_type.value}",
            endpoint="search",
        )
    return result.page.items
