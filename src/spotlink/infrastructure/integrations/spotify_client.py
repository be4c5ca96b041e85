"""Authenticated Spotify Web API client."""

import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from spotlink.config.settings import Settings
from spotlink.domain.exceptions import DecodeError, TransportError, UpstreamStatusError
from spotlink.domain.value_objects import (
    AlbumId,
    ArtistId,
    PlaylistId,
    TrackId,
    UserId,
)
from spotlink.infrastructure.integrations import spotify_models as sm
from spotlink.infrastructure.integrations.token_source import TokenSource
from spotlink.infrastructure.rate_limiter import RateLimiter, RateLimiterConfig

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# The batch track endpoint accepts at most 50 ids per call
MAX_TRACKS_PER_REQUEST = 50
DEFAULT_PAGE_LIMIT = 50

_IMAGES_NULL_RE = re.compile(r'"images"\s*:\s*null\b')


class SearchType(str, Enum):
    """Catalog types a single-type search can ask for."""

    TRACK = "track"
    ARTIST = "artist"
    ALBUM = "album"
    PLAYLIST = "playlist"


# Hey future me - the Web API sometimes sends "images": null (playlists and albums mostly)
# while documenting it as an array. Our models say list[Image], so we fix the TEXT before
# decoding. Runs on every body, unconditionally. Replacing with "[]" makes it idempotent.
def patch_response_text(text: str) -> str:
    """Rewrite known upstream schema defects in a raw response body."""
    return _IMAGES_NULL_RE.sub('"images":[]', text)


class SpotifyApiClient:
    """HTTP client for Spotify Web API operations.

    Every request goes through _request(): bearer token from TokenSource, rate limiter,
    status check. Nothing here retries. Catalog endpoint methods below are thin
    bindings that return the pydantic response models; conversion to domain entities
    happens in the application services.
    """

    def __init__(
        self,
        token_source: TokenSource,
        settings: Settings,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """
        Initialize Spotify client.

        Args:
            token_source: Provides the bearer token for each request
            settings: Base URL, market, timeout and rate limit settings
            rate_limiter: Optional limiter (default: built from settings)
        """
        self.settings = settings
        self.api_base_url = settings.api_base_url.rstrip("/")
        self._token_source = token_source
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(
                max_tokens=settings.rate_limit_burst,
                refill_rate=settings.rate_limit_per_second,
            )
        )
        self._client: httpx.AsyncClient | None = None

    # The AsyncClient is created lazily so constructing a SpotifyApiClient outside a
    # running event loop is fine.
    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "SpotifyApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def market_query(self) -> dict[str, str]:
        """Query attached whenever regional availability matters."""
        return {"market": self.settings.market}

    def url(self, path: str) -> str:
        return f"{self.api_base_url}/{path.lstrip('/')}"

    # =========================================================================
    # REQUEST CORE
    # =========================================================================

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Make one authenticated, rate-limited request.

        Raises:
            AuthError: If no access token can be obtained
            TransportError: On network errors and timeouts
            UpstreamStatusError: On any non-2xx status
        """
        access_token = await self._token_source.current_token()
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            async with self._rate_limiter:
                response = await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.TransportError as e:
            raise TransportError(f"{method} {url} failed: {e!s}", endpoint=url) from e

        if not response.is_success:
            logger.warning(f"Spotify API {method} {url} -> {response.status_code}")
            raise UpstreamStatusError(
                response.status_code,
                url,
                message=(
                    f"{method} {url} returned non-OK status code: "
                    f"{response.status_code}"
                ),
            )
        return response

    def _decode(self, text: str, model: type[M], url: str) -> M:
        text = patch_response_text(text)
        logger.debug(f"{url} -> {text[:500]}")
        try:
            return model.model_validate_json(text)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Unexpected response shape from {url} "
                f"(expected {model.__name__}): {e}",
                endpoint=url,
            ) from e

    async def get(
        self, url: str, params: dict[str, Any] | None, model: type[M]
    ) -> M:
        """GET a URL and decode it into ``model``.

        Args:
            url: Absolute URL (endpoint or a page's `next`)
            params: Query parameters merged into the URL's own query
            model: Pydantic model of the expected response

        Raises:
            AuthError, TransportError, UpstreamStatusError, DecodeError
        """
        response = await self._request("GET", url, params=params)
        return self._decode(response.text, model, url)

    async def send(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
        model: type[M] | None = None,
    ) -> M | None:
        """Write request (POST/PUT/DELETE). Decodes the body only if a model is given."""
        response = await self._request(method, url, params=params, json=json)
        if model is None:
            return None
        return self._decode(response.text, model, url)

    def page_fetcher(
        self, model: type[M], params: dict[str, Any] | None = None
    ) -> Callable[[str], Awaitable[M]]:
        """Build the fetch callable a page walk uses for `next` URLs."""

        async def fetch(url: str) -> M:
            return await self.get(url, params, model)

        return fetch

    # =========================================================================
    # CATALOG
    # =========================================================================

    async def get_tracks(self, track_ids: Iterable[TrackId]) -> list[sm.FullTrack]:
        """Batch track lookup, chunked by 50. Unknown ids are skipped."""
        ids = [t.id for t in track_ids]
        tracks: list[sm.FullTrack] = []
        for start in range(0, len(ids), MAX_TRACKS_PER_REQUEST):
            chunk = ids[start : start + MAX_TRACKS_PER_REQUEST]
            data = await self.get(
                self.url("tracks"),
                {"ids": ",".join(chunk), **self.market_query()},
                sm.TracksResponse,
            )
            tracks.extend(t for t in data.tracks if t is not None)
        return tracks

    async def get_album(self, album_id: AlbumId) -> sm.FullAlbum:
        return await self.get(
            self.url(f"albums/{album_id.id}"), self.market_query(), sm.FullAlbum
        )

    async def get_artist(self, artist_id: ArtistId) -> sm.FullArtist:
        return await self.get(self.url(f"artists/{artist_id.id}"), None, sm.FullArtist)

    async def get_artist_top_tracks(self, artist_id: ArtistId) -> list[sm.FullTrack]:
        data = await self.get(
            self.url(f"artists/{artist_id.id}/top-tracks"),
            self.market_query(),
            sm.TracksResponse,
        )
        return [t for t in data.tracks if t is not None]

    async def get_related_artists(self, artist_id: ArtistId) -> list[sm.FullArtist]:
        data = await self.get(
            self.url(f"artists/{artist_id.id}/related-artists"),
            None,
            sm.ArtistsResponse,
        )
        return data.artists

    async def get_artist_albums_page(
        self, artist_id: ArtistId, album_type: str, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.SimplifiedAlbum]:
        """First page of an artist's releases of one type ("album", "single", ...)."""
        return await self.get(
            self.url(f"artists/{artist_id.id}/albums"),
            {"include_groups": album_type, "limit": limit, **self.market_query()},
            sm.Page[sm.SimplifiedAlbum],
        )

    async def get_playlist(self, playlist_id: PlaylistId) -> sm.FullPlaylist:
        return await self.get(
            self.url(f"playlists/{playlist_id.id}"),
            self.market_query(),
            sm.FullPlaylist,
        )

    async def search(self, query: str, search_type: SearchType) -> sm.SearchResponse:
        """Single-type search. The response should only carry that type's key."""
        return await self.get(
            self.url("search"),
            {"q": query, "type": search_type.value},
            sm.SearchResponse,
        )

    async def get_categories_page(
        self, locale: str = "EN", limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.Category]:
        data = await self.get(
            self.url("browse/categories"),
            {"locale": locale, "limit": limit},
            sm.CategoriesResponse,
        )
        return data.categories

    async def get_category_playlists_page(
        self, category_id: str, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.SimplifiedPlaylist | None]:
        data = await self.get(
            self.url(f"browse/categories/{category_id}/playlists"),
            {"limit": limit},
            sm.PlaylistsResponse,
        )
        return data.playlists

    # =========================================================================
    # CURRENT USER
    # =========================================================================

    async def get_current_user(self) -> sm.PublicUser:
        return await self.get(self.url("me"), None, sm.PublicUser)

    async def get_saved_tracks_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.SavedTrack]:
        return await self.get(
            self.url("me/tracks"),
            {"limit": limit, **self.market_query()},
            sm.Page[sm.SavedTrack],
        )

    async def get_recently_played_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.CursorBasedPage[sm.PlayHistory]:
        return await self.get(
            self.url("me/player/recently-played"),
            {"limit": limit},
            sm.CursorBasedPage[sm.PlayHistory],
        )

    async def get_top_tracks_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.FullTrack]:
        return await self.get(
            self.url("me/top/tracks"), {"limit": limit}, sm.Page[sm.FullTrack]
        )

    async def get_current_user_playlists_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.SimplifiedPlaylist]:
        return await self.get(
            self.url("me/playlists"), {"limit": limit}, sm.Page[sm.SimplifiedPlaylist]
        )

    async def get_followed_artists_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.CursorBasedPage[sm.FullArtist]:
        data = await self.get(
            self.url("me/following"),
            {"type": "artist", "limit": limit},
            sm.CursorPageFullArtists,
        )
        return data.artists

    async def get_saved_albums_page(
        self, limit: int = DEFAULT_PAGE_LIMIT
    ) -> sm.Page[sm.SavedAlbum]:
        return await self.get(
            self.url("me/albums"),
            {"limit": limit, **self.market_query()},
            sm.Page[sm.SavedAlbum],
        )

    # =========================================================================
    # PLAYLIST WRITES
    # =========================================================================

    async def add_items_to_playlist(
        self, playlist_id: PlaylistId, uris: list[str], position: int | None = None
    ) -> sm.SnapshotResponse | None:
        body: dict[str, Any] = {"uris": uris}
        if position is not None:
            body["position"] = position
        return await self.send(
            "POST",
            self.url(f"playlists/{playlist_id.id}/tracks"),
            json=body,
            model=sm.SnapshotResponse,
        )

    async def remove_all_occurrences(
        self, playlist_id: PlaylistId, uris: list[str], snapshot_id: str | None = None
    ) -> sm.SnapshotResponse | None:
        body: dict[str, Any] = {"tracks": [{"uri": uri} for uri in uris]}
        if snapshot_id is not None:
            body["snapshot_id"] = snapshot_id
        return await self.send(
            "DELETE",
            self.url(f"playlists/{playlist_id.id}/tracks"),
            json=body,
            model=sm.SnapshotResponse,
        )

    async def reorder_playlist_items(
        self,
        playlist_id: PlaylistId,
        range_start: int,
        insert_before: int,
        range_length: int | None = None,
        snapshot_id: str | None = None,
    ) -> sm.SnapshotResponse | None:
        body: dict[str, Any] = {
            "range_start": range_start,
            "insert_before": insert_before,
        }
        if range_length is not None:
            body["range_length"] = range_length
        if snapshot_id is not None:
            body["snapshot_id"] = snapshot_id
        return await self.send(
            "PUT",
            self.url(f"playlists/{playlist_id.id}/tracks"),
            json=body,
            model=sm.SnapshotResponse,
        )

    async def create_playlist(
        self,
        user_id: UserId,
        name: str,
        public: bool,
        collaborative: bool,
        description: str,
    ) -> sm.SimplifiedPlaylist | None:
        return await self.send(
            "POST",
            self.url(f"users/{user_id.id}/playlists"),
            json={
                "name": name,
                "public": public,
                "collaborative": collaborative,
                "description": description,
            },
            model=sm.SimplifiedPlaylist,
        )
