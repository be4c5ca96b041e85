"""Tests for ContextService: playlist/album/artist contexts and search."""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from pytest_httpx import HTTPXMock

from spotlink.application.services.context_service import ContextService
from spotlink.domain.entities import AlbumContext, ArtistContext, PlaylistContext
from spotlink.domain.exceptions import DecodeError, UpstreamStatusError
from spotlink.domain.value_objects import AlbumId, ArtistId, PlaylistId
from spotlink.infrastructure.integrations import spotify_models as sm
from spotlink.infrastructure.integrations.spotify_client import (
    SearchType,
    SpotifyApiClient,
)

API = "https://api.test/v1"
MARKET = {"market": "from_token"}


def _url(path: str, **params: Any) -> httpx.URL:
    return httpx.URL(f"{API}/{path}", params=params)


def _track(track_id: str, name: str = "", **extra: Any) -> dict[str, Any]:
    return {
        "id": track_id,
        "name": name or f"Track {track_id}",
        "type": "track",
        "artists": [{"id": "ar1", "name": "Artist"}],
        **extra,
    }


def _album(album_id: str, name: str, release_date: str) -> dict[str, Any]:
    return {
        "id": album_id,
        "name": name,
        "release_date": release_date,
        "album_type": "album",
        "images": None,
    }


@pytest.fixture
def service(api: SpotifyApiClient) -> ContextService:
    return ContextService(api)


class TestPlaylistContext:
    """Test playlist context assembly."""

    async def test_walks_all_pages_and_keeps_only_tracks(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=_url("playlists/pl1", **MARKET),
            json={
                "id": "pl1",
                "name": "Mix",
                "owner": {"id": "alice", "display_name": "Alice"},
                "snapshot_id": "snap",
                "images": None,
                "tracks": {
                    "items": [
                        {"track": _track("t1")},
                        {"track": {"id": "ep1", "name": "Pod", "type": "episode"}},
                        {"track": None},
                        {
                            "is_local": True,
                            "track": {"id": None, "name": "Local", "is_local": True},
                        },
                    ],
                    "next": f"{API}/playlists/pl1/tracks?offset=4&limit=4",
                },
            },
        )
        httpx_mock.add_response(
            url=_url("playlists/pl1/tracks", offset=4, limit=4, **MARKET),
            json={"items": [{"track": _track("t2")}], "next": None},
        )

        context = await service.playlist_context(PlaylistId("pl1"))

        assert isinstance(context, PlaylistContext)
        assert context.playlist.name == "Mix"
        assert context.playlist.owner_name == "Alice"
        assert [t.id.id for t in context.tracks] == ["t1", "t2"]

    async def test_page_failure_fails_context(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=_url("playlists/pl1", **MARKET),
            json={
                "id": "pl1",
                "owner": {"id": "alice"},
                "tracks": {
                    "items": [{"track": _track("t1")}],
                    "next": f"{API}/playlists/pl1/tracks?offset=1&limit=1",
                },
            },
        )
        httpx_mock.add_response(
            url=_url("playlists/pl1/tracks", offset=1, limit=1, **MARKET),
            status_code=502,
        )

        with pytest.raises(UpstreamStatusError) as exc_info:
            await service.playlist_context(PlaylistId("pl1"))

        assert exc_info.value.status_code == 502


class TestAlbumContext:
    """Test album context assembly."""

    async def test_tracks_get_album_backfilled(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=_url("albums/al1", **MARKET),
            json={
                **_album("al1", "Record", "2021-05-01"),
                "tracks": {
                    "items": [_track("t1")],
                    "next": f"{API}/albums/al1/tracks?offset=1&limit=1",
                },
            },
        )
        httpx_mock.add_response(
            url=_url("albums/al1/tracks", offset=1, limit=1),
            json={"items": [_track("t2"), {"id": None, "name": "gone"}], "next": None},
        )

        context = await service.album_context(AlbumId("al1"))

        assert isinstance(context, AlbumContext)
        assert context.album.name == "Record"
        assert [t.id.id for t in context.tracks] == ["t1", "t2"]
        assert all(t.album is context.album for t in context.tracks)


class TestArtistContext:
    """Test artist context and discography."""

    def _mock_artist_endpoints(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=_url("artists/ar1"),
            json={"id": "ar1", "name": "Artist", "genres": ["pop"], "images": None},
        )
        httpx_mock.add_response(
            url=_url("artists/ar1/top-tracks", **MARKET),
            json={"tracks": [_track("t1"), _track("t2", is_playable=False)]},
        )
        httpx_mock.add_response(
            url=_url("artists/ar1/related-artists"),
            json={"artists": [{"id": "ar2", "name": "Friend"}]},
        )
        httpx_mock.add_response(
            url=_url(
                "artists/ar1/albums", include_groups="single", limit=50, **MARKET
            ),
            json={
                "items": [
                    _album("s1", "Hit", "2019-01-01"),
                    _album("s2", "Fresh", "2022-02-02"),
                ],
                "next": None,
            },
        )
        httpx_mock.add_response(
            url=_url("artists/ar1/albums", include_groups="album", limit=50, **MARKET),
            json={
                "items": [
                    _album("a1", "Hit", "2020-01-01"),
                    _album("a2", "Debut", "2015"),
                ],
                "next": f"{API}/artists/ar1/albums?offset=2&limit=2",
            },
        )
        httpx_mock.add_response(
            url=_url("artists/ar1/albums", offset=2, limit=2, **MARKET),
            json={"items": [_album("a3", "Middle", "2018-06")], "next": None},
        )

    async def test_artist_context(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        self._mock_artist_endpoints(httpx_mock)

        context = await service.artist_context(ArtistId("ar1"))

        assert isinstance(context, ArtistContext)
        assert context.artist.genres == ["pop"]
        assert [t.id.id for t in context.top_tracks] == ["t1"]
        assert [a.name for a in context.related_artists] == ["Friend"]
        assert [a.id.id for a in context.albums] == ["s2", "a1", "a3", "a2"]

    async def test_any_branch_failure_fails_context(
        self, service: ContextService, mocker
    ) -> None:
        mocker.patch.object(service, "artist", AsyncMock())
        mocker.patch.object(service, "artist_albums", AsyncMock(return_value=[]))
        mocker.patch.object(service, "related_artists", AsyncMock(return_value=[]))
        mocker.patch.object(
            service,
            "artist_top_tracks",
            AsyncMock(side_effect=UpstreamStatusError(500, "top-tracks")),
        )

        with pytest.raises(UpstreamStatusError):
            await service.artist_context(ArtistId("ar1"))


class TestSearch:
    """Test concurrent multi-type search."""

    def _mock_search(
        self, httpx_mock: HTTPXMock, query: str, overrides: dict[str, Any] | None = None
    ) -> None:
        bodies: dict[str, Any] = {
            "track": {"tracks": {"items": [_track("t1"), None]}},
            "artist": {"artists": {"items": [{"id": "ar1", "name": "A"}]}},
            "album": {"albums": {"items": [_album("al1", "Alb", "2020")]}},
            "playlist": {
                "playlists": {
                    "items": [None, {"id": "pl1", "name": "P", "owner": {"id": "u"}}]
                }
            },
        }
        bodies.update(overrides or {})
        for search_type, body in bodies.items():
            httpx_mock.add_response(
                url=_url("search", q=query, type=search_type), json=body
            )

    async def test_search_all_types(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        self._mock_search(httpx_mock, "abba")

        results = await service.search("abba")

        assert [t.id.id for t in results.tracks] == ["t1"]
        assert [a.id.id for a in results.artists] == ["ar1"]
        assert [a.id.id for a in results.albums] == ["al1"]
        assert [p.id.id for p in results.playlists] == ["pl1"]

    async def test_type_mismatch_is_decode_error(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        self._mock_search(
            httpx_mock,
            "abba",
            {"track": {"artists": {"items": [{"id": "ar1", "name": "A"}]}}},
        )

        with pytest.raises(DecodeError) as exc_info:
            await service.search("abba")

        assert "expect a track search result" in exc_info.value.message

    async def test_search_specific_type_tags_result(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=_url("search", q="abba", type="album"),
            json={"albums": {"items": []}},
        )

        result = await service.search_specific_type("abba", SearchType.ALBUM)

        assert result.search_type is SearchType.ALBUM
        assert result.page.items == []

    async def test_empty_search_response_is_decode_error(
        self, service: ContextService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=_url("search", q="x", type="track"), json={})

        with pytest.raises(DecodeError):
            await service.search_specific_type("x", SearchType.TRACK)

    async def test_one_failing_branch_fails_search(
        self, service: ContextService, api: SpotifyApiClient, mocker
    ) -> None:
        async def fake_search(query: str, search_type: SearchType) -> sm.SearchResponse:
            if search_type is SearchType.PLAYLIST:
                raise UpstreamStatusError(503, f"{API}/search")
            key = f"{search_type.value}s"
            return sm.SearchResponse.model_validate({key: {"items": []}})

        mocker.patch.object(api, "search", AsyncMock(side_effect=fake_search))

        with pytest.raises(UpstreamStatusError):
            await service.search("abba")
