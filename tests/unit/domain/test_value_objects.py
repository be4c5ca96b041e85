"""Tests for Spotify id value objects and the synthetic track collection ids."""

import pytest

from spotlink.domain.entities import (
    USER_LIKED_TRACKS_ID,
    USER_RECENTLY_PLAYED_TRACKS_ID,
    USER_TOP_TRACKS_ID,
    Album,
)
from spotlink.domain.exceptions import DomainException, ValidationError
from spotlink.domain.value_objects import AlbumId, PlaylistId, TrackId, UserId


class TestSpotifyIds:
    """Test typed id parsing and formatting."""

    def test_from_id_and_uri(self) -> None:
        track_id = TrackId.from_id("6D6Pybzey0shI8U9ttRAPx")
        assert track_id.id == "6D6Pybzey0shI8U9ttRAPx"
        assert track_id.uri == "spotify:track:6D6Pybzey0shI8U9ttRAPx"
        assert str(track_id) == "6D6Pybzey0shI8U9ttRAPx"

    def test_from_uri_round_trips(self) -> None:
        playlist_id = PlaylistId.from_uri("spotify:playlist:37i9dQZF1DXcBWIGoYBM5M")
        assert playlist_id == PlaylistId("37i9dQZF1DXcBWIGoYBM5M")

    def test_from_uri_rejects_wrong_kind(self) -> None:
        with pytest.raises(ValidationError):
            AlbumId.from_uri("spotify:track:6D6Pybzey0shI8U9ttRAPx")

    @pytest.mark.parametrize("bad", ["", "has space", "dash-ed", "ümlaut"])
    def test_invalid_catalog_ids_rejected(self, bad: str) -> None:
        with pytest.raises(ValidationError):
            TrackId.from_id(bad)

    def test_validation_error_is_domain_exception(self) -> None:
        with pytest.raises(DomainException) as exc_info:
            TrackId.from_id("not valid")
        assert "not valid" in exc_info.value.message

    def test_user_ids_are_free_form(self) -> None:
        user_id = UserId.from_id("some.user-name_01")
        assert user_id.uri == "spotify:user:some.user-name_01"

    def test_ids_of_different_kinds_are_not_equal(self) -> None:
        assert TrackId("abc") != AlbumId("abc")


class TestTracksIds:
    """Test the synthetic track collection identifiers."""

    def test_collection_ids_are_distinct(self) -> None:
        uris = {
            USER_TOP_TRACKS_ID.uri,
            USER_RECENTLY_PLAYED_TRACKS_ID.uri,
            USER_LIKED_TRACKS_ID.uri,
        }
        assert len(uris) == 3

    def test_kind_labels(self) -> None:
        assert USER_LIKED_TRACKS_ID.kind == "Liked Tracks"


class TestAlbum:
    """Test derived album fields."""

    @pytest.mark.parametrize(
        ("release_date", "year"),
        [("2020", 2020), ("2019-05", 2019), ("2018-01-31", 2018), ("", None)],
    )
    def test_year(self, release_date: str, year: int | None) -> None:
        album = Album(id=AlbumId("a1"), name="A", release_date=release_date)
        assert album.year == year
