"""Tests for dedup and merge policies."""

import pytest

from spotlink.application.services.reconciler import (
    dedup_recently_played,
    merge_artist_albums,
)
from spotlink.domain.entities import Album, Track
from spotlink.domain.value_objects import AlbumId, TrackId


def _track(track_id: str, name: str) -> Track:
    return Track(id=TrackId(track_id), name=name)


def _album(album_id: str, name: str, release_date: str) -> Album:
    return Album(id=AlbumId(album_id), name=name, release_date=release_date)


class TestDedupRecentlyPlayed:
    """Test name-based dedup of the play history."""

    def test_keeps_first_occurrence_per_name(self) -> None:
        tracks = [
            _track("t1", "Alpha"),
            _track("t2", "Beta"),
            _track("t3", "Alpha"),
            _track("t4", "Gamma"),
            _track("t5", "Beta"),
        ]

        result = dedup_recently_played(tracks)

        assert [t.id.id for t in result] == ["t1", "t2", "t4"]

    def test_same_name_different_ids_collapse(self) -> None:
        result = dedup_recently_played([_track("a1", "Song"), _track("b2", "Song")])
        assert [t.id.id for t in result] == ["a1"]

    def test_names_unique_and_subset(self) -> None:
        tracks = [_track(f"t{i}", name) for i, name in enumerate("abcabdca")]

        result = dedup_recently_played(tracks)

        names = [t.name for t in result]
        assert len(names) == len(set(names))
        assert set(names) == set("abcabdca")
        assert all(t in tracks for t in result)

    def test_empty(self) -> None:
        assert dedup_recently_played([]) == []


class TestMergeArtistAlbums:
    """Test merging singles and albums into a newest-first discography."""

    def test_newest_first(self) -> None:
        singles = [_album("s1", "Single", "2021-03-01")]
        albums = [_album("a1", "Debut", "2018"), _album("a2", "Second", "2020-06")]

        result = merge_artist_albums(singles, albums)

        assert [a.id.id for a in result] == ["s1", "a2", "a1"]

    def test_latest_release_wins_for_shared_name(self) -> None:
        singles = [_album("s1", "Hit", "2019-01-01")]
        albums = [_album("a1", "Hit", "2020-01-01"), _album("a2", "Other", "2018")]

        result = merge_artist_albums(singles, albums)

        assert [a.id.id for a in result] == ["a1", "a2"]

    def test_result_names_unique_and_dates_non_increasing(self) -> None:
        singles = [
            _album("s1", "One", "2015"),
            _album("s2", "Two", "2017-02"),
            _album("s3", "One", "2016"),
        ]
        albums = [_album("a1", "Two", "2014"), _album("a2", "Three", "2019-12-31")]

        result = merge_artist_albums(singles, albums)

        names = [a.name for a in result]
        dates = [a.release_date for a in result]
        assert len(names) == len(set(names))
        assert set(names) == {"One", "Two", "Three"}
        assert dates == sorted(dates, reverse=True)
        assert {a.id.id for a in result} == {"a2", "s2", "s3"}

    def test_empty_inputs(self) -> None:
        assert merge_artist_albums([], []) == []

    def test_uncomparable_release_date_raises(self) -> None:
        broken = Album(id=AlbumId("x1"), name="Broken", release_date=None)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            merge_artist_albums([broken], [_album("a1", "Fine", "2020")])
