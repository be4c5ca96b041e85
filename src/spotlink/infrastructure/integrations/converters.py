"""Converters from Spotify Web API models to domain entities.

Hey future me - most of these are FALLIBLE. A playlist can contain local files (no id),
tracks can be unavailable in the user's market (is_playable=false), and albums of local
files have no id either. The `*_from_*` functions raise ConversionError for those, the
`try_*` wrappers turn that into None so callers can filter:

    tracks = [t for t in map(try_track_from_full, items) if t is not None]

Never let a ConversionError escape a service. One broken item must not kill a
2000-track playlist.
"""

import logging

from spotlink.domain.entities import Album, Artist, Category, Playlist, Track
from spotlink.domain.exceptions import ConversionError, ValidationError
from spotlink.domain.value_objects import (
    AlbumId,
    ArtistId,
    PlaylistId,
    TrackId,
    UserId,
)
from spotlink.infrastructure.integrations import spotify_models as sm

logger = logging.getLogger(__name__)


def _first_image_url(images: list[sm.Image]) -> str | None:
    return images[0].url if images else None


def _artists(artists: list[sm.SimplifiedArtist]) -> list[Artist]:
    # local-file artists have no id, keep the rest
    return [a for a in map(try_artist_from_simplified, artists) if a is not None]


def artist_from_simplified(data: sm.SimplifiedArtist) -> Artist:
    if not data.id:
        raise ConversionError(f"Artist {data.name!r} has no id")
    try:
        artist_id = ArtistId.from_id(data.id)
    except ValidationError as e:
        raise ConversionError(e.message) from e
    artist = Artist(id=artist_id, name=data.name)
    if isinstance(data, sm.FullArtist):
        artist.genres = list(data.genres)
        artist.popularity = data.popularity
    return artist


def try_artist_from_simplified(data: sm.SimplifiedArtist) -> Artist | None:
    try:
        return artist_from_simplified(data)
    except ConversionError as e:
        logger.debug("Dropping artist: %s", e.message)
        return None


def album_from_simplified(data: sm.SimplifiedAlbum) -> Album:
    if not data.id:
        raise ConversionError(f"Album {data.name!r} has no id")
    try:
        album_id = AlbumId.from_id(data.id)
    except ValidationError as e:
        raise ConversionError(e.message) from e
    return Album(
        id=album_id,
        name=data.name,
        release_date=data.release_date or "",
        album_type=data.album_type,
        artists=_artists(data.artists),
        image_url=_first_image_url(data.images),
    )


def try_album_from_simplified(data: sm.SimplifiedAlbum | None) -> Album | None:
    if data is None:
        return None
    try:
        return album_from_simplified(data)
    except ConversionError as e:
        logger.debug("Dropping album: %s", e.message)
        return None


def track_from_simplified(data: sm.SimplifiedTrack) -> Track:
    """Convert a track; simplified tracks come without album, full tracks with one."""
    if not data.id:
        raise ConversionError(f"Track {data.name!r} has no id (local file?)")
    if data.is_playable is False:
        raise ConversionError(f"Track {data.name!r} ({data.id}) is not playable")
    try:
        track_id = TrackId.from_id(data.id)
    except ValidationError as e:
        raise ConversionError(e.message) from e

    album = None
    if isinstance(data, sm.FullTrack):
        album = try_album_from_simplified(data.album)

    return Track(
        id=track_id,
        name=data.name,
        artists=_artists(data.artists),
        album=album,
        duration_ms=data.duration_ms,
        explicit=data.explicit,
    )


def try_track_from_simplified(data: sm.SimplifiedTrack | None) -> Track | None:
    if data is None:
        return None
    try:
        return track_from_simplified(data)
    except ConversionError as e:
        logger.debug("Dropping track: %s", e.message)
        return None


# FullTrack is a SimplifiedTrack subclass, the album is picked up above
try_track_from_full = try_track_from_simplified


def playlist_from_simplified(data: sm.SimplifiedPlaylist) -> Playlist:
    try:
        playlist_id = PlaylistId.from_id(data.id)
        owner_id = UserId.from_id(data.owner.id)
    except ValidationError as e:
        raise ConversionError(e.message) from e
    return Playlist(
        id=playlist_id,
        name=data.name,
        owner_name=data.owner.display_name or data.owner.id,
        owner_id=owner_id,
        collaborative=data.collaborative,
        public=data.public,
        description=data.description or "",
        snapshot_id=data.snapshot_id,
    )


def try_playlist_from_simplified(
    data: sm.SimplifiedPlaylist | None,
) -> Playlist | None:
    if data is None:
        return None
    try:
        return playlist_from_simplified(data)
    except ConversionError as e:
        logger.debug("Dropping playlist: %s", e.message)
        return None


def category_from_model(data: sm.Category) -> Category:
    return Category(id=data.id, name=data.name)


__all__ = [
    "album_from_simplified",
    "artist_from_simplified",
    "category_from_model",
    "playlist_from_simplified",
    "track_from_simplified",
    "try_album_from_simplified",
    "try_artist_from_simplified",
    "try_playlist_from_simplified",
    "try_track_from_full",
    "try_track_from_simplified",
]
