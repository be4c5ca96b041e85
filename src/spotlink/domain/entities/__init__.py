"""Domain entities.

Hey future me - these are the normalized, already-merged records handed to callers.
They never hold raw upstream JSON. Upstream "full" and "simplified" variants both
collapse into one entity here; see infrastructure/integrations/converters.py for the
(fallible!) projections. Everything is created fresh per call, nothing is cached.
"""

from dataclasses import dataclass, field

from spotlink.domain.value_objects import (
    AlbumId,
    ArtistId,
    PlaylistId,
    TrackId,
    UserId,
)


@dataclass(frozen=True)
class TracksId:
    """Identifier of a synthetic track collection (liked, recent, top)."""

    uri: str
    kind: str


USER_TOP_TRACKS_ID = TracksId("tracks:user-top-tracks", "Top Tracks")
USER_RECENTLY_PLAYED_TRACKS_ID = TracksId(
    "tracks:user-recently-played-tracks", "Recently Played Tracks"
)
USER_LIKED_TRACKS_ID = TracksId("tracks:user-liked-tracks", "Liked Tracks")


@dataclass
class Artist:
    """An artist, projected from a full or simplified upstream artist."""

    id: ArtistId
    name: str
    genres: list[str] = field(default_factory=list)
    popularity: int | None = None

    @property
    def uri(self) -> str:
        return self.id.uri


@dataclass
class Album:
    """An album or single.

    release_date is the raw upstream string ("2020", "2020-05" or "2020-05-01").
    Those compare correctly as strings for sorting within one artist's discography.
    """

    id: AlbumId
    name: str
    release_date: str = ""
    album_type: str | None = None
    artists: list[Artist] = field(default_factory=list)
    image_url: str | None = None

    @property
    def uri(self) -> str:
        return self.id.uri

    @property
    def year(self) -> int | None:
        try:
            return int(self.release_date[:4])
        except ValueError:
            return None


@dataclass
class Track:
    """A playable track.

    album is None only when the upstream record carried no usable album and
    nobody backfilled it (album context always backfills).
    """

    id: TrackId
    name: str
    artists: list[Artist] = field(default_factory=list)
    album: Album | None = None
    duration_ms: int = 0
    explicit: bool = False

    @property
    def uri(self) -> str:
        return self.id.uri

    @property
    def artists_info(self) -> str:
        return ", ".join(a.name for a in self.artists)


@dataclass
class Playlist:
    """A playlist's metadata (tracks live in PlaylistContext)."""

    id: PlaylistId
    name: str
    owner_name: str
    owner_id: UserId
    collaborative: bool = False
    public: bool | None = None
    description: str = ""
    snapshot_id: str | None = None

    @property
    def uri(self) -> str:
        return self.id.uri


@dataclass
class Category:
    """A browse category."""

    id: str
    name: str


# Hey future me - Context is a CLOSED union of exactly these three dataclasses.
# Don't add an "everything optional" context class; match on the type instead:
#     match ctx:
#         case PlaylistContext(playlist=p, tracks=t): ...
@dataclass
class PlaylistContext:
    playlist: Playlist
    tracks: list[Track]


@dataclass
class AlbumContext:
    album: Album
    tracks: list[Track]


@dataclass
class ArtistContext:
    artist: Artist
    top_tracks: list[Track]
    albums: list[Album]
    related_artists: list[Artist]


Context = PlaylistContext | AlbumContext | ArtistContext


@dataclass
class SearchResults:
    """Results of a multi-type search, one list per catalog type."""

    tracks: list[Track] = field(default_factory=list)
    artists: list[Artist] = field(default_factory=list)
    albums: list[Album] = field(default_factory=list)
    playlists: list[Playlist] = field(default_factory=list)


__all__ = [
    "TracksId",
    "USER_TOP_TRACKS_ID",
    "USER_RECENTLY_PLAYED_TRACKS_ID",
    "USER_LIKED_TRACKS_ID",
    "Artist",
    "Album",
    "Track",
    "Playlist",
    "Category",
    "PlaylistContext",
    "AlbumContext",
    "ArtistContext",
    "Context",
    "SearchResults",
]
