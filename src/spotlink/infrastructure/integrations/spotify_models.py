"""Pydantic models for Spotify Web API response shapes.

Hey future me - these mirror the JSON the Web API actually sends, NOT our domain.
Keep them permissive (Optional everywhere the API is known to send null) except for
`images`: the API sometimes sends "images": null, and we deliberately keep that field
a non-null list. SpotifyApiClient patches the raw text before decoding, so a null
that slips past the patch fails loudly instead of silently becoming [].

Page and CursorBasedPage are generic so callers pick the item model:
    Page[FullTrack].model_validate_json(text)
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Image(BaseModel):
    url: str
    height: int | None = None
    width: int | None = None


class PublicUser(BaseModel):
    id: str
    display_name: str | None = None


class Followers(BaseModel):
    total: int = 0


class SimplifiedArtist(BaseModel):
    id: str | None = None
    name: str = ""
    uri: str | None = None


class FullArtist(SimplifiedArtist):
    genres: list[str] = []
    popularity: int | None = None
    followers: Followers | None = None
    images: list[Image] = []


class SimplifiedAlbum(BaseModel):
    id: str | None = None
    name: str = ""
    album_type: str | None = None
    release_date: str | None = None
    release_date_precision: str | None = None
    artists: list[SimplifiedArtist] = []
    images: list[Image] = []
    uri: str | None = None


class Page(BaseModel, Generic[T]):
    """Offset-based page. `next` already encodes offset and limit."""

    href: str | None = None
    items: list[T] = []
    limit: int = 0
    next: str | None = None
    offset: int = 0
    previous: str | None = None
    total: int = 0


class Cursor(BaseModel):
    after: str | None = None
    before: str | None = None


class CursorBasedPage(BaseModel, Generic[T]):
    """Cursor-based page. `next` encodes an opaque cursor."""

    href: str | None = None
    items: list[T] = []
    limit: int = 0
    next: str | None = None
    cursors: Cursor | None = None
    total: int | None = None


class SimplifiedTrack(BaseModel):
    id: str | None = None
    name: str = ""
    type: Literal["track"] = "track"
    artists: list[SimplifiedArtist] = []
    duration_ms: int = 0
    explicit: bool = False
    is_local: bool = False
    is_playable: bool | None = None
    track_number: int | None = None
    disc_number: int = 1
    uri: str | None = None


class FullTrack(SimplifiedTrack):
    album: SimplifiedAlbum | None = None
    popularity: int | None = None


class FullAlbum(SimplifiedAlbum):
    tracks: Page[SimplifiedTrack] = Field(default_factory=Page[SimplifiedTrack])
    genres: list[str] = []
    label: str | None = None
    popularity: int | None = None


class FullEpisode(BaseModel):
    id: str | None = None
    name: str = ""
    type: Literal["episode"]


class PlaylistItem(BaseModel):
    """An entry of a playlist: a track, an episode, or null (removed item)."""

    added_at: str | None = None
    is_local: bool = False
    track: FullTrack | FullEpisode | None = None


class PlaylistTracksRef(BaseModel):
    href: str | None = None
    total: int = 0


class SimplifiedPlaylist(BaseModel):
    id: str
    name: str = ""
    collaborative: bool = False
    public: bool | None = None
    description: str | None = None
    owner: PublicUser
    snapshot_id: str | None = None
    images: list[Image] = []
    tracks: PlaylistTracksRef | None = None
    uri: str | None = None


class FullPlaylist(SimplifiedPlaylist):
    tracks: Page[PlaylistItem] = Field(default_factory=Page[PlaylistItem])  # type: ignore[assignment]
    followers: Followers | None = None


class PlayHistory(BaseModel):
    track: FullTrack
    played_at: str | None = None


class SavedTrack(BaseModel):
    added_at: str | None = None
    track: FullTrack


class SavedAlbum(BaseModel):
    added_at: str | None = None
    album: FullAlbum


class Category(BaseModel):
    id: str
    name: str = ""
    icons: list[Image] = []


class CategoriesResponse(BaseModel):
    categories: Page[Category]


class PlaylistsResponse(BaseModel):
    """Wrapper used by browse category playlists."""

    playlists: Page[SimplifiedPlaylist | None]


class CursorPageFullArtists(BaseModel):
    """Followed artists wrap their cursor page under an "artists" key."""

    artists: CursorBasedPage[FullArtist]


class TracksResponse(BaseModel):
    """Batch track lookup and artist top tracks. Unknown ids come back as null."""

    tracks: list[FullTrack | None] = []


class ArtistsResponse(BaseModel):
    artists: list[FullArtist] = []


class SearchResponse(BaseModel):
    """Search response; only the key(s) of the requested type(s) are present."""

    tracks: Page[FullTrack | None] | None = None
    artists: Page[FullArtist | None] | None = None
    albums: Page[SimplifiedAlbum | None] | None = None
    playlists: Page[SimplifiedPlaylist | None] | None = None


class SnapshotResponse(BaseModel):
    snapshot_id: str


class RadioTrack(BaseModel):
    original_gid: str


class RadioStationResponse(BaseModel):
    tracks: list[RadioTrack] = []
