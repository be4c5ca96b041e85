"""Spotify identifier value objects.

Hey future me - these replace passing raw id strings around. A TrackId can never hold
an album id by accident and `.uri` always gives "spotify:track:<id>". Catalog ids are
base-62, so from_id() rejects anything that isn't plain ASCII alphanumeric. User ids
are free-form (old accounts have user names as ids), so UserId skips that check.
"""

from dataclasses import dataclass
from typing import ClassVar, Self

from spotlink.domain.exceptions import ValidationError


@dataclass(frozen=True)
class SpotifyId:
    """Base class for typed Spotify ids."""

    id: str

    KIND: ClassVar[str] = ""
    BASE62: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError(f"Empty {self.KIND} id")
        if self.BASE62 and not (self.id.isascii() and self.id.isalnum()):
            raise ValidationError(f"Invalid {self.KIND} id: {self.id!r}")

    @classmethod
    def from_id(cls, value: str) -> Self:
        """Build from a bare id ("6D6Pybzey0shI8U9ttRAPx")."""
        return cls(value)

    @classmethod
    def from_uri(cls, uri: str) -> Self:
        """Build from a URI ("spotify:track:6D6Pybzey0shI8U9ttRAPx")."""
        parts = uri.split(":")
        if len(parts) != 3 or parts[0] != "spotify" or parts[1] != cls.KIND:
            raise ValidationError(f"Invalid {cls.KIND} uri: {uri!r}")
        return cls(parts[2])

    @property
    def uri(self) -> str:
        return f"spotify:{self.KIND}:{self.id}"

    def __str__(self) -> str:
        return self.id


class TrackId(SpotifyId):
    KIND = "track"


class AlbumId(SpotifyId):
    KIND = "album"


class ArtistId(SpotifyId):
    KIND = "artist"


class PlaylistId(SpotifyId):
    KIND = "playlist"


class UserId(SpotifyId):
    KIND = "user"
    BASE62 = False


__all__ = [
    "SpotifyId",
    "TrackId",
    "AlbumId",
    "ArtistId",
    "PlaylistId",
    "UserId",
]
