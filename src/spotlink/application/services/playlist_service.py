"""PlaylistService: add, remove, reorder playlist items and create playlists."""

import logging

from spotlink.domain.entities import Playlist
from spotlink.domain.exceptions import DecodeError
from spotlink.domain.value_objects import PlaylistId, TrackId, UserId
from spotlink.infrastructure.integrations.converters import try_playlist_from_simplified
from spotlink.infrastructure.integrations.spotify_client import SpotifyApiClient

logger = logging.getLogger(__name__)


def insert_before_position(insert_index: int, range_start: int) -> int:
    """Translate "where the item should end up" into the API's insert_before.

    The API counts insert_before against the list BEFORE the moved range is
    taken out, so moving an item down needs one extra step.

    Examples:
        insert_before_position(3, 1) == 4   # move down
        insert_before_position(1, 3) == 1   # move up
        insert_before_position(2, 2) == 2
    """
    if insert_index > range_start:
        return insert_index + 1
    return insert_index


class PlaylistService:
    """Playlist writes. Each call is a plain request, no retry, no verification."""

    def __init__(self, api: SpotifyApiClient) -> None:
        self._api = api

    async def add_track(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        """Add a track exactly once: drop every existing occurrence, then append it."""
        await self._api.remove_all_occurrences(playlist_id, [track_id.uri])
        await self._api.add_items_to_playlist(playlist_id, [track_id.uri])

    async def delete_track(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        """Remove every occurrence of a track from the playlist."""
        await self._api.remove_all_occurrences(playlist_id, [track_id.uri])

    async def reorder(
        self,
        playlist_id: PlaylistId,
        insert_index: int,
        range_start: int,
        range_length: int | None = None,
        snapshot_id: str | None = None,
    ) -> None:
        """Move range_start (and range_length - 1 following items) to insert_index."""
        await self._api.reorder_playlist_items(
            playlist_id,
            range_start=range_start,
            insert_before=insert_before_position(insert_index, range_start),
            range_length=range_length,
            snapshot_id=snapshot_id,
        )

    async def create_playlist(
        self,
        user_id: UserId,
        name: str,
        public: bool = False,
        collaborative: bool = False,
        description: str = "",
    ) -> Playlist:
        """Create a playlist owned by user_id.

        Raises:
            DecodeError: If the created playlist cannot be read back
        """
        data = await self._api.create_playlist(
            user_id, name, public, collaborative, description
        )
        playlist = try_playlist_from_simplified(data)
        if playlist is None:
            raise DecodeError(
                f"Created playlist {name!r} could not be converted",
                endpoint=f"users/{user_id.id}/playlists",
            )
        logger.info(
            f"new playlist (name={playlist.name},id={playlist.id.id}) "
            "was successfully created"
        )
        return playlist
