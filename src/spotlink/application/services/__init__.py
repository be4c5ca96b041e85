"""Application services - context assembly, library reads, radio and playlist writes."""

from spotlink.application.services.context_service import ContextService, SearchResult
from spotlink.application.services.library_service import LibraryService
from spotlink.application.services.playlist_service import (
    PlaylistService,
    insert_before_position,
)
from spotlink.application.services.radio_service import RadioService
from spotlink.application.services.reconciler import (
    dedup_recently_played,
    merge_artist_albums,
)

__all__ = [
    "ContextService",
    "LibraryService",
    "PlaylistService",
    "RadioService",
    "SearchResult",
    "dedup_recently_played",
    "insert_before_position",
    "merge_artist_albums",
]
