"""Merge, dedup and sort policies for collections the Web API returns messy.

Both functions are pure and run on fully collected lists (after the page walk).
"""

from collections.abc import Iterable
from typing import Protocol

from spotlink.domain.entities import Album


class Named(Protocol):
    @property
    def name(self) -> str: ...


def dedup_recently_played[N: Named](tracks: Iterable[N]) -> list[N]:
    """Keep the first occurrence of each distinct track name, in received order.

    Name, not id: the API re-issues the same logical track under different ids
    (relinking, re-releases), and the user doesn't care which one they played.
    """
    seen: set[str] = set()
    kept: list[N] = []
    for track in tracks:
        if track.name in seen:
            continue
        seen.add(track.name)
        kept.append(track)
    return kept


def merge_artist_albums(singles: Iterable[Album], albums: Iterable[Album]) -> list[Album]:
    """Merge an artist's singles and albums into one newest-first discography.

    Sorted ascending by release date (stable), then scanned from the newest end
    keeping the first album seen per name. For albums sharing a name the latest
    release wins. Release dates that don't compare raise TypeError: that's bad
    data, not something to paper over.
    """
    merged = sorted([*albums, *singles], key=lambda a: a.release_date)

    seen_names: set[str] = set()
    result: list[Album] = []
    for album in reversed(merged):
        if album.name in seen_names:
            continue
        seen_names.add(album.name)
        result.append(album)
    return result


__all__ = ["dedup_recently_played", "merge_artist_albums"]
