"""Walks paginated Web API responses to completion.

Hey future me - the walker only ever looks at `items` and `next`. Offset pages,
cursor pages and the followed-artists page (cursor page wrapped under "artists")
all look the same from here; the caller's fetch_next decides how to GET and unwrap
the next page. Don't special-case page types in here.

Failure of any page aborts the walk and the error propagates. We don't return a
half-collected list, a truncated playlist looks exactly like a complete one to the
caller and that's worse than an error.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", covariant=True)


class Pageable(Protocol[T]):
    """Anything with an ordered `items` list and an optional `next` URL."""

    @property
    def items(self) -> Sequence[T]: ...

    @property
    def next(self) -> str | None: ...


async def collect_all[I](
    first_page: Pageable[I],
    fetch_next: Callable[[str], Awaitable[Pageable[I]]],
) -> list[I]:
    """Collect the items of a first page and every page after it.

    Args:
        first_page: Already fetched first page
        fetch_next: Fetches the page behind a `next` URL

    Returns:
        All items in upstream page order, within-page order preserved
    """
    items = list(first_page.items)
    next_url = first_page.next
    pages = 1

    while next_url is not None:
        page = await fetch_next(next_url)
        items.extend(page.items)
        next_url = page.next
        pages += 1

    if pages > 1:
        logger.debug(f"Collected {len(items)} items from {pages} pages")
    return items


__all__ = ["Pageable", "collect_all"]
