"""Generic pagination capability shared by all paginated upstream collections."""

from typing import Protocol, TypeVar

import structlog

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

logger = structlog.get_logger(__name__)


class PaginatedCursor(Protocol[T_co]):
    """A stateful handle over one logical collection spread across pages."""

    async def next(self) -> list[T_co]:
        """Fetch the next page of items.

        Raises:
            ExhaustedCursorError: If the last page has already been consumed.
        """
        ...

    def is_exhausted(self) -> bool:
        """Return True once the last page has been consumed."""
        ...


async def drain_all(cursor: PaginatedCursor[T]) -> list[T]:
    """Fetch every remaining page of a cursor and concatenate them in page order.

    The first failing page aborts the walk and its error propagates; items from
    pages already fetched are discarded with the local list.
    """
    items: list[T] = []
    pages = 0
    while not cursor.is_exhausted():
        items.extend(await cursor.next())
        pages += 1
    logger.debug("Drained paginated cursor", pages=pages, item_count=len(items))
    return items
