"""Helpers for walking Protean query sets."""

from collections.abc import Iterator

DEFAULT_BATCH_SIZE = 100


def scan(queryset, batch_size: int = DEFAULT_BATCH_SIZE) -> Iterator:
    """Yield every record matched by ``queryset``, fetching it page by page.

    Protean query sets return a bounded page per ``all()`` call, so callers
    that must touch every row (cleanups, statistics) walk the pages here.
    """
    offset = 0
    while True:
        items = queryset.offset(offset).limit(batch_size).all().items
        yield from items
        if len(items) < batch_size:
            return
        offset += batch_size
