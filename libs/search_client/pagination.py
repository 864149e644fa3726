"""Fixed-size page arithmetic for search results."""

from typing import Optional

PAGE_SIZE = 20


def page_offset(page_number: Optional[int] = None, page_size: int = PAGE_SIZE) -> int:
    """Return the ``from`` offset for a 1-based page number.

    Pages at or below 1 (or no page at all) start at 0. There is no upper
    bound; a page past the last match simply returns no documents.
    """
    if page_number is None or page_number <= 1:
        return 0
    return (page_number - 1) * page_size
