"""Pagination cursor extraction.

Archive pages link to neighbouring pages with captions such as
"next (older)", "prev (newer)" and "latest". The href of each is kept as an
opaque cursor; resolve it with lorereader.archive.urls.resolve_cursor.
"""

from __future__ import annotations

from lorereader.core.logging import get_logger
from lorereader.parser.document import ArchiveDocument
from lorereader.parser.models import PageCursors

logger = get_logger(__name__)

NEXT_CAPTION = "next (older)"
PREV_CAPTION = "prev (newer)"
LATEST_CAPTION = "latest"


def extract_cursors(document: ArchiveDocument) -> PageCursors:
    """Scan every anchor for navigation captions.

    Captions are matched case-insensitively as substrings. When several
    anchors match the same caption the last one wins.

    Args:
        document: Parsed archive page

    Returns:
        PageCursors with any cursors found
    """
    next_url: str | None = None
    prev_url: str | None = None
    latest_url: str | None = None

    for anchor in document.anchors():
        caption = document.text(anchor).lower()
        href = document.href(anchor)
        if NEXT_CAPTION in caption:
            next_url = href
        if PREV_CAPTION in caption:
            prev_url = href
        if LATEST_CAPTION in caption:
            latest_url = href

    logger.debug(
        "Pagination cursors",
        next_url=next_url,
        prev_url=prev_url,
        latest_url=latest_url,
    )
    return PageCursors(next_url=next_url, prev_url=prev_url, latest_url=latest_url)
