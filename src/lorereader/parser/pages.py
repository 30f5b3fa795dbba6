"""Page-level parsing: list pages, thread pages and search results.

Each function takes a raw HTML snapshot plus the context needed to build
message ids, runs the extractors over it and returns an immutable
MessagePageResult. None of them raise on malformed markup: a page that
cannot be parsed yields an empty result, which callers must treat as a
possible parse failure rather than proof the list is empty.

Usage:
    from lorereader.parser.pages import parse_list_page

    result = parse_list_page(html, "https://lore.kernel.org", "netdev")
    print(len(result.messages), result.next_url)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import regex

from lorereader.archive.urls import (
    THREAD_SUFFIXES,
    build_message_id,
    build_page_message_id,
)
from lorereader.core.errors import DocumentParseError
from lorereader.core.logging import get_logger
from lorereader.parser.document import ArchiveDocument
from lorereader.parser.links import ExtractedLink, extract_thread_links
from lorereader.parser.models import Message, MessagePageResult, PageCursors
from lorereader.parser.pagination import extract_cursors
from lorereader.parser.threads import DEFAULT_LOOKBACK, ThreadForest, build_forest
from lorereader.parser.timestamps import REGEX_TIMEOUT, Clock, resolve_timestamp

logger = get_logger(__name__)

# Search results are addressed relative to the cross-list inbox
SEARCH_LIST_NAME = "all"

# Search hit blocks: "1. <b><a href="id/">subject</a></b> - by Author @ date"
SEARCH_HIT_MARKER = " - by "
NUMBERED_ITEM_PATTERN = regex.compile(r"^\s*\d+\.")

# Thread pages also link entries through the flat view of other messages
THREAD_VIEW_SEGMENT = "/T/"

MessageIdBuilder = Callable[[str, str, str], str]


def _assemble(
    links: Sequence[ExtractedLink],
    forest: ThreadForest,
    cursors: PageCursors,
    *,
    base_url: str,
    list_name: str,
    starting_seq_id: int,
    now: Clock | None,
    message_id_builder: MessageIdBuilder,
) -> MessagePageResult:
    """Combine extracted links, forest and cursors into a page result."""
    messages: list[Message] = []
    for i, link in enumerate(links):
        resolved = resolve_timestamp(link.href, link.date_text, now=now)
        messages.append(
            Message(
                subject=link.subject,
                content=link.href,
                timestamp=resolved.value,
                message_id=message_id_builder(base_url, list_name, link.href),
                seq_id=starting_seq_id + i,
                list_name=list_name,
                parent=forest.parents[i],
                replies=tuple(forest.replies[i]),
                timestamp_source=resolved.source,
            )
        )

    return MessagePageResult(
        messages=tuple(messages),
        roots=tuple(forest.roots),
        next_url=cursors.next_url,
        prev_url=cursors.prev_url,
        latest_url=cursors.latest_url,
    )


def parse_list_page(
    html: str,
    base_url: str,
    list_name: str,
    starting_seq_id: int = 0,
    lookback: int = DEFAULT_LOOKBACK,
    now: Clock | None = None,
) -> MessagePageResult:
    """Parse a mailing list's thread listing page.

    Args:
        html: Raw HTML of the list page
        base_url: Archive root URL
        list_name: Mailing list name (used in message ids)
        starting_seq_id: seq_id given to the first message
        lookback: Characters searched before each href for the reply marker
        now: Clock for entries without a usable timestamp

    Returns:
        MessagePageResult, empty if the page cannot be parsed
    """
    logger.info(
        "Parsing list page",
        list_name=list_name,
        starting_seq_id=starting_seq_id,
        length=len(html) if isinstance(html, str) else None,
    )
    try:
        document = ArchiveDocument(html)
    except DocumentParseError as e:
        logger.error("Failed to parse list page", list_name=list_name, error=str(e))
        return MessagePageResult.empty()

    links = extract_thread_links(document)
    forest = build_forest(links, document.source, lookback=lookback)
    cursors = extract_cursors(document)

    result = _assemble(
        links,
        forest,
        cursors,
        base_url=base_url,
        list_name=list_name,
        starting_seq_id=starting_seq_id,
        now=now,
        message_id_builder=build_message_id,
    )
    logger.info(
        "Parsed list page",
        list_name=list_name,
        messages=len(result.messages),
        roots=len(result.roots),
        has_next=result.next_url is not None,
    )
    return result


def _dedupe_by_href(links: Sequence[ExtractedLink]) -> list[ExtractedLink]:
    seen: set[str] = set()
    unique: list[ExtractedLink] = []
    for link in links:
        if link.href in seen:
            continue
        seen.add(link.href)
        unique.append(link)
    return unique


def parse_thread_page(
    html: str,
    base_url: str,
    list_name: str,
    starting_seq_id: int = 0,
    lookback: int = DEFAULT_LOOKBACK,
    now: Clock | None = None,
) -> MessagePageResult:
    """Parse a single thread page into the same two-level forest.

    Thread pages link each message more than once, so repeated hrefs are
    dropped here. Absolute and root-relative hrefs are kept as-is when
    building message ids.

    Args:
        html: Raw HTML of the thread page
        base_url: Archive root URL
        list_name: Mailing list the thread was opened from
        starting_seq_id: seq_id given to the first message
        lookback: Characters searched before each href for the reply marker
        now: Clock for entries without a usable timestamp

    Returns:
        MessagePageResult, empty if the page cannot be parsed
    """
    try:
        document = ArchiveDocument(html)
    except DocumentParseError as e:
        logger.error("Failed to parse thread page", list_name=list_name, error=str(e))
        return MessagePageResult.empty()

    links: list[ExtractedLink] = []
    for anchor in document.anchors():
        href = document.href(anchor)
        if not (href.endswith(THREAD_SUFFIXES) or THREAD_VIEW_SEGMENT in href):
            continue
        subject = document.attr(anchor, "title").strip() or document.text(anchor)
        links.append(ExtractedLink(href, subject, document.container_text(anchor)))
    links = _dedupe_by_href(links)

    forest = build_forest(links, document.source, lookback=lookback)
    result = _assemble(
        links,
        forest,
        extract_cursors(document),
        base_url=base_url,
        list_name=list_name,
        starting_seq_id=starting_seq_id,
        now=now,
        message_id_builder=build_page_message_id,
    )
    logger.info("Parsed thread page", list_name=list_name, messages=len(result.messages))
    return result


def _is_search_hit_block(text: str) -> bool:
    if SEARCH_HIT_MARKER in text:
        return True
    try:
        return NUMBERED_ITEM_PATTERN.search(text, timeout=REGEX_TIMEOUT) is not None
    except TimeoutError:
        return False


def _is_search_hit_href(href: str) -> bool:
    return href.endswith("/") and "?" not in href and "#" not in href


def _search_cursors(document: ArchiveDocument) -> PageCursors:
    """Cursors from the search navigation block (<pre id=t>)."""
    next_url: str | None = None
    prev_url: str | None = None
    latest_url: str | None = None

    for anchor in document.select("pre#t a"):
        caption = document.text(anchor).lower()
        href = document.href(anchor)
        rel = document.attr(anchor, "rel").lower()
        if rel == "next" or "next (older)" in caption:
            next_url = href
        elif "prev" in caption or "reverse" in caption:
            prev_url = href
        elif "latest" in caption:
            latest_url = href

    if next_url is None and prev_url is None:
        # Older layouts put paging links outside the navigation block
        for anchor in document.anchors():
            href = document.href(anchor)
            if "?q=" not in href or "o=" not in href:
                continue
            caption = document.text(anchor).lower()
            if "next" in caption:
                next_url = href
            elif "prev" in caption or "reverse" in caption:
                prev_url = href

    return PageCursors(next_url=next_url, prev_url=prev_url, latest_url=latest_url)


def parse_search_results(
    html: str,
    base_url: str,
    starting_seq_id: int = 0,
    now: Clock | None = None,
) -> MessagePageResult:
    """Parse a search results page.

    Hits are not threaded: every message is a root. Timestamps come from the
    href only, since hit lines print dates in a free-form layout.

    Args:
        html: Raw HTML of the search page
        base_url: Archive root URL
        starting_seq_id: seq_id given to the first hit
        now: Clock for hits without a timestamp in the href

    Returns:
        MessagePageResult, empty if the page cannot be parsed
    """
    try:
        document = ArchiveDocument(html)
    except DocumentParseError as e:
        logger.error("Failed to parse search results", error=str(e))
        return MessagePageResult.empty()

    links: list[ExtractedLink] = []
    for pre in document.select("pre"):
        if pre.get("id") == "t" or not _is_search_hit_block(pre.get_text()):
            continue
        for anchor in pre.find_all("a", href=True):
            href = document.href(anchor)
            if _is_search_hit_href(href):
                subject = document.attr(anchor, "title").strip() or document.text(anchor)
                links.append(ExtractedLink(href, subject, ""))

    for link in extract_thread_links(document):
        links.append(ExtractedLink(link.href, link.subject, ""))
    links = _dedupe_by_href(links)

    forest = ThreadForest(
        parents=[None] * len(links),
        replies=[[] for _ in links],
        roots=list(range(len(links))),
    )
    result = _assemble(
        links,
        forest,
        _search_cursors(document),
        base_url=base_url,
        list_name=SEARCH_LIST_NAME,
        starting_seq_id=starting_seq_id,
        now=now,
        message_id_builder=build_page_message_id,
    )
    logger.info(
        "Parsed search results",
        hits=len(result.messages),
        has_next=result.next_url is not None,
    )
    return result
