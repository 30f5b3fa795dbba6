"""Two-level thread reconstruction from a thread listing.

The archive renders thread depth typographically, not in the DOM. In the
flat listing a reply's anchor is preceded by a backtick and a space::

    <a href="20250714070438-1-a@b/T/#t">[PATCH 0/3] mm: ...</a>
     ` <a href="20250714070439-2-a@b/T/#t">[PATCH 1/3] mm: ...</a>

Only the presence of the marker is used: an entry is either a root or a
direct reply of the most recent root before it. Deeper nesting in the
archive collapses onto that root.

Usage:
    from lorereader.parser.threads import build_forest

    forest = build_forest(links, document.source)
    for root in forest.roots:
        print(links[root].subject, [links[i].subject for i in forest.replies[root]])
"""

from __future__ import annotations

import html
from collections.abc import Sequence
from dataclasses import dataclass, field

from lorereader.core.logging import get_logger
from lorereader.parser.links import ExtractedLink

logger = get_logger(__name__)

# Backtick + space placed by the archive renderer before a nested reply
REPLY_MARKER = "` "

# Characters before an href searched for the marker
DEFAULT_LOOKBACK = 20


@dataclass
class ThreadForest:
    """Arena-indexed forest over a list of extracted links.

    Attributes:
        parents: Root index for each reply, None for roots
        replies: Reply indices per entry (empty for replies)
        roots: Root indices in document order
        unlocated: Indices whose href could not be found in the source
    """

    parents: list[int | None] = field(default_factory=list)
    replies: list[list[int]] = field(default_factory=list)
    roots: list[int] = field(default_factory=list)
    unlocated: list[int] = field(default_factory=list)


def locate_href(source: str, href: str) -> int:
    """Offset of an href's first occurrence in raw page source, or -1.

    The parsed href has entities decoded, so the escaped form is tried
    when the literal is not present.
    """
    if not href:
        return -1
    offset = source.find(href)
    if offset < 0:
        escaped = html.escape(href, quote=False)
        if escaped != href:
            offset = source.find(escaped)
    return offset


def has_reply_marker(source: str, offset: int, lookback: int = DEFAULT_LOOKBACK) -> bool:
    """Whether the marker occurs in the lookback window before offset."""
    window = source[max(0, offset - lookback) : offset]
    return REPLY_MARKER in window


def build_forest(
    links: Sequence[ExtractedLink],
    source: str,
    lookback: int = DEFAULT_LOOKBACK,
) -> ThreadForest:
    """Build the two-level forest for links in document order.

    Args:
        links: Extracted thread links, in document order
        source: Raw, unparsed page text
        lookback: Characters before each href to inspect for the marker

    Returns:
        ThreadForest with parent/reply indices
    """
    forest = ThreadForest(
        parents=[None] * len(links),
        replies=[[] for _ in links],
    )
    last_root: int | None = None

    for i, link in enumerate(links):
        offset = locate_href(source, link.href)
        if offset < 0:
            logger.error("Thread link not found in page source, treating as root", href=link.href)
            forest.unlocated.append(i)
            is_reply = False
        else:
            is_reply = has_reply_marker(source, offset, lookback)

        if is_reply and last_root is not None:
            forest.parents[i] = last_root
            forest.replies[last_root].append(i)
            continue

        if is_reply:
            logger.debug("Reply marker before any root, treating as root", href=link.href)
        forest.roots.append(i)
        last_root = i

    return forest
