"""Page merge and continuation logic.

Navigation replaces the visible window on every page: the fresh page is
renumbered so its seq ids continue from (or precede) the window being
replaced, and the old messages are dropped. Nothing is accumulated across
pages.

    held [5, 6, 7] --FORWARD--> new page renumbered [8, 9, 10]
    held [5, 6, 7] --BACKWARD-> new page renumbered [4, 5, 6]
    held anything  --RESET----> new page renumbered [0, 1, 2]
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from lorereader.core.logging import get_logger
from lorereader.parser.models import Message, MessagePageResult, PageWindow

logger = get_logger(__name__)


class NavigationIntent(Enum):
    """Direction of a page navigation."""

    FORWARD = "older"
    BACKWARD = "newer"
    RESET = "latest"


def next_seq_origin(held: Sequence[Message], intent: NavigationIntent) -> int:
    """seq_id for the first message of the next window.

    Args:
        held: Messages in the window being replaced
        intent: Navigation direction

    Returns:
        max + 1 going forward, min - 1 going backward, 0 on reset or
        when nothing is held
    """
    if intent is NavigationIntent.RESET or not held:
        return 0
    if intent is NavigationIntent.FORWARD:
        return max(m.seq_id for m in held) + 1
    return min(m.seq_id for m in held) - 1


def merge_page(
    held: Sequence[Message],
    result: MessagePageResult,
    intent: NavigationIntent,
) -> PageWindow:
    """Build the window that replaces the held messages.

    Args:
        held: Messages currently shown for the list
        result: Freshly parsed page
        intent: Navigation direction that produced the page

    Returns:
        PageWindow with the renumbered page and the end-of-pagination flag
    """
    start = next_seq_origin(held, intent)
    window = PageWindow(
        page=result.renumbered(start),
        start_seq_id=start,
        end_reached=result.next_url is None,
    )
    logger.debug(
        "Merged page",
        intent=intent.value,
        held=len(held),
        messages=len(result.messages),
        start_seq_id=start,
        end_reached=window.end_reached,
    )
    return window
