"""Archive page parsers.

This package turns raw archive HTML into structured results:
- Directory parsing for the archive root page
- List page parsing (thread links, timestamps, two-level forest, cursors)
- Thread page and search result parsing
- Message page metadata

All parsers take an HTML snapshot and return new immutable results; none of
them perform I/O or keep state between calls.
"""

from lorereader.parser.detail import MessageDetail, parse_message_detail
from lorereader.parser.directory import parse_directory
from lorereader.parser.models import (
    MailingList,
    MailingListEntry,
    Message,
    MessagePageResult,
    PageCursors,
    PageWindow,
)
from lorereader.parser.pages import (
    parse_list_page,
    parse_search_results,
    parse_thread_page,
)

__all__ = [
    # Models
    "MailingList",
    "MailingListEntry",
    "Message",
    "MessagePageResult",
    "PageCursors",
    "PageWindow",
    "MessageDetail",
    # Parsers
    "parse_directory",
    "parse_list_page",
    "parse_message_detail",
    "parse_search_results",
    "parse_thread_page",
]
