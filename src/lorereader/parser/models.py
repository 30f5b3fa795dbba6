"""Result types produced by the archive page parsers.

Threads are stored as an arena: a page result owns a tuple of messages in
document order, and parent/reply links are indices into that tuple. Nothing
holds a pointer to another message, so results are immutable, cheap to
renumber and trivially serializable.

Usage:
    from lorereader.parser.pages import parse_list_page

    result = parse_list_page(html, base_url, "netdev")
    for index in result.roots:
        root = result.messages[index]
        print(root.seq_id, root.subject)
        for reply in result.replies_of(index):
            print("   ", reply.seq_id, reply.subject)
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

TimestampSource = Literal["url", "text", "fallback"]


@dataclass(frozen=True)
class MailingListEntry:
    """One row of the archive's mailing-list directory."""

    name: str
    description: str


@dataclass(frozen=True)
class Message:
    """A message entry from a thread listing.

    Attributes:
        subject: Rendered subject of the entry
        content: Raw relative href the entry was parsed from
        timestamp: Resolved UTC instant
        message_id: Deterministic key (absolute URL without /T/ suffix)
        seq_id: Display order within the current window
        list_name: Name of the mailing list the page belongs to
        parent: Arena index of the root this message replies to
        replies: Arena indices of direct replies, in document order
        timestamp_source: Where the timestamp came from ("url", "text", "fallback")
    """

    subject: str
    content: str
    timestamp: datetime
    message_id: str
    seq_id: int
    list_name: str
    parent: int | None = None
    replies: tuple[int, ...] = ()
    timestamp_source: TimestampSource = "url"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def thread_id(self) -> str:
        """Last path component of the message id (the archive Message-ID)."""
        return self.message_id.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class PageCursors:
    """Pagination targets found on a page; each is optional."""

    next_url: str | None = None
    prev_url: str | None = None
    latest_url: str | None = None


@dataclass(frozen=True)
class MessagePageResult:
    """Ordered messages, two-level thread forest and cursors for one page.

    Attributes:
        messages: All messages in document order (the arena)
        roots: Arena indices of root messages, in document order
        next_url: Cursor to the next (older) page
        prev_url: Cursor to the previous (newer) page
        latest_url: Cursor to the latest page
    """

    messages: tuple[Message, ...] = ()
    roots: tuple[int, ...] = ()
    next_url: str | None = None
    prev_url: str | None = None
    latest_url: str | None = None

    @staticmethod
    def empty() -> MessagePageResult:
        """Result returned when a page could not be parsed."""
        return MessagePageResult()

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def root_messages(self) -> list[Message]:
        return [self.messages[i] for i in self.roots]

    @property
    def cursors(self) -> PageCursors:
        return PageCursors(
            next_url=self.next_url,
            prev_url=self.prev_url,
            latest_url=self.latest_url,
        )

    def _index(self, message: Message | int) -> int:
        if isinstance(message, int):
            return message
        # Repeated hrefs share a message_id; seq_id tells the copies apart
        try:
            return self.messages.index(message)
        except ValueError:
            raise KeyError(message.message_id) from None

    def replies_of(self, message: Message | int) -> list[Message]:
        """Direct replies of a message, in document order."""
        return [self.messages[i] for i in self.messages[self._index(message)].replies]

    def parent_of(self, message: Message | int) -> Message | None:
        parent = self.messages[self._index(message)].parent
        return None if parent is None else self.messages[parent]

    def seq_ids(self) -> list[int]:
        return [m.seq_id for m in self.messages]

    def renumbered(self, start: int) -> MessagePageResult:
        """Copy with seq ids reassigned contiguously from start, in document order.

        The forest is index based, so only seq_id changes.
        """
        messages = tuple(
            dataclasses.replace(message, seq_id=start + i)
            for i, message in enumerate(self.messages)
        )
        return dataclasses.replace(self, messages=messages)


@dataclass(frozen=True)
class PageWindow:
    """The page currently shown for a list, after merge renumbering.

    Attributes:
        page: Renumbered page result
        start_seq_id: seq_id given to the first message
        end_reached: True when the page has no next (older) cursor
    """

    page: MessagePageResult = field(default_factory=MessagePageResult)
    start_seq_id: int = 0
    end_reached: bool = False


@dataclass
class MailingList:
    """A mailing list and the window of messages currently held for it.

    The window is replaced with a single assignment after each successful
    navigation. Pin state belongs to the surrounding application; it is
    carried here so callers can keep one object per list.
    """

    name: str
    description: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    is_pinned: bool = False
    window: PageWindow = field(default_factory=PageWindow)

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.window.page.messages

    @property
    def end_reached(self) -> bool:
        return self.window.end_reached

    @property
    def cursors(self) -> PageCursors:
        return self.window.page.cursors

    @staticmethod
    def from_entry(entry: MailingListEntry) -> MailingList:
        return MailingList(name=entry.name, description=entry.description)
