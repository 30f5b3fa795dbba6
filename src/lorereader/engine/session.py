"""Per-list navigation session.

ListSession is the calling layer around the parsers: it fetches a page,
parses it, merges it with the held window and swaps the result onto the
MailingList in one assignment. Navigations on one session are serialized
with a non-blocking lock, so a second request while one is in flight fails
fast instead of racing the first merge.

Usage:
    from lorereader.engine.session import ListSession

    session = ListSession(client, MailingList("netdev"))
    session.load_latest()
    while not session.mailing_list.end_reached:
        session.load_older()
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from lorereader.archive.client import ArchiveClient
from lorereader.archive.urls import list_url, resolve_cursor
from lorereader.core.errors import NavigationBusyError, NoCursorError
from lorereader.core.logging import get_logger, set_navigation_id
from lorereader.engine.navigation import NavigationIntent, merge_page
from lorereader.parser.models import MailingList, PageWindow
from lorereader.parser.pages import parse_list_page
from lorereader.parser.threads import DEFAULT_LOOKBACK
from lorereader.parser.timestamps import Clock

logger = get_logger(__name__)


class ListSession:
    """Serialized page navigation for one mailing list.

    Attributes:
        client: ArchiveClient used for fetches
        mailing_list: The list whose window is updated
        lookback: Reply-marker lookback passed to the parser
    """

    def __init__(
        self,
        client: ArchiveClient,
        mailing_list: MailingList,
        lookback: int = DEFAULT_LOOKBACK,
        now: Clock | None = None,
    ):
        self.client = client
        self.mailing_list = mailing_list
        self.lookback = lookback
        self._now = now
        self._busy = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def _navigation(self, intent: NavigationIntent) -> Iterator[None]:
        if not self._busy.acquire(blocking=False):
            raise NavigationBusyError(
                f"A navigation is already in progress for '{self.mailing_list.name}'. "
                "Wait for it to finish before paging again.",
                list_name=self.mailing_list.name,
            )
        set_navigation_id(str(uuid.uuid4()))
        try:
            logger.info("Navigation started", list_name=self.mailing_list.name, intent=intent.value)
            yield
        finally:
            set_navigation_id(None)
            self._busy.release()

    def load_url(self, url: str, intent: NavigationIntent) -> PageWindow:
        """Fetch, parse and merge one page, then swap it in.

        Args:
            url: Absolute URL or cursor relative to the list
            intent: Navigation direction

        Returns:
            The new window (also stored on the mailing list)

        Raises:
            NavigationBusyError: If another navigation is in flight
            FetchError: If the fetch fails; the held window is left untouched
        """
        with self._navigation(intent):
            full_url = resolve_cursor(self.client.base_url, self.mailing_list.name, url)
            html = self.client.fetch_url(full_url)
            result = parse_list_page(
                html,
                self.client.base_url,
                self.mailing_list.name,
                lookback=self.lookback,
                now=self._now,
            )
            window = merge_page(self.mailing_list.messages, result, intent)
            self.mailing_list.window = window
            logger.info(
                "Navigation finished",
                list_name=self.mailing_list.name,
                messages=len(window.page.messages),
                start_seq_id=window.start_seq_id,
                end_reached=window.end_reached,
            )
            return window

    def load_latest(self) -> PageWindow:
        """Load the list's latest page, resetting seq ids and the end signal."""
        return self.load_url(
            list_url(self.client.base_url, self.mailing_list.name), NavigationIntent.RESET
        )

    def load_older(self) -> PageWindow:
        """Follow the current page's next (older) cursor."""
        cursor = self.mailing_list.window.page.next_url
        if cursor is None:
            raise NoCursorError(f"No older page for '{self.mailing_list.name}'")
        return self.load_url(cursor, NavigationIntent.FORWARD)

    def load_newer(self) -> PageWindow:
        """Follow the current page's prev (newer) cursor."""
        cursor = self.mailing_list.window.page.prev_url
        if cursor is None:
            raise NoCursorError(f"No newer page for '{self.mailing_list.name}'")
        return self.load_url(cursor, NavigationIntent.BACKWARD)
