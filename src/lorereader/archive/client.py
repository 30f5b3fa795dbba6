"""HTTP client for public-inbox archive pages.

This module fetches raw page HTML and turns transport problems into typed
errors. It performs exactly one request per call: retry policy, if any,
belongs to the caller.

Usage:
    from lorereader.archive.client import ArchiveClient

    client = ArchiveClient("https://lore.kernel.org")
    html = client.fetch_list_page("netdev")
    results = client.search("s:mm AND d:1.week.ago..")
"""

from __future__ import annotations

import requests

from lorereader.archive.urls import is_fetchable, list_url, search_url, thread_url
from lorereader.config_schema import DEFAULT_BASE_URL
from lorereader.core.errors import (
    ArchiveConnectionError,
    ArchiveHTTPError,
    BodyDecodeError,
    EmptyBodyError,
    EmptyQueryError,
    InvalidURLError,
)
from lorereader.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "lorereader/0.1"


class ArchiveClient:
    """Fetches pages from a public-inbox archive.

    Attributes:
        base_url: Archive root URL, without trailing slash
        timeout: Per-request timeout in seconds
        session: requests.Session used for connection pooling

    Example:
        client = ArchiveClient(config.archive.base_url, timeout=10)

        directory_html = client.fetch_home_page()
        list_html = client.fetch_list_page("linux-mm")
        older_html = client.fetch_url("https://lore.kernel.org/linux-mm/?t=20250714070438")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ):
        """Initialize the archive client.

        Args:
            base_url: Archive root URL
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header value
            session: Optional pre-configured session (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html",
            }
        )

        logger.debug("ArchiveClient initialized", base_url=self.base_url, timeout=self.timeout)

    def fetch_url(self, url: str) -> str:
        """Fetch a page and return its body as text.

        Args:
            url: Absolute http(s) URL

        Returns:
            The decoded UTF-8 body

        Raises:
            InvalidURLError: If the URL has no http(s) scheme or host
            ArchiveConnectionError: If the request fails in transport
            ArchiveHTTPError: If the status is not 200
            BodyDecodeError: If the body is not valid UTF-8
            EmptyBodyError: If the body is empty
        """
        if not is_fetchable(url):
            logger.error("Invalid URL", url=url)
            raise InvalidURLError(
                f"Cannot fetch '{url}': not an absolute http(s) URL. "
                "Resolve relative cursors with resolve_cursor() first.",
                url=url,
            )

        logger.debug("Fetching page", url=url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Archive request failed", url=url, error=str(e))
            raise ArchiveConnectionError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code != 200:
            logger.error("Archive HTTP error", url=url, status_code=response.status_code)
            raise ArchiveHTTPError(
                f"Archive returned HTTP {response.status_code} for {url}",
                status_code=response.status_code,
                url=url,
            )

        try:
            html = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error("Failed to decode page body", url=url, error=str(e))
            raise BodyDecodeError(f"Response from {url} is not valid UTF-8: {e}", url=url) from e

        if not html:
            logger.warning("Received empty page body", url=url)
            raise EmptyBodyError(f"Archive returned an empty page for {url}", url=url)

        logger.info("Fetched page", url=url, length=len(html))
        return html

    def fetch_home_page(self) -> str:
        """Fetch the archive root page (mailing-list directory)."""
        return self.fetch_url(self.base_url + "/")

    def fetch_list_page(self, list_name: str) -> str:
        """Fetch the latest page of a mailing list."""
        return self.fetch_url(list_url(self.base_url, list_name))

    def fetch_message(self, message_id: str) -> str:
        """Fetch a message page by absolute id or path relative to the archive."""
        if message_id.startswith("http"):
            return self.fetch_url(message_id)
        return self.fetch_url(f"{self.base_url}/{message_id.strip('/')}/")

    def fetch_thread(self, message_id: str) -> str:
        """Fetch the threaded view of the thread containing a message."""
        return self.fetch_url(thread_url(self.base_url, message_id))

    def search(self, query: str, page: int = 1) -> str:
        """Run a search across all lists.

        Args:
            query: Search query (archive query syntax)
            page: 1-based results page

        Raises:
            EmptyQueryError: If the query is blank
        """
        if not query.strip():
            raise EmptyQueryError("Search query cannot be empty")
        return self.fetch_url(search_url(self.base_url, query, page))

    def close(self) -> None:
        self.session.close()
