"""Archive access module.

Provides URL construction for public-inbox archives and a small HTTP client
that fetches raw page HTML with typed failures.

Usage:
    from lorereader.archive import ArchiveClient, resolve_cursor

    client = ArchiveClient("https://lore.kernel.org")
    html = client.fetch_url(resolve_cursor(client.base_url, "netdev", "?t=20250714070438"))
"""

from lorereader.archive.client import ArchiveClient
from lorereader.archive.urls import (
    build_message_id,
    list_url,
    resolve_cursor,
    search_url,
    thread_id_for,
    thread_url,
)

__all__ = [
    "ArchiveClient",
    "build_message_id",
    "list_url",
    "resolve_cursor",
    "search_url",
    "thread_id_for",
    "thread_url",
]
