"""URL construction rules for public-inbox archives.

These must match the archive's own URL layout exactly:

    {base}/{list}                      list page (latest messages)
    {base}/{list}/{path}               message permalink
    {base}/all/{thread_id}/t/          thread view, threaded order
    {base}/all/?q={query}[&page=n]     search across all lists

Base URLs are expected without a trailing slash; a trailing slash is
tolerated and dropped.
"""

from urllib.parse import urlencode, urlsplit

# Anchor suffixes marking an entry in a thread listing ("flat" and "unified")
THREAD_SUFFIX_FLAT = "/T/#t"
THREAD_SUFFIX_UNIFIED = "/T/#u"
THREAD_SUFFIXES = (THREAD_SUFFIX_FLAT, THREAD_SUFFIX_UNIFIED)


def _base(base_url: str) -> str:
    return base_url.rstrip("/")


def is_absolute(url: str) -> bool:
    """Return True for URLs that already carry a scheme."""
    return url.startswith("http")


def list_url(base_url: str, list_name: str) -> str:
    """URL of a mailing list's latest page."""
    return f"{_base(base_url)}/{list_name}"


def permalink_base(base_url: str, list_name: str, path: str) -> str:
    """Permalink for a path relative to a list, slashes trimmed from the path."""
    return f"{_base(base_url)}/{list_name}/{path.strip('/')}"


def strip_thread_suffix(url: str) -> str:
    """Remove one trailing /T/#u or /T/#t marker."""
    for suffix in THREAD_SUFFIXES:
        if url.endswith(suffix):
            return url[: -len(suffix)]
    return url


def build_message_id(base_url: str, list_name: str, href: str) -> str:
    """Build the deterministic message key for a thread anchor href.

    Args:
        base_url: Archive root URL
        list_name: Mailing list name
        href: Raw relative href from the list page

    Returns:
        Absolute message URL without the thread-view suffix

    Example:
        >>> build_message_id("https://lore.kernel.org", "loongarch",
        ...                  "20250714070438.2399153-1-chenhuacai@loongson.cn/T/#u")
        'https://lore.kernel.org/loongarch/20250714070438.2399153-1-chenhuacai@loongson.cn'
    """
    return strip_thread_suffix(permalink_base(base_url, list_name, href))


def build_page_message_id(base_url: str, list_name: str, href: str) -> str:
    """Message key for hrefs on thread and search pages.

    Those pages mix absolute links, root-relative links ("/all/...") and
    list-relative links, so each form is resolved separately.
    """
    if is_absolute(href):
        full = href
    elif href.startswith("/"):
        full = _base(base_url) + href
    else:
        full = permalink_base(base_url, list_name, href)
    return strip_thread_suffix(full)


def thread_id_for(message_id: str) -> str:
    """Last path component of a message identifier containing a slash.

    Empty components (trailing slashes) are ignored.
    """
    if "/" not in message_id:
        return message_id
    parts = [part for part in message_id.split("/") if part]
    return parts[-1] if parts else message_id


def thread_url(base_url: str, message_id: str) -> str:
    """Threaded-order view of the thread containing a message."""
    return f"{_base(base_url)}/all/{thread_id_for(message_id)}/t/"


def search_url(base_url: str, query: str, page: int = 1) -> str:
    """Search URL across all lists; the page parameter is only sent past page 1."""
    params: dict[str, str] = {"q": query}
    if page > 1:
        params["page"] = str(page)
    return f"{_base(base_url)}/all/?{urlencode(params)}"


def resolve_cursor(base_url: str, list_name: str, cursor: str) -> str:
    """Turn a pagination cursor into a fetchable URL.

    Absolute cursors are returned unchanged; relative ones (for example
    "?t=20250714070438") are resolved against the list.
    """
    if is_absolute(cursor):
        return cursor
    return permalink_base(base_url, list_name, cursor)


def is_fetchable(url: str) -> bool:
    """True when a URL has an http(s) scheme and a host."""
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)
