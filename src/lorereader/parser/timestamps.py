"""Timestamp resolution for archive message entries.

Message ids generated by git-send-email start with the send time followed by
a hyphen, e.g. ``20250714070438-1-alice@example.com``. That embedded
YYYYMMDDHHMMSS value is preferred because it does not depend on how the page
was rendered. When an href carries no such value, the date printed next to
the entry ("2025-07-14 07:04") is used, and when neither is usable the
current time is substituted so one odd entry never fails a whole page.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import regex

from lorereader.core.logging import get_logger
from lorereader.parser.models import TimestampSource

logger = get_logger(__name__)

# Regex timeout for untrusted page content (passed at match time)
REGEX_TIMEOUT = 1.0

# A slash (or the start of a relative href), fourteen digits, a hyphen
HREF_TIMESTAMP_PATTERN = regex.compile(r"(?:^|/)(\d{14})-")

HREF_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
TEXT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class ResolvedTimestamp:
    """A resolved instant and which input it came from."""

    value: datetime
    source: TimestampSource


def timestamp_from_href(href: str) -> datetime | None:
    """Parse the YYYYMMDDHHMMSS run embedded in an href.

    Args:
        href: Raw href, relative or absolute

    Returns:
        Aware UTC datetime, or None when the href has no valid timestamp
    """
    try:
        match = HREF_TIMESTAMP_PATTERN.search(href, timeout=REGEX_TIMEOUT)
    except TimeoutError:
        return None
    if match is None:
        return None
    try:
        parsed = datetime.strptime(match.group(1), HREF_TIMESTAMP_FORMAT)
    except ValueError:
        # Fourteen digits that are not a calendar date (e.g. month 13)
        return None
    return parsed.replace(tzinfo=UTC)


def timestamp_from_text(text: str) -> datetime | None:
    """Parse rendered date text in the fixed "YYYY-MM-DD HH:MM" form (UTC)."""
    if not text:
        return None
    try:
        parsed = datetime.strptime(text.strip(), TEXT_TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC)


def resolve_timestamp(
    href: str,
    date_text: str = "",
    now: Clock | None = None,
) -> ResolvedTimestamp:
    """Resolve a message timestamp; never raises.

    Args:
        href: Raw href of the entry
        date_text: Rendered text next to the entry
        now: Clock used for the degraded default (defaults to wall-clock UTC)

    Returns:
        ResolvedTimestamp with the instant and its source
    """
    from_href = timestamp_from_href(href)
    if from_href is not None:
        return ResolvedTimestamp(from_href, "url")

    from_text = timestamp_from_text(date_text)
    if from_text is not None:
        return ResolvedTimestamp(from_text, "text")

    logger.debug("No timestamp in href or date text, using current time", href=href)
    return ResolvedTimestamp((now or utc_now)(), "fallback")
