"""Message page metadata.

Reads what the archive prints above a message: the "@ 2025-07-30 15:03
Author" line, the header block at the top of the message (To, Cc, From,
Subject, Date), and the permalink/raw links. This is a reading of rendered
text, not MIME parsing; the raw mbox is available at ``raw_url`` for
callers that need the real headers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from lorereader.core.errors import DocumentParseError
from lorereader.core.logging import get_logger
from lorereader.parser.document import ArchiveDocument
from lorereader.parser.timestamps import Clock, timestamp_from_text, utc_now

logger = get_logger(__name__)

# Upper bound on body text kept from a message page
MAX_BODY_LENGTH = 50_000


@dataclass
class MessageDetail:
    """Metadata and body text of one message page.

    Attributes:
        message_id: Key of the message the page was fetched for
        subject: Page title, else the Subject header
        author: Display name, or bare address when no name is given
        date: Send time from the "@ date author" line, else the Date header,
            else fetch time
        recipients: Addresses from To:
        cc_recipients: Addresses from Cc:
        permalink: href of the permalink anchor
        raw_url: href of the raw message anchor
        body: Text of the first <pre> block
    """

    message_id: str
    subject: str = ""
    author: str = ""
    date: datetime | None = None
    recipients: list[str] = field(default_factory=list)
    cc_recipients: list[str] = field(default_factory=list)
    permalink: str = ""
    raw_url: str = ""
    body: str = ""


def parse_address_list(value: str) -> list[str]:
    """Split a comma-separated header value into stripped, non-empty entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


def author_from_from_header(value: str) -> str:
    """Name part of "Name <addr>", or the address when the name is empty."""
    value = value.strip()
    start = value.find("<")
    end = value.rfind(">")
    if start < 0 or end < start:
        return value
    name = value[:start].strip().strip('"')
    return name or value[start + 1 : end].strip()


def _header_value(content: str, header: str) -> str | None:
    """First non-empty value of a header in the header block of plain text.

    The header block ends at the first blank line. Folded continuation
    lines (leading whitespace) are joined onto the value.
    """
    prefix = header.lower() + ":"
    lines = content.strip().splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            break
        if not stripped.lower().startswith(prefix):
            continue
        parts = [stripped[len(prefix) :].strip()]
        for follow in lines[i + 1 :]:
            if not follow[:1].isspace() or not follow.strip():
                break
            parts.append(follow.strip())
        value = " ".join(part for part in parts if part)
        if value:
            return value
    return None


def extract_header_subject(content: str) -> str | None:
    return _header_value(content, "Subject")


def extract_header_author(content: str) -> str | None:
    value = _header_value(content, "From")
    return author_from_from_header(value) if value else None


def extract_header_date(content: str) -> str | None:
    return _header_value(content, "Date")


def date_from_header(value: str) -> datetime | None:
    """Parse an RFC 2822 Date header value as aware UTC, or None."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _stamp_line(line: str) -> tuple[datetime, str] | None:
    """Date and author from an "@ 2025-07-30 15:03 Ulrich Hecht" line."""
    parts = line.split()
    if len(parts) < 4 or parts[0] != "@":
        return None
    parsed = timestamp_from_text(f"{parts[1]} {parts[2]}")
    if parsed is None:
        return None
    return parsed, " ".join(parts[3:])


def _find_stamp_line(blocks: list[str]) -> tuple[datetime, str] | None:
    for block in blocks:
        for line in block.splitlines():
            found = _stamp_line(line.strip())
            if found is not None:
                return found
    return None


def _read_header_block(detail: MessageDetail, content: str) -> None:
    """Fill gaps in detail from the headers printed above the body.

    Only the block before the first blank line is read, so trailers such
    as "Cc: stable@vger.kernel.org" inside a patch never count.
    """
    to = _header_value(content, "To")
    if to:
        detail.recipients = parse_address_list(to)
    cc = _header_value(content, "Cc")
    if cc:
        detail.cc_recipients = parse_address_list(cc)
    if not detail.subject:
        detail.subject = extract_header_subject(content) or ""
    if not detail.author:
        detail.author = extract_header_author(content) or ""
    if detail.date is None:
        date_value = extract_header_date(content)
        if date_value:
            detail.date = date_from_header(date_value)


def parse_message_detail(
    html: str,
    message_id: str,
    now: Clock | None = None,
) -> MessageDetail | None:
    """Parse a message page.

    Args:
        html: Raw HTML of the message page
        message_id: Key of the message (stored on the result)
        now: Clock used when the page prints no date

    Returns:
        MessageDetail, or None if the page cannot be parsed
    """
    try:
        document = ArchiveDocument(html)
    except DocumentParseError as e:
        logger.error("Failed to parse message page", message_id=message_id, error=str(e))
        return None

    detail = MessageDetail(message_id=message_id, subject=document.title())

    blocks = document.preformatted_blocks()
    stamp = _find_stamp_line(blocks)
    if stamp is not None:
        detail.date, detail.author = stamp
    if blocks:
        _read_header_block(detail, blocks[0])
        detail.body = blocks[0].strip()[:MAX_BODY_LENGTH]

    for anchor in document.anchors():
        href = document.href(anchor)
        caption = document.text(anchor).lower()
        if not detail.permalink and ("permalink" in href or caption == "permalink"):
            detail.permalink = href
        if not detail.raw_url and ("raw" in href or caption == "raw"):
            detail.raw_url = href

    if detail.date is None:
        detail.date = (now or utc_now)()

    logger.debug(
        "Parsed message page",
        message_id=message_id,
        author=detail.author,
        recipients=len(detail.recipients),
    )
    return detail
