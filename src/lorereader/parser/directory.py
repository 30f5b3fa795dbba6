"""Mailing-list directory parsing.

The archive root page lists every inbox inside <pre> blocks, one per line,
as "description - name" with some entries wrapped in asterisks::

    * Linux Kernel Mailing List - linux-kernel *
    * net-dev - Networking development *
"""

from __future__ import annotations

from lorereader.core.errors import DocumentParseError
from lorereader.core.logging import get_logger
from lorereader.parser.document import ArchiveDocument
from lorereader.parser.models import MailingListEntry

logger = get_logger(__name__)

FIELD_SEPARATOR = " - "


def _is_list_name(field: str) -> bool:
    return bool(field) and not any(ch.isspace() for ch in field)


def parse_directory_line(line: str) -> MailingListEntry | None:
    """Parse one directory line; None when it has no separator.

    Only the first two fields are used, normally description then name.
    Some mirrors print "name - description" instead; when exactly one of
    the two fields is a single token, that one is the name.
    """
    line = line.strip()
    if not line:
        return None
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < 2:
        return None
    first = parts[0].replace("*", "").strip()
    second = parts[1].replace("*", "").strip()
    if _is_list_name(first) and not _is_list_name(second):
        return MailingListEntry(name=first, description=second)
    return MailingListEntry(name=second, description=first)


def parse_directory(html: str) -> list[MailingListEntry]:
    """Parse the archive root page into directory entries sorted by name.

    Sorting is case-sensitive and stable; duplicate names are kept.

    Args:
        html: Raw HTML of the archive root page

    Returns:
        Directory entries, or an empty list if the page cannot be parsed
    """
    try:
        document = ArchiveDocument(html)
    except DocumentParseError as e:
        logger.error("Failed to parse directory page", error=str(e))
        return []

    # Plain-text snapshots of the directory carry no <pre> wrapper
    blocks = document.preformatted_blocks() or [document.text_content()]

    entries: list[MailingListEntry] = []
    for block in blocks:
        for line in block.splitlines():
            entry = parse_directory_line(line)
            if entry is not None:
                entries.append(entry)

    entries.sort(key=lambda entry: entry.name)
    logger.info("Parsed mailing list directory", lists=len(entries))
    return entries
