"""Thread-entry link extraction.

A list page's thread listing is a <pre> block of anchors, one per message,
whose hrefs end in "/T/#t" (flat view) or "/T/#u" (unified view). Document
order matters: seq ids and thread nesting are both derived from it, so no
anchor is skipped or deduplicated here.
"""

from __future__ import annotations

from dataclasses import dataclass

from lorereader.archive.urls import THREAD_SUFFIXES
from lorereader.parser.document import ArchiveDocument


@dataclass(frozen=True)
class ExtractedLink:
    """A thread anchor and the text found around it.

    Attributes:
        href: Raw href as it appears on the page (relative)
        subject: Title attribute, or the rendered anchor text
        date_text: Rendered text of the anchor's container
    """

    href: str
    subject: str
    date_text: str


def extract_thread_links(document: ArchiveDocument) -> list[ExtractedLink]:
    """Extract every thread-entry anchor from a page, in document order.

    Args:
        document: Parsed archive page

    Returns:
        One ExtractedLink per matching anchor, duplicates included
    """
    links: list[ExtractedLink] = []
    for anchor in document.anchors_with_suffix(THREAD_SUFFIXES):
        # Long subjects are truncated in the anchor text but kept whole in title
        subject = document.attr(anchor, "title").strip() or document.text(anchor)
        links.append(
            ExtractedLink(
                href=document.href(anchor),
                subject=subject,
                date_text=document.container_text(anchor),
            )
        )
    return links
