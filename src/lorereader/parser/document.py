"""HTML document adapter over BeautifulSoup.

The parsers only need a handful of capabilities from a parsed page:
anchor selection by href suffix, anchor text/attributes, the text around an
anchor, <pre> block text, and the raw unparsed source for offset lookups.
This module is the single place that touches BeautifulSoup.
"""

from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from lorereader.core.errors import DocumentParseError

# Parser backend; html.parser ships with Python and keeps attribute order
HTML_PARSER = "html.parser"


def collapse_whitespace(text: str) -> str:
    """Join runs of whitespace into single spaces and strip the ends."""
    return " ".join(text.split())


class ArchiveDocument:
    """A parsed archive page plus its raw source text.

    Attributes:
        source: The raw HTML exactly as received
    """

    def __init__(self, html: str):
        """Parse page markup.

        Args:
            html: Raw HTML text

        Raises:
            DocumentParseError: If the markup cannot be parsed
        """
        if not isinstance(html, str):
            raise DocumentParseError(
                f"Expected HTML text, got {type(html).__name__}. "
                "Decode the response body before parsing."
            )
        try:
            self._soup = BeautifulSoup(html, HTML_PARSER)
        except (ParserRejectedMarkup, AssertionError, ValueError) as e:
            raise DocumentParseError(f"Failed to parse HTML document: {e}") from e
        self.source = html

    def anchors(self) -> list[Tag]:
        """Every <a> element, in document order."""
        return self._soup.find_all("a")

    def anchors_with_suffix(self, suffixes: Iterable[str]) -> list[Tag]:
        """<a href> elements whose href ends with any suffix, in document order."""
        suffixes = tuple(suffixes)
        return [
            a
            for a in self._soup.find_all("a", href=True)
            if self.href(a).endswith(suffixes)
        ]

    def select(self, selector: str) -> list[Tag]:
        """CSS selection, for page types that need more than suffix matching."""
        return self._soup.select(selector)

    def preformatted_blocks(self) -> list[str]:
        """Rendered text of every <pre> element, newlines preserved."""
        return [pre.get_text() for pre in self._soup.find_all("pre")]

    def text_content(self) -> str:
        """Rendered text of the whole document."""
        return self._soup.get_text()

    def title(self) -> str:
        element = self._soup.find("title")
        return collapse_whitespace(element.get_text()) if element else ""

    @staticmethod
    def href(anchor: Tag) -> str:
        value = anchor.get("href", "")
        return value if isinstance(value, str) else " ".join(value)

    @staticmethod
    def attr(anchor: Tag, name: str) -> str:
        value = anchor.get(name, "")
        # Multi-valued attributes such as rel come back as lists
        return value if isinstance(value, str) else " ".join(value)

    @staticmethod
    def text(anchor: Tag) -> str:
        return collapse_whitespace(anchor.get_text())

    @staticmethod
    def container_text(anchor: Tag) -> str:
        """Rendered text of the anchor's immediate parent element."""
        parent = anchor.parent
        if parent is None:
            return ""
        return parent.get_text().strip()
