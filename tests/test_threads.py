"""Tests for two-level thread reconstruction.

Tests marker detection, lookback bounds, escaped hrefs and the handling of
entries that cannot be located in the page source.
"""

from __future__ import annotations

import pytest

from lorereader.parser.links import ExtractedLink
from lorereader.parser.threads import (
    DEFAULT_LOOKBACK,
    REPLY_MARKER,
    build_forest,
    has_reply_marker,
    locate_href,
)


def _link(href: str) -> ExtractedLink:
    return ExtractedLink(href=href, subject=href, date_text="")


def _listing(*entries: tuple[str, bool]) -> tuple[list[ExtractedLink], str]:
    """Build links and raw source; each entry is (href, is_reply)."""
    lines = []
    for href, is_reply in entries:
        prefix = "` " if is_reply else ""
        lines.append(f'{prefix}<a href="{href}">{href}</a>')
    return [_link(href) for href, _ in entries], "<pre>\n" + "\n".join(lines) + "\n</pre>"


# =============================================================================
# Marker detection
# =============================================================================


class TestHasReplyMarker:
    """Tests for has_reply_marker()."""

    def test_marker_constant(self) -> None:
        """Test the marker is a backtick followed by a space."""
        assert REPLY_MARKER == "` "
        assert DEFAULT_LOOKBACK == 20

    def test_marker_directly_before(self) -> None:
        source = 'x\n` <a href="m/T/#t">'
        assert has_reply_marker(source, source.find("m/T/#t"))

    def test_no_marker(self) -> None:
        source = 'x\n<a href="m/T/#t">'
        assert not has_reply_marker(source, source.find("m/T/#t"))

    def test_marker_outside_lookback_ignored(self) -> None:
        """Test that a marker further back than the window is not seen."""
        source = "` " + " " * 30 + '<a href="m/T/#t">'
        offset = source.find("m/T/#t")
        assert not has_reply_marker(source, offset, lookback=20)
        assert has_reply_marker(source, offset, lookback=60)

    def test_window_clamped_at_start(self) -> None:
        """Test offsets smaller than the lookback do not wrap around."""
        assert not has_reply_marker('<a href="m">', 9, lookback=20)

    def test_backtick_without_space_is_not_marker(self) -> None:
        source = '`<a href="m/T/#t">'
        assert not has_reply_marker(source, source.find("m/T/#t"))


class TestLocateHref:
    """Tests for locate_href()."""

    def test_first_occurrence(self) -> None:
        source = '<a href="a/T/#t">x</a> <a href="a/T/#t">y</a>'
        assert locate_href(source, "a/T/#t") == source.find("a/T/#t")

    def test_escaped_form_found(self) -> None:
        """Test that decoded hrefs are matched against their escaped source."""
        source = '` <a href="a&amp;b@example.com/T/#t">x</a>'
        assert locate_href(source, "a&b@example.com/T/#t") == source.find("a&amp;b")

    def test_missing_href(self) -> None:
        assert locate_href("<pre></pre>", "nope/T/#t") == -1

    def test_empty_href(self) -> None:
        assert locate_href("<pre></pre>", "") == -1


# =============================================================================
# Forest building
# =============================================================================


class TestBuildForest:
    """Tests for build_forest()."""

    def test_root_reply_reply_root(self) -> None:
        """Test the canonical root/reply/reply/root sequence."""
        links, source = _listing(
            ("m1/T/#t", False),
            ("m2/T/#t", True),
            ("m3/T/#t", True),
            ("m4/T/#t", False),
        )
        forest = build_forest(links, source)

        assert forest.roots == [0, 3]
        assert forest.replies[0] == [1, 2]
        assert forest.replies[3] == []
        assert forest.parents == [None, 0, 0, None]

    def test_deeper_nesting_collapses_to_last_root(self) -> None:
        """Test that consecutive markers all attach to the same root."""
        links, source = _listing(
            ("r/T/#t", False),
            ("a/T/#t", True),
            ("b/T/#t", True),
            ("c/T/#t", True),
        )
        forest = build_forest(links, source)

        assert forest.roots == [0]
        assert forest.replies[0] == [1, 2, 3]
        assert all(forest.replies[i] == [] for i in (1, 2, 3))

    def test_marker_before_any_root_becomes_root(self) -> None:
        """Test a leading reply with no root to attach to."""
        links, source = _listing(("orphan/T/#t", True), ("child/T/#t", True))
        forest = build_forest(links, source)

        assert forest.roots == [0]
        assert forest.parents == [None, 0]

    def test_unlocated_href_is_root(self) -> None:
        """Test that an href absent from the source becomes a root."""
        links, source = _listing(("r/T/#t", False), ("a/T/#t", True))
        links.append(_link("ghost/T/#t"))
        links.append(_link("a/T/#t"))
        forest = build_forest(links, source)

        assert forest.unlocated == [2]
        assert 2 in forest.roots
        # Reply after the unlocated entry attaches to it as the latest root
        assert forest.parents[3] == 2

    def test_repeated_href_uses_first_occurrence(self) -> None:
        """Test that a repeated href inherits the first occurrence's marker."""
        links, source = _listing(("r/T/#t", False), ("r/T/#t", True))
        forest = build_forest(links, source)

        assert forest.roots == [0, 1]

    def test_empty_input(self) -> None:
        forest = build_forest([], "<pre></pre>")
        assert forest.roots == []
        assert forest.parents == []

    @pytest.mark.parametrize("lookback", [1, 2])
    def test_small_lookback(self, lookback: int) -> None:
        """Test that a lookback too short to reach the marker finds no replies."""
        links, source = _listing(("r/T/#t", False), ("a/T/#t", True))
        forest = build_forest(links, source, lookback=lookback)

        assert forest.roots == [0, 1]
