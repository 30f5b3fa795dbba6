"""Navigation engine.

This package combines fetched pages with the window held for a list:
- Page merge/continuation (seq id origins, replace-on-page, end signal)
- Per-list sessions that serialize navigation and swap windows atomically
"""

from lorereader.engine.navigation import NavigationIntent, merge_page, next_seq_origin
from lorereader.engine.session import ListSession

__all__ = [
    "ListSession",
    "NavigationIntent",
    "merge_page",
    "next_seq_origin",
]
