"""Pytest fixtures and configuration for lorereader tests.

Provides sample archive pages, a fixed clock, and config isolation.
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Generator

import pytest

from lorereader.config import reset_config

BASE_URL = "https://lore.kernel.org"

FIXED_NOW = datetime(2030, 1, 1, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset the config singleton before each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from a developer's real config file."""
    monkeypatch.delenv("LOREREADER_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock returning FIXED_NOW, for entries without a usable timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def list_page_html() -> str:
    """A netdev list page: three threads, three replies, full pagination."""
    return """<html>
<head><title>netdev archive</title></head>
<body>
<pre><a href="../">all lists</a> / <a href="./">netdev</a></pre>
<hr><pre>
<a href="20250714070438-1-alice@example.com/T/#t">[PATCH net-next 0/2] net: add foo offload</a>
 2025-07-14  7:04 UTC  (3+ messages)
` <a href="20250714070439-2-alice@example.com/T/#t">[PATCH net-next 1/2] net: foo core</a>
` <a href="20250714070440-3-alice@example.com/T/#t">[PATCH net-next 2/2] net: foo driver</a>

<a href="20250713120000-1-bob@example.org/T/#t">[PATCH net] tcp: fix window update</a>
 2025-07-13 12:00 UTC  (2+ messages)
` <a href="20250713130000-1-carol@example.net/T/#t">Re: [PATCH net] tcp: fix window update</a>

<a href="20250712080000-1-dave@example.com/T/#u">[RFC] netlink: new attribute</a>
 2025-07-12  8:00 UTC
</pre>
<hr><pre>page: <a rel="next" href="?t=20250712080000">next (older)</a> | <a rel="prev" href="?t=20250714070440">prev (newer)</a> | <a href="./">latest</a></pre>
</body>
</html>
"""


@pytest.fixture
def last_page_html() -> str:
    """The oldest page of a list: no next (older) link."""
    return """<html><body>
<pre>
<a href="20100101000000-1-old@example.com/T/#t">first message ever</a>
 2010-01-01  0:00 UTC
</pre>
<hr><pre>page: <a href="?t=20100101000000">prev (newer)</a> | <a href="./">latest</a></pre>
</body></html>
"""


@pytest.fixture
def directory_html() -> str:
    """Archive root page with a directory block."""
    return """<html><head><title>public-inbox listing</title></head>
<body>
<pre>
* net-dev - Networking development *
* linux-kernel - Linux Kernel Mailing List *
</pre>
<pre>
  Linux memory management - linux-mm
  this line has no separator
</pre>
</body></html>
"""


@pytest.fixture
def search_page_html() -> str:
    """Search results for "folio" with a navigation block."""
    return """<html><body>
<form action="/all/"><pre><input name=q value="folio"> <input type=submit value=search></pre></form>
<pre id=t>Search results ordered by [date|relevance]  <a href="?q=folio&amp;o=200" rel=next>next (older)</a> | <a href="?q=folio&amp;o=-1">reverse</a></pre>
<hr><pre>
1. <b><a href="20250714070438-1-alice@example.com/">mm: convert to folio</a></b>
    - by Alice @ 2025-07-14  7:04 UTC [100%]

2. <b><a href="20250710000000-1-bob@example.org/">Re: mm: convert to folio</a></b>
    - by Bob @ 2025-07-10  0:00 UTC [90%]

3. <b><a href="20250714070438-1-alice@example.com/">mm: convert to folio</a></b>
    - by Alice @ 2025-07-14  7:04 UTC [80%]
</pre>
</body></html>
"""


@pytest.fixture
def message_page_html() -> str:
    """A rendered message page."""
    return """<html><head><title>[PATCH] mm: fix folio refcount</title></head>
<body>
<pre id=b>From: Alice Example &lt;alice@example.com&gt;
To: linux-mm@kvack.org
Cc: akpm@linux-foundation.org, willy@infradead.org
Subject: [PATCH] mm: fix folio refcount

The refcount was dropped twice.
</pre><hr><pre>
<a href="#r">permalink</a> <a href="raw">raw</a> <a href="#R">reply</a>
@ 2025-07-30 15:03 Alice Example
</pre>
</body></html>
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A valid config file pointing at a mirror."""
    path = tmp_path / "config.yaml"
    path.write_text(
        """
schema_version: 1
archive:
  base_url: "https://lore.example.org/"
  timeout_seconds: 5
parser:
  nesting_lookback: 30
logging:
  level: "debug"
"""
    )
    return path


@pytest.fixture
def set_config_env(config_file: Path) -> Generator[None, None, None]:
    """Set the LOREREADER_CONFIG_PATH environment variable."""
    old_value = os.environ.get("LOREREADER_CONFIG_PATH")
    os.environ["LOREREADER_CONFIG_PATH"] = str(config_file)
    yield
    if old_value is None:
        del os.environ["LOREREADER_CONFIG_PATH"]
    else:
        os.environ["LOREREADER_CONFIG_PATH"] = old_value
