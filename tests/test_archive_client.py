"""Tests for the archive HTTP client.

The requests session is replaced with a MagicMock; every failure mode is
checked against its typed error.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from lorereader.archive.client import ArchiveClient
from lorereader.core.errors import (
    ArchiveConnectionError,
    ArchiveHTTPError,
    BodyDecodeError,
    EmptyBodyError,
    EmptyQueryError,
    FetchError,
    InvalidURLError,
)


def _response(status_code: int = 200, content: bytes = b"<html></html>") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests.Session."""
    session = MagicMock()
    session.headers = {}
    session.get = MagicMock(return_value=_response())
    return session


@pytest.fixture
def client(mock_session: MagicMock, base_url: str) -> ArchiveClient:
    return ArchiveClient(base_url + "/", timeout=5, user_agent="test-agent", session=mock_session)


# =============================================================================
# Successful fetches
# =============================================================================


class TestFetch:
    """Tests for URL building and successful fetches."""

    def test_headers_and_base_url(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        assert client.base_url == "https://lore.kernel.org"
        assert mock_session.headers["User-Agent"] == "test-agent"

    def test_fetch_url_returns_text(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = _response(content="<p>café</p>".encode())

        assert client.fetch_url("https://lore.kernel.org/netdev") == "<p>café</p>"
        mock_session.get.assert_called_once_with("https://lore.kernel.org/netdev", timeout=5)

    def test_fetch_home_page(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        client.fetch_home_page()
        assert mock_session.get.call_args.args[0] == "https://lore.kernel.org/"

    def test_fetch_list_page(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        client.fetch_list_page("linux-mm")
        assert mock_session.get.call_args.args[0] == "https://lore.kernel.org/linux-mm"

    def test_fetch_thread(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        client.fetch_thread("https://lore.kernel.org/netdev/20250714070438-1-a@b")
        assert mock_session.get.call_args.args[0] == (
            "https://lore.kernel.org/all/20250714070438-1-a@b/t/"
        )

    @pytest.mark.parametrize(
        ("message_id", "expected"),
        [
            ("https://lore.kernel.org/netdev/abc@x/", "https://lore.kernel.org/netdev/abc@x/"),
            ("netdev/abc@x", "https://lore.kernel.org/netdev/abc@x/"),
            ("/all/abc@x/", "https://lore.kernel.org/all/abc@x/"),
        ],
    )
    def test_fetch_message(
        self,
        client: ArchiveClient,
        mock_session: MagicMock,
        message_id: str,
        expected: str,
    ) -> None:
        client.fetch_message(message_id)
        assert mock_session.get.call_args.args[0] == expected

    def test_search(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        client.search("folio", page=2)
        assert mock_session.get.call_args.args[0] == (
            "https://lore.kernel.org/all/?q=folio&page=2"
        )

    def test_close(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        client.close()
        mock_session.close.assert_called_once()


# =============================================================================
# Typed failures
# =============================================================================


class TestFetchErrors:
    """Tests for fetch error mapping."""

    @pytest.mark.parametrize("url", ["?t=20250101000000", "netdev", "ftp://lore.kernel.org/"])
    def test_invalid_url(self, client: ArchiveClient, mock_session: MagicMock, url: str) -> None:
        with pytest.raises(InvalidURLError) as exc_info:
            client.fetch_url(url)

        assert exc_info.value.url == url
        mock_session.get.assert_not_called()

    def test_http_status(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = _response(status_code=404)

        with pytest.raises(ArchiveHTTPError) as exc_info:
            client.fetch_list_page("no-such-list")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://lore.kernel.org/no-such-list"

    def test_other_2xx_status_is_error(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        """Test that only 200 counts as success."""
        mock_session.get.return_value = _response(status_code=204)

        with pytest.raises(ArchiveHTTPError):
            client.fetch_home_page()

    def test_undecodable_body(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = _response(content=b"\xff\xfe\x00bad")

        with pytest.raises(BodyDecodeError):
            client.fetch_home_page()

    def test_empty_body(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = _response(content=b"")

        with pytest.raises(EmptyBodyError):
            client.fetch_home_page()

    def test_transport_failure(self, client: ArchiveClient, mock_session: MagicMock) -> None:
        mock_session.get.side_effect = requests.ConnectionError("connection reset")

        with pytest.raises(ArchiveConnectionError) as exc_info:
            client.fetch_home_page()

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout_is_connection_error(
        self, client: ArchiveClient, mock_session: MagicMock
    ) -> None:
        mock_session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(ArchiveConnectionError):
            client.fetch_home_page()

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, client: ArchiveClient, mock_session: MagicMock, query: str) -> None:
        with pytest.raises(EmptyQueryError):
            client.search(query)
        mock_session.get.assert_not_called()

    def test_all_fetch_errors_share_base(self) -> None:
        for error_type in (
            InvalidURLError,
            ArchiveHTTPError,
            BodyDecodeError,
            EmptyBodyError,
            ArchiveConnectionError,
            EmptyQueryError,
        ):
            assert issubclass(error_type, FetchError)
