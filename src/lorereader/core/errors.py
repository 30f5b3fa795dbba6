"""Custom exception types for the lore archive reader.

Error messages follow one shape:
- What failed (the operation or component)
- Why it failed (the specific condition)
- How to fix it, where there is something the caller can do

Parsers never raise on malformed archive pages; they log and return empty
results. Only the fetch layer, the navigation session and configuration
loading raise the errors below.
"""


class LoreReaderError(Exception):
    """Base exception for all lore archive reader errors."""

    pass


class ConfigValidationError(LoreReaderError):
    """Raised when config.yaml fails Pydantic validation.

    Includes specific field errors with actionable messages.
    """

    pass


class ConfigLoadError(LoreReaderError):
    """Raised when config.yaml cannot be loaded (file not found, YAML parse error)."""

    pass


class DocumentParseError(LoreReaderError):
    """Raised when the HTML adapter cannot build a document from page markup.

    Internal to the parser package: every public parse function catches it
    and returns an empty result instead.
    """

    pass


class FetchError(LoreReaderError):
    """Base class for failures fetching a page from the archive.

    Attributes:
        url: The URL that was being fetched (if known)
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class InvalidURLError(FetchError):
    """Raised when a URL has no http(s) scheme or no host."""

    pass


class ArchiveHTTPError(FetchError):
    """Raised when the archive answers with a status other than 200.

    Attributes:
        status_code: HTTP status code from the archive
    """

    def __init__(self, message: str, status_code: int, url: str | None = None):
        super().__init__(message, url=url)
        self.status_code = status_code


class BodyDecodeError(FetchError):
    """Raised when a response body is not valid UTF-8."""

    pass


class EmptyBodyError(FetchError):
    """Raised when the archive returns a 200 response with an empty body."""

    pass


class ArchiveConnectionError(FetchError):
    """Raised when the HTTP transport fails (DNS, connection reset, timeout)."""

    pass


class EmptyQueryError(FetchError):
    """Raised when a search is requested with a blank query."""

    pass


class NavigationError(LoreReaderError):
    """Base class for paging errors raised by a list session."""

    pass


class NavigationBusyError(NavigationError):
    """Raised when a navigation starts while another one is in flight for the same list.

    Attributes:
        list_name: Mailing list whose session is busy
    """

    def __init__(self, message: str, list_name: str):
        super().__init__(message)
        self.list_name = list_name


class NoCursorError(NavigationError):
    """Raised when paging older/newer but the current page has no such cursor."""

    pass
