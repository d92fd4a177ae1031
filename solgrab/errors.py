"""Exception hierarchy for solgrab.

Hierarchy::

    ScraperError
    ├── TransportError
    ├── SourceNotFoundError
    ├── EmptySourceError
    └── InvalidRecordError
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for all solgrab exceptions.

    The batch driver catches this class per record, so anything raised from
    the fetch path must subclass it to stay non-fatal.
    """


class TransportError(ScraperError):
    """Raised when the explorer page could not be retrieved.

    Args:
        message: Human-readable description of the failure.
        url: The URL that was requested.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class SourceNotFoundError(ScraperError):
    """Raised when the page has no element matching the source selector."""

    def __init__(self, url: str | None, selector: str) -> None:
        super().__init__(f"not found: no element matches {selector!r}")
        self.url = url
        self.selector = selector


class EmptySourceError(ScraperError):
    """Raised when the matched element has no leading text node."""

    def __init__(self, url: str | None, selector: str) -> None:
        super().__init__(f"empty content: element {selector!r} has no text")
        self.url = url
        self.selector = selector


class InvalidRecordError(ScraperError):
    """Raised when a listing line is long enough to be a record but is malformed.

    Args:
        message: What is wrong with the line.
        line: The offending line.
        lineno: 1-based line number in the listing.
    """

    def __init__(self, message: str, line: str, lineno: int) -> None:
        super().__init__(message)
        self.line = line
        self.lineno = lineno
