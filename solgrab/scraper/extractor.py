"""Source extraction: pulls the contract source out of an explorer page."""

from __future__ import annotations

from html import unescape

from bs4 import BeautifulSoup, NavigableString

from solgrab.errors import EmptySourceError, SourceNotFoundError

_LEADING_NEWLINE_TAGS = ("pre", "textarea", "listing")


def extract_source(html: str, selector: str, url: str | None = None) -> str:
    """Return the unescaped text of the first element matching *selector*.

    Only the element's first child is read, and it must be a text node.  The
    parser already decodes entities once; the explorer double-escapes the
    source inside its editor panel, so the text is unescaped again.

    Raises:
        SourceNotFoundError: No element matches *selector*.
        EmptySourceError: The element has no children, or its first child is
            another element rather than text.
    """
    soup = BeautifulSoup(html, "html.parser")
    element = soup.select_one(selector)
    if element is None:
        raise SourceNotFoundError(url, selector)

    first = next(iter(element.children), None)
    if not isinstance(first, NavigableString):
        raise EmptySourceError(url, selector)

    text = str(first)
    # HTML5 drops a newline directly after these start tags; html.parser keeps it.
    if element.name in _LEADING_NEWLINE_TAGS and text.startswith("\n"):
        text = text[1:]
        if not text:
            raise EmptySourceError(url, selector)
    return unescape(text)
