"""HTTP fetcher for block-explorer address pages."""

from __future__ import annotations

import logging

import httpx

from solgrab.config import Settings, settings
from solgrab.errors import TransportError
from solgrab.scraper.extractor import extract_source
from solgrab.scraper.models import RawPage

logger = logging.getLogger(__name__)


def build_client(cfg: Settings | None = None) -> httpx.Client:
    """Return an ``httpx.Client`` configured from *cfg*.

    The caller owns the client and must close it (use it as a context
    manager).
    """
    cfg = cfg or settings
    return httpx.Client(
        headers={"User-Agent": cfg.user_agent},
        timeout=cfg.timeout,
        follow_redirects=True,
    )


def fetch_page(url: str, client: httpx.Client | None = None) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    When *client* is omitted a short-lived client is built from the global
    settings.

    Raises:
        TransportError: On any network failure or a 4xx/5xx status code.
    """
    try:
        if client is None:
            with build_client() as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise TransportError(f"request to {url} failed: {exc}", url=url) from exc

    return RawPage(url=url, html=response.text, status_code=response.status_code)


def get_source_code(
    address: str,
    *,
    cfg: Settings | None = None,
    client: httpx.Client | None = None,
    log: logging.Logger | None = None,
) -> str:
    """Fetch the explorer page for *address* and return its contract source.

    *address* is interpolated into ``cfg.explorer_url_template`` as given;
    callers pass the checksum form.  The page is searched with
    ``cfg.source_selector``.

    Raises:
        TransportError: The page could not be retrieved.
        SourceNotFoundError: The page has no source element.
        EmptySourceError: The source element holds no text.
    """
    cfg = cfg or settings
    log = log or logger

    url = cfg.explorer_url(address)
    if client is None:
        with build_client(cfg) as own_client:
            raw = fetch_page(url, client=own_client)
    else:
        raw = fetch_page(url, client=client)
    log.debug("fetched %s (HTTP %d, %d bytes)", raw.url, raw.status_code, len(raw.html))

    return extract_source(raw.html, cfg.source_selector, url=raw.url)
