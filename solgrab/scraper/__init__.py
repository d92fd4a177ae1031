"""Scraper package — explorer page fetch & source extraction."""

from solgrab.scraper.extractor import extract_source
from solgrab.scraper.fetcher import build_client, fetch_page, get_source_code
from solgrab.scraper.models import RawPage

__all__ = ["build_client", "fetch_page", "get_source_code", "extract_source", "RawPage"]
