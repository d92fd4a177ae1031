"""Batch package — listing parsing and the per-record fetch/write loop."""

from solgrab.batch.driver import get_all_source_code, output_path_for, write_source
from solgrab.batch.listing import normalize_address, parse_line, parse_listing
from solgrab.batch.models import BatchSummary, ContractRecord, ParsedListing

__all__ = [
    "get_all_source_code",
    "output_path_for",
    "write_source",
    "normalize_address",
    "parse_line",
    "parse_listing",
    "BatchSummary",
    "ContractRecord",
    "ParsedListing",
]
