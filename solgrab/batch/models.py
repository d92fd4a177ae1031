"""Data models for the batch driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from solgrab.errors import InvalidRecordError


@dataclass
class ContractRecord:
    """One ``address;name`` line of a listing.

    ``address`` is the token exactly as it appears in the listing and is what
    ends up in the output trailer; ``checksum_address`` is the normalised
    form used to build the explorer URL.
    """

    address: str
    name: str
    checksum_address: str
    lineno: int


@dataclass
class ParsedListing:
    """Result of parsing a whole listing without fetching anything."""

    records: List[ContractRecord] = field(default_factory=list)
    invalid: List[InvalidRecordError] = field(default_factory=list)
    skipped: int = 0


@dataclass
class BatchSummary:
    """What a batch run did, for reporting only."""

    written: List[Path] = field(default_factory=list)
    failed: List[Tuple[ContractRecord, Exception]] = field(default_factory=list)
    invalid: List[InvalidRecordError] = field(default_factory=list)
    skipped: int = 0

    @property
    def attempted(self) -> int:
        """Number of records that reached the fetcher."""
        return len(self.written) + len(self.failed)

    def describe(self) -> str:
        return (
            f"{len(self.written)} written, {len(self.failed)} failed, "
            f"{len(self.invalid)} invalid, {self.skipped} skipped"
        )
