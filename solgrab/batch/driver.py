"""Batch driver: fetch the source of every contract in a listing.

Records are processed strictly one after another.  A record that cannot be
parsed, fetched, or written is logged and the run moves on to the next line;
nothing aborts the batch.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Set

import httpx

from solgrab.batch.listing import iter_lines, parse_line
from solgrab.batch.models import BatchSummary, ContractRecord
from solgrab.config import Settings, settings
from solgrab.errors import InvalidRecordError, ScraperError
from solgrab.scraper.fetcher import build_client, get_source_code

logger = logging.getLogger(__name__)


def output_path_for(record: ContractRecord, cfg: Settings | None = None) -> Path:
    """Return ``<output_dir>/<name><extension>`` for *record*."""
    cfg = cfg or settings
    return cfg.output_dir / f"{record.name}{cfg.output_extension}"


def with_trailer(source: str, address: str) -> str:
    """Append the ``//<address>`` comment line to *source*."""
    return source + "\n//" + address


def write_source(record: ContractRecord, source: str, cfg: Settings | None = None) -> Path:
    """Write *source* plus the address trailer for *record*; return the path.

    An existing file is overwritten.  The output directory must exist.
    """
    path = output_path_for(record, cfg)
    path.write_bytes(with_trailer(source, record.address).encode("utf-8"))
    return path


def get_all_source_code(
    listing: str,
    *,
    cfg: Settings | None = None,
    client: httpx.Client | None = None,
    log: logging.Logger | None = None,
) -> BatchSummary:
    """Fetch and save the source of every record in *listing*.

    Args:
        listing: Newline-delimited ``address;name[;extra]`` lines.
        cfg: Settings to use; defaults to the global ``settings``.
        client: HTTP client reused for every fetch; one is built from *cfg*
            (and closed afterwards) when omitted.
        log: Logger for per-record messages.

    Returns:
        A :class:`BatchSummary` of what was written, failed, and skipped.
    """
    cfg = cfg or settings
    log = log or logger

    if client is None:
        with build_client(cfg) as own_client:
            return _run(listing, cfg, own_client, log)
    return _run(listing, cfg, client, log)


def _run(listing: str, cfg: Settings, client: httpx.Client, log: logging.Logger) -> BatchSummary:
    summary = BatchSummary()
    seen_paths: Set[Path] = set()

    for lineno, line in iter_lines(listing):
        try:
            record = parse_line(line, lineno, min_length=cfg.min_line_length, log=log)
        except InvalidRecordError as exc:
            log.warning("skipping invalid record: %s", exc)
            summary.invalid.append(exc)
            continue
        if record is None:
            summary.skipped += 1
            continue

        try:
            source = get_source_code(record.checksum_address, cfg=cfg, client=client, log=log)
        except ScraperError as exc:
            log.warning("%s %s cannot get code %s", record.name, record.address, exc)
            summary.failed.append((record, exc))
            continue

        path = output_path_for(record, cfg)
        if path in seen_paths:
            log.warning(
                "%s %s overwrites %s written earlier in this run",
                record.name,
                record.address,
                path,
            )
        try:
            write_source(record, source, cfg)
        except (OSError, ValueError) as exc:
            log.warning("%s %s cannot write %s: %s", record.name, record.address, path, exc)
            summary.failed.append((record, exc))
            continue

        seen_paths.add(path)
        summary.written.append(path)

    return summary
