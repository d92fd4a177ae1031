"""Listing parser: ``address;name[;extra]`` lines -> :class:`ContractRecord`.

Example listing::

    0x56ba2ee7890461f463f7be02aac3099f6d5811a8;BlockCAT (CAT)
    0x0d262e5dc4a06a0f1c90ce79c7a60c09dfc884e4;J8T (J8T)
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from eth_utils import is_hex_address, to_checksum_address

from solgrab.batch.models import ContractRecord, ParsedListing
from solgrab.errors import InvalidRecordError

logger = logging.getLogger(__name__)

_FIELD_SEPARATOR = ";"
_PATH_SEPARATORS = ("/", "\\")


def normalize_address(raw: str) -> str:
    """Return the EIP-55 checksum form of *raw*.

    Accepts 40 hex digits with or without the ``0x`` prefix, in any case.

    Raises:
        ValueError: *raw* is not a 20-byte hex address.
    """
    candidate = raw.strip()
    if not is_hex_address(candidate):
        raise ValueError(f"not a 20-byte hex address: {raw!r}")
    return to_checksum_address(candidate)


def iter_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(lineno, line)`` pairs, 1-based, with a trailing ``\\r`` dropped."""
    for lineno, line in enumerate(text.split("\n"), start=1):
        yield lineno, line.rstrip("\r")


def parse_line(
    line: str,
    lineno: int,
    min_length: int = 43,
    log: logging.Logger | None = None,
) -> Optional[ContractRecord]:
    """Parse one listing line.

    Returns ``None`` for lines shorter than *min_length* UTF-8 bytes; those
    are not records and are skipped without complaint.

    Raises:
        InvalidRecordError: The line has no name field, an empty name, a name
            with control characters or one that would escape the output
            directory, or a malformed address.
    """
    log = log or logger
    if len(line.encode("utf-8")) < min_length:
        return None

    fields = line.split(_FIELD_SEPARATOR)
    log.debug("addr=%s,name=%s", fields[0], fields[1] if len(fields) > 1 else "")
    if len(fields) < 2:
        raise InvalidRecordError(
            f"line {lineno}: expected 'address;name'", line=line, lineno=lineno
        )

    address, name = fields[0], fields[1]

    if not name.strip():
        raise InvalidRecordError(f"line {lineno}: empty name", line=line, lineno=lineno)
    if not name.isprintable():
        raise InvalidRecordError(
            f"line {lineno}: name {name!r} contains control characters",
            line=line,
            lineno=lineno,
        )
    if any(sep in name for sep in _PATH_SEPARATORS) or name in (".", ".."):
        raise InvalidRecordError(
            f"line {lineno}: name {name!r} is not a plain file name",
            line=line,
            lineno=lineno,
        )

    try:
        checksum = normalize_address(address)
    except ValueError as exc:
        raise InvalidRecordError(f"line {lineno}: {exc}", line=line, lineno=lineno) from exc

    return ContractRecord(
        address=address,
        name=name,
        checksum_address=checksum,
        lineno=lineno,
    )


def parse_listing(
    text: str,
    min_length: int = 43,
    log: logging.Logger | None = None,
) -> ParsedListing:
    """Parse a whole listing without fetching anything."""
    parsed = ParsedListing()
    for lineno, line in iter_lines(text):
        try:
            record = parse_line(line, lineno, min_length=min_length, log=log)
        except InvalidRecordError as exc:
            parsed.invalid.append(exc)
            continue
        if record is None:
            parsed.skipped += 1
        else:
            parsed.records.append(record)
    return parsed
