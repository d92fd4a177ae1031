"""solgrab CLI — entry-point for fetching contract source code.

Usage:
    python cli/main.py --help

Commands:
    fetch     → print the source of a single address
    batch     → download every contract in an ``address;name`` listing
    records   → show what a listing parses to, without network access
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from solgrab.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from dataclasses import replace
from typing import Optional

import typer

from solgrab.config import settings
from solgrab.errors import ScraperError
from solgrab.logging_config import configure_logging

app = typer.Typer(
    name="solgrab",
    help="Download verified contract source code from a block explorer.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="DEBUG | INFO | WARNING | ERROR (default: $LOG_LEVEL or INFO)."
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level or settings.log_level, json_logs=json_logs)


def _read_listing(listing: str) -> str:
    if listing == "-":
        return sys.stdin.read()
    path = Path(listing)
    if not path.is_file():
        typer.echo(f"[batch] Listing not found: {listing}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Single address
# ---------------------------------------------------------------------------
@app.command("fetch")
def fetch(
    address: str = typer.Argument(..., help="Contract address (0x + 40 hex digits)."),
) -> None:
    """Fetch one contract's source and print it to stdout."""
    from solgrab.batch.listing import normalize_address
    from solgrab.scraper import get_source_code

    try:
        checksum = normalize_address(address)
    except ValueError as exc:
        typer.echo(f"[fetch] Error: {exc}")
        raise typer.Exit(1)

    try:
        source = get_source_code(checksum)
    except ScraperError as exc:
        typer.echo(f"[fetch] Error: {exc}")
        raise typer.Exit(1)

    typer.echo(source)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------
@app.command("batch")
def batch(
    listing: str = typer.Argument(..., help="Listing file of 'address;name' lines, or '-' for stdin."),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", help="Output directory."),
    ext: Optional[str] = typer.Option(None, "--ext", help="Output file extension, e.g. '.sol'."),
    min_length: Optional[int] = typer.Option(
        None, "--min-length", help="Skip lines shorter than this many UTF-8 bytes."
    ),
    create_dir: bool = typer.Option(False, "--create-dir", help="Create the output directory if missing."),
) -> None:
    """Download the source of every contract in LISTING."""
    from solgrab.batch import get_all_source_code

    cfg = replace(settings)
    if out_dir is not None:
        cfg.output_dir = out_dir
    if ext is not None:
        cfg.output_extension = ext
    if min_length is not None:
        cfg.min_line_length = min_length

    text = _read_listing(listing)

    if create_dir:
        cfg.ensure_output_dir()
    elif not cfg.output_dir.is_dir():
        typer.echo(f"[batch] Output directory does not exist: {cfg.output_dir} (use --create-dir)")
        raise typer.Exit(1)

    typer.echo(f"[batch] Writing to {cfg.output_dir} …")
    summary = get_all_source_code(text, cfg=cfg)
    typer.echo(f"[batch] Done: {summary.describe()}")


@app.command("records")
def records(
    listing: str = typer.Argument(..., help="Listing file of 'address;name' lines, or '-' for stdin."),
    min_length: Optional[int] = typer.Option(
        None, "--min-length", help="Skip lines shorter than this many UTF-8 bytes."
    ),
) -> None:
    """Parse LISTING and print the records a batch run would fetch."""
    from solgrab.batch import parse_listing

    text = _read_listing(listing)
    parsed = parse_listing(text, min_length=min_length if min_length is not None else settings.min_line_length)

    for record in parsed.records:
        typer.echo(f"  {record.lineno:>4}  {record.checksum_address}  {record.name}")
    for err in parsed.invalid:
        typer.echo(f"  invalid: {err}")
    typer.echo(
        f"[records] {len(parsed.records)} records, {len(parsed.invalid)} invalid, "
        f"{parsed.skipped} skipped"
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
