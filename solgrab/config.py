"""Centralised settings for solgrab.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Explorer page
    # ------------------------------------------------------------------
    explorer_url_template: str = field(
        default_factory=lambda: os.environ.get(
            "EXPLORER_URL_TEMPLATE", "https://etherscan.io/address/{address}"
        )
    )
    source_selector: str = field(
        default_factory=lambda: os.environ.get("SOURCE_SELECTOR", "#editor")
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _DEFAULT_USER_AGENT)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Output files
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("OUTPUT_DIR", "./erc20"))
    )
    output_extension: str = field(
        default_factory=lambda: os.environ.get("OUTPUT_EXTENSION", ".sol")
    )

    # ------------------------------------------------------------------
    # Listing parser
    # ------------------------------------------------------------------
    # Lines shorter than this are not records: "0x" + 40 hex digits + ";".
    min_line_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_LINE_LENGTH", "43"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    @property
    def timeout(self) -> float | None:
        """Timeout handed to httpx; ``None`` when disabled with ``0``."""
        return self.request_timeout if self.request_timeout > 0 else None

    def explorer_url(self, address: str) -> str:
        """Return the explorer page URL for *address*."""
        return self.explorer_url_template.format(address=address)

    def ensure_output_dir(self) -> None:
        """Create the output directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from solgrab.config import settings
settings = Settings()
