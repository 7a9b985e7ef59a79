"""
Build configuration read from environment variables.

Environment variables:
  SITE_DATA_URL        Base URL or local directory holding the four JSON files (default: data)
  SITE_TEMPLATE        HTML template to populate (default: site.template.html)
  SITE_DIST            Output directory (default: dist)
  SITE_OWNER_MARKER    Substring identifying the site owner in author lists
                       (default: last word of personal.name)
  SITE_COPYRIGHT_YEAR  Year printed in the footer (default: 2023)
  SITE_FETCH_TIMEOUT   Seconds before a data request gives up (default: unset, wait forever)
  LOG_LEVEL            Logging level (default: INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parent.parent


def _optional_float(value: str) -> Optional[float]:
    value = (value or "").strip()
    return float(value) if value else None


@dataclass
class SiteConfig:
    """Site build configuration."""

    data_url: str
    template: Path
    dist: Path
    owner_marker: str
    copyright_year: str
    fetch_timeout: Optional[float]
    log_level: str

    @classmethod
    def from_env(cls) -> "SiteConfig":
        """Load configuration from environment variables."""
        return cls(
            data_url=os.environ.get("SITE_DATA_URL", str(ROOT / "data")),
            template=Path(os.environ.get("SITE_TEMPLATE", str(ROOT / "site.template.html"))),
            dist=Path(os.environ.get("SITE_DIST", str(ROOT / "dist"))),
            owner_marker=os.environ.get("SITE_OWNER_MARKER", "").strip(),
            copyright_year=os.environ.get("SITE_COPYRIGHT_YEAR", "2023").strip() or "2023",
            fetch_timeout=_optional_float(os.environ.get("SITE_FETCH_TIMEOUT", "")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
