#!/usr/bin/env python3
"""
Build the static site: load the data documents, populate the template and
write dist/index.html along with the static assets.

Usage:
    academic-site --data data --template site.template.html --out dist
    academic-site --data https://example.edu/~me/data
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .config import SiteConfig
from .lifecycle import Scheduler, bootstrap
from .loader import load_all
from .page import Page
from .populators import RenderOptions

logger = logging.getLogger(__name__)

STATIC_FILES = ["styles.css", "script.js"]
STATIC_DIRS = ["assets"]


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv=None, cfg: SiteConfig = None) -> argparse.Namespace:
    cfg = cfg or SiteConfig.from_env()
    parser = argparse.ArgumentParser(description="Build the academic website")
    parser.add_argument("--data", default=cfg.data_url,
                        help="Base URL or directory holding the JSON documents")
    parser.add_argument("--template", type=Path, default=cfg.template)
    parser.add_argument("--out", type=Path, default=cfg.dist)
    parser.add_argument("--owner-marker", default=cfg.owner_marker,
                        help="Substring marking the site owner in author lists")
    parser.add_argument("--year", default=cfg.copyright_year, help="Copyright year in the footer")
    parser.add_argument("--timeout", type=float, default=cfg.fetch_timeout,
                        help="Seconds to wait for each data request (default: no limit)")
    parser.add_argument("--log-level", default=cfg.log_level)
    return parser.parse_args(argv)


def copy_static(src_root: Path, dist: Path) -> None:
    for rel in STATIC_FILES:
        src = src_root / rel
        if src.exists():
            shutil.copy2(src, dist / src.name)
    for dirname in STATIC_DIRS:
        srcdir = src_root / dirname
        if srcdir.exists():
            dstdir = dist / dirname
            if dstdir.exists():
                shutil.rmtree(dstdir)
            shutil.copytree(srcdir, dstdir)


def build(args: argparse.Namespace) -> int:
    if not args.template.exists():
        logger.error("Template not found: %s", args.template)
        return 2

    page = Page.from_file(args.template)
    scheduler = Scheduler()
    site = bootstrap(
        page,
        lambda: load_all(args.data, timeout=args.timeout),
        scheduler,
        RenderOptions(owner_marker=args.owner_marker, copyright_year=args.year),
    )
    scheduler.run_all()
    if site.observer is not None:
        site.observer.reveal_all()

    args.out.mkdir(parents=True, exist_ok=True)
    (args.out / "index.html").write_text(page.html(), encoding="utf-8")
    copy_static(args.template.parent, args.out)

    if site.error is not None:
        logger.error("Build wrote the error page: %s", site.error)
        return 1
    logger.info("Build complete -> %s", args.out)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    return build(args)


if __name__ == "__main__":
    sys.exit(main())
