"""
Data loader: fetches the four site documents in parallel and fails the whole
load as soon as any one of them cannot be retrieved or parsed.
"""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import requests

from .models import PageData

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = ("personal", "publications", "courses", "projects")

SESSION = requests.Session()
SESSION.headers.update({"Accept": "application/json"})


class LoadError(Exception):
    """A data source could not be retrieved or parsed."""

    def __init__(self, source: str, cause: Any):
        self.source = source
        self.cause = cause
        super().__init__(f"Data loading failed: Failed to load {source} data: {cause}")


def is_remote(base: str) -> bool:
    return str(base).startswith(("http://", "https://"))


def cache_token() -> str:
    """Millisecond timestamp appended as ?v= so caches never serve a stale copy."""
    return str(int(time.time() * 1000))


def fetch_document(base: str, source: str, session: requests.Session = None,
                   timeout: Optional[float] = None) -> Any:
    """Retrieve and parse `<base>/<source>.json`. Raises LoadError."""
    if not is_remote(base):
        path = Path(base) / f"{source}.json"
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise LoadError(source, e) from e

    session = session or SESSION
    url = f"{str(base).rstrip('/')}/{source}.json"
    try:
        r = session.get(url, params={"v": cache_token()}, timeout=timeout)
    except requests.RequestException as e:
        raise LoadError(source, e) from e
    if not r.ok:
        raise LoadError(source, r.status_code)
    try:
        return r.json()
    except ValueError as e:
        raise LoadError(source, e) from e


def load_all(base: str, sources: Sequence[str] = DEFAULT_SOURCES,
             session: requests.Session = None,
             timeout: Optional[float] = None) -> PageData:
    """
    Fetch all sources concurrently and build the PageData.

    The first failure to complete is raised immediately; the remaining requests
    are abandoned and nothing is returned for them.
    """
    if len(sources) != 4:
        raise ValueError("expected four sources: personal, publications, courses, projects")

    docs: Dict[str, Any] = {}
    executor = ThreadPoolExecutor(max_workers=len(sources))
    try:
        futures = {
            executor.submit(fetch_document, base, source, session, timeout): source
            for source in sources
        }
        for fut in as_completed(futures):
            source = futures[fut]
            try:
                docs[source] = fut.result()
            except LoadError as e:
                logger.error("%s", e)
                raise
            logger.debug("loaded %s", source)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info("Loaded %d data sources from %s", len(docs), base)
    return PageData.from_documents(*(docs[s] for s in sources))
