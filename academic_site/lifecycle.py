"""
Page lifecycle: load, populate, wire interactions, hide the loading overlay.

A failure anywhere before the overlay is hidden lands on a single error panel
with a retry button; none of the interactions are wired in that case.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .animation import PREPARE_DELAY_MS, RevealObserver
from .interactions import Dispatcher, NavigationController, Router
from .loader import LoadError
from .models import PageData
from .page import Page
from .populators import RenderOptions, populate_all
from .search import SearchPanel

logger = logging.getLogger(__name__)

OVERLAY_FADE_DELAY_MS = 500
OVERLAY_REMOVE_DELAY_MS = 500
SEARCH_INSTALL_DELAY_MS = 1000

ERROR_MESSAGE = "Failed to load website content. Please try again later."
ERROR_PANEL = """
<div class="load-error">
  <i class="fas fa-exclamation-triangle"></i>
  <h2>Error Loading Website</h2>
  <p>{message}</p>
  <button type="button" onclick="location.reload()">Try Again</button>
</div>
"""


class Scheduler:
    """Virtual-clock timer queue. Callbacks run one at a time, in due order."""

    def __init__(self):
        self.now = 0
        self._queue: List[Tuple[int, int, Callable]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, fn: Callable) -> None:
        heapq.heappush(self._queue, (self.now + delay_ms, next(self._seq), fn))

    def __len__(self):
        return len(self._queue)

    def clear(self) -> None:
        self._queue.clear()

    def advance(self, ms: int) -> int:
        """Move the clock forward, running every callback that falls due."""
        target = self.now + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, fn = heapq.heappop(self._queue)
            self.now = due
            fn()
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        ran = 0
        while self._queue:
            ran += self.advance(self._queue[0][0] - self.now)
        return ran


@dataclass
class Site:
    page: Page
    scheduler: Scheduler
    dispatcher: Dispatcher = field(default_factory=Dispatcher)
    router: Router = field(default_factory=Router)
    data: Optional[PageData] = None
    navigation: Optional[NavigationController] = None
    observer: Optional[RevealObserver] = None
    search: Optional[SearchPanel] = None
    error: Optional[Exception] = None


def hide_loading_screen(page: Page, scheduler: Scheduler) -> None:
    overlay = page.by_id("loading-screen")
    if overlay is None:
        return

    def fade():
        page.set_style(overlay, opacity="0")
        scheduler.call_later(OVERLAY_REMOVE_DELAY_MS, lambda: page.set_style(overlay, display="none"))

    scheduler.call_later(OVERLAY_FADE_DELAY_MS, fade)


def show_error(page: Page, message: str = ERROR_MESSAGE) -> None:
    overlay = page.by_id("loading-screen")
    if overlay is None:
        logger.warning("no #loading-screen to show the error in")
        return
    page.replace_markup(overlay, ERROR_PANEL.format(message=message))


def bootstrap(page: Page, load: Callable[[], PageData], scheduler: Scheduler = None,
              opts: RenderOptions = RenderOptions(), router: Router = None) -> Site:
    if scheduler is None:
        scheduler = Scheduler()
    site = Site(page=page, scheduler=scheduler, router=router or Router())
    try:
        site.data = load()
        page.apply(populate_all(site.data, opts))

        site.navigation = NavigationController(page, site.router)
        site.navigation.wire(site.dispatcher)

        site.observer = RevealObserver(page)
        site.scheduler.call_later(PREPARE_DELAY_MS, site.observer.prepare)

        hide_loading_screen(page, site.scheduler)
    except Exception as e:
        logger.error("Error loading website data: %s", e, exc_info=not isinstance(e, LoadError))
        site.error = e
        site.navigation = site.observer = None
        site.dispatcher = Dispatcher()
        site.scheduler.clear()
        show_error(page)
        return site

    site.search = SearchPanel(site.data, site.router, page)

    def install_search():
        site.search.install()
        site.search.wire(site.dispatcher)

    site.scheduler.call_later(SEARCH_INSTALL_DELAY_MS, install_search)
    return site
