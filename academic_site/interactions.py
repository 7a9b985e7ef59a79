"""
Navigation and interaction controllers.

Browser events are modelled as named actions sent through a Dispatcher; each
controller registers the handlers it owns instead of listening on the document.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, NamedTuple, Optional

from .page import Page

logger = logging.getLogger(__name__)

TOGGLE_SEARCH = "toggle-search"
CLOSE_SEARCH = "close-search"
SEARCH_INPUT = "search-input"
SELECT_RESULT = "select-result"
NAVIGATE = "navigate"
TOGGLE_MENU = "toggle-menu"
MENU_LINK = "menu-link"
SCROLL = "scroll"

PAGE_MAP = {
    "about": "index.html",
    "research": "research.html",
    "teaching": "teaching.html",
    "projects": "projects.html",
    "contact": "contact.html",
}

SCROLL_THRESHOLD = 100
NAVBAR_BG_DEFAULT = "rgba(255, 255, 255, 0.95)"
NAVBAR_BG_SCROLLED = "rgba(255, 255, 255, 0.98)"


class KeyEvent(NamedTuple):
    key: str
    ctrl: bool = False
    meta: bool = False


def key_action(event: KeyEvent) -> Optional[str]:
    """Ctrl/Cmd+K toggles search, Escape closes it."""
    if (event.ctrl or event.meta) and event.key == "k":
        return TOGGLE_SEARCH
    if event.key == "Escape":
        return CLOSE_SEARCH
    return None


class Dispatcher:
    """Routes named input actions to the handlers registered for them."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = defaultdict(list)

    def register(self, action: str, handler: Callable) -> None:
        self._handlers[action].append(handler)

    def handlers(self, action: str) -> List[Callable]:
        return list(self._handlers.get(action, ()))

    def dispatch(self, action: str, *args) -> int:
        handlers = self.handlers(action)
        for handler in handlers:
            handler(*args)
        return len(handlers)

    def key(self, event: KeyEvent) -> Optional[str]:
        action = key_action(event)
        if action:
            self.dispatch(action)
        return action


class Router:
    """Maps section ids to the page that hosts them."""

    def __init__(self, page_map: Dict[str, str] = None):
        self.page_map = dict(page_map or PAGE_MAP)
        self.location: Optional[str] = None

    def navigate(self, section: str) -> Optional[str]:
        target = self.page_map.get(section)
        if target:
            logger.debug("navigate %s -> %s", section, target)
            self.location = target
        return target


def navbar_background(scroll_y: float) -> str:
    return NAVBAR_BG_SCROLLED if scroll_y > SCROLL_THRESHOLD else NAVBAR_BG_DEFAULT


class Navbar:
    def __init__(self, page: Page):
        self.page = page

    def on_scroll(self, scroll_y: float) -> str:
        # Rewritten on every tick, whatever the previous value was.
        background = navbar_background(scroll_y)
        navbar = self.page.select_one(".navbar")
        if navbar is not None:
            self.page.set_style(navbar, background=background)
        return background


class MobileMenu:
    """Hamburger toggle. Only wired when both .nav-toggle and .nav-menu exist."""

    def __init__(self, page: Page):
        self.page = page
        self.toggle_el = page.select_one(".nav-toggle")
        self.menu_el = page.select_one(".nav-menu")
        self.open = False

    @property
    def available(self) -> bool:
        return self.toggle_el is not None and self.menu_el is not None

    def toggle(self) -> None:
        if not self.available:
            return
        self.open = self.page.toggle_class(self.menu_el, "active")
        self.page.toggle_class(self.toggle_el, "active")

    def link_clicked(self) -> None:
        if not self.available:
            return
        self.open = False
        self.page.remove_class(self.menu_el, "active")
        self.page.remove_class(self.toggle_el, "active")


class NavigationController:
    def __init__(self, page: Page, router: Router = None):
        self.page = page
        self.router = router or Router()
        self.menu = MobileMenu(page)
        self.navbar = Navbar(page)

    def wire(self, dispatcher: Dispatcher) -> None:
        if self.menu.available:
            dispatcher.register(TOGGLE_MENU, self.menu.toggle)
            dispatcher.register(MENU_LINK, self.menu.link_clicked)
        dispatcher.register(SCROLL, self.navbar.on_scroll)
        dispatcher.register(NAVIGATE, self.router.navigate)
