"""
Reveal-on-visible animation for cards and list items.
"""

import logging
from typing import Dict

from bs4 import Tag

from .page import Page

logger = logging.getLogger(__name__)

ANIMATED_SELECTOR = (
    ".interest-card, .publication-item, .course-card, "
    ".project-card, .contact-item, .social-link"
)
PREPARE_DELAY_MS = 100

HIDDEN = {
    "opacity": "0",
    "transform": "translateY(20px)",
    "transition": "opacity 0.6s ease, transform 0.6s ease",
}
REVEALED = {"opacity": "1", "transform": "translateY(0)"}


def visible_ratio(top: float, height: float, viewport_height: float,
                  root_margin_bottom: float = 0) -> float:
    """Fraction of an element inside the viewport, whose bottom edge is moved by the margin."""
    if height <= 0:
        return 0.0
    bottom_edge = viewport_height + root_margin_bottom
    overlap = min(top + height, bottom_edge) - max(top, 0)
    return max(0.0, min(1.0, overlap / height))


class RevealObserver:
    """
    Hides every animated element, then reveals each one the first time at
    least `threshold` of it is visible. Revealed elements are never hidden again.
    """

    def __init__(self, page: Page, threshold: float = 0.1, root_margin_bottom: float = -50):
        self.page = page
        self.threshold = threshold
        self.root_margin_bottom = root_margin_bottom
        self._observed: Dict[int, Tag] = {}
        self._revealed: Dict[int, Tag] = {}

    @property
    def observed(self):
        return list(self._observed.values())

    @property
    def pending(self):
        return [el for key, el in self._observed.items() if key not in self._revealed]

    def is_revealed(self, el: Tag) -> bool:
        return id(el) in self._revealed

    def prepare(self) -> int:
        for el in self.page.select(ANIMATED_SELECTOR):
            self.page.set_style(el, **HIDDEN)
            self._observed[id(el)] = el
        for img in self.page.select("img"):
            self.page.set_style(img, transition="opacity 0.3s ease")
        logger.debug("observing %d elements", len(self._observed))
        return len(self._observed)

    def intersect(self, el: Tag, ratio: float) -> bool:
        """Report an element's visible ratio. Returns True if this call revealed it."""
        key = id(el)
        if key not in self._observed or key in self._revealed or ratio < self.threshold:
            return False
        self.page.set_style(el, **REVEALED)
        self._revealed[key] = el
        return True

    def scrolled(self, el: Tag, top: float, height: float, viewport_height: float) -> bool:
        return self.intersect(el, visible_ratio(top, height, viewport_height, self.root_margin_bottom))

    def reveal_all(self) -> int:
        """Treat every observed element as fully visible, as a static snapshot sees the page."""
        return sum(self.intersect(el, 1.0) for el in self.observed)

    def image_loaded(self, img: Tag) -> None:
        self.page.set_style(img, opacity="1")
