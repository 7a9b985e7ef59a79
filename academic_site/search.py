"""
Client-side style search over publications, projects and courses.

The index is nothing more than the loaded PageData: every qualifying query
rescans the three collections linearly.
"""

import logging
from typing import List, Mapping, NamedTuple, Optional, Union

from .models import PageData, author_name
from .page import Page
from .interactions import (
    CLOSE_SEARCH, SEARCH_INPUT, SELECT_RESULT, TOGGLE_SEARCH, Dispatcher, Router,
)
from .populators import esc

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DESCRIPTION_LIMIT = 100
NO_RESULTS = '<div class="search-empty">No results found</div>'

IDLE = "idle"
ACTIVE = "active"

SEARCH_CONTAINER = """
<div id="search-container" class="search-container" style="display: none">
  <div class="search-bar">
    <input type="text" id="search-input" placeholder="Search content...">
    <button type="button" class="search-close" aria-label="Close search">×</button>
  </div>
  <div id="search-results"></div>
</div>
"""


class SearchResult(NamedTuple):
    type: str
    title: str
    section: str
    description: str


def _contains(value, query: str) -> bool:
    return query in str(value or "").lower()


def _truncate(text: str) -> str:
    return str(text or "")[:DESCRIPTION_LIMIT] + "..."


def _records(collection) -> List[Mapping]:
    """Only mapping entries are searchable; anything else in the file is ignored."""
    if not isinstance(collection, (list, tuple)):
        return []
    return [r for r in collection if isinstance(r, Mapping)]


def _items(value) -> tuple:
    return tuple(value) if isinstance(value, (list, tuple)) else ()


def search(data: PageData, query: str) -> List[SearchResult]:
    """Case-insensitive substring match; queries under two characters match nothing."""
    q = (query or "").lower().strip()
    if len(q) < MIN_QUERY_LENGTH:
        return []

    results = []
    for pub in _records(data.publications):
        if (_contains(pub.get("title"), q)
                or any(_contains(author_name(a), q) for a in _items(pub.get("authors")))
                or _contains(pub.get("venue"), q)):
            results.append(SearchResult(
                "Publication", pub.get("title", ""), "research",
                f"{pub.get('venue', '')}, {pub.get('year', '')}",
            ))
    for project in _records(data.projects):
        if (_contains(project.get("title"), q)
                or _contains(project.get("description"), q)
                or any(_contains(t, q) for t in _items(project.get("technologies")))):
            results.append(SearchResult(
                "Project", project.get("title", ""), "projects",
                _truncate(project.get("description")),
            ))
    for course in _records(data.courses):
        if (_contains(course.get("title"), q)
                or _contains(course.get("courseCode"), q)
                or _contains(course.get("description"), q)):
            results.append(SearchResult(
                "Course", f"{course.get('courseCode', '')}: {course.get('title', '')}", "teaching",
                _truncate(course.get("description")),
            ))
    return results


def render_results(results: List[SearchResult]) -> str:
    if not results:
        return NO_RESULTS
    return "".join(
        f'<div class="search-result" data-section="{esc(r.section)}">'
        f'<div class="search-result-title">{esc(r.type)}: {esc(r.title)}</div>'
        f'<div class="search-result-description">{esc(r.description)}</div>'
        "</div>"
        for r in results
    )


class SearchPanel:
    """
    Search panel state machine.

    idle: nothing shown. active: results panel populated. A query of two or
    more characters moves to active; a shorter query or close() returns to
    idle. close() always clears the query and the results.
    """

    def __init__(self, data: PageData, router: Router, page: Optional[Page] = None):
        self.data = data
        self.router = router
        self.page = page
        self.state = IDLE
        self.visible = False
        self.focused = False
        self.query = ""
        self.results: List[SearchResult] = []

    def install(self) -> None:
        """Insert the search container into the page body if it is not there yet."""
        if self.page is None or self.page.by_id("search-container") is not None:
            return
        body = self.page.soup.body or self.page.soup
        self.page.append_markup(body, SEARCH_CONTAINER)

    def wire(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(TOGGLE_SEARCH, self.toggle)
        dispatcher.register(CLOSE_SEARCH, self.close)
        dispatcher.register(SEARCH_INPUT, self.update)
        dispatcher.register(SELECT_RESULT, self.select)

    def update(self, query: str) -> List[SearchResult]:
        self.query = query
        if len((query or "").strip()) < MIN_QUERY_LENGTH:
            self.state = IDLE
            self.results = []
            self._render("")
            return self.results
        self.state = ACTIVE
        self.results = search(self.data, query)
        logger.debug("search %r: %d results", query, len(self.results))
        self._render(render_results(self.results))
        return self.results

    def close(self) -> None:
        self.visible = False
        self.focused = False
        self.state = IDLE
        self.query = ""
        self.results = []
        self._show(False)
        self._render("")

    def toggle(self) -> None:
        self.visible = not self.visible
        self.focused = self.visible
        self._show(self.visible)

    def select(self, result: Union[SearchResult, str]) -> Optional[str]:
        section = result.section if isinstance(result, SearchResult) else result
        self.close()
        return self.router.navigate(section)

    def _show(self, visible: bool) -> None:
        if self.page is None:
            return
        container = self.page.by_id("search-container")
        if container is not None:
            self.page.set_style(container, display="block" if visible else "none")

    def _render(self, markup: str) -> None:
        if self.page is None:
            return
        field = self.page.by_id("search-input")
        if field is not None:
            field["value"] = self.query
        panel = self.page.by_id("search-results")
        if panel is not None:
            self.page.replace_markup(panel, markup)
