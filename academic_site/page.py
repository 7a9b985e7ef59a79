"""
Thin DOM adapter over BeautifulSoup. Populators describe what to write as ops;
the Page applies them and silently skips any op whose target element is absent.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


class SetTitle(NamedTuple):
    text: str


class SetText(NamedTuple):
    target: str
    text: str


class SetAttr(NamedTuple):
    target: str
    name: str
    value: str


class Append(NamedTuple):
    """Append rendered markup as the last children of the target."""
    target: str
    markup: str


class Replace(NamedTuple):
    """Replace the target's children with rendered markup."""
    target: str
    markup: str


def parse_style(value: str) -> Dict[str, str]:
    props = {}
    for decl in (value or "").split(";"):
        if ":" not in decl:
            continue
        k, v = decl.split(":", 1)
        if k.strip():
            props[k.strip()] = v.strip()
    return props


def format_style(props: Dict[str, str]) -> str:
    return "; ".join(f"{k}: {v}" for k, v in props.items())


class Page:
    """An HTML document being populated."""

    def __init__(self, markup: str):
        self.soup = BeautifulSoup(markup, "html.parser")

    @classmethod
    def from_file(cls, path: Path) -> "Page":
        return cls(Path(path).read_text(encoding="utf-8"))

    def html(self) -> str:
        return str(self.soup)

    # --- lookup ---------------------------------------------------------
    def by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    @property
    def title(self) -> str:
        return self.soup.title.get_text() if self.soup.title else ""

    # --- mutation -------------------------------------------------------
    def set_title(self, text: str) -> None:
        if self.soup.title is None:
            head = self.soup.head
            if head is None:
                return
            head.append(self.soup.new_tag("title"))
        self.soup.title.string = text

    def append_markup(self, el: Tag, markup: str) -> None:
        fragment = BeautifulSoup(markup, "html.parser")
        for child in list(fragment.contents):
            el.append(child.extract())

    def replace_markup(self, el: Tag, markup: str) -> None:
        el.clear()
        self.append_markup(el, markup)

    def set_style(self, el: Tag, **props: str) -> None:
        """Set inline style properties; underscores in names become dashes."""
        current = parse_style(el.get("style", ""))
        current.update({k.replace("_", "-"): v for k, v in props.items()})
        el["style"] = format_style(current)

    def style_of(self, el: Tag) -> Dict[str, str]:
        return parse_style(el.get("style", ""))

    def add_class(self, el: Tag, name: str) -> None:
        classes = el.get("class", [])
        if name not in classes:
            el["class"] = classes + [name]

    def remove_class(self, el: Tag, name: str) -> None:
        el["class"] = [c for c in el.get("class", []) if c != name]

    def toggle_class(self, el: Tag, name: str) -> bool:
        if name in el.get("class", []):
            self.remove_class(el, name)
            return False
        self.add_class(el, name)
        return True

    def apply(self, ops: Iterable) -> int:
        """Apply populator ops. Returns how many landed on an existing element."""
        applied = 0
        for op in ops:
            if isinstance(op, SetTitle):
                self.set_title(op.text)
                applied += 1
                continue
            el = self.by_id(op.target)
            if el is None:
                logger.debug("skipping %s: #%s not in page", type(op).__name__, op.target)
                continue
            if isinstance(op, SetText):
                el.string = op.text
            elif isinstance(op, SetAttr):
                el[op.name] = op.value
            elif isinstance(op, Append):
                self.append_markup(el, op.markup)
            elif isinstance(op, Replace):
                self.replace_markup(el, op.markup)
            else:
                raise TypeError(f"unknown op: {op!r}")
            applied += 1
        return applied
