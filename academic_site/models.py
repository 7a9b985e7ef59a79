"""
Immutable page data built once by the loader.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Tuple


def freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class PageData:
    personal: Mapping[str, Any]
    publications: Tuple[Mapping[str, Any], ...]
    courses: Tuple[Mapping[str, Any], ...]
    projects: Tuple[Mapping[str, Any], ...]

    @classmethod
    def from_documents(cls, personal, publications, courses, projects) -> "PageData":
        return cls(
            personal=freeze(personal or {}),
            publications=freeze(publications or []),
            courses=freeze(courses or []),
            projects=freeze(projects or []),
        )


def author_name(author: Any) -> str:
    """Authors are plain strings or {name, highlight} objects."""
    if isinstance(author, Mapping):
        return str(author.get("name", ""))
    return str(author)
