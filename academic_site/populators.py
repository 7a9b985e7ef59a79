"""
Section populators: pure transforms from PageData to page ops.

Nothing here touches a document. Each populator returns a list of ops that
Page.apply writes; ops aimed at elements the template lacks are skipped there.
"""

import html
import logging
from typing import Any, Callable, List, Mapping, NamedTuple, Sequence

import markdown

from .models import PageData, author_name
from .page import Append, Replace, SetAttr, SetText, SetTitle

logger = logging.getLogger(__name__)


class RenderOptions(NamedTuple):
    owner_marker: str = ""
    copyright_year: str = "2023"


def esc(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def default_owner_marker(personal: Mapping[str, Any]) -> str:
    parts = str(personal.get("name", "")).split()
    return parts[-1] if parts else ""


def is_owner(author: Any, marker: str) -> bool:
    if isinstance(author, Mapping) and "highlight" in author:
        return bool(author["highlight"])
    return bool(marker) and marker in author_name(author)


MALFORMED = (KeyError, TypeError, AttributeError, ValueError)

# Inline Markdown only: every bio entry stays exactly one paragraph.
BLOCK_SYNTAX = (
    "empty", "indent", "code", "hashheader", "setextheader",
    "hr", "olist", "ulist", "quote", "reference",
)


def _warn(section: str, e: Exception) -> None:
    logger.warning("%s skipped: malformed data (%s: %s)", section, type(e).__name__, e)


def render_each(section: str, records: Any, render: Callable[[Any], str]) -> List[str]:
    """Render every record, dropping only the malformed ones."""
    if records is None:
        return []
    if not isinstance(records, (list, tuple)):
        _warn(section, TypeError(f"expected a list, got {type(records).__name__}"))
        return []
    out = []
    for i, record in enumerate(records, 1):
        try:
            out.append(render(record))
        except MALFORMED as e:
            _warn(f"{section} #{i}", e)
    return out


def render_one(section: str, build: Callable[[], list]) -> list:
    try:
        return build()
    except MALFORMED as e:
        _warn(section, e)
        return []


def _inline_markdown() -> markdown.Markdown:
    md = markdown.Markdown(output_format="html")
    for name in BLOCK_SYNTAX:
        md.parser.blockprocessors.deregister(name, strict=False)
    return md


def render_paragraph(text: str) -> str:
    """One <p> per entry. Emphasis, code and links are honoured; lists and headings are not."""
    if not isinstance(text, str):
        raise TypeError(f"paragraph must be a string, got {type(text).__name__}")
    flat = " ".join(text.split())
    if not flat:
        return "<p></p>"
    # Escape first so only Markdown syntax, not raw HTML, becomes markup.
    return _inline_markdown().convert(html.escape(flat, quote=False))


def _year(pub: Any) -> int:
    try:
        return int(pub.get("year") or 0)
    except (AttributeError, TypeError, ValueError):
        return 0


def sort_publications(publications: Sequence[Mapping]) -> List[Mapping]:
    """Newest first; equal years keep their source order."""
    return sorted(publications, key=_year, reverse=True)


def sort_projects(projects: Sequence[Mapping]) -> List[Mapping]:
    """Featured first, then active, otherwise source order."""
    def key(p):
        if not isinstance(p, Mapping):
            return (True, True)
        return (not p.get("featured"), p.get("status") != "active")
    return sorted(projects, key=key)


def populate_personal_info(data: PageData, opts: RenderOptions) -> list:
    p = data.personal
    name, title = p.get("name", ""), p.get("title", "")
    return [
        SetTitle(f"{name} - {title}"),
        SetAttr("page-description", "content", f"{name} - {title}. {p.get('heroSubtitle', '')}"),
        SetText("nav-name", name),
        SetText("nav-title", title),
        SetText("hero-title", p.get("heroTitle", "")),
        SetText("hero-subtitle", p.get("heroSubtitle", "")),
    ]


def _education_item(edu) -> str:
    return f"<li><strong>{esc(edu['degree'])}</strong>, {esc(edu['institution'])} ({esc(edu['year'])})</li>"


def _quick_fact(fact) -> str:
    return (
        '<div class="quick-fact">'
        f'<span class="quick-fact-label">{esc(fact["label"])}:</span> '
        f'<span class="quick-fact-value">{esc(fact["value"])}</span>'
        "</div>"
    )


def populate_about(data: PageData, opts: RenderOptions) -> list:
    p = data.personal
    ops = [SetAttr("profile-image", "alt", p.get("name", ""))]
    ops += [Append("bio-paragraphs", m) for m in render_each("bio", p.get("bio"), render_paragraph)]
    ops += [Append("education-list", m)
            for m in render_each("education", p.get("education"), _education_item)]
    ops += [Append("quick-facts", m) for m in render_each("quick fact", p.get("quickFacts"), _quick_fact)]
    return ops


def render_authors(authors: Sequence[Any], marker: str) -> str:
    parts = []
    for author in authors:
        name = esc(author_name(author))
        parts.append(f"<strong>{name}</strong>" if is_owner(author, marker) else name)
    return ", ".join(parts)


def _interest_card(interest) -> str:
    return (
        '<div class="interest-card">'
        f'<i class="{esc(interest["icon"])}"></i>'
        f'<h4>{esc(interest["title"])}</h4>'
        f'<p>{esc(interest["description"])}</p>'
        "</div>"
    )


def _pub_link(link) -> str:
    return f'<a href="{esc(link["url"])}" class="pub-link" target="_blank">{esc(link["type"])}</a>'


def _publication_item(pub, marker: str) -> str:
    links = "".join(render_each("publication link", pub.get("links"), _pub_link))
    featured = " featured" if pub.get("featured") else ""
    return (
        f'<div class="publication-item{featured}"><div class="publication-content">'
        f'<span class="pub-title"><strong>{esc(pub["title"])}</strong></span>. '
        f'<span class="authors">{render_authors(pub.get("authors") or (), marker)}</span>. '
        f'<span class="venue"><em>{esc(pub["venue"])}</em>, {esc(pub["year"])}</span>. '
        f'<span class="publication-links-inline">{links}</span>'
        "</div></div>"
    )


def populate_research(data: PageData, opts: RenderOptions) -> list:
    ops = [Append("research-interests-grid", m)
           for m in render_each("research interest", data.personal.get("researchInterests"), _interest_card)]

    marker = opts.owner_marker or default_owner_marker(data.personal)
    publications = sort_publications(data.publications)
    ops += [Append("publications-list", m)
            for m in render_each("publication", publications, lambda pub: _publication_item(pub, marker))]
    return ops


def _course_card(course) -> str:
    return (
        f'<div class="course-card {esc(course["status"])}">'
        '<div class="course-header"><div>'
        f'<h4>{esc(course["courseCode"])}: {esc(course["title"])}</h4>'
        f'<div class="course-level">{esc(course["level"])}</div>'
        "</div></div>"
        f'<p class="semester">{esc(course["semester"])}</p>'
        f'<p>{esc(course["description"])}</p>'
        '<div class="course-info">'
        f'<span><i class="fas fa-users"></i> {esc(course["students"])} students</span>'
        f'<span><i class="fas fa-clock"></i> {esc(course["schedule"])}</span>'
        f'<span><i class="fas fa-map-marker-alt"></i> {esc(course["room"])}</span>'
        "</div></div>"
    )


def _stat_card(stat) -> str:
    return (
        '<div class="stat-card">'
        f'<div class="stat-number">{esc(stat["count"])}</div>'
        f'<div class="stat-label">{esc(stat["type"])}</div>'
        "</div>"
    )


def populate_teaching(data: PageData, opts: RenderOptions) -> list:
    current = [c for c in data.courses if isinstance(c, Mapping) and c.get("status") == "current"]
    ops = [Append("courses-grid", m) for m in render_each("course", current, _course_card)]
    ops += [Append("supervision-stats", m)
            for m in render_each("supervision stat", data.personal.get("supervision"), _stat_card)]
    return ops


def _tech_tag(tech) -> str:
    return f'<span class="tech-tag">{esc(tech)}</span>'


def _project_link(link) -> str:
    return (
        f'<a href="{esc(link["url"])}" class="project-link" target="_blank">'
        f'<i class="{esc(link.get("icon", ""))}"></i> {esc(link["type"])}</a>'
    )


def _project_card(project) -> str:
    tags = "".join(render_each("technology", project.get("technologies"), _tech_tag))
    links = "".join(render_each("project link", project.get("links"), _project_link))
    funding = (
        f'<div class="project-funding">Funding: {esc(project["funding"])}</div>'
        if project.get("funding") else ""
    )
    featured = " featured" if project.get("featured") else ""
    status = esc(project.get("status", ""))
    return (
        f'<div class="project-card{featured}">'
        '<div class="project-header">'
        f'<h3>{esc(project["title"])}</h3>'
        f'<div class="project-status {status}">{status}</div>'
        "</div>"
        f'<p>{esc(project["description"])}</p>'
        f'<div class="project-tech">{tags}</div>'
        f"{funding}"
        f'<div class="project-links">{links}</div>'
        "</div>"
    )


def populate_projects(data: PageData, opts: RenderOptions) -> list:
    return [Append("projects-grid", m)
            for m in render_each("project", sort_projects(data.projects), _project_card)]


def _contact_info(personal) -> list:
    email = esc(personal["contact"]["email"])
    return [Replace(
        "contact-info",
        "<h3>Contact Information</h3>"
        '<div class="contact-item"><i class="fas fa-envelope"></i><div>'
        "<h4>Email</h4>"
        f'<p><a href="mailto:{email}">{email}</a></p>'
        "</div></div>",
    )]


def _social_link(link) -> str:
    platform = esc(link["platform"])
    return (
        f'<a href="{esc(link["url"])}" class="social-link" target="_blank" '
        f'rel="noopener noreferrer" data-tooltip="{platform}" aria-label="{platform}">'
        f'<i class="{esc(link.get("icon", ""))}"></i><span>{platform}</span></a>'
    )


def populate_contact(data: PageData, opts: RenderOptions) -> list:
    ops = render_one("contact email", lambda: _contact_info(data.personal))
    ops += [Append("social-links-grid", m)
            for m in render_each("social link", data.personal.get("socialLinks"), _social_link)]
    return ops


def populate_footer(data: PageData, opts: RenderOptions) -> list:
    footer = data.personal.get("footer") or {}
    ops = render_one("footer copyright", lambda: [SetText(
        "footer-copyright", f"© {opts.copyright_year} {footer['copyright']}. All rights reserved.",
    )])
    ops += render_one("footer updated", lambda: [SetText(
        "footer-updated", f"Last updated: {footer['lastUpdated']}",
    )])
    return ops


POPULATORS: Sequence[Callable[[PageData, RenderOptions], list]] = (
    populate_personal_info,
    populate_about,
    populate_research,
    populate_teaching,
    populate_projects,
    populate_contact,
    populate_footer,
)


def populate_all(data: PageData, opts: RenderOptions = RenderOptions()) -> list:
    """
    Run every populator. Malformed records are dropped one at a time inside
    each populator; a section whose top-level shape is wrong is dropped whole.
    """
    ops = []
    for populator in POPULATORS:
        try:
            ops.extend(populator(data, opts))
        except MALFORMED as e:
            _warn(populator.__name__, e)
    return ops
