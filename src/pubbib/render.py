"""HTML rendering of publication lists grouped by year."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Sequence

from .authors import format_authors
from .group import group_by_year
from .types import Entry

logger = logging.getLogger(__name__)

_BRACES = re.compile(r"[{}]")

EMPTY_MESSAGE = "<p>No publications found.</p>"


def strip_braces(value: str) -> str:
    """Remove every ``{`` and ``}`` from a field value."""
    return _BRACES.sub("", value)


def _link(href: str, label: str) -> str:
    return f'<a href="{href}" target="_blank">{label}</a>'


def render_venue(entry: Entry) -> str:
    """Build the venue line: booktitle or journal, then volume, number, pages and year."""
    venue = entry.get("booktitle") or entry.get("journal")
    year = entry.get("year")

    if not venue:
        return year

    parts = [venue]
    for field, label in (("volume", "Volume "), ("number", "Number "), ("pages", "Pages ")):
        value = entry.get(field)
        if value:
            parts.append(f"{label}{value}")
    if year:
        parts.append(year)
    return ", ".join(parts)


def render_links(entry: Entry) -> list[str]:
    """Return the PDF, DOI and URL anchors available for ``entry``."""
    links: list[str] = []

    pdf = entry.get("pdf").replace('"', "")
    if pdf:
        links.append(_link(pdf, "PDF"))

    doi = strip_braces(entry.get("doi")).strip()
    if doi:
        links.append(_link(f"https://doi.org/{doi}", "DOI"))

    url = entry.get("url")
    if url:
        links.append(_link(url, "URL"))

    return links


def render_entry(entry: Entry) -> str:
    """Render one entry as a ``publication-entry`` block.

    Field text is inserted verbatim so titles may carry inline HTML.
    """
    parts = ['<div class="publication-entry">']

    title = entry.get("title")
    if title:
        parts.append(f'<div class="pub-title">{strip_braces(title)}</div>')

    author = entry.get("author")
    if author:
        parts.append(f'<div class="pub-authors">{format_authors(author)}</div>')

    venue = render_venue(entry)
    if venue:
        parts.append(f'<div class="pub-venue">{venue}</div>')

    links = render_links(entry)
    if links:
        parts.append(f'<div class="pub-links">[{"] [".join(links)}]</div>')

    parts.append("</div>")
    return "".join(parts)


def render_by_year(entries: Sequence[Entry]) -> str:
    """Render all entries under one heading per year, newest first."""
    if not entries:
        logger.info("No publications to render")
        return EMPTY_MESSAGE

    grouped = group_by_year(entries)

    parts: list[str] = []
    for year, year_entries in grouped.items():
        parts.append(f'<h3 class="pub-year">{year}</h3>')
        parts.append('<div class="pub-year-group">')
        parts.extend(render_entry(entry) for entry in year_entries)
        parts.append("</div>")

    logger.info("Rendered %d publications across %d years", len(entries), len(grouped))
    return "".join(parts)


def render_page(entries: Sequence[Entry], title: str = "Publications") -> str:
    """Wrap :func:`render_by_year` in a standalone HTML document."""
    escaped_title = html.escape(title)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escaped_title}</title>\n"
        "</head>\n"
        "<body>\n"
        f"<h2>{escaped_title}</h2>\n"
        f'<div id="publications">{render_by_year(entries)}</div>\n'
        "</body>\n"
        "</html>\n"
    )
