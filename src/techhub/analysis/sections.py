"""Split markdown analyses into typed sections for display and export."""

import re

from techhub.models import AnalysisSection, ContentItem, SectionKind

_HEADING = re.compile(r"^##\s+", re.MULTILINE)
_BULLET = re.compile(r"^[-*•]\s")
_HIGHLIGHT = re.compile(r"^\*\*.*\*\*")

_KIND_KEYWORDS: list[tuple[SectionKind, tuple[str, ...]]] = [
    (SectionKind.priority, ("priority", "critical", "urgent")),
    (SectionKind.recommendation, ("recommendation", "actionable", "suggestion")),
    (SectionKind.overview, ("overview", "summary", "health")),
    (SectionKind.technical, ("technical", "architecture", "code")),
]


def classify_section(title: str) -> SectionKind:
    lower = title.lower()
    for kind, keywords in _KIND_KEYWORDS:
        if any(k in lower for k in keywords):
            return kind
    return SectionKind.general


def parse_analysis(analysis: str) -> list[AnalysisSection]:
    """Split an analysis on ``## `` headings at the start of a line.

    Text before the first heading becomes a section titled by its first
    line. Sections with no body are dropped.
    """
    sections: list[AnalysisSection] = []
    for chunk in _HEADING.split(analysis):
        if not chunk.strip():
            continue
        title, _, rest = chunk.partition("\n")
        content = rest.strip()
        if not content:
            continue
        sections.append(
            AnalysisSection(
                title=title.strip(),
                content=content,
                kind=classify_section(title),
            )
        )
    return sections


def parse_content_items(content: str) -> list[ContentItem]:
    """One item per non-blank line, with bullet/emphasis markers stripped."""
    items: list[ContentItem] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        text = _BULLET.sub("", stripped).replace("**", "").replace("*", "")
        items.append(
            ContentItem(
                text=text,
                is_bullet=bool(_BULLET.match(stripped)),
                is_highlight=bool(_HIGHLIGHT.match(stripped)),
            )
        )
    return items
