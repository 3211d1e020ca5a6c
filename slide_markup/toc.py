"""
Table of contents generation for agenda (``#agd``) slides.

The whole document is scanned, not just the current slide. Cover, agenda
and summary headings are never listed.
"""
import logging
import math
import re
from typing import List, Optional, Sequence, TypeVar

from .attributes import (
    LAYOUT_ATTRIBUTES,
    AttributeMap,
    parse_attribute_from_line,
    resolve_heading_level,
)
from .models import Section

logger = logging.getLogger(__name__)

T = TypeVar("T")

# "{2:mid}" at the end or "{2 mid}" at the start of a heading title
_ANNOTATION_RE = re.compile(r"^\{[^{}]*\}\s*|\s*\{[^{}]*\}\s*$")
_BARE_HEADING_RE = re.compile(r"\s*#+\s*")


def _heading_title(line: str, line_index: int, attribute_map: Optional[AttributeMap]):
    """Return ``(attribute, title)`` for a heading line."""
    attribute, text = parse_attribute_from_line(line)
    if attribute is None and attribute_map:
        attribute = attribute_map.get(line_index)
    if _BARE_HEADING_RE.fullmatch(text):
        text = ""
    title = _ANNOTATION_RE.sub("", text).strip()
    return attribute, title


def extract_section_headings(
    content: str,
    max_level: int = 1,
    attribute_map: Optional[AttributeMap] = None,
) -> List[Section]:
    """Collect headings of level <= ``max_level`` from the whole document."""
    sections = []
    for idx, line in enumerate(content.split("\n")):
        level = resolve_heading_level(line, idx, attribute_map)
        if level is None or level > max_level:
            continue
        attribute, title = _heading_title(line, idx, attribute_map)
        if attribute in LAYOUT_ATTRIBUTES or not title:
            continue
        sections.append(Section(title=title, level=level, line_number=idx))
    logger.debug("Collected %d section headings (max level %d)", len(sections), max_level)
    return sections


def _toc_groups(sections: Sequence[Section]) -> List[List[str]]:
    """Numbered list lines grouped by top-level entry."""
    groups: List[List[str]] = []
    counters = {}
    stack = []  # (level, indent of the entry's children)
    for section in sections:
        while stack and stack[-1][0] >= section.level:
            stack.pop()
        depth = len(stack)
        indent = stack[-1][1] if stack else 0
        for key in [d for d in counters if d > depth]:
            del counters[key]
        number = counters.get(depth, 0) + 1
        counters[depth] = number
        marker = f"{number}. "
        line = " " * indent + marker + section.title
        if depth == 0 or not groups:
            groups.append([line])
        else:
            groups[-1].append(line)
        stack.append((section.level, indent + len(marker)))
    return groups


def generate_table_of_contents(sections: Sequence[Section]) -> str:
    """
    Render sections as a nested ordered Markdown list. Deeper headings are
    indented under the closest shallower one.
    """
    if not sections:
        return ""
    return "\n".join(line for group in _toc_groups(sections) for line in group)


def split_toc_columns(items: Sequence[T], max_columns: int, items_per_column: int) -> List[List[T]]:
    """
    Split agenda entries into columns. Lists that fit one column, or
    formats limited to one column, stay whole; otherwise the list is halved.
    """
    items = list(items)
    if max_columns <= 1 or len(items) <= items_per_column or len(items) <= 1:
        return [items]
    half = math.ceil(len(items) / 2)
    return [items[:half], items[half:]]


def render_toc(sections: Sequence[Section], max_columns: int = 1, items_per_column: int = 22) -> str:
    """Table of contents markup, split into a two-column grid when needed."""
    groups = _toc_groups(sections)
    if not groups:
        return ""
    columns = split_toc_columns(groups, max_columns, items_per_column)
    if len(columns) == 1:
        return "\n".join(line for group in groups for line in group)

    out = ['<div class="toc-grid">']
    for column in columns:
        out.append('<div class="toc-column">')
        out.append("")
        out.extend(line for group in column for line in group)
        out.append("")
        out.append("</div>")
    out.append("</div>")
    return "\n".join(out)
