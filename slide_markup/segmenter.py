"""
Slide segmentation.

A document is cut into slides at every heading whose level is at or above
the split level of the active output format (1-3). Both the slide texts and
the slide start lines come from the same boundary scan, so the two views
always line up one-to-one.
"""
import logging
import re
from typing import Iterator, List, Optional, Tuple

from .attributes import (
    AttributeMap,
    format_line,
    parse_attribute_from_line,
    resolve_heading_level,
    split_indent,
)
from .layout import extract_slide_layout
from .models import Slide

logger = logging.getLogger(__name__)

MIN_SPLIT_LEVEL = 1
MAX_SPLIT_LEVEL = 3

DEFAULT_SLIDE_TITLE = "New slide"

_TITLE_PREFIX_RE = re.compile(r"(?:#ttl|#agd|#!|#{1,3})(?:\s+|$)")
# "{2:mid}" at the end or "{2 mid}" at the start of a heading title
_ANNOTATION_RE = re.compile(r"^\{[^{}]*\}\s*|\s*\{[^{}]*\}\s*$")


def _check_level(level: int) -> None:
    if not MIN_SPLIT_LEVEL <= level <= MAX_SPLIT_LEVEL:
        raise ValueError(
            f"Split level must be between {MIN_SPLIT_LEVEL} and {MAX_SPLIT_LEVEL}, got {level}"
        )


def iter_slide_bounds(
    lines: List[str],
    level: int,
    attribute_map: Optional[AttributeMap] = None,
) -> Iterator[Tuple[int, int]]:
    """
    Yield ``(start, end)`` line ranges (end exclusive), one per slide.

    Content before the first qualifying heading becomes an implicit first
    slide unless it is blank. A document without any qualifying heading is
    a single slide starting at line 0.
    """
    _check_level(level)

    starts = []
    for idx, line in enumerate(lines):
        heading_level = resolve_heading_level(line, idx, attribute_map)
        if heading_level is not None and heading_level <= level:
            starts.append(idx)

    if not starts:
        yield 0, len(lines)
        return

    first = starts[0]
    if first > 0 and any(line.strip() for line in lines[:first]):
        yield 0, first

    for pos, start in enumerate(starts):
        end = starts[pos + 1] if pos + 1 < len(starts) else len(lines)
        yield start, end


def _line_with_attribute(line: str, line_index: int, attribute_map: Optional[AttributeMap]) -> str:
    """Re-inject a map-only attribute so the slide text is self-describing."""
    if not attribute_map:
        return line
    attribute = attribute_map.get(line_index)
    if not attribute:
        return line
    parsed, _ = parse_attribute_from_line(line)
    if parsed == attribute:
        return line
    return format_line(attribute, line)


def iter_slide_texts(
    content: str,
    level: int,
    attribute_map: Optional[AttributeMap] = None,
) -> Iterator[Tuple[int, str]]:
    """
    Yield ``(start_line, slide_text)`` per slide. Map-only attributes are
    written back into the text so each slide parses on its own.
    """
    lines = content.split("\n")
    for start, end in iter_slide_bounds(lines, level, attribute_map):
        yield start, "\n".join(
            _line_with_attribute(lines[idx], idx, attribute_map) for idx in range(start, end)
        )


def split_slides_by_heading(
    content: str,
    level: int,
    attribute_map: Optional[AttributeMap] = None,
) -> List[str]:
    """Split ``content`` into slide texts at headings of level <= ``level``."""
    slides = [text for _, text in iter_slide_texts(content, level, attribute_map)]
    logger.debug("Split document into %d slides at level %d", len(slides), level)
    return slides


def get_slide_start_lines(
    content: str,
    level: int,
    attribute_map: Optional[AttributeMap] = None,
) -> List[int]:
    """0-based document line index where each slide starts."""
    lines = content.split("\n")
    return [start for start, _ in iter_slide_bounds(lines, level, attribute_map)]


def build_slides(
    content: str,
    level: int,
    attribute_map: Optional[AttributeMap] = None,
) -> List[Slide]:
    """Segment ``content`` and classify each slide's layout."""
    return [
        Slide(content=text, layout=extract_slide_layout(text), start_line=start)
        for start, text in iter_slide_texts(content, level, attribute_map)
    ]


def slide_index_for_line(start_lines: List[int], line_index: int) -> int:
    """Index of the slide containing ``line_index`` given the slide start lines."""
    current = 0
    for idx, start in enumerate(start_lines):
        if start <= line_index:
            current = idx
        else:
            break
    return current


def extract_slide_title(content: str, default: str = DEFAULT_SLIDE_TITLE) -> str:
    """
    Title of a slide: the first H1, H2 or H3 text with its marker and any
    column annotation removed.
    """
    for line in content.split("\n"):
        _, rest = split_indent(line)
        match = _TITLE_PREFIX_RE.match(rest)
        if not match:
            continue
        title = _ANNOTATION_RE.sub("", rest[match.end():]).strip()
        if title:
            return title
    return default
