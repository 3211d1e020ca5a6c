"""
Line attribute codec.

Every editor line may carry one attribute token encoded as a prefix of the
raw text (``# Title``, ``- item``, ``##2. step``, ``! key message`` ...).
This module converts between raw document text and the structured
:class:`~slide_markup.models.EditorLine` model and resolves heading levels,
which the segmenter, the grid annotator and the TOC generator all rely on.
"""
import dataclasses
import logging
import re
from typing import Dict, List, Optional, Tuple

from .models import EditorLine

logger = logging.getLogger(__name__)

AttributeMap = Dict[int, str]

_INDENT_RE = re.compile(r"([\t ]*)(.*)", re.DOTALL)

_ALPHABET_RE = re.compile(r"([a-z])\.\s+", re.IGNORECASE)
_ALPHABET_GLUED_RE = re.compile(r"([a-z])\.(?=\S)", re.IGNORECASE)

# Most specific first: "###3." must win over "#3." and "3."
_NUMBERED_RES = [
    re.compile(r"(###\d+\.)\s+"),
    re.compile(r"(##\d+\.)\s+"),
    re.compile(r"(#\d+\.)\s+"),
    re.compile(r"(\d+\.)\s+"),
]
_NUMBERED_GLUED_RES = [
    re.compile(r"(###\d+\.)(?=\S)"),
    re.compile(r"(##\d+\.)(?=\S)"),
    re.compile(r"(#\d+\.)(?=\S)"),
    re.compile(r"(\d+\.)(?=\S)"),
]

_SYMBOL_RES = [
    (re.compile(r"#ttl\s+"), "#ttl"),
    (re.compile(r"#agd\s+"), "#agd"),
    (re.compile(r"#!\s+"), "#!"),
    (re.compile(r"###\s+"), "###"),
    (re.compile(r"##\s+"), "##"),
    (re.compile(r"#\s+"), "#"),
    (re.compile(r"-\s+"), "-"),
    (re.compile(r"\*\s+"), "*"),
    (re.compile(r"!\s+"), "!"),
]
_SYMBOL_GLUED_RES = [
    (re.compile(r"###(?=\S)"), "###"),
    (re.compile(r"##(?=\S)"), "##"),
    (re.compile(r"#(?=\S)"), "#"),
    (re.compile(r"-(?=\S)"), "-"),
    (re.compile(r"\*(?=\S)"), "*"),
    # "![alt](src)" is an image, not a glued key message
    (re.compile(r"!(?=[^\s\[])"), "!"),
]

LAYOUT_ATTRIBUTES = ("#ttl", "#agd", "#!")

ATTRIBUTE_HEADING_LEVELS = {
    "#": 1,
    "#ttl": 1,
    "#agd": 1,
    "#!": 1,
    "##": 2,
    "###": 3,
}

_TEXT_LAYOUT_HEADING_RE = re.compile(r"#(?:ttl|agd|!)(?:\s|$)")
_TEXT_HEADING_RE = re.compile(r"(#+)(?:\s|$)")

_NUMBERED_ATTRIBUTE_RE = re.compile(r"(#*)(\d+)\.")
_ALPHABET_ATTRIBUTE_RE = re.compile(r"[A-Z]\.")


def is_numbered_attribute(attribute: Optional[str]) -> bool:
    return attribute is not None and _NUMBERED_ATTRIBUTE_RE.fullmatch(attribute) is not None


def is_alphabet_attribute(attribute: Optional[str]) -> bool:
    return attribute is not None and _ALPHABET_ATTRIBUTE_RE.fullmatch(attribute) is not None


def should_renumber_attribute(attribute: Optional[str]) -> bool:
    return is_numbered_attribute(attribute) or is_alphabet_attribute(attribute)


def parse_attribute_from_line(line: str) -> Tuple[Optional[str], str]:
    """
    Split a raw line into ``(attribute, text_without_attribute)``.

    Leading indentation is kept at the front of the returned text. When no
    marker matches, the attribute is ``None`` and the line comes back
    unchanged.
    """
    indent, rest = _INDENT_RE.match(line).groups()

    match = _ALPHABET_RE.match(rest)
    if match:
        return f"{match.group(1).upper()}.", indent + rest[match.end():]

    for pattern in _NUMBERED_RES:
        match = pattern.match(rest)
        if match:
            return match.group(1), indent + rest[match.end():]

    for pattern, attribute in _SYMBOL_RES:
        match = pattern.match(rest)
        if match:
            return attribute, indent + rest[match.end():]

    # Fallback for markers glued to their text ("#Title", "-item")
    match = _ALPHABET_GLUED_RE.match(rest)
    if match:
        return f"{match.group(1).upper()}.", indent + rest[match.end():]

    for pattern in _NUMBERED_GLUED_RES:
        match = pattern.match(rest)
        if match:
            return match.group(1), indent + rest[match.end():]

    for pattern, attribute in _SYMBOL_GLUED_RES:
        match = pattern.match(rest)
        if match:
            return attribute, indent + rest[match.end():]

    return None, line


def split_indent(text: str) -> Tuple[str, str]:
    """Return ``(leading_whitespace, remainder)``."""
    indent, rest = _INDENT_RE.match(text).groups()
    return indent, rest


def format_line(attribute: Optional[str], text: str) -> str:
    """Render one line back to raw text: ``{indent}{attribute} {text}``."""
    if not attribute:
        return text
    indent, rest = split_indent(text)
    return f"{indent}{attribute} {rest}"


def content_to_lines(content: str) -> List[EditorLine]:
    """Parse a raw document into editor lines."""
    lines = []
    for raw in content.split("\n"):
        attribute, text = parse_attribute_from_line(raw)
        lines.append(EditorLine(attribute=attribute, text=text))
    return lines


def lines_to_content(lines: List[EditorLine]) -> str:
    """Serialize editor lines back to raw text, attributes included."""
    return "\n".join(format_line(line.attribute, line.text) for line in lines)


def lines_to_plain_content(lines: List[EditorLine]) -> str:
    """Serialize editor lines without their attribute prefixes."""
    return "\n".join(line.text for line in lines)


def lines_to_attribute_map(lines: List[EditorLine]) -> AttributeMap:
    return {idx: line.attribute for idx, line in enumerate(lines) if line.attribute}


def reconcile_attribute_map(
    lines: List[EditorLine],
    saved_map: Optional[AttributeMap] = None,
) -> AttributeMap:
    """
    Merge the attributes derived from freshly parsed ``lines`` with a
    previously saved map.

    Derived entries always win. Saved entries for lines that no longer
    encode their attribute textually (set through a UI toggle) are kept as
    long as the line still exists; entries past the last line are dropped.
    Neither input is modified.
    """
    line_count = len(lines)
    merged: AttributeMap = {}
    stale = 0
    for idx, attribute in (saved_map or {}).items():
        if 0 <= idx < line_count and attribute:
            merged[idx] = attribute
        else:
            stale += 1
    merged.update(lines_to_attribute_map(lines))
    if stale:
        logger.debug("Dropped %d stale attribute map entries (line count %d)", stale, line_count)
    return merged


def normalize_content_with_attributes(
    content: str,
    saved_map: Optional[AttributeMap] = None,
) -> Tuple[str, AttributeMap]:
    """Return ``(plain_content, attribute_map)`` for ``content``."""
    lines = content_to_lines(content)
    return lines_to_plain_content(lines), reconcile_attribute_map(lines, saved_map)


def heading_level_of_attribute(attribute: Optional[str]) -> Optional[int]:
    """Heading level for an attribute token, ``None`` for non-headings."""
    if attribute is None:
        return None
    return ATTRIBUTE_HEADING_LEVELS.get(attribute)


def heading_level_of_text(line: str) -> Optional[int]:
    """
    Heading level encoded in raw text: the length of the leading run of
    ``#`` characters, with the layout keywords (``#ttl``, ``#agd``, ``#!``)
    counting as level 1.
    """
    stripped = line.strip()
    if not stripped.startswith("#"):
        return None
    if _TEXT_LAYOUT_HEADING_RE.match(stripped):
        return 1
    match = _TEXT_HEADING_RE.match(stripped)
    if match:
        return len(match.group(1))
    return None


def resolve_heading_level(
    line: str,
    line_index: int,
    attribute_map: Optional[AttributeMap] = None,
) -> Optional[int]:
    """Heading level of a line, preferring the attribute map over the text."""
    if attribute_map:
        level = heading_level_of_attribute(attribute_map.get(line_index))
        if level is not None:
            return level
    return heading_level_of_text(line)


def renumber_lines(lines: List[EditorLine]) -> List[EditorLine]:
    """
    Renumber numbered (``1.``, ``##1.``) and alphabetic (``A.``) items so
    every run counts up from 1 / A.

    A run is keyed by indentation and heading scope; it ends at any
    non-blank line without such an attribute at the same or a shallower
    indentation. Line ids are preserved.
    """
    counters: Dict[Tuple[int, str], int] = {}
    result = []
    for line in lines:
        indent = len(split_indent(line.text)[0])
        if should_renumber_attribute(line.attribute):
            for key in [k for k in counters if k[0] > indent]:
                del counters[key]
            if is_alphabet_attribute(line.attribute):
                scope = "alpha"
            else:
                scope = _NUMBERED_ATTRIBUTE_RE.fullmatch(line.attribute).group(1)
            count = counters.get((indent, scope), 0) + 1
            counters[(indent, scope)] = count
            if scope == "alpha":
                new_attribute = f"{chr(ord('A') + min(count, 26) - 1)}."
            else:
                new_attribute = f"{scope}{count}."
            result.append(dataclasses.replace(line, attribute=new_attribute))
            continue
        if line.text.strip():
            for key in [k for k in counters if k[0] >= indent]:
                del counters[key]
        result.append(line)
    return result
