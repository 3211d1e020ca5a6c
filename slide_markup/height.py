"""
Heuristic content height estimation.

Charts embedded in a slide have to share the vertical space with the text
around them. Instead of a layout pass, every line is scored with a fixed
weight per line type (in multiples of the base font size) and the chart
marker is told how much content sits before and after it. The renderer then
gives the chart ``available - before - after``.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .attributes import heading_level_of_text, is_alphabet_attribute, is_numbered_attribute, parse_attribute_from_line
from .markers import CHART_TAG, EMBED_TAGS, contains_marker, format_number, set_marker_attributes

logger = logging.getLogger(__name__)

_ASCII_RE = re.compile(r"[ -~]")
_HTML_WRAPPER_RE = re.compile(r"</?[A-Za-z][\w-]*(?:\s[^>]*)?>$")
_TABLE_SEPARATOR_RE = re.compile(r"\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)*\|?")
_FENCE_RE = re.compile(r"(```|~~~)")


@dataclass(frozen=True)
class HeightWeights:
    """Per-line-type weights, in multiples of the base font size."""
    h1: float = 2.5
    h2: float = 2.0
    h3: float = 1.75
    h4: float = 1.5  # H4 and deeper
    key_message: float = 2.25
    list_item: float = 1.5
    paragraph: float = 1.5
    table_row: float = 1.6
    code_line: float = 1.3
    image: float = 6.0
    blank: float = 0.0
    # Display width (full-width characters) before a line wraps
    chars_per_line: float = 40.0


DEFAULT_WEIGHTS = HeightWeights()


def display_width(text: str) -> float:
    """Width in full-width units: printable ASCII counts half."""
    return sum(0.5 if _ASCII_RE.match(char) else 1.0 for char in text)


def _wrapped(weight: float, text: str, weights: HeightWeights) -> float:
    if weights.chars_per_line <= 0:
        return weight
    rows = max(1, math.ceil(display_width(text) / weights.chars_per_line))
    return weight * rows


def _heading_weight(level: int, weights: HeightWeights) -> float:
    return {1: weights.h1, 2: weights.h2, 3: weights.h3}.get(level, weights.h4)


def line_weight(line: str, weights: HeightWeights = DEFAULT_WEIGHTS, in_code: bool = False) -> float:
    """Score of one line outside its context (``in_code`` for fenced code)."""
    stripped = line.strip()
    if not stripped:
        return weights.blank
    if in_code:
        return weights.code_line
    if contains_marker(stripped, EMBED_TAGS):
        return 0.0
    if stripped.startswith("![") or stripped.startswith("<img"):
        return weights.image
    if _HTML_WRAPPER_RE.match(stripped):
        return 0.0

    level = heading_level_of_text(stripped)
    if level is not None:
        return _wrapped(_heading_weight(level, weights), stripped.lstrip("#"), weights)

    if stripped.startswith("|"):
        if _TABLE_SEPARATOR_RE.fullmatch(stripped):
            return 0.0
        return weights.table_row

    attribute, text = parse_attribute_from_line(stripped)
    if attribute == "!":
        return _wrapped(weights.key_message, text, weights)
    if attribute in ("-", "*") or is_numbered_attribute(attribute) or is_alphabet_attribute(attribute):
        return _wrapped(weights.list_item, text, weights)
    return _wrapped(weights.paragraph, stripped, weights)


def line_weights(lines: Sequence[str], weights: HeightWeights = DEFAULT_WEIGHTS) -> List[float]:
    """Score every line, tracking fenced code blocks."""
    scores = []
    in_code = False
    for line in lines:
        if _FENCE_RE.match(line.strip()):
            in_code = not in_code
            scores.append(0.0)
            continue
        scores.append(line_weight(line, weights, in_code))
    return scores


def estimate_content_height(lines: Sequence[str], weights: Optional[HeightWeights] = None) -> float:
    """Dimensionless height estimate for ``lines`` (multiply by base font size)."""
    return sum(line_weights(lines, weights or DEFAULT_WEIGHTS))


def inject_content_height_to_charts(content: str, weights: Optional[HeightWeights] = None) -> str:
    """
    Annotate every chart marker with ``content-before`` / ``content-after``:
    the estimated height of the slide's lines strictly before and strictly
    after the marker's line.
    """
    lines = content.split("\n")
    scores = line_weights(lines, weights or DEFAULT_WEIGHTS)

    prefix = [0.0]
    for score in scores:
        prefix.append(prefix[-1] + score)
    total = prefix[-1]

    out = []
    for idx, line in enumerate(lines):
        if contains_marker(line, (CHART_TAG,)):
            before = prefix[idx]
            after = total - prefix[idx + 1]
            logger.debug("Chart at line %d: before=%.2f after=%.2f", idx + 1, before, after)
            line = set_marker_attributes(line, {
                "content-before": format_number(before),
                "content-after": format_number(after),
            })
        out.append(line)
    return "\n".join(out)
