"""
Helpers for the embedded element markers that collaborators replace with
charts and diagrams at render time, e.g.::

    <table-chart id="t1" name="Sales" format="bar"></table-chart>

Markers are rewritten with BeautifulSoup so attribute quoting and ordering
stay well-formed however the marker was typed.
"""
import logging
import re
from typing import Dict, Iterable

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

CHART_TAG = "table-chart"
DIAGRAM_TAGS = ("picto-diagram", "euler-diagram")
EMBED_TAGS = (CHART_TAG,) + DIAGRAM_TAGS


def _marker_pattern(tag: str) -> "re.Pattern":
    return re.compile(rf"<{tag}\b[^>]*>(?:\s*</{tag}>)?", re.IGNORECASE)


_MARKER_PATTERNS = {tag: _marker_pattern(tag) for tag in EMBED_TAGS}


def contains_marker(line: str, tags: Iterable[str] = EMBED_TAGS) -> bool:
    """True if ``line`` holds an opening marker for any of ``tags``."""
    return any((_MARKER_PATTERNS.get(tag) or _marker_pattern(tag)).search(line) for tag in tags)


def format_number(value: float, digits: int = 2) -> str:
    """Compact numeric attribute value: 2.0 -> "2", 1.256 -> "1.26"."""
    return f"{round(value, digits):g}"


def get_marker_attributes(text: str, tag: str = CHART_TAG) -> Dict[str, str]:
    """Attributes of the first ``tag`` marker in ``text`` (empty if none)."""
    match = (_MARKER_PATTERNS.get(tag) or _marker_pattern(tag)).search(text)
    if not match:
        return {}
    element = BeautifulSoup(match.group(0), "html.parser").find(tag)
    if element is None:
        return {}
    return {name: " ".join(value) if isinstance(value, list) else value
            for name, value in element.attrs.items()}


def set_marker_attributes(text: str, attributes: Dict[str, str], tag: str = CHART_TAG) -> str:
    """Add or overwrite ``attributes`` on every ``tag`` marker found in ``text``."""

    def _rewrite(match):
        soup = BeautifulSoup(match.group(0), "html.parser")
        element = soup.find(tag)
        if element is None:
            logger.debug("Could not parse marker %r, leaving it untouched", match.group(0))
            return match.group(0)
        for name, value in attributes.items():
            element[name] = value
        return str(element)

    pattern = _MARKER_PATTERNS.get(tag) or _marker_pattern(tag)
    return pattern.sub(_rewrite, text)
