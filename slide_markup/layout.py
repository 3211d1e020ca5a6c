"""Layout classification from a slide's leading line."""
import re

from .models import (
    LAYOUT_COVER,
    LAYOUT_NORMAL,
    LAYOUT_SECTION,
    LAYOUT_SUMMARY,
    LAYOUT_TOC,
)

_LAYOUT_MARKERS = (
    (re.compile(r"#ttl(?:\s|$)"), LAYOUT_COVER),
    (re.compile(r"#agd(?:\s|$)"), LAYOUT_TOC),
    (re.compile(r"#!(?:\s|$)"), LAYOUT_SUMMARY),
    (re.compile(r"#(?:\s|$)"), LAYOUT_SECTION),
)


def extract_slide_layout(content: str) -> str:
    """
    Layout variant of a slide.

    Only the first non-blank line is inspected: ``#ttl`` -> cover,
    ``#agd`` -> toc, ``#!`` -> summary, a bare ``#`` -> section, anything
    else (``##`` headings included) -> normal.
    """
    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        for pattern, layout in _LAYOUT_MARKERS:
            if pattern.match(stripped):
                return layout
        return LAYOUT_NORMAL
    return LAYOUT_NORMAL
