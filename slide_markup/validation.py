"""
Console messages for the editor's validation panel.

Two independent checks feed the panel: overlong headings, and malformed
column annotations found while slides are split into grids.
"""
import logging
from typing import List, Optional

from .attributes import AttributeMap, parse_attribute_from_line
from .grid import collect_ratio_errors
from .height import display_width
from .models import ConsoleMessage
from .segmenter import iter_slide_texts

logger = logging.getLogger(__name__)

MAX_HEADING_LENGTH = 13

_LENGTH_CHECKED_ATTRIBUTES = ("#", "##", "###")


def calculate_heading_length(text: str) -> float:
    """Heading length where half-width (ASCII) characters count as 0.5."""
    return display_width(text)


def generate_console_messages(
    content: str,
    attribute_map: Optional[AttributeMap] = None,
    max_heading_length: float = MAX_HEADING_LENGTH,
) -> List[ConsoleMessage]:
    """Error messages for every H1-H3 heading longer than ``max_heading_length``."""
    messages = []
    for idx, line in enumerate(content.split("\n")):
        if not line.strip():
            continue
        parsed, text = parse_attribute_from_line(line)
        if attribute_map is not None:
            attribute = attribute_map.get(idx)
        else:
            attribute = parsed
        if attribute not in _LENGTH_CHECKED_ATTRIBUTES:
            continue
        length = calculate_heading_length(text.strip())
        if length > max_heading_length:
            messages.append(ConsoleMessage(
                type="error",
                message=(f"Heading is too long ({length:g} characters). "
                         f"Keep it to {max_heading_length:g} or fewer."),
                line=idx + 1,
            ))
    return messages


def validate_document(
    content: str,
    level: int,
    attribute_map: Optional[AttributeMap] = None,
    max_heading_length: float = MAX_HEADING_LENGTH,
) -> List[ConsoleMessage]:
    """
    Heading length errors plus every slide's column annotation errors,
    reported against document line numbers and sorted by line.
    """
    messages = generate_console_messages(content, attribute_map, max_heading_length)

    # Slide texts carry map-only heading markers
    for start, text in iter_slide_texts(content, level, attribute_map):
        for error in collect_ratio_errors(text):
            messages.append(ConsoleMessage(
                type="warning",
                message=error.message,
                line=start + error.line_number,
            ))

    messages.sort(key=lambda message: message.line)
    if messages:
        logger.debug("Validation produced %d messages", len(messages))
    return messages

