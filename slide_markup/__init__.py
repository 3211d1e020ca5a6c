"""Slide Markup – top-level package

Exposes the public API (`DeckGenerator`, `build_slides`, etc.) **and** sets up
a minimal logging configuration so that every sub-module can call

```python
import logging
logger = logging.getLogger(__name__)
```

and honour a single environment variable `SLIDE_MARKUP_LOG_LEVEL`.
"""

from __future__ import annotations

import logging
import os

# ------------------------------------------------------------------
# Default logging – honour env var, otherwise INFO.
# ------------------------------------------------------------------
LOG_LEVEL = os.getenv("SLIDE_MARKUP_LOG_LEVEL", "INFO").upper()
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# Public API re-exports ------------------------------------------------
from .attributes import normalize_content_with_attributes, parse_attribute_from_line  # noqa: E402
from .generator import DeckGenerator  # noqa: E402
from .grid import parse_column_ratio, split_content_by_h2  # noqa: E402
from .layout import extract_slide_layout  # noqa: E402
from .models import ColumnRatio, EditorLine, Slide  # noqa: E402
from .segmenter import build_slides, get_slide_start_lines, split_slides_by_heading  # noqa: E402

__all__ = [
    "DeckGenerator",
    "build_slides",
    "split_slides_by_heading",
    "get_slide_start_lines",
    "extract_slide_layout",
    "parse_attribute_from_line",
    "normalize_content_with_attributes",
    "parse_column_ratio",
    "split_content_by_h2",
    "ColumnRatio",
    "EditorLine",
    "Slide",
]
