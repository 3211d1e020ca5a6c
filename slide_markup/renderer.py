"""
Renderer handoff: turns a slide into annotated markup and hands it to
markdown-it-py.

The engine itself never parses full Markdown. ``prepare_slide_markup`` only
applies the dialect-specific passes (agenda insertion, grid wrapping, ratio
stripping, height injection, layout marker normalisation); everything else is
left to the Markdown renderer.
"""
import logging
import re
from typing import Optional

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin

from .attributes import AttributeMap, split_indent
from .formats import FormatConfig, get_format
from .grid import remove_all_column_ratios, wrap_consecutive_h3_in_grid, wrap_h2_sections_in_grid
from .height import HeightWeights, inject_content_height_to_charts
from .markdown_plugins import key_message_plugin
from .models import LAYOUT_NORMAL, LAYOUT_SECTION, LAYOUT_TOC, Slide
from .toc import extract_section_headings, render_toc

logger = logging.getLogger(__name__)

_LAYOUT_HEADING_RE = re.compile(r"#(?:ttl|agd|!)(?:\s+|$)")
_SCOPED_NUMBER_RE = re.compile(r"#{1,3}(\d+\.\s)")


def _normalize_dialect_line(line: str) -> str:
    indent, rest = split_indent(line)
    match = _LAYOUT_HEADING_RE.match(rest)
    if match:
        # Cover, agenda and summary titles render as plain H1
        return f"{indent}# {rest[match.end():]}".rstrip()
    match = _SCOPED_NUMBER_RE.match(rest)
    if match:
        return f"{indent}{match.group(1)}{rest[match.end():]}"
    return line


def normalize_dialect(markup: str) -> str:
    """Rewrite dialect-only prefixes into their CommonMark equivalents."""
    return "\n".join(_normalize_dialect_line(line) for line in markup.split("\n"))


def prepare_slide_markup(
    slide: Slide,
    document: str = "",
    fmt: Optional[FormatConfig] = None,
    *,
    attribute_map: Optional[AttributeMap] = None,
    toc_level: int = 1,
    weights: Optional[HeightWeights] = None,
) -> str:
    """
    Annotated markup for one slide.

    Args:
        slide: The slide to prepare
        document: Whole document, scanned for agenda entries on toc slides
        fmt: Output format (defaults to the default preset)
        attribute_map: Attribute map of ``document``
        toc_level: Deepest heading level listed on agenda slides
        weights: Height weights for chart sizing

    Returns:
        Markup ready for the Markdown renderer
    """
    fmt = fmt or get_format()
    content = slide.content

    if slide.layout == LAYOUT_TOC:
        sections = extract_section_headings(document, toc_level, attribute_map)
        toc = render_toc(sections, fmt.toc_max_columns, fmt.toc_items_per_column)
        if toc:
            content = f"{content.rstrip()}\n\n{toc}"

    # With H1 splitting every content slide opens with a bare "#" (section)
    if fmt.uses_h2_grid and slide.layout in (LAYOUT_NORMAL, LAYOUT_SECTION):
        markup = wrap_h2_sections_in_grid(content)
    else:
        markup = wrap_consecutive_h3_in_grid(content)

    markup = remove_all_column_ratios(markup)
    markup = inject_content_height_to_charts(markup, weights)
    return normalize_dialect(markup)


class SlideRenderer:
    """
    Markdown renderer for prepared slide markup, using markdown-it-py.
    """

    def __init__(self, enable_math: bool = True):
        """
        Initialize the renderer.

        Args:
            enable_math: Whether to parse ``$...$`` / ``$$...$$`` math
        """
        self.markdown_processor = MarkdownIt('commonmark', {
            'html': True,          # grid wrappers and chart markers are raw HTML
            'typographer': True,   # smart quotes and other typographic replacements
        })
        self.markdown_processor.enable(['table', 'strikethrough'])

        if enable_math:
            self.markdown_processor = self.markdown_processor.use(
                dollarmath_plugin,
                allow_space=False,     # Don't allow spaces after/before $
                allow_digits=False,    # Don't allow digits before/after $
                double_inline=False,   # Don't allow $$ in inline context
            )
        self.markdown_processor = self.markdown_processor.use(key_message_plugin)

    def render(self, markup: str) -> str:
        """
        Render prepared markup to HTML.

        Args:
            markup: Output of :func:`prepare_slide_markup`

        Returns:
            HTML string
        """
        # Fresh env per slide: key message state must not leak across slides
        return self.markdown_processor.render(markup, {})
