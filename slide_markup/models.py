"""
Data models for the slide markup engine.
"""
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

# Layout variants assigned to a slide by its leading line
LAYOUT_COVER = "cover"
LAYOUT_TOC = "toc"
LAYOUT_SECTION = "section"
LAYOUT_SUMMARY = "summary"
LAYOUT_NORMAL = "normal"

# Vertical alignment keywords accepted inside a `{ratio:alignment}` annotation
ALIGNMENTS = ("top", "mid", "btm")


def generate_line_id() -> str:
    """Return an opaque, stable identifier for a new editor line."""
    return f"line_{uuid.uuid4().hex[:12]}"


@dataclass
class EditorLine:
    """
    One line of the editor: an optional attribute token plus its text.

    ``text`` never contains the attribute prefix; leading indentation is
    part of ``text`` and is preserved verbatim.
    """
    attribute: Optional[str] = None  # "#", "##", "-", "1.", "A.", "#ttl" ...
    text: str = ""
    id: str = field(default_factory=generate_line_id)


@dataclass(frozen=True)
class Slide:
    """A slide cut out of the document, together with its layout variant."""
    content: str
    layout: str = LAYOUT_NORMAL
    start_line: int = 0  # 0-based index of the slide's first line in the document

    def is_toc(self) -> bool:
        return self.layout == LAYOUT_TOC


@dataclass
class RenderedSlide:
    """A slide after the full pipeline: annotated markup and its HTML."""
    index: int
    slide: Slide
    title: str
    markup: str
    html: str = ""

    @property
    def layout(self) -> str:
        return self.slide.layout

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "title": self.title,
            "layout": self.slide.layout,
            "start_line": self.slide.start_line,
            "content": self.slide.content,
            "markup": self.markup,
        }


@dataclass(frozen=True)
class RatioError:
    """Non-fatal diagnostic for a malformed `{ratio:alignment}` annotation."""
    raw_value: str
    line_number: int  # 1-based
    message: str


@dataclass(frozen=True)
class ColumnRatio:
    """
    Result of parsing a heading line's column annotation.

    ``ratio`` and ``alignment`` are ``None`` when the annotation is absent or
    malformed; use :attr:`effective_ratio` / :attr:`effective_alignment` to
    get the values a grid should actually apply.
    """
    ratio: Optional[float]
    alignment: Optional[str]
    title: str
    has_ratio_syntax: bool = False
    ratio_error: bool = False
    alignment_error: bool = False
    raw_value: Optional[str] = None

    @property
    def effective_ratio(self) -> float:
        """Ratio with the implicit default of 1 applied."""
        return self.ratio if self.ratio is not None else 1.0

    @property
    def effective_alignment(self) -> str:
        """Alignment with the implicit default of ``top`` applied."""
        return self.alignment if self.alignment is not None else "top"

    @property
    def has_error(self) -> bool:
        return self.ratio_error or self.alignment_error


@dataclass
class H2Split:
    """A slide separated into its H1 preamble and H2 columns."""
    h1_section: str
    h2_sections: List[str] = field(default_factory=list)
    h2_ratios: List[Optional[float]] = field(default_factory=list)
    h2_alignments: List[str] = field(default_factory=list)
    ratio_errors: List[RatioError] = field(default_factory=list)
    trailing: str = ""  # lines from a later H1 on, kept in normal flow

    @property
    def is_grid(self) -> bool:
        """True when the slide should be laid out as H2 columns."""
        return len(self.h2_sections) >= 2


@dataclass(frozen=True)
class Section:
    """A heading collected for the table of contents."""
    title: str
    level: int
    line_number: int  # 0-based index in the document


@dataclass(frozen=True)
class ConsoleMessage:
    """A message for the editor's validation console."""
    type: str  # 'error' | 'warning' | 'info'
    message: str
    line: int  # 1-based
