#!/usr/bin/env python3
"""
Deck pipeline tying segmentation, layout classification, grid annotation
and rendering together, plus the ``slide-markup`` command-line entry point.
"""

import html
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from .attributes import AttributeMap
from .formats import DEFAULT_FORMAT, get_format
from .height import HeightWeights
from .models import ConsoleMessage, RenderedSlide, Slide
from .renderer import SlideRenderer, prepare_slide_markup
from .segmenter import build_slides, extract_slide_title
from .validation import validate_document

logger = logging.getLogger(__name__)

PREVIEW_CSS = """
body { margin: 0; padding: 24px; font-family: sans-serif; background: #f4f4f4; }
.slide { box-sizing: border-box; position: relative; background: #fff; margin: 0 auto 40px;
         padding: 48px; overflow: hidden; border: 2px dashed #ccc; }
.slide:before { position: absolute; top: 4px; left: 8px; color: #999; font-size: 12px;
                content: attr(data-idx) " · " attr(data-layout); }
.slide.cover, .slide.section, .slide.summary { display: flex; flex-direction: column;
                                               justify-content: center; text-align: center; }
.h2-grid-layout, .h3-grid-layout { display: grid; gap: 24px; }
.h2-grid-item, .h3-grid-item { min-width: 0; }
.toc-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 24px; }
.key-message { font-weight: bold; font-size: 1.2em; margin: 0.5em 0 1em; }
table-chart, picto-diagram, euler-diagram { display: block; border: 1px dotted #999;
                                            min-height: 80px; }
"""


class DeckGenerator:
    """
    Main class for turning a markup document into rendered slides.
    """

    def __init__(
        self,
        *,
        format_name: str = DEFAULT_FORMAT,
        split_level: Optional[int] = None,
        toc_level: int = 1,
        weights: Optional[HeightWeights] = None,
        debug: bool = False,
    ):
        """Create a new :class:`DeckGenerator`.

        Parameters
        ----------
        format_name
            Output format preset (``seminar``, ``a4``, …). Decides the split
            level, the canvas size and the agenda layout.
        split_level
            Override the format's heading split level (1-3).
        toc_level
            Deepest heading level listed on agenda slides.
        weights
            Height weights used to size embedded charts.
        debug
            Enable verbose logging.
        """
        self.fmt = get_format(format_name)
        self.split_level = split_level or self.fmt.split_level
        self.toc_level = toc_level
        self.weights = weights
        self.debug = debug
        self.renderer = SlideRenderer()

    def slides(self, content: str, attribute_map: Optional[AttributeMap] = None) -> List[Slide]:
        """Segment and classify ``content``."""
        return build_slides(content, self.split_level, attribute_map)

    def build(self, content: str, attribute_map: Optional[AttributeMap] = None) -> List[RenderedSlide]:
        """
        Run the whole pipeline on a document.

        Args:
            content: Raw document text
            attribute_map: Optional attribute map for ``content``

        Returns:
            One :class:`RenderedSlide` per slide, in document order
        """
        rendered = []
        for index, slide in enumerate(self.slides(content, attribute_map)):
            markup = prepare_slide_markup(
                slide,
                content,
                self.fmt,
                attribute_map=attribute_map,
                toc_level=self.toc_level,
                weights=self.weights,
            )
            rendered.append(RenderedSlide(
                index=index,
                slide=slide,
                title=extract_slide_title(slide.content),
                markup=markup,
                html=self.renderer.render(markup),
            ))

        if self.debug:
            logger.info("Built %d slides (format %s, split level %d)",
                        len(rendered), self.fmt.name, self.split_level)
            for item in rendered:
                logger.info("  Slide %d: %s [%s] from line %d",
                            item.index + 1, item.title, item.layout, item.slide.start_line + 1)
        return rendered

    def validate(self, content: str, attribute_map: Optional[AttributeMap] = None) -> List[ConsoleMessage]:
        return validate_document(content, self.split_level, attribute_map)

    def build_preview_html(self, rendered: List[RenderedSlide]) -> str:
        """Standalone HTML page showing every slide at the format's size."""
        html_parts = [
            "<!DOCTYPE html>",
            "<html lang=\"en\">",
            "<head>",
            "<meta charset=\"UTF-8\">",
            f"<title>{html.escape(rendered[0].title) if rendered else 'Slides'}</title>",
            "<style>",
            PREVIEW_CSS,
            f".slide {{ width: {self.fmt.width}px; height: {self.fmt.height}px; }}",
            "</style>",
            "</head>",
            "<body>",
        ]
        for item in rendered:
            html_parts.append(
                f'<section class="slide {item.layout}" id="slide-{item.index + 1}" '
                f'data-idx="{item.index + 1}" data-layout="{item.layout}">'
            )
            html_parts.append(item.html)
            html_parts.append("</section>")
        html_parts.extend(["</body>", "</html>"])
        return "\n".join(html_parts)

    def generate(self, content: str, output_path: str = "output/slides.html",
                 attribute_map: Optional[AttributeMap] = None) -> str:
        """
        Build the deck and write an HTML preview.

        Returns:
            str: Path to the written HTML file
        """
        if not output_path.endswith(".html"):
            output_path = f"{output_path}.html"
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        rendered = self.build(content, attribute_map)
        Path(output_path).write_text(self.build_preview_html(rendered), encoding="utf-8")

        if self.debug:
            logger.info(f"HTML preview saved to: {output_path}")
        return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    import argparse

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="slide-markup", description="Split a markup document into slides.")
        p.add_argument("document", type=Path, help="Markup document to process")
        p.add_argument("--format", "-f", default=DEFAULT_FORMAT, help="Output format (seminar, a4, …)")
        p.add_argument("--level", "-l", type=int, help="Override the heading split level (1-3)")
        p.add_argument("--toc-level", type=int, default=1, help="Deepest heading level listed on agenda slides")
        p.add_argument("--html", type=Path, help="Write an HTML preview to this path")
        p.add_argument("--json", type=Path, help="Write the slides as JSON to this path")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    args = _build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s  %(message)s")

    doc_path: Path = args.document
    if not doc_path.exists():
        logger.error(f"Document '{doc_path}' not found")
        return 1

    try:
        generator = DeckGenerator(
            format_name=args.format,
            split_level=args.level,
            toc_level=args.toc_level,
            debug=args.debug,
        )
        content = doc_path.read_text(encoding="utf-8")
        rendered = generator.build(content)
    except ValueError as exc:
        logger.error(str(exc))
        return 1

    for item in rendered:
        print(f"{item.index + 1:3d}  {item.layout:<8}  line {item.slide.start_line + 1:<5d} {item.title}")

    for message in generator.validate(content):
        logger.warning("line %d: %s", message.line, message.message)

    if args.html:
        args.html.parent.mkdir(parents=True, exist_ok=True)
        args.html.write_text(generator.build_preview_html(rendered), encoding="utf-8")
        logger.info("✅ HTML preview written to %s", args.html)

    if args.json:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(
            json.dumps([item.to_dict() for item in rendered], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("✅ Slides written to %s", args.json)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
