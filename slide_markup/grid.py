"""
Multi-column grid annotation.

Sibling H2 or H3 headings can be laid out side by side. Each heading may end
with a column annotation::

    ## Revenue {2}
    ## Costs {mid}
    ### Detail {1.5:btm}

``ratio`` is a positive number giving the column's share of the width,
``alignment`` is one of ``top``, ``mid`` or ``btm``. Without an annotation a
column gets ratio 1 and alignment ``top``. Malformed annotations are
reported as :class:`~slide_markup.models.RatioError` values and otherwise
treated as neutral; they never stop the slide from rendering.
"""
import logging
import re
from typing import List, Optional, Sequence, Tuple

from .attributes import heading_level_of_text, split_indent
from .markers import CHART_TAG, contains_marker, format_number, get_marker_attributes, set_marker_attributes
from .models import ALIGNMENTS, ColumnRatio, H2Split, RatioError

logger = logging.getLogger(__name__)

_ANNOTATED_HEADING_RE = re.compile(r"(#{2,3})(?:\s+(.*?))?\s*\{([^{}]*)\}\s*$")
# Older documents put the annotation first: "## {2 mid} Title"
_LEADING_ANNOTATION_RE = re.compile(r"(#{2,3})\s+\{([^{}]*)\}\s*(.*)$")
_TOKEN_SPLIT_RE = re.compile(r"\s*:\s*|\s+")
_HEADING_RE = re.compile(r"(#{2,3})(?:\s+(.*))?$")
_RATIO_RE = re.compile(r"(?:0|[1-9]\d*)(?:\.\d+)?")

_ALIGNMENT_CSS = {
    "top": "start",
    "mid": "center",
    "btm": "end",
}


def _parse_ratio(token: str) -> Optional[float]:
    if not _RATIO_RE.fullmatch(token):
        return None
    value = float(token)
    return value if value > 0 else None


def _parse_annotation(raw: str):
    """Return ``(ratio, alignment, ratio_error, alignment_error)``."""
    value = raw.strip()
    if not value:
        return None, None, True, False

    parts = _TOKEN_SPLIT_RE.split(value)
    if len(parts) == 1:
        token = parts[0]
        ratio = _parse_ratio(token)
        if ratio is not None:
            return ratio, "top", False, False
        if token in ALIGNMENTS:
            return 1.0, token, False, False
        return None, None, True, False

    if len(parts) == 2:
        ratio = _parse_ratio(parts[0])
        ratio_error = ratio is None
        alignment_error = parts[1] not in ALIGNMENTS
        if ratio_error or alignment_error:
            return None, None, ratio_error, alignment_error
        return ratio, parts[1], False, False

    return None, None, True, True


def _match_annotation(stripped: str) -> Optional[Tuple[str, str, str]]:
    """Return ``(hashes, title, raw_value)`` for an annotated H2/H3 line."""
    match = _ANNOTATED_HEADING_RE.match(stripped)
    if match:
        return match.group(1), (match.group(2) or "").strip(), match.group(3)
    match = _LEADING_ANNOTATION_RE.match(stripped)
    if match:
        return match.group(1), match.group(3).strip(), match.group(2)
    return None


def parse_column_ratio(line: str) -> ColumnRatio:
    """
    Parse the column annotation of an H2/H3 line. The trailing form
    ``## Title {2:mid}`` and the leading form ``## {2 mid} Title`` are both
    accepted; tokens may be separated by ``:`` or whitespace.
    """
    stripped = line.strip()
    annotation = _match_annotation(stripped)
    if annotation is None:
        plain = _HEADING_RE.match(stripped)
        title = (plain.group(2) or "").strip() if plain else ""
        return ColumnRatio(ratio=None, alignment=None, title=title)

    _, title, raw_value = annotation
    ratio, alignment, ratio_error, alignment_error = _parse_annotation(raw_value)
    if ratio_error or alignment_error:
        logger.debug("Malformed column annotation {%s} on %r", raw_value, stripped)
    return ColumnRatio(
        ratio=ratio,
        alignment=alignment,
        title=title,
        has_ratio_syntax=True,
        ratio_error=ratio_error,
        alignment_error=alignment_error,
        raw_value=raw_value,
    )


def ratio_error_for(result: ColumnRatio, line_number: int) -> Optional[RatioError]:
    """Diagnostic for a parsed annotation, or ``None`` when it is valid."""
    if not result.has_ratio_syntax or not result.has_error:
        return None
    raw = result.raw_value or ""
    if result.ratio_error and result.alignment_error:
        message = f"Invalid ratio and alignment {{{raw}}} (use a positive number and top/mid/btm)"
    elif result.ratio_error:
        message = f"Invalid ratio {{{raw}}} (use a positive number)"
    else:
        message = f"Invalid alignment {{{raw}}} (use top, mid or btm)"
    return RatioError(raw_value=raw, line_number=line_number, message=message)


def remove_column_ratio_from_line(line: str) -> str:
    """Strip the column annotation from an H2/H3 line, keeping its indentation."""
    indent, rest = split_indent(line)
    annotation = _match_annotation(rest.strip())
    if annotation is None:
        return line
    hashes, title, _ = annotation
    return f"{indent}{hashes} {title}" if title else f"{indent}{hashes}"


def remove_all_column_ratios(content: str) -> str:
    return "\n".join(remove_column_ratio_from_line(line) for line in content.split("\n"))


def collect_ratio_errors(content: str) -> List[RatioError]:
    """Every malformed H2/H3 annotation in ``content`` (1-based line numbers)."""
    errors = []
    for idx, line in enumerate(content.split("\n")):
        if heading_level_of_text(line) not in (2, 3):
            continue
        error = ratio_error_for(parse_column_ratio(line), idx + 1)
        if error is not None:
            errors.append(error)
    return errors


def grid_template_columns(ratios: Sequence[Optional[float]], count: int) -> str:
    """CSS ``grid-template-columns`` for ``count`` columns with the given ratios."""
    if not ratios or count <= 0:
        return f"repeat({max(1, min(count, 4))}, 1fr)"
    effective = [r if r is not None else 1.0 for r in list(ratios)[:count]]
    effective += [1.0] * (count - len(effective))
    return " ".join(f"{format_number(r, 4)}fr" for r in effective)


def alignment_to_css(alignment: Optional[str]) -> str:
    """``align-self`` value for a column alignment keyword."""
    return _ALIGNMENT_CSS.get(alignment or "top", "start")


def has_multiple_h2(content: str) -> bool:
    count = 0
    for line in content.split("\n"):
        if heading_level_of_text(line) == 2:
            count += 1
            if count >= 2:
                return True
    return False


def split_content_by_h2(content: str) -> H2Split:
    """
    Separate a slide into its H1 preamble and H2 sections.

    Columns are only produced for two or more H2 sections; with fewer the
    whole slide comes back as ``h1_section`` and stays in normal flow.
    Empty ``##`` lines still start a section. An H1 after the preamble ends
    the column area; it and the lines below it come back as ``trailing``.
    Annotation errors are reported either way.
    """
    lines = content.split("\n")
    h1_lines: List[str] = []
    sections: List[str] = []
    ratios: List[Optional[float]] = []
    alignments: List[str] = []
    errors: List[RatioError] = []

    current: Optional[List[str]] = None
    current_spec: Optional[ColumnRatio] = None
    h1_found = False
    h2_count = 0

    def _flush():
        if current is not None:
            sections.append("\n".join(current))
            ratios.append(current_spec.ratio)
            alignments.append(current_spec.effective_alignment)

    trailing: List[str] = []
    for idx, line in enumerate(lines):
        level = heading_level_of_text(line)
        if level == 1:
            if not h1_found and current is None:
                h1_found = True
                h1_lines.append(line)
                continue
            # Everything from here on stays in normal flow below the columns
            logger.debug("H1 at line %d ends the column area", idx + 1)
            trailing = lines[idx:]
            break
        if level == 2:
            h2_count += 1
            _flush()
            current_spec = parse_column_ratio(line)
            error = ratio_error_for(current_spec, idx + 1)
            if error is not None:
                errors.append(error)
            current = [remove_column_ratio_from_line(line)]
            continue
        if current is not None:
            current.append(line)
        else:
            h1_lines.append(line)
    _flush()

    if h2_count < 2:
        return H2Split(h1_section=content, ratio_errors=errors)

    return H2Split(
        h1_section="\n".join(h1_lines),
        h2_sections=sections,
        h2_ratios=ratios,
        h2_alignments=alignments,
        ratio_errors=errors,
        trailing="\n".join(trailing),
    )


def _annotate_charts(lines: List[str], ratio: float, total: float, columns: int) -> List[str]:
    """
    Stamp chart markers with their column's share of the grid. A chart that
    already sits in an outer grid gets the product of both shares.
    """
    out = []
    for line in lines:
        if not contains_marker(line, (CHART_TAG,)):
            out.append(line)
            continue
        own_ratio, own_total = ratio, total
        existing = get_marker_attributes(line)
        if "grid-ratio" in existing and "grid-total" in existing:
            try:
                own_ratio *= float(existing["grid-ratio"])
                own_total *= float(existing["grid-total"])
            except ValueError:
                logger.debug("Ignoring unreadable grid attributes on %r", line)
        out.append(set_marker_attributes(line, {
            "grid-ratio": format_number(own_ratio, 4),
            "grid-total": format_number(own_total, 4),
            "grid-columns": str(columns),
        }))
    return out


def _render_grid(
    css_class: str,
    blocks: List[List[str]],
    ratios: List[float],
    alignments: List[str],
) -> List[str]:
    total = sum(ratios)
    columns = len(blocks)
    out = [f'<div class="{css_class}-layout" style="grid-template-columns: '
           f'{grid_template_columns(ratios, columns)};">']
    for block, ratio, alignment in zip(blocks, ratios, alignments):
        out.append(f'<div class="{css_class}-item" style="align-self: {alignment_to_css(alignment)};">')
        out.append("")
        out.extend(_annotate_charts(block, ratio, total, columns))
        out.append("")
        out.append("</div>")
    out.append("</div>")
    # A raw HTML block only ends at a blank line
    out.append("")
    return out


def wrap_consecutive_h3_in_grid(content: str) -> str:
    """
    Wrap every run of two or more consecutive H3 blocks in a grid container.

    A run ends at any other heading level or at the end of input. A lone H3
    passes through untouched.
    """
    lines = content.split("\n")
    result: List[str] = []
    run: List[List[str]] = []
    current: Optional[List[str]] = None

    def _flush_run():
        blocks = run + ([current] if current is not None else [])
        if len(blocks) >= 2:
            specs = [parse_column_ratio(block[0]) for block in blocks]
            cleaned = [[remove_column_ratio_from_line(block[0])] + block[1:] for block in blocks]
            result.extend(_render_grid(
                "h3-grid",
                cleaned,
                [spec.effective_ratio for spec in specs],
                [spec.effective_alignment for spec in specs],
            ))
        elif blocks:
            result.extend(blocks[0])

    for line in lines:
        level = heading_level_of_text(line)
        if level == 3:
            if current is not None:
                run.append(current)
            current = [line]
        elif current is not None and level is not None:
            _flush_run()
            run, current = [], None
            result.append(line)
        elif current is not None:
            current.append(line)
        else:
            result.append(line)
    _flush_run()

    return "\n".join(result)


def wrap_h2_sections_in_grid(content: str) -> str:
    """
    Lay out a slide's H2 sections as columns below its H1 preamble.

    H3 runs inside the preamble and inside each column are wrapped
    independently so the generated containers nest cleanly. Slides with
    fewer than two H2 sections only get their H3 runs wrapped.
    """
    split = split_content_by_h2(content)
    if not split.is_grid:
        return wrap_consecutive_h3_in_grid(content)

    ratios = [r if r is not None else 1.0 for r in split.h2_ratios]
    total = sum(ratios)
    columns = len(split.h2_sections)
    out = [wrap_consecutive_h3_in_grid(split.h1_section)] if split.h1_section else []
    out.append(f'<div class="h2-grid-layout" style="grid-template-columns: '
               f'{grid_template_columns(ratios, columns)};">')
    for section, ratio, alignment in zip(split.h2_sections, ratios, split.h2_alignments):
        annotated = "\n".join(_annotate_charts(section.split("\n"), ratio, total, columns))
        out.append(f'<div class="h2-grid-item" style="align-self: {alignment_to_css(alignment)};">')
        out.append("")
        out.append(wrap_consecutive_h3_in_grid(annotated))
        out.append("")
        out.append("</div>")
    out.append("</div>")
    if split.trailing:
        out.append("")
        out.append(wrap_consecutive_h3_in_grid(split.trailing))
    return "\n".join(out)
