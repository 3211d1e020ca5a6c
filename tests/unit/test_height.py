"""Test content height estimation and chart annotation."""

import pytest

from slide_markup.height import (
    DEFAULT_WEIGHTS,
    HeightWeights,
    display_width,
    estimate_content_height,
    inject_content_height_to_charts,
    line_weight,
)
from slide_markup.markers import get_marker_attributes

W = DEFAULT_WEIGHTS


@pytest.mark.parametrize("line, expected", [
    ("# Title", W.h1),
    ("## Point", W.h2),
    ("### Detail", W.h3),
    ("#### Deeper", W.h4),
    ("- item", W.list_item),
    ("1. item", W.list_item),
    ("! key message", W.key_message),
    ("plain paragraph", W.paragraph),
    ("![chart](chart.png)", W.image),
    ("| a | b |", W.table_row),
    ("|---|---|", 0.0),
    ("", 0.0),
    ('<table-chart id="t"></table-chart>', 0.0),
    ('<div class="h3-grid-item" style="align-self: start;">', 0.0),
    ("</div>", 0.0),
])
def test_line_weight(line, expected):
    assert line_weight(line) == pytest.approx(expected)


def test_long_lines_wrap():
    short = line_weight("x" * 10)
    long = line_weight("x" * 200)
    assert long == pytest.approx(short * 3)


def test_full_width_characters_count_double():
    assert display_width("ab") == 1.0
    assert display_width("漢字") == 2.0


def test_code_block_lines():
    lines = ["```python", "# not a heading", "x = 1", "```"]
    assert estimate_content_height(lines) == pytest.approx(2 * W.code_line)


def test_custom_weights():
    weights = HeightWeights(paragraph=10.0)
    assert estimate_content_height(["a", "b"], weights) == pytest.approx(20.0)


@pytest.mark.parametrize("extra", [
    "# H", "## H", "### H", "- item", "1. item", "! key", "text", "![i](i.png)", "| a |",
    "```", '<table-chart id="x"></table-chart>', "<div>", "",
])
def test_appending_a_line_never_decreases_height(extra):
    base = ["# Title", "```", "code", "text", "- item"]
    assert estimate_content_height(base + [extra]) >= estimate_content_height(base)


class TestInjectHeight:

    def test_before_and_after(self):
        content = "\n".join([
            "## Sales",
            "intro text",
            '<table-chart id="t1" name="Sales"></table-chart>',
            "- note",
        ])
        attrs = get_marker_attributes(inject_content_height_to_charts(content))
        assert attrs["id"] == "t1"
        assert attrs["name"] == "Sales"
        assert float(attrs["content-before"]) == pytest.approx(W.h2 + W.paragraph)
        assert float(attrs["content-after"]) == pytest.approx(W.list_item)

    def test_each_chart_gets_its_own_numbers(self):
        content = '<table-chart id="a"></table-chart>\ntext\n<table-chart id="b"></table-chart>'
        lines = inject_content_height_to_charts(content).split("\n")
        first = get_marker_attributes(lines[0])
        second = get_marker_attributes(lines[2])
        assert first["content-before"] == "0"
        assert first["content-after"] == second["content-before"] == "1.5"
        assert second["content-after"] == "0"

    def test_content_without_charts_is_unchanged(self):
        content = "# Title\ntext {2}\n<picto-diagram id=\"d\"></picto-diagram>"
        assert inject_content_height_to_charts(content) == content
