"""Test embedded chart/diagram marker helpers."""

from slide_markup.markers import (
    contains_marker,
    format_number,
    get_marker_attributes,
    set_marker_attributes,
)


def test_contains_marker():
    assert contains_marker('<table-chart id="a"></table-chart>')
    assert contains_marker("  <euler-diagram id='e'>")
    assert not contains_marker("<table>")
    assert not contains_marker("plain text")
    assert not contains_marker('<picto-diagram id="p"></picto-diagram>', ("table-chart",))


def test_format_number():
    assert format_number(2.0) == "2"
    assert format_number(1.256) == "1.26"
    assert format_number(0.0) == "0"


def test_set_attributes_keeps_existing_ones():
    line = "Before <table-chart id='t' name=\"Sales & Costs\"></table-chart> after"
    updated = set_marker_attributes(line, {"content-before": "3.5"})
    assert updated.startswith("Before ")
    assert updated.endswith(" after")
    attrs = get_marker_attributes(updated)
    assert attrs == {"id": "t", "name": "Sales & Costs", "content-before": "3.5"}


def test_set_attributes_overwrites():
    line = '<table-chart id="t" grid-ratio="1"></table-chart>'
    assert get_marker_attributes(set_marker_attributes(line, {"grid-ratio": "2"}))["grid-ratio"] == "2"


def test_unclosed_marker_is_closed():
    updated = set_marker_attributes('<table-chart id="t">', {"grid-columns": "2"})
    assert updated.endswith("</table-chart>")
    assert get_marker_attributes(updated) == {"id": "t", "grid-columns": "2"}


def test_no_marker():
    assert get_marker_attributes("nothing here") == {}
    assert set_marker_attributes("nothing here", {"a": "b"}) == "nothing here"
