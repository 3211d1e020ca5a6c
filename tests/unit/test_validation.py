"""Test console messages."""

from slide_markup.attributes import normalize_content_with_attributes
from slide_markup.validation import (
    calculate_heading_length,
    generate_console_messages,
    validate_document,
)


def test_heading_length_counts_ascii_as_half():
    assert calculate_heading_length("abcd") == 2
    assert calculate_heading_length("見出し") == 3


def test_long_headings_are_errors():
    content = "# Short\n## " + "x" * 30 + "\n- " + "y" * 60 + "\n### " + "長" * 14
    messages = generate_console_messages(content)
    assert [(m.type, m.line) for m in messages] == [("error", 2), ("error", 4)]
    assert "15" in messages[0].message


def test_attribute_map_decides_what_is_a_heading():
    content = "z" * 40 + "\n# " + "w" * 40
    messages = generate_console_messages(content, {0: "##"})
    assert [m.line for m in messages] == [1]


def test_custom_limit():
    assert generate_console_messages("# abcdef", max_heading_length=2)
    assert not generate_console_messages("# abcdef", max_heading_length=3)


def test_ratio_errors_use_document_lines():
    content = "\n".join([
        "# One",
        "## A {2}",
        "## B {huge}",
        "# Two",
        "text",
        "### C {1:left}",
    ])
    messages = validate_document(content, 1)
    assert [(m.type, m.line) for m in messages] == [("warning", 3), ("warning", 6)]
    assert "{huge}" in messages[0].message


def test_ratio_errors_found_through_attribute_map():
    content = "# One\n## A {2}\n## B {huge}"
    plain, attribute_map = normalize_content_with_attributes(content)
    assert "##" not in plain
    messages = validate_document(plain, 1, attribute_map)
    assert [(m.type, m.line) for m in messages] == [("warning", 3)]
    assert "{huge}" in messages[0].message
