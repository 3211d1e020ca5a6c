"""Test the line attribute codec."""

import pytest

from slide_markup.attributes import (
    content_to_lines,
    heading_level_of_text,
    lines_to_attribute_map,
    lines_to_content,
    lines_to_plain_content,
    normalize_content_with_attributes,
    parse_attribute_from_line,
    reconcile_attribute_map,
    renumber_lines,
    resolve_heading_level,
    should_renumber_attribute,
)
from slide_markup.models import EditorLine


class TestParseAttribute:

    @pytest.mark.parametrize("line, attribute, text", [
        ("a. first", "A.", "first"),
        ("B. second", "B.", "second"),
        ("###3. step", "###3.", "step"),
        ("##12. step", "##12.", "step"),
        ("#1. step", "#1.", "step"),
        ("7. item", "7.", "item"),
        ("### Detail", "###", "Detail"),
        ("## Point", "##", "Point"),
        ("# Chapter", "#", "Chapter"),
        ("- bullet", "-", "bullet"),
        ("* star", "*", "star"),
        ("! key message", "!", "key message"),
        ("#ttl Welcome", "#ttl", "Welcome"),
        ("#agd Agenda", "#agd", "Agenda"),
        ("#! Thanks", "#!", "Thanks"),
    ])
    def test_prefixed_markers(self, line, attribute, text):
        assert parse_attribute_from_line(line) == (attribute, text)

    def test_indentation_is_kept_with_text(self):
        assert parse_attribute_from_line("    - nested") == ("-", "    nested")
        assert parse_attribute_from_line("\t1. tabbed") == ("1.", "\ttabbed")

    @pytest.mark.parametrize("line, attribute, text", [
        ("#Title", "#", "Title"),
        ("##Point", "##", "Point"),
        ("-item", "-", "item"),
        ("!important", "!", "important"),
        ("2.glued", "2.", "glued"),
    ])
    def test_glued_fallback(self, line, attribute, text):
        assert parse_attribute_from_line(line) == (attribute, text)

    def test_image_is_not_a_key_message(self):
        line = "![chart](chart.png)"
        assert parse_attribute_from_line(line) == (None, line)

    @pytest.mark.parametrize("line", ["plain text", "", "   ", "  indented prose"])
    def test_no_marker_returns_line_unchanged(self, line):
        assert parse_attribute_from_line(line) == (None, line)


class TestRoundTrip:

    DOC = "\n".join([
        "#ttl Welcome",
        "",
        "# Chapter",
        "## Point {2:mid}",
        "- bullet",
        "    - nested",
        "1. one",
        "A. alpha",
        "! key message",
        "plain paragraph",
        "#agd Agenda",
        "#! Thanks",
    ])

    def test_canonical_document_round_trips(self):
        assert lines_to_content(content_to_lines(self.DOC)) == self.DOC

    def test_plain_content_drops_prefixes(self):
        plain = lines_to_plain_content(content_to_lines("# Title\n- item\ntext"))
        assert plain == "Title\nitem\ntext"

    def test_line_ids_are_unique(self):
        lines = content_to_lines(self.DOC)
        assert len({line.id for line in lines}) == len(lines)


class TestReconcile:

    def test_derived_entries_win(self):
        lines = content_to_lines("# Title\nbody")
        merged = reconcile_attribute_map(lines, {0: "##"})
        assert merged == {0: "#"}

    def test_toggled_attributes_survive_while_line_exists(self):
        lines = content_to_lines("# Title\nbody")
        assert reconcile_attribute_map(lines, {1: "!"}) == {0: "#", 1: "!"}

    def test_out_of_range_entries_are_pruned(self):
        lines = content_to_lines("# Title\nbody")
        merged = reconcile_attribute_map(lines, {1: "-", 5: "##"})
        assert 5 not in merged
        assert all(idx < len(lines) for idx in merged)

    def test_inputs_are_not_mutated(self):
        lines = content_to_lines("# Title")
        saved = {0: "##", 3: "-"}
        reconcile_attribute_map(lines, saved)
        assert saved == {0: "##", 3: "-"}

    def test_normalize_content(self):
        plain, attribute_map = normalize_content_with_attributes("# Title\nbody\n- item", {1: "!"})
        assert plain == "Title\nbody\nitem"
        assert attribute_map == {0: "#", 1: "!", 2: "-"}

    def test_attribute_map_from_lines(self):
        lines = [EditorLine("#", "A"), EditorLine(None, "b"), EditorLine("-", "c")]
        assert lines_to_attribute_map(lines) == {0: "#", 2: "-"}


class TestHeadingLevels:

    @pytest.mark.parametrize("line, level", [
        ("# A", 1),
        ("## A", 2),
        ("### A", 3),
        ("#### A", 4),
        ("##", 2),
        ("#ttl Cover", 1),
        ("#agd", 1),
        ("#! End", 1),
        ("#hashtag", None),
        ("#1. numbered", None),
        ("text", None),
    ])
    def test_level_from_text(self, line, level):
        assert heading_level_of_text(line) == level

    def test_map_overrides_text(self):
        assert resolve_heading_level("Plain", 0, {0: "##"}) == 2
        assert resolve_heading_level("## Text", 0, {0: "-"}) == 2
        assert resolve_heading_level("Plain", 0, {}) is None


class TestRenumber:

    def test_runs_count_from_one(self):
        lines = [EditorLine("3.", "a"), EditorLine("9.", "b"), EditorLine(None, "break"), EditorLine("5.", "c")]
        assert [line.attribute for line in renumber_lines(lines)] == ["1.", "2.", None, "1."]

    def test_nested_and_scoped_counters(self):
        lines = [
            EditorLine("1.", "a"),
            EditorLine("4.", "    child"),
            EditorLine("7.", "    child"),
            EditorLine("1.", "b"),
            EditorLine("##4.", "scoped"),
        ]
        assert [line.attribute for line in renumber_lines(lines)] == ["1.", "1.", "2.", "2.", "##1."]

    def test_alphabet_and_ids_preserved(self):
        lines = [EditorLine("C.", "x"), EditorLine("A.", "y")]
        result = renumber_lines(lines)
        assert [line.attribute for line in result] == ["A.", "B."]
        assert [line.id for line in result] == [line.id for line in lines]

    @pytest.mark.parametrize("attribute, expected", [
        ("1.", True), ("##2.", True), ("B.", True), ("-", False), ("#", False), (None, False),
    ])
    def test_should_renumber(self, attribute, expected):
        assert should_renumber_attribute(attribute) is expected
