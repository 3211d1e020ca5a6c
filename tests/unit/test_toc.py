"""Test agenda generation."""

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from slide_markup.models import Section
from slide_markup.toc import (
    extract_section_headings,
    generate_table_of_contents,
    render_toc,
    split_toc_columns,
)

DOC = "\n".join([
    "#ttl Welcome",
    "#agd Agenda",
    "# Introduction",
    "## Background {2}",
    "text",
    "# Results",
    "## Numbers",
    "### Detail",
    "#",
    "#! Thanks",
])


def test_extract_level_one():
    sections = extract_section_headings(DOC)
    assert [(s.title, s.level, s.line_number) for s in sections] == [
        ("Introduction", 1, 2),
        ("Results", 1, 5),
    ]


def test_extract_deeper_levels_strip_annotations():
    titles = [s.title for s in extract_section_headings(DOC, max_level=2)]
    assert titles == ["Introduction", "Background", "Results", "Numbers"]


def test_extract_uses_attribute_map():
    content = "Cover\nChapter\nbody"
    sections = extract_section_headings(content, 1, {0: "#ttl", 1: "#"})
    assert [s.title for s in sections] == ["Chapter"]


def test_generate_nested_list():
    sections = extract_section_headings(DOC, max_level=2)
    assert generate_table_of_contents(sections) == "\n".join([
        "1. Introduction",
        "   1. Background",
        "2. Results",
        "   1. Numbers",
    ])


def test_generated_list_renders_nested():
    toc = generate_table_of_contents(extract_section_headings(DOC, max_level=3))
    soup = BeautifulSoup(MarkdownIt("commonmark").render(toc), "html.parser")
    top = soup.find("ol")
    assert len(top.find_all("li", recursive=False)) == 2
    assert soup.select_one("ol ol ol li").get_text() == "Detail"


def test_empty_toc():
    assert generate_table_of_contents([]) == ""
    assert render_toc([]) == ""


def test_split_columns():
    items = list(range(10))
    assert split_toc_columns(items, 1, 5) == [items]
    assert split_toc_columns(items, 2, 20) == [items]
    assert split_toc_columns(items, 2, 5) == [items[:5], items[5:]]
    assert split_toc_columns(list(range(7)), 2, 3) == [[0, 1, 2, 3], [4, 5, 6]]


def test_render_toc_two_columns():
    sections = [Section(title=f"Part {i}", level=1, line_number=i) for i in range(1, 7)]
    soup = BeautifulSoup(render_toc(sections, max_columns=2, items_per_column=4), "html.parser")
    columns = soup.select("div.toc-grid > div.toc-column")
    assert len(columns) == 2
    assert "1. Part 1" in columns[0].get_text()
    assert "4. Part 4" in columns[1].get_text()


def test_leading_annotations_are_stripped_from_titles():
    sections = extract_section_headings("# Intro\n## {2 mid} Left\n## Right {btm}", max_level=2)
    assert [s.title for s in sections] == ["Intro", "Left", "Right"]
