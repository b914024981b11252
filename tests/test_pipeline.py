"""
End-to-end checks across the pipeline: a note file's text through frontmatter,
editor markup, and back.
"""

from bs4 import BeautifulSoup

from mdnote import api
from mdnote.file_formats.frontmatter_store import parse_frontmatter, serialize_frontmatter
from mdnote.model.note_model import Direction, ListContinuation
from mdnote.text_handling.direction import RLM


def test_checklist_round_trip():
    markdown = "- [ ] Unchecked\n- [x] Checked\n\n- Regular list"
    markup = api.markdown_to_rich_markup(markdown)

    soup = BeautifulSoup(markup, "html.parser")
    assert len(soup.find_all("span", class_="x-todo-box")) == 2

    lines = api.rich_markup_to_markdown(markup).split("\n")
    assert lines[0] == "- [ ] Unchecked"
    assert lines[1] == "- [x] Checked"
    assert "- Regular list" in lines


def test_ordered_list_checklist_normalized():
    markup = (
        '<ol><li><span contenteditable="false" class="x-todo-box"><input type="checkbox"></span>first</li>'
        '<li><span contenteditable="false" class="x-todo-box"><input type="checkbox" checked="true"></span>'
        "second</li></ol>"
    )
    assert api.rich_markup_to_markdown(markup) == "- [ ] first\n- [x] second"


def test_edit_cycle_keeps_frontmatter():
    content = "---\ntitle: Groceries\npinned: true\n---\n- [ ] milk\n- [ ] eggs\n"
    doc = parse_frontmatter(content)

    markup = api.markdown_to_rich_markup(doc.body)
    # The editor checks off the second item.
    soup = BeautifulSoup(markup, "html.parser")
    soup.find_all("input")[1]["checked"] = "true"
    body = api.rich_markup_to_markdown(str(soup)) + "\n"

    saved = serialize_frontmatter(doc.frontmatter, body)
    assert saved == "---\ntitle: Groceries\npinned: true\n---\n- [ ] milk\n- [x] eggs\n"

    unpinned = api.set_frontmatter_key(saved, "pinned", False)
    assert api.get_frontmatter(unpinned) == {"title": "Groceries", "pinned": False}
    assert parse_frontmatter(unpinned).body == parse_frontmatter(saved).body


def test_frontmatter_type_coercion():
    assert api.set_frontmatter_key("", "pinned", True) == "---\npinned: true\n---\n"
    assert api.get_frontmatter("---\npinned: false\n---\n")["pinned"] is False


def test_direction_and_continuation():
    assert api.classify_direction("") == Direction.rtl
    assert api.classify_direction("123") == Direction.rtl
    assert api.classify_direction("- שלום") == Direction.rtl
    assert api.classify_direction("- hello") == Direction.ltr

    text = "- קניות\n"
    assert api.continue_list(text, len(text)) == ListContinuation(text + "- " + RLM, True, len(text) + 3)
    text = "- groceries\n"
    assert api.continue_list(text, len(text)) == ListContinuation(text + "- ", True, len(text) + 2)
