from textwrap import dedent

import marko
from bs4 import BeautifulSoup, NavigableString, Tag
from marko import inline

from mdnote.config.logger import get_logger
from mdnote.config.settings import global_settings
from mdnote.text_formatting.html_in_md import (
    add_class,
    has_class,
    is_checkbox_widget,
    is_checked,
    is_disabled_checkbox,
    new_checkbox_widget,
)

log = get_logger(__name__)


class NoteHTMLRenderer(marko.HTMLRenderer):
    """
    In notes a single newline is a line break, as people type them on a phone, so
    soft breaks render as `<br />` too.
    """

    def render_line_break(self, element: inline.LineBreak) -> str:
        return "<br />\n"


# GFM gives task-list items, strikethrough, tables, and autolinks.
note_markdown = marko.Markdown(renderer=NoteHTMLRenderer, extensions=["gfm"])


def markdown_to_html(markdown: str, converter: marko.Markdown = note_markdown) -> str:
    """
    Plain Markdown to HTML rendering, with task-list items as disabled checkboxes.
    """
    return converter.convert(markdown)


def _first_content(tag: Tag):
    for child in tag.contents:
        if isinstance(child, NavigableString) and not child.strip():
            continue
        return child
    return None


def _unwrap_item_paragraph(widget: Tag) -> None:
    """
    Loose lists put each item's text in a `<p>`. The editor expects the widget and
    text directly inside the `<li>`.
    """
    para = widget.parent
    if para is None or para.name != "p":
        return
    if para.parent is None or para.parent.name != "li":
        return
    if _first_content(para) is widget:
        para.unwrap()


def markdown_to_rich_markup(markdown: str) -> str:
    """
    Convert Markdown to HTML for the rich-text editor. Task-list checkboxes become
    interactive checkbox widgets and lists holding any of them are marked as task
    lists. All other HTML is left as rendered.
    """
    if not markdown:
        return ""

    html = markdown_to_html(markdown)
    soup = BeautifulSoup(html, "html.parser")

    checkboxes = soup.find_all(is_disabled_checkbox)
    for checkbox in checkboxes:
        widget = new_checkbox_widget(soup, checked=is_checked(checkbox))
        checkbox.replace_with(widget)
        _unwrap_item_paragraph(widget)

    if checkboxes:
        task_list_class = global_settings().task_list_class
        for ul in soup.find_all("ul"):
            if ul.find(is_checkbox_widget) is not None and not has_class(ul, task_list_class):
                add_class(ul, task_list_class)

    log.debug("Rendered %s chars of Markdown, %s checkboxes", len(markdown), len(checkboxes))

    return str(soup)


## Tests


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_markdown_to_html():
    markdown = dedent(
        """
        # Heading

        This is a paragraph and a [link](https://example.com).

        - Item 1
        - Item 2
        """
    )
    expected_html = dedent(
        """
        <h1>Heading</h1>
        <p>This is a paragraph and a <a href="https://example.com">link</a>.</p>
        <ul>
        <li>Item 1</li>
        <li>Item 2</li>
        </ul>
        """
    )
    assert markdown_to_html(markdown).strip() == expected_html.strip()


def test_single_newline_is_break():
    html = markdown_to_html("line one\nline two")
    assert "<br />" in html
    assert "line one" in html and "line two" in html


def test_checkbox_widgets():
    html = markdown_to_rich_markup("- [ ] Unchecked\n- [x] Checked\n\n- Regular list")
    soup = _soup(html)

    widgets = soup.find_all(is_checkbox_widget)
    assert len(widgets) == 2
    for widget in widgets:
        assert widget.name == "span"
        assert widget["contenteditable"] == "false"
        assert widget.parent.name == "li"
        checkbox = widget.find("input")
        assert checkbox["type"] == "checkbox"
        assert not checkbox.has_attr("disabled")
    assert not widgets[0].find("input").has_attr("checked")
    assert widgets[1].find("input")["checked"] == "true"

    assert soup.find("input", disabled=True) is None
    assert has_class(soup.find("ul"), "x-todo")

    # The regular item keeps its rendering.
    regular = soup.find_all("li")[-1]
    assert "Regular list" in regular.get_text()
    assert regular.find(is_checkbox_widget) is None


def test_loose_list_unwrapped():
    html = markdown_to_rich_markup("- [ ] one\n\n- [x] two\n")
    soup = _soup(html)
    for li in soup.find_all("li"):
        assert li.find("p") is None
        assert is_checkbox_widget(_first_content(li))
    assert soup.find_all("input")[1].has_attr("checked")


def test_task_list_marking():
    html = markdown_to_rich_markup("- parent\n  - [ ] child task\n\n1. plain\n")
    soup = _soup(html)
    outer, inner = soup.find_all("ul")
    assert has_class(outer, "x-todo")
    assert has_class(inner, "x-todo")
    assert not has_class(soup.find("ol"), "x-todo")

    plain = markdown_to_rich_markup("- one\n- two\n")
    assert "x-todo" not in plain
    assert _soup(plain).find("ul").get("class") is None


def test_passthrough():
    assert markdown_to_rich_markup("") == ""
    html = markdown_to_rich_markup("**bold** and ~~gone~~")
    assert "<strong>bold</strong>" in html
    assert "<del>gone</del>" in html
