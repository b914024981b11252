"""
Convert the rich-text editor's HTML back to Markdown for storage.

The editor marks checklist items with checkbox widgets (see `html_in_md`), either
ones we rendered from Markdown or ones it inserted itself, sometimes inside
ordered lists. markdownify knows nothing about those, so the checkbox state is
written into the text as `[ ] ` or `[x] ` before conversion, and the list syntax
markdownify writes around it is normalized afterwards so checklists always come
out as `- [ ] ` and `- [x] `.
"""

from textwrap import dedent
from typing import List

import regex
from bs4 import BeautifulSoup, Comment, NavigableString
from markdownify import ASTERISK, ATX, markdownify

from mdnote.config.logger import get_logger
from mdnote.config.settings import global_settings
from mdnote.text_formatting.html_in_md import (
    is_checkbox_input,
    is_checkbox_widget,
    is_checked,
    remove_class,
)

log = get_logger(__name__)

CHECKED_TOKEN = "[x] "
UNCHECKED_TOKEN = "[ ] "

# Any bullet or ordered marker directly before a checkbox token, escaped or not.
_checklist_item_re = regex.compile(r"^(\s*)(?:[-*+]|\d+[.)])[ \t]+\\?\[([ xX])\\?\](?!\()[ \t]*")

_escaped_checkbox_re = regex.compile(r"\\\[([ xX])\\\]")

_fence_re = regex.compile(r"^\s*(```|~~~)")


def _checkbox_token(match: regex.Match) -> str:
    return "[x]" if match.group(1).lower() == "x" else "[ ]"


def _canonical_item(match: regex.Match) -> str:
    checkbox = "[x]" if match.group(2).lower() == "x" else "[ ]"
    return f"{match.group(1)}- {checkbox} "


def _widgets_to_text(soup: BeautifulSoup) -> int:
    """
    Replace each checkbox widget with its checkbox token, merged with the text that
    follows it. Returns the number replaced.
    """
    count = 0
    for widget in soup.find_all(is_checkbox_widget):
        checkbox = widget.find(is_checkbox_input)
        if checkbox is None:
            continue
        token = CHECKED_TOKEN if is_checked(checkbox) else UNCHECKED_TOKEN
        following = widget.next_sibling
        if isinstance(following, NavigableString) and not isinstance(following, Comment):
            token += following.lstrip()
            following.extract()
        widget.replace_with(token)
        count += 1
    return count


def normalize_checklists(markdown: str) -> str:
    """
    Rewrite checklist lines to the canonical `- [ ] `/`- [x] ` form, unescape checkbox
    brackets, drop trailing whitespace, and collapse runs of blank lines to one. Fenced
    code is left as is.
    """
    lines: List[str] = []
    in_fence = False
    for line in markdown.split("\n"):
        if _fence_re.match(line):
            in_fence = not in_fence
            lines.append(line)
            continue
        if in_fence:
            lines.append(line)
            continue
        line = _checklist_item_re.sub(_canonical_item, line)
        line = _escaped_checkbox_re.sub(_checkbox_token, line).rstrip()
        if not line and lines and not lines[-1]:
            continue
        lines.append(line)
    return "\n".join(lines)


def rich_markup_to_markdown(markup: str) -> str:
    """
    Convert editor HTML to canonical Markdown.
    """
    if not markup:
        return ""

    soup = BeautifulSoup(markup, "html.parser")

    count = _widgets_to_text(soup)

    task_list_class = global_settings().task_list_class
    for lst in soup.find_all(["ul", "ol"]):
        remove_class(lst, task_list_class)

    markdown = markdownify(
        str(soup),
        heading_style=ATX,
        bullets="-",
        strong_em_symbol=ASTERISK,
        escape_asterisks=False,
        escape_underscores=False,
        escape_misc=False,
    )

    markdown = normalize_checklists(markdown).strip()

    log.debug("Converted %s chars of markup to Markdown, %s checkboxes", len(markup), count)

    return markdown


## Tests


def test_normalize_checklists():
    raw = dedent(
        """
        * \\[ \\] first
        * \\[x\\] second
        1. \\[X\\] third
        12. [ ] fourth
          - [x]   nested
        - plain item
        - [x](https://x.org) is a link
        ```
        * \\[ \\] in code
        ```
        """
    ).strip()
    expected = dedent(
        """
        - [ ] first
        - [x] second
        - [x] third
        - [ ] fourth
          - [x] nested
        - plain item
        - [x](https://x.org) is a link
        ```
        * \\[ \\] in code
        ```
        """
    ).strip()
    assert normalize_checklists(raw) == expected


def test_widgets_in_unordered_list():
    html = (
        '<ul class="x-todo">'
        '<li><span class="x-todo-box" contenteditable="false"><input type="checkbox"/></span> Buy milk</li>'
        '<li><span class="x-todo-box" contenteditable="false"><input type="checkbox" checked="true"/></span> Call mom</li>'
        "</ul>"
    )
    assert rich_markup_to_markdown(html) == "- [ ] Buy milk\n- [x] Call mom"


def test_widgets_in_ordered_list():
    html = (
        '<ol class="x-todo"><li><span contenteditable="false" class="x-todo-box"><input type="checkbox"></span>'
        "Unchecked from editor</li></ol>"
        '<ol class="x-todo"><li><span contenteditable="false" class="x-todo-box"><input type="checkbox" checked="true">'
        "</span>Checked from editor</li></ol>"
    )
    markdown = rich_markup_to_markdown(html)
    lines = [line for line in markdown.split("\n") if line]
    assert lines == ["- [ ] Unchecked from editor", "- [x] Checked from editor"]
    assert "1." not in markdown


def test_other_markup_passes_through():
    html = "<h2>Plan</h2><p>Some <strong>bold</strong> text.</p><ul><li>one</li><li>two</li></ul>"
    assert rich_markup_to_markdown(html) == "## Plan\n\nSome **bold** text.\n\n- one\n- two"

    # A widget without a checkbox is left alone.
    html = '<p><span class="x-todo-box">?</span> maybe</p>'
    assert rich_markup_to_markdown(html) == "? maybe"

    assert rich_markup_to_markdown("") == ""


def test_checked_state_kept():
    assert normalize_checklists("* [x] done\n3. [X] also done\n- [ ] open") == (
        "- [x] done\n- [x] also done\n- [ ] open"
    )
    html = '<ol><li><span class="x-todo-box"><input type="checkbox" checked="true"></span>t</li></ol>'
    assert rich_markup_to_markdown(html) == "- [x] t"


def test_blank_lines_in_code_kept():
    markdown = rich_markup_to_markdown("<p>one</p><pre><code>a\n\n\n\nb</code></pre><p>two</p>")
    assert "a\n\n\n\nb" in markdown
    assert "\n\n\n" not in markdown.replace("a\n\n\n\nb", "")

    assert normalize_checklists("one\n\n\n\ntwo\n```\nx\n\n\ny\n```") == "one\n\ntwo\n```\nx\n\n\ny\n```"
