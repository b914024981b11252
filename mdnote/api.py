"""
The operations a note editor calls. All are pure functions over strings and values,
safe to call again on every render.
"""

from typing import Optional

from mdnote.file_formats import frontmatter_store
from mdnote.model.note_model import Direction, Frontmatter, FrontmatterValue, ListContinuation
from mdnote.text_formatting import markdown_util, rich_markup
from mdnote.text_handling import direction, list_continuation


def markdown_to_rich_markup(markdown: str) -> str:
    """
    Note Markdown to editor HTML, with checklist items as checkbox widgets.
    """
    return markdown_util.markdown_to_rich_markup(markdown)


def rich_markup_to_markdown(markup: str) -> str:
    """
    Editor HTML back to Markdown, with checklists in `- [ ] `/`- [x] ` form.
    """
    return rich_markup.rich_markup_to_markdown(markup)


def get_frontmatter(content: str) -> Frontmatter:
    return frontmatter_store.get_frontmatter(content)


def set_frontmatter_key(content: str, key: str, value: FrontmatterValue) -> str:
    """
    Set one frontmatter key, leaving the other keys and the body as they are.
    """
    return frontmatter_store.update_frontmatter(content, key, value)


def classify_direction(text: str) -> Direction:
    return direction.classify_direction(text)


def continue_list(full_text: str, cursor_offset: int) -> Optional[ListContinuation]:
    """
    Insert a direction-appropriate list marker on the cursor's line, or None if there
    is nothing to do.
    """
    return list_continuation.continue_list(full_text, cursor_offset)


## Tests


def test_api():
    content = set_frontmatter_key("- [ ] milk", "pinned", True)
    assert get_frontmatter(content) == {"pinned": True}

    markup = markdown_to_rich_markup(frontmatter_store.strip_frontmatter(content))
    assert rich_markup_to_markdown(markup) == "- [ ] milk"

    assert classify_direction("שלום") == Direction.rtl
    assert continue_list("hello\n", 6) == ListContinuation("hello\n- ", True, 8)
