"""
List continuation while typing. When the user starts a new line in a list, these
work out what marker to put on it, and in which direction, since notes mix
Hebrew or Arabic lines with Latin ones.

These only compute the new buffer text and cursor position. Deciding when to call
them (usually right after Enter) is up to the editor.
"""

from typing import Optional, Tuple

import regex

from mdnote.config.logger import get_logger
from mdnote.model.note_model import Direction, ListContinuation
from mdnote.text_handling.direction import classify_direction, RLM

log = get_logger(__name__)

LTR_MARKER = "- "
RTL_MARKER = "- " + RLM

_line_breaks = "\r\n"

_marks = r"[\u200e\u200f]?"

_list_marker_re = regex.compile(rf"^{_marks}\s*(?:[-*+]|\d+\.)(?:\s|$)")

_checkbox_item_re = regex.compile(rf"^({_marks}\s*[-*+]\s*\[[ xX]\] |{_marks}\s*\d+\.\s*\[[ xX]\] )")
_numbered_checkbox_re = regex.compile(rf"^({_marks}\s*)(\d+)(\.\s*\[[ xX]\] )")
_bullet_checkbox_re = regex.compile(rf"^({_marks}\s*[-*+]\s*)\[[ xX]\] ")

_list_item_re = regex.compile(rf"^({_marks}\s*[-*+]\s+{_marks}|{_marks}\s*\d+\.\s+)")
_numbered_item_re = regex.compile(rf"^({_marks}\s*)(\d+)(\.\s+)")


def marker_for(direction: Direction) -> str:
    return RTL_MARKER if direction == Direction.rtl else LTR_MARKER


def _line_bounds(text: str, offset: int) -> Tuple[int, int]:
    # A CRLF pair is one break, so an offset inside it belongs to the line before.
    if 0 < offset < len(text) and text[offset - 1] == "\r" and text[offset] == "\n":
        offset -= 1
    start = offset
    while start > 0 and text[start - 1] not in _line_breaks:
        start -= 1
    end = offset
    while end < len(text) and text[end] not in _line_breaks:
        end += 1
    return start, end


def _previous_line(text: str, line_start: int) -> str:
    prev_end = line_start - 1
    if text[prev_end] == "\n" and prev_end > 0 and text[prev_end - 1] == "\r":
        prev_end -= 1
    prev_start, _ = _line_bounds(text, prev_end)
    return text[prev_start:prev_end]


def continue_list(full_text: str, cursor_offset: int) -> Optional[ListContinuation]:
    """
    Insert a list marker at the start of the cursor's line. The marker's direction
    follows the line itself, or the line above when the current line is blank.

    Returns None if the offset is outside the text or the line already has a marker.
    """
    if cursor_offset < 0 or cursor_offset > len(full_text):
        return None

    line_start, line_end = _line_bounds(full_text, cursor_offset)
    current_line = full_text[line_start:line_end]
    if _list_marker_re.match(current_line):
        return None

    reference_line = current_line
    # Only one line of fallback. A run of blank lines falls back to a blank line.
    if not current_line.strip() and line_start > 0:
        reference_line = _previous_line(full_text, line_start)

    direction = classify_direction(reference_line)
    marker = marker_for(direction)

    modified_text = full_text[:line_start] + marker + full_text[line_start:]
    log.debug("List continuation: %s marker at offset %s", direction, line_start)

    return ListContinuation(
        modified_text=modified_text,
        cursor_should_move=True,
        new_cursor_pos=cursor_offset + len(marker),
    )


def _next_checkbox_prefix(line: str) -> str:
    numbered = _numbered_checkbox_re.match(line)
    if numbered:
        rest = regex.sub(r"[xX]", " ", numbered.group(3))
        return f"{numbered.group(1)}{int(numbered.group(2)) + 1}{rest}"
    bullet = _bullet_checkbox_re.match(line)
    if bullet:
        return f"{bullet.group(1)}[ ] "
    return "- [ ] "


def _next_item_prefix(line: str, marker: str) -> str:
    numbered = _numbered_item_re.match(line)
    if numbered:
        return f"{numbered.group(1)}{int(numbered.group(2)) + 1}{numbered.group(3)}"
    return marker


def continue_after_newline(new_text: str, old_text: str) -> Optional[ListContinuation]:
    """
    Continue a list after the user typed a newline, comparing the buffer before and
    after the keystroke.

    A new line after a checkbox item gets an unchecked checkbox, after a list item the
    same bullet, with ordered numbers incremented. Enter on an item with no content
    ends the list: the empty item and the new line break are removed.
    """
    if len(new_text) <= len(old_text):
        return None

    diff_index = 0
    while diff_index < len(old_text) and new_text[diff_index] == old_text[diff_index]:
        diff_index += 1

    inserted = new_text[diff_index : diff_index + len(new_text) - len(old_text)]

    # A newline typed next to an identical one: back up so the line typed on is the
    # one before the insertion.
    while diff_index > 0 and inserted == "\n" and new_text[diff_index - 1] == "\n":
        diff_index -= 1

    if not inserted.endswith("\n"):
        return None

    newline_pos = diff_index + len(inserted) - 1
    text_before = new_text[:diff_index]
    line_start = text_before.rfind("\n") + 1
    previous_line = text_before[line_start:]

    checkbox = _checkbox_item_re.match(previous_line)
    item = None if checkbox else _list_item_re.match(previous_line)
    match = checkbox or item
    if not match:
        return None

    if not previous_line[len(match.group(0)) :].strip():
        cleaned = new_text[:line_start] + new_text[newline_pos + 1 :]
        return ListContinuation(modified_text=cleaned, cursor_should_move=True, new_cursor_pos=line_start)

    if checkbox:
        prefix = _next_checkbox_prefix(previous_line)
    else:
        prefix = _next_item_prefix(previous_line, match.group(1))

    modified_text = new_text[: newline_pos + 1] + prefix + new_text[newline_pos + 1 :]
    return ListContinuation(
        modified_text=modified_text,
        cursor_should_move=True,
        new_cursor_pos=newline_pos + 1 + len(prefix),
    )


## Tests


def test_continue_list_direction():
    text = "שלום\n"
    result = continue_list(text, len(text))
    assert result == ListContinuation("שלום\n- " + RLM, True, len(text) + 3)

    text = "hello\n"
    result = continue_list(text, len(text))
    assert result == ListContinuation("hello\n- ", True, len(text) + 2)

    # A line with its own text decides for itself.
    text = "שלום\nworld"
    result = continue_list(text, len(text))
    assert result.modified_text == "שלום\n- world"
    assert result.new_cursor_pos == len(text) + 2


def test_continue_list_middle_of_text():
    text = "- first\n\n- third"
    result = continue_list(text, 8)
    assert result.modified_text == "- first\n- \n- third"
    assert result.new_cursor_pos == 10

    text = "- שלום\r\n\r\nnext"
    result = continue_list(text, 8)
    assert result.modified_text == "- שלום\r\n- " + RLM + "\r\nnext"

    # Inside a CRLF pair is still the end of the line before.
    assert continue_list("hello\r\nworld", 6) == ListContinuation("- hello\r\nworld", True, 8)
    assert continue_list("- item\r\n", 7) is None


def test_continue_list_edge_cases():
    # First line, empty: the default direction.
    assert continue_list("", 0) == ListContinuation("- " + RLM, True, 3)
    # Only one line of fallback.
    assert continue_list("hello\n\n", 7).modified_text == "hello\n\n- " + RLM
    assert continue_list("- already", 3) is None
    assert continue_list(RLM + "- כבר", 3) is None
    assert continue_list("text", 10) is None
    assert continue_list("text", -1) is None


def test_continue_after_newline_checkboxes():
    result = continue_after_newline("- [x] Task 1\n", "- [x] Task 1")
    assert result == ListContinuation("- [x] Task 1\n- [ ] ", True, 19)

    result = continue_after_newline("- [ ] Task 1\n\n- [ ] Task 2", "- [ ] Task 1\n- [ ] Task 2")
    assert result.modified_text == "- [ ] Task 1\n- [ ] \n- [ ] Task 2"
    assert result.new_cursor_pos == 19

    result = continue_after_newline("3. [x] step\n", "3. [x] step")
    assert result.modified_text == "3. [x] step\n4. [ ] "

    result = continue_after_newline("- [ ] done\n- [ ] \n", "- [ ] done\n- [ ] ")
    assert result == ListContinuation("- [ ] done\n", True, 11)


def test_continue_after_newline_items():
    assert continue_after_newline("- Item 1\n", "- Item 1").modified_text == "- Item 1\n- "
    assert continue_after_newline("* Item\n", "* Item").modified_text == "* Item\n* "
    assert continue_after_newline("9. nine\n", "9. nine").modified_text == "9. nine\n10. "

    rtl_item = "- " + RLM + "בדיקה"
    assert continue_after_newline(rtl_item + "\n", rtl_item).modified_text == rtl_item + "\n- " + RLM

    result = continue_after_newline("- Item 1\n\nSome other text", "- Item 1\nSome other text")
    assert result.modified_text == "- Item 1\n- \nSome other text"

    # An empty item ends the list.
    result = continue_after_newline("- Item 1\n- \n", "- Item 1\n- ")
    assert result == ListContinuation("- Item 1\n", True, 9)


def test_continue_after_newline_no_action():
    assert continue_after_newline("plain\n", "plain") is None
    assert continue_after_newline("- Item", "- Ite") is None
    assert continue_after_newline("- Item", "- Item 1") is None
