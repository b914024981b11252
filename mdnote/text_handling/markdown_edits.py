"""
Line-level edits to Markdown source, as done from an editing toolbar: checking off
checklist items, adding one, and toggling heading, list, and checkbox markers on
the cursor's line.
"""

from typing import List, Tuple

import regex

from mdnote.model.note_model import EditResult

HEADING_PREFIX = "# "
LIST_PREFIX = "- "
CHECKBOX_PREFIX = "- [ ] "

_task_re = regex.compile(r"^\s*(?:[-*+]|\d+\.)\s*\[([ xX])\]")

_canonical_task_re = regex.compile(r"- \[[ xX]\] ")

_checked_re = regex.compile(r"\[x\]", regex.IGNORECASE)

_title_marker_re = regex.compile(r"^#+\s*")


def _is_task(line: str) -> bool:
    return bool(_task_re.match(line))


def toggle_checkbox_by_index(content: str, index: int) -> str:
    """
    Toggle the checkbox of the `index`-th checklist item (0-based, counting checklist
    lines only). A newly checked item moves to the end of its run of checklist lines.
    Content with no such item is returned unchanged.
    """
    lines = content.split("\n")
    task_index = 0
    for i, line in enumerate(lines):
        if not _is_task(line):
            continue
        if task_index == index:
            if "[ ]" in line:
                toggled = line.replace("[ ]", "[x]", 1)
                end_of_block = i
                while end_of_block + 1 < len(lines) and _is_task(lines[end_of_block + 1]):
                    end_of_block += 1
                del lines[i]
                lines.insert(end_of_block, toggled)
            else:
                lines[i] = _checked_re.sub("[ ]", line, count=1)
            return "\n".join(lines)
        task_index += 1

    return content


def append_checklist_item(markdown: str) -> str:
    """
    Add an empty checklist item after the last one. Unchanged if there is no checklist.
    """
    lines: List[str] = markdown.split("\n")
    for i in range(len(lines) - 1, -1, -1):
        if regex.match(r"^- \[[ xX]\]", lines[i]):
            lines.insert(i + 1, CHECKBOX_PREFIX)
            return "\n".join(lines)
    return markdown


def _line_start(text: str, cursor: int) -> int:
    start = cursor
    while start > 0 and text[start - 1] != "\n":
        start -= 1
    return start


def _replace_prefix(text: str, line_start: int, old_len: int, new_prefix: str) -> str:
    return text[:line_start] + new_prefix + text[line_start + old_len :]


def toggle_heading(text: str, cursor: int) -> EditResult:
    line_start = _line_start(text, cursor)
    if text.startswith(HEADING_PREFIX, line_start):
        return EditResult(
            _replace_prefix(text, line_start, len(HEADING_PREFIX), ""),
            max(line_start, cursor - len(HEADING_PREFIX)),
        )
    return EditResult(_replace_prefix(text, line_start, 0, HEADING_PREFIX), cursor + len(HEADING_PREFIX))


def toggle_list(text: str, cursor: int) -> EditResult:
    """
    Add or remove a `- ` bullet on the cursor's line. A checklist item becomes a plain
    bullet item.
    """
    line_start = _line_start(text, cursor)
    task = _canonical_task_re.match(text, pos=line_start)
    if task:
        removed = len(task.group(0)) - len(LIST_PREFIX)
        return EditResult(
            _replace_prefix(text, line_start, len(task.group(0)), LIST_PREFIX),
            max(line_start + len(LIST_PREFIX), cursor - removed),
        )
    if text.startswith(LIST_PREFIX, line_start):
        return EditResult(
            _replace_prefix(text, line_start, len(LIST_PREFIX), ""),
            max(line_start, cursor - len(LIST_PREFIX)),
        )
    return EditResult(_replace_prefix(text, line_start, 0, LIST_PREFIX), cursor + len(LIST_PREFIX))


def toggle_checkbox(text: str, cursor: int) -> EditResult:
    """
    Add or remove a `- [ ] ` checkbox on the cursor's line. A plain bullet item gains
    a checkbox.
    """
    line_start = _line_start(text, cursor)
    task = _canonical_task_re.match(text, pos=line_start)
    if task:
        length = len(task.group(0))
        return EditResult(_replace_prefix(text, line_start, length, ""), max(line_start, cursor - length))
    if text.startswith(LIST_PREFIX, line_start):
        added = len(CHECKBOX_PREFIX) - len(LIST_PREFIX)
        return EditResult(_replace_prefix(text, line_start, len(LIST_PREFIX), CHECKBOX_PREFIX), cursor + added)
    return EditResult(_replace_prefix(text, line_start, 0, CHECKBOX_PREFIX), cursor + len(CHECKBOX_PREFIX))


def extract_title_and_body(content: str) -> Tuple[str, bool, str]:
    """
    Title from the first line without heading markers, whether that line is a
    heading, and the body: the rest of the content if it is, or all of it if not.
    """
    first_line, _, rest = content.partition("\n")
    title = _title_marker_re.sub("", first_line, count=1).strip()
    has_title = first_line.startswith("#")
    return title, has_title, rest if has_title else content


## Tests


def test_toggle_checkbox_by_index():
    content = "- [ ] a\n- [ ] b\n- [x] c\n\n- [ ] d"
    assert toggle_checkbox_by_index(content, 0) == "- [ ] b\n- [x] c\n- [x] a\n\n- [ ] d"
    assert toggle_checkbox_by_index(content, 2) == "- [ ] a\n- [ ] b\n- [ ] c\n\n- [ ] d"
    assert toggle_checkbox_by_index(content, 3) == "- [ ] a\n- [ ] b\n- [x] c\n\n- [x] d"
    assert toggle_checkbox_by_index(content, 9) == content

    # Other lines don't count, and ordered items do.
    content = "# List\nintro\n1. [X] one\n2. [ ] two"
    assert toggle_checkbox_by_index(content, 0) == "# List\nintro\n1. [ ] one\n2. [ ] two"
    assert toggle_checkbox_by_index(content, 1) == "# List\nintro\n1. [X] one\n2. [x] two"


def test_append_checklist_item():
    assert append_checklist_item("- [x] a\n- [ ] b\n\nafter") == "- [x] a\n- [ ] b\n- [ ] \n\nafter"
    assert append_checklist_item("no list") == "no list"


def test_toggle_heading():
    assert toggle_heading("one\ntwo", 5) == EditResult("one\n# two", 7)
    assert toggle_heading("one\n# two", 8) == EditResult("one\ntwo", 6)
    assert toggle_heading("# x", 1) == EditResult("x", 0)


def test_toggle_list():
    assert toggle_list("item", 2) == EditResult("- item", 4)
    assert toggle_list("- item", 4) == EditResult("item", 2)
    assert toggle_list("a\n- [x] task", 10) == EditResult("a\n- task", 6)


def test_toggle_checkbox():
    assert toggle_checkbox("task", 0) == EditResult("- [ ] task", 6)
    assert toggle_checkbox("- task", 3) == EditResult("- [ ] task", 7)
    assert toggle_checkbox("- [X] task", 8) == EditResult("task", 2)
    assert toggle_checkbox("- [ ] task", 2) == EditResult("task", 0)


def test_extract_title_and_body():
    assert extract_title_and_body("## Title \nbody\nmore") == ("Title", True, "body\nmore")
    assert extract_title_and_body("plain first\nbody") == ("plain first", False, "plain first\nbody")
    assert extract_title_and_body("") == ("", False, "")
