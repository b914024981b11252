"""
Notes as Markdown files on disk: reading and writing them, and the round trip between
a note file and the rich-text editor, with the frontmatter kept out of the editor
and preserved across saves.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from atomicwrites import atomic_write

from mdnote.config.logger import get_logger
from mdnote.config.text_styles import EMOJI_SAVED
from mdnote.errors import FileFormatError, FileNotFound, InvalidInput
from mdnote.file_formats.frontmatter_store import (
    parse_frontmatter,
    remove_frontmatter_key,
    serialize_frontmatter,
    strip_frontmatter,
    update_frontmatter,
)
from mdnote.model.note_model import Domain, Note
from mdnote.text_formatting.markdown_util import markdown_to_rich_markup
from mdnote.text_formatting.rich_markup import rich_markup_to_markdown
from mdnote.text_handling.markdown_edits import extract_title_and_body

log = get_logger(__name__)

NOTE_SUFFIX = ".md"

PINNED_KEY = "pinned"

DOMAIN_KEY = "domain"


def read_note_text(path: Path) -> str:
    """
    Read a note file as UTF-8 text, keeping its line endings.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFound(f"Note file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise FileFormatError(f"Not a UTF-8 text file: {path}: {e}")

    log.debug("Read note: %s (%s chars)", path, len(content))
    return content


def write_note_text(path: Path, content: str) -> None:
    """
    Atomically write a note file as UTF-8.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with atomic_write(str(path), mode="w", overwrite=True, encoding="utf-8", newline="") as f:
        f.write(content)

    log.info("%s Saved note: %s", EMOJI_SAVED, path)


def set_pinned(content: str, pinned: bool) -> str:
    if pinned:
        return update_frontmatter(content, PINNED_KEY, True)
    return remove_frontmatter_key(content, PINNED_KEY)


def set_domain(content: str, domain: Optional[str | Domain]) -> str:
    """
    Set the note's domain, or clear it with None or an empty string.
    """
    if domain is None or domain == "":
        return remove_frontmatter_key(content, DOMAIN_KEY)
    parsed = domain if isinstance(domain, Domain) else Domain.parse(domain)
    if parsed is None:
        raise InvalidInput(
            f"Unknown domain: {domain!r}. Valid domains are: {', '.join(d.value for d in Domain)}"
        )
    return update_frontmatter(content, DOMAIN_KEY, parsed.value)


def load_note(path: Path) -> Note:
    path = Path(path)
    content = read_note_text(path)
    doc = parse_frontmatter(content)
    title, _has_title, _body = extract_title_and_body(doc.body.lstrip())

    stat = path.stat()
    created = getattr(stat, "st_birthtime", stat.st_ctime)

    return Note(
        id=path.stem,
        title=title or path.stem,
        content=content,
        file_path=path,
        created_at=datetime.fromtimestamp(created),
        updated_at=datetime.fromtimestamp(stat.st_mtime),
        pinned=doc.frontmatter.get(PINNED_KEY) is True,
        domain=Domain.parse(doc.frontmatter.get(DOMAIN_KEY)),
    )


def load_rich_markup(path: Path) -> str:
    """
    Editor markup for a note file's body. The frontmatter is not shown in the editor.
    """
    return markdown_to_rich_markup(strip_frontmatter(read_note_text(path)))


def save_rich_markup(path: Path, markup: str) -> str:
    """
    Convert editor markup to Markdown and save it as the note's body, keeping any
    frontmatter the file already has. Returns the new file content.
    """
    path = Path(path)
    frontmatter = parse_frontmatter(read_note_text(path)).frontmatter if path.exists() else {}

    markdown = rich_markup_to_markdown(markup)
    body = markdown + "\n" if markdown else ""
    content = serialize_frontmatter(frontmatter, body)

    write_note_text(path, content)
    return content


def list_notes(folder: Path) -> List[Note]:
    """
    All notes in a folder, pinned ones first, then most recently updated first.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFound(f"Notes folder not found: {folder}")

    notes = [
        load_note(folder / name)
        for name in sorted(os.listdir(folder))
        if name.endswith(NOTE_SUFFIX) and not name.startswith(".") and (folder / name).is_file()
    ]
    notes.sort(key=lambda note: (not note.pinned, -note.updated_at.timestamp()))

    log.debug("Listed %s notes in %s", len(notes), folder)
    return notes


## Tests


def test_read_write(tmp_path):
    path = tmp_path / "sub" / "note.md"
    content = "---\npinned: true\n---\r\nline one\r\nline two\n"
    write_note_text(path, content)
    assert read_note_text(path) == content

    bad = tmp_path / "bad.md"
    bad.write_bytes(b"\xff\xfe\x00bad")
    try:
        read_note_text(bad)
        assert False
    except FileFormatError:
        pass

    try:
        read_note_text(tmp_path / "missing.md")
        assert False
    except FileNotFound:
        pass


def test_pinned_and_domain():
    content = "# Title\nBody"
    pinned = set_pinned(content, True)
    assert pinned == "---\npinned: true\n---\n# Title\nBody"
    assert set_pinned(pinned, False) == content

    with_domain = set_domain(pinned, "Insight")
    assert with_domain == "---\npinned: true\ndomain: insight\n---\n# Title\nBody"
    assert set_domain(with_domain, None) == pinned
    assert set_domain(content, Domain.person) == "---\ndomain: person\n---\n# Title\nBody"

    try:
        set_domain(content, "chores")
        assert False
    except InvalidInput as e:
        assert "chores" in str(e)


def test_load_note(tmp_path):
    path = tmp_path / "groceries.md"
    path.write_text("---\npinned: true\ndomain: action\n---\n## Groceries\n- [ ] milk\n", encoding="utf-8")
    note = load_note(path)
    assert note.id == "groceries"
    assert note.title == "Groceries"
    assert note.pinned
    assert note.domain == Domain.action
    assert note.file_path == path

    untitled = tmp_path / "untitled.md"
    untitled.write_text("", encoding="utf-8")
    note = load_note(untitled)
    assert note.title == "untitled"
    assert not note.pinned and note.domain is None


def test_rich_markup_round_trip(tmp_path):
    path = tmp_path / "list.md"
    path.write_text("---\ndomain: action\n---\n- [ ] Buy milk\n- [x] Call mom\n", encoding="utf-8")

    markup = load_rich_markup(path)
    assert "domain" not in markup
    assert markup.count('class="x-todo-box"') == 2

    content = save_rich_markup(path, markup)
    assert content == "---\ndomain: action\n---\n- [ ] Buy milk\n- [x] Call mom\n"
    assert path.read_text(encoding="utf-8") == content

    new_path = tmp_path / "new.md"
    assert save_rich_markup(new_path, "<p>Hello</p>") == "Hello\n"


def test_list_notes(tmp_path):
    for i, name in enumerate(["a.md", "b.md", "c.md"]):
        path = tmp_path / name
        path.write_text(f"# Note {name}\n", encoding="utf-8")
        os.utime(path, (1000 + i, 1000 + i))
    (tmp_path / "ignore.txt").write_text("not a note", encoding="utf-8")

    pinned = tmp_path / "a.md"
    pinned.write_text(set_pinned(pinned.read_text(encoding="utf-8"), True), encoding="utf-8")
    os.utime(pinned, (1000, 1000))

    notes = list_notes(tmp_path)
    assert [note.id for note in notes] == ["a", "c", "b"]
    assert notes[0].pinned
