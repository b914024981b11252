"""
Frontmatter store: read and update the small `key: value` block at the top of a
note, between `---` lines, as used by Obsidian and Jekyll.

This is not a YAML parser. Each line is one key and one scalar
value (boolean, number, or string), keys keep their order, and the body after
the block is never touched. Anything that doesn't look like a frontmatter block
is simply body text, so none of these functions raise.
"""

from typing import Optional, Tuple

import regex

from mdnote.config.logger import get_logger
from mdnote.model.note_model import Frontmatter, FrontmatterValue, NoteDocument

log = get_logger(__name__)

FM_DELIMITER = "---"

BOM = "\ufeff"

# Optional BOM and leading whitespace, the opening delimiter, the metadata lines,
# and the closing delimiter with exactly one line break.
_frontmatter_re = regex.compile(
    r"\A(\ufeff?\s*)---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    regex.DOTALL,
)

_number_re = regex.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_int_re = regex.compile(r"[+-]?\d+")


def _parse_number(raw: str) -> Optional[int | float]:
    if not _number_re.fullmatch(raw):
        return None
    number = int(raw) if _int_re.fullmatch(raw) else float(raw)
    # Only numbers that are written back exactly as read, so `1.10` or `007` stay text.
    return number if format_value(number) == raw else None


def parse_value(raw: str) -> FrontmatterValue:
    """
    Coerce a raw value: `true`/`false` to bool, numeric literals in their canonical
    form to int or float, and anything else to a string with one layer of matching
    quotes removed.
    """
    if raw == "true":
        return True
    if raw == "false":
        return False
    number = _parse_number(raw)
    if number is not None:
        return number
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return raw[1:-1]
    return raw


def format_value(value: FrontmatterValue) -> str:
    # bool is an int subclass so check it first.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        # Quote strings that would otherwise read back as another value.
        parsed = parse_value(value)
        if not isinstance(parsed, str) or parsed != value or value != value.strip():
            return f'"{value}"'
    return str(value)


def _parse_lines(block: str) -> Frontmatter:
    frontmatter: Frontmatter = {}
    for line in block.split("\n"):
        colon = line.find(":")
        if colon <= 0:
            continue
        key = line[:colon].strip()
        frontmatter[key] = parse_value(line[colon + 1 :].strip())
    return frontmatter


def parse_frontmatter(content: str) -> NoteDocument:
    """
    Split note content into its frontmatter and body. Content without a frontmatter
    block at the very start is all body.
    """
    match = _frontmatter_re.match(content)
    if not match:
        return NoteDocument(frontmatter={}, body=content)

    return NoteDocument(frontmatter=_parse_lines(match.group(2)), body=content[match.end() :])


def serialize_frontmatter(frontmatter: Frontmatter, body: str) -> str:
    """
    Write frontmatter and body back to note content, with `\\n` line endings. An empty
    mapping writes no block at all.
    """
    if not frontmatter:
        return body

    lines = [f"{key}: {format_value(value)}" for key, value in frontmatter.items()]
    return "\n".join([FM_DELIMITER, *lines, FM_DELIMITER, body])


compose_content = serialize_frontmatter


def _split_bom(content: str) -> Tuple[str, str]:
    if content.startswith(BOM):
        return BOM, content[len(BOM) :]
    return "", content


def update_frontmatter(content: str, key: str, value: FrontmatterValue) -> str:
    """
    Set one key, in place if it exists or appended at the end if it doesn't. A leading
    byte order mark is kept.
    """
    bom, content = _split_bom(content)
    doc = parse_frontmatter(content)
    frontmatter = dict(doc.frontmatter)
    frontmatter[key] = value
    return bom + serialize_frontmatter(frontmatter, doc.body)


def remove_frontmatter_key(content: str, key: str) -> str:
    """
    Remove one key. Removing the last key removes the whole block.
    """
    bom, content = _split_bom(content)
    doc = parse_frontmatter(content)
    if key not in doc.frontmatter:
        log.debug("Frontmatter key not present, nothing to remove: %r", key)
    frontmatter = {k: v for k, v in doc.frontmatter.items() if k != key}
    return bom + serialize_frontmatter(frontmatter, doc.body)


def get_frontmatter(content: str) -> Frontmatter:
    return parse_frontmatter(content).frontmatter


def get_frontmatter_value(
    content: str, key: str, default: Optional[FrontmatterValue] = None
) -> Optional[FrontmatterValue]:
    return parse_frontmatter(content).frontmatter.get(key, default)


def has_frontmatter_key(content: str, key: str) -> bool:
    return key in parse_frontmatter(content).frontmatter


def strip_frontmatter(content: str) -> str:
    """
    Content without its frontmatter, for display.
    """
    return parse_frontmatter(content).body


## Tests


def test_parse_frontmatter():
    content = "---\ntitle: Groceries\npinned: true\ncount: 3\nratio: 0.5\n---\n# Groceries\n- milk\n"
    doc = parse_frontmatter(content)
    assert doc.frontmatter == {"title": "Groceries", "pinned": True, "count": 3, "ratio": 0.5}
    assert list(doc.frontmatter.keys()) == ["title", "pinned", "count", "ratio"]
    assert doc.body == "# Groceries\n- milk\n"

    assert parse_frontmatter("just text\n---\na: 1\n---\n") == NoteDocument({}, "just text\n---\na: 1\n---\n")
    assert parse_frontmatter("") == NoteDocument({}, "")

    # Unclosed block is body.
    unclosed = "---\na: 1\nno closing delimiter"
    assert parse_frontmatter(unclosed) == NoteDocument({}, unclosed)


def test_parse_values():
    assert parse_value("false") is False
    assert parse_value("true") is True
    assert parse_value("True") == "True"
    assert parse_value("42") == 42 and isinstance(parse_value("42"), int)
    assert parse_value("-1500.0") == -1500.0
    assert parse_value("0.5") == 0.5
    assert parse_value("12abc") == "12abc"
    assert parse_value("") == ""
    assert parse_value('"quoted: yes"') == "quoted: yes"
    assert parse_value("'single'") == "single"
    assert parse_value("\"mismatched'") == "\"mismatched'"
    assert parse_value('"42"') == "42"


def test_malformed_lines_ignored():
    content = "---\ntitle: A\nno colon here\n: starts with colon\nurl: http://x.org\n---\nbody"
    doc = parse_frontmatter(content)
    assert doc.frontmatter == {"title": "A", "url": "http://x.org"}
    assert doc.body == "body"


def test_bom_and_crlf():
    plain = "---\npinned: true\ndomain: action\n---\nBody\n"
    with_bom = BOM + plain
    crlf = "---\r\npinned: true\r\ndomain: action\r\n---\r\nBody\n"
    expected = parse_frontmatter(plain)
    assert parse_frontmatter(with_bom) == expected
    assert parse_frontmatter(crlf) == expected
    assert parse_frontmatter("\n  " + plain) == expected


def test_serialize_round_trip():
    content = "---\ntitle: Notes\npinned: false\ncount: 2\n---\n\nBody with --- inside\n"
    doc = parse_frontmatter(content)
    assert serialize_frontmatter(doc.frontmatter, doc.body) == content

    assert serialize_frontmatter({}, "body only") == "body only"

    crlf = "---\r\na: 1\r\n---\r\nline one\r\nline two"
    doc = parse_frontmatter(crlf)
    assert serialize_frontmatter(doc.frontmatter, doc.body) == "---\na: 1\n---\nline one\r\nline two"


def test_update_frontmatter():
    assert update_frontmatter("", "pinned", True) == "---\npinned: true\n---\n"

    content = "---\ntitle: A\ndomain: action\n---\nBody"
    updated = update_frontmatter(content, "title", "B")
    assert updated == "---\ntitle: B\ndomain: action\n---\nBody"

    appended = update_frontmatter(content, "pinned", True)
    assert appended == "---\ntitle: A\ndomain: action\npinned: true\n---\nBody"
    assert parse_frontmatter(appended).body == parse_frontmatter(content).body

    assert update_frontmatter("Plain body", "count", 1.5) == "---\ncount: 1.5\n---\nPlain body"


def test_remove_and_accessors():
    content = "---\npinned: true\ndomain: insight\n---\nBody"
    assert remove_frontmatter_key(content, "pinned") == "---\ndomain: insight\n---\nBody"
    assert remove_frontmatter_key(remove_frontmatter_key(content, "pinned"), "domain") == "Body"
    assert remove_frontmatter_key(content, "missing") == content

    assert get_frontmatter_value(content, "pinned") is True
    assert get_frontmatter_value(content, "missing", "x") == "x"
    assert has_frontmatter_key(content, "domain")
    assert not has_frontmatter_key("Body", "domain")
    assert strip_frontmatter(content) == "Body"
    assert get_frontmatter(content) == {"pinned": True, "domain": "insight"}


def test_numbers_kept_as_written():
    content = "---\nversion: 1.10\nzip: 02134\nbig: 1e3\nplus: +5\nhalf: .5\nn: -7\n---\nbody"
    doc = parse_frontmatter(content)
    assert doc.frontmatter == {
        "version": "1.10",
        "zip": "02134",
        "big": "1e3",
        "plus": "+5",
        "half": ".5",
        "n": -7,
    }
    assert serialize_frontmatter(doc.frontmatter, doc.body) == content

    pinned = update_frontmatter(content, "pinned", True)
    assert pinned == content.replace("n: -7\n", "n: -7\npinned: true\n")


def test_string_values_quoted_when_ambiguous():
    assert format_value("42") == '"42"'
    assert format_value("true") == '"true"'
    assert format_value(" padded ") == '" padded "'
    assert format_value("plain text") == "plain text"

    content = '---\nid: "42"\nflag: "false"\n---\n'
    doc = parse_frontmatter(content)
    assert doc.frontmatter == {"id": "42", "flag": "false"}
    assert serialize_frontmatter(doc.frontmatter, doc.body) == content
    assert parse_frontmatter(update_frontmatter("", "note", " padded ")).frontmatter == {"note": " padded "}


def test_bom_kept_on_update():
    content = BOM + "---\npinned: true\n---\nBody"
    assert update_frontmatter(content, "domain", "action") == BOM + "---\npinned: true\ndomain: action\n---\nBody"
    assert remove_frontmatter_key(content, "pinned") == BOM + "Body"
    assert update_frontmatter(BOM + "Body", "pinned", True) == BOM + "---\npinned: true\n---\nBody"
