"""
Guess whether a line of Markdown reads left to right or right to left, from the
first letter after any leading Markdown syntax.
"""

import regex

from mdnote.config.settings import global_settings
from mdnote.model.note_model import Direction

LRM = "\u200e"
RLM = "\u200f"

# Whitespace before a marker may include the directional marks editors insert.
_lead = r"^[\s\u200e\u200f]*"

_heading_re = regex.compile(_lead + r"#+\s*")
_bullet_re = regex.compile(_lead + r"[-*+]\s+")
_numbered_re = regex.compile(_lead + r"\d+\.\s+")
_checkbox_re = regex.compile(_lead + r"\[[ xX]\]\s*")
_quote_re = regex.compile(r"^>+\s*")
_inline_markup_re = regex.compile(r"[*_~`]")

_letter_re = regex.compile(r"[a-zA-Z\u0590-\u05FF\u0600-\u06FF]")


def _strip_markdown(text: str) -> str:
    text = _heading_re.sub("", text, count=1)
    text = _bullet_re.sub("", text, count=1)
    text = _numbered_re.sub("", text, count=1)
    text = _checkbox_re.sub("", text, count=1)
    text = _quote_re.sub("", text, count=1)
    return _inline_markup_re.sub("", text)


def _is_rtl_char(char: str) -> bool:
    code = ord(char)
    # Hebrew or Arabic block.
    return 0x0590 <= code <= 0x05FF or 0x0600 <= code <= 0x06FF


def classify_direction(text: str) -> Direction:
    """
    Direction of the first Latin, Hebrew, or Arabic letter in the text once list,
    heading, checkbox, quote, and emphasis markup is removed. Text with no such
    letter gets the default direction, which is RTL unless configured otherwise.
    """
    match = _letter_re.search(_strip_markdown(text))
    if not match:
        return global_settings().default_direction
    return Direction.rtl if _is_rtl_char(match.group(0)) else Direction.ltr


def is_rtl(text: str) -> bool:
    return classify_direction(text) == Direction.rtl


## Tests


def test_classify_direction():
    assert classify_direction("") == Direction.rtl
    assert classify_direction("123") == Direction.rtl
    assert classify_direction("- שלום") == Direction.rtl
    assert classify_direction("- hello") == Direction.ltr
    assert classify_direction("## مرحبا بالعالم") == Direction.rtl
    assert classify_direction("> **bold** text") == Direction.ltr
    assert classify_direction("12. 3 apples") == Direction.ltr


def test_markers_are_not_letters():
    # The `x` of a checkbox is stripped before looking for letters.
    assert classify_direction("- [x] קניות") == Direction.rtl
    assert classify_direction("- [X] 42") == Direction.rtl
    assert classify_direction(RLM + "- [x] קניות") == Direction.rtl
    assert classify_direction("- [ ] buy milk") == Direction.ltr
    assert is_rtl("1. [x] שלום")
    assert not is_rtl("`code` and שלום")


def test_mixed_text_uses_first_letter():
    assert classify_direction("- שלום world") == Direction.rtl
    assert classify_direction("- hello עולם") == Direction.ltr
