"""
Markers and styles for console output.
"""

from rich.style import Style

EMOJI_WARN = "△"

EMOJI_ERROR = EMOJI_WARN + EMOJI_WARN

EMOJI_SAVED = "⩣"

EMOJI_PINNED = "📌"


## Colors

COLOR_KEY = "bright_blue"

COLOR_VALUE = "cyan"

COLOR_PATH = "bright_cyan"

COLOR_HINT = "bright_black"


RICH_STYLES = {
    "mdnote.key": Style(color=COLOR_KEY),
    "mdnote.value": Style(color=COLOR_VALUE),
    "mdnote.path": Style(color=COLOR_PATH),
    "mdnote.hint": Style(color=COLOR_HINT, italic=True),
}
