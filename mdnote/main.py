"""
Command-line entry point for working with note files: render them for the editor,
convert editor HTML back to Markdown, and read or change their frontmatter.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich import print as rprint
from rich.markup import escape

from mdnote.config.logger import get_logger
from mdnote.config.settings import APP_NAME
from mdnote.config.setup import setup
from mdnote.config.text_styles import EMOJI_PINNED
from mdnote.errors import InvalidInput, NONFATAL_EXCEPTIONS
from mdnote.file_formats.frontmatter_store import (
    format_value,
    get_frontmatter,
    parse_value,
    update_frontmatter,
)
from mdnote.file_storage.note_files import (
    list_notes,
    load_rich_markup,
    read_note_text,
    set_pinned,
    write_note_text,
)
from mdnote.text_formatting.rich_markup import rich_markup_to_markdown
from mdnote.version import get_version

log = get_logger(__name__)


def html_command(path: str):
    print(load_rich_markup(Path(path)))


def markdown_command(path: str):
    print(rich_markup_to_markdown(read_note_text(Path(path))))


def fm_command(path: str, key: Optional[str] = None):
    frontmatter = get_frontmatter(read_note_text(Path(path)))
    if key is not None:
        if key not in frontmatter:
            raise InvalidInput(f"No frontmatter key {key!r} in: {path}")
        print(format_value(frontmatter[key]))
        return
    for name, value in frontmatter.items():
        rprint(f"[mdnote.key]{escape(name)}[/mdnote.key]: [mdnote.value]{escape(format_value(value))}[/mdnote.value]")


def set_command(path: str, key: str, value: str):
    if not key.strip() or ":" in key:
        raise InvalidInput(f"Invalid frontmatter key: {key!r}")
    content = read_note_text(Path(path))
    write_note_text(Path(path), update_frontmatter(content, key.strip(), parse_value(value.strip())))


def pin_command(path: str):
    write_note_text(Path(path), set_pinned(read_note_text(Path(path)), True))


def unpin_command(path: str):
    write_note_text(Path(path), set_pinned(read_note_text(Path(path)), False))


def ls_command(folder: str):
    for note in list_notes(Path(folder)):
        marker = EMOJI_PINNED if note.pinned else "  "
        domain = f" [mdnote.hint]({escape(note.domain.label)})[/mdnote.hint]" if note.domain else ""
        rprint(
            f"{marker} {escape(note.title)}{domain}  [mdnote.path]{escape(str(note.file_path))}[/mdnote.path]"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=__doc__.strip())
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {get_version()}")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p_html = sub.add_parser("html", help="Print a note's body as editor HTML.")
    p_html.add_argument("file")
    p_html.set_defaults(func=lambda args: html_command(args.file))

    p_markdown = sub.add_parser("markdown", help="Print editor HTML from a file as Markdown.")
    p_markdown.add_argument("file")
    p_markdown.set_defaults(func=lambda args: markdown_command(args.file))

    p_fm = sub.add_parser("fm", help="Print a note's frontmatter, or one value.")
    p_fm.add_argument("file")
    p_fm.add_argument("key", nargs="?")
    p_fm.set_defaults(func=lambda args: fm_command(args.file, args.key))

    p_set = sub.add_parser("set", help="Set a frontmatter value.")
    p_set.add_argument("file")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.set_defaults(func=lambda args: set_command(args.file, args.key, args.value))

    p_pin = sub.add_parser("pin", help="Pin a note.")
    p_pin.add_argument("file")
    p_pin.set_defaults(func=lambda args: pin_command(args.file))

    p_unpin = sub.add_parser("unpin", help="Unpin a note.")
    p_unpin.add_argument("file")
    p_unpin.set_defaults(func=lambda args: unpin_command(args.file))

    p_ls = sub.add_parser("ls", help="List notes, pinned first, then most recent.")
    p_ls.add_argument("folder")
    p_ls.set_defaults(func=lambda args: ls_command(args.folder))

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        setup()
        log.info("Command: %s", args.command)
        args.func(args)
    except NONFATAL_EXCEPTIONS as e:
        log.error("%s", e)
        log.info("Command error details: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
