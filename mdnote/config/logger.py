import logging
import os
from functools import cache
from logging import Formatter
from pathlib import Path
from typing import Optional

import rich
from rich import reconfigure
from rich.logging import RichHandler
from rich.theme import Theme

from mdnote.config.settings import DOT_DIR, global_settings, LogLevel
from mdnote.config.text_styles import EMOJI_ERROR, EMOJI_WARN, RICH_STYLES

LOG_DIR_NAME = f"{DOT_DIR}/logs"
LOG_FILE_NAME = "mdnote.log"


def log_dir() -> Path:
    return global_settings().log_root / LOG_DIR_NAME


def log_file_path() -> Path:
    return log_dir() / LOG_FILE_NAME


@cache
def get_theme():
    return Theme(RICH_STYLES)


reconfigure(theme=get_theme())


_file_handler: Optional[logging.FileHandler] = None
_console_handler: Optional[RichHandler] = None


def logging_setup():
    """
    Set up or reset logging setup. Call at initial run and again if the log directory
    changes. Replaces previous handlers on the root logger.
    """
    os.makedirs(log_dir(), exist_ok=True)

    # Verbose logging to file, important logging to console.
    global _file_handler
    _file_handler = logging.FileHandler(log_file_path())
    _file_handler.setLevel(global_settings().file_log_level.value)
    _file_handler.setFormatter(Formatter("%(asctime)s %(levelname).1s %(name)s - %(message)s"))

    global _console_handler
    _console_handler = RichHandler(
        console=rich.get_console(),
        level=global_settings().console_log_level.value,
        show_time=False,
        show_path=False,
        show_level=False,
        markup=True,
    )
    _console_handler.setLevel(global_settings().console_log_level.value)
    _console_handler.setFormatter(Formatter("%(message)s"))

    root = logging.getLogger()
    root.setLevel(min(global_settings().file_log_level.value, global_settings().console_log_level.value))
    # Remove any existing handlers.
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.addHandler(_console_handler)
    root.addHandler(_file_handler)


def prefix_args(args, warn_emoji: str = ""):
    if len(args) > 0 and warn_emoji:
        args = (f"{warn_emoji} {args[0]}",) + args[1:]
    return args


class CustomLogger:
    """
    Custom logger to be clearer about user messages.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, *args, **kwargs):
        self.logger.debug(*args, **kwargs)

    def info(self, *args, **kwargs):
        self.logger.info(*args, **kwargs)

    def message(self, *args, **kwargs):
        self.logger.warning(*args, **kwargs)

    def warning(self, *args, **kwargs):
        self.logger.warning(*prefix_args(args, warn_emoji=EMOJI_WARN), **kwargs)

    def error(self, *args, **kwargs):
        self.logger.error(*prefix_args(args, warn_emoji=EMOJI_ERROR), **kwargs)

    def log(self, level: LogLevel, *args, **kwargs):
        getattr(self, level.name)(*args, **kwargs)

    # Fallback for other attributes/methods.
    def __getattr__(self, attr):
        return getattr(self.logger, attr)


def get_logger(name: str):
    return CustomLogger(name)

