import threading
from contextlib import contextmanager
from enum import Enum
from logging import DEBUG, ERROR, INFO, WARNING
from pathlib import Path

from pydantic.dataclasses import dataclass

from mdnote.model.note_model import Direction


APP_NAME = "mdnote"

DOT_DIR = ".mdnote"

ENV_DEFAULT_DIRECTION = "MDNOTE_DEFAULT_DIRECTION"

ENV_LOG_LEVEL = "MDNOTE_LOG_LEVEL"

CHECKBOX_WIDGET_CLASS = "x-todo-box"

TASK_LIST_CLASS = "x-todo"


class LogLevel(Enum):
    debug = DEBUG
    info = INFO
    warning = WARNING
    message = WARNING  # Same as warning, just for important console messages.
    error = ERROR

    @classmethod
    def parse(cls, level_str: str):
        canon_name = level_str.strip().lower()
        if canon_name == "warn":
            canon_name = "warning"
        try:
            return cls[canon_name]
        except KeyError:
            raise ValueError(
                f"Invalid log level: `{level_str}`. Valid options are: {', '.join(f'`{name}`' for name in cls.__members__)}"
            )

    def __str__(self):
        return self.name


@dataclass
class Settings:
    console_log_level: LogLevel
    """The log level for console-based logging."""

    file_log_level: LogLevel
    """The log level for file-based logging."""

    log_root: Path
    """Directory under which the `.mdnote/logs` directory is created."""

    default_direction: Direction
    """Direction for lines with no Latin, Hebrew, or Arabic letters to go on."""

    checkbox_widget_class: str
    """Class of the non-editable span that wraps an interactive checkbox."""

    task_list_class: str
    """Class on a list that holds checkbox widgets."""


# Initial default settings.
_settings = Settings(
    console_log_level=LogLevel.warning,
    file_log_level=LogLevel.info,
    log_root=Path("."),
    default_direction=Direction.rtl,
    checkbox_widget_class=CHECKBOX_WIDGET_CLASS,
    task_list_class=TASK_LIST_CLASS,
)


def global_settings() -> Settings:
    """
    Read access to global settings.
    """
    return _settings


_settings_lock = threading.RLock()


@contextmanager
def update_global_settings():
    """
    Context manager for thread-safe updates to global settings.
    """
    with _settings_lock:
        yield _settings
