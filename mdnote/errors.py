"""
Unified hierarchy of error types. These inherit from standard errors like
ValueError and FileNotFoundError but are more fine-grained.

The content transformations themselves never raise on string input. These errors
are for the edges: reading and writing note files, settings, and the command line.
"""

from typing import Tuple, Type


class MdnoteRuntimeError(ValueError):
    """Base class for mdnote runtime errors."""

    pass


class UnexpectedError(MdnoteRuntimeError):
    """For unexpected errors or runtime check failures."""

    pass


class SelfExplanatoryError(MdnoteRuntimeError):
    """Common errors that arise from 'normal' problems that are largely self-explanatory,
    i.e., no stack trace should be necessary when reporting to the user."""

    pass


class InvalidInput(SelfExplanatoryError):
    """Raised when the wrong kind of input is given to a command or operation."""

    pass


class InvalidParam(InvalidInput):
    """Raised when a parameter or setting is invalid."""

    def __init__(self, param_name: str, value: object = None):
        if value is None:
            super().__init__(f"Invalid parameter: {repr(param_name)}")
        else:
            super().__init__(f"Invalid value for {repr(param_name)}: {repr(value)}")


class FileNotFound(InvalidInput, FileNotFoundError):
    """Raised when a note file is not found."""

    pass


class FileFormatError(SelfExplanatoryError):
    """Raised when a file's content can't be read as a text note."""

    pass


NONFATAL_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    SelfExplanatoryError,
    FileNotFoundError,
    IOError,
)
"""Exceptions that are not fatal and usually don't merit a full stack trace."""
