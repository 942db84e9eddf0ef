"""Exceptions raised by notescli.

Every exception derives from :class:`Error`, so callers that only want to report failures can catch that.
"""

from typing import Optional


class Error(Exception):
    """Base class for notescli failures.

    .. attribute:: message
       :type: str

    .. attribute:: path
       :type: Optional[str]

       The file or directory the failure concerns, if any.

    .. attribute:: cause
       :type: Optional[BaseException]

       The underlying exception, if this one wraps another.
    """
    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f'{self.message}: {self.cause}'
        return self.message


class ValidationError(Error):
    """Raised for bad input, such as an empty category, or for a note missing mandatory metadata."""


class ParseError(Error):
    """Raised when a note's header is malformed."""


class ConsistencyError(Error):
    """Raised when the category in a note's header differs from the directory the note is stored in."""
    def __init__(self, message: str, path: str, path_category: str, file_category: str):
        super().__init__(message, path)
        self.path_category = path_category
        self.file_category = file_category


class AlreadyExistsError(Error):
    """Raised when creating a note would overwrite an existing file."""


class ConfigError(Error):
    """Raised when required configuration is missing or unreadable."""


class NoteIOError(Error):
    """Raised when reading or writing files, or running the editor, fails."""


class WalkError(Error):
    """Raised when traversing a note store fails, either while listing directories or loading a note."""
