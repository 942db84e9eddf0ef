"""Defines :class:`Note`, the in-memory form of a note, and the on-disk text format it is written in.

A note file looks like this:

.. code-block:: markdown

   My Title
   ========
   - Category: diary
   - Tags: personal, food
   - Created: 2018-10-28T17:15:41+09:00

   Body text...

New notes are made with :func:`new_note` and written with :meth:`Note.create`.
Existing notes are read with :func:`notescli.parser.load_note`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import codecs
import logging
import os
import os.path
import re
from typing import BinaryIO, List, Optional

from notescli.conf import NotesConf
from notescli.editor import Launcher, SubprocessLauncher
from notescli.errors import AlreadyExistsError, ConfigError, NoteIOError, ValidationError

logger = logging.getLogger(__name__)

NOTE_SUFFIX = '.md'
CATEGORY_PREFIX = '- Category: '
TAGS_PREFIX = '- Tags:'
CREATED_PREFIX = '- Created: '

CREATED_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+-]\d{2}:\d{2})$')

_METADATA_MARKERS = tuple(p.encode('utf-8') for p in (CATEGORY_PREFIX, TAGS_PREFIX, CREATED_PREFIX))
_BLANK_LINES = (b'\n', b'\r\n')


def parse_tags(raw: str) -> List[str]:
    """Splits a comma-separated string into tags.

    Whitespace around each tag is removed and empty entries are dropped. Order and duplicates are kept.
    """
    return [t.strip() for t in raw.split(',') if t.strip()]


def format_created(created: datetime) -> str:
    """Renders a timestamp like ``2018-10-28T17:15:41+09:00``, using ``Z`` for a zero offset.

    Naive datetimes are treated as local time. Fractional seconds are dropped.
    """
    if created.utcoffset() is None:
        created = created.astimezone()
    text = created.isoformat(timespec='seconds')
    if not created.utcoffset():
        return text[:-len('+00:00')] + 'Z'
    return text


def parse_created(text: str) -> datetime:
    """Parses the timestamp format written by :func:`format_created`.

    Fractional seconds are accepted. Raises ValueError if the text does not conform.
    """
    match = CREATED_RE.match(text)
    if not match:
        raise ValueError(f'Not a valid timestamp: {text!r}')
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, offset = match.group(7), match.group(8)
    micros = int((fraction[1:] + '000000')[:6]) if fraction else 0
    if offset == 'Z':
        tz = timezone.utc
    else:
        delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
        tz = timezone(-delta if offset[0] == '-' else delta)
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def _read_body(file: BinaryIO, max_bytes: int) -> Optional[bytes]:
    seen = set()
    while True:
        line = file.readline()
        seen.update(m for m in _METADATA_MARKERS if line.startswith(m))
        if len(seen) == len(_METADATA_MARKERS):
            break
        if not line.endswith(b'\n'):
            return None

    first = b''
    for line in iter(file.readline, b''):
        if line not in _BLANK_LINES:
            first = line
            break

    max_bytes = max(max_bytes, 0)
    if len(first) > max_bytes:
        return first[:max_bytes]
    return first + file.read(max_bytes - len(first))


@dataclass
class Note:
    """A single note: header metadata plus the location of its file.

    Instances come from :func:`new_note` (not yet written) or :func:`notescli.parser.load_note`.
    """

    conf: NotesConf
    """Supplies the store root that :attr:`category` is a subdirectory of."""

    category: str
    """Name of the directory the note lives in, repeated in the header."""

    tags: List[str] = field(default_factory=list)
    """Tags in the order they were written. Always present, but may be empty."""

    created: Optional[datetime] = None
    """Creation timestamp from the header, with its UTC offset."""

    file: str = ''
    """Base name of the note file, ending in ``.md``."""

    title: str = ''
    """The title. May be empty for a fresh note, in which case :meth:`effective_title` is written."""

    def dir_path(self) -> str:
        return os.path.join(self.conf.home_path, self.category)

    def file_path(self) -> str:
        return os.path.join(self.conf.home_path, self.category, self.file)

    def rel_file_path(self) -> str:
        return os.path.join(self.category, self.file)

    def effective_title(self) -> str:
        """Returns :attr:`title`, or the file name without its extension if the title is empty."""
        return self.title or os.path.splitext(self.file)[0]

    def render(self) -> str:
        """Returns the header text that :meth:`create` writes to a new file."""
        title = self.effective_title()
        # bar length counts bytes, so non-ASCII titles get a longer bar
        bar = '=' * len(title.encode('utf-8'))
        return (f'{title}\n{bar}\n'
                f'{CATEGORY_PREFIX}{self.category}\n'
                f'{TAGS_PREFIX} {", ".join(self.tags)}\n'
                f'{CREATED_PREFIX}{format_created(self.created)}\n\n')

    def create(self) -> None:
        """Writes the note's header to a new file at :meth:`file_path`, creating the category directory if needed.

        Raises :exc:`notescli.errors.AlreadyExistsError` if the file already exists; the existing file is left alone.
        Raises :exc:`notescli.errors.NoteIOError` if the directory or file cannot be written.
        """
        text = self.render()

        dirpath = self.dir_path()
        try:
            os.makedirs(dirpath, exist_ok=True)
        except OSError as e:
            raise NoteIOError(f"Could not create category directory '{dirpath}'", dirpath, e) from e

        path = self.file_path()
        exists_msg = f"Cannot create new note since file '{self.rel_file_path()}' already exists. Please edit it"
        if os.path.exists(path):
            raise AlreadyExistsError(exists_msg, path)
        try:
            with open(path, 'x', encoding='utf-8') as file:
                file.write(text)
        except FileExistsError as e:
            raise AlreadyExistsError(exists_msg, path, e) from e
        except OSError as e:
            raise NoteIOError('Cannot write note to file', path, e) from e
        logger.info('Created note %s', path)

    def open(self, launcher: Launcher = None) -> None:
        """Opens the note in the configured editor and waits for the editor to exit.

        The editor runs in the category directory and receives the absolute path of the note as its only argument.

        Raises :exc:`notescli.errors.ConfigError` if no editor is configured, and
        :exc:`notescli.errors.NoteIOError` if the editor cannot be started or exits with a non-zero status.
        """
        if not self.conf.editor_path:
            raise ConfigError('Editor is not set. To open note in editor, please set $NOTES_CLI_EDITOR')
        launcher = launcher or SubprocessLauncher()
        path = os.path.abspath(self.file_path())
        status = launcher.launch(self.conf.editor_path, [path], self.dir_path())
        if status != 0:
            raise NoteIOError(f'Editor command did not run successfully (exit status {status})', path)

    def read_body(self, max_bytes: int) -> str:
        """Returns up to ``max_bytes`` bytes of body text.

        The body starts at the first non-blank line after the metadata block. If that line alone is longer than
        ``max_bytes`` it is truncated. A multi-byte character cut off by the limit is dropped, and other invalid
        UTF-8 is replaced with U+FFFD.

        Raises :exc:`notescli.errors.NoteIOError` if the file cannot be read or ends before all the metadata lines
        have been seen.
        """
        path = self.file_path()
        try:
            with open(path, 'rb') as file:
                body = _read_body(file, max_bytes)
        except OSError as e:
            raise NoteIOError('Cannot read note file', path, e) from e
        if body is None:
            raise NoteIOError('Cannot read metadata of note file. '
                              f"Some metadata may be missing in '{self.rel_file_path()}'", path)
        return codecs.getincrementaldecoder('utf-8')(errors='replace').decode(body, final=False)

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'path': self.file_path(),
            'category': self.category,
            'tags': list(self.tags),
            'created': format_created(self.created) if self.created else None,
            'file': self.file,
            'title': self.title,
        }


def new_note(conf: NotesConf, category: str, tags: str, file: str, title: str = '') -> Note:
    """Builds a note that has not been written yet, stamped with the current time.

    ``tags`` is a comma-separated string (see :func:`parse_tags`). Spaces in ``file`` are replaced with hyphens and
    ``.md`` is appended if missing. An empty ``title`` means the file name will be used as the title.

    Raises :exc:`notescli.errors.ValidationError` if ``category`` or ``file`` is empty.
    """
    if not category:
        raise ValidationError('Category cannot be empty')
    if not file:
        raise ValidationError('File name cannot be empty')
    file = file.replace(' ', '-')
    if not file.endswith(NOTE_SUFFIX):
        file += NOTE_SUFFIX
    created = datetime.now(timezone.utc).astimezone().replace(microsecond=0)
    return Note(conf, category, parse_tags(tags), created, file, title)
