"""Loads notes from their files. The entry point is :func:`load_note`."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import os.path
import re
from typing import List, Optional

from notescli.conf import NotesConf
from notescli.errors import ConsistencyError, NoteIOError, ParseError, ValidationError
from notescli.models import CATEGORY_PREFIX, CREATED_PREFIX, TAGS_PREFIX, Note, parse_created, parse_tags

TITLE_BAR_RE = re.compile(r'^=+$')
NO_TITLE = '(no title)'


class _State(Enum):
    SEEKING_TITLE = 1
    SEEKING_BAR = 2
    SCANNING_METADATA = 3
    DONE = 4


@dataclass
class _Header:
    title: str = ''
    category: str = ''
    tags: Optional[List[str]] = None
    created: Optional[datetime] = None

    def complete(self) -> bool:
        return bool(self.title and self.category and self.tags is not None and self.created)

    def missing(self) -> List[str]:
        result = []
        if not self.category:
            result.append('Category')
        if self.tags is None:
            result.append('Tags')
        if not self.created:
            result.append('Created')
        return result


class _HeaderScanner:
    """Consumes lines from the top of a note file until the title and metadata have all been found.

    Before the title bar every line replaces the title candidate, so the line directly above the bar is the title.
    """
    def __init__(self, path: str):
        self.path = path
        self.dir_category = os.path.basename(os.path.dirname(os.path.abspath(path)))
        self.state = _State.SEEKING_TITLE
        self.header = _Header()

    def feed(self, line: str) -> None:
        if self.state in (_State.SEEKING_TITLE, _State.SEEKING_BAR):
            if TITLE_BAR_RE.match(line):
                if not self.header.title:
                    self.header.title = NO_TITLE
                self.state = _State.SCANNING_METADATA
            else:
                self.header.title = line
                self.state = _State.SEEKING_BAR
        elif self.state == _State.SCANNING_METADATA:
            self._scan_metadata(line)
        if self.state == _State.SCANNING_METADATA and self.header.complete():
            self.state = _State.DONE

    def _scan_metadata(self, line: str) -> None:
        if line.startswith(CATEGORY_PREFIX):
            category = line[len(CATEGORY_PREFIX):].strip()
            if category != self.dir_category:
                raise ConsistencyError(
                    'Category does not match between file path and file content, '
                    f"in path '{self.dir_category}' v.s. in file '{category}' ({self.path})",
                    self.path, self.dir_category, category)
            self.header.category = category
        elif line.startswith(TAGS_PREFIX):
            self.header.tags = parse_tags(line[len(TAGS_PREFIX):])
        elif line.startswith(CREATED_PREFIX):
            try:
                self.header.created = parse_created(line[len(CREATED_PREFIX):].strip())
            except ValueError as e:
                raise ParseError(f'Cannot parse created date time as RFC3339 format: {line}', self.path, e) from e


def load_note(path: str, conf: NotesConf) -> Note:
    """Reads the header of the note file at ``path``.

    Only as much of the file is read as is needed to find the title, category, tags and created date.

    Raises:

    * :exc:`notescli.errors.ConsistencyError` if the header's category is not the name of the file's directory
    * :exc:`notescli.errors.ParseError` if there is no title bar, the created date is malformed, or the file is
      not valid UTF-8
    * :exc:`notescli.errors.ValidationError` if category, tags or created is missing
    * :exc:`notescli.errors.NoteIOError` if the file cannot be read
    """
    scanner = _HeaderScanner(path)
    try:
        with open(path, 'r', encoding='utf-8', newline='\n') as file:
            for line in file:
                scanner.feed(line.rstrip('\r\n'))
                if scanner.state == _State.DONE:
                    break
    except UnicodeDecodeError as e:
        raise ParseError(f"Cannot decode note file '{path}' as UTF-8", path, e) from e
    except OSError as e:
        raise NoteIOError(f"Cannot read note file '{path}'", path, e) from e

    if scanner.state in (_State.SEEKING_TITLE, _State.SEEKING_BAR):
        raise ParseError(f"No title found in note '{path}'. Didn't you use '====' bar for h1 title?", path)

    header = scanner.header
    missing = header.missing()
    if missing:
        raise ValidationError(f"Missing metadata in file '{path}': {', '.join(missing)}. "
                              "'Category', 'Tags', 'Created' are mandatory", path)

    return Note(conf, header.category, header.tags, header.created, os.path.basename(path), header.title)
