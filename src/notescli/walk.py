"""Enumerates every note under a directory. The entry point is :func:`walk_notes`."""

import logging
from operator import attrgetter
import os
from typing import Callable, Iterator

from notescli.conf import NotesConf
from notescli.errors import Error, WalkError
from notescli.models import NOTE_SUFFIX, Note
from notescli.parser import load_note

logger = logging.getLogger(__name__)

VCS_DIR = '.git'
WALK_HINT = ("Error while traversing notes. "
             "If you're finding notes of specific category, directory for it may not exist")

Visitor = Callable[[str, Note], None]


def _note_paths(dirpath: str) -> Iterator[str]:
    try:
        with os.scandir(dirpath) as it:
            entries = sorted(it, key=attrgetter('name'))
    except OSError as e:
        raise WalkError(WALK_HINT, dirpath, e) from e
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name == VCS_DIR:
                logger.debug('Skipping %s', entry.path)
                continue
            yield from _note_paths(entry.path)
        elif entry.name.endswith(NOTE_SUFFIX):
            yield entry.path


def walk_notes(root: str, conf: NotesConf, visitor: Visitor) -> None:
    """Loads every note under ``root`` and calls ``visitor(path, note)`` for each, depth first.

    Entries within a directory are visited in order of name. ``.git`` directories are not entered, and only
    files ending in ``.md`` are loaded.

    ``root`` may also be a single note file, which is visited on its own. A ``root`` named ``.git`` is not
    entered, so nothing is visited.

    The walk stops at the first failure. If a directory cannot be listed or a note cannot be loaded, a
    :exc:`notescli.errors.WalkError` is raised with the original error as its cause. Exceptions raised by
    ``visitor`` propagate unchanged.
    """
    if os.path.basename(os.path.normpath(root)) == VCS_DIR:
        logger.debug('Skipping %s', root)
        return
    if os.path.isfile(root):
        paths = [root] if root.endswith(NOTE_SUFFIX) else []
    else:
        paths = _note_paths(root)
    for path in paths:
        try:
            note = load_note(path, conf)
        except Error as e:
            raise WalkError(WALK_HINT, path, e) from e
        visitor(path, note)
