"""Runs an external editor on a note.

:class:`Launcher` is the interface; :class:`SubprocessLauncher` is the implementation that actually starts a process.
"""

import logging
import subprocess
from typing import List

from notescli.errors import NoteIOError

logger = logging.getLogger(__name__)


class Launcher:
    """Starts an interactive command and waits for it to finish."""
    def launch(self, command: str, args: List[str], cwd: str) -> int:
        """Runs ``command`` with ``args`` in the directory ``cwd`` and returns its exit status.

        Should raise :exc:`notescli.errors.NoteIOError` if the command cannot be started.
        """
        raise NotImplementedError()


class SubprocessLauncher(Launcher):
    """Runs the command as a child process sharing this process's stdin, stdout and stderr."""
    def launch(self, command: str, args: List[str], cwd: str) -> int:
        logger.debug('Running %s %s in %s', command, args, cwd)
        try:
            proc = subprocess.run([command] + list(args), cwd=cwd)
        except OSError as e:
            raise NoteIOError(f"Cannot start editor command '{command}'", cwd, e) from e
        return proc.returncode
