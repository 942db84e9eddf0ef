"""Configuration shared by the operations that touch the note store.

An instance of :class:`NotesConf` is passed explicitly to everything that needs it; there is no global state.
"""

from __future__ import annotations
from dataclasses import dataclass
import os
import os.path
from pathlib import Path

import toml

from notescli.errors import ConfigError


@dataclass
class NotesConf:
    home_path: str
    """The store root. Each category is a subdirectory of this directory."""

    editor_path: str = ''
    """The command used to open notes for editing. Empty means no editor is configured."""

    @classmethod
    def user_config_path(cls) -> Path:
        """Returns the Path to the user's optional config file, ~/.notes-cli.toml"""
        return Path.home().joinpath('.notes-cli.toml')

    @classmethod
    def for_user(cls) -> NotesConf:
        """Resolves configuration from the environment and the user's config file.

        The home path comes from ``$NOTES_CLI_HOME``, then ``home`` in the config file, then
        ``$XDG_DATA_HOME/notes-cli``, then ``~/.local/share/notes-cli``.

        The editor comes from ``$NOTES_CLI_EDITOR``, then ``editor`` in the config file, then ``$EDITOR``.
        If none is set the editor path is empty.

        The config file is optional. Raises :exc:`notescli.errors.ConfigError` if it exists but cannot be parsed,
        or if ``home`` or ``editor`` in it is not a string.
        """
        filevals = {}
        path = cls.user_config_path()
        if path.is_file():
            try:
                filevals = toml.load(str(path))
            except (toml.TomlDecodeError, OSError) as e:
                raise ConfigError('Cannot load config file', str(path), e) from e
            for key in ('home', 'editor'):
                if key in filevals and not isinstance(filevals[key], str):
                    raise ConfigError(f"Invalid value for '{key}' in config file, expected a string", str(path))

        home = os.environ.get('NOTES_CLI_HOME') or filevals.get('home')
        if not home:
            data_home = os.environ.get('XDG_DATA_HOME') or os.path.join('~', '.local', 'share')
            home = os.path.join(data_home, 'notes-cli')

        editor = os.environ.get('NOTES_CLI_EDITOR') or filevals.get('editor') or os.environ.get('EDITOR', '')

        return cls(home_path=os.path.abspath(os.path.expanduser(home)), editor_path=editor)
