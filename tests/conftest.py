import os.path
import pytest
from notescli.conf import NotesConf
from notescli.editor import Launcher


class FakeLauncher(Launcher):
    def __init__(self, status=0):
        self.status = status
        self.calls = []

    def launch(self, command, args, cwd):
        self.calls.append((command, args, cwd))
        return self.status


@pytest.fixture
def conf():
    return NotesConf(home_path='/notes', editor_path='vim')


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def write_note(fs):
    """Returns a function that writes a well-formed note file into the fake filesystem.

    The category defaults to the name of the directory the note is written in.
    """
    def write(path, category=None, title='A Note', tags='', created='2018-10-28T17:15:41+09:00', body=''):
        if category is None:
            category = os.path.basename(os.path.dirname(path))
        fs.create_file(path, contents=f'{title}\n{"=" * len(title)}\n'
                                      f'- Category: {category}\n'
                                      f'- Tags: {tags}\n'
                                      f'- Created: {created}\n\n'
                                      f'{body}')
        return path
    return write
