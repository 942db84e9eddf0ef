"""Command-line interface for notescli."""


import argparse
from collections import Counter
import json
import logging
from operator import attrgetter
import os.path
import sys
from typing import List

from terminaltables import AsciiTable

from notescli.conf import NotesConf
from notescli.errors import Error
from notescli.models import Note, format_created, new_note
from notescli.walk import walk_notes

logger = logging.getLogger(__name__)

BODY_PREVIEW_BYTES = 200

SORT_FIELDS = {
    'created': attrgetter('created'),
    'filename': attrgetter('file'),
    'category': attrgetter('category'),
    'title': attrgetter('title'),
}


def _collect(conf: NotesConf, category: str = None) -> List[Note]:
    root = os.path.join(conf.home_path, category) if category else conf.home_path
    notes = []
    walk_notes(root, conf, lambda path, note: notes.append(note))
    return notes


def _print_counts(counts: Counter, heading: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps(dict(counts)))
        return
    data = [(heading, 'Count')] + [(k, counts[k]) for k in sorted(counts)]
    table = AsciiTable(data)
    table.justify_columns[1] = 'right'
    print(table.table)


def _new(args, conf: NotesConf) -> int:
    note = new_note(conf, args.category[0], args.tags or '', args.filename[0],
                    args.title[0] if args.title else '')
    note.create()
    print(note.file_path())
    if args.no_edit or not conf.editor_path:
        return 0
    note.open()
    return 0


def _list(args, conf: NotesConf) -> int:
    notes = _collect(conf, args.category[0] if args.category else None)
    if args.tag:
        notes = [n for n in notes if args.tag[0] in n.tags]
    field = args.sort[0] if args.sort else 'created'
    notes.sort(key=SORT_FIELDS[field], reverse=(field == 'created'))

    def display_path(note: Note) -> str:
        return note.rel_file_path() if args.relative else note.file_path()

    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
    elif args.table:
        data = [('Path', 'Title', 'Tags', 'Created')]
        for note in notes:
            data.append((display_path(note), note.title, '\n'.join(note.tags), format_created(note.created)))
        print(AsciiTable(data).table)
    elif args.full:
        for note in notes:
            print('--------------------')
            print(f'path: {display_path(note)}')
            print(f'title: {note.title}')
            print(f'category: {note.category}')
            print(f'tags: {", ".join(note.tags)}')
            print(f'created: {format_created(note.created)}')
            body = note.read_body(BODY_PREVIEW_BYTES)
            if body:
                print(body.rstrip('\n'))
    elif args.oneline:
        for note in notes:
            tags = f' ({", ".join(note.tags)})' if note.tags else ''
            print(f'{display_path(note)} {note.title}{tags}')
    else:
        for note in notes:
            print(display_path(note))
    return 0


def _categories(args, conf: NotesConf) -> int:
    counts = Counter(n.category for n in _collect(conf))
    _print_counts(counts, 'Category', args.json)
    return 0


def _tags(args, conf: NotesConf) -> int:
    notes = _collect(conf, args.category[0] if args.category else None)
    counts = Counter(t for n in notes for t in n.tags)
    _print_counts(counts, 'Tag', args.json)
    return 0


def _config(args, conf: NotesConf) -> int:
    if args.name == 'home':
        print(conf.home_path)
    elif args.name == 'editor':
        print(conf.editor_path)
    else:
        print(f'home: {conf.home_path}')
        print(f'editor: {conf.editor_path}')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Manage notes stored as Markdown files in per-category directories.')
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging information to stderr.')

    subs = parser.add_subparsers(title='Commands')

    p_new = subs.add_parser(
        'new',
        help='Create a new note in the directory for its category and open it in your editor. '
             'The editor is taken from $NOTES_CLI_EDITOR. This command prints the path of the new file.')
    p_new.add_argument('category', nargs=1, help='Category of the note. Also the name of its directory.')
    p_new.add_argument('filename', nargs=1,
                       help='File name of the note. Spaces are replaced with hyphens and ".md" is appended if '
                            'missing. An existing file is never overwritten.')
    p_new.add_argument('tags', nargs='?', help='Comma-separated list of tags.')
    p_new.add_argument('-t', '--title', nargs=1, help='Title of the note. Defaults to the file name.')
    p_new.add_argument('-n', '--no-edit', action='store_true', help='Do not open the new note in the editor.')
    p_new.set_defaults(func=_new)

    p_list = subs.add_parser('list', aliases=['ls'], help='List notes, newest first by default.')
    p_list.add_argument('-c', '--category', nargs=1, help='Only list notes in this category.')
    p_list.add_argument('-g', '--tag', nargs=1, help='Only list notes with this tag.')
    p_list.add_argument('-r', '--relative', action='store_true',
                        help='Show paths relative to the home directory.')
    p_list.add_argument('-s', '--sort', nargs=1, choices=sorted(SORT_FIELDS),
                        help='Field to sort by. "created" sorts newest first; the others sort ascending.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-f', '--full', action='store_true',
                                help='Show metadata and the beginning of the body of each note.')
    p_list_formats.add_argument('-o', '--oneline', action='store_true',
                                help='Show path, title and tags of each note on one line.')
    p_list_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_list_formats.add_argument('-T', '--table', action='store_true', help='Format output as a table.')
    p_list.set_defaults(func=_list)

    p_cats = subs.add_parser('categories', aliases=['cats'],
                             help='Show each category and the number of notes in it.')
    p_cats.add_argument('-j', '--json', action='store_true',
                        help='Output as JSON. The output is an object whose keys are categories and whose '
                             'values are the number of notes in each.')
    p_cats.set_defaults(func=_categories)

    p_tags = subs.add_parser('tags', help='Show each tag and the number of notes that have it.')
    p_tags.add_argument('-c', '--category', nargs=1, help='Only count notes in this category.')
    p_tags.add_argument('-j', '--json', action='store_true',
                        help='Output as JSON. The output is an object whose keys are tags and whose values '
                             'are the number of notes with that tag.')
    p_tags.set_defaults(func=_tags)

    p_config = subs.add_parser('config', help='Show the resolved configuration.')
    p_config.add_argument('name', nargs='?', choices=['home', 'editor'],
                          help='Print only this value.')
    p_config.set_defaults(func=_config)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(name)s: %(message)s')
    try:
        conf = NotesConf.for_user()
        return args.func(args, conf)
    except Error as e:
        logger.debug('Command failed', exc_info=True)
        print(f'Error: {e}', file=sys.stderr)
        return 1
