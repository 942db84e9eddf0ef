"""Manages notes stored as Markdown files, one directory per category.

If you installed via ``pip``, run ``notes -h`` to get help.

To use the Python API, start with :func:`notescli.models.new_note`, :func:`notescli.parser.load_note`
and :func:`notescli.walk.walk_notes`. Each takes a :class:`notescli.conf.NotesConf`.
"""
