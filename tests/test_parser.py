from datetime import datetime, timedelta, timezone
import pytest
from notescli.errors import ConsistencyError, NoteIOError, ParseError, ValidationError
from notescli.models import new_note
from notescli.parser import load_note

HEADER = '- Category: blog\n- Tags: foo, bar\n- Created: 2018-10-28T17:15:41+09:00\n'


def test_round_trip(fs, conf):
    note = new_note(conf, 'blog', ' foo, bar,, foo ', 'round trip', 'Round Trip')
    note.create()
    loaded = load_note(note.file_path(), conf)
    assert loaded.category == 'blog'
    assert loaded.tags == ['foo', 'bar', 'foo']
    assert loaded.created == note.created
    assert loaded.title == 'Round Trip'
    assert loaded.file == 'round-trip.md'
    assert loaded.file_path() == note.file_path()


def test_round_trip_without_title_or_tags(fs, conf):
    note = new_note(conf, 'diary', '', '2018-10-28')
    note.create()
    loaded = load_note(note.file_path(), conf)
    assert loaded.title == '2018-10-28'
    assert loaded.tags == []
    assert loaded.created == note.created


def test_load(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents='Hello\n=====\n' + HEADER + '\nBody text\n')
    note = load_note('/notes/blog/hello.md', conf)
    assert note.title == 'Hello'
    assert note.category == 'blog'
    assert note.tags == ['foo', 'bar']
    assert note.created == datetime(2018, 10, 28, 17, 15, 41, tzinfo=timezone(timedelta(hours=9)))
    assert note.file == 'hello.md'
    assert note.conf is conf


def test_load_metadata_in_any_order(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents='Hello\n=====\n' + ''.join(reversed(HEADER.splitlines(True))))
    note = load_note('/notes/blog/hello.md', conf)
    assert (note.category, note.tags) == ('blog', ['foo', 'bar'])


def test_load_crlf(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents=('Hello\n=====\n' + HEADER).replace('\n', '\r\n'))
    note = load_note('/notes/blog/hello.md', conf)
    assert note.title == 'Hello'
    assert note.tags == ['foo', 'bar']


def test_load_empty_tags(fs, conf):
    fs.create_file('/notes/blog/hello.md',
                   contents='Hello\n=====\n- Category: blog\n- Tags:\n- Created: 2018-10-28T17:15:41Z\n')
    assert load_note('/notes/blog/hello.md', conf).tags == []


def test_load_title_is_last_line_before_bar(fs, conf):
    # Lines above the title are discarded rather than joined or reported.
    fs.create_file('/notes/blog/hello.md', contents='Preamble\nReal Title\n==\n' + HEADER)
    assert load_note('/notes/blog/hello.md', conf).title == 'Real Title'


def test_load_bar_without_title(fs, conf):
    fs.create_file('/notes/blog/one.md', contents='===\n' + HEADER)
    fs.create_file('/notes/blog/two.md', contents='\n===\n' + HEADER)
    assert load_note('/notes/blog/one.md', conf).title == '(no title)'
    assert load_note('/notes/blog/two.md', conf).title == '(no title)'


def test_load_category_mismatch(fs, conf):
    fs.create_file('/notes/diary/hello.md', contents='Hello\n=====\n' + HEADER)
    with pytest.raises(ConsistencyError) as excinfo:
        load_note('/notes/diary/hello.md', conf)
    assert excinfo.value.path_category == 'diary'
    assert excinfo.value.file_category == 'blog'
    assert excinfo.value.path == '/notes/diary/hello.md'
    assert "in path 'diary' v.s. in file 'blog'" in str(excinfo.value)


def test_load_category_mismatch_with_missing_metadata(fs, conf):
    fs.create_file('/notes/diary/hello.md', contents='Hello\n=====\n- Category: blog\n')
    with pytest.raises(ConsistencyError):
        load_note('/notes/diary/hello.md', conf)


def test_load_missing_metadata(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents='Hello\n=====\n')
    with pytest.raises(ValidationError) as excinfo:
        load_note('/notes/blog/hello.md', conf)
    assert 'Category, Tags, Created' in excinfo.value.message
    assert excinfo.value.path == '/notes/blog/hello.md'


def test_load_missing_created(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents='Hello\n=====\n- Category: blog\n- Tags: a\n\nBody\n')
    with pytest.raises(ValidationError, match=r': Created\.'):
        load_note('/notes/blog/hello.md', conf)


def test_load_no_title_bar(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents='Hello\n' + HEADER)
    fs.create_file('/notes/blog/empty.md', contents='')
    with pytest.raises(ParseError, match='No title found'):
        load_note('/notes/blog/hello.md', conf)
    with pytest.raises(ParseError, match='No title found'):
        load_note('/notes/blog/empty.md', conf)


def test_load_bad_created(fs, conf):
    fs.create_file('/notes/blog/hello.md',
                   contents='Hello\n=====\n- Category: blog\n- Tags:\n- Created: 2018/10/28 17:15\n')
    with pytest.raises(ParseError, match='RFC3339') as excinfo:
        load_note('/notes/blog/hello.md', conf)
    assert isinstance(excinfo.value.cause, ValueError)


def test_load_stops_after_metadata(fs, conf):
    fs.create_file('/notes/blog/hello.md',
                   contents='Hello\n=====\n' + HEADER + '- Category: not-blog\n- Created: garbage\n')
    assert load_note('/notes/blog/hello.md', conf).category == 'blog'


def test_load_invalid_utf8(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents=b'\xff\xfe\xfd\n===\n')
    with pytest.raises(ParseError, match='UTF-8'):
        load_note('/notes/blog/hello.md', conf)


def test_load_missing_file(fs, conf):
    with pytest.raises(NoteIOError) as excinfo:
        load_note('/notes/blog/nope.md', conf)
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_load_lone_carriage_return_is_not_a_line_break(fs, conf):
    fs.create_file('/notes/blog/hello.md', contents=b'Foo\rBar\n=======\n' + HEADER.encode('utf-8'))
    assert load_note('/notes/blog/hello.md', conf).title == 'Foo\rBar'
