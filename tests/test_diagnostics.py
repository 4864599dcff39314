import io

import pytest

from ncc16.diagnostics import Diagnostics, TooManyErrors

SOURCE = "int x;\nint yz = 3;\nreturn;"


def make(**kwargs):
    stream = io.StringIO()
    kwargs.setdefault("filename", "src/f.c")
    kwargs.setdefault("source", SOURCE)
    return Diagnostics(stream=stream, **kwargs), stream


def test_short_filename_strips_both_separators():
    d = Diagnostics(filename="dir/sub\\file.c", stream=io.StringIO())
    assert d.short_filename() == "file.c"


def test_short_filename_unknown_without_name():
    assert Diagnostics(stream=io.StringIO()).short_filename() == "unknown"


def test_location_on_second_line():
    d, _ = make()
    assert d.location(SOURCE.index("yz")) == (2, 5)


def test_location_of_line_starts_is_first_column():
    d, _ = make()
    for offset in (0, SOURCE.index("int yz"), SOURCE.index("return")):
        assert d.location(offset)[1] == 1


def test_snippet_shows_line_and_caret_under_position():
    d, _ = make()
    pos = SOURCE.index("yz")
    text_line, caret_line = d.snippet(pos).splitlines()
    assert text_line.endswith("| int yz = 3;")
    _, column = d.location(pos)
    assert caret_line.index("^~~~") - len("      | ") == column - 1


def test_error_writes_prefix_location_and_snippet():
    d, stream = make()
    pos = SOURCE.index("yz")
    d.error(pos, "bad thing")
    line, column = d.location(pos)
    out = stream.getvalue()
    assert out.startswith("\033[1;31merror:\033[0m ")
    assert f"src/f.c:{line}:{column}: bad thing\n" in out
    assert out.endswith(d.snippet(pos))
    assert d.error_count == 1


def test_error_limit_raises():
    d, stream = make(max_errors=2)
    d.error(0, "first")
    with pytest.raises(TooManyErrors):
        d.error(0, "second")
    assert stream.getvalue().endswith("Too many errors, stopping compilation.\n")
    assert d.error_count == d.max_errors


def test_warning_counts_separately():
    d, stream = make()
    d.warning(0, "careful")
    d.warning(0, "again")
    assert d.warning_count == 2
    assert d.error_count == 0
    assert stream.getvalue().count("\033[1;33mwarning:\033[0m ") == 2


def test_warning_without_filename_has_no_location():
    d, stream = make(filename=None, source=None)
    d.warning(3, "careful")
    assert stream.getvalue() == "\033[1;33mwarning:\033[0m careful\n"


def test_note_silent_when_quiet():
    d, stream = make(quiet=True)
    d.note(0, "info")
    assert stream.getvalue() == ""


def test_note_with_negative_position_skips_location_and_snippet():
    d, stream = make()
    d.note(-1, "info")
    assert stream.getvalue() == "\033[1;34mnote:\033[0m info\n"