"""
Unit tests for line extraction and username validation.
"""

import pytest

from chatserver.containers import Sequence
from chatserver.chat.lines import get_line, is_valid_username, is_command


class TestGetLine:
    """Tests for get_line()."""

    def test_crlf_line_leaves_rest(self):
        buf = Sequence(b"ab\r\ncd")
        assert get_line(buf) == "ab"
        assert bytes(buf) == b"cd"

    def test_trims_spaces(self):
        buf = Sequence(b"  hi  \n")
        assert get_line(buf) == "hi"
        assert len(buf) == 0

    def test_drops_non_printables(self):
        buf = Sequence(b"h\x01i\x7f!\x1b\n")
        assert get_line(buf) == "hi!"

    def test_tabs_are_dropped_not_trimmed(self):
        buf = Sequence(b"\thi\t there\n")
        assert get_line(buf) == "hi there"

    def test_no_terminator(self):
        buf = Sequence(b"partial")
        assert get_line(buf) is None
        assert bytes(buf) == b"partial"

    def test_bare_cr(self):
        buf = Sequence(b"one\rtwo\r")
        assert get_line(buf) == "one"
        assert get_line(buf) == "two"
        assert get_line(buf) is None

    def test_consumes_run_of_terminators(self):
        buf = Sequence(b"a\r\n\r\n\nb")
        assert get_line(buf) == "a"
        assert bytes(buf) == b"b"

    def test_empty_line(self):
        buf = Sequence(b"\r\n")
        assert get_line(buf) == ""
        assert len(buf) == 0

    def test_empty_buffer(self):
        assert get_line(Sequence()) is None


class TestUsernames:
    """Tests for is_valid_username()."""

    @pytest.mark.parametrize("name", ["al", "alice", "Bob_99", "x" * 16, "__"])
    def test_valid(self, name):
        assert is_valid_username(name)

    @pytest.mark.parametrize("name", ["", "a", "x" * 17, "bad name", "dash-es", "café", "/exit"])
    def test_invalid(self, name):
        assert not is_valid_username(name)


def test_is_command():
    assert is_command("/help")
    assert is_command("/")
    assert not is_command("help")
    assert not is_command("")
