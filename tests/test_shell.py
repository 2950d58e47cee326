import pytest

from k0sctl.shell import (
    MismatchedQuotesError,
    ShellQuoteError,
    TrailingBackslashError,
    split,
    unquote,
)


def test_unquote_no_quotes():
    assert unquote("foo bar") == "foo bar"


def test_unquote_simple_quotes():
    assert unquote("\"foo\" 'bar'") == "foo bar"


def test_unquote_mid_word_quotes():
    assert unquote("f\"o\"o b'a'r") == "foo bar"


def test_unquote_complex_quotes():
    assert unquote("'\"'\"'foo'\"'\"'") == "\"'foo'\""


def test_unquote_escaped_quotes():
    assert unquote("\\'foo\\' 'bar'") == "'foo' bar"


def test_unquote_backslash_literal_in_single_quotes():
    assert unquote("'a\\b'") == "a\\b"


@pytest.mark.parametrize("text", ["'foo", '"foo', "foo 'bar\" baz"])
def test_unquote_mismatched_quotes(text):
    with pytest.raises(MismatchedQuotesError):
        unquote(text)


def test_unquote_trailing_backslash():
    with pytest.raises(TrailingBackslashError):
        unquote("foo\\")


def test_errors_share_base_class():
    with pytest.raises(ShellQuoteError):
        unquote("'")
    with pytest.raises(ValueError):
        split("\\")


def test_split_plain_words():
    assert split("foo bar baz") == ["foo", "bar", "baz"]


def test_split_respects_quotes():
    assert split("echo \"hello world\" 'a b'") == ["echo", "hello world", "a b"]


def test_split_escaped_space():
    assert split("foo\\ bar baz") == ["foo bar", "baz"]


def test_split_consecutive_spaces_yield_empty_segment():
    assert split("a  b") == ["a", "", "b"]


def test_split_trailing_space_drops_last_empty():
    assert split("a b ") == ["a", "b"]


def test_split_empty_input():
    assert split("") == []


def test_split_mismatched_quotes():
    with pytest.raises(MismatchedQuotesError):
        split("foo 'bar")


def test_split_trailing_backslash():
    with pytest.raises(TrailingBackslashError):
        split("foo bar\\")