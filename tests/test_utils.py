from pathlib import Path

from worktodo.utils import (
    discard_file,
    is_blank,
    split,
    split_respecting_quotes,
    strip_line_ending,
)


def test_split_basic():
    assert split("a=b", "=") == ["a", "b"]
    assert split("", ",") == []


def test_split_respecting_quotes_keeps_quoted_commas():
    assert split_respecting_quotes('1,2,89,-1,"3,5,7"') == ["1", "2", "89", "-1", '"3,5,7"']


def test_split_respecting_quotes_trailing_delimiter_dropped():
    assert split_respecting_quotes("a,b,") == ["a", "b"]


def test_split_respecting_quotes_keeps_interior_and_leading_empty():
    assert split_respecting_quotes(",a,,b") == ["", "a", "", "b"]


def test_split_respecting_quotes_unterminated_quote():
    """An unterminated quote swallows the rest of the text."""

    assert split_respecting_quotes('1,"2,3') == ["1", '"2,3']


def test_strip_line_ending():
    assert strip_line_ending("Test=1,2,3\r\n") == "Test=1,2,3"
    assert strip_line_ending("Test=1,2,3  \n") == "Test=1,2,3  "


def test_is_blank():
    assert is_blank("")
    assert is_blank(" \t")
    assert not is_blank(" x ")


def test_discard_file(tmp_path: Path):
    target = tmp_path / "gone.txt"
    target.write_text("x", encoding="utf-8")
    discard_file(target)
    assert not target.exists()
    # Missing file is not an error
    discard_file(target)
