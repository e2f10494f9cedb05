"""
Tests for shell-style wildcard matching of file names.
"""

import pytest

from dotfiles_linker import wildcard


class TestWildcardLiterals:
    """Patterns without wildcards."""

    def test_exact_match(self):
        """A literal pattern matches the same text."""
        assert wildcard.is_match("file.txt", "file.txt")

    def test_mismatch(self):
        """A literal pattern doesn't match different text."""
        assert not wildcard.is_match("file.txt", "other.txt")

    def test_longer_text_does_not_match(self):
        """Text with extra trailing characters doesn't match."""
        assert not wildcard.is_match("file.txtx", "file.txt")

    def test_case_insensitive(self):
        """Comparison ignores case on both sides."""
        assert wildcard.is_match("AbCdEf", "abc*ef")
        assert wildcard.is_match("readme.md", "README.MD")


class TestWildcardStar:
    """The '*' wildcard."""

    @pytest.mark.parametrize(
        "text, pattern",
        [
            ("test.backup", "*.backup"),
            ("tempfile.txt", "temp*"),
            ("before_after.txt", "before*after.txt"),
            ("abcdefg", "a*c*g"),
            ("start_middle_end.txt", "start*mid*le*end.txt"),
            ("app-debug.log", "app*.log"),
            ("app.log", "app*.log"),
        ],
    )
    def test_matches(self, text, pattern):
        assert wildcard.is_match(text, pattern)

    @pytest.mark.parametrize(
        "text, pattern",
        [
            ("start_wrong_end.txt", "start*middle*end.txt"),
            ("log.txt", "*.log"),
            ("app.log", "log*"),
            ("application.txt", "app*.log"),
        ],
    )
    def test_mismatches(self, text, pattern):
        assert not wildcard.is_match(text, pattern)

    def test_lone_star_matches_anything(self):
        """'*' matches any text, including the empty string."""
        assert wildcard.is_match("anything.txt", "*")
        assert wildcard.is_match("", "*")

    def test_leading_stars_match_empty_text(self):
        """A run of '*' matches the empty text."""
        assert wildcard.is_match("", "***")

    def test_many_consecutive_stars(self):
        """Many consecutive wildcards still match correctly."""
        pattern = "a" + "*" * 30 + "b"
        assert wildcard.is_match("a" * 40 + "b", pattern)
        assert not wildcard.is_match("a" * 40 + "c", pattern)


class TestWildcardQuestionMark:
    """The '?' wildcard."""

    def test_matches_single_character(self):
        assert wildcard.is_match("file1.txt", "file?.txt")

    def test_does_not_match_two_characters(self):
        assert not wildcard.is_match("file12.txt", "file?.txt")

    def test_does_not_match_zero_characters(self):
        assert not wildcard.is_match("file.txt", "file?.txt")


class TestWildcardEmpty:
    """Empty text and empty patterns."""

    def test_empty_pattern_matches_only_empty_text(self):
        assert wildcard.is_match("", "")
        assert not wildcard.is_match("file.txt", "")

    def test_empty_text_against_non_star_pattern(self):
        assert not wildcard.is_match("", "file*")
        assert not wildcard.is_match("", "?")
