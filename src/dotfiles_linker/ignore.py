# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Ignore decisions: which repository entries must not be linked.

A verdict combines three layers, evaluated in a fixed order:

1. Built-in default names (OS and VCS artifacts), compared case-insensitively.
2. Built-in default wildcards (editor backups, swap and temp files).
3. User patterns from the ignore file. Every positive pattern is tried
   first; afterwards every '!' pattern is tried and, if one matches,
   re-includes the entry.

Defaults can't be negated. User patterns are matched in one of three ways,
by shape: exact file name, gitignore-style path (contains '/' or '**'),
or file-name wildcard (contains '*' or '?').
"""

from __future__ import annotations

import functools
from typing import Iterable, Iterator

from dotfiles_linker import gitignore, wildcard
from dotfiles_linker.types import Candidate, Pattern
from dotfiles_linker.util import debug

DEFAULT_IGNORE_NAMES = frozenset(
    name.lower()
    for name in (
        # macOS
        ".DS_Store",
        "._.DS_Store",
        # Windows
        "Thumbs.db",
        "Desktop.ini",
        "ehthumbs.db",
        "ehthumbs_vista.db",
        # Version control
        ".git",
        ".svn",
        ".hg",
    )
)

DEFAULT_IGNORE_WILDCARDS = (
    "*~",  # editor backup files
    ".*.swp",  # vim swap files
    ".*.swo",
    "*.bak",
    "*.tmp",
)


class PatternSet:
    """
    An ordered, read-only collection of user ignore patterns.

    Lines are trimmed, blank lines are dropped and duplicates are removed
    case-insensitively, keeping the first occurrence in file order.
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: Iterable[Pattern] = ()):
        self._patterns = tuple(patterns)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> PatternSet:
        seen: set[str] = set()
        patterns = []
        for line in lines:
            line = line.strip()
            if not line:
                continue
            key = line.lower()
            if key in seen:
                continue
            seen.add(key)
            patterns.append(Pattern.parse(line))
        return cls(patterns)

    @property
    def positive(self) -> tuple[Pattern, ...]:
        return tuple(p for p in self._patterns if not p.negated)

    @property
    def negated(self) -> tuple[Pattern, ...]:
        return tuple(p for p in self._patterns if p.negated)

    def should_ignore(self, candidate: Candidate) -> bool:
        """Return True if candidate must not be linked."""
        return should_ignore(
            candidate.relative_path, candidate.file_name, candidate.is_dir, self
        )

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PatternSet):
            return NotImplemented
        return self._patterns == other._patterns

    def __hash__(self) -> int:
        return hash(self._patterns)

    def __repr__(self) -> str:
        return f"PatternSet({[p.raw for p in self._patterns]!r})"


EMPTY_PATTERN_SET = PatternSet()


def is_default_ignored(file_name: str) -> bool:
    """Check file_name against the built-in defaults only."""
    if file_name.lower() in DEFAULT_IGNORE_NAMES:
        debug(4, 1, f"Ignoring {file_name}: built-in default name")
        return True

    for pat in DEFAULT_IGNORE_WILDCARDS:
        if wildcard.is_match(file_name, pat):
            debug(4, 1, f"Ignoring {file_name}: built-in default pattern {pat}")
            return True

    return False


def pattern_matches(
    pattern: Pattern, relative_path: str, file_name: str, is_dir: bool
) -> bool:
    """
    Test one pattern (ignoring its negation flag) against an entry.

    Tried in order: exact file name, gitignore-style path match,
    file-name wildcard match.
    """
    body = pattern.body
    if not body:
        return False

    if body.lower() == file_name.lower():
        return True

    if pattern.is_path_pattern and gitignore.is_match(relative_path, pattern, is_dir):
        return True

    if pattern.has_wildcards and wildcard.is_match(file_name, body):
        return True

    return False


def should_ignore(
    relative_path: str,
    file_name: str,
    is_dir: bool,
    user_patterns: PatternSet | Iterable[str] | None = None,
) -> bool:
    """
    Decide whether an entry must be skipped.

    Args:
        relative_path: Slash-separated path relative to the scanned root.
        file_name: Base name of the entry.
        is_dir: Whether the entry is a directory.
        user_patterns: A PatternSet, or raw ignore-file lines.

    Returns:
        True to ignore the entry, False to link it.
    """
    if is_default_ignored(file_name):
        return True

    if user_patterns is None:
        patterns = EMPTY_PATTERN_SET
    elif isinstance(user_patterns, PatternSet):
        patterns = user_patterns
    else:
        patterns = PatternSet.from_lines(user_patterns)

    ignored = False
    for pat in patterns.positive:
        if pattern_matches(pat, relative_path, file_name, is_dir):
            debug(4, 1, f"Ignoring {relative_path}: matches {pat.raw}")
            ignored = True
            break

    if ignored:
        for pat in patterns.negated:
            if pattern_matches(pat, relative_path, file_name, is_dir):
                debug(4, 1, f"Not ignoring {relative_path}: matches {pat.raw}")
                ignored = False
                break

    return ignored


@functools.lru_cache(maxsize=None)
def read_ignore_file(file_path: str) -> PatternSet:
    """Read and parse an ignore file (cached). A missing file yields no patterns."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            patterns = PatternSet.from_lines(f)
    except FileNotFoundError:
        debug(4, 1, f"{file_path} didn't exist")
        return EMPTY_PATTERN_SET
    except IsADirectoryError:
        debug(4, 1, f"{file_path} is a directory, not an ignore file")
        return EMPTY_PATTERN_SET

    debug(5, 1, f"Using ignore file {file_path}: {[p.raw for p in patterns]}")
    return patterns
