# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Gitignore-style path matching.

Supports the subset of .gitignore syntax used by ignore files:
path segments with '*' and '?' wildcards, '**' for any number of
segments, a trailing '/' for directory-only patterns and a leading '/'
anchor. Negation ('!') is parsed but left to the caller to apply.
"""

from __future__ import annotations

from typing import Sequence

from dotfiles_linker import wildcard
from dotfiles_linker.types import Pattern
from dotfiles_linker.util import normalize_pattern_path


def is_match(path: str, pattern: str | Pattern, is_dir: bool) -> bool:
    """
    Check whether path matches the (non-negated) shape of a gitignore pattern.

    Args:
        path: The path to check, relative to the scanned root.
        pattern: A raw pattern line or an already parsed Pattern.
        is_dir: Whether path names a directory.
    """
    if not isinstance(pattern, Pattern):
        pattern = Pattern.parse(pattern)

    if pattern.directory_only and not is_dir:
        return False

    path = normalize_pattern_path(path)
    if path.startswith("/"):
        path = path[1:]

    return match_segments(pattern.segments, path.split("/"))


def match_segments(segments: Sequence[str], path_segs: Sequence[str]) -> bool:
    """Check whether path segments match pattern segments."""
    return _match_from(segments, path_segs, 0, 0)


def _match_from(segments: Sequence[str], path_segs: Sequence[str], i: int, j: int) -> bool:
    """Match segments[i:] against path_segs[j:].

    Recursion depth is bounded by the number of '**' segments."""
    n_seg = len(segments)
    n_path = len(path_segs)

    while i < n_seg and j < n_path:
        seg = segments[i]

        if seg == "**":
            if i + 1 == n_seg:
                return True

            # Let '**' swallow k - j path segments, for every possible k
            return any(
                _match_from(segments, path_segs, i + 1, k)
                for k in range(j, n_path + 1)
            )

        if not _match_single_segment(seg, path_segs[j]):
            return False

        i += 1
        j += 1

    if i == n_seg and j == n_path:
        return True

    # Path exhausted: only '**' may remain
    if j == n_path:
        return all(seg == "**" for seg in segments[i:])

    return False


def _match_single_segment(segment: str, name: str) -> bool:
    if not segment:
        return not name

    if segment == "*":
        return bool(name)

    return wildcard.is_match(name, segment)
