# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Shell-style wildcard matching of file names ('*' and '?')."""

from __future__ import annotations


def is_match(text: str, pattern: str) -> bool:
    """
    Match text against a shell-style wildcard pattern, case-insensitively.

    '*' matches zero or more characters, '?' matches exactly one character,
    any other character matches itself. Any number of wildcards may appear
    anywhere in the pattern.
    """
    if not pattern:
        return not text

    if pattern == "*":
        return True

    return _match_pattern(text.lower(), pattern.lower())


def _match_pattern(text: str, pattern: str) -> bool:
    """
    Dynamic-programming glob match.

    dp[i][j] is True iff the first i characters of text match the first j
    characters of pattern:
        '*':     dp[i][j] = dp[i-1][j] or dp[i][j-1]
        '?':     dp[i][j] = dp[i-1][j-1]
        literal: dp[i][j] = dp[i-1][j-1] and text[i-1] == pattern[j-1]
    """
    n_text = len(text)
    n_pat = len(pattern)

    dp = [[False] * (n_pat + 1) for _ in range(n_text + 1)]
    dp[0][0] = True

    # Only a run of leading '*' can match the empty text
    for j in range(1, n_pat + 1):
        if pattern[j - 1] == "*":
            dp[0][j] = dp[0][j - 1]

    for i in range(1, n_text + 1):
        for j in range(1, n_pat + 1):
            p = pattern[j - 1]
            if p == "*":
                dp[i][j] = dp[i - 1][j] or dp[i][j - 1]
            elif p == "?":
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = dp[i - 1][j - 1] and text[i - 1] == p

    return dp[n_text][n_pat]
