# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Utility functions for dotfiles-linker.

This module contains general-purpose utilities used throughout
dotfiles-linker, including verbosity-levelled logging and path helpers.
"""

from __future__ import annotations

import os
import sys

VERSION = "1.0.0"
PROGRAM_NAME = "dotfiles-linker"

# Debug level and test mode are module-level state
_debug_level = 0
_test_mode = False


def set_debug_level(level: int) -> None:
    """Set verbosity level for debug()."""
    global _debug_level
    _debug_level = level


def set_test_mode(on_or_off: bool) -> None:
    """Set test mode on or off."""
    global _test_mode
    _test_mode = bool(on_or_off)


def debug(level: int, *args) -> None:
    """
    Log to STDERR based on debug_level setting.

    Verbosity rules:
        0: errors only
        >= 1: print operations: LINK/UNLINK/MKDIR
        >= 2: print skipped entries (ignored, already linked)
        >= 3: print scan trace: roots and candidates
        >= 4: print which ignore pattern matched
        >= 5: dump ignore pattern sets

    Supports two calling conventions:
        debug(level, msg)
        debug(level, indent_level, msg)
    """
    if len(args) >= 2 and isinstance(args[0], int):
        indent_level = args[0]
        msg = args[1]
    elif len(args) >= 1:
        indent_level = 0
        msg = args[0]
    else:
        return

    if _debug_level >= level:
        indent = "    " * indent_level
        if _test_mode:
            print(f"# {indent}{msg}")
        else:
            print(f"{indent}{msg}", file=sys.stderr)


def normalize_pattern_path(path: str) -> str:
    """Convert a path to the forward-slash form used for pattern matching."""
    return path.replace("\\", "/")


def relative_pattern_path(path: str, start: str) -> str:
    """Return path relative to start, slash-normalized for pattern matching."""
    return normalize_pattern_path(os.path.relpath(path, start))


def path_equals(a: str, b: str) -> bool:
    """
    Compare two paths after making them absolute and normalizing them.

    Empty paths never compare equal. Symlinks are not resolved.
    """
    if not a or not b:
        return False
    return os.path.normpath(os.path.abspath(a)) == os.path.normpath(os.path.abspath(b))


def home_relative(path: str) -> str:
    """Replace $HOME with ~ for readability in messages."""
    home = os.environ.get("HOME", "")
    if home and home != "/":
        if path == home:
            return "~"
        if path.startswith(home + "/"):
            return "~" + path[len(home):]
    return path
