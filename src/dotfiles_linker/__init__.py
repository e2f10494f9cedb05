# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
dotfiles-linker - link a dotfiles repository into a home directory

Top-level dotfiles of the repository and everything below its HOME/
directory are symlinked into the home directory; everything below ROOT/
is symlinked into the system root (Linux and macOS). Entries matching
the built-in defaults or the repository's ignore file are skipped.

Basic usage::

    from dotfiles_linker import link_dotfiles

    result = link_dotfiles("/home/user/dotfiles", "/home/user")
    if result.conflicts:
        print("Conflicts:", result.conflicts)

Dry run::

    result = link_dotfiles("./dotfiles", dry_run=True)
    print("Would perform:", result.tasks)

Ignore decisions on their own::

    from dotfiles_linker import PatternSet, should_ignore

    patterns = PatternSet.from_lines([".*", "!.vimrc"])
    should_ignore(".bashrc", ".bashrc", False, patterns)  # True
    should_ignore(".vimrc", ".vimrc", False, patterns)  # False
"""

from dotfiles_linker.linker import link_dotfiles
from dotfiles_linker.ignore import PatternSet, should_ignore, read_ignore_file
from dotfiles_linker.types import (
    Candidate,
    Pattern,
    LinkConfig,
    LinkResult,
    DotfilesError,
    DotfilesCLIError,
    DotfilesProgrammingError,
)
from dotfiles_linker.util import VERSION as __version__

# CLI entry point
from dotfiles_linker.cli import main

__all__ = [
    "link_dotfiles",
    "PatternSet",
    "should_ignore",
    "read_ignore_file",
    "Candidate",
    "Pattern",
    "LinkConfig",
    "LinkResult",
    "DotfilesError",
    "DotfilesCLIError",
    "DotfilesProgrammingError",
    "__version__",
    "main",
]
