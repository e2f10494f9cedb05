# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Type definitions for dotfiles-linker.

This module contains the enums, dataclasses and exceptions that define the
core data structures used throughout dotfiles-linker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DotfilesError(Exception):
    """An operational failure while linking (bad directory, failed symlink, ...)."""

    def __init__(self, message: str, errno: int = 1):
        super().__init__(message)
        self.message = message
        self.errno = errno


class DotfilesCLIError(DotfilesError):
    """Bad invocation or configuration. The message is shown verbatim."""


class DotfilesProgrammingError(DotfilesError):
    """An internal invariant was violated. This is a bug."""


class TaskAction(Enum):
    """Actions that can be performed on filesystem nodes."""

    CREATE = "create"
    REMOVE = "remove"
    SKIP = "skip"


class TaskType(Enum):
    """Types of filesystem nodes that tasks operate on."""

    LINK = "link"
    DIR = "dir"


@dataclass(slots=True)
class Task:
    """
    A deferred filesystem operation.

    Tasks are queued during the planning phase and executed only after
    all potential conflicts have been assessed.
    """

    action: TaskAction
    type: TaskType
    path: str
    source: Optional[str] = None  # For links: the file the symlink points to
    is_dir: bool = False  # For links: whether source is a directory


@dataclass(frozen=True)
class Pattern:
    """
    A single parsed ignore pattern.

    Attributes:
        raw: The trimmed line as it appeared in the ignore source
        negated: True if the line starts with '!'
        body: The line with any '!' prefix removed
        directory_only: True if the body ends with '/'
        anchored: True if the body starts with '/'
        segments: The body split on '/', without the trailing '/' and one
                  leading '/'. '**' is kept as its own segment.
    """

    raw: str
    negated: bool
    body: str
    directory_only: bool
    anchored: bool
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, line: str) -> Pattern:
        raw = line.strip()
        body = raw
        negated = body.startswith("!")
        if negated:
            body = body[1:].strip()

        rest = body
        directory_only = rest.endswith("/")
        if directory_only:
            rest = rest[:-1]

        anchored = rest.startswith("/")
        if anchored:
            rest = rest[1:]

        return cls(
            raw=raw,
            negated=negated,
            body=body,
            directory_only=directory_only,
            anchored=anchored,
            segments=tuple(rest.split("/")),
        )

    @property
    def is_path_pattern(self) -> bool:
        """True if the pattern is matched against the whole relative path."""
        return "/" in self.body or "**" in self.body

    @property
    def has_wildcards(self) -> bool:
        return "*" in self.body or "?" in self.body


@dataclass(frozen=True)
class Candidate:
    """One filesystem entry considered for linking."""

    relative_path: str
    file_name: str
    is_dir: bool = False


@dataclass(frozen=True)
class LinkConfig:
    """
    Configuration of a linking run.

    Attributes:
        repo: The dotfiles repository root
        home: Where repository dotfiles and HOME/ contents are linked
        root: Where ROOT/ contents are linked
        ignore_file: Name of the ignore file at the repository root
        overwrite: Replace existing destinations instead of reporting a conflict
        dry_run: Plan only, don't make filesystem changes
        verbose: Verbosity level (0-5)
        link_root: Link ROOT/ contents; None means only on Linux and macOS
    """

    repo: str = "."
    home: Optional[str] = None
    root: str = "/"
    ignore_file: str = ".dotfiles_ignore"
    overwrite: bool = False
    dry_run: bool = False
    verbose: int = 0
    link_root: Optional[bool] = None


@dataclass
class LinkResult:
    """Outcome of link_dotfiles()."""

    success: bool
    conflicts: list[str] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success
