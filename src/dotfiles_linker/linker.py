# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Core linking operations.

This module provides the public link_dotfiles() API, as well as the
internal _Linker class that scans the repository, plans symlink tasks
and executes them.

Repository layout::

    repo/.bashrc           -> $HOME/.bashrc       (top-level dotfiles only)
    repo/HOME/.config/foo  -> $HOME/.config/foo   (recursive)
    repo/ROOT/etc/foo      -> /etc/foo            (recursive, Linux/macOS)
"""

from __future__ import annotations

import dataclasses
import os
import sys
from typing import Iterator

from dotfiles_linker.ignore import PatternSet, read_ignore_file
from dotfiles_linker.types import (
    Candidate,
    DotfilesError,
    DotfilesProgrammingError,
    LinkConfig,
    LinkResult,
    Task,
    TaskAction,
    TaskType,
)
from dotfiles_linker.util import (
    debug,
    home_relative,
    path_equals,
    relative_pattern_path,
    set_debug_level,
)

HOME_DIR_NAME = "HOME"
ROOT_DIR_NAME = "ROOT"


# =============================================================================
# Public API
# =============================================================================


def link_dotfiles(
    repo: str | None = None,
    home: str | None = None,
    *,
    config: LinkConfig | None = None,
    **kwargs,
) -> LinkResult:
    """Link a dotfiles repository into the home directory (and system root).

    Args:
        repo: The dotfiles repository (overrides config.repo)
        home: The home directory (overrides config.home, default $HOME)
        config: Optional LinkConfig for configuration
        **kwargs: Override config fields (overwrite, dry_run, root, etc.)

    Returns:
        LinkResult with success status, conflicts (if any), and tasks planned
        or performed
    """
    if repo is not None:
        kwargs["repo"] = repo
    if home is not None:
        kwargs["home"] = home
    cfg = _resolve_home(dataclasses.replace(config or LinkConfig(), **kwargs))

    linker = _Linker(cfg)
    linker.plan()
    return linker.execute()


def _resolve_home(config: LinkConfig) -> LinkConfig:
    """Default the home directory to $HOME."""
    if config.home is not None:
        return config

    home = os.environ.get("HOME") or os.path.expanduser("~")
    return dataclasses.replace(config, home=home)


def _should_link_root(config: LinkConfig) -> bool:
    if config.link_root is not None:
        return config.link_root
    return sys.platform.startswith(("linux", "darwin"))


# =============================================================================
# Internal Linker class
# =============================================================================


class _Linker:
    """
    Internal class that manages state during link planning and execution.

    Used by link_dotfiles() and by the CLI.
    """

    def __init__(self, config: LinkConfig):
        if config.home is None:
            raise DotfilesProgrammingError("_Linker created without a home directory")

        self.c = config
        set_debug_level(config.verbose)

        if not os.path.isdir(config.repo):
            raise DotfilesError(f"Repository directory not found: {config.repo}", errno=2)

        self.repo = os.path.abspath(config.repo)
        self.home = os.path.abspath(config.home)
        self.root = os.path.abspath(config.root)
        debug(2, 0, f"repository is {home_relative(self.repo)}")
        debug(2, 0, f"home is {home_relative(self.home)}")

        self.patterns = self._load_patterns()

        # State
        self.conflicts: list[str] = []
        self.skipped: list[str] = []
        self.tasks: list[Task] = []
        self.dir_task_for: dict[str, Task] = {}
        self.link_task_for: dict[str, Task] = {}
        # destination -> source, including destinations already linked
        self.claimed: dict[str, str] = {}

    def _load_patterns(self) -> PatternSet:
        ignore_path = os.path.join(self.repo, self.c.ignore_file)
        try:
            return read_ignore_file(ignore_path)
        except OSError as e:
            raise DotfilesError(
                f"Could not read ignore file {ignore_path} ({e.strerror})"
            ) from e
        except UnicodeDecodeError as e:
            raise DotfilesError(
                f"Could not read ignore file {ignore_path} (not valid UTF-8)"
            ) from e

    def plan(self) -> None:
        """Scan every source tree and plan the links."""
        debug(2, 0, "Planning links...")

        for src, rel in self._repo_root_sources():
            self._plan_link(src, os.path.join(self.home, rel), rel)

        home_src = os.path.join(self.repo, HOME_DIR_NAME)
        if os.path.isdir(home_src):
            for src, rel in self._tree_sources(home_src):
                self._plan_link(src, os.path.join(self.home, rel), rel)
        else:
            debug(3, 0, f"No {HOME_DIR_NAME} directory in repository")

        root_src = os.path.join(self.repo, ROOT_DIR_NAME)
        if not _should_link_root(self.c):
            debug(3, 0, f"Not linking {ROOT_DIR_NAME} directory on {sys.platform}")
        elif os.path.isdir(root_src):
            for src, rel in self._tree_sources(root_src):
                self._plan_link(src, os.path.join(self.root, rel), rel)
        else:
            debug(3, 0, f"No {ROOT_DIR_NAME} directory in repository")

        debug(2, 0, "Planning links... done")

    def execute(self) -> LinkResult:
        """Execute planned tasks and return result.

        Returns LinkResult with success=False if there were conflicts.
        In dry-run mode the planned tasks are returned without executing them.
        """
        if self.conflicts:
            return LinkResult(
                success=False,
                conflicts=list(self.conflicts),
                skipped=list(self.skipped),
            )

        if not self.c.dry_run:
            self.process_tasks()

        return LinkResult(
            success=True,
            tasks=[t for t in self.tasks if t.action != TaskAction.SKIP],
            skipped=list(self.skipped),
        )

    def process_tasks(self) -> None:
        """Process each task in the tasks list."""
        debug(2, 0, "Processing tasks...")

        self.tasks = [t for t in self.tasks if t.action != TaskAction.SKIP]
        for task in self.tasks:
            self._process_task(task)

        debug(2, 0, "Processing tasks... done")

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    def _repo_root_sources(self) -> Iterator[tuple[str, str]]:
        """Yield (source, relative path) for top-level dotfiles of the repo."""
        debug(3, 0, f"Scanning {home_relative(self.repo)} for dotfiles")
        try:
            listing = os.listdir(self.repo)
        except OSError as e:
            raise DotfilesError(
                f"cannot read directory: {self.repo} ({e.strerror})", errno=2
            ) from e

        for node in sorted(listing):
            src = os.path.join(self.repo, node)
            if not node.startswith(".") or not os.path.isfile(src):
                continue
            if node == self.c.ignore_file:
                debug(4, 1, f"Skipping ignore file {node}")
                continue
            if self._should_ignore(Candidate(node, node)):
                continue
            yield src, node

    def _tree_sources(self, top: str) -> Iterator[tuple[str, str]]:
        """Yield (source, relative path) for every file below top.

        Ignored directories are pruned, so nothing below them is linked.
        """
        debug(3, 0, f"Scanning {home_relative(top)} recursively")

        def on_error(e: OSError) -> None:
            raise DotfilesError(
                f"cannot read directory: {e.filename} ({e.strerror})", errno=2
            ) from e

        for dirpath, dirnames, filenames in os.walk(top, onerror=on_error):
            kept = []
            for name in sorted(dirnames):
                rel_dir = relative_pattern_path(os.path.join(dirpath, name), top)
                if not self._should_ignore(Candidate(rel_dir, name, is_dir=True)):
                    kept.append(name)
            dirnames[:] = kept
            for name in sorted(filenames):
                src = os.path.join(dirpath, name)
                rel = relative_pattern_path(src, top)
                if self._should_ignore(Candidate(rel, name)):
                    continue
                yield src, rel

    def _should_ignore(self, candidate: Candidate) -> bool:
        debug(3, 1, f"Candidate {candidate.relative_path}")
        if self.patterns.should_ignore(candidate):
            debug(2, 1, f"Ignoring {candidate.relative_path}")
            self.skipped.append(candidate.relative_path)
            return True
        return False

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def _plan_link(self, source: str, destination: str, rel: str) -> None:
        """Plan a symlink destination -> source."""
        debug(3, 0, f"Planning {rel}: {home_relative(destination)} => {source}")

        claimed_by = self.claimed.get(destination)
        if claimed_by is not None:
            self._record_conflict(
                f"'{destination}' would be linked to both {claimed_by} and {source}"
            )
            return
        self.claimed[destination] = source

        if os.path.lexists(destination):
            if os.path.islink(destination):
                current = os.readlink(destination)
                if not os.path.isabs(current):
                    current = os.path.join(os.path.dirname(destination), current)
                if path_equals(current, source):
                    debug(2, 1, f"--- Skipping {home_relative(destination)} as it already points to {source}")
                    return

            if not self.c.overwrite:
                self._record_conflict(
                    f"'{destination}' already exists; use --force=y to overwrite."
                )
                return

            if os.path.isdir(destination) and not os.path.islink(destination):
                self._record_conflict(
                    f"'{destination}' is a directory; refusing to remove it."
                )
                return

            self._do_unlink(destination)
        else:
            self._ensure_parent(destination)

        self._do_link(source, destination)

    def _ensure_parent(self, path: str) -> None:
        """Plan creation of the missing ancestors of path."""
        missing = []
        parent = os.path.dirname(path)
        while parent and not os.path.isdir(parent) and parent not in self.dir_task_for:
            if os.path.lexists(parent):
                self._record_conflict(
                    f"'{parent}' exists but is not a directory; cannot link below it."
                )
                return
            missing.append(parent)
            next_parent = os.path.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

        for dir_path in reversed(missing):
            self._do_mkdir(dir_path)

    def _record_conflict(self, message: str) -> None:
        debug(2, 0, f"CONFLICT: {message}")
        self.conflicts.append(message)

    def _do_link(self, source: str, destination: str) -> None:
        """Wrap 'link' operation for later processing."""
        task_ref = self.link_task_for.get(destination)
        if task_ref is not None and task_ref.action == TaskAction.CREATE:
            raise DotfilesProgrammingError(
                f"link {destination} => {source} clashes with planned link to {task_ref.source}"
            )

        if destination in self.dir_task_for:
            raise DotfilesProgrammingError(
                f"link {destination} => {source} clashes with planned mkdir"
            )

        debug(1, 0, f"LINK: {home_relative(destination)} => {source}")
        task = Task(
            action=TaskAction.CREATE,
            type=TaskType.LINK,
            path=destination,
            source=source,
            is_dir=os.path.isdir(source),
        )
        self.tasks.append(task)
        self.link_task_for[destination] = task

    def _do_unlink(self, file_path: str) -> None:
        """Wrap 'unlink' operation for later processing."""
        if file_path in self.link_task_for:
            raise DotfilesProgrammingError(
                f"unlink of {file_path} clashes with a planned operation"
            )

        debug(1, 0, f"UNLINK: {home_relative(file_path)}")
        task = Task(
            action=TaskAction.REMOVE,
            type=TaskType.LINK,
            path=file_path,
        )
        self.tasks.append(task)
        self.link_task_for[file_path] = task

    def _do_mkdir(self, dir_path: str) -> None:
        """Wrap 'mkdir' operation for later processing."""
        if dir_path in self.link_task_for:
            task_ref = self.link_task_for[dir_path]
            raise DotfilesProgrammingError(
                f"mkdir clashes with planned operation: {task_ref.action.value} link {task_ref.path} => {task_ref.source}"
            )

        if dir_path in self.dir_task_for:
            return

        debug(1, 0, f"MKDIR: {home_relative(dir_path)}")
        task = Task(
            action=TaskAction.CREATE,
            type=TaskType.DIR,
            path=dir_path,
        )
        self.tasks.append(task)
        self.dir_task_for[dir_path] = task

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _process_task(self, task: Task) -> None:
        """Process a single task."""
        match (task.action, task.type):
            case (TaskAction.CREATE, TaskType.DIR):
                try:
                    os.mkdir(task.path, 0o777)
                except FileExistsError:
                    if not os.path.isdir(task.path):
                        raise DotfilesError(f"Could not create directory: {task.path} (not a directory)")
                except OSError as e:
                    raise DotfilesError(
                        f"Could not create directory: {task.path} ({e.strerror})"
                    ) from e

            case (TaskAction.REMOVE, TaskType.LINK):
                try:
                    os.unlink(task.path)
                except OSError as e:
                    raise DotfilesError(
                        f"Could not remove {task.path} ({e.strerror})"
                    ) from e

            case (TaskAction.CREATE, TaskType.LINK):
                try:
                    os.symlink(task.source, task.path, target_is_directory=task.is_dir)
                except OSError as e:
                    raise DotfilesError(
                        f"Could not create symlink {task.path} => {task.source} ({e.strerror})"
                    ) from e

            case _:
                raise DotfilesProgrammingError(
                    f"bad task action: {task.action.value} {task.type.value}"
                )
