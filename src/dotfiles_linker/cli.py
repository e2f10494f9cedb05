# Dotfiles-Linker - link a dotfiles repository into a home directory
# Copyright (C) 2025 Dotfiles-Linker contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Command-line interface for dotfiles-linker.

This module contains the CLI functions including argument parsing,
configuration file handling, and the main entry point.
"""

from __future__ import annotations

import os
import re
import shlex
import sys
import traceback
from typing import Sequence

from dotfiles_linker.linker import _Linker
from dotfiles_linker.types import (
    DotfilesCLIError,
    DotfilesError,
    DotfilesProgrammingError,
    LinkConfig,
    Task,
    TaskAction,
    TaskType,
)
from dotfiles_linker.util import PROGRAM_NAME, VERSION

RC_FILE = ".dotfileslinkerrc"
DEFAULT_IGNORE_FILE = ".dotfiles_ignore"

VALUE_OPTIONS = {
    "-d": "--dir",
    "--dir": "--dir",
    "-t": "--target",
    "--target": "--target",
    "--root": "--root",
    "--ignore-file": "--ignore-file",
}


def main() -> None:
    """Main entry point for the dotfiles-linker command."""
    try:
        _main(sys.argv[1:])
    except DotfilesCLIError as e:
        print(e.message, file=sys.stderr)
        sys.exit(e.errno)
    except DotfilesError as e:
        kind = "INTERNAL ERROR" if isinstance(e, DotfilesProgrammingError) else "ERROR"
        print(f"{PROGRAM_NAME}: {kind}: {e.message}", file=sys.stderr)
        if isinstance(e, DotfilesProgrammingError):
            traceback.print_exc()
        sys.exit(e.errno)


def _main(args: Sequence[str]) -> None:
    """Main implementation (can raise DotfilesError)."""
    options = process_options(args)

    config = LinkConfig(
        repo=options["dir"],
        home=options["target"],
        root=options.get("root", "/"),
        ignore_file=options.get("ignore-file", DEFAULT_IGNORE_FILE),
        overwrite=options.get("force", False),
        dry_run=options.get("dry-run", False),
        verbose=options.get("verbose", 0),
        link_root=options.get("link-root"),
    )

    linker = _Linker(config)
    linker.plan()

    if linker.conflicts:
        print("WARNING! linking would cause conflicts:", file=sys.stderr)
        for message in linker.conflicts:
            print(f"  * {message}", file=sys.stderr)
        print("All operations aborted.", file=sys.stderr)
        sys.exit(1)

    if config.dry_run:
        print("DRY RUN MODE: No files will be actually linked", file=sys.stderr)
        for task in linker.execute().tasks:
            print(f"[DRY-RUN] {describe_task(task)}")
        print("DRY RUN COMPLETED: No files were actually linked", file=sys.stderr)
        return

    linker.process_tasks()
    print("All operations completed.", file=sys.stderr)


def describe_task(task: Task) -> str:
    """Describe what a task would do, for dry-run output."""
    match (task.action, task.type):
        case (TaskAction.CREATE, TaskType.DIR):
            return f"Would create directory {task.path}"
        case (TaskAction.REMOVE, TaskType.LINK):
            return f"Would delete {task.path}"
        case (TaskAction.CREATE, TaskType.LINK):
            return f"Would link {task.path} => {task.source}"
        case _:
            raise DotfilesProgrammingError(f"bad task action: {task.action.value}")


def process_options(args: Sequence[str]) -> dict:
    """Parse and process environment, rc file and command line options."""
    cli_options = parse_cli_options(args)
    rc_options = get_config_file_options()

    options = dict(rc_options)
    options.update(cli_options)

    sanitize_path_options(options)
    return options


def parse_cli_options(args: Sequence[str]) -> dict:
    """Parse command line options."""
    options: dict = {}

    i = 0
    while i < len(args):
        arg = args[i]

        # Options with values
        if arg in ("-d", "--dir") and i + 1 < len(args):
            i += 1
            options["dir"] = args[i]
        elif arg.startswith("--dir="):
            options["dir"] = arg.removeprefix("--dir=")
        elif arg.startswith("-d") and len(arg) > 2:
            options["dir"] = arg[2:]

        elif arg in ("-t", "--target") and i + 1 < len(args):
            i += 1
            options["target"] = args[i]
        elif arg.startswith("--target="):
            options["target"] = arg.removeprefix("--target=")
        elif arg.startswith("-t") and len(arg) > 2:
            options["target"] = arg[2:]

        elif arg == "--root" and i + 1 < len(args):
            i += 1
            options["root"] = args[i]
        elif arg.startswith("--root="):
            options["root"] = arg.removeprefix("--root=")

        elif arg == "--ignore-file" and i + 1 < len(args):
            i += 1
            options["ignore-file"] = args[i]
        elif arg.startswith("--ignore-file="):
            options["ignore-file"] = arg.removeprefix("--ignore-file=")

        # Value options given as the last argument
        elif arg in VALUE_OPTIONS:
            show_usage_and_exit(f"{VALUE_OPTIONS[arg]} requires a value")

        # --force=y / --force=n
        elif arg.startswith("--force="):
            value = arg.removeprefix("--force=").lower()
            if value in ("y", "yes"):
                options["force"] = True
            elif value in ("n", "no"):
                options["force"] = False
            else:
                show_usage_and_exit(f"Invalid value for --force: {value}")

        # Verbose option with optional value
        elif arg in ("-v", "--verbose"):
            options["verbose"] = options.get("verbose", 0) + 1
        elif arg.startswith("--verbose="):
            try:
                options["verbose"] = int(arg.removeprefix("--verbose="))
            except ValueError:
                options["verbose"] = 1

        # Boolean flags
        elif arg in ("-f", "--force"):
            options["force"] = True
        elif arg in ("-n", "--dry-run", "--simulate"):
            options["dry-run"] = True
        elif arg == "--with-root":
            options["link-root"] = True
        elif arg == "--no-root":
            options["link-root"] = False

        # Help and version
        elif arg in ("-h", "--help"):
            show_usage_and_exit()
        elif arg in ("-V", "--version"):
            show_version_and_exit()

        elif arg.startswith("--"):
            opt_name = arg[2:].split("=", 1)[0]
            show_usage_and_exit(f"Unknown option: {opt_name}")

        elif arg.startswith("-") and len(arg) > 1:
            _parse_bundled_options(arg[1:], options)

        else:
            show_usage_and_exit(f"Unexpected argument: {arg}")

        i += 1

    return options


def _parse_bundled_options(chars: str, options: dict) -> None:
    """Parse bundled short flags like -nvf."""
    for char in chars:
        match char:
            case "n":
                options["dry-run"] = True
            case "f":
                options["force"] = True
            case "v":
                options["verbose"] = options.get("verbose", 0) + 1
            case "h":
                show_usage_and_exit()
            case "V":
                show_version_and_exit()
            case _:
                show_usage_and_exit(f"Unknown option: {char}")


def sanitize_path_options(options: dict) -> None:
    """Validate and set defaults for the directory options."""
    if "dir" not in options:
        repo_env = os.environ.get("DOTFILES_DIR")
        options["dir"] = repo_env if repo_env else os.getcwd()

    if "ignore-file" not in options and os.environ.get("DOTFILES_IGNORE_FILE"):
        options["ignore-file"] = os.environ["DOTFILES_IGNORE_FILE"]

    if not os.path.isdir(options["dir"]):
        show_usage_and_exit(f"{PROGRAM_NAME}: --dir value '{options['dir']}' is not a valid directory\n")

    if "target" not in options:
        options["target"] = os.path.expanduser("~")

    if not os.path.isdir(options["target"]):
        show_usage_and_exit(f"{PROGRAM_NAME}: --target value '{options['target']}' is not a valid directory\n")


def get_config_file_options() -> dict:
    """Search for default settings in any rc files."""
    defaults: list[str] = []
    rc_candidate_paths = [RC_FILE]

    home = os.environ.get("HOME")
    if home:
        rc_candidate_paths.insert(0, os.path.join(home, RC_FILE))

    for file_path in rc_candidate_paths:
        try:
            with open(file_path, "r") as f:
                for line in f:
                    line = line.rstrip("\n\r")
                    try:
                        defaults.extend(shlex.split(line))
                    except ValueError:
                        defaults.extend(line.split())
        except (FileNotFoundError, PermissionError):
            continue
        except IsADirectoryError:
            raise DotfilesCLIError(f"Could not open {file_path} for reading")

    rc_options = parse_cli_options(defaults)

    for option in ("dir", "target", "root"):
        if option in rc_options:
            rc_options[option] = expand_rc_path(rc_options[option], option)

    return rc_options


_ENV_VAR_RE = re.compile(r"(?<!\\)\$(?:\{([^}]+)\}|(\w+))")


def expand_rc_path(path: str, option: str) -> str:
    """Expand $VAR, ${VAR} and a leading ~ in a directory read from an rc file.

    A backslash keeps a following $ or ~ literal.
    """

    def lookup(match):
        var = match.group(1) or match.group(2)
        if var not in os.environ:
            raise DotfilesCLIError(
                f"--{option} in {RC_FILE} references undefined environment variable ${var}; aborting!"
            )
        return os.environ[var]

    path = _ENV_VAR_RE.sub(lookup, path).replace("\\$", "$")
    if path.startswith("\\~"):
        return path[1:]
    return os.path.expanduser(path)


def show_usage_and_exit(msg: str | None = None, exit_code: int | None = None) -> None:
    """Print program usage message and exit."""
    if msg:
        print(msg, file=sys.stderr)

    print(f"""{PROGRAM_NAME} version {VERSION}

Links the dotfiles of a repository into your home directory.

SYNOPSIS:

    {PROGRAM_NAME} [OPTION ...]

LAYOUT:

    REPO/.*        linked into the home directory (top level only)
    REPO/HOME/...  linked into the home directory (recursively)
    REPO/ROOT/...  linked into the system root (Linux and macOS only)

OPTIONS:

    -d DIR, --dir=DIR     Set dotfiles repository to DIR
                          (default is $DOTFILES_DIR or the current dir)
    -t DIR, --target=DIR  Set home directory to DIR (default is $HOME)
    --root=DIR            Set system root to DIR (default is /)
    --ignore-file=NAME    Name of the ignore file in the repository
                          (default is $DOTFILES_IGNORE_FILE or {DEFAULT_IGNORE_FILE})
    --with-root           Link ROOT/ even on other platforms
    --no-root             Never link ROOT/

    -f, --force, --force=y
                          Overwrite existing files and links
    -n, --dry-run         Do not actually make any filesystem changes
    -v, --verbose[=N]     Increase verbosity (levels are from 0 to 5;
                            -v or --verbose adds 1; --verbose=N sets level)
    -V, --version         Show version number
    -h, --help            Show this help""")

    if exit_code is not None:
        sys.exit(exit_code)
    elif msg:
        sys.exit(1)
    else:
        sys.exit(0)


def show_version_and_exit() -> None:
    """Print version and exit."""
    print(f"{PROGRAM_NAME} version {VERSION}")
    sys.exit(0)


if __name__ == "__main__":
    main()
