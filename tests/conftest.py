"""
Pytest configuration for dotfiles-linker tests.

Provides a throwaway repository / home / root layout under tmp_path and
helpers to run the linker through its Python API or its command line.
"""

import os
import subprocess
import sys

import pytest

from dotfiles_linker import util
from dotfiles_linker.ignore import read_ignore_file

SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")


class LinkTestEnv:
    """Test environment for linking a dotfiles repository."""

    def __init__(self, tmpdir):
        self.tmpdir = str(tmpdir)
        self.repo_dir = os.path.join(self.tmpdir, "repo")
        self.home_dir = os.path.join(self.tmpdir, "home")
        self.root_dir = os.path.join(self.tmpdir, "root")
        os.makedirs(self.repo_dir)
        os.makedirs(self.home_dir)
        os.makedirs(self.root_dir)

    def create_repo_files(self, files):
        """
        Create files in the repository.

        files: dict mapping relative paths to content (or None for directories)
        """
        for path, content in files.items():
            full_path = os.path.join(self.repo_dir, path)
            if content is None:
                os.makedirs(full_path, exist_ok=True)
                continue
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "w") as f:
                f.write(content)

    def write_ignore_file(self, lines, name=".dotfiles_ignore"):
        with open(os.path.join(self.repo_dir, name), "w") as f:
            f.write("\n".join(lines) + "\n")

    def create_home_file(self, path, content="existing"):
        full_path = os.path.join(self.home_dir, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w") as f:
            f.write(content)

    def create_home_link(self, path, dest):
        full_path = os.path.join(self.home_dir, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        os.symlink(dest, full_path)

    def repo_path(self, *parts):
        return os.path.join(self.repo_dir, *parts)

    def home_path(self, *parts):
        return os.path.join(self.home_dir, *parts)

    def root_path(self, *parts):
        return os.path.join(self.root_dir, *parts)

    def get_filesystem_state(self, top=None):
        """
        Get a snapshot of a directory tree (the home directory by default).

        Returns a dict mapping relative paths to tuples:
        - ('dir',) for directories
        - ('file', content) for files
        - ('link', target) for symlinks
        """
        top = top or self.home_dir
        state = {}
        for root, dirs, files in os.walk(top, followlinks=False):
            rel_root = os.path.relpath(root, top)
            if rel_root == ".":
                rel_root = ""

            for name in sorted(dirs) + sorted(files):
                path = os.path.join(rel_root, name) if rel_root else name
                full_path = os.path.join(root, name)
                if os.path.islink(full_path):
                    state[path] = ("link", os.readlink(full_path))
                elif os.path.isdir(full_path):
                    state[path] = ("dir",)
                else:
                    with open(full_path, "r") as fh:
                        state[path] = ("file", fh.read())
        return state

    def linked(self):
        """Return {relative home path: link target} for every symlink in home."""
        return {
            path: entry[1]
            for path, entry in self.get_filesystem_state().items()
            if entry[0] == "link"
        }

    def run_cli(self, args, env=None):
        """Run the dotfiles-linker CLI and return (returncode, stdout, stderr)."""
        cmd = [sys.executable, "-m", "dotfiles_linker"] + list(args)

        run_env = os.environ.copy()
        run_env["HOME"] = self.home_dir
        run_env["PYTHONPATH"] = SRC_DIR + os.pathsep + run_env.get("PYTHONPATH", "")
        run_env.pop("DOTFILES_DIR", None)
        run_env.pop("DOTFILES_IGNORE_FILE", None)
        if env:
            run_env.update(env)

        proc = subprocess.run(
            cmd,
            capture_output=True,
            cwd=self.tmpdir,
            env=run_env,
        )
        stdout = proc.stdout.decode("utf-8", errors="replace")
        stderr = proc.stderr.decode("utf-8", errors="replace")
        return proc.returncode, stdout, stderr

    def default_cli_args(self):
        return ["-d", self.repo_dir, "-t", self.home_dir, "--root", self.root_dir]


@pytest.fixture(autouse=True)
def reset_module_state():
    """Reset verbosity and the ignore-file cache between tests."""
    util.set_debug_level(0)
    util.set_test_mode(False)
    read_ignore_file.cache_clear()
    yield
    util.set_debug_level(0)
    util.set_test_mode(False)
    read_ignore_file.cache_clear()


@pytest.fixture
def link_env(tmp_path, monkeypatch):
    """Create a fresh repository / home / root environment."""
    env = LinkTestEnv(tmp_path)
    # Isolate from the user's rc files and environment
    monkeypatch.setenv("HOME", env.home_dir)
    monkeypatch.delenv("DOTFILES_DIR", raising=False)
    monkeypatch.delenv("DOTFILES_IGNORE_FILE", raising=False)
    monkeypatch.chdir(env.tmpdir)
    return env
