"""Shared fakes for the sync engine tests.

``FakeGit`` stands in for ``GitClient`` and ``RecordingRunner`` for
``CommandRunner``, so engine tests can assert on the exact git and pnpm
operations a run requested.
"""

import io
import json
import os
from pathlib import Path

import pytest
from rich.console import Console

from subrepo.sync.engine import SubrepoInstaller
from subrepo.sync.heads import MemoryHeadStore
from subrepo.utils.commands import CommandError, CommandResult
from subrepo.utils.pnpm import PnpmClient

COMMIT_A = "a" * 40
COMMIT_B = "b" * 40
COMMIT_C = "c" * 40


class FakeGit:
    """In-memory git: remote refs, clone state and per-path heads."""

    def __init__(self, remote_refs=None, default_branch="main"):
        self.remote_refs = dict(remote_refs or {"main": COMMIT_A})
        self.default_branch = default_branch
        self.clones: dict[str, dict] = {}
        self.path_heads: dict[tuple[str, str], str] = {}
        self.clone_files: dict[str, dict] = {}
        self.calls: list[tuple] = []

    # Test setup helpers

    def add_clone(self, directory, head=COMMIT_A, branch="main"):
        Path(directory).mkdir(parents=True, exist_ok=True)
        self.clones[self._key(directory)] = {"head": head, "branch": branch, "fetched": None}

    def set_path_head(self, directory, path, head):
        self.path_heads[(self._key(directory), os.path.normpath(path))] = head

    def on_clone(self, remote, files):
        """Files (relative path -> package.json dict) a clone of ``remote`` contains."""
        self.clone_files[remote] = files

    def ops(self, *names):
        return [c for c in self.calls if c[0] in names]

    # GitClient interface

    def clone(self, remote, directory):
        self.calls.append(("clone", remote, self._key(directory)))
        Path(directory).mkdir(parents=True, exist_ok=True)
        for rel, data in self.clone_files.get(remote, {}).items():
            pkg_dir = Path(directory) / rel
            pkg_dir.mkdir(parents=True, exist_ok=True)
            (pkg_dir / "package.json").write_text(json.dumps(data))
        self.clones[self._key(directory)] = {
            "head": self.remote_refs[self.default_branch],
            "branch": self.default_branch,
            "fetched": None,
        }

    def current_branch(self, directory):
        self.calls.append(("current_branch", self._key(directory)))
        return self.clones[self._key(directory)]["branch"]

    def head_commit(self, directory):
        self.calls.append(("head_commit", self._key(directory)))
        return self.clones[self._key(directory)]["head"]

    def remote_ref_commit(self, directory, ref):
        self.calls.append(("ls_remote", self._key(directory), ref))
        return self.remote_refs.get(ref, "")

    def fetch(self, directory, ref):
        self.calls.append(("fetch", self._key(directory), ref))
        self.clones[self._key(directory)]["fetched"] = self.remote_refs.get(ref, ref)

    def reset_hard(self, directory, target="FETCH_HEAD"):
        self.calls.append(("reset", self._key(directory), target))
        clone = self.clones[self._key(directory)]
        clone["head"] = clone["fetched"]

    def last_commit(self, directory, path):
        self.calls.append(("last_commit", self._key(directory), path))
        key = (self._key(directory), os.path.normpath(path))
        return self.path_heads.get(key, self.clones[self._key(directory)]["head"])

    @staticmethod
    def _key(directory):
        return os.path.realpath(directory)


class RecordingRunner:
    """Records every command instead of running it."""

    def __init__(self, workspace_root=None, nearest_root=None, fail_on=None):
        self.workspace_root = workspace_root
        self.nearest_root = nearest_root
        self.fail_on = fail_on
        self.commands: list[list[str]] = []

    def run(self, args, *, cwd=None, capture=False, check=True):
        args = list(args)
        if args[1:] == ["root", "-w"]:
            return self._root(args, self.workspace_root)
        if args[1:] == ["root"]:
            return self._root(args, self.nearest_root)

        self.commands.append(args)
        if self.fail_on and self.fail_on in args:
            if check:
                raise CommandError(args, 1, "boom")
            return CommandResult(args=args, returncode=1)
        return CommandResult(args=args, returncode=0)

    def installs(self):
        return [c for c in self.commands if "install" in c]

    def builds(self):
        return [c for c in self.commands if c[-2:] == ["run", "build"]]

    @staticmethod
    def _root(args, value):
        if value is None:
            return CommandResult(args=args, returncode=1)
        return CommandResult(args=args, returncode=0, stdout=str(value))


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def project(tmp_path):
    project_dir = tmp_path / "host"
    project_dir.mkdir()
    return project_dir.resolve()


@pytest.fixture
def write_package():
    def _write(directory, **fields):
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(fields))
        return directory

    return _write


@pytest.fixture
def make_installer(fake_git, runner):
    def _make(project_dir, heads=None, **kwargs):
        return SubrepoInstaller(
            project_dir,
            git=kwargs.pop("git", fake_git),
            pnpm=PnpmClient(kwargs.pop("runner", runner)),
            heads=heads if heads is not None else MemoryHeadStore(),
            console=Console(file=io.StringIO()),
            **kwargs,
        )

    return _make
