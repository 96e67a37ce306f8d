"""Git operations — shallow clone, fetch, reset, and commit queries."""

from __future__ import annotations

import re
from pathlib import Path

from git import Repo

COMMIT_HASH_RE = re.compile(r"^[0-9a-f]{40}$")


def is_commit_hash(ref: str) -> bool:
    """True for a full 40-character lowercase hex commit id.

    Abbreviated hashes are treated as branch or tag names.
    """
    return bool(COMMIT_HASH_RE.match(ref))


class GitClient:
    """Version-control collaborator for sub-repo working trees.

    Every method raises a ``git.exc.GitError`` when the underlying git
    invocation fails or the directory is not a checkout. Callers let it
    propagate and abort the run.
    """

    def clone(self, remote: str, directory: str | Path) -> None:
        """Shallow clone ``remote`` (default branch) into ``directory``."""
        Repo.clone_from(remote, str(directory), depth=1)

    def current_branch(self, directory: str | Path) -> str:
        """Return the checked out branch name (``HEAD`` when detached)."""
        return Repo(directory).git.rev_parse("--abbrev-ref", "HEAD").strip()

    def head_commit(self, directory: str | Path) -> str:
        return Repo(directory).git.rev_parse("HEAD").strip()

    def remote_ref_commit(self, directory: str | Path, ref: str) -> str:
        """Look up the commit ``ref`` points at on ``origin`` without fetching.

        Returns an empty string when the remote has no such ref.
        """
        output = Repo(directory).git.ls_remote("origin", ref)
        return output.strip()[:40]

    def fetch(self, directory: str | Path, ref: str) -> None:
        """Shallow fetch a single ref from ``origin`` into ``FETCH_HEAD``."""
        Repo(directory).git.fetch("origin", ref, depth=1)

    def reset_hard(self, directory: str | Path, target: str = "FETCH_HEAD") -> None:
        Repo(directory).git.reset("--hard", target)

    def last_commit(self, directory: str | Path, path: str) -> str:
        """Return the most recent commit touching ``path`` inside the repo."""
        return Repo(directory).git.log("-n", "1", "--pretty=format:%H", "--", path).strip()
