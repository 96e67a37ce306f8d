"""Ref resolution — decide what a sub-repo should track and whether it is current."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from subrepo.models.subrepo import SubrepoSpec
from subrepo.utils.git_ops import GitClient, is_commit_hash


@dataclass
class RefResolution:
    """Outcome of resolving a sub-repo's ref."""

    ref: str | None
    target: str | None = None  # Commit the ref points at, when known
    should_fetch: bool = False


def resolve_ref(spec: SubrepoSpec, directory: Path, git: GitClient, clone_exists: bool) -> RefResolution:
    """Resolve the effective ref for ``spec``.

    An explicit ``spec.ref`` wins. Otherwise an existing clone keeps tracking
    its checked out branch, and a fresh clone takes the remote default branch
    (no ref, nothing to fetch after cloning).

    Full commit hashes are never looked up remotely. Branches and tags are
    re-resolved with ``ls-remote`` on every run, and nothing is fetched when
    the local HEAD already matches.
    """
    if not clone_exists:
        return RefResolution(ref=spec.ref, should_fetch=spec.ref is not None)

    ref = spec.ref or git.current_branch(directory)
    head = git.head_commit(directory)
    target = ref if is_commit_hash(ref) else git.remote_ref_commit(directory, ref)

    return RefResolution(
        ref=ref,
        target=target,
        should_fetch=head != target,
    )
