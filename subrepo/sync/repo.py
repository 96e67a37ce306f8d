"""Repo sync — bring a sub-repo working tree to its resolved ref."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from subrepo.logging import get_logger
from subrepo.models.subrepo import SubrepoSpec
from subrepo.sync.refs import RefResolution, resolve_ref
from subrepo.utils.git_ops import GitClient
from subrepo.utils.links import ensure_symlink, format_relative

logger = get_logger("repo")


class RepoSynchronizer:
    """Clones missing working trees and fetches/resets stale ones."""

    def __init__(self, git: GitClient, console: Console, project_dir: Path):
        self.git = git
        self.console = console
        self.project_dir = project_dir

    def resolve(self, spec: SubrepoSpec, directory: Path) -> RefResolution:
        return resolve_ref(spec, directory, self.git, clone_exists=directory.exists())

    def sync(self, spec: SubrepoSpec, directory: Path, resolution: RefResolution) -> str:
        """Make ``directory`` match ``resolution`` and return its HEAD commit.

        Local modifications in the working tree are discarded by the reset.
        """
        display = format_relative(directory, self.project_dir)

        if not directory.exists():
            self._status(f"Cloning {display} package...")
            directory.parent.mkdir(parents=True, exist_ok=True)
            self.git.clone(spec.remote, directory)
        elif resolution.should_fetch:
            self._status(f"Syncing {display} package...")

        if resolution.should_fetch and resolution.ref:
            logger.debug("Fetching ref: %s", resolution.ref)
            self.git.fetch(directory, resolution.ref)
            logger.debug("Resetting to FETCH_HEAD...")
            self.git.reset_hard(directory, "FETCH_HEAD")

        return self.git.head_commit(directory)

    def link_override(self, directory: Path, override: Path) -> None:
        """Point ``directory`` at a workspace copy instead of cloning."""
        logger.debug("Using workspace override %s for %s", override, directory)
        ensure_symlink(directory, override)

    def _status(self, message: str) -> None:
        self.console.print(f"[italic magenta]{message}[/]")
