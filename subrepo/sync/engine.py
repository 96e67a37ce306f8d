"""Sync engine — run every configured sub-repo through sync, packages and links.

Sub-repos are processed strictly in configuration order, one external
command at a time. Any failed git or pnpm invocation aborts the whole run;
the head store keeps whatever finished before the failure.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from rich.console import Console

from subrepo.logging import get_logger
from subrepo.models.subrepo import SubrepoSpec
from subrepo.sync.heads import HeadStore, JsonHeadStore
from subrepo.sync.inherit import DependencyInheritanceLinker
from subrepo.sync.packages import PackageUnitProcessor, RepoContext
from subrepo.sync.repo import RepoSynchronizer
from subrepo.sync.report import SyncReport
from subrepo.utils.git_ops import GitClient
from subrepo.utils.links import format_relative
from subrepo.utils.pnpm import PnpmClient, is_workspace

logger = get_logger("engine")

METADATA_DIR = ".subrepo-install"
METADATA_FILE = "metadata.json"


def metadata_path(modules_root: Path) -> Path:
    """Location of the head store under a ``node_modules`` root."""
    return modules_root / METADATA_DIR / METADATA_FILE


class SubrepoInstaller:
    """Keeps configured sub-repos synced, installed, built and linked."""

    def __init__(
        self,
        project_dir: str | Path | None = None,
        git: GitClient | None = None,
        pnpm: PnpmClient | None = None,
        heads: HeadStore | None = None,
        console: Console | None = None,
    ):
        """Initialize the installer.

        Args:
            project_dir: The host project. Defaults to the current directory.
            git: Version-control collaborator.
            pnpm: Package manager collaborator.
            heads: Head store. Defaults to the JSON metadata file under the
                   workspace (or nearest) ``node_modules`` root.
            console: Where status lines are printed.
        """
        self.project_dir = Path(project_dir).resolve() if project_dir else Path.cwd().resolve()
        self.git = git or GitClient()
        self.pnpm = pnpm or PnpmClient()
        self.console = console or Console()

        # These are node_modules roots.
        self.workspace_root = self.pnpm.root(self.project_dir, workspace=True)
        self.nearest_root = self.pnpm.root(self.project_dir)
        logger.debug("Workspace root: %s", self.workspace_root)
        logger.debug("Nearest root:   %s", self.nearest_root)

        self.modules_root = self.workspace_root or self.nearest_root or self.project_dir / "node_modules"
        self.heads = heads if heads is not None else JsonHeadStore(metadata_path(self.modules_root))

    def run(self, specs: Iterable[SubrepoSpec]) -> SyncReport:
        """Sync every spec in order, then prune heads of removed packages."""
        report = SyncReport()
        repos = RepoSynchronizer(self.git, self.console, self.project_dir)
        processor = PackageUnitProcessor(
            self.git, self.pnpm, self.heads, self.console, self.project_dir, report
        )
        linker = DependencyInheritanceLinker(self.console, self.project_dir, report)

        self.heads.load()
        live_keys: list[str] = []

        for spec in specs:
            live_keys.extend(self._install_repo(spec, repos, processor, linker, report))

        report.pruned = self.heads.prune(live_keys)
        self.heads.flush()
        return report

    def _install_repo(
        self,
        spec: SubrepoSpec,
        repos: RepoSynchronizer,
        processor: PackageUnitProcessor,
        linker: DependencyInheritanceLinker,
        report: SyncReport,
    ) -> list[str]:
        """Sync one sub-repo and process its packages. Returns its tracked keys."""
        directory = self.project_dir / spec.dir
        display = format_relative(directory, self.project_dir)
        using_override = bool(self.workspace_root and spec.workspace_override)

        if using_override:
            repos.link_override(directory, self.project_dir / spec.workspace_override)
            report.overridden.append(display)
        else:
            cloning = not directory.exists()
            resolution = repos.resolve(spec, directory)
            head = repos.sync(spec, directory, resolution)
            logger.debug("%s synced to %s", display, head)
            if cloning:
                report.cloned.append(display)
            elif resolution.should_fetch:
                report.fetched.append(display)

        repo = RepoContext(
            spec=spec,
            directory=directory,
            key=self._repo_key(directory),
            is_workspace=is_workspace(directory),
            using_override=using_override,
        )

        tracked = []
        for unit in processor.units(repo):
            if processor.process(unit, repo):
                tracked.append(unit.key)

        linker.link_dependencies(directory, spec.inherit_dependencies)
        linker.link_files(directory, spec.link_files)
        return tracked

    def _repo_key(self, directory: Path) -> str:
        # Overrides resolve through the link, so they are keyed by the real copy.
        base = self.modules_root.resolve().parent
        return Path(os.path.relpath(directory.resolve(), base)).as_posix()


def subrepo_install(specs: Iterable[SubrepoSpec], project_dir: str | Path | None = None, **kwargs) -> SyncReport:
    """Sync, install, build and link ``specs`` into ``project_dir``."""
    return SubrepoInstaller(project_dir, **kwargs).run(specs)
