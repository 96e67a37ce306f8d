"""Package processing — install, build and link each package of a synced sub-repo.

Three gates decide what happens to a unit:

1. Install: the unit declares dependencies and is not already covered by an
   enclosing workspace install. Runs ``pnpm install`` when its head changed.
2. Build: the unit declares a ``build`` script and is not an install-only
   root. Runs the script when its head changed.
3. Link: every unit except an install-only root is linked into the host's
   ``node_modules`` under its local name.

A unit whose install or build gate fired has its head recorded, so the next
run has a baseline to compare against. Units of a workspace override skip
all three gates except linking and are never tracked.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from subrepo.logging import get_logger
from subrepo.models.package import DESCRIPTOR_FILE, read_package_json
from subrepo.models.subrepo import PackageUnit, RootPackageStrategy, SubrepoSpec
from subrepo.sync.heads import HeadStore
from subrepo.sync.report import SyncReport
from subrepo.utils.git_ops import GitClient
from subrepo.utils.links import ensure_symlink, format_relative
from subrepo.utils.pnpm import PnpmClient, has_lockfile, is_workspace

logger = get_logger("packages")


@dataclass
class RepoContext:
    """Per-run facts about one synced sub-repo."""

    spec: SubrepoSpec
    directory: Path
    key: str  # Identity of the sub-repo in the head store
    is_workspace: bool = False
    using_override: bool = False

    @property
    def strategy(self) -> RootPackageStrategy:
        return self.spec.root_package_strategy


class PackageUnitProcessor:
    """Runs the install/build/link gates for each package unit."""

    def __init__(
        self,
        git: GitClient,
        pnpm: PnpmClient,
        heads: HeadStore,
        console: Console,
        project_dir: Path,
        report: SyncReport,
    ):
        self.git = git
        self.pnpm = pnpm
        self.heads = heads
        self.console = console
        self.project_dir = project_dir
        self.modules_dir = project_dir / "node_modules"
        self.report = report

    def units(self, repo: RepoContext) -> list[PackageUnit]:
        """Read the descriptor of every package in ``repo``.

        The root package is included unless the strategy is ``ignore`` or the
        sub-repo has no root ``package.json``. Packages whose descriptor
        cannot be read are reported and skipped.
        """
        include_root = (
            repo.strategy is not RootPackageStrategy.IGNORE
            and (repo.directory / DESCRIPTOR_FILE).exists()
        )

        units = []
        for ref in repo.spec.package_refs(include_root):
            pkg_dir = repo.directory / ref.path
            descriptor = read_package_json(pkg_dir)
            if descriptor is None:
                self._warn(f"Failed to read package.json for {self._display(pkg_dir)}")
                self.report.skipped.append(self._display(pkg_dir))
                continue
            key = posixpath.normpath(posixpath.join(repo.key, Path(ref.path).as_posix()))
            units.append(PackageUnit(key=key, ref=ref, directory=pkg_dir, descriptor=descriptor))
        return units

    def process(self, unit: PackageUnit, repo: RepoContext) -> bool:
        """Run the gates for ``unit``. Returns True when its head is tracked.

        Units of a workspace override are only linked: the host workspace
        installs and builds that copy, and it need not be a git checkout.
        """
        if repo.using_override:
            self._link(unit, repo)
            return False

        display = self._display(unit.directory)
        head = self.git.last_commit(repo.directory, unit.path)
        changed = self.heads.is_changed(unit.key, head)
        tracked = False

        if unit.has_dependencies and self._should_install(unit, repo):
            tracked = True
            if changed:
                self._status(f"Installing dependencies for {display}...")
                self.pnpm.install(
                    unit.directory,
                    # Avoid generating a lockfile if none exists yet.
                    no_lockfile=not has_lockfile(unit.directory),
                    # Avoid attaching to a workspace unrelated to this clone.
                    ignore_workspace=not repo.is_workspace and not is_workspace(unit.directory),
                )
                self.report.installed.append(display)

        if unit.has_build_script and not self._install_only_root(unit, repo):
            tracked = True
            if changed:
                self._status(f"Building {display}...")
                self.pnpm.run_script(unit.directory, "build")
                self.report.built.append(display)

        self._link(unit, repo)

        if tracked:
            self.heads.record(unit.key, head)
            if not changed:
                logger.debug("Nothing changed with %s", display)
                self.report.unchanged.append(display)

        return tracked

    def _link(self, unit: PackageUnit, repo: RepoContext) -> None:
        if unit.local_name and not self._install_only_root(unit, repo):
            link = ensure_symlink(self.modules_dir / unit.local_name, unit.directory)
            self.report.linked.append(self._display(link))

    @staticmethod
    def _install_only_root(unit: PackageUnit, repo: RepoContext) -> bool:
        return unit.is_root and repo.strategy is RootPackageStrategy.INSTALL_ONLY

    def _should_install(self, unit: PackageUnit, repo: RepoContext) -> bool:
        # Members of a workspace sub-repo are installed by its root install.
        return unit.is_root or not repo.is_workspace

    def _display(self, path: Path) -> str:
        return format_relative(path, self.project_dir)

    def _status(self, message: str) -> None:
        self.console.print(f"[italic magenta]{message}[/]")

    def _warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠️  {message}[/]")
        self.report.warnings.append(message)
