"""Dependency inheritance — re-expose a sub-repo's installed packages to the host."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from subrepo.logging import get_logger
from subrepo.models.package import read_package_json
from subrepo.sync.report import SyncReport
from subrepo.utils.links import ensure_symlink, format_relative

logger = get_logger("inherit")


class DependencyInheritanceLinker:
    """Links inherited dependencies, their executables, and extra files."""

    def __init__(self, console: Console, project_dir: Path, report: SyncReport):
        self.console = console
        self.project_dir = project_dir
        self.modules_dir = project_dir / "node_modules"
        self.bin_dir = self.modules_dir / ".bin"
        self.report = report

    def link_dependencies(self, directory: Path, names: list[str]) -> None:
        """Link each named dependency from the sub-repo's ``node_modules``.

        A dependency missing from the sub-repo's install is skipped with a
        warning.
        """
        for name in names:
            target_dir = directory / "node_modules" / name
            descriptor = read_package_json(target_dir)
            if descriptor is None:
                message = f"Failed to inherit {name} from {self._display(directory)}"
                self.console.print(f"[yellow]⚠️  {message}[/]")
                self.report.warnings.append(message)
                continue

            self._link(self.modules_dir / name, target_dir)

            for bin_name, bin_path in descriptor.executables().items():
                self._link(self.bin_dir / bin_name, target_dir / bin_path)

    def link_files(self, directory: Path, files: dict[str, str]) -> None:
        """Link host paths (keys) to files inside the sub-repo (values)."""
        for link, target in files.items():
            self._link(self.project_dir / link, directory / target)

    def _link(self, link: Path, target: Path) -> None:
        ensure_symlink(link, target)
        self.report.linked.append(self._display(link))

    def _display(self, path: Path) -> str:
        return format_relative(path, self.project_dir)
