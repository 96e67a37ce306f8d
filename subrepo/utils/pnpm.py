"""pnpm operations — install, run scripts, locate workspace roots."""

from __future__ import annotations

from pathlib import Path

from subrepo.utils.commands import CommandRunner

WORKSPACE_FILE = "pnpm-workspace.yaml"
LOCKFILE = "pnpm-lock.yaml"


def is_workspace(directory: str | Path) -> bool:
    """True when ``directory`` is the root of a pnpm workspace."""
    return (Path(directory) / WORKSPACE_FILE).exists()


def has_lockfile(directory: str | Path) -> bool:
    return (Path(directory) / LOCKFILE).exists()


class PnpmClient:
    """Package manager collaborator. Every invocation goes through ``runner``."""

    def __init__(self, runner: CommandRunner | None = None, executable: str = "pnpm"):
        self.runner = runner or CommandRunner()
        self.executable = executable

    def root(self, cwd: str | Path, workspace: bool = False) -> Path | None:
        """Return the ``node_modules`` root pnpm resolves from ``cwd``.

        With ``workspace=True`` this is the workspace root's ``node_modules``,
        and ``None`` when ``cwd`` is not inside a workspace.
        """
        args = [self.executable, "root"]
        if workspace:
            args.append("-w")
        try:
            result = self.runner.run(args, cwd=cwd, capture=True, check=False)
        except FileNotFoundError:
            return None
        if not result.ok or not result.stdout:
            return None
        return Path(result.stdout.splitlines()[-1].strip())

    def install(
        self,
        directory: str | Path,
        *,
        no_lockfile: bool = False,
        ignore_workspace: bool = False,
    ) -> None:
        args = [self.executable, "-C", str(directory), "install"]
        if no_lockfile:
            args.append("--no-lockfile")
        if ignore_workspace:
            args.append("--ignore-workspace")
        self.runner.run(args)

    def run_script(self, directory: str | Path, script: str) -> None:
        self.runner.run([self.executable, "-C", str(directory), "run", script])
