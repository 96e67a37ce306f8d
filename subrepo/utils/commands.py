"""Command runner — the single seam for spawning external processes."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


class CommandError(RuntimeError):
    """An external command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {' '.join(self.args_list)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)


@dataclass
class CommandResult:
    """Outcome of a finished command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs commands with ``subprocess.run``.

    With ``capture=False`` the child inherits the terminal so package manager
    progress stays visible. With ``check=True`` (the default) a non-zero exit
    raises ``CommandError``.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        capture: bool = False,
        check: bool = True,
    ) -> CommandResult:
        proc = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=capture,
            text=True,
        )
        result = CommandResult(
            args=list(args),
            returncode=proc.returncode,
            stdout=(proc.stdout or "").strip() if capture else "",
            stderr=(proc.stderr or "").strip() if capture else "",
        )
        if check and not result.ok:
            raise CommandError(result.args, result.returncode, result.stderr)
        return result
