"""subrepo CLI — keep sub-repos synced, installed, built and linked."""

from pathlib import Path

import click
import yaml
from git.exc import GitError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from subrepo import __version__
from subrepo.logging import configure_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """subrepo — sync external source trees into this project.

    Clones or updates each configured sub-repo, installs and builds its
    packages only when their files changed, and links them into
    node_modules.
    """


# ── Install ──────────────────────────────────────────────────────────


@main.command()
@click.option("--config", "-c", "config_path", default=None, help="Config file (default: subrepos.yaml)")
@click.option("--project-dir", "-p", default=".", help="Host project directory")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def install(config_path: str | None, project_dir: str, verbose: bool):
    """Sync every configured sub-repo and its packages."""
    from subrepo.config import DEFAULT_CONFIG_FILE, load_config
    from subrepo.sync.engine import SubrepoInstaller
    from subrepo.utils.commands import CommandError

    configure_logging(verbose=verbose, console=console)

    path = Path(config_path) if config_path else Path(project_dir) / DEFAULT_CONFIG_FILE
    try:
        specs = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid config {path}:[/] {escape(str(e))}")
        raise SystemExit(2)

    if not specs:
        console.print("[yellow]No sub-repos configured.[/]")
        return

    installer = SubrepoInstaller(project_dir, console=console)
    try:
        report = installer.run(specs)
    except (GitError, CommandError) as e:
        console.print(f"[red]Sync aborted:[/] {escape(str(e))}")
        raise SystemExit(1)

    if not report.did_work:
        console.print("[green]All sub-repos are up to date.[/]")
    console.print(Panel(report.summary(), title="subrepo install"))
    for warning in report.warnings:
        console.print(f"  [yellow]![/] {escape(warning)}")


# ── Heads ────────────────────────────────────────────────────────────


@main.command()
@click.option("--project-dir", "-p", default=".", help="Host project directory")
def heads(project_dir: str):
    """List the package heads recorded by the last install."""
    from subrepo.sync.engine import SubrepoInstaller

    installer = SubrepoInstaller(project_dir, console=console)
    installer.heads.load()
    recorded = installer.heads.heads

    if not recorded:
        console.print("[yellow]No package heads recorded.[/]")
        return

    table = Table(title=f"Package heads ({len(recorded)} tracked)")
    table.add_column("Package", style="cyan")
    table.add_column("Commit", style="green")

    for key, commit in sorted(recorded.items()):
        table.add_row(key, commit[:12])

    console.print(table)


if __name__ == "__main__":
    main()
