"""CLI behaviour tests."""

import json

import pytest
from click.testing import CliRunner

from subrepo import __version__
from subrepo.cli import main
from subrepo.utils.pnpm import PnpmClient


@pytest.fixture(autouse=True)
def no_pnpm(monkeypatch):
    monkeypatch.setattr(PnpmClient, "root", lambda self, cwd, workspace=False: None)


def test_version():
    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_install_with_empty_config(tmp_path):
    (tmp_path / "subrepos.yaml").write_text("subrepos: []\n")

    result = CliRunner().invoke(main, ["install", "--project-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "No sub-repos configured" in result.output


def test_install_with_missing_config(tmp_path):
    result = CliRunner().invoke(main, ["install", "--project-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "Invalid config" in result.output


def test_install_with_duplicate_dirs(tmp_path):
    config = tmp_path / "custom.yaml"
    config.write_text(
        "subrepos:\n"
        "  - {dir: vendor/kit, remote: a}\n"
        "  - {dir: vendor/kit, remote: b}\n"
    )

    result = CliRunner().invoke(
        main, ["install", "--project-dir", str(tmp_path), "--config", str(config)]
    )

    assert result.exit_code == 2
    assert "Duplicate" in result.output


def test_heads_lists_recorded_heads(tmp_path):
    meta = tmp_path / "node_modules" / ".subrepo-install" / "metadata.json"
    meta.parent.mkdir(parents=True)
    meta.write_text(json.dumps({"heads": {"vendor/kit": "a" * 40}}))

    result = CliRunner().invoke(main, ["heads", "--project-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "vendor/kit" in result.output
    assert "a" * 12 in result.output


def test_heads_without_metadata(tmp_path):
    result = CliRunner().invoke(main, ["heads", "--project-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "No package heads recorded" in result.output


def test_install_aborts_on_git_error(tmp_path):
    # The target dir exists but is not a git checkout.
    (tmp_path / "vendor" / "kit").mkdir(parents=True)
    (tmp_path / "subrepos.yaml").write_text(
        "subrepos:\n  - {dir: vendor/kit, remote: https://example.com/kit.git}\n"
    )

    result = CliRunner().invoke(main, ["install", "--project-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Sync aborted" in result.output


def test_install_reports_up_to_date(tmp_path, monkeypatch):
    from subrepo.sync.engine import SubrepoInstaller
    from subrepo.sync.report import SyncReport

    monkeypatch.setattr(SubrepoInstaller, "run", lambda self, specs: SyncReport())
    (tmp_path / "subrepos.yaml").write_text(
        "subrepos:\n  - {dir: vendor/kit, remote: https://example.com/kit.git}\n"
    )

    result = CliRunner().invoke(main, ["install", "--project-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "All sub-repos are up to date" in result.output
