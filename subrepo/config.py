"""Config loading — read ``subrepos.yaml`` into ``SubrepoSpec`` objects."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from subrepo.models.subrepo import (
    NamedPackage,
    PackagePath,
    PackageRef,
    RootPackageStrategy,
    SubrepoSpec,
)

DEFAULT_CONFIG_FILE = "subrepos.yaml"


def load_config(path: str | Path) -> list[SubrepoSpec]:
    """Load sub-repo specs from a YAML (or JSON) file.

    The file holds either a ``subrepos`` list or a bare list of entries.
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        entries = data.get("subrepos", [])
    else:
        entries = data

    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ValueError(f"{path}: expected a list of sub-repos")

    specs = [parse_subrepo(entry) for entry in entries]
    check_unique_dirs(specs)
    return specs


def parse_subrepo(data: dict) -> SubrepoSpec:
    """Build a ``SubrepoSpec`` from one config entry (camelCase or snake_case keys)."""
    if not isinstance(data, dict):
        raise ValueError(f"Sub-repo entry must be a mapping, got: {data!r}")

    for required in ("dir", "remote"):
        if not data.get(required):
            raise ValueError(f"Sub-repo entry is missing '{required}': {data!r}")

    strategy = _get(data, "rootPackageStrategy", "root_package_strategy") or "default"
    override = _get(data, "workspaceOverride", "workspace_override")
    inherit = _get(data, "inheritDependencies", "inherit_dependencies") or []
    link_files = _get(data, "linkFiles", "link_files") or {}
    packages = data.get("packages") or []
    ref = data.get("ref")

    if not isinstance(packages, list):
        raise ValueError(f"packages must be a list, got: {packages!r}")
    if not isinstance(inherit, list):
        raise ValueError(f"inheritDependencies must be a list, got: {inherit!r}")
    if not isinstance(link_files, dict):
        raise ValueError(f"linkFiles must be a mapping, got: {link_files!r}")

    return SubrepoSpec(
        dir=Path(data["dir"]),
        remote=str(data["remote"]),
        ref=str(ref) if ref else None,
        packages=[parse_package_ref(p) for p in packages],
        root_package_strategy=RootPackageStrategy(strategy),
        workspace_override=Path(override) if override else None,
        inherit_dependencies=list(dict.fromkeys(str(name) for name in inherit)),
        link_files={str(k): str(v) for k, v in link_files.items()},
    )


def parse_package_ref(value) -> PackageRef:
    """A bare string is a path; a ``{name, path}`` mapping overrides the link name."""
    if isinstance(value, str):
        return PackagePath(value)
    if isinstance(value, dict) and value.get("name") and value.get("path"):
        return NamedPackage(name=str(value["name"]), path=str(value["path"]))
    raise ValueError(f"Invalid package reference: {value!r}")


def check_unique_dirs(specs: list[SubrepoSpec]) -> None:
    """Reject two specs targeting the same directory."""
    seen: set[str] = set()
    for spec in specs:
        key = os.path.normpath(spec.dir)
        if key in seen:
            raise ValueError(f"Duplicate sub-repo dir: {spec.dir}")
        seen.add(key)


def _get(data: dict, camel: str, snake: str):
    return data[camel] if camel in data else data.get(snake)
