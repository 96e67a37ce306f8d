"""Package descriptor — the fields of ``package.json`` the engine cares about."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from subrepo.logging import get_logger

logger = get_logger("package")

DESCRIPTOR_FILE = "package.json"


@dataclass
class PackageDescriptor:
    """Parsed ``package.json``."""

    name: str = ""
    bin: str | dict[str, str] | None = None
    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies or self.dev_dependencies)

    @property
    def has_build_script(self) -> bool:
        return bool(self.scripts.get("build"))

    def executables(self) -> dict[str, str]:
        """Map each executable name to its path relative to the package.

        A string ``bin`` is exposed under the package name; a nameless
        package with a string ``bin`` exposes nothing.
        """
        if isinstance(self.bin, str):
            return {self.name: self.bin} if self.name else {}
        if isinstance(self.bin, dict):
            return {k: v for k, v in self.bin.items() if isinstance(v, str)}
        return {}


def read_package_json(directory: str | Path) -> PackageDescriptor | None:
    """Read ``package.json`` from ``directory``.

    Returns None when the file is missing, unreadable or not a JSON object.
    """
    path = Path(directory) / DESCRIPTOR_FILE
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Error reading %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.debug("Error reading %s: expected a JSON object", path)
        return None

    bin_field = data.get("bin")
    if not isinstance(bin_field, (str, dict)):
        bin_field = None

    return PackageDescriptor(
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        bin=bin_field,
        scripts=_mapping(data.get("scripts")),
        dependencies=_mapping(data.get("dependencies")),
        dev_dependencies=_mapping(data.get("devDependencies")),
    )


def _mapping(value) -> dict[str, str]:
    return dict(value) if isinstance(value, dict) else {}
