"""Sub-repo data models — configuration units and the package units derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from subrepo.models.package import PackageDescriptor

ROOT_PACKAGE_PATH = "."


class RootPackageStrategy(Enum):
    """What to do with the sub-repo's root package."""

    IGNORE = "ignore"  # Do nothing with the root package
    INSTALL_ONLY = "install-only"  # Install dependencies, never build or link
    DEFAULT = "default"  # Treat the root like any other package


@dataclass(frozen=True)
class PackagePath:
    """A package referenced by its path; linked under its own package name."""

    path: str

    def local_name(self, descriptor: PackageDescriptor) -> str:
        return descriptor.name


@dataclass(frozen=True)
class NamedPackage:
    """A package linked under a name that differs from its ``package.json``."""

    name: str
    path: str

    def local_name(self, descriptor: PackageDescriptor) -> str:
        return self.name


PackageRef = Union[PackagePath, NamedPackage]


@dataclass
class SubrepoSpec:
    """One externally hosted source tree tracked by the host project."""

    dir: Path
    remote: str
    ref: str | None = None
    packages: list[PackageRef] = field(default_factory=list)
    root_package_strategy: RootPackageStrategy = RootPackageStrategy.DEFAULT
    workspace_override: Path | None = None
    inherit_dependencies: list[str] = field(default_factory=list)
    link_files: dict[str, str] = field(default_factory=dict)

    def package_refs(self, include_root: bool) -> list[PackageRef]:
        """The root package (when requested) followed by the declared packages."""
        refs: list[PackageRef] = [PackagePath(ROOT_PACKAGE_PATH)] if include_root else []
        return refs + list(self.packages)


@dataclass
class PackageUnit:
    """A package inside a synced sub-repo, recomputed on every run."""

    key: str
    ref: PackageRef
    directory: Path
    descriptor: PackageDescriptor

    @property
    def path(self) -> str:
        return self.ref.path

    @property
    def is_root(self) -> bool:
        return Path(self.ref.path) == Path(ROOT_PACKAGE_PATH)

    @property
    def local_name(self) -> str:
        return self.ref.local_name(self.descriptor)

    @property
    def has_dependencies(self) -> bool:
        return self.descriptor.has_dependencies

    @property
    def has_build_script(self) -> bool:
        return self.descriptor.has_build_script
