"""Dependencies found, or not found, while resolving a project."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Protocol


class PackageType(str, Enum):
    """Whether a package is installed from sources or as a prebuilt binary."""

    SOURCE = "source"
    BINARY = "binary"

    def __str__(self) -> str:
        return self.value


class _InstallationStatus(Protocol):
    def source_available(self) -> bool: ...

    def binary_available(self) -> bool: ...


class _Source(Protocol):
    def is_local(self) -> bool: ...


class _Dependency(Protocol):
    name: str


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class ResolvedDependency:
    """A package found in one of the places packages can come from.

    ``source`` is any object with an ``is_local()`` method, the entries of
    ``dependencies`` and ``suggests`` any objects with a ``name`` attribute,
    and ``installation_status`` any object with ``source_available()`` and
    ``binary_available()`` methods.
    """

    name: str
    version: Any
    source: Any
    dependencies: Sequence[Any] = field(default_factory=list)
    suggests: Sequence[Any] = field(default_factory=list)
    force_source: bool = False
    install_suggests: bool = False
    kind: PackageType = PackageType.SOURCE
    installation_status: Any = None
    path: str | None = None
    from_lockfile: bool = False
    from_remote: bool = False
    remotes: dict[str, tuple[str | None, Any]] = field(default_factory=dict)
    # Only set for local dependencies: the resolved path to a directory or tarball.
    local_resolved_path: Path | None = None
    env_vars: dict[str, str] = field(default_factory=dict)
    # Kept track of but not written anywhere, eg for `dependencies_only` entries.
    ignored: bool = False

    def is_installed(self) -> bool:
        """Whether the cache holds the package in the form it will be installed as."""
        status: _InstallationStatus | None = self.installation_status
        if status is None:
            return False
        if self.kind is PackageType.SOURCE:
            return status.source_available()
        return status.binary_available()

    def is_local(self) -> bool:
        source: _Source = self.source
        return source.is_local()

    def all_dependencies_names(self) -> list[str]:
        """Names of the direct dependencies, plus the suggested ones if they are installed."""
        deps: list[_Dependency] = list(self.dependencies)
        if self.install_suggests:
            deps.extend(self.suggests)
        return list(dict.fromkeys(dep.name for dep in deps))

    def describe(self) -> str:
        """A one-line description of the dependency, for debugging and snapshots."""
        env_vars = ", ".join(sorted(f"{k}={v}" for k, v in self.env_vars.items()))
        return (
            f"{self.name}={self.version} ({self.source!r}, type={self.kind}, "
            f"path='{self.path or ''}', from_lockfile={_flag(self.from_lockfile)}, "
            f"from_remote={_flag(self.from_remote)}, env_vars=[{env_vars}]"
            f"{', ignored' if self.ignored else ''})"
        )


@dataclass(frozen=True)
class UnresolvedDependency:
    """A package that could not be found anywhere."""

    name: str
    error: str | None = None
    version_requirement: Any = None
    # The first parent found requiring the package; None if listed in the config.
    parent: str | None = None
    remote: Any = None
    local_path: Path | None = None
    url: str | None = None

    def with_error(self, err: str) -> UnresolvedDependency:
        return replace(self, error=err)

    def with_remote(self, remote: Any) -> UnresolvedDependency:
        return replace(self, remote=remote)

    def with_url(self, url: str) -> UnresolvedDependency:
        return replace(self, url=str(url))

    def is_listed_in_config(self) -> bool:
        return self.parent is None

    def __str__(self) -> str:
        requirement = f" {self.version_requirement} " if self.version_requirement is not None else ""
        origin = (
            "[listed in rproject.toml]"
            if self.is_listed_in_config()
            else f"[required by: {self.parent}]"
        )
        error = f": {self.error}" if self.error is not None else ""
        return f"{self.name}{requirement} {origin}{error}"


def env_vars_of(mapping: Mapping[str, str]) -> dict[str, str]:
    """A copy of environment variables suitable for ``ResolvedDependency.env_vars``."""
    return {str(k): str(v) for k, v in mapping.items()}