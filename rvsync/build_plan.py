"""Order in which resolved packages can be installed, in parallel."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .dependency import ResolvedDependency


class StepKind(Enum):
    INSTALL = "install"
    WAIT = "wait"
    DONE = "done"


@dataclass(frozen=True)
class BuildStep:
    """What to do next: install a package, wait for others to finish, or stop."""

    kind: StepKind
    dependency: ResolvedDependency | None = None

    @classmethod
    def install(cls, dependency: ResolvedDependency) -> BuildStep:
        return cls(StepKind.INSTALL, dependency)

    @classmethod
    def wait(cls) -> BuildStep:
        return cls(StepKind.WAIT)

    @classmethod
    def done(cls) -> BuildStep:
        return cls(StepKind.DONE)


class BuildPlan:
    """Hands out packages whose dependencies are all installed."""

    def __init__(self, deps: Sequence[ResolvedDependency]) -> None:
        self.deps = list(deps)
        by_name = {dep.name: dep for dep in self.deps}
        self.installed: set[str] = set()
        self.installing: set[str] = set()
        # Transitive dependencies still to install, for every package.
        self.full_deps: dict[str, set[str]] = {}

        for dep in self.deps:
            if dep.ignored:
                continue
            all_deps: set[str] = set()
            queue = deque(d.name for d in dep.dependencies)
            while queue:
                dep_name = queue.popleft()
                all_deps.add(dep_name)
                try:
                    parent = by_name[dep_name]
                except KeyError:
                    raise ValueError(
                        f"{dep.name} depends on {dep_name} which is not in the plan"
                    ) from None
                queue.extend(d.name for d in parent.dependencies if d.name not in all_deps)
            self.full_deps[dep.name] = all_deps

    def _find(self, name: str) -> ResolvedDependency:
        for dep in self.deps:
            if dep.name == name:
                return dep
        raise KeyError(name)

    def mark_installed(self, name: str) -> None:
        pkg = self._find(name)
        self.installed.add(pkg.name)
        self.installing.discard(pkg.name)
        for remaining in self.full_deps.values():
            remaining.discard(pkg.name)

    def _is_skippable(self, name: str) -> bool:
        return name in self.installed or name in self.installing

    def _is_done(self) -> bool:
        return len(self.installed) == len(self.deps)

    def num_to_install(self) -> int:
        return len(self.deps) - len(self.installed)

    def all_dependencies(self) -> dict[str, tuple[Any, Any]]:
        """Map every package name to its (version, source)."""
        return {dep.name: (dep.version, dep.source) for dep in self.deps}

    def get(self) -> BuildStep:
        """The next step; a package returned for installation is marked as installing."""
        if self._is_done():
            return BuildStep.done()

        for name, remaining in self.full_deps.items():
            if remaining or self._is_skippable(name):
                continue
            self.installing.add(name)
            return BuildStep.install(self._find(name))

        return BuildStep.wait()