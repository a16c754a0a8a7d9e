"""The outcome of resolving a project: what was found, what was not, and conflicts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .dependency import ResolvedDependency, UnresolvedDependency
from .sat import DependencySolver, UnsatisfiableError


@dataclass(frozen=True)
class RequirementFailure:
    """A version requirement that no found version could satisfy."""

    required_by: str
    version_req: str

    def __str__(self) -> str:
        return f"{self.required_by} requires {self.version_req}"


def _requirement_of(dependency: Any) -> Any:
    """The version requirement of a dependency entry, or None."""
    value = getattr(dependency, "version_requirement", None)
    if callable(value):
        value = value()
    return value


@dataclass
class Resolution:
    """Resolved and unresolved dependencies, plus the requirement conflicts found."""

    found: list[ResolvedDependency] = field(default_factory=list)
    failed: list[UnresolvedDependency] = field(default_factory=list)
    req_failures: dict[str, list[RequirementFailure]] = field(default_factory=dict)

    def add_found(self, dep: ResolvedDependency) -> None:
        """Record a found dependency unless an identical one is already there."""
        if dep not in self.found:
            self.found.append(dep)

    def found_in_repo(self, name: str) -> bool:
        """Whether a package of that name was already found in a repository."""
        return any(d.name == name and d.source.is_repo() for d in self.found)

    def ignore(self, name: str) -> None:
        """Mark the first found package of that name as ignored."""
        for dep in self.found:
            if dep.name == name:
                dep.ignored = True
                return

    def _drop_failures_found_elsewhere(self) -> None:
        def satisfied(failed: UnresolvedDependency) -> bool:
            for pkg in self.found:
                if pkg.name != failed.name:
                    continue
                req = failed.version_requirement
                if req is None or req.is_satisfied(pkg.version):
                    return True
            return False

        self.failed = [f for f in self.failed if not satisfied(f)]

    def finalize(self) -> None:
        """Drop failures that were found after all and pick one version per package.

        Conflicting requirements are recorded in ``req_failures``.
        """
        self._drop_failures_found_elsewhere()

        solver = DependencySolver()
        for package in self.found:
            if package.ignored:
                continue
            solver.add_package(package.name, package.version)
            for dep in package.dependencies:
                req = _requirement_of(dep)
                if req is not None:
                    solver.add_requirement(dep.name, req, package.name)

        try:
            assignments = solver.solve()
        except UnsatisfiableError as exc:
            failures: dict[str, list[RequirementFailure]] = {}
            for req in exc.failures:
                failures.setdefault(req.package, []).append(
                    RequirementFailure(req.required_by, str(req.requirement))
                )
            self.req_failures = failures
            return

        names: set[str] = set()
        kept: list[ResolvedDependency] = []
        for pkg in self.found:
            if pkg.name in names:
                continue
            if pkg.name in assignments:
                if pkg.version == assignments[pkg.name]:
                    names.add(pkg.name)
                    kept.append(pkg)
            elif pkg.ignored:
                names.add(pkg.name)
                kept.append(pkg)
        self.found = kept

    def is_success(self) -> bool:
        return not self.failed and not self.req_failures

    def req_error_messages(self) -> list[str]:
        """One human readable message per package with conflicting requirements."""
        messages = []
        for name, reqs in self.req_failures.items():
            versions_msg = "\n".join(
                f"        * {pkg.version} (from {pkg.source})"
                for pkg in self.found
                if pkg.name == name
            )
            reqs_msg = ", ".join(str(r) for r in reqs)
            if versions_msg:
                messages.append(
                    f"{name}:\n  - {reqs_msg} and the following version(s) were found:\n"
                    f"{versions_msg}"
                )
            else:
                messages.append(f"{name}:\n  - {reqs_msg} and no versions were found")
        return messages