"""Choose one version per package so that every version requirement holds.

Versions may be any hashable, orderable values. Requirements may be any
object with an ``is_satisfied(version)`` method.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from .cnf import solve_formula

logger = logging.getLogger(__name__)


class Requirement(Protocol):
    def is_satisfied(self, version: Any) -> bool: ...


@dataclass(frozen=True)
class PackageRequirement:
    """A version requirement on ``package`` made by ``required_by``."""

    package: str
    requirement: Any
    required_by: str

    def __str__(self) -> str:
        return f"{self.package} {self.requirement} (required by {self.required_by})"


class UnsatisfiableError(Exception):
    """No choice of versions satisfies the requirements in ``failures``."""

    def __init__(self, failures: Sequence[PackageRequirement]) -> None:
        self.failures = list(failures)
        details = ", ".join(str(f) for f in self.failures) or "no requirement identified"
        super().__init__(f"Version requirements cannot be satisfied: {details}")


@dataclass
class DependencySolver:
    """Collects package versions and requirements, then picks one version per package.

    All dependencies are assumed to have been found before solving.
    """

    packages: dict[str, list[Hashable]] = field(default_factory=dict)
    requirements: list[PackageRequirement] = field(default_factory=list)

    def add_package(self, name: str, version: Hashable) -> None:
        versions = self.packages.setdefault(name, [])
        if version not in versions:
            versions.append(version)

    def add_requirement(self, package: str, requirement: Requirement, required_by: str) -> None:
        self.requirements.append(PackageRequirement(package, requirement, required_by))

    def _variables(self) -> dict[tuple[str, Hashable], int]:
        pairs = (
            (name, version) for name, versions in self.packages.items() for version in versions
        )
        return {pair: var for var, pair in enumerate(pairs, start=1)}

    def _clauses(
        self, variables: dict[tuple[str, Hashable], int]
    ) -> tuple[list[list[int]], dict[int, int]]:
        clauses: list[list[int]] = []
        clause_to_req: dict[int, int] = {}

        # At most one version of each package may be selected.
        for name, versions in self.packages.items():
            unique = sorted(set(versions))
            for i, first in enumerate(unique):
                for second in unique[i + 1 :]:
                    clauses.append([-variables[(name, first)], -variables[(name, second)]])

        # At least one satisfying version of each required package must be selected.
        for req_index, req in enumerate(self.requirements):
            satisfying = [
                variables[(req.package, version)]
                for version in self.packages.get(req.package, [])
                if req.requirement.is_satisfied(version)
            ]
            # An empty clause makes the formula unsatisfiable.
            clauses.append(satisfying)
            clause_to_req[len(clauses) - 1] = req_index

        return clauses, clause_to_req

    def _minimal_unsatisfiable_subset(
        self, clauses: list[list[int]], clause_to_req: dict[int, int], num_vars: int
    ) -> list[PackageRequirement]:
        current = [(idx, clause) for idx, clause in enumerate(clauses) if idx in clause_to_req]
        others = [clause for idx, clause in enumerate(clauses) if idx not in clause_to_req]

        i = 0
        while i < len(current):
            test = [clause for j, (_, clause) in enumerate(current) if j != i] + others
            if solve_formula(test, num_vars):
                # Needed for the conflict.
                i += 1
            else:
                del current[i]

        return [self.requirements[clause_to_req[idx]] for idx, _ in current]

    def _failed_requirements(
        self, clauses: list[list[int]], clause_to_req: dict[int, int], num_vars: int
    ) -> list[PackageRequirement]:
        direct = [
            self.requirements[clause_to_req[idx]]
            for idx, clause in enumerate(clauses)
            if not clause and idx in clause_to_req
        ]
        if direct:
            return direct
        return self._minimal_unsatisfiable_subset(clauses, clause_to_req, num_vars)

    def solve(self) -> dict[str, Hashable]:
        """Return the chosen version of each package.

        Raises UnsatisfiableError listing the requirements that conflict.
        """
        logger.debug(
            "Solving dependencies for %d packages and %d version requirements",
            len(self.packages),
            len(self.requirements),
        )
        variables = self._variables()
        if not variables:
            return {}
        clauses, clause_to_req = self._clauses(variables)
        by_var = {var: pair for pair, var in variables.items()}

        logger.debug("Starting SAT solving")
        assignment = solve_formula(clauses, len(by_var))
        if not assignment:
            raise UnsatisfiableError(
                self._failed_requirements(clauses, clause_to_req, len(by_var))
            )

        return {
            by_var[var][0]: by_var[var][1] for var, value in assignment.items() if value
        }