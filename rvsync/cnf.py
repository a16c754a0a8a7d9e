"""A small DPLL-style solver for formulas in conjunctive normal form.

Variables are positive integers starting at 1. A literal is a variable, or its
negation written as a negative integer. A clause is a list of literals, at least
one of which must hold, and a formula is a list of clauses that must all hold.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

Literal = int
Clause = Sequence[Literal]
Formula = Sequence[Clause]
Assignment = Mapping[int, bool]

MAX_ITERATIONS = 100_000


def _literal_true(literal: Literal, assignment: Assignment) -> bool:
    """Whether the literal is assigned and holds."""
    value = assignment.get(abs(literal))
    if value is None:
        return False
    return value if literal > 0 else not value


def _literal_false(literal: Literal, assignment: Assignment) -> bool:
    """Whether the literal is assigned and does not hold."""
    value = assignment.get(abs(literal))
    if value is None:
        return False
    return not value if literal > 0 else value


def is_satisfied(formula: Formula, assignment: Assignment) -> bool:
    """Whether every clause has at least one literal that the assignment makes true."""
    return all(
        any(_literal_true(literal, assignment) for literal in clause) for clause in formula
    )


def most_constrained_variable(formula: Formula, assignment: Assignment, num_vars: int) -> int:
    """The unassigned variable appearing most often in unsatisfied clauses.

    Falls back to the first unassigned variable, and returns 0 when every
    variable is assigned.
    """
    counts: Counter[int] = Counter()
    for clause in formula:
        if any(_literal_true(literal, assignment) for literal in clause):
            continue
        counts.update(abs(lit) for lit in clause if abs(lit) not in assignment)

    unassigned = [var for var in range(1, num_vars + 1) if var not in assignment]
    if not unassigned:
        return 0
    best_var, max_count = 0, 0
    for var in unassigned:
        if counts[var] > max_count:
            best_var, max_count = var, counts[var]
    return best_var or unassigned[0]


def unit_propagation(
    formula: Formula, assignment: Assignment
) -> list[tuple[int, bool]] | None:
    """Repeatedly force the last unassigned literal of otherwise false clauses.

    Returns the new (variable, value) pairs in the order they were set, or
    None when a clause cannot be satisfied any more.
    """
    current = dict(assignment)
    result: list[tuple[int, bool]] = []
    changed = True
    while changed:
        changed = False
        for clause in formula:
            if not clause:
                return None
            unassigned = [lit for lit in clause if abs(lit) not in current]
            if any(_literal_true(lit, current) for lit in clause):
                continue
            if not unassigned:
                return None
            if len(unassigned) == 1:
                literal = unassigned[0]
                var, value = abs(literal), literal > 0
                current[var] = value
                result.append((var, value))
                changed = True
    return result


def _has_conflict(formula: Formula, assignment: Assignment) -> bool:
    return any(
        all(_literal_false(literal, assignment) for literal in clause) for clause in formula
    )


def solve_formula(formula: Formula, num_vars: int) -> dict[int, bool]:
    """Find an assignment of variables 1..num_vars that satisfies the formula.

    Returns an empty dict when no assignment is found.
    """
    assignment: dict[int, bool] = {}
    decisions: list[tuple[int, bool]] = []

    initial = unit_propagation(formula, assignment)
    if initial is None:
        return {}
    assignment.update(initial)

    for _ in range(MAX_ITERATIONS):
        if len(assignment) == num_vars and is_satisfied(formula, assignment):
            return assignment

        if _has_conflict(formula, assignment):
            if not decisions:
                return {}
            var, value = decisions.pop()
            del assignment[var]
            if value:
                # True was tried first, so try false now.
                assignment[var] = False
                decisions.append((var, False))
                propagated = unit_propagation(formula, assignment)
                if propagated is None:
                    del assignment[var]
                    decisions.pop()
                else:
                    assignment.update(propagated)
            continue

        next_var = most_constrained_variable(formula, assignment, num_vars)
        if next_var == 0 and len(assignment) < num_vars:
            logger.error("Internal solver error: no variable to select but not all assigned")
            break

        assignment[next_var] = True
        decisions.append((next_var, True))
        propagated = unit_propagation(formula, assignment)
        if propagated is not None:
            assignment.update(propagated)
            continue

        del assignment[next_var]
        decisions.pop()
        assignment[next_var] = False
        decisions.append((next_var, False))
        propagated = unit_propagation(formula, assignment)
        if propagated is not None:
            assignment.update(propagated)
        else:
            del assignment[next_var]
            decisions.pop()

    logger.warning("Solver hit iteration limit: possible infinite loop")
    return {}