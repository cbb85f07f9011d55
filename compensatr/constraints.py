"""
Constraint predicates evaluated on a finished selection.

A selection is a sequence of ``Project`` records where repeats of the same
id stand for several purchased units.
"""

import typing
from collections import Counter
from dataclasses import dataclass, field

from .models import Project, Term

Selection = typing.Sequence[Project]


def meets_min_units(count: int, project: Project) -> bool:
    """Return True if ``count`` units satisfy the project's minimum (none means no minimum)."""
    return project.min_units is None or count >= project.min_units


def meets_max_units(count: int, project: Project) -> bool:
    """Return True if ``count`` units satisfy the project's maximum (none means no maximum)."""
    return project.max_units is None or count <= project.max_units


def valid_project_constraints(selection: Selection) -> bool:
    """
    Check the repetition bounds of every project in the selection.

    Parameters
    ----------
    selection : Sequence[Project]
        Candidate selection.

    Returns
    -------
    bool
        False as soon as one project's unit count falls outside its bounds.
    """
    counts = Counter(project.id for project in selection)
    for project in selection:
        count = counts[project.id]
        if not meets_min_units(count, project) or not meets_max_units(count, project):
            return False
    return True


def count_continents(selection: Selection) -> int:
    """Number of distinct known continents; projects without continent are not counted."""
    return len({project.continent for project in selection if project.continent is not None})


def valid_min_continents(selection: Selection, min_continents: int) -> bool:
    return count_continents(selection) >= min_continents


def sum_by_group(selection: Selection, term: Term) -> float | None:
    """
    Sum the unit prices of the selection's projects belonging to ``term``.

    Returns None (not 0) when no project of the term is present.
    """
    prices = [project.price for project in selection if project.group == term]
    if not prices:
        return None
    return float(sum(prices))


def group_expenditures(selection: Selection) -> dict[Term, float | None]:
    """Money spent per term, None for terms absent from the selection."""
    return {term: sum_by_group(selection, term) for term in Term}


def meets_min_spend(spent: float | None, total: float, percent: float) -> bool:
    """
    Check that ``spent`` is at least ``percent`` % of ``total``.

    A non-positive requirement is always met; a missing expenditure never
    meets a positive one.
    """
    if percent <= 0:
        return True
    if spent is None:
        return False
    return spent >= total * (percent / 100)


def valid_min_groups(selection: Selection, min_percents: typing.Mapping[Term, float]) -> bool:
    """
    Check the minimum share of spend of every term with a positive requirement.

    The total is the money spent across the terms present in the selection.

    Parameters
    ----------
    selection : Sequence[Project]
        Candidate selection.
    min_percents : Mapping[Term, float]
        Minimum percentage of spend per term; terms with 0 are unconstrained.

    Returns
    -------
    bool
        True if every constrained term reaches its share.
    """
    constrained = {term: percent for term, percent in min_percents.items() if percent > 0}
    if not constrained:
        return True

    expenditures = group_expenditures(selection)
    total = sum(spent for spent in expenditures.values() if spent is not None)
    return all(
        meets_min_spend(expenditures[Term(term)], total, percent)
        for term, percent in constrained.items()
    )


@dataclass(frozen=True)
class Constraints:
    min_continents: int = 1
    min_percents: typing.Mapping[Term, float] = field(default_factory=dict)


def is_valid(selection: Selection, constraints: Constraints) -> bool:
    """Return True if the selection satisfies every constraint family."""
    return (
        valid_project_constraints(selection)
        and valid_min_continents(selection, constraints.min_continents)
        and valid_min_groups(selection, constraints.min_percents)
    )
