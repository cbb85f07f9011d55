"""
Purchase plan and CO2 report for a selection of projects.

The selection is first collapsed into one record per project id; the CO2
report then simulates the projects year by year, dropping each one once its
duration is used up.
"""

import typing
from datetime import date

import pandas as pd

from .models import AggregatedProject, Project, Term


def _group_units(selection: typing.Sequence[Project]) -> pd.DataFrame:
    """One row per project id, in order of first appearance, with its unit count."""
    frame = pd.DataFrame(
        {
            'id': [project.id for project in selection],
            'price': [project.price for project in selection],
            'yearly_co2_vol': [project.yearly_co2_vol for project in selection],
            'std_time': [project.std_time for project in selection],
        }
    )
    return (
        frame.groupby('id', sort=False)
        .agg(
            units=('price', 'size'),
            price=('price', 'first'),
            yearly_co2_vol=('yearly_co2_vol', 'first'),
            std_time=('std_time', 'first'),
        )
        .reset_index()
    )


def aggregate(selection: typing.Sequence[Project]) -> list[AggregatedProject]:
    """
    Collapse a selection into one record per project id.

    Parameters
    ----------
    selection : Sequence[Project]
        Selection where repeated ids stand for several units.

    Returns
    -------
    list[AggregatedProject]
        Unit count, yearly CO2 volume of all units and remaining duration per
        id. Empty for an empty selection.
    """
    if not selection:
        return []
    return [
        AggregatedProject(
            id=row.id,
            count=int(row.units),
            total_co2_captured=float(row.yearly_co2_vol) * int(row.units),
            remaining_std_time=float(row.std_time),
        )
        for row in _group_units(selection).itertuples(index=False)
    ]


def generate_purchase_plan(selection: typing.Sequence[Project]) -> list[dict]:
    """
    Build the purchase plan: units and total price per project id.

    An empty selection gives a single empty record.
    """
    if not selection:
        print('⚠ Warning: no projects selected, purchase plan is empty')
        return [{}]
    return [
        {
            'project_id': row.id,
            'num_units': int(row.units),
            'price': round(float(row.price) * int(row.units), 1),
        }
        for row in _group_units(selection).itertuples(index=False)
    ]


def years_to_report(years: int | None, start_year: int | None = None) -> list[int]:
    """
    Consecutive calendar years covered by the CO2 report.

    Parameters
    ----------
    years : int or None
        Number of years to report on.
    start_year : int, optional
        First year of the report. Defaults to the current year.

    Returns
    -------
    list[int]
        ``years`` consecutive years, or an empty list when ``years`` is
        missing or smaller than 1.
    """
    if years is None or years < 1:
        print(f'⚠ Warning: cannot report on {years} years, at least 1 year is required')
        return []
    if start_year is None:
        start_year = date.today().year
    return list(range(start_year, start_year + years))


def generate_co2_report(
    selection: typing.Sequence[Project],
    years: int | None,
    start_year: int | None = None,
) -> list[dict]:
    """
    Project the CO2 captured each year by the selection.

    Every year the projects whose duration has run out are dropped, the
    yearly volume of the remaining ones is summed, and their remaining
    duration shrinks by one year.

    Parameters
    ----------
    selection : Sequence[Project]
        Selection where repeated ids stand for several units.
    years : int or None
        Number of years to report on.
    start_year : int, optional
        First year of the report. Defaults to the current year.

    Returns
    -------
    list[dict]
        ``{'year', 'co2_captured'}`` per year, or a single empty record when
        the selection or the year range is empty.
    """
    report_years = years_to_report(years, start_year)
    active = aggregate(selection)
    if not active or not report_years:
        print('⚠ Warning: nothing to report, CO2 report is empty')
        return [{}]

    report = []
    for year in report_years:
        active = [project for project in active if not project.finished]
        captured = sum((project.total_co2_captured for project in active), 0.0)
        report.append({'year': year, 'co2_captured': round(captured, 1)})
        for project in active:
            project.remaining_std_time -= 1
            if project.remaining_std_time < 0:
                project.finished = True
    return report


def build_output(selection: typing.Sequence[Project], years: int | None) -> dict:
    """Purchase plan and CO2 report in the shape written to the output file."""
    return {
        'purchase_plan': generate_purchase_plan(selection),
        'co2_report': generate_co2_report(selection, years),
    }


def new_best_summary(value: float, spent: float, continents: int) -> str:
    return (
        f'  New best selection: {value:,.4f} CO2 units per year, '
        f'{spent:,.2f} money units spent, {continents} continents'
    )


def selection_summary(
    selection: typing.Sequence[Project], value: float, spent: float, available: float
) -> str:
    """Describe the best selection for the run log."""
    units = ', '.join(
        f'{project.id} x{project.count}' for project in aggregate(selection)
    )
    return '\n'.join(
        [
            'Best selection:',
            f'  {units or "(none)"}',
            f'  Efficiency achieved (in units of CO2 per year): {value:,.4f}',
            f'  Money spent over money available: {spent:,.2f} / {available:,.2f}',
        ]
    )


def group_representation_summary(expenditures: typing.Mapping[Term, float | None], spent: float) -> str:
    """Describe the money spent per term and its share of the total."""
    lines = ['Representation per group:']
    for term in Term:
        amount = expenditures.get(term) or 0.0
        share = (amount / spent) * 100 if spent > 0 else 0.0
        lines.append(f'  - {term.value}: {amount:,.2f} money units ({share:.2f}%)')
    return '\n'.join(lines)
