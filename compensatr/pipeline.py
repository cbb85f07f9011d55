"""
End-to-end compensation pipeline.

Loads project records, validates and enriches them, searches for the best
selection under the configured budget and constraints, and builds the
purchase plan and CO2 report.
"""

import json
import typing
from pathlib import Path

import numpy as np
import pandas as pd
from pandera.errors import SchemaError

from .common import (
    add_missing_columns,
    calculate_efficiency,
    exclude_zero_duration,
    harmonize_continents,
    load_time_units,
    normalize_time,
    validate,
)
from .config import CompensatrConfig
from .constraints import group_expenditures
from .errors import EmptyInputError, InputError, InvalidProjectError
from .models import Project, enriched_project_schema, project_schema
from .report import build_output, group_representation_summary, selection_summary
from .search import search


def load_projects(path: Path) -> pd.DataFrame:
    """
    Read project records from a JSON file holding an array of objects.

    Raises
    ------
    InputError
        If the file cannot be read, is not valid JSON or is not an array.
    """
    try:
        records = json.loads(Path(path).read_text())
    except OSError as e:
        raise InputError(f'Error reading file {path}: {e}') from e
    except json.JSONDecodeError as e:
        raise InputError(f'Error parsing data in {path}: {e}') from e
    if not isinstance(records, list):
        raise InputError(f'Expected an array of projects in {path}, got {type(records).__name__}')
    return pd.DataFrame.from_records(records)


def prepare_projects(projects_df: pd.DataFrame, time_units: dict | None = None) -> pd.DataFrame:
    """
    Validate raw projects and add their normalised duration and yearly CO2 volume.

    Parameters
    ----------
    projects_df : pd.DataFrame
        Raw project records.
    time_units : dict, optional
        Time unit conversion table. If None, loads from config.

    Returns
    -------
    pd.DataFrame
        Projects matching the enriched project schema.

    Raises
    ------
    EmptyInputError
        If there are no projects.
    InvalidProjectError
        If a record violates the project schema.
    InvalidTimeUnitError
        If any time unit is not recognised.
    """
    if projects_df.empty:
        raise EmptyInputError('No projects found in input')
    if time_units is None:
        time_units = load_time_units()

    print(f'Validating {len(projects_df):,} projects...')
    try:
        projects = (
            projects_df.copy()
            .pipe(add_missing_columns, schema=project_schema)
            .pipe(validate, schema=project_schema)
        )
    except SchemaError as e:
        raise InvalidProjectError(str(e)) from e

    print('Enriching projects...')
    projects = (
        projects.pipe(harmonize_continents)
        .pipe(normalize_time, time_units=time_units)
        .pipe(calculate_efficiency)
        .pipe(validate, schema=enriched_project_schema)
    )
    return projects


def build_pool(enriched_df: pd.DataFrame) -> list[Project]:
    """Turn enriched projects into the records the search draws from."""
    usable = enriched_df.pipe(exclude_zero_duration)
    return [Project.from_record(record) for record in usable.to_dict('records')]


def compensate(
    projects: pd.DataFrame | typing.Iterable[dict],
    config: CompensatrConfig,
    rng: np.random.Generator | None = None,
) -> dict:
    """
    Select projects for the budget and report on them.

    Parameters
    ----------
    projects : pd.DataFrame or iterable of dict
        Raw project records.
    config : CompensatrConfig
        Budget, constraints and search settings.
    rng : np.random.Generator, optional
        Random source for the search.

    Returns
    -------
    dict
        ``{'purchase_plan': [...], 'co2_report': [...]}``.
    """
    if not isinstance(projects, pd.DataFrame):
        projects = pd.DataFrame.from_records(list(projects))

    enriched = prepare_projects(projects)
    pool = build_pool(enriched)
    best = search(pool, config, rng)

    print('\n' + '-' * 40)
    print(selection_summary(best.selection, best.value, best.spent, config.money))
    if best.selection:
        print(group_representation_summary(group_expenditures(best.selection), best.spent))

    return build_output(best.selection, config.target_years)


def write_output(data: dict, output_path: Path) -> None:
    """Write the purchase plan and CO2 report as pretty-printed JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)


def run_pipeline(
    projects_path: Path,
    config: CompensatrConfig,
    output_path: Path | None = None,
    rng: np.random.Generator | None = None,
) -> dict:
    """
    Run the full compensation pipeline.

    Parameters
    ----------
    projects_path : Path
        JSON file with the project records.
    config : CompensatrConfig
        Budget, constraints and search settings.
    output_path : Path, optional
        File to write the result to.
    rng : np.random.Generator, optional
        Random source for the search.

    Returns
    -------
    dict
        ``{'purchase_plan': [...], 'co2_report': [...]}``.
    """
    print('=' * 60)
    print('Compensatr Project Selection')
    print('=' * 60)

    print(f'\nLoading projects from: {projects_path}')
    projects_df = load_projects(projects_path)
    print(f'  Loaded {len(projects_df):,} project records')

    print('\n' + '-' * 40)
    result = compensate(projects_df, config, rng)

    if output_path:
        print('\n' + '-' * 40)
        print(f'Saving report to: {output_path}')
        write_output(result, output_path)

    print('\n' + '=' * 60)
    print('Pipeline complete!')
    print('=' * 60)

    return result
