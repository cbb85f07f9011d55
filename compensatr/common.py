"""
Common utilities for preparing carbon offset project tables.

DataFrame methods registered here are chained with ``.pipe`` by the
pipeline: schema completion, validation, time normalisation, efficiency
and continent harmonisation.
"""

import json
from pathlib import Path

import country_converter as coco
import pandas as pd
import pandas_flavor as pf
import pandera as pa

from .errors import InvalidTimeUnitError


# Config file paths
CONFIG_DIR = Path(__file__).parent / 'configs'
TIME_UNITS_PATH = CONFIG_DIR / 'time-units.json'
DEFAULTS_PATH = CONFIG_DIR / 'defaults.json'


def load_time_units() -> dict:
    """Load the time unit to years-per-unit conversion table from config."""
    return json.loads(TIME_UNITS_PATH.read_text())


def load_defaults() -> dict:
    """Load default run parameters from config."""
    return json.loads(DEFAULTS_PATH.read_text())


def canonical_time_unit(unit, time_units: dict) -> str | None:
    """
    Map a raw time unit onto a key of the conversion table.

    Matching ignores case and surrounding whitespace and accepts plurals
    ('days' -> 'day'). Returns None when the unit is not recognised.
    """
    if not isinstance(unit, str):
        return None
    unit = unit.strip().lower()
    if unit in time_units:
        return unit
    if unit.endswith('s') and unit[:-1] in time_units:
        return unit[:-1]
    return None


def _clean_label(value) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


@pf.register_dataframe_method
def add_missing_columns(df: pd.DataFrame, *, schema: pa.DataFrameSchema) -> pd.DataFrame:
    """
    Add any required schema column missing from the DataFrame, filled with nulls.

    Parameters
    ----------
    df : pd.DataFrame
        Input DataFrame.
    schema : pa.DataFrameSchema
        Pandera schema listing the expected columns.

    Returns
    -------
    pd.DataFrame
        DataFrame with every required schema column present.
    """
    for column, spec in schema.columns.items():
        if column not in df.columns and spec.required:
            df[column] = pd.Series([None] * len(df), index=df.index, dtype=object)
    return df


@pf.register_dataframe_method
def validate(df: pd.DataFrame, schema: pa.DataFrameSchema) -> pd.DataFrame:
    """
    Validate the DataFrame against a given Pandera schema.

    Parameters
    ----------
    df : pd.DataFrame
        Input DataFrame.
    schema : pa.DataFrameSchema
        Pandera schema to validate against.

    Returns
    -------
    pd.DataFrame
        Validated DataFrame restricted to the schema columns, sorted by name.
    """
    results = schema.validate(df)
    keys = sorted(column for column in schema.columns if column in results.columns)
    return results[keys]


@pf.register_dataframe_method
def normalize_time(df: pd.DataFrame, *, time_units: dict) -> pd.DataFrame:
    """
    Add the project duration expressed in years as 'std_time'.

    The batch is rejected as a whole if any project carries a time unit
    outside ``time_units``; no column is added in that case.

    Parameters
    ----------
    df : pd.DataFrame
        Projects with 'id', 'time' and 'time_unit' columns.
    time_units : dict
        Mapping of time unit to the number of such units in one year.

    Returns
    -------
    pd.DataFrame
        DataFrame with canonical 'time_unit' and a 'std_time' column rounded to 4 decimals.

    Raises
    ------
    InvalidTimeUnitError
        If at least one time unit is not recognised.
    """
    units = df['time_unit'].map(lambda unit: canonical_time_unit(unit, time_units))
    invalid = units.isna()
    if invalid.any():
        raise InvalidTimeUnitError(df.loc[invalid, 'id'].tolist())

    factors = units.map(time_units).astype(float)
    df['time_unit'] = units
    df['std_time'] = (df['time'].astype(float) / factors).round(4)
    return df


@pf.register_dataframe_method
def calculate_efficiency(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add the CO2 captured per year by one unit as 'yearly_co2_vol'.

    Projects without duration ('std_time' of 0) get a yearly volume of 0.

    Parameters
    ----------
    df : pd.DataFrame
        Projects with 'co2_volume' and 'std_time' columns.

    Returns
    -------
    pd.DataFrame
        DataFrame with a 'yearly_co2_vol' column rounded to 4 decimals.
    """
    std_time = df['std_time'].astype(float)
    yearly = df['co2_volume'].astype(float) / std_time.where(std_time > 0)
    df['yearly_co2_vol'] = yearly.round(4).fillna(0.0)
    return df


@pf.register_dataframe_method
def harmonize_continents(df: pd.DataFrame, *, country_column: str = 'country') -> pd.DataFrame:
    """
    Clean continent labels and derive missing ones from country names.

    Parameters
    ----------
    df : pd.DataFrame
        Input DataFrame with a 'continent' column and optionally a country column.
    country_column : str, optional
        Column holding country names or codes (default is 'country').

    Returns
    -------
    pd.DataFrame
        DataFrame whose 'continent' column holds stripped strings or None.
    """
    if 'continent' not in df.columns:
        df['continent'] = None
    df['continent'] = pd.Series(
        [_clean_label(value) for value in df['continent']], index=df.index, dtype=object
    )

    if country_column not in df.columns:
        return df

    countries = df[country_column].map(_clean_label)
    mask = df['continent'].isna() & countries.notna()
    if not mask.any():
        return df

    print(f'Deriving continents from {country_column} for {int(mask.sum())} projects...')
    cc = coco.CountryConverter()
    derived = cc.pandas_convert(countries[mask].astype(str), to='continent')
    derived = derived.where(derived != 'not found')
    df.loc[mask, 'continent'] = pd.Series(
        [_clean_label(value) for value in derived], index=df.index[mask], dtype=object
    )
    return df


@pf.register_dataframe_method
def exclude_zero_duration(df: pd.DataFrame) -> pd.DataFrame:
    """
    Drop projects whose normalised duration is 0.

    Such projects have no meaningful yearly yield and cannot be selected.

    Parameters
    ----------
    df : pd.DataFrame
        Enriched projects with a 'std_time' column.

    Returns
    -------
    pd.DataFrame
        DataFrame without zero-duration projects.
    """
    zero = df['std_time'] <= 0
    if zero.any():
        print(
            f'⚠ Warning: excluding {int(zero.sum())} projects without duration: '
            f"{df.loc[zero, 'id'].tolist()}"
        )
    return df[~zero]
