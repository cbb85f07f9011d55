"""
Pandera schemas and record types for carbon offset projects.

Raw project tables are validated against ``project_schema`` before
enrichment and against ``enriched_project_schema`` afterwards. The search
works on ``Project`` records built from the enriched table.
"""

import enum
from dataclasses import dataclass

import pandas as pd
import pandera as pa


class Term(str, enum.Enum):
    """Term category of a project, used for proportional spend constraints."""

    SHORT = 'short_term'
    MEDIUM = 'medium_term'
    LONG = 'long_term'


project_schema = pa.DataFrameSchema(
    {
        'id': pa.Column(pa.String, nullable=False, coerce=True),
        'time': pa.Column(pa.Float, pa.Check.greater_than_or_equal_to(0), nullable=False, coerce=True),
        'time_unit': pa.Column(nullable=True),
        'co2_volume': pa.Column(
            pa.Float, pa.Check.greater_than_or_equal_to(0), nullable=False, coerce=True
        ),
        'price': pa.Column(pa.Float, pa.Check.greater_than(0), nullable=False, coerce=True),
        'group': pa.Column(
            pa.String, pa.Check.isin([term.value for term in Term]), nullable=False, coerce=True
        ),
        'continent': pa.Column(nullable=True),
        'country': pa.Column(nullable=True, required=False),
        'min_units': pa.Column(
            pd.Int64Dtype(), pa.Check.greater_than_or_equal_to(0), nullable=True, coerce=True
        ),
        'max_units': pa.Column(
            pd.Int64Dtype(), pa.Check.greater_than_or_equal_to(0), nullable=True, coerce=True
        ),
    }
)


enriched_project_schema = project_schema.add_columns(
    {
        'std_time': pa.Column(pa.Float, pa.Check.greater_than_or_equal_to(0), nullable=False),
        'yearly_co2_vol': pa.Column(
            pa.Float, pa.Check.greater_than_or_equal_to(0), nullable=False
        ),
    }
)


def _optional(value):
    if value is None or pd.isna(value):
        return None
    return value


@dataclass(frozen=True)
class Project:
    """One purchasable unit of a carbon offset project."""

    id: str
    price: float
    time: float
    time_unit: str
    co2_volume: float
    group: Term
    std_time: float
    yearly_co2_vol: float
    continent: str | None = None
    min_units: int | None = None
    max_units: int | None = None

    @classmethod
    def from_record(cls, record: dict) -> 'Project':
        min_units = _optional(record.get('min_units'))
        max_units = _optional(record.get('max_units'))
        return cls(
            id=str(record['id']),
            price=float(record['price']),
            time=float(record['time']),
            time_unit=str(record['time_unit']),
            co2_volume=float(record['co2_volume']),
            group=Term(record['group']),
            std_time=float(record['std_time']),
            yearly_co2_vol=float(record['yearly_co2_vol']),
            continent=_optional(record.get('continent')),
            min_units=None if min_units is None else int(min_units),
            max_units=None if max_units is None else int(max_units),
        )


@dataclass
class AggregatedProject:
    """Per-id totals of a selection, decayed year by year in the CO2 report."""

    id: str
    count: int
    total_co2_captured: float
    remaining_std_time: float
    finished: bool = False
