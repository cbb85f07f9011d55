"""Pytest configuration and shared fixtures."""

import json
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add the repository root and scripts to the Python path so imports work
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))
sys.path.insert(0, str(root_path / "scripts"))

from compensatr.config import CompensatrConfig
from compensatr.pipeline import build_pool, prepare_projects

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "projects.json"


@pytest.fixture
def fixture_path():
    return FIXTURE_PATH


@pytest.fixture
def raw_projects():
    """p1 (short term, 2 days), p2 (medium term, 6 months), p3 (long term, 5 years)."""
    return json.loads(FIXTURE_PATH.read_text())


@pytest.fixture
def raw_df(raw_projects):
    return pd.DataFrame.from_records(raw_projects)


@pytest.fixture
def enriched(raw_df):
    return prepare_projects(raw_df)


@pytest.fixture
def projects(enriched):
    return build_pool(enriched)


@pytest.fixture
def config():
    return CompensatrConfig(money=500, iterations=500, seed=42)
