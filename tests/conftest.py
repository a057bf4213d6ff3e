"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine

from persistence.engine import init_schema


@pytest.fixture
def phone_table():
    return [
        {"Name": "A", "Cost": 250, "Quality": 16},
        {"Name": "B", "Cost": 200, "Quality": 16},
        {"Name": "C", "Cost": 300, "Quality": 32},
    ]


@pytest.fixture
def model_table():
    return [
        {"Model": "M1", "P1": 0.67, "P2": 0.45, "P3": 6.5, "P4": 42.6, "P5": 12.56},
        {"Model": "M2", "P1": 0.6, "P2": 0.36, "P3": 3.6, "P4": 53.3, "P5": 14.47},
        {"Model": "M3", "P1": 0.82, "P2": 0.67, "P3": 3.8, "P4": 63.1, "P5": 17.1},
        {"Model": "M4", "P1": 0.6, "P2": 0.36, "P3": 3.5, "P4": 69.2, "P5": 18.42},
        {"Model": "M5", "P1": 0.76, "P2": 0.58, "P3": 4.8, "P4": 43.0, "P5": 12.29},
    ]


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'runs.db'}", future=True)
    init_schema(engine)
    yield engine
    engine.dispose()
