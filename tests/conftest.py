"""Global pytest fixtures and configuration."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def make_series(start: datetime, step: timedelta, count: int):
    """Evenly spaced sample timestamps."""
    return [start + step * i for i in range(count)]


@pytest.fixture
def hour_series():
    """13 samples, 5 minutes apart (60 minute span)."""
    return make_series(datetime(2024, 3, 5, 14, 0), timedelta(minutes=5), 13)


@pytest.fixture
def day_series():
    """25 hourly samples starting mid-afternoon (24 hour span)."""
    return make_series(datetime(2024, 3, 5, 15, 0), timedelta(hours=1), 25)


@pytest.fixture
def week_series():
    """8 daily samples (7 day span)."""
    return make_series(datetime(2024, 3, 1, 12, 0), timedelta(days=1), 8)


@pytest.fixture
def month_series():
    """31 daily samples (30 day span)."""
    return make_series(datetime(2024, 3, 1, 12, 0), timedelta(days=1), 31)


@pytest.fixture
def sample_breakdown():
    """Version breakdown as returned by the snapshot provider."""
    return [
        {"version": "3374.2.5", "percentage": 4.0},
        {"version": "3510.2.0", "percentage": 55.0},
        {"version": "3602.0.0", "percentage": 12.0},
        {"version": "3227.2.4", "percentage": 3.0},
        {"version": "3510.1.0", "percentage": 26.0},
    ]


@pytest.fixture
def version_count_timeline():
    """{timestamp: {version: instances}} for three points."""
    return {
        "2024-03-05T00:00:00Z": {"3510.2.0": 10, "3374.2.5": 30, "": 1},
        "2024-03-05T01:00:00Z": {"3510.2.0": 25, "3374.2.5": 15, "": 1},
        "2024-03-05T02:00:00Z": {"3510.2.0": 36, "3374.2.5": 4, "": 1},
    }


@pytest.fixture
def status_count_timeline():
    """{timestamp: {status: {version: instances}}} for two points."""
    return {
        "2024-03-05T00:00:00Z": {
            "0": {"3374.2.5": 2},
            "4": {"3374.2.5": 20, "3510.2.0": 5},
            "7": {"3510.2.0": 8},
            "3": {"3510.2.0": 1},
        },
        "2024-03-05T01:00:00Z": {
            "0": {"3374.2.5": 1},
            "4": {"3374.2.5": 12, "3510.2.0": 17},
            "7": {"3510.2.0": 2},
            "3": {"3510.2.0": 3},
        },
    }
