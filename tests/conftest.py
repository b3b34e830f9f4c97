"""
Shared pytest fixtures for the load forecasting test suite.

All data is synthetic and deterministic; nothing reads from ``data/``.
"""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

BASE = pd.Timestamp("2012-01-02 00:00", tz="America/New_York")


def make_table(hours: list[int], loads: list[float | None]) -> pd.DataFrame:
    """Build a Date/Load table at the given hour offsets from BASE."""
    return pd.DataFrame({
        "Date": [BASE + pd.Timedelta(hours=h) for h in hours],
        "Load": pd.array(loads, dtype="Float64"),
    })


@pytest.fixture
def gapped_table() -> pd.DataFrame:
    """Hours 0, 1, 2, 4, 5 (hour 3 missing)."""
    return make_table([0, 1, 2, 4, 5], [10.0, 20.0, 30.0, 50.0, 60.0])


@pytest.fixture
def zone_table() -> pd.DataFrame:
    """Two weeks of hourly Date/Load/Temperature model data."""
    n = 24 * 14
    dates = pd.date_range(BASE, periods=n, freq="h")
    hours = np.arange(n)
    temp = 40 + 10 * np.sin(2 * np.pi * hours / 24)
    return pd.DataFrame({
        "Date": dates,
        "Load": 5000 + 500 * np.sin(2 * np.pi * (hours - 8) / 24),
        "Temperature": list(zip(temp, temp - 8)),
    })
