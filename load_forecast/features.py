"""
Feature engineering for load forecasting.

Lag features are looked up by timestamp rather than by row position, since
the joined load/weather table has missing hours and a fixed row-count
lookback would misalign.
"""
import numpy as np
import pandas as pd
from typing import Dict, Optional, Union


DATE_COLUMN = 'Date'

# name -> offset
DEFAULT_LAGS: Dict[str, pd.Timedelta] = {
    'PriorDay': pd.Timedelta(hours=24),
    'PriorHour': pd.Timedelta(hours=1),
    'PriorWeek': pd.Timedelta(hours=168),
}

FEATURE_COLUMNS = [
    'Hour', 'Month', 'DayOfWeek', 'isWeekend',
    'Temp', 'DewPnt',
    'PriorDay', 'PriorHour', 'PriorWeek',
]
TARGET_COLUMNS = ['Load']


def _as_offset(offset: Union[pd.Timedelta, int, float]) -> pd.Timedelta:
    if isinstance(offset, (int, float, np.integer, np.floating)):
        offset = pd.Timedelta(hours=offset)
    else:
        offset = pd.Timedelta(offset)
    if offset < pd.Timedelta(0):
        raise ValueError(f"Lag offset must not be negative, got {offset}")
    return offset


def _timestamps(table: pd.DataFrame, time_column: str) -> pd.DatetimeIndex:
    if time_column in table.columns:
        return pd.DatetimeIndex(table[time_column])
    if isinstance(table.index, pd.DatetimeIndex):
        return table.index
    raise KeyError(f"No '{time_column}' column or DatetimeIndex in table")


def compute_lag(table: pd.DataFrame, target_field: str,
                offset: Union[pd.Timedelta, int, float],
                time_column: str = DATE_COLUMN,
                name: Optional[str] = None) -> pd.Series:
    """
    Look up the value of a field a fixed time offset in the past.

    Args:
        table: Records keyed by unique timestamps (column or DatetimeIndex)
        target_field: Column to read the lagged value from
        offset: Lookback duration; plain numbers are hours
        time_column: Name of the timestamp column
        name: Name of the returned series (defaults to ``target_field``)

    Returns:
        Nullable ``Float64`` series aligned with ``table``. A row's value is
        missing when no record exists exactly ``offset`` earlier, or when
        that record's field is missing.
    """
    if target_field not in table.columns:
        raise KeyError(f"Column '{target_field}' not found in table")

    offset = _as_offset(offset)
    timestamps = _timestamps(table, time_column)
    values = table[target_field].astype('Float64')

    lookup = dict(zip(timestamps, values))
    lagged = [lookup.get(ts - offset, pd.NA) for ts in timestamps]

    return pd.Series(lagged, index=table.index, dtype='Float64',
                     name=name or target_field)


def add_lag_features(table: pd.DataFrame, target_field: str = 'Load',
                     lags: Optional[Dict[str, pd.Timedelta]] = None,
                     time_column: str = DATE_COLUMN) -> pd.DataFrame:
    """
    Add one lag column per entry of ``lags`` (column name -> offset).
    """
    if lags is None:
        lags = DEFAULT_LAGS

    df = table.copy()
    for column, offset in lags.items():
        df[column] = compute_lag(table, target_field, offset,
                                 time_column=time_column, name=column)
    return df


def add_calendar_features(table: pd.DataFrame,
                          time_column: str = DATE_COLUMN) -> pd.DataFrame:
    """
    Break the timestamp into separately varying parts.

    DayOfWeek counts from Sunday = 1 to Saturday = 7, so the weekend is
    {1, 7}.
    """
    df = table.copy()
    dates = pd.Series(_timestamps(table, time_column), index=table.index)

    df['Hour'] = dates.dt.hour
    df['Month'] = dates.dt.month
    df['Year'] = dates.dt.year
    df['DayOfWeek'] = (dates.dt.dayofweek + 1) % 7 + 1
    df['isWeekend'] = df['DayOfWeek'].isin([1, 7])
    return df


def split_temperature(table: pd.DataFrame,
                      column: str = 'Temperature') -> pd.DataFrame:
    """
    Pull the (temperature, dew point) vector column apart into ``Temp`` and
    ``DewPnt``.
    """
    if column not in table.columns:
        raise KeyError(f"Column '{column}' not found in table")

    # short or missing cells pad with NaN
    pairs = [
        (tuple(cell) + (np.nan, np.nan))[:2] if pd.api.types.is_list_like(cell)
        else (np.nan, np.nan)
        for cell in table[column]
    ]
    pairs = np.array(pairs, dtype=float).reshape(-1, 2)

    df = table.drop(columns=[column])
    df['Temp'] = pd.array(pairs[:, 0], dtype='Float64')
    df['DewPnt'] = pd.array(pairs[:, 1], dtype='Float64')
    return df


def build_features(table: pd.DataFrame, target_field: str = 'Load',
                   temperature_column: str = 'Temperature') -> pd.DataFrame:
    """
    Create all model predictors for a table of Date / Load / Temperature.

    Args:
        table: Zone model data
        target_field: Series used for the lag features
        temperature_column: Vector column holding temperature and dew point

    Returns:
        New DataFrame with calendar, weather and lag columns added
    """
    df = add_calendar_features(table)
    df = split_temperature(df, temperature_column)
    df = add_lag_features(df, target_field)

    print(f"Features created. Shape: {df.shape}")
    return df
