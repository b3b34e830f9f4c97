"""
Data loading and preparation module for load forecasting.
"""
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .features import DATE_COLUMN, FEATURE_COLUMNS, TARGET_COLUMNS


DEFAULT_TIMEZONE = 'America/New_York'
DEFAULT_ZONE = 'N_Y_C_'
DEFAULT_TEMPERATURE_COLUMN = 'TemperatureKLGA'


class DataLoader:
    """Class for loading the cleaned load and weather tables."""

    def __init__(self, load_path: Union[str, Path], weather_path: Union[str, Path],
                 timezone: str = DEFAULT_TIMEZONE, date_column: str = DATE_COLUMN):
        """
        Initialize the DataLoader.

        Args:
            load_path: Cleaned load table (.csv or pickled DataFrame)
            weather_path: Cleaned weather table (.csv or pickled DataFrame)
            timezone: Timezone all timestamps are expressed in
            date_column: Name of the timestamp column in both tables
        """
        self.load_path = Path(load_path)
        self.weather_path = Path(weather_path)
        self.timezone = timezone
        self.date_column = date_column
        self.data = None

    def read_table(self, path: Union[str, Path]) -> pd.DataFrame:
        """
        Read one cleaned table and normalize its timestamp column.

        Args:
            path: .csv, .pkl or .pickle file

        Returns:
            DataFrame with a timezone-aware timestamp column
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == '.csv':
            df = pd.read_csv(path)
        elif suffix in ('.pkl', '.pickle'):
            df = pd.read_pickle(path)
        else:
            raise ValueError(f"Unsupported file type '{suffix}' for {path}")

        if self.date_column not in df.columns:
            raise KeyError(f"{path} has no '{self.date_column}' column")

        df[self.date_column] = self._parse_dates(df[self.date_column])
        n_invalid = df[self.date_column].isna().sum()
        if n_invalid:
            print(f"Dropping {n_invalid} rows of {path.name} with invalid local timestamps")
            df = df.dropna(subset=[self.date_column]).reset_index(drop=True)
        return df

    def _parse_dates(self, values: pd.Series) -> pd.Series:
        try:
            dates = pd.to_datetime(values)
        except ValueError:
            dates = None
        if dates is None or not pd.api.types.is_datetime64_any_dtype(dates):
            # mixed UTC offsets, e.g. on either side of a DST change
            dates = pd.to_datetime(values, utc=True)

        if dates.dt.tz is not None:
            return dates.dt.tz_convert(self.timezone)
        try:
            # the repeated fall-back hour appears twice in time order
            return dates.dt.tz_localize(self.timezone, ambiguous='infer', nonexistent='NaT')
        except Exception:
            # repeated hour missing its pair or out of order
            return dates.dt.tz_localize(self.timezone, ambiguous='NaT', nonexistent='NaT')

    def load_weather(self, temperature_column: str = DEFAULT_TEMPERATURE_COLUMN) -> pd.DataFrame:
        """
        Read the weather table with temperature stored as a
        (temperature, dew point) vector per row.

        A CSV carries the dew point in its own column (``TemperatureKLGA``
        pairs with ``DewPointKLGA``); it is packed into the vector column.
        """
        weather = self.read_table(self.weather_path)
        dew_column = temperature_column.replace('Temperature', 'DewPoint', 1)
        if dew_column != temperature_column and dew_column in weather.columns:
            weather[temperature_column] = list(zip(weather[temperature_column],
                                                   weather.pop(dew_column)))
        return weather

    def load_data(self, temperature_column: str = DEFAULT_TEMPERATURE_COLUMN,
                  allow_synthetic: bool = True, zone: str = DEFAULT_ZONE) -> pd.DataFrame:
        """
        Load both tables and join them on timestamp.

        Args:
            temperature_column: Weather column holding temperature/dew point
            allow_synthetic: Fall back to synthetic data when a file is missing
            zone: Load column name used for synthetic data

        Returns:
            Inner-joined DataFrame
        """
        try:
            load = self.read_table(self.load_path)
            weather = self.load_weather(temperature_column)
        except FileNotFoundError as e:
            if not allow_synthetic:
                raise
            print(f"File not found: {e.filename}")
            print("Generating synthetic data for demonstration...")
            load, weather = self.generate_synthetic_data(zone=zone,
                                                         temperature_column=temperature_column)

        self.data = self.inner_join(load, weather, on=self.date_column)
        print(f"Data loaded successfully: {len(self.data)} records")
        return self.data

    def generate_synthetic_data(self, n_samples: int = 24 * 365 * 2,
                                missing_fraction: float = 0.01,
                                zone: str = DEFAULT_ZONE,
                                temperature_column: str = DEFAULT_TEMPERATURE_COLUMN,
                                seed: int = 0) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Generate synthetic load and weather tables.

        Args:
            n_samples: Number of hourly timestamps (default: two years)
            missing_fraction: Share of timestamps dropped from each table
            zone: Name of the load column
            temperature_column: Name of the weather vector column
            seed: Random seed

        Returns:
            Tuple of (load_table, weather_table)
        """
        rng = np.random.default_rng(seed)
        timestamps = pd.date_range(start='2011-01-01', periods=n_samples,
                                   freq='h', tz=self.timezone)
        hours = np.arange(n_samples)

        # Seasonal temperature (F) with a daily swing
        temperature = (55 - 20 * np.cos(2 * np.pi * hours / (24 * 365))
                       + 8 * np.sin(2 * np.pi * (hours - 9) / 24)
                       + rng.normal(0, 3, n_samples))
        dew_point = temperature - 10 - np.abs(rng.normal(0, 4, n_samples))

        # Load rises with heating and cooling demand, dips on weekends
        daily_pattern = 900 * np.sin(2 * np.pi * (hours - 8) / 24)
        weekend = np.isin(timestamps.dayofweek, [5, 6])
        load = (5500 + daily_pattern
                + 40 * np.abs(temperature - 62)
                - 600 * weekend
                + rng.normal(0, 120, n_samples))

        load_df = pd.DataFrame({self.date_column: timestamps, zone: load})
        weather_df = pd.DataFrame({
            self.date_column: timestamps,
            temperature_column: list(zip(temperature, dew_point)),
        })

        n_missing = int(n_samples * missing_fraction)
        if n_missing:
            load_df = load_df.drop(index=rng.choice(n_samples, n_missing, replace=False))
            weather_df = weather_df.drop(index=rng.choice(n_samples, n_missing, replace=False))

        print(f"Synthetic data generated: {len(load_df)} load records, "
              f"{len(weather_df)} weather records")
        return load_df.reset_index(drop=True), weather_df.reset_index(drop=True)

    @staticmethod
    def inner_join(load: pd.DataFrame, weather: pd.DataFrame,
                   on: str = DATE_COLUMN) -> pd.DataFrame:
        """
        Join the load and weather tables keeping only the timestamps that
        exist in both.
        """
        joined = pd.merge(load, weather, on=on, how='inner')
        return joined.sort_values(on).reset_index(drop=True)

    def select_zone(self, zone: str = DEFAULT_ZONE,
                    temperature_column: str = DEFAULT_TEMPERATURE_COLUMN,
                    data: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """
        Pull the data for a single zone into a table with general column
        names: Date, Load, Temperature.
        """
        if data is None:
            if self.data is None:
                raise ValueError("No data loaded. Call load_data() first.")
            data = self.data

        missing = [c for c in (zone, temperature_column) if c not in data.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found; available: {list(data.columns)}")

        modeldata = data[[self.date_column, zone, temperature_column]].copy()
        return modeldata.rename(columns={zone: 'Load', temperature_column: 'Temperature'})

    @staticmethod
    def split_by_cutoff(data: pd.DataFrame, cutoff: Union[str, pd.Timestamp],
                        date_column: str = DATE_COLUMN) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Split data into training (on or before cutoff) and testing (after
        cutoff) sets.

        Args:
            data: Table with a timestamp column
            cutoff: Boundary timestamp; a naive one is taken in the data's timezone
            date_column: Name of the timestamp column

        Returns:
            Tuple of (train_data, test_data)
        """
        dates = data[date_column]
        cutoff = pd.Timestamp(cutoff)
        if dates.dt.tz is not None and cutoff.tzinfo is None:
            cutoff = cutoff.tz_localize(dates.dt.tz)
        elif dates.dt.tz is None and cutoff.tzinfo is not None:
            raise ValueError("Cannot compare a timezone-aware cutoff with naive timestamps")

        idx_train = dates <= cutoff
        train_data = data.loc[idx_train]
        test_data = data.loc[~idx_train]

        print(f"Data split at {cutoff}: Train={len(train_data)}, Test={len(test_data)}")
        return train_data, test_data

    @staticmethod
    def to_matrices(data: pd.DataFrame,
                    x_vars: Sequence[str] = FEATURE_COLUMNS,
                    y_vars: Sequence[str] = TARGET_COLUMNS) -> Tuple[np.ndarray, np.ndarray]:
        """
        Export predictors and response as feature-major float matrices.

        Returns:
            Tuple of (X, Y): X has one row per feature and one column per
            observation, Y one row per response. Missing values become NaN.
        """
        x_vars = list(x_vars)
        y_vars = list(y_vars)
        X = data[x_vars].astype('float64').to_numpy().T
        Y = data[y_vars].astype('float64').to_numpy().T
        return X, Y
