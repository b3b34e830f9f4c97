"""
Visualization utilities for load forecasting.
"""
from pathlib import Path
from typing import Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from scipy import stats


class Visualizer:
    """Class for creating visualizations."""

    def __init__(self, style: str = 'seaborn-v0_8-darkgrid',
                 output_dir: Union[str, Path] = '.', show: bool = False):
        """
        Initialize the visualizer.

        Args:
            style: Matplotlib style to use
            output_dir: Directory the figures are saved in
            show: Display each figure after saving instead of closing it
        """
        try:
            plt.style.use(style)
        except OSError:
            plt.style.use('default')

        sns.set_palette("husl")
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.show = show

    def _finish(self, fig: plt.Figure, filename: str) -> Path:
        path = self.output_dir / filename
        fig.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches='tight')
        if self.show:
            plt.show()
        else:
            plt.close(fig)
        print(f"Plot saved as '{path}'")
        return path

    @staticmethod
    def _slug(name: str) -> str:
        return name.lower().replace(" ", "_")

    @staticmethod
    def _wall_clock(dates) -> pd.DatetimeIndex:
        """Drop the timezone, keeping local wall-clock times."""
        dates = pd.DatetimeIndex(dates)
        if dates.tz is not None:
            dates = dates.tz_localize(None)
        return dates

    def plot_predictions(self, dates: pd.Series, actual: np.ndarray,
                         predicted: np.ndarray, model_name: str = 'Neural Network',
                         figsize: tuple = (15, 8)) -> Path:
        """
        Plot predicted vs measured load with the error underneath.

        Args:
            dates: Timestamps of the observations
            actual: Measured load
            predicted: Predicted load
            model_name: Name of the model
            figsize: Figure size

        Returns:
            Path of the saved figure
        """
        actual = np.asarray(actual, dtype=float).ravel()
        predicted = np.asarray(predicted, dtype=float).ravel()
        dates = self._wall_clock(dates)

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=figsize, sharex=True)

        ax1.plot(dates, predicted, label=model_name, linewidth=1)
        ax1.plot(dates, actual, label='Measured', linewidth=1, alpha=0.8)
        ax1.set_ylabel('Load (MW)', fontsize=12)
        ax1.set_title(f'{model_name} - Predicted vs Measured Load',
                      fontsize=14, fontweight='bold')
        ax1.legend(loc='best')
        ax1.grid(True, alpha=0.3)

        ax2.plot(dates, actual - predicted, '.', markersize=3, label=model_name)
        ax2.axhline(y=0, color='r', linestyle='--', alpha=0.5)
        ax2.set_ylabel('Error (MW)', fontsize=12)
        ax2.set_xlabel('Date', fontsize=12)
        ax2.legend(loc='best')
        ax2.grid(True, alpha=0.3)

        return self._finish(fig, f'predictions_{self._slug(model_name)}.png')

    def plot_residuals(self, actual: np.ndarray, predicted: np.ndarray,
                       model_name: str = 'Model', figsize: tuple = (15, 5)) -> Path:
        """
        Plot residuals analysis.

        Args:
            actual: Actual values
            predicted: Predicted values
            model_name: Name of the model
            figsize: Figure size

        Returns:
            Path of the saved figure
        """
        residuals = (np.asarray(actual, dtype=float).ravel()
                     - np.asarray(predicted, dtype=float).ravel())
        residuals = residuals[np.isfinite(residuals)]

        fig, axes = plt.subplots(1, 3, figsize=figsize)

        # Residuals over time
        axes[0].plot(residuals, linewidth=1)
        axes[0].axhline(y=0, color='r', linestyle='--', alpha=0.5)
        axes[0].set_title(f'{model_name} - Residuals Over Time')
        axes[0].set_xlabel('Sample')
        axes[0].set_ylabel('Residual (MW)')
        axes[0].grid(True, alpha=0.3)

        # Histogram of residuals
        axes[1].hist(residuals, bins=50, edgecolor='black', alpha=0.7)
        axes[1].set_title(f'{model_name} - Residual Distribution')
        axes[1].set_xlabel('Residual (MW)')
        axes[1].set_ylabel('Frequency')
        axes[1].grid(True, alpha=0.3)

        # Q-Q plot
        stats.probplot(residuals, dist="norm", plot=axes[2])
        axes[2].set_title(f'{model_name} - Q-Q Plot')
        axes[2].grid(True, alpha=0.3)

        return self._finish(fig, f'residuals_{self._slug(model_name)}.png')

    def plot_autocorrelation(self, lags: np.ndarray, c: np.ndarray,
                             samples_per_day: int = 24,
                             max_days: float = 200 / 24,
                             figsize: tuple = (12, 5)) -> Path:
        """
        Plot the load autocorrelation against the lag in days.

        Args:
            lags: Lags in samples
            c: Correlation at each lag
            samples_per_day: Samples per day (24 for hourly data)
            max_days: Right edge of the x axis
            figsize: Figure size

        Returns:
            Path of the saved figure
        """
        fig, ax = plt.subplots(figsize=figsize)
        ax.plot(np.asarray(lags) / samples_per_day, c)
        ax.set_xlim(0, max_days)
        ax.set_title('Load Autocorrelation', fontsize=14, fontweight='bold')
        ax.set_xlabel('Lag (days)', fontsize=12)
        ax.set_ylabel('Correlation', fontsize=12)
        ax.grid(True, alpha=0.3)

        return self._finish(fig, 'load_autocorrelation.png')

    def plot_time_series(self, data: pd.DataFrame, column: str = 'Load',
                         date_column: str = 'Date',
                         title: str = 'Load Over Time',
                         figsize: tuple = (15, 6)) -> Path:
        """
        Plot time series data.

        Args:
            data: DataFrame with time series data
            column: Column name to plot
            date_column: Timestamp column
            title: Plot title
            figsize: Figure size

        Returns:
            Path of the saved figure
        """
        fig, ax = plt.subplots(figsize=figsize)
        ax.plot(self._wall_clock(data[date_column]), data[column].astype('float64'),
                linewidth=1, alpha=0.8)
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('Date', fontsize=12)
        ax.set_ylabel('Load (MW)', fontsize=12)
        ax.grid(True, alpha=0.3)

        return self._finish(fig, f'{self._slug(column)}_timeseries.png')
