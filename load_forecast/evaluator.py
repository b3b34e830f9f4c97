"""
Model evaluation utilities.
"""
import numpy as np
from typing import Dict, Tuple
import pandas as pd


def _finite_pairs(y_true: np.ndarray, y_pred: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Flatten both arrays and keep positions where both are finite."""
    y_true = np.asarray(y_true, dtype=float).ravel()
    y_pred = np.asarray(y_pred, dtype=float).ravel()
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")
    mask = np.isfinite(y_true) & np.isfinite(y_pred)
    return y_true[mask], y_pred[mask]


class Evaluator:
    """Class for evaluating forecasting models.

    Every metric skips observations where the actual or predicted value is
    missing.
    """

    @staticmethod
    def calculate_rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """
        Calculate Root Mean Square Error.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            RMSE value
        """
        y_true, y_pred = _finite_pairs(y_true, y_pred)
        return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))

    @staticmethod
    def calculate_mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """
        Calculate Mean Absolute Error.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            MAE value
        """
        y_true, y_pred = _finite_pairs(y_true, y_pred)
        return float(np.mean(np.abs(y_true - y_pred)))

    @staticmethod
    def calculate_mape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """
        Calculate Mean Absolute Percentage Error.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            MAPE value as percentage
        """
        y_true, y_pred = _finite_pairs(y_true, y_pred)
        # Avoid division by zero
        mask = y_true != 0
        return float(np.mean(np.abs((y_true[mask] - y_pred[mask]) / y_true[mask])) * 100)

    @staticmethod
    def calculate_r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """
        Calculate R-squared score.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            R2 score
        """
        y_true, y_pred = _finite_pairs(y_true, y_pred)
        ss_res = np.sum((y_true - y_pred) ** 2)
        ss_tot = np.sum((y_true - np.mean(y_true)) ** 2)
        return float(1 - (ss_res / ss_tot)) if ss_tot != 0 else 0.0

    @classmethod
    def evaluate_model(cls, y_true: np.ndarray, y_pred: np.ndarray,
                       model_name: str = "Model") -> Dict[str, float]:
        """
        Evaluate model using multiple metrics.

        Args:
            y_true: True values
            y_pred: Predicted values
            model_name: Name of the model for display

        Returns:
            Dictionary of metric names and values
        """
        rmse = cls.calculate_rmse(y_true, y_pred)
        mae = cls.calculate_mae(y_true, y_pred)
        mape = cls.calculate_mape(y_true, y_pred)
        r2 = cls.calculate_r2(y_true, y_pred)
        n_scored = len(_finite_pairs(y_true, y_pred)[0])

        metrics = {
            'RMSE': rmse,
            'MAE': mae,
            'MAPE': mape,
            'R2': r2
        }

        print(f"\n{model_name} Evaluation Metrics ({n_scored} observations):")
        print(f"  RMSE: {rmse:.2f}")
        print(f"  MAE:  {mae:.2f}")
        print(f"  MAPE: {mape:.2f}%")
        print(f"  R²:   {r2:.4f}")

        return metrics

    @staticmethod
    def compare_models(results: Dict[str, Dict[str, float]]) -> pd.DataFrame:
        """
        Compare multiple models side by side.

        Args:
            results: Dictionary of model names to their metrics

        Returns:
            DataFrame comparing all models
        """
        df = pd.DataFrame(results).T
        df = df.sort_values('RMSE')

        print("\n" + "="*60)
        print("Model Comparison")
        print("="*60)
        print(df.to_string())
        print("="*60)

        return df

    @staticmethod
    def autocorrelation(values: np.ndarray, max_lag: int = 200) -> Tuple[np.ndarray, np.ndarray]:
        """
        Raw autocorrelation of a series, ignoring missing values.

        Peaks at multiples of 24 and 168 samples point at daily and weekly
        lagged predictors for hourly load.

        Args:
            values: Series values; missing entries are dropped first
            max_lag: Largest lag in samples

        Returns:
            Tuple of (lags, c) for lags -max_lag..max_lag
        """
        if max_lag < 0:
            raise ValueError("max_lag must be non-negative")

        x = np.asarray(values, dtype=float)
        x = x[np.isfinite(x)]

        lags = np.arange(-max_lag, max_lag + 1)
        c = np.zeros(lags.size)
        n = x.size
        # symmetric, so only non-negative lags are computed
        for k in range(min(max_lag, n - 1) + 1):
            value = x[:n - k] @ x[k:]
            c[max_lag + k] = value
            c[max_lag - k] = value
        return lags, c
