"""
Tests for forecast metrics and the load autocorrelation.
"""

from __future__ import annotations

import numpy as np
import pytest

from load_forecast.evaluator import Evaluator


def test_perfect_prediction() -> None:
    y = np.array([100.0, 200.0, 300.0])
    assert Evaluator.calculate_rmse(y, y) == 0.0
    assert Evaluator.calculate_mae(y, y) == 0.0
    assert Evaluator.calculate_mape(y, y) == 0.0
    assert Evaluator.calculate_r2(y, y) == pytest.approx(1.0)


def test_hand_computed_errors() -> None:
    y_true = np.array([100.0, 200.0])
    y_pred = np.array([110.0, 180.0])
    assert Evaluator.calculate_mae(y_true, y_pred) == pytest.approx(15.0)
    assert Evaluator.calculate_rmse(y_true, y_pred) == pytest.approx(np.sqrt(250.0))
    assert Evaluator.calculate_mape(y_true, y_pred) == pytest.approx(10.0)


def test_missing_values_are_skipped() -> None:
    y_true = np.array([[100.0, np.nan, 200.0]])
    y_pred = np.array([[110.0, 150.0, np.nan]])
    assert Evaluator.calculate_mae(y_true, y_pred) == pytest.approx(10.0)


def test_shape_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        Evaluator.calculate_rmse(np.ones(3), np.ones(4))


def test_r2_constant_truth_is_zero() -> None:
    assert Evaluator.calculate_r2(np.ones(4), np.zeros(4)) == 0.0


def test_compare_models_sorted_by_rmse() -> None:
    results = {
        "Prior Day": {"RMSE": 300.0, "MAE": 200.0, "MAPE": 5.0, "R2": 0.8},
        "Neural Network": {"RMSE": 150.0, "MAE": 100.0, "MAPE": 2.5, "R2": 0.95},
    }
    df = Evaluator.compare_models(results)
    assert list(df.index) == ["Neural Network", "Prior Day"]


def test_evaluate_model_returns_all_metrics() -> None:
    metrics = Evaluator.evaluate_model(np.array([1.0, 2.0]), np.array([1.0, 3.0]), "Test")
    assert set(metrics) == {"RMSE", "MAE", "MAPE", "R2"}


# ── Autocorrelation ───────────────────────────────────────────────────────────

def test_autocorrelation_lags_and_symmetry() -> None:
    x = np.array([1.0, 2.0, 3.0])
    lags, c = Evaluator.autocorrelation(x, max_lag=2)
    assert list(lags) == [-2, -1, 0, 1, 2]
    # sum x[n] x[n+k]
    np.testing.assert_allclose(c, [3.0, 8.0, 14.0, 8.0, 3.0])


def test_autocorrelation_pads_beyond_series_length() -> None:
    lags, c = Evaluator.autocorrelation(np.array([1.0, 2.0]), max_lag=3)
    np.testing.assert_allclose(c, [0.0, 0.0, 2.0, 5.0, 2.0, 0.0, 0.0])


def test_autocorrelation_drops_missing() -> None:
    _, with_nan = Evaluator.autocorrelation(np.array([1.0, np.nan, 2.0, 3.0]), max_lag=2)
    _, without = Evaluator.autocorrelation(np.array([1.0, 2.0, 3.0]), max_lag=2)
    np.testing.assert_allclose(with_nan, without)


def test_autocorrelation_daily_peak() -> None:
    hours = np.arange(24 * 30)
    x = np.sin(2 * np.pi * hours / 24)
    lags, c = Evaluator.autocorrelation(x, max_lag=30)
    positive = lags > 12
    assert lags[positive][np.argmax(c[positive])] == 24


def test_autocorrelation_negative_max_lag() -> None:
    with pytest.raises(ValueError):
        Evaluator.autocorrelation(np.ones(3), max_lag=-1)


def test_autocorrelation_matches_full_correlation_window() -> None:
    x = np.random.default_rng(0).normal(size=500)
    lags, c = Evaluator.autocorrelation(x, max_lag=50)
    full = np.correlate(x, x, mode="full")
    np.testing.assert_allclose(c, full[499 - 50:499 + 51])
