"""
Tests for the neural network wrapper and the prior-day baseline.

Matrices are feature-major: shape (n_features, n_observations).
"""

from __future__ import annotations

import numpy as np
import pytest

from load_forecast.features import FEATURE_COLUMNS
from load_forecast.models import NeuralNetworkModel, PriorDayBaseline


def _linear_problem(n: int = 300, seed: int = 0) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    X = rng.uniform(-1, 1, size=(3, n))
    Y = (1000 + 200 * X[0] - 100 * X[1] + 50 * X[2]).reshape(1, n)
    return X, Y


class TestNeuralNetworkModel:
    def test_predict_before_train_raises(self):
        with pytest.raises(ValueError, match="Call train"):
            NeuralNetworkModel().predict(np.zeros((3, 2)))

    def test_prediction_is_same_width_row(self):
        X, Y = _linear_problem()
        net = NeuralNetworkModel(hidden_layer_size=5, max_iter=200)
        net.train(X, Y)
        Y_hat = net.predict(X[:, :40])
        assert Y_hat.shape == (1, 40)

    def test_fits_a_smooth_function(self):
        X, Y = _linear_problem()
        net = NeuralNetworkModel(hidden_layer_size=5, max_iter=500)
        net.train(X, Y)
        rmse = np.sqrt(np.mean((net.predict(X) - Y) ** 2))
        assert rmse < 0.1 * Y.std()

    def test_missing_inputs_predict_nan(self):
        X, Y = _linear_problem()
        net = NeuralNetworkModel(hidden_layer_size=5, max_iter=200)
        net.train(X, Y)
        X_test = X[:, :4].copy()
        X_test[1, 2] = np.nan
        Y_hat = net.predict(X_test)
        assert np.isnan(Y_hat[0, 2])
        assert np.isfinite(Y_hat[0, [0, 1, 3]]).all()

    def test_training_skips_incomplete_observations(self):
        X, Y = _linear_problem()
        X[0, :10] = np.nan
        Y[0, 10:20] = np.nan
        net = NeuralNetworkModel(hidden_layer_size=5, max_iter=200)
        net.train(X, Y)
        assert np.isfinite(net.predict(X[:, 20:])).all()

    def test_no_complete_observation_raises(self):
        X = np.full((3, 5), np.nan)
        with pytest.raises(ValueError, match="No complete observations"):
            NeuralNetworkModel().train(X, np.ones((1, 5)))

    def test_mismatched_widths_raise(self):
        with pytest.raises(ValueError):
            NeuralNetworkModel().train(np.zeros((3, 5)), np.zeros((1, 4)))

    def test_save_and_load(self, tmp_path):
        X, Y = _linear_problem()
        net = NeuralNetworkModel(hidden_layer_size=5, max_iter=200)
        net.train(X, Y)
        path = tmp_path / "net.joblib"
        net.save(path)

        restored = NeuralNetworkModel.load(path)
        np.testing.assert_allclose(restored.predict(X), net.predict(X))

    def test_save_untrained_raises(self, tmp_path):
        with pytest.raises(ValueError):
            NeuralNetworkModel().save(tmp_path / "net.joblib")


class TestPriorDayBaseline:
    def test_predicts_prior_day_row(self):
        X = np.arange(len(FEATURE_COLUMNS) * 4, dtype=float).reshape(len(FEATURE_COLUMNS), 4)
        baseline = PriorDayBaseline(FEATURE_COLUMNS)
        baseline.train(X, np.zeros((1, 4)))
        row = FEATURE_COLUMNS.index("PriorDay")
        np.testing.assert_array_equal(baseline.predict(X), X[row:row + 1])

    def test_unknown_lag_feature(self):
        with pytest.raises(ValueError):
            PriorDayBaseline(["Hour", "Temp"])
