"""
Forecasting models for load prediction.

Both models take feature-major matrices: one row per feature, one column per
observation, and return a row of predictions per response.
"""
from pathlib import Path
from typing import Sequence, Union

import joblib
import numpy as np
from sklearn.compose import TransformedTargetRegressor
from sklearn.neural_network import MLPRegressor
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler

from .features import FEATURE_COLUMNS


def _complete_columns(X: np.ndarray) -> np.ndarray:
    """Mask of observations with every feature present."""
    return np.all(np.isfinite(X), axis=0)


class NeuralNetworkModel:
    """Feed-forward fitting network with a single hidden layer."""

    def __init__(self, hidden_layer_size: int = 20, max_iter: int = 1000,
                 random_state: int = 0):
        """
        Initialize the network.

        Args:
            hidden_layer_size: Number of hidden neurons
            max_iter: Maximum number of solver iterations
            random_state: Seed for weight initialization
        """
        self.hidden_layer_size = hidden_layer_size
        self.max_iter = max_iter
        self.random_state = random_state
        self.model = None
        self.n_outputs = 1

    def _build(self) -> TransformedTargetRegressor:
        network = MLPRegressor(
            hidden_layer_sizes=(self.hidden_layer_size,),
            activation='tanh',
            solver='lbfgs',
            max_iter=self.max_iter,
            random_state=self.random_state,
        )
        return TransformedTargetRegressor(
            regressor=make_pipeline(StandardScaler(), network),
            transformer=StandardScaler(),
        )

    def train(self, X: np.ndarray, Y: np.ndarray) -> None:
        """
        Train the network on every complete observation.

        Args:
            X: Predictors, shape (n_features, n_observations)
            Y: Responses, shape (n_responses, n_observations)
        """
        X = np.asarray(X, dtype=float)
        Y = np.atleast_2d(np.asarray(Y, dtype=float))
        if X.shape[1] != Y.shape[1]:
            raise ValueError(f"X has {X.shape[1]} observations but Y has {Y.shape[1]}")

        mask = _complete_columns(X) & _complete_columns(Y)
        if not mask.any():
            raise ValueError("No complete observations to train on")

        targets = Y[:, mask].T
        if targets.shape[1] == 1:
            targets = targets.ravel()

        print(f"Training neural network with {self.hidden_layer_size} hidden neurons "
              f"on {mask.sum()} of {mask.size} observations...")
        self.model = self._build()
        self.model.fit(X[:, mask].T, targets)
        self.n_outputs = Y.shape[0]
        print("Neural network trained successfully")

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        Make predictions.

        Args:
            X: Predictors, shape (n_features, n_observations)

        Returns:
            Array of shape (n_responses, n_observations); NaN where any
            predictor is missing
        """
        if self.model is None:
            raise ValueError("Model not trained. Call train() first.")

        X = np.asarray(X, dtype=float)
        predictions = np.full((self.n_outputs, X.shape[1]), np.nan)
        mask = _complete_columns(X)
        if mask.any():
            predictions[:, mask] = np.asarray(self.model.predict(X[:, mask].T)).reshape(
                mask.sum(), self.n_outputs).T
        return predictions

    def save(self, path: Union[str, Path]) -> None:
        if self.model is None:
            raise ValueError("Model not trained. Call train() first.")
        joblib.dump(self, path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'NeuralNetworkModel':
        model = joblib.load(path)
        if not isinstance(model, cls):
            raise TypeError(f"{path} does not contain a {cls.__name__}")
        return model


class PriorDayBaseline:
    """Persistence baseline: load at the same hour the prior day."""

    def __init__(self, feature_names: Sequence[str] = FEATURE_COLUMNS,
                 lag_feature: str = 'PriorDay'):
        """
        Initialize the baseline.

        Args:
            feature_names: Row names of the predictor matrix
            lag_feature: Lag row used as the prediction
        """
        self.feature_names = list(feature_names)
        if lag_feature not in self.feature_names:
            raise ValueError(f"'{lag_feature}' is not one of the features {self.feature_names}")
        self.row = self.feature_names.index(lag_feature)

    def train(self, X: np.ndarray, Y: np.ndarray) -> None:
        """Nothing to fit."""

    def predict(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        return X[self.row:self.row + 1, :].copy()
