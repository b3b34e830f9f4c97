"""
Load Forecasting Package
Neural network forecast of zone load from weather and lagged load
"""

__version__ = "1.0.0"

from .data_loader import DataLoader
from .features import build_features, compute_lag
from .models import NeuralNetworkModel, PriorDayBaseline
from .evaluator import Evaluator
from .visualizer import Visualizer

__all__ = [
    'DataLoader',
    'build_features',
    'compute_lag',
    'NeuralNetworkModel',
    'PriorDayBaseline',
    'Evaluator',
    'Visualizer'
]
