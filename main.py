import argparse
import sys
from pathlib import Path

import pandas as pd

from load_forecast.data_loader import DataLoader
from load_forecast.evaluator import Evaluator
from load_forecast.features import FEATURE_COLUMNS, TARGET_COLUMNS, build_features
from load_forecast.models import NeuralNetworkModel, PriorDayBaseline
from load_forecast.visualizer import Visualizer


# ---------------------------------------------------------------------
# Global configuration
# ---------------------------------------------------------------------
LOAD_DATA_PATH = Path("data/nyiso_cleaned.pkl")
WEATHER_DATA_PATH = Path("data/weather_cleaned.pkl")

TIMEZONE = "America/New_York"
ZONE = "N_Y_C_"
TEMPERATURE_COLUMN = "TemperatureKLGA"

# training <= cutoff < testing
CUTOFF = "2012-05-31"

HIDDEN_LAYER_SIZE = 20
MAX_ITER = 1000

MODEL_DIR = Path("models")
FIGURE_DIR = Path("figures")
MODEL_FILENAME = "neural_network.joblib"


# ---------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------
def build_model_data(args) -> pd.DataFrame:
    """
    Load and join the cleaned tables, pull out the zone and create every
    predictor.
    """
    print("Loading load + weather data...", file=sys.stderr)
    loader = DataLoader(args.load_data, args.weather_data, timezone=TIMEZONE)
    loader.load_data(temperature_column=args.temperature_column,
                     allow_synthetic=args.synthetic, zone=args.zone)
    modeldata = loader.select_zone(args.zone, args.temperature_column)

    print("Creating predictors...", file=sys.stderr)
    return build_features(modeldata)


def model_path(args) -> Path:
    return Path(args.model_dir) / MODEL_FILENAME


# ---------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------
def run_clean(args):
    """
    Delete saved models and figures.
    """
    path = model_path(args)
    if path.exists():
        path.unlink()
    figure_dir = Path(args.figure_dir)
    if figure_dir.exists():
        for p in figure_dir.glob("*.png"):
            p.unlink()
    print("Cleaned model and figure artifacts.", file=sys.stderr)


def run_train(args):
    """
    Fit the neural network on the training subset and save it to disk.
    """
    modeldata = build_model_data(args)
    train_data, _ = DataLoader.split_by_cutoff(modeldata, args.cutoff)
    X_train, Y_train = DataLoader.to_matrices(train_data, FEATURE_COLUMNS, TARGET_COLUMNS)

    net = NeuralNetworkModel(hidden_layer_size=args.hidden_layer_size, max_iter=MAX_ITER)
    net.train(X_train, Y_train)

    path = model_path(args)
    path.parent.mkdir(parents=True, exist_ok=True)
    net.save(path)
    print(f"Saved model to {path}", file=sys.stderr)
    print("Training complete.", file=sys.stderr)


def run_predictions(args):
    """
    Load the saved network, predict the testing subset, report metrics
    against the prior-day baseline and plot the results.
    """
    path = model_path(args)
    if not path.exists():
        raise RuntimeError(f"Model file {path} not found; run `main.py train` first.")
    net = NeuralNetworkModel.load(path)

    modeldata = build_model_data(args)
    _, test_data = DataLoader.split_by_cutoff(modeldata, args.cutoff)
    if test_data.empty:
        raise RuntimeError(f"No observations after the cutoff {args.cutoff}")
    X_test, Y_test = DataLoader.to_matrices(test_data, FEATURE_COLUMNS, TARGET_COLUMNS)

    predictions = {
        "Neural Network": net.predict(X_test),
        "Prior Day": PriorDayBaseline(FEATURE_COLUMNS).predict(X_test),
    }

    results = {
        name: Evaluator.evaluate_model(Y_test, Y_hat, model_name=name)
        for name, Y_hat in predictions.items()
    }
    Evaluator.compare_models(results)

    viz = Visualizer(output_dir=args.figure_dir)
    viz.plot_predictions(test_data["Date"], Y_test, predictions["Neural Network"],
                         model_name="Neural Network")
    viz.plot_residuals(Y_test, predictions["Neural Network"], model_name="Neural Network")


def run_analyze(args):
    """
    Plot the zone load and its autocorrelation, which motivates the 1 and
    7 day lagged predictors.
    """
    modeldata = build_model_data(args)
    lags, c = Evaluator.autocorrelation(modeldata["Load"].astype("float64"), max_lag=200)

    viz = Visualizer(output_dir=args.figure_dir)
    viz.plot_time_series(modeldata, column="Load", title=f"Load in zone {args.zone}")
    viz.plot_autocorrelation(lags, c)


# ---------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load forecasting pipeline: clean, train, predictions, or analyze"
    )
    parser.add_argument(
        "task",
        choices=["clean", "train", "predictions", "analyze"],
        help="Which step of the pipeline to run",
    )
    parser.add_argument("--load-data", type=Path, default=LOAD_DATA_PATH,
                        help="Cleaned load table (.csv or .pkl)")
    parser.add_argument("--weather-data", type=Path, default=WEATHER_DATA_PATH,
                        help="Cleaned weather table (.csv or .pkl)")
    parser.add_argument("--zone", default=ZONE, help="Load column to model")
    parser.add_argument("--temperature-column", default=TEMPERATURE_COLUMN,
                        help="Weather column holding temperature and dew point")
    parser.add_argument("--cutoff", default=CUTOFF,
                        help=f"Last training date, in {TIMEZONE}")
    parser.add_argument("--hidden-layer-size", type=int, default=HIDDEN_LAYER_SIZE)
    parser.add_argument("--model-dir", type=Path, default=MODEL_DIR)
    parser.add_argument("--figure-dir", type=Path, default=FIGURE_DIR)
    parser.add_argument("--no-synthetic", dest="synthetic", action="store_false",
                        help="Fail instead of generating demo data when a file is missing")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.task == "clean":
        run_clean(args)
    elif args.task == "train":
        run_train(args)
    elif args.task == "predictions":
        run_predictions(args)
    elif args.task == "analyze":
        run_analyze(args)
    else:
        print("Unrecognized command.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
