"""
House price pipeline CLI - train, inspect correlations and predict prices.

Usage:
    house-prices train --dataset.path data/Housing.csv --export model.onnx
    house-prices correlations --dataset.path data/Housing.csv
    house-prices predict --area 7420 --bedrooms 4 --bathrooms 2 --stories 3 \\
        --mainroad yes --guestroom no --basement no --hotwaterheating no \\
        --airconditioning yes --parking 2 --prefarea yes --furnishing furnished
"""

from __future__ import annotations

import argparse
import logging
import sys

from .analysis import correlation_matrix, correlation_strength
from .config import (
    add_args,
    check_config,
    config_to_dict,
    load_env,
    metrics_config,
    setup_logging,
    training_config,
    wandb_config,
)
from .data import (
    FURNISHING_STATUSES,
    DataError,
    HousingDataset,
    HousingSample,
    split_dataset,
)
from .evaluation import EvaluationError, PredictionMetrics, evaluate_model
from .models import (
    LinearRegressionModel,
    ModelError,
    OnnxRegressionModel,
    export_to_onnx,
)
from .observability import WandbLogger
from .prediction import PredictionError, PricePredictor
from .training import TrainingError, train_model

logger = logging.getLogger(__name__)

PIPELINE_ERRORS = (
    DataError,
    EvaluationError,
    ModelError,
    TrainingError,
    PredictionError,
)

YES_NO = ["yes", "no"]


def _load(args: argparse.Namespace) -> HousingDataset:
    print(f"Loading dataset: {args.dataset_path}")
    dataset = HousingDataset.load_csv(args.dataset_path)
    print(f"  {len(dataset)} records, {dataset.input_dimension} features")
    print()
    return dataset


def _train(
    args: argparse.Namespace,
    dataset: HousingDataset,
    wandb_logger: WandbLogger | None = None,
) -> tuple[LinearRegressionModel, tuple[HousingSample, ...]]:
    split = split_dataset(dataset, train_ratio=args.train_ratio, seed=args.split_seed)
    model = LinearRegressionModel(l2=args.model_l2)
    progress = wandb_logger.on_training_event if wandb_logger else None
    train_model(model, dataset, split, training_config(args), progress=progress)
    return model, split.testing


def _format_metric(metrics: PredictionMetrics, name: str, spec: str) -> str:
    if not metrics.is_defined(name):
        return "undefined"
    return format(getattr(metrics, name), spec)


def cmd_train(args: argparse.Namespace) -> int:
    """Execute the train command."""
    dataset = _load(args)

    wandb_logger = WandbLogger(wandb_config(args))
    wandb_logger.start_run(run_config=config_to_dict(args))
    try:
        model, testing = _train(args, dataset, wandb_logger)
        result = evaluate_model(model, dataset, testing, metrics_config(args))
        wandb_logger.log_evaluation(result)
    finally:
        wandb_logger.finish()

    metrics = result.metrics
    price_metrics = result.price_metrics

    print(f"Evaluation Results ({result.n_samples} testing samples):")
    print(f"  MSE (normalized):  {_format_metric(metrics, 'mse', '.6f')}")
    print(f"  RMSE (normalized): {_format_metric(metrics, 'rmse', '.6f')}")
    print(f"  R²:                {_format_metric(metrics, 'r2', '.4f')}")
    print(f"  MAE:               {_format_metric(price_metrics, 'mae', ',.0f')}")
    print(f"  MAPE:              {_format_metric(price_metrics, 'mape', '.2f')}%")
    if price_metrics.windowed_mape is not None:
        print(
            f"  MAPE (first {args.mape_window}):    "
            f"{_format_metric(price_metrics, 'windowed_mape', '.2f')}%"
        )
    print()

    if result.samples:
        print("Sample predictions:")
        for i, sample in enumerate(result.samples, start=1):
            pct = sample.percentage_error
            pct_text = f"{pct:.2f}%" if pct is not None else "n/a"
            print(
                f"  {i}. predicted {sample.predicted_price:,.0f}, "
                f"actual {sample.actual_price:,.0f} (error {pct_text})"
            )
        print()

    if args.export:
        path = export_to_onnx(model, args.export, dataset.bounds)
        print(f"✓ Model exported to {path}")

    return 0


def cmd_correlations(args: argparse.Namespace) -> int:
    """Execute the correlations command."""
    dataset = _load(args)
    matrix = correlation_matrix(dataset)

    wandb_logger = WandbLogger(wandb_config(args))
    wandb_logger.start_run(run_config=config_to_dict(args))
    try:
        wandb_logger.log_correlations(matrix)
    finally:
        wandb_logger.finish()

    width = max(len(label) for label in matrix.labels)
    print("Correlation matrix:")
    print(" " * (width + 2) + " ".join(f"{i:>6}" for i in range(matrix.size)))
    for i, label in enumerate(matrix.labels):
        row = " ".join(f"{v:6.2f}" for v in matrix.values[i])
        print(f"  {label:<{width}} {row}   ({i})")
    print()

    print("Most correlated with price:")
    for label, value in matrix.with_target()[: args.top]:
        print(f"  {label:<{width}} {value:+.3f} ({correlation_strength(value)})")

    return 0


def cmd_predict(args: argparse.Namespace) -> int:
    """Execute the predict command."""
    dataset = _load(args)

    if args.model_path:
        print(f"Using ONNX model: {args.model_path}")
        model = OnnxRegressionModel(
            args.model_path,
            expected_features=dataset.input_dimension,
            expected_bounds=dataset.bounds,
        )
    else:
        print("Training a model on the dataset...")
        model, _ = _train(args, dataset)
    print()

    raw_features = dataset.encoder.encode_inputs(
        area=args.area,
        bedrooms=args.bedrooms,
        bathrooms=args.bathrooms,
        stories=args.stories,
        mainroad=args.mainroad,
        guestroom=args.guestroom,
        basement=args.basement,
        hotwaterheating=args.hotwaterheating,
        airconditioning=args.airconditioning,
        parking=args.parking,
        prefarea=args.prefarea,
        furnishing_status=args.furnishing,
    )

    outcome = PricePredictor(dataset, model).predict_safely(raw_features)
    if not outcome.success:
        print(f"ERROR: Prediction failed: {outcome.error_message}", file=sys.stderr)
        return 1

    print(f"Predicted price: {outcome.price:,.0f}")
    if outcome.factors:
        print()
        print("Most influential factors:")
        for factor in outcome.factors:
            print(f"  - {factor} (+)")

    return 0


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    common = argparse.ArgumentParser(add_help=False)
    add_args(common)

    parser = argparse.ArgumentParser(
        prog="house-prices",
        description="House price pipeline - train, inspect and predict",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Command to execute",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # TRAIN command
    # ─────────────────────────────────────────────────────────────────────────
    train_parser = subparsers.add_parser(
        "train",
        parents=[common],
        help="Train and evaluate a linear model",
        description="Split the dataset, train on the training split and score the rest.",
    )

    train_parser.add_argument(
        "--export",
        default=None,
        metavar="PATH",
        help="Write the trained model to an ONNX file",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # CORRELATIONS command
    # ─────────────────────────────────────────────────────────────────────────
    corr_parser = subparsers.add_parser(
        "correlations",
        parents=[common],
        help="Print the feature correlation matrix",
        description="Pearson correlations between raw features and price.",
    )

    corr_parser.add_argument(
        "--top",
        type=int,
        default=5,
        metavar="N",
        help="Number of features most correlated with price to list (default: 5)",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # PREDICT command
    # ─────────────────────────────────────────────────────────────────────────
    predict_parser = subparsers.add_parser(
        "predict",
        parents=[common],
        help="Predict the price of one house",
        description="Predict with a freshly trained model or an exported ONNX model.",
    )

    predict_parser.add_argument(
        "--model.path",
        dest="model_path",
        default=None,
        metavar="PATH",
        help="ONNX model to use instead of training one",
    )

    predict_parser.add_argument("--area", type=float, required=True, help="Living area")
    for name in ("bedrooms", "bathrooms", "stories", "parking"):
        predict_parser.add_argument(f"--{name}", type=int, required=True)
    for name in (
        "mainroad",
        "guestroom",
        "basement",
        "hotwaterheating",
        "airconditioning",
        "prefarea",
    ):
        predict_parser.add_argument(f"--{name}", choices=YES_NO, default="no")

    predict_parser.add_argument(
        "--furnishing",
        choices=list(FURNISHING_STATUSES),
        default="unfurnished",
        help="Furnishing status (default: unfurnished)",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    load_env()
    config = parse_args(args)

    try:
        check_config(config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    logger.debug(f"Configuration: {config_to_dict(config)}")

    try:
        if config.command == "train":
            return cmd_train(config)
        elif config.command == "correlations":
            return cmd_correlations(config)
        elif config.command == "predict":
            return cmd_predict(config)
        else:
            print(f"ERROR: Unknown command: {config.command}", file=sys.stderr)
            return 2

    except PIPELINE_ERRORS as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
