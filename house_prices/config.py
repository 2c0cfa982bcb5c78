"""
Pipeline configuration management.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .evaluation import MetricsConfig
from .observability import WandbConfig
from .training import TrainingConfig

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def load_env() -> None:
    """Load a .env file from the working directory (or a parent) if present."""
    load_dotenv(find_dotenv(usecwd=True))


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add pipeline arguments to the parser.

    Arguments can be overridden by environment variables.
    """

    parser.add_argument(
        "--dataset.path",
        dest="dataset_path",
        type=str,
        help="Path to the housing CSV file.",
        default=os.environ.get("DATASET_PATH", "data/Housing.csv"),
    )

    parser.add_argument(
        "--split.train_ratio",
        dest="train_ratio",
        type=float,
        help="Fraction of records used for training, in (0, 1].",
        default=float(os.environ.get("TRAIN_RATIO", "0.8")),
    )

    parser.add_argument(
        "--split.seed",
        dest="split_seed",
        type=int,
        help="Shuffle seed for the train/test split.",
        default=int(os.environ.get("SPLIT_SEED", "42")),
    )

    parser.add_argument(
        "--train.epochs",
        dest="train_epochs",
        type=int,
        help="Number of training epochs (only iterative models improve with more).",
        default=int(os.environ.get("TRAIN_EPOCHS", "1")),
    )

    parser.add_argument(
        "--train.report_every",
        dest="train_report_every",
        type=int,
        help="Report training progress every N epochs.",
        default=int(os.environ.get("TRAIN_REPORT_EVERY", "100")),
    )

    parser.add_argument(
        "--model.l2",
        dest="model_l2",
        type=float,
        help="L2 regularization strength of the linear model.",
        default=float(os.environ.get("MODEL_L2", "1e-4")),
    )

    parser.add_argument(
        "--metrics.mape_window",
        dest="mape_window",
        type=int,
        help="Leading samples used for windowed MAPE (0 disables it).",
        default=int(os.environ.get("MAPE_WINDOW", "5")),
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=LOG_LEVELS,
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "INFO"),
    )

    parser.add_argument(
        "--wandb.on",
        dest="wandb_on",
        action="store_true",
        help="Enable WandB logging.",
        default=os.environ.get("WANDB_ON", "false").lower() == "true",
    )

    parser.add_argument(
        "--wandb.project",
        dest="wandb_project",
        type=str,
        help="WandB project name.",
        default=os.environ.get("WANDB_PROJECT", "house-prices"),
    )

    parser.add_argument(
        "--wandb.entity",
        dest="wandb_entity",
        type=str,
        help="WandB entity.",
        default=os.environ.get("WANDB_ENTITY", ""),
    )

    parser.add_argument(
        "--wandb.offline",
        dest="wandb_offline",
        action="store_true",
        help="Run WandB in offline mode.",
        default=os.environ.get("WANDB_OFFLINE", "false").lower() == "true",
    )


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if not 0.0 < config.train_ratio <= 1.0:
        raise ValueError(
            f"--split.train_ratio must be in (0, 1], got {config.train_ratio}"
        )

    if config.train_epochs < 1:
        raise ValueError(f"--train.epochs must be >= 1, got {config.train_epochs}")

    if config.train_report_every < 1:
        raise ValueError(
            f"--train.report_every must be >= 1, got {config.train_report_every}"
        )

    if config.model_l2 < 0:
        raise ValueError(f"--model.l2 must be >= 0, got {config.model_l2}")

    if config.mape_window < 0:
        raise ValueError(
            f"--metrics.mape_window must be >= 0, got {config.mape_window}"
        )

    if config.log_level not in LOG_LEVELS:
        raise ValueError(f"--log_level must be one of {LOG_LEVELS}")


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert config to dictionary for logging."""
    return {
        "dataset_path": str(config.dataset_path),
        "train_ratio": config.train_ratio,
        "split_seed": config.split_seed,
        "train_epochs": config.train_epochs,
        "train_report_every": config.train_report_every,
        "model_l2": config.model_l2,
        "mape_window": config.mape_window,
        "log_level": config.log_level,
        "wandb_on": config.wandb_on,
        "wandb_project": config.wandb_project,
        "wandb_entity": config.wandb_entity,
        "wandb_offline": config.wandb_offline,
    }


def training_config(config: argparse.Namespace) -> TrainingConfig:
    return TrainingConfig(
        epochs=config.train_epochs,
        report_every=config.train_report_every,
    )


def metrics_config(config: argparse.Namespace) -> MetricsConfig:
    # A window of 0 disables the windowed metric
    return MetricsConfig(mape_window=config.mape_window or None)


def wandb_config(config: argparse.Namespace) -> WandbConfig:
    return WandbConfig(
        project=config.wandb_project,
        entity=config.wandb_entity or None,
        enabled=config.wandb_on,
        offline=config.wandb_offline,
    )


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
