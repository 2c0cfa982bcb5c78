"""
Observability module for experiment tracking.

This module provides WandB integration for logging training progress,
evaluation metrics, sample predictions and the correlation matrix.

Usage:
    from house_prices.observability import create_wandb_logger

    wandb_logger = create_wandb_logger(project="house-prices", enabled=True)
    wandb_logger.start_run()

    train_model(model, dataset, split, progress=wandb_logger.on_training_event)
    wandb_logger.log_evaluation(result)
    wandb_logger.log_correlations(matrix)

    wandb_logger.finish()

Logged Data:
    - Training scalars: epoch, stage, score
    - Evaluation scalars: MSE/RMSE/R² (normalized) and MAE/MAPE (price)
    - Sample predictions table and correlation matrix table
"""

from .models import EvaluationLog, WandbConfig
from .wandb_logger import WandbLogger, create_wandb_logger

__all__ = [
    # Main entry point
    "create_wandb_logger",
    # Classes
    "WandbLogger",
    "WandbConfig",
    # Log models
    "EvaluationLog",
]
