"""
Evaluation module for scoring price predictions.

This module provides:
- Prediction metrics (MSE, RMSE, MAE, R², MAPE and windowed MAPE)
- Model evaluation against a testing split on normalized and price scales

Usage:
    from house_prices.evaluation import calculate_metrics, evaluate_model

    metrics = calculate_metrics(y_true, y_pred)
    print(f"RMSE: {metrics.rmse:.4f}, R²: {metrics.r2:.4f}")

    result = evaluate_model(model, dataset, split.testing)
    print(f"MAPE: {result.price_metrics.mape:.2f}%")
"""

from .errors import (
    EvaluationError,
    InvalidPredictionError,
    MetricsError,
    UndefinedMetricError,
)
from .evaluator import evaluate_model
from .metrics import MetricsConfig, calculate_metrics, validate_predictions
from .models import METRIC_NAMES, EvaluationResult, PredictionMetrics, SamplePrediction

__all__ = [
    # Entry points
    "calculate_metrics",
    "evaluate_model",
    "validate_predictions",
    "MetricsConfig",
    # Models
    "METRIC_NAMES",
    "PredictionMetrics",
    "EvaluationResult",
    "SamplePrediction",
    # Errors
    "EvaluationError",
    "MetricsError",
    "UndefinedMetricError",
    "InvalidPredictionError",
]
