"""
This module provides functions to calculate prediction accuracy metrics:
- MSE: Mean Squared Error
- RMSE: Root Mean Squared Error
- MAE: Mean Absolute Error
- R²: Coefficient of Determination
- MAPE: Mean Absolute Percentage Error, over the full set and over a
  leading window of samples

Percentage metrics are returned in percent (8.5 means 8.5%).

Undefined metrics never raise. They are set to NaN and listed in
PredictionMetrics.undefined:
- every metric when there are no samples
- R² when all targets are identical (SS_tot == 0)
- MAPE when no sample has a non-zero target (zero targets are skipped)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .errors import InvalidPredictionError, MetricsError
from .models import METRIC_NAMES, PredictionMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricsConfig:
    """Configuration for metrics calculation."""

    mape_window: int | None = 5
    """Number of leading samples for windowed_mape. None = disabled."""

    sample_count: int = 5
    """Number of sample predictions kept by evaluate_model for reporting."""


def calculate_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    config: MetricsConfig | None = None,
) -> PredictionMetrics:
    """
    Calculate all prediction metrics.

    Args:
        y_true: Ground truth values (1D array or (N, 1))
        y_pred: Predicted values (1D array or (N, 1))
        config: Metrics configuration. Uses defaults if None.

    Returns:
        PredictionMetrics with all computed values

    Raises:
        MetricsError: If arrays have different lengths

    Example:
        >>> metrics = calculate_metrics(np.array([1.0, 2.0]), np.array([1.0, 2.0]))
        >>> metrics.mse, metrics.r2
        (0.0, 1.0)
    """
    config = config or MetricsConfig()

    y_true = np.asarray(y_true, dtype=np.float64).flatten()
    y_pred = np.asarray(y_pred, dtype=np.float64).flatten()

    if len(y_true) != len(y_pred):
        raise MetricsError(
            f"Array length mismatch: y_true={len(y_true)}, y_pred={len(y_pred)}"
        )

    n = len(y_true)
    if n == 0:
        logger.warning("No samples to evaluate; all metrics are undefined")
        return _empty_metrics(config)

    undefined: set[str] = set()

    ss_res = _sum_squared_residuals(y_true, y_pred)
    mse = ss_res / n
    rmse = math.sqrt(mse)
    mae = float(np.mean(np.abs(y_pred - y_true)))

    r2 = _calculate_r2(y_true, ss_res)
    if math.isnan(r2):
        undefined.add("r2")

    mape, mape_samples = _calculate_mape(y_true, y_pred)
    if mape_samples == 0:
        undefined.add("mape")

    windowed_mape = None
    if config.mape_window is not None:
        window = config.mape_window
        windowed_mape, window_samples = _calculate_mape(y_true[:window], y_pred[:window])
        if window_samples == 0:
            undefined.add("windowed_mape")

    if undefined:
        logger.debug(f"Undefined metrics: {sorted(undefined)}")

    return PredictionMetrics(
        mse=mse,
        rmse=rmse,
        mae=mae,
        r2=r2,
        mape=mape,
        n_samples=n,
        mape_samples=mape_samples,
        windowed_mape=windowed_mape,
        undefined=frozenset(undefined),
    )


def _empty_metrics(config: MetricsConfig) -> PredictionMetrics:
    """Metrics for zero samples: every value is the NaN sentinel."""
    nan = float("nan")
    windowed = nan if config.mape_window is not None else None
    undefined = set(METRIC_NAMES)
    if windowed is None:
        undefined.discard("windowed_mape")
    return PredictionMetrics(
        mse=nan,
        rmse=nan,
        mae=nan,
        r2=nan,
        mape=nan,
        n_samples=0,
        mape_samples=0,
        windowed_mape=windowed,
        undefined=frozenset(undefined),
    )


# --- Individual metric functions ---


def _sum_squared_residuals(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """SS_res, shared by MSE (divided by n) and R² (undivided)."""
    return float(np.sum((y_pred - y_true) ** 2))


def _calculate_r2(y_true: np.ndarray, ss_res: float) -> float:
    """
    Calculate R² (Coefficient of Determination).

    Formula: R² = 1 - (SS_res / SS_tot)
    where SS_tot = sum((y_true - mean(y_true))²)

    Returns:
        R² value (can be negative if model is worse than mean),
        NaN when all targets are identical
    """
    ss_tot = float(np.sum((y_true - np.mean(y_true)) ** 2))
    if ss_tot == 0:
        return float("nan")
    return 1.0 - ss_res / ss_tot


def _calculate_mape(y_true: np.ndarray, y_pred: np.ndarray) -> tuple[float, int]:
    """
    Calculate Mean Absolute Percentage Error, skipping zero targets.

    Formula: MAPE = mean(|y_pred - y_true| / |y_true|) * 100

    Returns:
        (MAPE in percent or NaN if no non-zero targets, samples used)
    """
    nonzero = y_true != 0
    used = int(np.count_nonzero(nonzero))
    if used == 0:
        return float("nan"), 0

    skipped = len(y_true) - used
    if skipped:
        logger.debug(f"MAPE skipped {skipped} samples with zero target")

    pct_errors = np.abs(y_pred[nonzero] - y_true[nonzero]) / np.abs(y_true[nonzero])
    return float(np.mean(pct_errors) * 100), used


def validate_predictions(
    predictions: np.ndarray,
    expected_length: int | None = None,
) -> np.ndarray:
    """
    Validate and normalize a prediction array.

    Checks for:
    - Correct shape (1D or column vector)
    - No NaN or Inf values (these break metrics calculations)
    - Correct length if expected_length provided

    Args:
        predictions: Raw predictions from model
        expected_length: Expected number of predictions (optional)

    Returns:
        Validated 1D float64 array

    Raises:
        InvalidPredictionError: If predictions are invalid
    """
    predictions = np.asarray(predictions, dtype=np.float64)

    # Flatten if needed (handle (N,1) shape)
    if predictions.ndim == 2 and predictions.shape[1] == 1:
        predictions = predictions.flatten()
    elif predictions.ndim != 1:
        raise InvalidPredictionError(
            f"Invalid prediction shape: {predictions.shape}. Expected 1D or (N,1)."
        )

    if expected_length is not None and len(predictions) != expected_length:
        raise InvalidPredictionError(
            f"Prediction count mismatch: got {len(predictions)}, expected {expected_length}"
        )

    if np.any(np.isnan(predictions)):
        nan_count = int(np.sum(np.isnan(predictions)))
        raise InvalidPredictionError(f"Predictions contain {nan_count} NaN values")

    if np.any(np.isinf(predictions)):
        inf_count = int(np.sum(np.isinf(predictions)))
        raise InvalidPredictionError(f"Predictions contain {inf_count} Inf values")

    return predictions
