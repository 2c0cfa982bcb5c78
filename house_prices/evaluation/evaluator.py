"""Scores a trained model against a testing split."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from .metrics import MetricsConfig, calculate_metrics, validate_predictions
from .models import EvaluationResult, SamplePrediction

if TYPE_CHECKING:
    from house_prices.data import HousingDataset, HousingSample
    from house_prices.models import RegressionModel

logger = logging.getLogger(__name__)


def evaluate_model(
    model: RegressionModel,
    dataset: HousingDataset,
    testing: Sequence[HousingSample],
    config: MetricsConfig | None = None,
) -> EvaluationResult:
    """
    Predict the testing samples and compute metrics on both scales.

    MSE, RMSE and R² are reported on the normalized scale; percentage
    error on denormalized prices. An empty testing split yields undefined
    (NaN) metrics without calling the model.

    Args:
        model: Fitted regression model
        dataset: Dataset whose bounds the model was trained against
        testing: Testing samples from split_dataset()
        config: Metrics configuration. Uses defaults if None.

    Returns:
        EvaluationResult

    Raises:
        InvalidPredictionError: If the model output has the wrong shape or
            contains NaN/Inf
    """
    config = config or MetricsConfig()

    if not testing:
        logger.warning("Testing split is empty; metrics are undefined")
        empty = calculate_metrics(np.array([]), np.array([]), config)
        return EvaluationResult(metrics=empty, price_metrics=empty)

    features = dataset.feature_matrix(testing)
    targets = dataset.target_matrix(testing).flatten()

    logger.debug(f"Predicting {len(testing)} testing samples")
    predictions = validate_predictions(model.predict(features), len(testing))

    metrics = calculate_metrics(targets, predictions, config)

    bounds = dataset.bounds
    predicted_prices = np.array([bounds.denormalize_price(p) for p in predictions])
    actual_prices = np.array([s.price for s in testing], dtype=np.float64)
    price_metrics = calculate_metrics(actual_prices, predicted_prices, config)

    samples = tuple(
        SamplePrediction(predicted_price=float(p), actual_price=float(a))
        for p, a in zip(
            predicted_prices[: config.sample_count],
            actual_prices[: config.sample_count],
            strict=True,
        )
    )

    logger.info(
        f"Evaluation on {metrics.n_samples} samples: "
        f"MSE (normalized)={metrics.mse:.6f}, RMSE (normalized)={metrics.rmse:.6f}, "
        f"R²={metrics.r2:.4f}, MAPE={price_metrics.mape:.2f}%"
    )

    return EvaluationResult(
        metrics=metrics,
        price_metrics=price_metrics,
        samples=samples,
    )
