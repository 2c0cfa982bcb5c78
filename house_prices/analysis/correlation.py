"""Pearson correlation matrix over raw features and price."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..data import PRICE_LABEL
from .models import CorrelationMatrix

if TYPE_CHECKING:
    from house_prices.data import HousingDataset

logger = logging.getLogger(__name__)


def pearson_matrix(data: np.ndarray) -> np.ndarray:
    """
    Symmetric Pearson correlation matrix of the columns of data.

    For each pair (i, j): cov / (sqrt(si) * sqrt(sj)) where si, sj are the
    sums of squared deviations; 0.0 when either column has zero variance.
    The diagonal is exactly 1.0. With no rows the result is all zeros.

    Args:
        data: Array of shape (n, k)

    Returns:
        float64 array of shape (k, k), entries in [-1, 1]
    """
    data = np.asarray(data, dtype=np.float64)
    n, k = data.shape

    if n == 0:
        return np.zeros((k, k), dtype=np.float64)

    deviations = data - data.mean(axis=0)
    cross = deviations.T @ deviations
    spread = np.sqrt(np.diag(cross))

    denominator = np.outer(spread, spread)
    defined = denominator > 0
    corr = np.divide(
        cross, denominator, out=np.zeros_like(cross), where=defined
    )

    # Mirror the upper triangle so the result is exactly symmetric
    upper = np.triu(np.clip(corr, -1.0, 1.0), k=1)
    result = upper + upper.T
    np.fill_diagonal(result, 1.0)
    return result


def correlation_matrix(dataset: HousingDataset) -> CorrelationMatrix:
    """
    Correlation of every raw feature and price, computed from the live dataset.

    Uses raw (unnormalized) values. Idempotent: repeated calls on the same
    dataset return equal matrices.

    Returns:
        CorrelationMatrix labelled feature_names + ["price"]
    """
    labels = (*dataset.feature_names, PRICE_LABEL)

    if dataset.is_empty:
        logger.warning("Correlation requested for an empty dataset; returning zeros")
        values = np.zeros((len(labels), len(labels)), dtype=np.float64)
        return CorrelationMatrix(labels=labels, values=values, n_samples=0)

    data = np.column_stack([dataset.raw_feature_matrix(), dataset.prices()])
    values = pearson_matrix(data)

    logger.debug(f"Computed {values.shape[0]}x{values.shape[1]} correlation matrix")
    return CorrelationMatrix(labels=labels, values=values, n_samples=len(dataset))
