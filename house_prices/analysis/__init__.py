"""
Dataset analysis: Pearson correlation between features and price.

Usage:
    from house_prices.analysis import correlation_matrix

    matrix = correlation_matrix(dataset)
    for label, value in matrix.with_target("price"):
        print(f"{label}: {value:.2f} ({correlation_strength(value)})")
"""

from .correlation import correlation_matrix, pearson_matrix
from .models import (
    MODERATE_CORRELATION,
    STRONG_CORRELATION,
    CorrelationMatrix,
    correlation_strength,
)

__all__ = [
    "correlation_matrix",
    "pearson_matrix",
    "correlation_strength",
    "CorrelationMatrix",
    "STRONG_CORRELATION",
    "MODERATE_CORRELATION",
]
