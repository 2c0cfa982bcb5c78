"""Data models for evaluation module."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .errors import UndefinedMetricError

METRIC_NAMES = ("mse", "rmse", "mae", "r2", "mape", "windowed_mape")


def _rounded(value: float | None, digits: int) -> float | None:
    """Round for serialization; NaN sentinels become None."""
    if value is None or math.isnan(value):
        return None
    return round(value, digits)


@dataclass(frozen=True)
class PredictionMetrics:
    """
    Prediction-quality metrics for one set of predictions.

    Undefined metrics hold NaN and are listed in `undefined`, so batch
    evaluation never partially fails. MAPE values are percentages
    (e.g. 8.5 for 8.5%).
    """

    # Error metrics (lower is better)
    mse: float  # Mean Squared Error
    rmse: float  # Root Mean Squared Error
    mae: float  # Mean Absolute Error
    mape: float  # Mean Absolute Percentage Error over the full set (%)

    # Explanatory metrics
    r2: float  # Coefficient of determination (-inf, 1]

    # Metadata
    n_samples: int  # Number of samples evaluated
    mape_samples: int = 0  # Samples with non-zero targets used for MAPE

    # MAPE over the leading window only (None when the window is disabled)
    windowed_mape: float | None = None

    undefined: frozenset[str] = field(default_factory=frozenset)

    def is_defined(self, name: str) -> bool:
        """Whether the named metric holds a real value."""
        if name not in METRIC_NAMES:
            raise KeyError(f"Unknown metric '{name}'. Known: {list(METRIC_NAMES)}")
        return name not in self.undefined and getattr(self, name) is not None

    def require(self, name: str) -> float:
        """
        Return a metric value, raising if it is undefined.

        Raises:
            UndefinedMetricError: If the metric carries the NaN sentinel
        """
        if not self.is_defined(name):
            raise UndefinedMetricError(
                f"Metric '{name}' is undefined for this evaluation "
                f"(n_samples={self.n_samples})"
            )
        return getattr(self, name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "mse": _rounded(self.mse, 8),
            "rmse": _rounded(self.rmse, 8),
            "mae": _rounded(self.mae, 8),
            "r2": _rounded(self.r2, 6),
            "mape": _rounded(self.mape, 4),
            "windowed_mape": _rounded(self.windowed_mape, 4),
            "n_samples": self.n_samples,
            "mape_samples": self.mape_samples,
            "undefined": sorted(self.undefined),
        }


@dataclass(frozen=True)
class SamplePrediction:
    """A single prediction in price scale, for reporting."""

    predicted_price: float
    actual_price: float

    @property
    def absolute_error(self) -> float:
        return abs(self.predicted_price - self.actual_price)

    @property
    def percentage_error(self) -> float | None:
        """Absolute percentage error (%), None when the actual price is zero."""
        if self.actual_price == 0:
            return None
        return self.absolute_error / abs(self.actual_price) * 100

    def to_dict(self) -> dict[str, Any]:
        percentage = self.percentage_error
        return {
            "predicted_price": round(self.predicted_price, 2),
            "actual_price": round(self.actual_price, 2),
            "absolute_error": round(self.absolute_error, 2),
            "percentage_error": round(percentage, 4) if percentage is not None else None,
        }


@dataclass(frozen=True)
class EvaluationResult:
    """
    Evaluation of a model on a testing split.

    `metrics` is computed on the normalized scale the model was trained on;
    `price_metrics` on denormalized prices (its mape is the headline
    percentage error).
    """

    metrics: PredictionMetrics
    price_metrics: PredictionMetrics
    samples: tuple[SamplePrediction, ...] = ()

    @property
    def n_samples(self) -> int:
        return self.metrics.n_samples

    @property
    def has_data(self) -> bool:
        return self.n_samples > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "n_samples": self.n_samples,
            "metrics": self.metrics.to_dict(),
            "price_metrics": self.price_metrics.to_dict(),
            "samples": [s.to_dict() for s in self.samples],
        }
