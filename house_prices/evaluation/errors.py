"""Custom exceptions for evaluation module."""


class EvaluationError(Exception):
    """Base exception for evaluation-related errors."""

    pass


# --- Metrics errors ---


class MetricsError(EvaluationError):
    """
    Raised when metrics calculation fails.

    This can happen when:
    - Input arrays have different lengths
    - Prediction array has an invalid shape
    """

    pass


class UndefinedMetricError(MetricsError):
    """
    Raised when a caller requires a metric that is undefined.

    Metrics are never raised during calculation; they carry a NaN sentinel
    and are listed in PredictionMetrics.undefined. This is raised only by
    PredictionMetrics.require(). Undefined cases:
    - Any metric when there are no samples
    - r2 when all targets are identical
    - mape when every target is zero
    """

    pass


class InvalidPredictionError(EvaluationError):
    """
    Raised when a model produces invalid predictions.

    This can happen when:
    - Output shape doesn't match expected (N,) or (N, 1)
    - Output length doesn't match the number of samples
    - Predictions contain NaN or Inf (these break metrics calculations)
    """

    pass
