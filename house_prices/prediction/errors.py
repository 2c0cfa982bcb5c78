"""Custom exceptions for single-sample price prediction."""


class PredictionError(Exception):
    """
    Raised when a price cannot be predicted.

    This can happen when:
    - The model returns NaN/Inf or more than one value for a single sample
    """

    pass


class InvalidFeatureVectorError(PredictionError):
    """
    Raised when raw features don't match the dataset's feature layout.

    This can happen when:
    - Vector length differs from the dataset's input dimension
    - Vector is not one-dimensional
    - A feature value is NaN or Inf
    """

    pass
