"""Regression models: the fit/predict contract, a scikit-learn ridge regressor and ONNX serving."""

from .base import RegressionModel, model_score
from .errors import (
    ModelError,
    ModelInterfaceError,
    ModelLoadError,
    ModelNotFittedError,
    UnsupportedOperationError,
)
from .linear import DEFAULT_L2, LinearRegressionModel
from .onnx_model import OnnxRegressionModel, export_to_onnx

__all__ = [
    # Contract
    "RegressionModel",
    "model_score",
    # Models
    "LinearRegressionModel",
    "OnnxRegressionModel",
    "DEFAULT_L2",
    # Serialization
    "export_to_onnx",
    # Errors
    "ModelError",
    "ModelNotFittedError",
    "ModelInterfaceError",
    "ModelLoadError",
    "UnsupportedOperationError",
]
