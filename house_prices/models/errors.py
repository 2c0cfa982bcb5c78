"""Custom exceptions for regression models."""


class ModelError(Exception):
    """Base exception for model-related errors."""

    pass


class ModelNotFittedError(ModelError):
    """
    Raised when a model is used before it has been trained.

    This can happen when:
    - predict() or score() is called before fit()
    - An unfitted model is passed to export_to_onnx()
    """

    pass


class ModelInterfaceError(ModelError):
    """
    Raised when a model's inputs or outputs don't match the feature layout.

    This can happen when:
    - Feature matrix has the wrong number of columns
    - ONNX model has more than one input or output
    - ONNX input dimension differs from the dataset's feature count
    """

    pass


class ModelLoadError(ModelError):
    """
    Raised when a serialized model cannot be loaded or run.

    This can happen when:
    - Model file doesn't exist
    - File is not valid ONNX
    - ONNX Runtime fails to create a session or run inference
    """

    pass


class UnsupportedOperationError(ModelError):
    """
    Raised when a model does not support the requested operation.

    This can happen when:
    - fit() is called on an inference-only ONNX model
    - export_to_onnx() is given a model type it cannot serialize
    """

    pass
