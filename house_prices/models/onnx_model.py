"""
ONNX export and inference for trained regressors.

A fitted LinearRegressionModel is serialized as a MatMul + Add graph with a
dynamic batch dimension, so it can be served by ONNX Runtime without numpy
model code.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import onnx
import onnxruntime as ort
from onnx import TensorProto, helper, numpy_helper

from .errors import (
    ModelInterfaceError,
    ModelLoadError,
    UnsupportedOperationError,
)
from .linear import LinearRegressionModel

if TYPE_CHECKING:
    from house_prices.data import FeatureBounds

logger = logging.getLogger(__name__)

INPUT_NAME = "features"
OUTPUT_NAME = "price"
OPSET_VERSION = 17
IR_VERSION = 8

# metadata_props key holding the normalization bounds the model was trained on
BOUNDS_METADATA_KEY = "house_prices.bounds"


def export_to_onnx(
    model: LinearRegressionModel,
    path: str | Path,
    bounds: FeatureBounds | None = None,
) -> Path:
    """
    Write a fitted linear model to an ONNX file.

    The model predicts on normalized features, so the bounds it was trained
    against are stored in the model metadata for OnnxRegressionModel to check.

    Args:
        model: Fitted LinearRegressionModel
        path: Destination file; parent directories are created
        bounds: Normalization bounds of the training dataset

    Returns:
        Path of the written file

    Raises:
        ModelNotFittedError: If the model has not been fitted
        UnsupportedOperationError: If the model type cannot be exported
    """
    if not isinstance(model, LinearRegressionModel):
        raise UnsupportedOperationError(
            f"Cannot export {type(model).__name__} to ONNX; "
            "only LinearRegressionModel is supported"
        )

    coef = model.coef.astype(np.float32).reshape(-1, 1)
    intercept = np.array([model.intercept], dtype=np.float32)
    n_features = coef.shape[0]

    input_tensor = helper.make_tensor_value_info(
        INPUT_NAME, TensorProto.FLOAT, ["batch", n_features]
    )
    output_tensor = helper.make_tensor_value_info(
        OUTPUT_NAME, TensorProto.FLOAT, ["batch", 1]
    )

    weights = numpy_helper.from_array(coef, name="weights")
    bias = numpy_helper.from_array(intercept, name="bias")

    nodes = [
        helper.make_node("MatMul", inputs=[INPUT_NAME, "weights"], outputs=["linear"]),
        helper.make_node("Add", inputs=["linear", "bias"], outputs=[OUTPUT_NAME]),
    ]

    graph = helper.make_graph(
        nodes,
        "house-price-linear",
        [input_tensor],
        [output_tensor],
        initializer=[weights, bias],
    )

    onnx_model = helper.make_model(
        graph,
        producer_name="house-prices-pipeline",
        ir_version=IR_VERSION,
        opset_imports=[helper.make_opsetid("", OPSET_VERSION)],
    )
    if bounds is not None:
        helper.set_model_props(
            onnx_model, {BOUNDS_METADATA_KEY: json.dumps(bounds.to_dict())}
        )
    onnx.checker.check_model(onnx_model)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    onnx.save(onnx_model, str(path))

    logger.info(f"Exported model with {n_features} features to {path}")
    return path


class OnnxRegressionModel:
    """
    Inference-only regressor backed by an ONNX Runtime session.

    Usage:
        model = OnnxRegressionModel(
            "model.onnx",
            expected_features=dataset.input_dimension,
            expected_bounds=dataset.bounds,
        )
        predictions = model.predict(features)  # shape (m, 1)
    """

    def __init__(
        self,
        path: str | Path,
        expected_features: int | None = None,
        expected_bounds: FeatureBounds | None = None,
    ):
        """
        Load and validate an ONNX model.

        Args:
            path: Path to the .onnx file
            expected_features: Required input width. If None, not checked.
            expected_bounds: Bounds of the dataset used for normalization.
                If given, they must equal the bounds stored at export.

        Raises:
            ModelLoadError: If the file is missing, invalid or cannot be loaded
            ModelInterfaceError: If inputs/outputs don't match expectations or the
                model was trained against different normalization bounds
        """
        self._path = Path(path)
        self._expected_features = expected_features
        self._session = self._load_session()
        self._input_name = self._validate_interface()
        self._trained_bounds = self._read_bounds()
        if expected_bounds is not None:
            self._check_bounds(expected_bounds)

    def _load_session(self) -> ort.InferenceSession:
        if not self._path.exists():
            raise ModelLoadError(f"Model file not found: {self._path}")

        try:
            onnx.checker.check_model(str(self._path))
        except onnx.checker.ValidationError as e:
            raise ModelLoadError(f"Invalid ONNX format: {e}") from e
        except Exception as e:
            raise ModelLoadError(f"Failed to read ONNX model: {e}") from e

        try:
            return ort.InferenceSession(
                str(self._path), providers=["CPUExecutionProvider"]
            )
        except Exception as e:
            raise ModelLoadError(f"Failed to load model: {e}") from e

    def _validate_interface(self) -> str:
        """Check for a single (batch, d) input and a single price output."""
        inputs = self._session.get_inputs()
        if len(inputs) != 1:
            raise ModelInterfaceError(
                f"Model has {len(inputs)} inputs, expected 1. "
                "Model should have a single input for house features."
            )

        input_shape = inputs[0].shape
        if len(input_shape) != 2:
            raise ModelInterfaceError(
                f"Input shape {input_shape} invalid. Expected 2D shape (batch, features)."
            )

        feature_dim = input_shape[1]
        if (
            self._expected_features is not None
            and isinstance(feature_dim, int)
            and feature_dim != self._expected_features
        ):
            raise ModelInterfaceError(
                f"Model expects {feature_dim} features, but dataset provides "
                f"{self._expected_features}."
            )

        outputs = self._session.get_outputs()
        if len(outputs) != 1:
            raise ModelInterfaceError(
                f"Model has {len(outputs)} outputs, expected 1. "
                "Model should output a single price prediction per sample."
            )

        output_shape = outputs[0].shape
        if len(output_shape) == 2:
            out_dim = output_shape[1]
            if isinstance(out_dim, int) and out_dim != 1:
                raise ModelInterfaceError(
                    f"Output shape {output_shape} invalid. "
                    "Expected (batch,) or (batch, 1) for price predictions."
                )

        logger.debug(
            f"Model interface: input={list(input_shape)}, output={list(output_shape)}"
        )
        return inputs[0].name

    def _read_bounds(self) -> dict[str, Any] | None:
        metadata = self._session.get_modelmeta().custom_metadata_map
        raw = metadata.get(BOUNDS_METADATA_KEY)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ModelLoadError(f"Invalid bounds metadata in {self._path}: {e}") from e

    def _check_bounds(self, expected: FeatureBounds) -> None:
        """Reject a dataset whose normalization differs from the training data."""
        if self._trained_bounds is None:
            logger.warning(
                f"{self._path} has no stored normalization bounds; "
                "cannot verify it matches the dataset"
            )
            return

        trained = self._trained_bounds
        matches = (
            len(trained["feature_min"]) == expected.dimension
            and np.allclose(trained["feature_min"], expected.feature_min)
            and np.allclose(trained["feature_max"], expected.feature_max)
            and np.isclose(trained["price_min"], expected.price_min)
            and np.isclose(trained["price_max"], expected.price_max)
        )
        if not matches:
            raise ModelInterfaceError(
                f"Model {self._path} was trained against different normalization "
                f"bounds (price {trained['price_min']:,.0f}-{trained['price_max']:,.0f}) "
                f"than the dataset (price {expected.price_min:,.0f}-"
                f"{expected.price_max:,.0f}). Predict with the training dataset."
            )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def trained_bounds(self) -> dict[str, Any] | None:
        """Bounds stored at export, as written by FeatureBounds.to_dict()."""
        return self._trained_bounds

    def fit(self, features: np.ndarray, targets: np.ndarray) -> None:
        raise UnsupportedOperationError(
            "ONNX models are inference-only; train a LinearRegressionModel and export it"
        )

    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Run inference.

        Returns:
            (m, 1) float64 array of normalized predictions

        Raises:
            ModelLoadError: If ONNX Runtime fails during inference
        """
        x = np.asarray(features, dtype=np.float32)
        if x.ndim == 1:
            x = x.reshape(1, -1)

        try:
            outputs = self._session.run(None, {self._input_name: x})
        except Exception as e:
            raise ModelLoadError(f"Inference failed: {e}") from e

        return np.asarray(outputs[0], dtype=np.float64).reshape(-1, 1)

    def __repr__(self) -> str:
        return f"OnnxRegressionModel({str(self._path)!r})"
