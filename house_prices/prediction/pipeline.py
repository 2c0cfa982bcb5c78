"""Single-sample inference using the bounds a model was trained against."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from .errors import InvalidFeatureVectorError, PredictionError
from .models import PredictionOutcome

if TYPE_CHECKING:
    from house_prices.data import HousingDataset, HousingRecord
    from house_prices.models import RegressionModel

logger = logging.getLogger(__name__)


class PricePredictor:
    """
    Encodes, normalizes, predicts and denormalizes one house at a time.

    The dataset supplies both the feature encoder and the normalization
    bounds, so it must be the same dataset (or one with identical bounds)
    that the model was trained on.

    Usage:
        predictor = PricePredictor(dataset, model)
        price = predictor.predict([7420, 4, 2, 3, 1, 0, 0, 0, 1, 2, 1, 0])
        outcome = predictor.predict_safely(raw_features)
    """

    def __init__(self, dataset: HousingDataset, model: RegressionModel):
        self._dataset = dataset
        self._model = model

    @property
    def dataset(self) -> HousingDataset:
        return self._dataset

    @property
    def model(self) -> RegressionModel:
        return self._model

    def predict(self, raw_features: Sequence[float] | np.ndarray) -> float:
        """
        Predict the price for one raw (unnormalized) feature vector.

        Args:
            raw_features: Encoded features in feature_order, length
                dataset.input_dimension

        Returns:
            Predicted price on the original scale

        Raises:
            InvalidFeatureVectorError: If the vector has the wrong shape or
                non-finite values
            PredictionError: If the model output is not a single finite value
        """
        features = self._validate(raw_features)
        normalized = self._dataset.bounds.normalize_features(features).reshape(1, -1)

        output = np.asarray(self._model.predict(normalized), dtype=np.float64).reshape(-1)
        if output.size != 1:
            raise PredictionError(
                f"Model returned {output.size} values for a single sample"
            )

        value = float(output[0])
        if not math.isfinite(value):
            raise PredictionError(f"Model returned a non-finite prediction: {value}")

        price = self._dataset.denormalize_price(value)
        logger.debug(f"Predicted price {price:.2f} (normalized {value:.6f})")
        return price

    def predict_record(self, record: HousingRecord) -> float:
        """Predict the price for a parsed record (its own price is ignored)."""
        return self.predict(self._dataset.encoder.encode_record(record))

    def predict_inputs(self, **inputs: Any) -> float:
        """
        Predict from keyword inputs named after feature_order fields.

        Raises:
            MissingFieldError: If an input is missing
        """
        return self.predict(self._dataset.encoder.encode_inputs(**inputs))

    def predict_safely(
        self, raw_features: Sequence[float] | np.ndarray
    ) -> PredictionOutcome:
        """
        Predict without raising; failures become a readable error message.

        Successful outcomes also carry the explain() factors.
        """
        try:
            price = self.predict(raw_features)
            factors = tuple(self.explain(raw_features))
        except Exception as e:
            logger.warning(f"Prediction failed: {e}")
            return PredictionOutcome(success=False, error_message=str(e))

        return PredictionOutcome(success=True, price=price, factors=factors)

    def explain(self, raw_features: Sequence[float] | np.ndarray) -> list[str]:
        """
        List simple factors that push the price up for this house.

        This is a heuristic over the inputs, not derived from the model:
        living area above the dataset average, a preferred area, and air
        conditioning.
        """
        features = self._validate(raw_features)
        names = self._dataset.feature_names
        factors = []

        if "area" in names:
            area = features[names.index("area")]
            mean_area = self._dataset.mean_area()
            if area > mean_area:
                factors.append(f"Large living area (above average of {mean_area:.0f})")

        if "prefarea" in names and features[names.index("prefarea")] > 0:
            factors.append("Located in a preferred area")

        if "airconditioning" in names and features[names.index("airconditioning")] > 0:
            factors.append("Has air conditioning")

        return factors

    def _validate(self, raw_features: Sequence[float] | np.ndarray) -> np.ndarray:
        try:
            features = np.asarray(raw_features, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidFeatureVectorError(f"Features must be numeric: {e}") from e

        if features.ndim != 1:
            raise InvalidFeatureVectorError(
                f"Expected a 1D feature vector, got shape {features.shape}"
            )

        expected = self._dataset.input_dimension
        if len(features) != expected:
            raise InvalidFeatureVectorError(
                f"Expected {expected} features, got {len(features)}"
            )

        if not np.all(np.isfinite(features)):
            raise InvalidFeatureVectorError("Features contain NaN or Inf values")

        return features
