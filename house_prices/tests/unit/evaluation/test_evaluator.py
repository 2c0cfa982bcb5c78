"""Tests for evaluate_model."""

import math
from unittest.mock import MagicMock

import numpy as np
import pytest

from house_prices.data import HousingDataset, split_dataset
from house_prices.evaluation import (
    InvalidPredictionError,
    MetricsConfig,
    evaluate_model,
)


class OracleModel:
    """Predicts each sample's true normalized target."""

    def __init__(self, dataset: HousingDataset):
        self._targets = {
            tuple(s.normalized_features): float(s.normalized_target[0])
            for s in dataset.samples
        }

    def fit(self, features: np.ndarray, targets: np.ndarray) -> None:
        pass

    def predict(self, features: np.ndarray) -> np.ndarray:
        return np.array([[self._targets[tuple(row)]] for row in features])


class TestEvaluateModel:
    """Tests for evaluate_model."""

    def test_perfect_model(self, housing_dataset: HousingDataset) -> None:
        """Exact predictions give zero error on both scales."""
        split = split_dataset(housing_dataset, 0.5, seed=42)

        result = evaluate_model(OracleModel(housing_dataset), housing_dataset, split.testing)

        assert result.n_samples == 6
        assert result.metrics.mse == pytest.approx(0.0)
        assert result.metrics.r2 == pytest.approx(1.0)
        assert result.price_metrics.mape == pytest.approx(0.0, abs=1e-9)

    def test_price_metrics_use_denormalized_prices(
        self, housing_dataset: HousingDataset, stub_model
    ) -> None:
        """MAPE is computed on prices, MSE on the normalized scale."""
        split = split_dataset(housing_dataset, 0.5, seed=42)
        bounds = housing_dataset.bounds
        predicted_price = bounds.denormalize_price(0.5)

        result = evaluate_model(stub_model, housing_dataset, split.testing)

        actual = np.array([s.price for s in split.testing])
        targets = np.array([s.normalized_target[0] for s in split.testing])
        expected_mape = np.mean(np.abs(predicted_price - actual) / actual) * 100
        assert result.price_metrics.mape == pytest.approx(expected_mape)
        assert result.metrics.mse == pytest.approx(np.mean((0.5 - targets) ** 2))

    def test_keeps_leading_sample_predictions(
        self, housing_dataset: HousingDataset, stub_model
    ) -> None:
        """sample_count predictions are kept in testing order."""
        split = split_dataset(housing_dataset, 0.5, seed=42)

        result = evaluate_model(
            stub_model, housing_dataset, split.testing, MetricsConfig(sample_count=3)
        )

        assert len(result.samples) == 3
        assert [s.actual_price for s in result.samples] == [
            s.price for s in split.testing[:3]
        ]
        assert result.samples[0].predicted_price == pytest.approx(
            housing_dataset.denormalize_price(0.5)
        )

    def test_empty_testing_split(self, varied_dataset: HousingDataset) -> None:
        """ratio 1.0 leaves no testing data: metrics undefined, model not called."""
        model = MagicMock()
        split = split_dataset(varied_dataset, 1.0, seed=42)

        result = evaluate_model(model, varied_dataset, split.testing)

        model.predict.assert_not_called()
        assert not result.has_data
        assert math.isnan(result.metrics.mse)
        assert "r2" in result.metrics.undefined
        assert result.samples == ()

    def test_invalid_predictions_raise(
        self, housing_dataset: HousingDataset, stub_model_factory
    ) -> None:
        """NaN model output is rejected before metrics are computed."""
        split = split_dataset(housing_dataset, 0.5, seed=42)

        with pytest.raises(InvalidPredictionError, match="NaN"):
            evaluate_model(stub_model_factory(value=np.nan), housing_dataset, split.testing)

    def test_wrong_prediction_count_raises(
        self, housing_dataset: HousingDataset
    ) -> None:
        """A model returning too few rows is rejected."""
        model = MagicMock()
        model.predict.return_value = np.array([[0.5]])
        split = split_dataset(housing_dataset, 0.5, seed=42)

        with pytest.raises(InvalidPredictionError, match="count mismatch"):
            evaluate_model(model, housing_dataset, split.testing)

    def test_to_dict(self, housing_dataset: HousingDataset, stub_model) -> None:
        """Results serialize to plain dicts."""
        split = split_dataset(housing_dataset, 0.5, seed=42)

        result = evaluate_model(stub_model, housing_dataset, split.testing).to_dict()

        assert result["n_samples"] == 6
        assert set(result) >= {"metrics", "price_metrics", "samples"}
        assert len(result["samples"]) == 5
