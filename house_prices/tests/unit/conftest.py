"""Shared fixtures for unit tests."""

import numpy as np
import pytest


class StubModel:
    """
    Regressor returning a fixed normalized value for every row.

    Records fit() calls so tests can assert on what the trainer passed.
    """

    def __init__(self, value: float = 0.5, score: float | None = 0.01):
        self.value = value
        self._score = score
        self.fit_calls: list[tuple[np.ndarray, np.ndarray]] = []

    def fit(self, features: np.ndarray, targets: np.ndarray) -> None:
        self.fit_calls.append((features, targets))

    def predict(self, features: np.ndarray) -> np.ndarray:
        return np.full((len(features), 1), self.value)

    def score(self) -> float:
        return self._score


@pytest.fixture
def stub_model() -> StubModel:
    """Model predicting 0.5 (mid-range price) for every sample."""
    return StubModel()


@pytest.fixture
def stub_model_factory() -> type[StubModel]:
    """The StubModel class, for tests that need custom values."""
    return StubModel
