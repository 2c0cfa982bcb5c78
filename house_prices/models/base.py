"""Contract shared by every regressor the pipeline can train or serve."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RegressionModel(Protocol):
    """
    Opaque regressor over normalized features.

    Features are (n, d) float64 matrices and targets (n, 1) column vectors,
    both on the normalized [0, 1] scale produced by HousingDataset. score()
    is optional; the trainer only uses it for progress reporting.
    """

    def fit(self, features: np.ndarray, targets: np.ndarray) -> None: ...

    def predict(self, features: np.ndarray) -> np.ndarray: ...


def model_score(model: RegressionModel) -> float | None:
    """Return model.score() if the model provides one, else None."""
    score = getattr(model, "score", None)
    if not callable(score):
        return None
    return float(score())
