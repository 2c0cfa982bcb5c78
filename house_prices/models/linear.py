"""Ridge regression backed by scikit-learn."""

from __future__ import annotations

import logging

import numpy as np
from sklearn.linear_model import Ridge

from .errors import ModelError, ModelInterfaceError, ModelNotFittedError

logger = logging.getLogger(__name__)

DEFAULT_L2 = 1e-4


class LinearRegressionModel:
    """
    Ridge regression over normalized housing features.

    Wraps sklearn's Ridge with fit_intercept=True, so the intercept is not
    penalized. The fit is closed-form: fitting again on identical data keeps
    the previous solution instead of re-solving, which makes extra training
    epochs free for this model.

    Usage:
        model = LinearRegressionModel(l2=1e-4)
        model.fit(dataset.feature_matrix(split.training),
                  dataset.target_matrix(split.training))
        predictions = model.predict(features)  # shape (m, 1)
    """

    def __init__(self, l2: float = DEFAULT_L2):
        if l2 < 0:
            raise ValueError(f"l2 must be non-negative, got {l2}")
        self._l2 = l2
        self._estimator: Ridge | None = None
        self._training_mse: float | None = None
        self._fitted_on: tuple[np.ndarray, np.ndarray] | None = None

    @property
    def l2(self) -> float:
        return self._l2

    @property
    def is_fitted(self) -> bool:
        return self._estimator is not None

    @property
    def estimator(self) -> Ridge:
        """The fitted sklearn estimator."""
        return self._require_fitted()

    @property
    def coef(self) -> np.ndarray:
        """Weights of shape (d,)."""
        return np.asarray(self._require_fitted().coef_, dtype=np.float64)

    @property
    def intercept(self) -> float:
        return float(self._require_fitted().intercept_)

    @property
    def n_features(self) -> int:
        return int(self._require_fitted().n_features_in_)

    def fit(self, features: np.ndarray, targets: np.ndarray) -> None:
        """
        Fit weights and intercept.

        Args:
            features: (n, d) matrix
            targets: (n,) or (n, 1) targets

        Raises:
            ModelError: If there are no samples or shapes disagree
        """
        x = np.asarray(features, dtype=np.float64)
        y = np.asarray(targets, dtype=np.float64).reshape(-1)

        if x.ndim != 2:
            raise ModelInterfaceError(f"Expected 2D features, got shape {x.shape}")
        if len(x) == 0:
            raise ModelError("Cannot fit on zero samples")
        if len(x) != len(y):
            raise ModelError(
                f"Sample count mismatch: features={len(x)}, targets={len(y)}"
            )

        if self._is_fitted_on(x, y):
            logger.debug("Training data unchanged since last fit; keeping solution")
            return

        estimator = Ridge(alpha=self._l2, fit_intercept=True)
        estimator.fit(x, y)

        self._estimator = estimator
        self._fitted_on = (x.copy(), y.copy())
        self._training_mse = float(np.mean((estimator.predict(x) - y) ** 2))
        logger.debug(
            f"Fitted ridge regression on {len(x)} samples "
            f"(l2={self._l2}, training MSE={self._training_mse:.6f})"
        )

    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Predict targets.

        Returns:
            (m, 1) array of normalized predictions

        Raises:
            ModelNotFittedError: If fit() has not been called
            ModelInterfaceError: If the feature count doesn't match training
        """
        estimator = self._require_fitted()
        x = np.asarray(features, dtype=np.float64)
        if x.ndim == 1:
            x = x.reshape(1, -1)
        if x.ndim != 2 or x.shape[1] != estimator.n_features_in_:
            raise ModelInterfaceError(
                f"Expected features of shape (m, {estimator.n_features_in_}), "
                f"got {x.shape}"
            )
        return np.asarray(estimator.predict(x), dtype=np.float64).reshape(-1, 1)

    def score(self) -> float:
        """Training MSE of the last fit."""
        self._require_fitted()
        return self._training_mse

    def _is_fitted_on(self, x: np.ndarray, y: np.ndarray) -> bool:
        if self._fitted_on is None:
            return False
        last_x, last_y = self._fitted_on
        return np.array_equal(last_x, x) and np.array_equal(last_y, y)

    def _require_fitted(self) -> Ridge:
        if self._estimator is None:
            raise ModelNotFittedError("Model has not been fitted. Call fit() first.")
        return self._estimator

    def __repr__(self) -> str:
        state = "fitted" if self.is_fitted else "unfitted"
        return f"LinearRegressionModel(l2={self._l2}, {state})"
