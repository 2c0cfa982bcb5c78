"""Data models for dataset analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

STRONG_CORRELATION = 0.7
MODERATE_CORRELATION = 0.4


def correlation_strength(value: float) -> str:
    """Classify a correlation as "strong" (|r| > 0.7), "moderate" (|r| > 0.4) or "weak"."""
    magnitude = abs(value)
    if magnitude > STRONG_CORRELATION:
        return "strong"
    if magnitude > MODERATE_CORRELATION:
        return "moderate"
    return "weak"


@dataclass(frozen=True, eq=False)
class CorrelationMatrix:
    """
    Labelled symmetric Pearson correlation matrix.

    values has shape (len(labels), len(labels)); the last label is the
    target (price). Handed to presentation code as plain data.
    """

    labels: tuple[str, ...]
    values: np.ndarray
    n_samples: int

    def __post_init__(self) -> None:
        self.values.flags.writeable = False

    @property
    def size(self) -> int:
        return len(self.labels)

    def index_of(self, label: str) -> int:
        try:
            return self.labels.index(label)
        except ValueError as e:
            raise KeyError(f"Unknown label '{label}'. Labels: {list(self.labels)}") from e

    def get(self, a: str, b: str) -> float:
        """Correlation between two labelled columns."""
        return float(self.values[self.index_of(a), self.index_of(b)])

    def with_target(self, target: str | None = None) -> list[tuple[str, float]]:
        """
        Correlations of every other column with target, strongest first.

        Args:
            target: Column label. Defaults to the last label (price).
        """
        target = target if target is not None else self.labels[-1]
        column = self.index_of(target)
        pairs = [
            (label, float(self.values[i, column]))
            for i, label in enumerate(self.labels)
            if i != column
        ]
        return sorted(pairs, key=lambda p: abs(p[1]), reverse=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict {row_label: {col_label: value}}."""
        return {
            row: {
                col: round(float(self.values[i, j]), 6)
                for j, col in enumerate(self.labels)
            }
            for i, row in enumerate(self.labels)
        }
