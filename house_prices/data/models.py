"""Data models for housing records and datasets."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from .normalizer import denormalize, denormalize_array, normalize, normalize_array

# Column order of the input CSV (the header row is skipped, not validated)
CSV_COLUMNS = (
    "price",
    "area",
    "bedrooms",
    "bathrooms",
    "stories",
    "mainroad",
    "guestroom",
    "basement",
    "hotwaterheating",
    "airconditioning",
    "parking",
    "prefarea",
    "furnishingstatus",
)

# Default feature order shared by training-time and inference-time encoding.
# The authoritative order is feature_order in mappings/feature_config.yaml.
FEATURE_NAMES = (
    "area",
    "bedrooms",
    "bathrooms",
    "stories",
    "mainroad",
    "guestroom",
    "basement",
    "hotwaterheating",
    "airconditioning",
    "parking",
    "prefarea",
    "furnishing_status",
)

PRICE_LABEL = "price"

# Columns of the correlation matrix: every feature, then the target
CORRELATION_LABELS = (*FEATURE_NAMES, PRICE_LABEL)

FURNISHING_STATUSES = ("furnished", "semi-furnished", "unfurnished")


@dataclass(frozen=True)
class HousingRecord:
    """
    One housing observation, immutable once parsed.

    Numeric fields are expected to be finite and non-negative; parsing
    enforces finiteness only.
    """

    price: float
    area: float
    bedrooms: int
    bathrooms: int
    stories: int
    mainroad: bool
    guestroom: bool
    basement: bool
    hotwaterheating: bool
    airconditioning: bool
    parking: int
    prefarea: bool
    furnishing_status: str

    def as_dict(self) -> dict[str, Any]:
        """Return fields as a plain dict (used by the feature encoder)."""
        return asdict(self)


@dataclass(frozen=True, eq=False)
class FeatureBounds:
    """
    Normalization bounds learned once from the full dataset.

    feature_min/feature_max have shape (d,). Columns with max == min are
    degenerate and normalize to 0.0.
    """

    feature_min: np.ndarray
    feature_max: np.ndarray
    price_min: float
    price_max: float

    def __post_init__(self) -> None:
        # Bounds are shared read-only across splits and inference
        self.feature_min.flags.writeable = False
        self.feature_max.flags.writeable = False

    @classmethod
    def empty(cls, dimension: int) -> FeatureBounds:
        """Zero bounds used for an empty dataset."""
        return cls(
            feature_min=np.zeros(dimension, dtype=np.float64),
            feature_max=np.zeros(dimension, dtype=np.float64),
            price_min=0.0,
            price_max=0.0,
        )

    @property
    def dimension(self) -> int:
        return len(self.feature_min)

    @property
    def degenerate_features(self) -> tuple[int, ...]:
        """Indices of zero-variance feature columns."""
        return tuple(int(i) for i in np.flatnonzero(self.feature_max == self.feature_min))

    @property
    def price_is_degenerate(self) -> bool:
        return self.price_max == self.price_min

    def normalize_features(self, raw: np.ndarray) -> np.ndarray:
        """Normalize a (d,) vector or (n, d) matrix of raw features."""
        return normalize_array(raw, self.feature_min, self.feature_max)

    def denormalize_features(self, normalized: np.ndarray) -> np.ndarray:
        return denormalize_array(normalized, self.feature_min, self.feature_max)

    def normalize_price(self, price: float) -> float:
        return normalize(price, self.price_min, self.price_max)

    def denormalize_price(self, normalized_price: float) -> float:
        return denormalize(normalized_price, self.price_min, self.price_max)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "feature_min": self.feature_min.tolist(),
            "feature_max": self.feature_max.tolist(),
            "price_min": self.price_min,
            "price_max": self.price_max,
            "degenerate_features": list(self.degenerate_features),
        }


@dataclass(frozen=True, eq=False)
class HousingSample:
    """A record paired with its normalized features (d,) and target (1,)."""

    record: HousingRecord
    raw_features: np.ndarray
    normalized_features: np.ndarray
    normalized_target: np.ndarray

    @property
    def price(self) -> float:
        return self.record.price


@dataclass(frozen=True)
class DatasetSplit:
    """
    Training/testing partition of a dataset.

    Both sequences reference the dataset's samples; neither is shared with
    the dataset itself.
    """

    training: tuple[HousingSample, ...]
    testing: tuple[HousingSample, ...]
    seed: int
    train_ratio: float
    indices: tuple[int, ...] = field(default=(), repr=False)

    @property
    def training_size(self) -> int:
        return len(self.training)

    @property
    def testing_size(self) -> int:
        return len(self.testing)

    def __len__(self) -> int:
        return self.training_size + self.testing_size

    def __repr__(self) -> str:
        return (
            f"DatasetSplit(training={self.training_size}, testing={self.testing_size}, "
            f"seed={self.seed}, train_ratio={self.train_ratio})"
        )
