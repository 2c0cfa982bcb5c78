"""Housing dataset: parsed records plus normalization bounds learned at load time."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

import numpy as np

from .errors import DegenerateColumnWarning, EmptyDatasetError, LoadError, ParseError
from .feature_encoder import FeatureEncoder
from .models import PRICE_LABEL, FeatureBounds, HousingRecord, HousingSample
from .normalizer import normalize_array
from .record_parser import parse_fields, parse_line

logger = logging.getLogger(__name__)

Row = str | Sequence[str]


class HousingDataset:
    """
    Ordered collection of housing records with bounds computed once.

    Bounds (per-feature min/max and price min/max) are learned from the
    full collection, never from a split, so training, testing and
    inference all share the same scaling. The dataset is read-only after
    construction; mutating its arrays from a background trainer is not
    supported.

    Usage:
        dataset = HousingDataset.load_csv("data/Housing.csv")
        split = split_dataset(dataset, train_ratio=0.8, seed=42)
        features = dataset.feature_matrix(split.training)
    """

    def __init__(
        self,
        records: Sequence[HousingRecord],
        encoder: FeatureEncoder | None = None,
    ):
        """
        Build a dataset and eagerly normalize every record.

        Args:
            records: Parsed housing records (may be empty)
            encoder: Feature encoder. If None, uses the default feature config.
        """
        self._encoder = encoder or FeatureEncoder()
        self._records = tuple(records)

        raw = self._encoder.encode(self._records)
        prices = np.array([r.price for r in self._records], dtype=np.float64)
        raw.flags.writeable = False
        prices.flags.writeable = False
        self._raw = raw
        self._prices = prices

        self._bounds = self._compute_bounds(raw, prices)
        self._warn_degenerate()
        self._samples = self._build_samples()

    @classmethod
    def load(
        cls,
        rows: Iterable[Row],
        *,
        has_header: bool = True,
        allow_empty: bool = False,
        encoder: FeatureEncoder | None = None,
    ) -> HousingDataset:
        """
        Parse raw CSV rows into a dataset.

        Loading is all-or-nothing: the first malformed row aborts it.
        Fully blank lines are skipped.

        Args:
            rows: Raw lines (or pre-split field lists), header first
            has_header: Skip exactly one leading header row
            allow_empty: Return an empty dataset instead of raising
            encoder: Feature encoder. If None, uses the default feature config.

        Returns:
            Loaded HousingDataset

        Raises:
            LoadError: If a row fails to parse (the ParseError is the cause)
            EmptyDatasetError: If no data rows remain and allow_empty is False
        """
        records: list[HousingRecord] = []

        for line_number, row in enumerate(rows, start=1):
            if has_header and line_number == 1:
                continue
            if _is_blank(row):
                continue
            try:
                if isinstance(row, str):
                    records.append(parse_line(row, line_number))
                else:
                    records.append(parse_fields(row, line_number))
            except ParseError as e:
                raise LoadError(f"Failed to load dataset: {e}", line_number) from e

        if not records and not allow_empty:
            raise EmptyDatasetError("Dataset contains no data rows")

        dataset = cls(records, encoder=encoder)
        logger.info(f"Successfully loaded {len(dataset)} housing records")
        return dataset

    @classmethod
    def load_csv(
        cls,
        path: str | Path,
        *,
        allow_empty: bool = False,
        encoder: FeatureEncoder | None = None,
    ) -> HousingDataset:
        """
        Load a UTF-8 CSV file whose first line is a header.

        Raises:
            LoadError: If the file cannot be read or a row fails to parse
            EmptyDatasetError: If the file has no data rows
        """
        path = Path(path)
        try:
            # Rows end at line breaks only; other Unicode separators stay in fields
            with open(path, encoding="utf-8") as f:
                lines = [line.rstrip("\r\n") for line in f]
        except OSError as e:
            raise LoadError(f"Cannot read dataset file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise LoadError(f"Dataset file {path} is not valid UTF-8: {e}") from e

        logger.debug(f"Read {len(lines)} lines from {path}")
        return cls.load(lines, has_header=True, allow_empty=allow_empty, encoder=encoder)

    # --- Bounds and normalization ---

    def _compute_bounds(self, raw: np.ndarray, prices: np.ndarray) -> FeatureBounds:
        """Single pass over the full collection (min/max per column)."""
        if len(prices) == 0:
            return FeatureBounds.empty(self._encoder.get_feature_count())

        return FeatureBounds(
            feature_min=raw.min(axis=0),
            feature_max=raw.max(axis=0),
            price_min=float(prices.min()),
            price_max=float(prices.max()),
        )

    def _warn_degenerate(self) -> None:
        if not self._records:
            return

        names = self.feature_names
        for index in self._bounds.degenerate_features:
            warnings.warn(
                f"Feature '{names[index]}' is constant "
                f"({self._bounds.feature_min[index]}); it normalizes to 0.0",
                DegenerateColumnWarning,
                stacklevel=3,
            )
        if self._bounds.price_is_degenerate:
            warnings.warn(
                f"Column '{PRICE_LABEL}' is constant ({self._bounds.price_min}); "
                "targets normalize to 0.0",
                DegenerateColumnWarning,
                stacklevel=3,
            )

    def _build_samples(self) -> tuple[HousingSample, ...]:
        normalized = self._bounds.normalize_features(self._raw)
        targets = normalize_array(
            self._prices, self._bounds.price_min, self._bounds.price_max
        ).reshape(-1, 1)
        normalized.flags.writeable = False
        targets.flags.writeable = False

        samples = tuple(
            HousingSample(
                record=record,
                raw_features=self._raw[i],
                normalized_features=normalized[i],
                normalized_target=targets[i],
            )
            for i, record in enumerate(self._records)
        )
        logger.debug(f"Normalized {len(samples)} samples")
        return samples

    # --- Accessors ---

    @property
    def records(self) -> tuple[HousingRecord, ...]:
        return self._records

    @property
    def samples(self) -> tuple[HousingSample, ...]:
        return self._samples

    @property
    def bounds(self) -> FeatureBounds:
        return self._bounds

    @property
    def encoder(self) -> FeatureEncoder:
        return self._encoder

    @property
    def input_dimension(self) -> int:
        """Length of the feature vector, as configured by the encoder."""
        return self._bounds.dimension

    @property
    def feature_names(self) -> list[str]:
        return self._encoder.get_feature_names()

    @property
    def is_empty(self) -> bool:
        return not self._records

    def feature_matrix(self, samples: Sequence[HousingSample] | None = None) -> np.ndarray:
        """Stack normalized features to shape (n, d). Defaults to all samples."""
        if samples is None:
            samples = self._samples
        if not samples:
            return np.zeros((0, self.input_dimension), dtype=np.float64)
        return np.vstack([s.normalized_features for s in samples])

    def target_matrix(self, samples: Sequence[HousingSample] | None = None) -> np.ndarray:
        """Stack normalized targets to shape (n, 1). Defaults to all samples."""
        if samples is None:
            samples = self._samples
        if not samples:
            return np.zeros((0, 1), dtype=np.float64)
        return np.vstack([s.normalized_target for s in samples])

    def raw_feature_matrix(self) -> np.ndarray:
        """Raw (unnormalized) encoded features, shape (n, d), read-only."""
        return self._raw

    def prices(self) -> np.ndarray:
        """Raw prices, shape (n,), read-only."""
        return self._prices

    def denormalize_price(self, normalized_price: float) -> float:
        return self._bounds.denormalize_price(normalized_price)

    def mean_area(self) -> float:
        """Average living area, 0.0 for an empty dataset."""
        if not self._records:
            return 0.0
        return float(np.mean([r.area for r in self._records]))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HousingRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"HousingDataset({len(self)} records, {self.input_dimension} features)"


def _is_blank(row: Row) -> bool:
    if isinstance(row, str):
        return not row.strip()
    return all(not field.strip() for field in row)
