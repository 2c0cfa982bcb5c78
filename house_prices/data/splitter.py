"""Reproducible train/test partitioning."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from .errors import SplitError
from .models import DatasetSplit

if TYPE_CHECKING:
    from .dataset import HousingDataset

logger = logging.getLogger(__name__)

DEFAULT_TRAIN_RATIO = 0.8
DEFAULT_SEED = 42

# default_rng needs a non-negative seed; int64 seeds are taken modulo 2**64
_SEED_MASK = 0xFFFF_FFFF_FFFF_FFFF


def shuffled_indices(n: int, seed: int) -> np.ndarray:
    """Deterministic permutation of range(n) keyed by seed."""
    return np.random.default_rng(seed & _SEED_MASK).permutation(n)


def split_dataset(
    dataset: HousingDataset,
    train_ratio: float = DEFAULT_TRAIN_RATIO,
    seed: int = DEFAULT_SEED,
) -> DatasetSplit:
    """
    Shuffle and partition a dataset into training and testing samples.

    The dataset itself is never reordered, so calling this twice with the
    same seed (e.g. once for training and once for evaluation) yields the
    same partition.

    Args:
        dataset: Loaded dataset
        train_ratio: Fraction of samples used for training, in (0, 1]
        seed: Shuffle seed

    Returns:
        DatasetSplit with floor(n * train_ratio) training samples

    Raises:
        SplitError: If train_ratio is outside (0, 1]
    """
    if not 0.0 < train_ratio <= 1.0:
        raise SplitError(f"train_ratio must be in (0, 1], got {train_ratio}")

    samples = dataset.samples
    n = len(samples)
    order = shuffled_indices(n, seed)
    training_size = math.floor(n * train_ratio)

    split = DatasetSplit(
        training=tuple(samples[i] for i in order[:training_size]),
        testing=tuple(samples[i] for i in order[training_size:]),
        seed=seed,
        train_ratio=train_ratio,
        indices=tuple(int(i) for i in order),
    )

    logger.info(
        f"Data split: {split.training_size} training samples, "
        f"{split.testing_size} testing samples (seed={seed})"
    )
    return split
