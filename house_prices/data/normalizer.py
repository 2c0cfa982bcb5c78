"""
Min-max normalization helpers.

Stateless given the bounds. A degenerate column (hi == lo) normalizes to
0.0, so denormalize(normalize(x, lo, lo), lo, lo) == lo for any x.
"""

import numpy as np


def normalize(raw: float, lo: float, hi: float) -> float:
    """Scale raw into [0, 1] using observed bounds. Returns 0.0 when hi == lo."""
    if hi == lo:
        return 0.0
    return (raw - lo) / (hi - lo)


def denormalize(norm: float, lo: float, hi: float) -> float:
    """Inverse of normalize(). Lossy for degenerate bounds (always returns lo)."""
    return norm * (hi - lo) + lo


def normalize_array(
    values: np.ndarray, lo: np.ndarray | float, hi: np.ndarray | float
) -> np.ndarray:
    """
    Vectorized normalize() over the last axis.

    Args:
        values: Raw values, shape (d,) or (n, d)
        lo: Per-column minimum, scalar or shape (d,)
        hi: Per-column maximum, scalar or shape (d,)

    Returns:
        float64 array with the same shape as values
    """
    values = np.asarray(values, dtype=np.float64)
    lo = np.asarray(lo, dtype=np.float64)
    hi = np.asarray(hi, dtype=np.float64)

    span = hi - lo
    degenerate = span == 0
    scaled = (values - lo) / np.where(degenerate, 1.0, span)
    return np.where(degenerate, 0.0, scaled)


def denormalize_array(
    values: np.ndarray, lo: np.ndarray | float, hi: np.ndarray | float
) -> np.ndarray:
    """Vectorized denormalize() over the last axis."""
    values = np.asarray(values, dtype=np.float64)
    lo = np.asarray(lo, dtype=np.float64)
    hi = np.asarray(hi, dtype=np.float64)
    return values * (hi - lo) + lo
