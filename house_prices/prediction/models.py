"""Data models for price prediction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PredictionOutcome:
    """
    Result of a prediction that must not raise (e.g. from an interactive form).

    Contains the price on success, or a readable error message.
    """

    success: bool
    price: float | None = None
    error_message: str | None = None
    factors: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "price": round(self.price, 2) if self.price is not None else None,
            "error_message": self.error_message,
            "factors": list(self.factors),
        }
