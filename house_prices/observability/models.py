"""Data models for observability and WandB logging."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from house_prices.evaluation import EvaluationResult


@dataclass
class EvaluationLog:
    """
    Summary of one evaluation run, logged as WandB scalars.

    Per-sample predictions go to a separate table.
    """

    timestamp: datetime
    n_samples: int

    # Normalized-scale metrics
    mse: float | None = None
    rmse: float | None = None
    r2: float | None = None

    # Price-scale metrics
    mae: float | None = None
    mape: float | None = None
    windowed_mape: float | None = None

    undefined: list[str] = field(default_factory=list)

    @classmethod
    def from_result(cls, result: EvaluationResult, timestamp: datetime) -> EvaluationLog:
        metrics = result.metrics.to_dict()
        price_metrics = result.price_metrics.to_dict()
        return cls(
            timestamp=timestamp,
            n_samples=result.n_samples,
            mse=metrics["mse"],
            rmse=metrics["rmse"],
            r2=metrics["r2"],
            mae=price_metrics["mae"],
            mape=price_metrics["mape"],
            windowed_mape=price_metrics["windowed_mape"],
            undefined=sorted(result.metrics.undefined | result.price_metrics.undefined),
        )

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to dictionary for WandB scalar logging."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "eval/n_samples": self.n_samples,
            "eval/mse": self.mse,
            "eval/rmse": self.rmse,
            "eval/r2": self.r2,
            "eval/mae_price": self.mae,
            "eval/mape": self.mape,
            "eval/windowed_mape": self.windowed_mape,
            "eval/undefined_metrics": ",".join(self.undefined),
        }


@dataclass
class WandbConfig:
    """Configuration for WandB logging."""

    # Project settings
    project: str = "house-prices"
    entity: str | None = None  # WandB team/user, None = default

    # Authentication
    api_key: str | None = None  # WandB API key, or set WANDB_API_KEY env var

    # Run settings
    run_name: str | None = None  # Auto-generated if None
    tags: list[str] = field(default_factory=list)

    # Feature flags
    enabled: bool = False
    offline: bool = False  # Run in offline mode

    # What to log
    log_samples_table: bool = True  # Log sample predictions table
    log_correlation_table: bool = True  # Log correlation matrix table
